"""
Role/Scope Permission Table

Static mapping from role to the permissions it grants, plus the evaluator
that matches a request against it. Pure functions, no I/O.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Protocol, Tuple
from uuid import UUID

from kitchen_iam.domain.entities.enums import Action, Resource, Role, Scope


@dataclass(frozen=True)
class Permission:
    resource: Resource
    action: Action
    scope: Scope


@dataclass(frozen=True)
class ResourceData:
    """Ownership attributes of the resource being acted on"""

    owner_id: Optional[UUID] = None
    branch_id: Optional[str] = None


class PrincipalLike(Protocol):
    id: UUID
    role: Role
    branch_id: Optional[str]


ROLE_PERMISSIONS: Dict[Role, Tuple[Permission, ...]] = {
    Role.SUPER_ADMIN: (
        Permission(Resource.waste_logs, Action.admin, Scope.global_),
        Permission(Resource.inventory, Action.admin, Scope.global_),
        Permission(Resource.branches, Action.admin, Scope.global_),
        Permission(Resource.users, Action.admin, Scope.global_),
        Permission(Resource.reviews, Action.admin, Scope.global_),
        Permission(Resource.analytics, Action.read, Scope.global_),
        Permission(Resource.exports, Action.export, Scope.global_),
    ),
    Role.BRANCH_ADMIN: (
        Permission(Resource.waste_logs, Action.create, Scope.branch),
        Permission(Resource.waste_logs, Action.read, Scope.branch),
        Permission(Resource.waste_logs, Action.update, Scope.branch),
        Permission(Resource.waste_logs, Action.delete, Scope.branch),
        Permission(Resource.inventory, Action.create, Scope.branch),
        Permission(Resource.inventory, Action.read, Scope.branch),
        Permission(Resource.inventory, Action.update, Scope.branch),
        Permission(Resource.inventory, Action.delete, Scope.branch),
        Permission(Resource.analytics, Action.read, Scope.branch),
        Permission(Resource.exports, Action.export, Scope.branch),
        Permission(Resource.branches, Action.read, Scope.own),
    ),
}


def _matches_scope(
    scope: Scope, principal: PrincipalLike, resource_data: Optional[ResourceData]
) -> bool:
    if scope == Scope.global_:
        return True

    target_owner = resource_data.owner_id if resource_data else None
    target_branch = resource_data.branch_id if resource_data else None

    if scope == Scope.branch:
        if not principal.branch_id:
            return False
        return target_branch is None or target_branch == principal.branch_id

    if scope == Scope.own:
        if target_owner is not None:
            return target_owner == principal.id
        if target_branch is not None:
            return target_branch == principal.branch_id
        return True

    return False


def authorize(
    principal: PrincipalLike,
    resource: Resource,
    action: Action,
    resource_data: Optional[ResourceData] = None,
) -> bool:
    """
    Decide whether the principal may perform action on resource.

    A rule matches when its resource equals the requested one, its action is
    the requested action or admin, and its scope matches resource_data.
    """
    try:
        role = Role(principal.role)
    except ValueError:
        return False

    for permission in ROLE_PERMISSIONS.get(role, ()):
        if permission.resource != resource:
            continue
        if permission.action != action and permission.action != Action.admin:
            continue
        if _matches_scope(permission.scope, principal, resource_data):
            return True
    return False
