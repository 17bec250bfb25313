"""
Permission checks for routes.
"""

import logging
from typing import Optional

from fastapi import Depends

from kitchen_iam.api.error import forbidden
from kitchen_iam.app.use_cases.auth import AuthenticatedPrincipal
from kitchen_iam.depends import get_current_principal
from kitchen_iam.domain.entities import Action, Resource
from kitchen_iam.domain.permissions import PrincipalLike, ResourceData, authorize

logger = logging.getLogger(__name__)


def ensure_authorized(
    principal: PrincipalLike,
    resource: Resource,
    action: Action,
    resource_data: Optional[ResourceData] = None,
) -> None:
    """
    Raises:
        ClientError: fixed 403 FORBIDDEN when the principal lacks the permission
    """
    if not authorize(principal, resource, action, resource_data):
        logger.warning(
            f"Permission denied: user {principal.id} ({principal.role}) "
            f"{action.value} on {resource.value}"
        )
        raise forbidden()


def require_permission(resource: Resource, action: Action):
    """Dependency factory for routes that carry no resource data"""

    async def dependency(
        principal: AuthenticatedPrincipal = Depends(get_current_principal),
    ) -> AuthenticatedPrincipal:
        ensure_authorized(principal, resource, action)
        return principal

    return dependency
