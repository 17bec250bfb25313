"""
Logout Use Case

Invalidates the caller's session.
"""

import logging
from uuid import UUID

from kitchen_iam.app.services.unit_of_work import UnitOfWork
from kitchen_iam.domain.entities import AuditEvent
from kitchen_iam.libs.result import Result, Return
from .dtos import LogoutResponse

logger = logging.getLogger(__name__)


class LogoutUseCase:
    """
    Use case for logging out.

    Business Rules:
    - Deletes the session row; outstanding refresh tokens for it stop working
    - Access tokens stay valid until expiry but fail the liveness check
    - Logging out an already-gone session is not an error
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, session_id: UUID, user_id: UUID) -> Result[LogoutResponse]:
        async with self.uow:
            deleted = await self.uow.sessions.delete(session_id)

            audit = AuditEvent(
                user_id=user_id,
                action="logout",
                event_metadata={"session_id": str(session_id)},
            )
            await self.uow.audit_events.create(audit)

            await self.uow.commit()

            logger.info(f"User {user_id} logged out of session {session_id}")
            return Return.ok(LogoutResponse(session_id=str(session_id), invalidated=deleted))
