"""
Authenticate Request Use Case

Resolves an access token to a live principal for a single request.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from kitchen_iam.api.utils.jwt import verify_access_token
from kitchen_iam.app.services.unit_of_work import UnitOfWork
from kitchen_iam.domain.base import utcnow
from kitchen_iam.libs.result import Error, Result, Return
from .dtos import AuthenticatedPrincipal
from .session_liveness import ensure_session_live

logger = logging.getLogger(__name__)


class AuthenticateRequestUseCase:
    """
    Use case for validating an access token against its session.

    Business Rules:
    - Token must verify; its session must exist, be live and belong to the
      token subject
    - Session activity is touched on a best-effort basis
    - Store faults during the liveness check fail closed
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, access_token: str) -> Result[AuthenticatedPrincipal]:
        claims = verify_access_token(access_token)
        if claims is None:
            return Return.err(Error("INVALID_TOKEN", "Invalid access token"))

        async with self.uow:
            now = utcnow()
            try:
                live = await ensure_session_live(self.uow, claims.session_id, now)
                if not live:
                    await self.uow.commit()
                    return Return.err(Error("SESSION_EXPIRED", "Session has expired"))
                session = await self.uow.sessions.get_by_id(claims.session_id)
            except SQLAlchemyError as e:
                logger.error(f"Session store error while authenticating: {e}")
                return Return.err(Error("SESSION_EXPIRED", "Session has expired"))

            if session is None or session.user_id != claims.principal_id:
                return Return.err(Error("INVALID_TOKEN", "Invalid access token"))

            try:
                await self.uow.sessions.touch(claims.session_id, now)
                await self.uow.commit()
            except SQLAlchemyError as e:
                logger.warning(f"Failed to update activity for session {claims.session_id}: {e}")
                await self.uow.rollback()

            return Return.ok(
                AuthenticatedPrincipal(
                    id=claims.principal_id,
                    username=claims.username,
                    role=claims.role,
                    branch_id=claims.branch_id,
                    session_id=claims.session_id,
                )
            )
