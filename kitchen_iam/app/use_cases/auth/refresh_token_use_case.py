"""
Refresh Token Use Case

Handles access token renewal with single-use refresh token rotation.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from kitchen_iam.api.utils.jwt import (
    issue_access_token,
    issue_refresh_token,
    new_token_id,
    verify_refresh_token,
)
from kitchen_iam.app.services.unit_of_work import UnitOfWork
from kitchen_iam.domain.base import utcnow
from kitchen_iam.domain.entities import AuditEvent, RotationOutcome
from kitchen_iam.libs.result import Error, Result, Return
from .dtos import RefreshTokenResponse
from .session_liveness import ensure_session_live

logger = logging.getLogger(__name__)


class RefreshTokenUseCase:
    """
    Use case for refreshing access tokens.

    Business Rules:
    - Refresh token must verify (signature, type, issuer, audience, expiry)
    - Session must exist and be live; expired sessions are deleted
    - The presented jti must equal the session's current one; the swap to a
      new jti is a single compare-and-swap
    - Presenting a stale jti is treated as theft: the session is deleted
    - A new access/refresh pair is issued on success
    - Store faults while checking or rotating the session fail closed
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, refresh_token: str) -> Result[RefreshTokenResponse]:
        """
        Execute refresh token use case.

        Args:
            refresh_token: The refresh token to verify and rotate

        Returns:
            Result with RefreshTokenResponse containing new tokens, or Error
        """
        claims = verify_refresh_token(refresh_token)
        if claims is None:
            return Return.err(Error("INVALID_TOKEN", "Invalid refresh token"))

        async with self.uow:
            now = utcnow()
            next_token_id = new_token_id()
            try:
                live = await ensure_session_live(self.uow, claims.session_id, now)
                if not live:
                    # Persist a lazy expiry delete, if one happened
                    await self.uow.commit()
                    return Return.err(Error("SESSION_EXPIRED", "Session has expired"))

                outcome = await self.uow.sessions.rotate_refresh_token_id(
                    claims.session_id, claims.token_id, next_token_id, now
                )
            except SQLAlchemyError as e:
                logger.error(f"Session store error while refreshing {claims.session_id}: {e}")
                return Return.err(Error("SESSION_EXPIRED", "Session has expired"))

            if outcome == RotationOutcome.not_found:
                return Return.err(Error("SESSION_NOT_FOUND", "Session not found"))

            if outcome == RotationOutcome.reuse_detected:
                logger.warning(
                    f"Refresh token reuse detected for session {claims.session_id} "
                    f"(user {claims.principal_id}); session invalidated"
                )
                audit = AuditEvent(
                    user_id=claims.principal_id,
                    action="refresh_token_reuse",
                    event_metadata={"session_id": str(claims.session_id)},
                )
                await self.uow.audit_events.create(audit)
                await self.uow.commit()
                return Return.err(
                    Error("REUSE_DETECTED", "Refresh token has already been used")
                )

            user = await self.uow.users.get_by_id(claims.principal_id)
            if user is None:
                await self.uow.sessions.delete(claims.session_id)
                await self.uow.commit()
                return Return.err(Error("INVALID_TOKEN", "Invalid refresh token"))

            audit = AuditEvent(
                user_id=user.id,
                action="token_refresh",
                event_metadata={"session_id": str(claims.session_id)},
            )
            await self.uow.audit_events.create(audit)

            await self.uow.commit()

            access_token = issue_access_token(user, claims.session_id)
            new_refresh_token, _ = issue_refresh_token(user.id, claims.session_id, next_token_id)

            return Return.ok(
                RefreshTokenResponse(
                    access_token=access_token,
                    refresh_token=new_refresh_token,
                    session_id=str(claims.session_id),
                )
            )
