"""
Login Use Case

Handles credential verification, brute-force lockout and session creation.
"""

import logging
from datetime import timedelta

from kitchen_iam.api.utils.jwt import issue_access_token, issue_refresh_token, new_token_id
from kitchen_iam.app.services.credentials import verify_dummy_password, verify_password
from kitchen_iam.app.services.unit_of_work import UnitOfWork
from kitchen_iam.config import ApplicationConfig
from kitchen_iam.domain.base import utcnow
from kitchen_iam.domain.entities import AuditEvent, LoginAttempt, LoginFailureReason, Session
from kitchen_iam.libs.result import Error, Result, Return
from .dtos import LoginResponse, UserSummary

logger = logging.getLogger(__name__)


class LoginUseCase:
    """
    Use case for user login and token issuance.

    Business Rules:
    - Locked out after LOCKOUT_THRESHOLD failures by username OR client
      address inside LOCKOUT_WINDOW_SECONDS; the check runs before any
      bcrypt work
    - Unknown usernames still burn one bcrypt verification
    - Every failure is recorded with its reason
    - Success clears prior failures, creates a session bound to the first
      refresh token id and returns an access/refresh pair
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, username: str, password: str, client_address: str) -> Result[LoginResponse]:
        """
        Execute login use case.

        Args:
            username: Login name
            password: Plain text password
            client_address: Resolved client address used for lockout

        Returns:
            Result with LoginResponse containing tokens and user summary, or Error
        """
        async with self.uow:
            now = utcnow()
            since = now - timedelta(seconds=ApplicationConfig.LOCKOUT_WINDOW_SECONDS)

            failures = await self.uow.login_attempts.count_recent_failures(
                username, client_address, since
            )
            if failures >= ApplicationConfig.LOCKOUT_THRESHOLD:
                logger.warning(
                    f"Login locked out for username={username} address={client_address} "
                    f"({failures} recent failures)"
                )
                return Return.err(
                    Error("ACCOUNT_LOCKED", "Too many failed attempts, try again later")
                )

            user = await self.uow.users.get_by_username(username)

            if user is None:
                verify_dummy_password(password)
                await self._record_failure(username, client_address, LoginFailureReason.user_not_found)
                return Return.err(
                    Error("INVALID_CREDENTIALS", "Invalid username or password")
                )

            if not verify_password(password, user.password_hash):
                await self._record_failure(username, client_address, LoginFailureReason.invalid_password)
                return Return.err(
                    Error("INVALID_CREDENTIALS", "Invalid username or password")
                )

            await self.uow.login_attempts.clear_failures(username, client_address)
            await self.uow.login_attempts.record(
                LoginAttempt(username=username, client_address=client_address, success=True)
            )

            # Session row and its first refresh token id are written together
            token_id = new_token_id()
            session = Session(
                user_id=user.id,
                current_refresh_token_id=token_id,
                created_at=now,
                last_activity_at=now,
                expires_at=now + timedelta(seconds=ApplicationConfig.SESSION_TTL_SECONDS),
            )
            await self.uow.sessions.create(session)

            audit = AuditEvent(
                user_id=user.id,
                action="login",
                event_metadata={
                    "username": username,
                    "client_address": client_address,
                    "session_id": str(session.id),
                },
            )
            await self.uow.audit_events.create(audit)

            await self.uow.commit()

            access_token = issue_access_token(user, session.id)
            refresh_token, _ = issue_refresh_token(user.id, session.id, token_id)

            logger.info(f"User {user.id} logged in, session {session.id}")

            return Return.ok(
                LoginResponse(
                    access_token=access_token,
                    refresh_token=refresh_token,
                    session_id=str(session.id),
                    user=UserSummary.from_user(user),
                )
            )

    async def _record_failure(
        self, username: str, client_address: str, reason: LoginFailureReason
    ) -> None:
        await self.uow.login_attempts.record(
            LoginAttempt(
                username=username,
                client_address=client_address,
                success=False,
                failure_reason=reason.value,
            )
        )
        await self.uow.commit()
        logger.info(f"Failed login for username={username} address={client_address}: {reason.value}")
