"""
Check Rate Limit Use Case

Fixed-window request counting shared across service instances.
"""

import asyncio
import logging
from datetime import datetime
from typing import Callable, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError

from kitchen_iam.app.services.unit_of_work import UnitOfWork
from kitchen_iam.domain.base import from_epoch_seconds, to_epoch_seconds, utcnow
from kitchen_iam.libs.result import Result, Return
from .dtos import RateLimitConfig, RateLimitDecision

logger = logging.getLogger(__name__)

# Faults that let the request through instead of failing it
STORE_ERRORS = (SQLAlchemyError, NotImplementedError)


class CheckRateLimitUseCase:
    """
    Use case for counting a request against its window.

    Business Rules:
    - window_start = floor(epoch(now) / window) * window
    - Expired counters are removed in the same transaction
    - The increment is a single conditional upsert that never exceeds the limit
    - Store failures fail open: the request is allowed and the fault logged

    Each count runs on a UnitOfWork of its own, created from uow_factory and
    closed by the count itself, so a cancelled request cannot close the
    session underneath it.
    """

    def __init__(self, uow_factory: Callable[[], UnitOfWork]):
        self.uow_factory = uow_factory

    async def execute(
        self, identity: str, config: RateLimitConfig, now: Optional[datetime] = None
    ) -> Result[RateLimitDecision]:
        now = now or utcnow()
        start_epoch = (to_epoch_seconds(now) // config.window_seconds) * config.window_seconds
        window_start = from_epoch_seconds(start_epoch)
        reset_time = from_epoch_seconds(start_epoch + config.window_seconds)

        count_task = asyncio.ensure_future(
            self._count(identity, config, window_start, reset_time, now)
        )
        count_task.add_done_callback(
            lambda task: _log_store_error(task, identity, config.endpoint_class)
        )

        try:
            # A cancelled request must still record its hit
            allowed, count = await asyncio.shield(count_task)
        except STORE_ERRORS:
            return Return.ok(
                RateLimitDecision(
                    allowed=True,
                    limit=config.requests,
                    remaining=max(0, config.requests - 1),
                    reset_time=reset_time,
                    total_requests=1,
                    window_start=window_start,
                )
            )

        if not allowed:
            logger.warning(
                f"Rate limit exceeded: {identity} on {config.endpoint_class} "
                f"({count}/{config.requests}, resets {reset_time.isoformat()})"
            )

        return Return.ok(
            RateLimitDecision(
                allowed=allowed,
                limit=config.requests,
                remaining=max(0, config.requests - count),
                reset_time=reset_time,
                total_requests=count,
                window_start=window_start,
            )
        )

    async def _count(
        self,
        identity: str,
        config: RateLimitConfig,
        window_start: datetime,
        expires_at: datetime,
        now: datetime,
    ) -> Tuple[bool, int]:
        uow = self.uow_factory()
        try:
            async with uow:
                await uow.rate_limits.delete_expired(now)
                allowed, count = await uow.rate_limits.increment(
                    identity,
                    config.endpoint_class,
                    window_start,
                    expires_at,
                    config.requests,
                    now,
                )
                await uow.commit()
                return allowed, count
        finally:
            await uow.close()

    async def reset(self, identity: str, endpoint_class: str) -> int:
        """Forget every window for identity on endpoint_class"""
        uow = self.uow_factory()
        try:
            async with uow:
                count = await uow.rate_limits.reset(identity, endpoint_class)
                await uow.commit()
                return count
        finally:
            await uow.close()


def _log_store_error(task: asyncio.Future, identity: str, endpoint_class: str) -> None:
    # Runs whether or not the request is still waiting for the count
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.error(f"Rate limit store error for {identity} on {endpoint_class}: {error}")
