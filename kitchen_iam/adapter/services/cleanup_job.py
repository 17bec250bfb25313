"""
Background loop running the maintenance sweep on a fixed interval.
"""

import asyncio
import logging
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel.ext.asyncio.session import AsyncSession

from kitchen_iam.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from kitchen_iam.app.use_cases.maintenance import CleanupUseCase

logger = logging.getLogger(__name__)


async def run_cleanup_once(session_factory: Callable[[], AsyncSession]):
    async with session_factory() as session:
        result = await CleanupUseCase(SqlAlchemyUnitOfWork(session)).execute()
        return result.value


async def run_cleanup_loop(session_factory: Callable[[], AsyncSession], interval_seconds: int) -> None:
    """Sweep immediately, then every interval_seconds until cancelled"""
    logger.info(f"Cleanup job started, interval {interval_seconds}s")
    while True:
        try:
            await run_cleanup_once(session_factory)
        except SQLAlchemyError as e:
            logger.error(f"Cleanup sweep failed: {e}")
        await asyncio.sleep(interval_seconds)
