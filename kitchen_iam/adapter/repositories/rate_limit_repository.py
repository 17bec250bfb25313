from datetime import datetime
from typing import Tuple
from uuid import uuid4

from sqlalchemy import delete
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from kitchen_iam.app.repositories.rate_limit_repository import IRateLimitRepository
from kitchen_iam.domain.entities import RateLimitCounter

_UPSERT_DIALECTS = {
    "sqlite": sqlite_insert,
    "postgresql": postgresql_insert,
}


class RateLimitRepository(IRateLimitRepository):
    """RateLimitCounter repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _insert(self):
        dialect = self.session.get_bind().dialect.name
        try:
            return _UPSERT_DIALECTS[dialect]
        except KeyError:
            raise NotImplementedError(f"No rate limit upsert for dialect {dialect!r}")

    async def increment(
        self,
        identity: str,
        endpoint_class: str,
        window_start: datetime,
        expires_at: datetime,
        limit: int,
        now: datetime,
    ) -> Tuple[bool, int]:
        """
        Count one request with a single conditional upsert.

        The DO UPDATE branch only fires while request_count < limit, so a
        full window returns no row and the stored count is left untouched.
        """
        insert = self._insert()
        stmt = (
            insert(RateLimitCounter)
            .values(
                id=uuid4(),
                identity=identity,
                endpoint_class=endpoint_class,
                window_start=window_start,
                request_count=1,
                expires_at=expires_at,
                created_at=now,
                updated_at=now,
            )
            .on_conflict_do_update(
                index_elements=["identity", "endpoint_class", "window_start"],
                set_={
                    "request_count": RateLimitCounter.request_count + 1,
                    "updated_at": now,
                },
                where=RateLimitCounter.request_count < limit,
            )
            .returning(RateLimitCounter.request_count)
        )
        result = await self.session.execute(stmt)
        count = result.scalar_one_or_none()
        if count is not None:
            return True, count

        stored = await self.session.exec(
            select(RateLimitCounter.request_count).where(
                RateLimitCounter.identity == identity,
                RateLimitCounter.endpoint_class == endpoint_class,
                RateLimitCounter.window_start == window_start,
            )
        )
        return False, stored.one_or_none() or limit

    async def delete_expired(self, now: datetime) -> int:
        """Delete counters whose window has ended"""
        stmt = (
            delete(RateLimitCounter)
            .where(RateLimitCounter.expires_at < now)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def reset(self, identity: str, endpoint_class: str) -> int:
        """Drop every window for identity/endpoint_class"""
        stmt = (
            delete(RateLimitCounter)
            .where(
                RateLimitCounter.identity == identity,
                RateLimitCounter.endpoint_class == endpoint_class,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount
