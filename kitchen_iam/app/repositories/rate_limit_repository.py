from abc import ABC, abstractmethod
from datetime import datetime
from typing import Tuple


class IRateLimitRepository(ABC):
    """RateLimitCounter repository interface - application layer"""

    @abstractmethod
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
        Atomically count one request in the window.

        The counter is only incremented while it is below limit.

        Returns:
            (allowed, request_count after the call)
        """
        pass

    @abstractmethod
    async def delete_expired(self, now: datetime) -> int:
        """Delete counters with expires_at < now. Returns count."""
        pass

    @abstractmethod
    async def reset(self, identity: str, endpoint_class: str) -> int:
        """Delete every counter for identity/endpoint_class. Returns count."""
        pass
