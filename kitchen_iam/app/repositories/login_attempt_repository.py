from abc import ABC, abstractmethod
from datetime import datetime

from kitchen_iam.domain.entities import LoginAttempt


class ILoginAttemptRepository(ABC):
    """LoginAttempt repository interface - application layer"""

    @abstractmethod
    async def count_recent_failures(
        self, username: str, client_address: str, since: datetime
    ) -> int:
        """Count failed attempts for the username OR the client address since a moment"""
        pass

    @abstractmethod
    async def record(self, attempt: LoginAttempt) -> LoginAttempt:
        """Append an attempt"""
        pass

    @abstractmethod
    async def clear_failures(self, username: str, client_address: str) -> int:
        """Delete failed attempts for the username OR the client address. Returns count."""
        pass

    @abstractmethod
    async def delete_older_than(self, cutoff: datetime) -> int:
        """Purge attempts created before cutoff. Returns count."""
        pass
