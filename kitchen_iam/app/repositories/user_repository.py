from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from kitchen_iam.domain.entities import User


class IUserRepository(ABC):
    """User repository interface - application layer"""

    @abstractmethod
    async def get_by_username(self, username: str) -> Optional[User]:
        """Get user by username"""
        pass

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """Create a new user. Raises InvalidBranchBinding on role/branch mismatch."""
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        """Update existing user. Raises InvalidBranchBinding on role/branch mismatch."""
        pass
