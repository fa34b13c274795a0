from __future__ import annotations

from datetime import datetime
from typing import Protocol

from carkit.domain.entities.user import AuthProvider, User


class UserDirectoryPort(Protocol):
    def find_active_by_id(self, *, user_id: str) -> User | None:
        ...

    def find_by_provider_identity(self, *, provider: AuthProvider, provider_user_id: str) -> User | None:
        ...

    def create_from_provider_identity(
        self,
        *,
        user_id: str,
        provider: AuthProvider,
        provider_user_id: str,
        email: str | None,
        created_at: datetime,
    ) -> User:
        """Raises ``UserAlreadyExistsError`` when an active user holds the identity."""
        ...

    def soft_delete(self, *, user_id: str, deleted_at: datetime) -> None:
        """Raises ``UserNotFoundError`` when no active user has ``user_id``."""
        ...
