from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal


AuthProvider = Literal["apple", "google"]


@dataclass(frozen=True)
class User:
    id: str
    provider: AuthProvider
    provider_user_id: str
    email: str | None
    is_deleted: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class ProviderIdentity:
    subject: str
    email: str | None
