from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal

from carkit.domain.entities.user import User


TokenKind = Literal["access", "refresh"]


@dataclass(frozen=True)
class IssuedToken:
    token: str
    expires_at: datetime


@dataclass(frozen=True)
class TokenClaims:
    user_id: str
    kind: TokenKind


@dataclass(frozen=True)
class AuthenticateInput:
    provider: str
    identity_token: str


@dataclass(frozen=True)
class RefreshSessionInput:
    refresh_token: str


@dataclass(frozen=True)
class AuthUserOutput:
    id: str
    provider: str
    email: str | None
    created_at: datetime


@dataclass(frozen=True)
class AuthTokensOutput:
    user: AuthUserOutput
    access_token: str
    refresh_token: str
    access_expires_at: datetime
    refresh_expires_at: datetime


@dataclass(frozen=True)
class RequestContext:
    user_id: str
    user: User
