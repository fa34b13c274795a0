from __future__ import annotations

from datetime import datetime
from typing import Protocol

from carkit.application.dto.auth import IssuedToken, TokenClaims, TokenKind


class TokenPort(Protocol):
    def issue(self, *, kind: TokenKind, user_id: str, now: datetime | None = None) -> IssuedToken:
        ...

    def verify(self, *, token: str, expected_kind: TokenKind) -> TokenClaims:
        ...
