from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt

from carkit.application.dto.auth import IssuedToken, TokenClaims, TokenKind
from carkit.application.ports.token_port import TokenPort
from carkit.domain.exceptions import InvalidCredentialError


TOKEN_KINDS: tuple[TokenKind, ...] = ("access", "refresh")


class JwtTokenService(TokenPort):
    """HS256 session tokens; access and refresh are signed with distinct secrets.

    There is no revocation list: a leaked token stays valid until ``exp``.
    """

    def __init__(
        self,
        *,
        access_secret: str,
        refresh_secret: str,
        access_ttl_minutes: int = 60,
        refresh_ttl_days: int = 7,
    ):
        if not access_secret or not refresh_secret:
            raise ValueError("Both access and refresh secrets are required.")
        if access_secret == refresh_secret:
            raise ValueError("Access and refresh secrets must differ.")
        self._secrets: dict[str, str] = {"access": access_secret, "refresh": refresh_secret}
        self._ttls: dict[str, timedelta] = {
            "access": timedelta(minutes=access_ttl_minutes),
            "refresh": timedelta(days=refresh_ttl_days),
        }

    def issue(self, *, kind: TokenKind, user_id: str, now: datetime | None = None) -> IssuedToken:
        if kind not in TOKEN_KINDS:
            raise ValueError(f"Unknown token kind: {kind}.")
        issued_at = now or utcnow()
        exp = issued_at + self._ttls[kind]
        payload = {
            "sub": user_id,
            "type": kind,
            "iat": int(issued_at.timestamp()),
            "exp": int(exp.timestamp()),
        }
        token = jwt.encode(payload, self._secrets[kind], algorithm="HS256")
        return IssuedToken(token=token, expires_at=exp)

    def verify(self, *, token: str, expected_kind: TokenKind) -> TokenClaims:
        if expected_kind not in TOKEN_KINDS:
            raise InvalidCredentialError("Invalid token type.")
        try:
            payload = jwt.decode(
                token,
                self._secrets[expected_kind],
                algorithms=["HS256"],
                options={"require": ["exp", "sub"]},
            )
        except jwt.PyJWTError as exc:
            raise InvalidCredentialError(f"Invalid {expected_kind} token.") from exc

        if payload.get("type") != expected_kind:
            raise InvalidCredentialError("Invalid token type.")

        user_id = payload.get("sub")
        if not user_id or not isinstance(user_id, str):
            raise InvalidCredentialError("Invalid token subject.")

        return TokenClaims(user_id=user_id, kind=expected_kind)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
