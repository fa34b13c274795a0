from __future__ import annotations

from datetime import datetime, timezone

from carkit.application.dto.auth import AuthTokensOutput, AuthUserOutput
from carkit.application.ports.token_port import TokenPort
from carkit.domain.entities.user import User


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def build_auth_user_output(user: User) -> AuthUserOutput:
    return AuthUserOutput(
        id=user.id,
        provider=user.provider,
        email=user.email,
        created_at=user.created_at,
    )


def issue_tokens(*, user: User, token_port: TokenPort) -> AuthTokensOutput:
    now = utcnow()
    access = token_port.issue(kind="access", user_id=user.id, now=now)
    refresh = token_port.issue(kind="refresh", user_id=user.id, now=now)
    return AuthTokensOutput(
        user=build_auth_user_output(user),
        access_token=access.token,
        refresh_token=refresh.token,
        access_expires_at=access.expires_at,
        refresh_expires_at=refresh.expires_at,
    )
