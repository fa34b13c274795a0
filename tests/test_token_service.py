from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from carkit.domain.exceptions import InvalidCredentialError
from carkit.infrastructure.security.token_service import JwtTokenService

from tests.fakes import ACCESS_SECRET, REFRESH_SECRET, make_token_service


def test_access_token_round_trip():
    service = make_token_service()

    issued = service.issue(kind="access", user_id="user-1")
    claims = service.verify(token=issued.token, expected_kind="access")

    assert claims.user_id == "user-1"
    assert claims.kind == "access"


def test_expiry_follows_configured_ttls():
    service = make_token_service(access_ttl_minutes=15, refresh_ttl_days=3)
    now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    access = service.issue(kind="access", user_id="user-1", now=now)
    refresh = service.issue(kind="refresh", user_id="user-1", now=now)

    assert access.expires_at == now + timedelta(minutes=15)
    assert refresh.expires_at == now + timedelta(days=3)


@pytest.mark.parametrize(("issued_kind", "expected_kind"), [("access", "refresh"), ("refresh", "access")])
def test_token_of_other_kind_is_rejected(issued_kind, expected_kind):
    service = make_token_service()
    issued = service.issue(kind=issued_kind, user_id="user-1")

    with pytest.raises(InvalidCredentialError):
        service.verify(token=issued.token, expected_kind=expected_kind)


def test_expired_token_is_rejected():
    service = make_token_service(access_ttl_minutes=60)
    issued = service.issue(
        kind="access",
        user_id="user-1",
        now=datetime.now(timezone.utc) - timedelta(hours=2),
    )

    with pytest.raises(InvalidCredentialError):
        service.verify(token=issued.token, expected_kind="access")


def test_tampered_token_is_rejected():
    service = make_token_service()
    issued = service.issue(kind="access", user_id="user-1")
    header, payload, signature = issued.token.split(".")
    tampered = ".".join([header, payload, signature[:-2] + ("AA" if signature[-2:] != "AA" else "BB")])

    with pytest.raises(InvalidCredentialError):
        service.verify(token=tampered, expected_kind="access")


def test_token_signed_with_refresh_secret_but_typed_access_is_rejected():
    service = make_token_service()
    forged = jwt.encode(
        {
            "sub": "user-1",
            "type": "access",
            "exp": int((datetime.now(timezone.utc) + timedelta(minutes=5)).timestamp()),
        },
        REFRESH_SECRET,
        algorithm="HS256",
    )

    with pytest.raises(InvalidCredentialError):
        service.verify(token=forged, expected_kind="access")


def test_token_without_subject_is_rejected():
    service = make_token_service()
    token = jwt.encode(
        {
            "type": "access",
            "exp": int((datetime.now(timezone.utc) + timedelta(minutes=5)).timestamp()),
        },
        ACCESS_SECRET,
        algorithm="HS256",
    )

    with pytest.raises(InvalidCredentialError):
        service.verify(token=token, expected_kind="access")


def test_garbage_token_is_rejected():
    service = make_token_service()

    with pytest.raises(InvalidCredentialError):
        service.verify(token="not-a-jwt", expected_kind="refresh")


def test_secrets_must_be_distinct():
    with pytest.raises(ValueError):
        JwtTokenService(access_secret="same-secret", refresh_secret="same-secret")
