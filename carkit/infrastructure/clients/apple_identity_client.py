from __future__ import annotations

import logging
import time
from threading import Lock
from typing import Callable

import httpx
import jwt

from carkit.application.ports.identity_provider_port import IdentityTokenVerifierPort
from carkit.domain.entities.user import ProviderIdentity
from carkit.domain.exceptions import IdentityTokenValidationError


logger = logging.getLogger(__name__)


APPLE_ISSUER = "https://appleid.apple.com"
REQUIRED_CLAIMS = ["exp", "iat", "sub"]


class AppleIdentityClient(IdentityTokenVerifierPort):
    """Verifies Sign in with Apple identity tokens against Apple's published key set.

    Public keys are cached per ``kid`` for the life of the client. An unknown
    ``kid`` triggers a refetch, which is how Apple key rotation is picked up.
    Refetches are spaced at least ``min_refetch_seconds`` apart; inside that
    window an unknown ``kid`` is rejected without contacting Apple.
    Audience and issuer are only checked when ``client_id`` is configured.
    """

    def __init__(
        self,
        *,
        keys_url: str,
        client_id: str = "",
        http_client: httpx.Client | None = None,
        min_refetch_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._keys_url = keys_url
        self._client_id = client_id
        self._http_client = http_client
        self._lock = Lock()
        self._keys: dict[str, jwt.PyJWK] = {}
        self._min_refetch_seconds = min_refetch_seconds
        self._clock = clock
        self._last_fetch_at: float | None = None

    def verify_identity_token(self, *, identity_token: str) -> ProviderIdentity:
        try:
            header = jwt.get_unverified_header(identity_token)
        except jwt.PyJWTError as exc:
            raise IdentityTokenValidationError("Invalid Apple token.") from exc

        kid = header.get("kid")
        if not kid:
            raise IdentityTokenValidationError("Invalid Apple token.")

        signing_key = self._get_signing_key(kid)

        decode_kwargs: dict = {"algorithms": ["RS256"], "options": {"require": REQUIRED_CLAIMS}}
        if self._client_id:
            decode_kwargs["audience"] = self._client_id
            decode_kwargs["issuer"] = APPLE_ISSUER
        else:
            decode_kwargs["options"]["verify_aud"] = False

        try:
            payload = jwt.decode(identity_token, signing_key.key, **decode_kwargs)
        except jwt.PyJWTError as exc:
            logger.info("apple_identity_client: verification_failed kid=%s error=%s", kid, type(exc).__name__)
            raise IdentityTokenValidationError("Invalid Apple token signature.") from exc

        subject = payload.get("sub")
        if not subject:
            raise IdentityTokenValidationError("Invalid Apple token payload.")

        email = payload.get("email")
        return ProviderIdentity(
            subject=str(subject),
            email=str(email) if email else None,
        )

    def _get_signing_key(self, kid: str) -> jwt.PyJWK:
        with self._lock:
            cached = self._keys.get(kid)
            if cached is not None:
                return cached
            now = self._clock()
            if self._last_fetch_at is not None and now - self._last_fetch_at < self._min_refetch_seconds:
                logger.info("apple_identity_client: refetch_throttled kid=%s", kid)
                raise IdentityTokenValidationError("Apple signing key not found.")
            self._last_fetch_at = now

        fetched = self._fetch_keys()
        with self._lock:
            self._keys.update(fetched)

        signing_key = fetched.get(kid)
        if signing_key is None:
            logger.info("apple_identity_client: unknown_kid kid=%s known=%s", kid, len(fetched))
            raise IdentityTokenValidationError("Apple signing key not found.")
        return signing_key

    def _fetch_keys(self) -> dict[str, jwt.PyJWK]:
        try:
            if self._http_client is not None:
                response = self._http_client.get(self._keys_url)
            else:
                response = httpx.get(self._keys_url)
            response.raise_for_status()
            jwk_set = jwt.PyJWKSet.from_dict(response.json())
        except (httpx.HTTPError, ValueError, jwt.PyJWTError) as exc:
            logger.warning(
                "apple_identity_client: keys_fetch_failed url=%s error=%s",
                self._keys_url,
                type(exc).__name__,
            )
            raise IdentityTokenValidationError("Unable to fetch Apple signing keys.") from exc

        keys = {key.key_id: key for key in jwk_set.keys if key.key_id}
        logger.info("apple_identity_client: fetched_keys count=%s", len(keys))
        return keys
