from __future__ import annotations

import logging

from google.auth.transport import requests
from google.oauth2 import id_token

from carkit.application.ports.identity_provider_port import IdentityTokenVerifierPort
from carkit.domain.entities.user import ProviderIdentity
from carkit.domain.exceptions import IdentityTokenValidationError


logger = logging.getLogger(__name__)


class GoogleOidcClient(IdentityTokenVerifierPort):
    def __init__(self, *, client_id: str):
        self._client_id = client_id

    def verify_identity_token(self, *, identity_token: str) -> ProviderIdentity:
        try:
            payload = id_token_verify(token=identity_token, audience=self._client_id)
        except Exception as exc:  # google-auth raises ValueError and transport errors alike
            logger.info("google_oidc_client: verification_failed error=%s", type(exc).__name__)
            raise IdentityTokenValidationError("Invalid Google token.") from exc

        subject = payload.get("sub") if payload else None
        if not subject:
            raise IdentityTokenValidationError("Invalid Google token payload.")

        email = payload.get("email")
        return ProviderIdentity(
            subject=str(subject),
            email=str(email) if email else None,
        )


def id_token_verify(*, token: str, audience: str) -> dict:
    request = requests.Request()
    return id_token.verify_oauth2_token(token, request, audience)
