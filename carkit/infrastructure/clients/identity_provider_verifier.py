from __future__ import annotations

from typing import Mapping

from carkit.application.ports.identity_provider_port import IdentityProviderPort, IdentityTokenVerifierPort
from carkit.domain.entities.user import ProviderIdentity
from carkit.domain.exceptions import IdentityTokenValidationError


class IdentityProviderVerifier(IdentityProviderPort):
    def __init__(self, *, verifiers: Mapping[str, IdentityTokenVerifierPort]):
        self._verifiers = dict(verifiers)

    def verify_provider_token(self, *, provider: str, identity_token: str) -> ProviderIdentity:
        verifier = self._verifiers.get(provider)
        if verifier is None:
            raise IdentityTokenValidationError(f"Unsupported identity provider: {provider}.")
        if not identity_token or not identity_token.strip():
            raise IdentityTokenValidationError("Missing identity token.")
        return verifier.verify_identity_token(identity_token=identity_token.strip())
