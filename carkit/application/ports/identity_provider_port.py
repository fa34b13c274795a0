from __future__ import annotations

from typing import Protocol

from carkit.domain.entities.user import ProviderIdentity


class IdentityTokenVerifierPort(Protocol):
    def verify_identity_token(self, *, identity_token: str) -> ProviderIdentity:
        ...


class IdentityProviderPort(Protocol):
    def verify_provider_token(self, *, provider: str, identity_token: str) -> ProviderIdentity:
        ...
