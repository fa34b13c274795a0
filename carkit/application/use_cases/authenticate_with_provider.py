from __future__ import annotations

import logging
from uuid import uuid4

from carkit.application.dto.auth import AuthenticateInput, AuthTokensOutput
from carkit.application.ports.identity_provider_port import IdentityProviderPort
from carkit.application.ports.token_port import TokenPort
from carkit.application.ports.user_directory_port import UserDirectoryPort
from carkit.domain.entities.user import User
from carkit.domain.exceptions import (
    IdentityTokenValidationError,
    UnauthorizedError,
    UserAlreadyExistsError,
)

from .auth_common import issue_tokens, utcnow


logger = logging.getLogger(__name__)


class AuthenticateWithProviderUseCase:
    def __init__(
        self,
        *,
        user_directory: UserDirectoryPort,
        identity_provider_port: IdentityProviderPort,
        token_port: TokenPort,
    ):
        self._user_directory = user_directory
        self._identity_provider_port = identity_provider_port
        self._token_port = token_port

    def execute(self, command: AuthenticateInput) -> AuthTokensOutput:
        try:
            identity = self._identity_provider_port.verify_provider_token(
                provider=command.provider,
                identity_token=command.identity_token,
            )
        except IdentityTokenValidationError as exc:
            logger.info("authenticate: provider_rejected provider=%s reason=%s", command.provider, exc)
            raise UnauthorizedError("Unauthorized.") from exc

        user = self._find_or_create(
            provider=command.provider,
            subject=identity.subject,
            email=identity.email,
        )
        return issue_tokens(user=user, token_port=self._token_port)

    def _find_or_create(self, *, provider: str, subject: str, email: str | None) -> User:
        user = self._user_directory.find_by_provider_identity(
            provider=provider,
            provider_user_id=subject,
        )
        if user is not None:
            return user

        try:
            user = self._user_directory.create_from_provider_identity(
                user_id=str(uuid4()),
                provider=provider,
                provider_user_id=subject,
                email=email,
                created_at=utcnow(),
            )
        except UserAlreadyExistsError:
            # A concurrent first login won the insert; use its row.
            user = self._user_directory.find_by_provider_identity(
                provider=provider,
                provider_user_id=subject,
            )
            if user is None:
                raise
            return user

        logger.info("authenticate: user_created user_id=%s provider=%s", user.id, provider)
        return user
