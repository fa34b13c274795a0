from __future__ import annotations

import logging

from carkit.application.dto.auth import AuthTokensOutput, RefreshSessionInput
from carkit.application.ports.token_port import TokenPort
from carkit.application.ports.user_directory_port import UserDirectoryPort
from carkit.domain.exceptions import InvalidCredentialError, UnauthorizedError

from .auth_common import issue_tokens


logger = logging.getLogger(__name__)


class RefreshSessionUseCase:
    def __init__(self, *, user_directory: UserDirectoryPort, token_port: TokenPort):
        self._user_directory = user_directory
        self._token_port = token_port

    def execute(self, command: RefreshSessionInput) -> AuthTokensOutput:
        token = command.refresh_token.strip()
        if not token:
            raise UnauthorizedError("Unauthorized.")

        try:
            claims = self._token_port.verify(token=token, expected_kind="refresh")
        except InvalidCredentialError as exc:
            logger.info("refresh_session: rejected reason=%s", exc)
            raise UnauthorizedError("Unauthorized.") from exc

        user = self._user_directory.find_active_by_id(user_id=claims.user_id)
        if user is None:
            logger.info("refresh_session: rejected reason=inactive_user user_id=%s", claims.user_id)
            raise UnauthorizedError("Unauthorized.")

        return issue_tokens(user=user, token_port=self._token_port)
