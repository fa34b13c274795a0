from __future__ import annotations

import logging
from typing import NoReturn

from carkit.application.dto.auth import RequestContext
from carkit.application.ports.token_port import TokenPort
from carkit.application.ports.user_directory_port import UserDirectoryPort
from carkit.domain.exceptions import InvalidCredentialError, UnauthorizedError


logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


class AuthorizeRequestUseCase:
    """Resolves a bearer header to a live user.

    Every failure raises the same ``UnauthorizedError`` so callers cannot tell a
    bad token from a deleted account; the reason only reaches the server log.
    """

    def __init__(self, *, token_port: TokenPort, user_directory: UserDirectoryPort):
        self._token_port = token_port
        self._user_directory = user_directory

    def execute(self, *, authorization: str | None) -> RequestContext:
        token = _extract_bearer_token(authorization)
        if token is None:
            self._reject("missing_bearer")

        try:
            claims = self._token_port.verify(token=token, expected_kind="access")
        except InvalidCredentialError as exc:
            self._reject(str(exc))

        user = self._user_directory.find_active_by_id(user_id=claims.user_id)
        if user is None:
            self._reject("inactive_user")

        return RequestContext(user_id=user.id, user=user)

    @staticmethod
    def _reject(reason: str) -> NoReturn:
        logger.info("authorize_request: rejected reason=%s", reason)
        raise UnauthorizedError("Unauthorized.")


def _extract_bearer_token(authorization: str | None) -> str | None:
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):].strip()
    return token or None
