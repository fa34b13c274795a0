from __future__ import annotations

import logging

from carkit.application.ports.user_directory_port import UserDirectoryPort

from .auth_common import utcnow


logger = logging.getLogger(__name__)


class DeleteAccountUseCase:
    """Soft deletes the user. Vehicles and their history are retained, unreachable."""

    def __init__(self, *, user_directory: UserDirectoryPort):
        self._user_directory = user_directory

    def execute(self, *, user_id: str) -> None:
        self._user_directory.soft_delete(user_id=user_id, deleted_at=utcnow())
        logger.info("delete_account: soft_deleted user_id=%s", user_id)
