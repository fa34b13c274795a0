from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import Boolean, DateTime, bindparam, text
from sqlalchemy.exc import IntegrityError

from carkit.application.ports.user_directory_port import UserDirectoryPort
from carkit.domain.entities.user import AuthProvider, User
from carkit.domain.exceptions import UserAlreadyExistsError, UserNotFoundError
from carkit.infrastructure.db.mappers.garage_mapper import map_row_to_user


logger = logging.getLogger(__name__)

_USER_COLUMNS = "id, provider, provider_user_id, email, is_deleted, created_at, updated_at"


def _select_users(sql: str):
    return text(sql).columns(
        is_deleted=Boolean,
        created_at=DateTime(timezone=True),
        updated_at=DateTime(timezone=True),
    )


class SqlUserDirectoryRepository(UserDirectoryPort):
    def __init__(self, engine):
        self._engine = engine

    def find_active_by_id(self, *, user_id: str) -> User | None:
        sql = f"""
            SELECT {_USER_COLUMNS}
            FROM users
            WHERE id = :user_id
              AND is_deleted = :is_deleted
            LIMIT 1
        """
        with self._engine.connect() as conn:
            row = conn.execute(
                _select_users(sql),
                {"user_id": user_id, "is_deleted": False},
            ).mappings().first()
        if row is None:
            return None
        return map_row_to_user(row)

    def find_by_provider_identity(self, *, provider: AuthProvider, provider_user_id: str) -> User | None:
        sql = f"""
            SELECT {_USER_COLUMNS}
            FROM users
            WHERE provider = :provider
              AND provider_user_id = :provider_user_id
              AND is_deleted = :is_deleted
            LIMIT 1
        """
        with self._engine.connect() as conn:
            row = conn.execute(
                _select_users(sql),
                {
                    "provider": provider,
                    "provider_user_id": provider_user_id,
                    "is_deleted": False,
                },
            ).mappings().first()
        if row is None:
            return None
        return map_row_to_user(row)

    def create_from_provider_identity(
        self,
        *,
        user_id: str,
        provider: AuthProvider,
        provider_user_id: str,
        email: str | None,
        created_at: datetime,
    ) -> User:
        sql = text(
            """
            INSERT INTO users (
                id, provider, provider_user_id, email, is_deleted, created_at, updated_at
            ) VALUES (
                :id, :provider, :provider_user_id, :email, :is_deleted, :created_at, :updated_at
            )
            """
        ).bindparams(
            bindparam("created_at", type_=DateTime(timezone=True)),
            bindparam("updated_at", type_=DateTime(timezone=True)),
        )
        params = {
            "id": user_id,
            "provider": provider,
            "provider_user_id": provider_user_id,
            "email": email,
            "is_deleted": False,
            "created_at": created_at,
            "updated_at": created_at,
        }
        try:
            with self._engine.begin() as conn:
                conn.execute(sql, params)
        except IntegrityError as exc:
            # partial unique index on (provider, provider_user_id) among active users
            logger.info(
                "users: identity already registered provider=%s",
                provider,
            )
            raise UserAlreadyExistsError("User already exists.") from exc
        return User(
            id=user_id,
            provider=provider,
            provider_user_id=provider_user_id,
            email=email,
            is_deleted=False,
            created_at=created_at,
            updated_at=created_at,
        )

    def soft_delete(self, *, user_id: str, deleted_at: datetime) -> None:
        sql = text(
            """
            UPDATE users
            SET is_deleted = :deleted,
                updated_at = :deleted_at
            WHERE id = :user_id
              AND is_deleted = :active
            """
        ).bindparams(bindparam("deleted_at", type_=DateTime(timezone=True)))
        with self._engine.begin() as conn:
            result = conn.execute(
                sql,
                {
                    "user_id": user_id,
                    "deleted": True,
                    "active": False,
                    "deleted_at": deleted_at,
                },
            )
        if result.rowcount == 0:
            raise UserNotFoundError("User not found.")
