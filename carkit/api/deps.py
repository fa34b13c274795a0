from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, Header, HTTPException

from carkit.application.dto.auth import RequestContext
from carkit.application.use_cases.authenticate_with_provider import AuthenticateWithProviderUseCase
from carkit.application.use_cases.authorize_request import AuthorizeRequestUseCase
from carkit.application.use_cases.delete_account import DeleteAccountUseCase
from carkit.application.use_cases.mileage_access import MileageAccessUseCase
from carkit.application.use_cases.refresh_session import RefreshSessionUseCase
from carkit.application.use_cases.spending_access import SpendingAccessUseCase
from carkit.application.use_cases.vehicle_access import VehicleAccessUseCase
from carkit.domain.exceptions import UnauthorizedError
from carkit.infrastructure.clients.apple_identity_client import AppleIdentityClient
from carkit.infrastructure.clients.google_oidc_client import GoogleOidcClient
from carkit.infrastructure.clients.identity_provider_verifier import IdentityProviderVerifier
from carkit.infrastructure.db.engine import get_engine
from carkit.infrastructure.db.repositories.garage_store_repository import SqlGarageStore
from carkit.infrastructure.db.repositories.user_directory_repository import SqlUserDirectoryRepository
from carkit.infrastructure.security.token_service import JwtTokenService
from carkit.shared.config import get_settings


def _get_db_engine():
    settings = get_settings()
    if not settings.postgres_dsn:
        raise HTTPException(status_code=500, detail="POSTGRES_DSN is required.")
    return get_engine(settings.postgres_dsn)


def _get_user_directory() -> SqlUserDirectoryRepository:
    return SqlUserDirectoryRepository(_get_db_engine())


def _get_garage_store() -> SqlGarageStore:
    return SqlGarageStore(_get_db_engine())


@lru_cache(maxsize=1)
def _get_token_service() -> JwtTokenService:
    settings = get_settings()
    if not settings.jwt_access_secret:
        raise HTTPException(status_code=500, detail="JWT_ACCESS_SECRET is required.")
    if not settings.jwt_refresh_secret:
        raise HTTPException(status_code=500, detail="JWT_REFRESH_SECRET is required.")
    return JwtTokenService(
        access_secret=settings.jwt_access_secret,
        refresh_secret=settings.jwt_refresh_secret,
        access_ttl_minutes=settings.jwt_access_ttl_minutes,
        refresh_ttl_days=settings.jwt_refresh_ttl_days,
    )


@lru_cache(maxsize=1)
def _get_identity_provider_verifier() -> IdentityProviderVerifier:
    settings = get_settings()
    verifiers = {
        "apple": AppleIdentityClient(
            keys_url=settings.apple_keys_url,
            client_id=settings.apple_client_id,
        ),
    }
    # Google sign-in stays disabled until a client id is configured.
    if settings.google_client_id:
        verifiers["google"] = GoogleOidcClient(client_id=settings.google_client_id)
    return IdentityProviderVerifier(verifiers=verifiers)


def get_authenticate_use_case() -> AuthenticateWithProviderUseCase:
    return AuthenticateWithProviderUseCase(
        user_directory=_get_user_directory(),
        identity_provider_port=_get_identity_provider_verifier(),
        token_port=_get_token_service(),
    )


def get_refresh_session_use_case() -> RefreshSessionUseCase:
    return RefreshSessionUseCase(
        user_directory=_get_user_directory(),
        token_port=_get_token_service(),
    )


def get_authorize_request_use_case() -> AuthorizeRequestUseCase:
    return AuthorizeRequestUseCase(
        token_port=_get_token_service(),
        user_directory=_get_user_directory(),
    )


def get_delete_account_use_case() -> DeleteAccountUseCase:
    return DeleteAccountUseCase(user_directory=_get_user_directory())


def get_vehicle_access_use_case() -> VehicleAccessUseCase:
    return VehicleAccessUseCase(store_port=_get_garage_store())


def get_mileage_access_use_case() -> MileageAccessUseCase:
    return MileageAccessUseCase(store_port=_get_garage_store())


def get_spending_access_use_case() -> SpendingAccessUseCase:
    return SpendingAccessUseCase(store_port=_get_garage_store())


def get_request_context(
    authorization: str | None = Header(default=None),
    use_case: AuthorizeRequestUseCase = Depends(get_authorize_request_use_case),
) -> RequestContext:
    try:
        return use_case.execute(authorization=authorization)
    except UnauthorizedError as exc:
        raise HTTPException(
            status_code=401,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc
