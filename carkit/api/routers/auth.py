from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from carkit.api.deps import get_authenticate_use_case, get_refresh_session_use_case
from carkit.api.schemas.auth import AuthTokenResponse, IdentityTokenRequest, RefreshTokenRequest
from carkit.application.dto.auth import AuthenticateInput, AuthTokensOutput, RefreshSessionInput
from carkit.application.use_cases.authenticate_with_provider import AuthenticateWithProviderUseCase
from carkit.application.use_cases.refresh_session import RefreshSessionUseCase
from carkit.domain.exceptions import UnauthorizedError


router = APIRouter()


def _token_response(output: AuthTokensOutput) -> AuthTokenResponse:
    return AuthTokenResponse(
        access_token=output.access_token,
        refresh_token=output.refresh_token,
        access_expires_at=output.access_expires_at,
        refresh_expires_at=output.refresh_expires_at,
        user={
            "id": output.user.id,
            "provider": output.user.provider,
            "email": output.user.email,
            "created_at": output.user.created_at,
        },
    )


def _authenticate(
    provider: str,
    req: IdentityTokenRequest,
    use_case: AuthenticateWithProviderUseCase,
) -> AuthTokenResponse:
    try:
        output = use_case.execute(
            AuthenticateInput(provider=provider, identity_token=req.identity_token)
        )
    except UnauthorizedError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc
    return _token_response(output)


@router.post("/v1/auth/apple", response_model=AuthTokenResponse)
def login_apple(
    req: IdentityTokenRequest,
    use_case: AuthenticateWithProviderUseCase = Depends(get_authenticate_use_case),
):
    return _authenticate("apple", req, use_case)


@router.post("/v1/auth/google", response_model=AuthTokenResponse)
def login_google(
    req: IdentityTokenRequest,
    use_case: AuthenticateWithProviderUseCase = Depends(get_authenticate_use_case),
):
    return _authenticate("google", req, use_case)


@router.post("/v1/auth/refresh", response_model=AuthTokenResponse)
def refresh_auth(
    req: RefreshTokenRequest,
    use_case: RefreshSessionUseCase = Depends(get_refresh_session_use_case),
):
    try:
        output = use_case.execute(RefreshSessionInput(refresh_token=req.refresh_token))
    except UnauthorizedError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc
    return _token_response(output)
