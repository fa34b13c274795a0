from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response

from carkit.api.deps import get_delete_account_use_case, get_request_context
from carkit.api.schemas.me import MeResponse
from carkit.application.dto.auth import RequestContext
from carkit.application.use_cases.delete_account import DeleteAccountUseCase
from carkit.domain.exceptions import UserNotFoundError


router = APIRouter()


@router.get("/v1/me", response_model=MeResponse)
def get_me(context: RequestContext = Depends(get_request_context)):
    user = context.user
    return MeResponse(
        id=user.id,
        provider=user.provider,
        email=user.email,
        created_at=user.created_at,
    )


@router.delete("/v1/me", status_code=204)
def delete_me(
    context: RequestContext = Depends(get_request_context),
    use_case: DeleteAccountUseCase = Depends(get_delete_account_use_case),
):
    try:
        use_case.execute(user_id=context.user_id)
    except UserNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return Response(status_code=204)
