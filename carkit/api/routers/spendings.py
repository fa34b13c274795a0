from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Response

from carkit.api.deps import get_request_context, get_spending_access_use_case
from carkit.api.errors import validation_http_error
from carkit.api.schemas.spending import SpendingResponse
from carkit.application.dto.auth import RequestContext
from carkit.application.use_cases.spending_access import SpendingAccessUseCase
from carkit.application.validation import (
    require_valid,
    validate_spending_create,
    validate_spending_update,
)
from carkit.domain.exceptions import NotFoundError, ValidationFailedError


router = APIRouter()


@router.get("/v1/vehicles/{vehicle_id}/spendings", response_model=list[SpendingResponse])
def list_spendings(
    vehicle_id: str,
    context: RequestContext = Depends(get_request_context),
    use_case: SpendingAccessUseCase = Depends(get_spending_access_use_case),
):
    try:
        spendings = use_case.list_all(vehicle_id=vehicle_id, user_id=context.user_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return [SpendingResponse.model_validate(item) for item in spendings]


@router.post("/v1/vehicles/{vehicle_id}/spendings", response_model=SpendingResponse, status_code=201)
def create_spending(
    vehicle_id: str,
    payload: Any = Body(default=None),
    context: RequestContext = Depends(get_request_context),
    use_case: SpendingAccessUseCase = Depends(get_spending_access_use_case),
):
    try:
        data = require_valid(validate_spending_create(payload))
        spending = use_case.create(vehicle_id=vehicle_id, user_id=context.user_id, data=data)
    except ValidationFailedError as exc:
        raise validation_http_error(exc) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return SpendingResponse.model_validate(spending)


@router.get("/v1/vehicles/{vehicle_id}/spendings/{spending_id}", response_model=SpendingResponse)
def get_spending(
    vehicle_id: str,
    spending_id: str,
    context: RequestContext = Depends(get_request_context),
    use_case: SpendingAccessUseCase = Depends(get_spending_access_use_case),
):
    try:
        spending = use_case.get(child_id=spending_id, vehicle_id=vehicle_id, user_id=context.user_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return SpendingResponse.model_validate(spending)


@router.put("/v1/vehicles/{vehicle_id}/spendings/{spending_id}", response_model=SpendingResponse)
def update_spending(
    vehicle_id: str,
    spending_id: str,
    payload: Any = Body(default=None),
    context: RequestContext = Depends(get_request_context),
    use_case: SpendingAccessUseCase = Depends(get_spending_access_use_case),
):
    try:
        changes = require_valid(validate_spending_update(payload))
        spending = use_case.update(
            child_id=spending_id,
            vehicle_id=vehicle_id,
            user_id=context.user_id,
            changes=changes,
        )
    except ValidationFailedError as exc:
        raise validation_http_error(exc) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return SpendingResponse.model_validate(spending)


@router.delete("/v1/vehicles/{vehicle_id}/spendings/{spending_id}", status_code=204)
def delete_spending(
    vehicle_id: str,
    spending_id: str,
    context: RequestContext = Depends(get_request_context),
    use_case: SpendingAccessUseCase = Depends(get_spending_access_use_case),
):
    try:
        use_case.delete(child_id=spending_id, vehicle_id=vehicle_id, user_id=context.user_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return Response(status_code=204)
