from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Response

from carkit.api.deps import get_mileage_access_use_case, get_request_context
from carkit.api.errors import validation_http_error
from carkit.api.schemas.mileage import MileageResponse
from carkit.application.dto.auth import RequestContext
from carkit.application.use_cases.mileage_access import MileageAccessUseCase
from carkit.application.validation import (
    require_valid,
    validate_mileage_create,
    validate_mileage_update,
)
from carkit.domain.exceptions import NotFoundError, ValidationFailedError


router = APIRouter()


@router.get("/v1/vehicles/{vehicle_id}/mileages", response_model=list[MileageResponse])
def list_mileages(
    vehicle_id: str,
    context: RequestContext = Depends(get_request_context),
    use_case: MileageAccessUseCase = Depends(get_mileage_access_use_case),
):
    try:
        mileages = use_case.list_all(vehicle_id=vehicle_id, user_id=context.user_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return [MileageResponse.model_validate(item) for item in mileages]


@router.post("/v1/vehicles/{vehicle_id}/mileages", response_model=MileageResponse, status_code=201)
def create_mileage(
    vehicle_id: str,
    payload: Any = Body(default=None),
    context: RequestContext = Depends(get_request_context),
    use_case: MileageAccessUseCase = Depends(get_mileage_access_use_case),
):
    try:
        data = require_valid(validate_mileage_create(payload))
        mileage = use_case.create(vehicle_id=vehicle_id, user_id=context.user_id, data=data)
    except ValidationFailedError as exc:
        raise validation_http_error(exc) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return MileageResponse.model_validate(mileage)


@router.get("/v1/vehicles/{vehicle_id}/mileages/{mileage_id}", response_model=MileageResponse)
def get_mileage(
    vehicle_id: str,
    mileage_id: str,
    context: RequestContext = Depends(get_request_context),
    use_case: MileageAccessUseCase = Depends(get_mileage_access_use_case),
):
    try:
        mileage = use_case.get(child_id=mileage_id, vehicle_id=vehicle_id, user_id=context.user_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return MileageResponse.model_validate(mileage)


@router.put("/v1/vehicles/{vehicle_id}/mileages/{mileage_id}", response_model=MileageResponse)
def update_mileage(
    vehicle_id: str,
    mileage_id: str,
    payload: Any = Body(default=None),
    context: RequestContext = Depends(get_request_context),
    use_case: MileageAccessUseCase = Depends(get_mileage_access_use_case),
):
    try:
        changes = require_valid(validate_mileage_update(payload))
        mileage = use_case.update(
            child_id=mileage_id,
            vehicle_id=vehicle_id,
            user_id=context.user_id,
            changes=changes,
        )
    except ValidationFailedError as exc:
        raise validation_http_error(exc) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return MileageResponse.model_validate(mileage)


@router.delete("/v1/vehicles/{vehicle_id}/mileages/{mileage_id}", status_code=204)
def delete_mileage(
    vehicle_id: str,
    mileage_id: str,
    context: RequestContext = Depends(get_request_context),
    use_case: MileageAccessUseCase = Depends(get_mileage_access_use_case),
):
    try:
        use_case.delete(child_id=mileage_id, vehicle_id=vehicle_id, user_id=context.user_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return Response(status_code=204)
