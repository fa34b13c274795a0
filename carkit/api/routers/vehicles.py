from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Response

from carkit.api.deps import get_request_context, get_vehicle_access_use_case
from carkit.api.errors import validation_http_error
from carkit.api.schemas.mileage import MileageResponse
from carkit.api.schemas.spending import SpendingResponse
from carkit.api.schemas.vehicle import VehicleDetailResponse, VehicleResponse
from carkit.application.dto.auth import RequestContext
from carkit.application.dto.garage import VehicleDetailOutput
from carkit.application.use_cases.vehicle_access import VehicleAccessUseCase
from carkit.application.validation import (
    require_valid,
    validate_vehicle_create,
    validate_vehicle_update,
)
from carkit.domain.exceptions import NotFoundError, ValidationFailedError


router = APIRouter()


def _detail_response(output: VehicleDetailOutput) -> VehicleDetailResponse:
    return VehicleDetailResponse(
        **VehicleResponse.model_validate(output.vehicle).model_dump(),
        mileages=[MileageResponse.model_validate(item) for item in output.mileages],
        spendings=[SpendingResponse.model_validate(item) for item in output.spendings],
    )


@router.get("/v1/vehicles", response_model=list[VehicleDetailResponse])
def list_vehicles(
    context: RequestContext = Depends(get_request_context),
    use_case: VehicleAccessUseCase = Depends(get_vehicle_access_use_case),
):
    outputs = use_case.list_all(user_id=context.user_id)
    return [_detail_response(output) for output in outputs]


@router.post("/v1/vehicles", response_model=VehicleResponse, status_code=201)
def create_vehicle(
    payload: Any = Body(default=None),
    context: RequestContext = Depends(get_request_context),
    use_case: VehicleAccessUseCase = Depends(get_vehicle_access_use_case),
):
    try:
        data = require_valid(validate_vehicle_create(payload))
    except ValidationFailedError as exc:
        raise validation_http_error(exc) from exc
    vehicle = use_case.create(user_id=context.user_id, data=data)
    return VehicleResponse.model_validate(vehicle)


@router.get("/v1/vehicles/{vehicle_id}", response_model=VehicleDetailResponse)
def get_vehicle(
    vehicle_id: str,
    context: RequestContext = Depends(get_request_context),
    use_case: VehicleAccessUseCase = Depends(get_vehicle_access_use_case),
):
    try:
        output = use_case.get(vehicle_id=vehicle_id, user_id=context.user_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return _detail_response(output)


@router.put("/v1/vehicles/{vehicle_id}", response_model=VehicleResponse)
def update_vehicle(
    vehicle_id: str,
    payload: Any = Body(default=None),
    context: RequestContext = Depends(get_request_context),
    use_case: VehicleAccessUseCase = Depends(get_vehicle_access_use_case),
):
    try:
        changes = require_valid(validate_vehicle_update(payload))
        vehicle = use_case.update(vehicle_id=vehicle_id, user_id=context.user_id, changes=changes)
    except ValidationFailedError as exc:
        raise validation_http_error(exc) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return VehicleResponse.model_validate(vehicle)


@router.delete("/v1/vehicles/{vehicle_id}", status_code=204)
def delete_vehicle(
    vehicle_id: str,
    context: RequestContext = Depends(get_request_context),
    use_case: VehicleAccessUseCase = Depends(get_vehicle_access_use_case),
):
    try:
        use_case.delete(vehicle_id=vehicle_id, user_id=context.user_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return Response(status_code=204)
