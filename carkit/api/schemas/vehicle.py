from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from carkit.api.schemas.mileage import MileageResponse
from carkit.api.schemas.spending import SpendingResponse


class VehicleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    brand: str
    model: str
    custom_name: str
    motorization: str
    image_url: str | None
    year: int | None
    created_at: datetime
    updated_at: datetime


class VehicleDetailResponse(VehicleResponse):
    mileages: list[MileageResponse]
    spendings: list[SpendingResponse]
