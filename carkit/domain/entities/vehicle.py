from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal


MotorizationType = Literal["thermal", "hybrid", "electric"]

MIN_VEHICLE_YEAR = 1900


@dataclass(frozen=True)
class Vehicle:
    id: str
    user_id: str
    brand: str
    model: str
    custom_name: str
    motorization: MotorizationType
    image_url: str | None
    year: int | None
    created_at: datetime
    updated_at: datetime
