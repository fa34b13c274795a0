from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict


class MileageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    vehicle_id: str
    mileage: int
    date: dt.date
    is_setup_entry: bool
    created_at: dt.datetime
    updated_at: dt.datetime
