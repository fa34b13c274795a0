from __future__ import annotations

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class SpendingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    vehicle_id: str
    amount: Decimal | None
    date: dt.date
    recurrence: str
    type: str
    currency_code: str
    name: str | None
    service: str | None
    liter_quantity: Decimal | None
    elec_quantity: Decimal | None
    liter_unit: str | None
    created_at: dt.datetime
    updated_at: dt.datetime
