from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Literal


RecurrenceType = Literal["none", "weekly", "monthly", "yearly"]
SpendingType = Literal[
    "vehiclePart",
    "service",
    "fuel",
    "insurance",
    "subscription",
    "accessories",
    "sparePart",
    "other",
]
ServiceType = Literal["carWash", "oilChange", "vacuum"]


@dataclass(frozen=True)
class Spending:
    id: str
    vehicle_id: str
    amount: Decimal | None
    date: date
    recurrence: RecurrenceType
    type: SpendingType
    currency_code: str
    name: str | None
    service: ServiceType | None
    liter_quantity: Decimal | None
    elec_quantity: Decimal | None
    liter_unit: str | None
    created_at: datetime
    updated_at: datetime
