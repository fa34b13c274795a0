from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True)
class Mileage:
    id: str
    vehicle_id: str
    mileage: int
    date: date
    is_setup_entry: bool
    created_at: datetime
    updated_at: datetime
