from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from carkit.domain.entities.mileage import Mileage
from carkit.domain.entities.spending import RecurrenceType, ServiceType, Spending, SpendingType
from carkit.domain.entities.vehicle import MotorizationType, Vehicle


@dataclass(frozen=True)
class VehicleData:
    brand: str
    model: str
    custom_name: str
    motorization: MotorizationType
    image_url: str | None = None
    year: int | None = None


@dataclass(frozen=True)
class MileageData:
    mileage: int
    date: date
    is_setup_entry: bool = False


@dataclass(frozen=True)
class SpendingData:
    date: date
    recurrence: RecurrenceType
    type: SpendingType
    currency_code: str
    amount: Decimal | None = None
    name: str | None = None
    service: ServiceType | None = None
    liter_quantity: Decimal | None = None
    elec_quantity: Decimal | None = None
    liter_unit: str | None = None


@dataclass(frozen=True)
class VehicleDetailOutput:
    vehicle: Vehicle
    mileages: list[Mileage]
    spendings: list[Spending]
