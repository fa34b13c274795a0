"""Input schemas per entity kind.

Each ``validate_*`` function is pure: raw mapping in, ``ValidationResult`` out.
Nothing reaches the ownership layer unless ``errors`` is empty.
"""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable, Generic, Mapping, TypeVar

from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError, field_validator

from carkit.application.dto.garage import MileageData, SpendingData, VehicleData
from carkit.domain.entities.spending import RecurrenceType, ServiceType, SpendingType
from carkit.domain.entities.vehicle import MIN_VEHICLE_YEAR, MotorizationType
from carkit.domain.exceptions import ValidationFailedError


T = TypeVar("T")


@dataclass(frozen=True)
class ValidationResult(Generic[T]):
    value: T | None
    errors: list[dict[str, str]] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _check_vehicle_year(value: int | None) -> int | None:
    if value is None:
        return value
    max_year = dt.date.today().year + 1
    if value < MIN_VEHICLE_YEAR or value > max_year:
        raise ValueError(f"year must be between {MIN_VEHICLE_YEAR} and {max_year}")
    return value


def _upper_currency(value: str | None) -> str | None:
    return value.upper() if value is not None else value


class _Schema(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


class VehicleCreateSchema(_Schema):
    brand: str = Field(..., min_length=1, max_length=120)
    model: str = Field(..., min_length=1, max_length=120)
    custom_name: str = Field(..., min_length=1, max_length=120)
    motorization: MotorizationType
    image_url: str | None = Field(None, max_length=2048)
    year: StrictInt | None = None

    @field_validator("year")
    @classmethod
    def check_year(cls, value: int | None) -> int | None:
        return _check_vehicle_year(value)


class VehicleUpdateSchema(_Schema):
    brand: str | None = Field(None, min_length=1, max_length=120)
    model: str | None = Field(None, min_length=1, max_length=120)
    custom_name: str | None = Field(None, min_length=1, max_length=120)
    motorization: MotorizationType | None = None
    image_url: str | None = Field(None, max_length=2048)
    year: StrictInt | None = None

    @field_validator("year")
    @classmethod
    def check_year(cls, value: int | None) -> int | None:
        return _check_vehicle_year(value)


class MileageCreateSchema(_Schema):
    mileage: StrictInt = Field(..., ge=0)
    date: dt.date
    is_setup_entry: bool = False


class MileageUpdateSchema(_Schema):
    mileage: StrictInt | None = Field(None, ge=0)
    date: dt.date | None = None
    is_setup_entry: bool | None = None


class SpendingCreateSchema(_Schema):
    amount: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    date: dt.date
    recurrence: RecurrenceType
    type: SpendingType
    currency_code: str = Field(..., pattern=r"^[A-Za-z]{3}$")
    name: str | None = Field(None, max_length=255)
    service: ServiceType | None = None
    liter_quantity: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    elec_quantity: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    liter_unit: str | None = Field(None, max_length=16)

    @field_validator("currency_code")
    @classmethod
    def normalize_currency(cls, value: str | None) -> str | None:
        return _upper_currency(value)


class SpendingUpdateSchema(_Schema):
    amount: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    date: dt.date | None = None
    recurrence: RecurrenceType | None = None
    type: SpendingType | None = None
    currency_code: str | None = Field(None, pattern=r"^[A-Za-z]{3}$")
    name: str | None = Field(None, max_length=255)
    service: ServiceType | None = None
    liter_quantity: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    elec_quantity: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    liter_unit: str | None = Field(None, max_length=16)

    @field_validator("currency_code")
    @classmethod
    def normalize_currency(cls, value: str | None) -> str | None:
        return _upper_currency(value)


def _format_error(error: Mapping[str, Any]) -> dict[str, str]:
    location = ".".join(str(part) for part in error.get("loc", ()))
    return {"field": location or "body", "message": str(error.get("msg", "Invalid value."))}


def _validate(
    schema: type[_Schema],
    raw: Any,
    build: Callable[[Any], T],
) -> ValidationResult[T]:
    if not isinstance(raw, Mapping):
        return ValidationResult(value=None, errors=[{"field": "body", "message": "Expected a JSON object."}])
    try:
        parsed = schema.model_validate(dict(raw))
    except ValidationError as exc:
        return ValidationResult(value=None, errors=[_format_error(item) for item in exc.errors()])
    return ValidationResult(value=build(parsed), errors=[])


def _changes(parsed: BaseModel) -> dict[str, Any]:
    # null means "leave unchanged"
    return parsed.model_dump(exclude_unset=True, exclude_none=True)


def validate_vehicle_create(raw: Any) -> ValidationResult[VehicleData]:
    return _validate(VehicleCreateSchema, raw, lambda parsed: VehicleData(**parsed.model_dump()))


def validate_vehicle_update(raw: Any) -> ValidationResult[dict[str, Any]]:
    return _validate(VehicleUpdateSchema, raw, _changes)


def validate_mileage_create(raw: Any) -> ValidationResult[MileageData]:
    return _validate(MileageCreateSchema, raw, lambda parsed: MileageData(**parsed.model_dump()))


def validate_mileage_update(raw: Any) -> ValidationResult[dict[str, Any]]:
    return _validate(MileageUpdateSchema, raw, _changes)


def validate_spending_create(raw: Any) -> ValidationResult[SpendingData]:
    return _validate(SpendingCreateSchema, raw, lambda parsed: SpendingData(**parsed.model_dump()))


def validate_spending_update(raw: Any) -> ValidationResult[dict[str, Any]]:
    return _validate(SpendingUpdateSchema, raw, _changes)


def require_valid(result: ValidationResult[T]) -> T:
    if result.errors:
        raise ValidationFailedError(result.errors)
    return result.value
