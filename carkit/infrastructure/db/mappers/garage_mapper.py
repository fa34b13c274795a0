from __future__ import annotations

from dataclasses import asdict
from decimal import Decimal
from typing import Any, Mapping

from carkit.domain.entities.mileage import Mileage
from carkit.domain.entities.spending import Spending
from carkit.domain.entities.user import User
from carkit.domain.entities.vehicle import Vehicle


def _as_str(value: Any) -> str:
    return str(value)


def _as_decimal(value: Any) -> Decimal | None:
    if value is None:
        return None
    return value if isinstance(value, Decimal) else Decimal(str(value))


def map_row_to_user(row: Mapping[str, Any]) -> User:
    return User(
        id=_as_str(row["id"]),
        provider=row["provider"],
        provider_user_id=row["provider_user_id"],
        email=row.get("email"),
        is_deleted=bool(row["is_deleted"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def map_row_to_vehicle(row: Mapping[str, Any]) -> Vehicle:
    return Vehicle(
        id=_as_str(row["id"]),
        user_id=_as_str(row["user_id"]),
        brand=row["brand"],
        model=row["model"],
        custom_name=row["custom_name"],
        motorization=row["motorization"],
        image_url=row.get("image_url"),
        year=int(row["year"]) if row.get("year") is not None else None,
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def map_row_to_mileage(row: Mapping[str, Any]) -> Mileage:
    return Mileage(
        id=_as_str(row["id"]),
        vehicle_id=_as_str(row["vehicle_id"]),
        mileage=int(row["mileage"]),
        date=row["date"],
        is_setup_entry=bool(row["is_setup_entry"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def map_row_to_spending(row: Mapping[str, Any]) -> Spending:
    return Spending(
        id=_as_str(row["id"]),
        vehicle_id=_as_str(row["vehicle_id"]),
        amount=_as_decimal(row.get("amount")),
        date=row["date"],
        recurrence=row["recurrence"],
        type=row["type"],
        currency_code=row["currency_code"],
        name=row.get("name"),
        service=row.get("service"),
        liter_quantity=_as_decimal(row.get("liter_quantity")),
        elec_quantity=_as_decimal(row.get("elec_quantity")),
        liter_unit=row.get("liter_unit"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def map_record_to_row(record: Any) -> dict[str, Any]:
    return asdict(record)
