"""Ownership chain enforcement: User -> Vehicle -> (Mileage | Spending).

Every check and the mutation that depends on it run inside one store
transaction. A vehicle that does not exist and a vehicle owned by another user
produce the same ``VehicleNotFoundError``.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, fields, replace
from typing import Any, ClassVar, Generic, Mapping, TypeVar
from uuid import uuid4

from carkit.application.ports.garage_store_port import GarageStorePort, RecordStorePort
from carkit.domain.entities.vehicle import Vehicle
from carkit.domain.exceptions import NotFoundError, ValidationFailedError, VehicleNotFoundError

from .auth_common import utcnow


logger = logging.getLogger(__name__)

TChild = TypeVar("TChild")

VEHICLE_ORDER = (("created_at", "asc"), ("id", "asc"))
HISTORY_ORDER = (("date", "desc"), ("created_at", "desc"), ("id", "asc"))


def require_owned_vehicle(
    store: GarageStorePort,
    *,
    vehicle_id: str,
    user_id: str,
    for_update: bool = False,
) -> Vehicle:
    """Load the caller's vehicle; mutating callers lock the row until commit."""
    vehicle = store.vehicles.find_one(
        filters={"id": vehicle_id, "user_id": user_id},
        for_update=for_update,
    )
    if vehicle is None:
        raise VehicleNotFoundError("Vehicle not found.")
    return vehicle


def merge_changes(changes: Mapping[str, Any], *, data_type: type) -> dict[str, Any]:
    """Keep the supplied, non-null fields of ``data_type``; anything else is rejected."""
    allowed = {field.name for field in fields(data_type)}
    unknown = sorted(set(changes) - allowed)
    if unknown:
        raise ValidationFailedError(
            [{"field": name, "message": "Field cannot be updated."} for name in unknown]
        )
    return {name: value for name, value in changes.items() if value is not None}


class ChildResourceAccess(Generic[TChild]):
    """List/get/create/update/delete for a record owned by a vehicle.

    Subclasses name the store attribute holding the records, the entity and
    input dataclasses, and the not-found error to raise for a missing child.
    """

    records_attr: ClassVar[str]
    entity_type: ClassVar[type]
    data_type: ClassVar[type]
    not_found_error: ClassVar[type[NotFoundError]]
    not_found_message: ClassVar[str]

    def __init__(self, *, store_port: GarageStorePort):
        self._store_port = store_port

    def list_all(self, *, vehicle_id: str, user_id: str) -> list[TChild]:
        def _tx(store: GarageStorePort) -> list[TChild]:
            vehicle = require_owned_vehicle(store, vehicle_id=vehicle_id, user_id=user_id)
            return self._records(store).find_many(
                filters={"vehicle_id": vehicle.id},
                order_by=HISTORY_ORDER,
            )

        return self._store_port.execute_in_transaction(_tx)

    def get(self, *, child_id: str, vehicle_id: str, user_id: str) -> TChild:
        def _tx(store: GarageStorePort) -> TChild:
            vehicle = require_owned_vehicle(store, vehicle_id=vehicle_id, user_id=user_id)
            return self._require_child(store, child_id=child_id, vehicle_id=vehicle.id)

        return self._store_port.execute_in_transaction(_tx)

    def create(self, *, vehicle_id: str, user_id: str, data: Any) -> TChild:
        def _tx(store: GarageStorePort) -> TChild:
            vehicle = require_owned_vehicle(store, vehicle_id=vehicle_id, user_id=user_id, for_update=True)
            now = utcnow()
            record = self.entity_type(
                id=str(uuid4()),
                vehicle_id=vehicle.id,
                created_at=now,
                updated_at=now,
                **asdict(data),
            )
            return self._records(store).insert(record=record)

        return self._store_port.execute_in_transaction(_tx)

    def update(
        self,
        *,
        child_id: str,
        vehicle_id: str,
        user_id: str,
        changes: Mapping[str, Any],
    ) -> TChild:
        merged = merge_changes(changes, data_type=self.data_type)

        def _tx(store: GarageStorePort) -> TChild:
            vehicle = require_owned_vehicle(store, vehicle_id=vehicle_id, user_id=user_id, for_update=True)
            current = self._require_child(store, child_id=child_id, vehicle_id=vehicle.id)
            if not merged:
                return current
            return self._records(store).update(record=replace(current, **merged, updated_at=utcnow()))

        return self._store_port.execute_in_transaction(_tx)

    def delete(self, *, child_id: str, vehicle_id: str, user_id: str) -> None:
        def _tx(store: GarageStorePort) -> None:
            vehicle = require_owned_vehicle(store, vehicle_id=vehicle_id, user_id=user_id, for_update=True)
            child = self._require_child(store, child_id=child_id, vehicle_id=vehicle.id)
            self._records(store).delete(filters={"id": child.id, "vehicle_id": vehicle.id})

        self._store_port.execute_in_transaction(_tx)
        logger.info("%s: deleted id=%s vehicle_id=%s", self.records_attr, child_id, vehicle_id)

    def _records(self, store: GarageStorePort) -> RecordStorePort[TChild]:
        return getattr(store, self.records_attr)

    def _require_child(self, store: GarageStorePort, *, child_id: str, vehicle_id: str) -> TChild:
        child = self._records(store).find_one(filters={"id": child_id, "vehicle_id": vehicle_id})
        if child is None:
            raise self.not_found_error(self.not_found_message)
        return child
