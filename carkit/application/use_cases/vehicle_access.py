from __future__ import annotations

import logging
from dataclasses import asdict, replace
from typing import Any, Mapping
from uuid import uuid4

from carkit.application.dto.garage import VehicleData, VehicleDetailOutput
from carkit.application.ports.garage_store_port import GarageStorePort
from carkit.domain.entities.vehicle import Vehicle

from .auth_common import utcnow
from .ownership import HISTORY_ORDER, VEHICLE_ORDER, merge_changes, require_owned_vehicle


logger = logging.getLogger(__name__)


def _with_history(store: GarageStorePort, vehicle: Vehicle) -> VehicleDetailOutput:
    return VehicleDetailOutput(
        vehicle=vehicle,
        mileages=store.mileages.find_many(filters={"vehicle_id": vehicle.id}, order_by=HISTORY_ORDER),
        spendings=store.spendings.find_many(filters={"vehicle_id": vehicle.id}, order_by=HISTORY_ORDER),
    )


class VehicleAccessUseCase:
    def __init__(self, *, store_port: GarageStorePort):
        self._store_port = store_port

    def list_all(self, *, user_id: str) -> list[VehicleDetailOutput]:
        def _tx(store: GarageStorePort) -> list[VehicleDetailOutput]:
            vehicles = store.vehicles.find_many(filters={"user_id": user_id}, order_by=VEHICLE_ORDER)
            return [_with_history(store, vehicle) for vehicle in vehicles]

        return self._store_port.execute_in_transaction(_tx)

    def get(self, *, vehicle_id: str, user_id: str) -> VehicleDetailOutput:
        def _tx(store: GarageStorePort) -> VehicleDetailOutput:
            vehicle = require_owned_vehicle(store, vehicle_id=vehicle_id, user_id=user_id)
            return _with_history(store, vehicle)

        return self._store_port.execute_in_transaction(_tx)

    def create(self, *, user_id: str, data: VehicleData) -> Vehicle:
        now = utcnow()
        vehicle = Vehicle(
            id=str(uuid4()),
            user_id=user_id,
            created_at=now,
            updated_at=now,
            **asdict(data),
        )
        return self._store_port.vehicles.insert(record=vehicle)

    def update(self, *, vehicle_id: str, user_id: str, changes: Mapping[str, Any]) -> Vehicle:
        merged = merge_changes(changes, data_type=VehicleData)

        def _tx(store: GarageStorePort) -> Vehicle:
            vehicle = require_owned_vehicle(store, vehicle_id=vehicle_id, user_id=user_id, for_update=True)
            if not merged:
                return vehicle
            return store.vehicles.update(record=replace(vehicle, **merged, updated_at=utcnow()))

        return self._store_port.execute_in_transaction(_tx)

    def delete(self, *, vehicle_id: str, user_id: str) -> None:
        def _tx(store: GarageStorePort) -> tuple[int, int]:
            vehicle = require_owned_vehicle(store, vehicle_id=vehicle_id, user_id=user_id, for_update=True)
            mileages = store.mileages.delete(filters={"vehicle_id": vehicle.id})
            spendings = store.spendings.delete(filters={"vehicle_id": vehicle.id})
            store.vehicles.delete(filters={"id": vehicle.id, "user_id": user_id})
            return mileages, spendings

        mileages, spendings = self._store_port.execute_in_transaction(_tx)
        logger.info(
            "vehicles: deleted id=%s mileages=%s spendings=%s",
            vehicle_id,
            mileages,
            spendings,
        )
