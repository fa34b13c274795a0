from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest
from sqlalchemy import create_engine, inspect
from sqlalchemy.pool import StaticPool

from carkit.application.dto.garage import MileageData, SpendingData, VehicleData
from carkit.application.use_cases.mileage_access import MileageAccessUseCase
from carkit.application.use_cases.spending_access import SpendingAccessUseCase
from carkit.application.use_cases.vehicle_access import VehicleAccessUseCase
from carkit.domain.entities.vehicle import Vehicle
from carkit.domain.exceptions import (
    NotFoundError,
    UserAlreadyExistsError,
    UserNotFoundError,
    VehicleNotFoundError,
)
from carkit.infrastructure.db.schema import create_schema, main as create_schema_main
from carkit.infrastructure.db.repositories.garage_store_repository import SqlGarageStore
from carkit.infrastructure.db.repositories.user_directory_repository import SqlUserDirectoryRepository
from carkit.shared.config import get_settings


NOW = datetime(2024, 6, 1, 8, 30, tzinfo=timezone.utc)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite+pysqlite://",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_schema(engine)
    yield engine
    engine.dispose()


def _create_user(repo, user_id="user-1", provider="apple", subject="apple-sub-1"):
    return repo.create_from_provider_identity(
        user_id=user_id,
        provider=provider,
        provider_user_id=subject,
        email="driver@example.com",
        created_at=NOW,
    )


def test_user_directory_creates_and_finds_active_users(engine):
    repo = SqlUserDirectoryRepository(engine)
    created = _create_user(repo)

    by_id = repo.find_active_by_id(user_id="user-1")
    by_identity = repo.find_by_provider_identity(provider="apple", provider_user_id="apple-sub-1")

    assert created.id == "user-1"
    assert by_id is not None and by_identity is not None
    assert by_id.id == by_identity.id == "user-1"
    assert by_id.email == "driver@example.com"
    assert by_id.is_deleted is False
    assert isinstance(by_id.created_at, datetime)
    assert repo.find_by_provider_identity(provider="google", provider_user_id="apple-sub-1") is None


def test_user_directory_rejects_duplicate_active_identity(engine):
    repo = SqlUserDirectoryRepository(engine)
    _create_user(repo)

    with pytest.raises(UserAlreadyExistsError):
        _create_user(repo, user_id="user-2")

    assert repo.find_active_by_id(user_id="user-2") is None


def test_soft_deleted_identity_can_register_again(engine):
    repo = SqlUserDirectoryRepository(engine)
    _create_user(repo)

    repo.soft_delete(user_id="user-1", deleted_at=NOW + timedelta(days=1))
    _create_user(repo, user_id="user-2")

    assert repo.find_active_by_id(user_id="user-1") is None
    found = repo.find_by_provider_identity(provider="apple", provider_user_id="apple-sub-1")
    assert found is not None and found.id == "user-2"


def test_soft_delete_of_inactive_user_raises_not_found(engine):
    repo = SqlUserDirectoryRepository(engine)
    _create_user(repo)
    repo.soft_delete(user_id="user-1", deleted_at=NOW)

    with pytest.raises(UserNotFoundError):
        repo.soft_delete(user_id="user-1", deleted_at=NOW)
    with pytest.raises(UserNotFoundError):
        repo.soft_delete(user_id="nobody", deleted_at=NOW)


def _vehicle(vehicle_id: str, user_id: str = "user-1", created_at: datetime = NOW) -> Vehicle:
    return Vehicle(
        id=vehicle_id,
        user_id=user_id,
        brand="Toyota",
        model="Yaris",
        custom_name=vehicle_id,
        motorization="hybrid",
        image_url=None,
        year=2021,
        created_at=created_at,
        updated_at=created_at,
    )


def test_record_store_filters_and_orders(engine):
    store = SqlGarageStore(engine)
    store.vehicles.insert(record=_vehicle("v-2", created_at=NOW + timedelta(minutes=1)))
    store.vehicles.insert(record=_vehicle("v-1"))
    store.vehicles.insert(record=_vehicle("v-3", user_id="user-2"))

    listed = store.vehicles.find_many(
        filters={"user_id": "user-1"},
        order_by=(("created_at", "asc"), ("id", "asc")),
    )
    found = store.vehicles.find_one(filters={"id": "v-3", "user_id": "user-1"})

    assert [vehicle.id for vehicle in listed] == ["v-1", "v-2"]
    assert listed[0].year == 2021
    assert listed[0].image_url is None
    assert found is None


def test_record_store_rejects_unknown_filter_column(engine):
    store = SqlGarageStore(engine)

    with pytest.raises(ValueError):
        store.vehicles.find_one(filters={"owner": "user-1"})


def test_locking_lookup_finds_the_row(engine):
    store = SqlGarageStore(engine)
    store.vehicles.insert(record=_vehicle("v-1"))

    found = store.execute_in_transaction(
        lambda tx_store: tx_store.vehicles.find_one(filters={"id": "v-1", "user_id": "user-1"}, for_update=True)
    )

    assert found is not None and found.id == "v-1"


def test_update_of_vanished_row_raises_instead_of_reporting_success(engine):
    store = SqlGarageStore(engine)
    vehicle = _vehicle("v-1")
    store.vehicles.insert(record=vehicle)
    store.vehicles.delete(filters={"id": "v-1"})

    with pytest.raises(NotFoundError):
        store.vehicles.update(record=vehicle)

    assert store.vehicles.find_many(filters={}) == []


def test_transaction_rolls_back_every_statement(engine):
    store = SqlGarageStore(engine)

    def _tx(tx_store):
        tx_store.vehicles.insert(record=_vehicle("v-1"))
        assert tx_store.vehicles.find_one(filters={"id": "v-1"}) is not None
        raise RuntimeError("abort")

    with pytest.raises(RuntimeError):
        store.execute_in_transaction(_tx)

    assert store.vehicles.find_one(filters={"id": "v-1"}) is None


def test_garage_flow_against_sql_store(engine):
    store = SqlGarageStore(engine)
    vehicles = VehicleAccessUseCase(store_port=store)
    mileages = MileageAccessUseCase(store_port=store)
    spendings = SpendingAccessUseCase(store_port=store)
    vehicle = vehicles.create(
        user_id="user-1",
        data=VehicleData(brand="Dacia", model="Spring", custom_name="Tiny", motorization="electric"),
    )
    mileages.create(vehicle_id=vehicle.id, user_id="user-1", data=MileageData(mileage=10, date=date(2024, 1, 5)))
    mileages.create(vehicle_id=vehicle.id, user_id="user-1", data=MileageData(mileage=900, date=date(2024, 3, 5)))
    spending = spendings.create(
        vehicle_id=vehicle.id,
        user_id="user-1",
        data=SpendingData(
            date=date(2024, 3, 6),
            recurrence="yearly",
            type="insurance",
            currency_code="EUR",
            amount=Decimal("420.50"),
        ),
    )

    detail = vehicles.get(vehicle_id=vehicle.id, user_id="user-1")
    assert [item.mileage for item in detail.mileages] == [900, 10]
    assert detail.mileages[0].date == date(2024, 3, 5)
    assert detail.spendings[0].id == spending.id
    assert detail.spendings[0].amount == Decimal("420.50")

    updated = vehicles.update(vehicle_id=vehicle.id, user_id="user-1", changes={"custom_name": "Renamed"})
    assert updated.custom_name == "Renamed"
    assert store.vehicles.find_one(filters={"id": vehicle.id}).custom_name == "Renamed"

    with pytest.raises(VehicleNotFoundError):
        vehicles.get(vehicle_id=vehicle.id, user_id="user-2")

    vehicles.delete(vehicle_id=vehicle.id, user_id="user-1")
    assert store.vehicles.find_many(filters={}) == []
    assert store.mileages.find_many(filters={"vehicle_id": vehicle.id}) == []
    assert store.spendings.find_many(filters={"vehicle_id": vehicle.id}) == []


def test_schema_entry_point_creates_tables_from_settings(tmp_path):
    dsn = f"sqlite:///{tmp_path / 'carkit.db'}"

    create_schema_main(replace(get_settings(), postgres_dsn=dsn))
    engine = create_engine(dsn)
    try:
        tables = set(inspect(engine).get_table_names())
    finally:
        engine.dispose()

    assert {"users", "vehicles", "mileages", "spendings"} <= tables


def test_schema_entry_point_requires_a_dsn():
    with pytest.raises(SystemExit):
        create_schema_main(replace(get_settings(), postgres_dsn=""))
