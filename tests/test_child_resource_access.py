from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from carkit.application.dto.garage import MileageData, SpendingData, VehicleData
from carkit.application.use_cases.mileage_access import MileageAccessUseCase
from carkit.application.use_cases.spending_access import SpendingAccessUseCase
from carkit.application.use_cases.vehicle_access import VehicleAccessUseCase
from carkit.domain.exceptions import (
    MileageNotFoundError,
    SpendingNotFoundError,
    ValidationFailedError,
    VehicleNotFoundError,
)

from tests.fakes import FakeGarageStore


def _garage():
    store = FakeGarageStore()
    vehicles = VehicleAccessUseCase(store_port=store)
    data = VehicleData(brand="Renault", model="Zoe", custom_name="City", motorization="electric")
    mine = vehicles.create(user_id="user-a", data=data)
    theirs = vehicles.create(user_id="user-b", data=data)
    return store, mine, theirs


def _mileage(value: int = 12000, day: int = 1) -> MileageData:
    return MileageData(mileage=value, date=date(2024, 4, day))


def _charge() -> SpendingData:
    return SpendingData(
        date=date(2024, 4, 2),
        recurrence="none",
        type="fuel",
        currency_code="EUR",
        amount=Decimal("12.40"),
        elec_quantity=Decimal("41.00"),
    )


def test_mileage_crud_under_owned_vehicle():
    store, mine, _ = _garage()
    use_case = MileageAccessUseCase(store_port=store)

    created = use_case.create(vehicle_id=mine.id, user_id="user-a", data=_mileage())
    assert created.vehicle_id == mine.id
    assert created.is_setup_entry is False
    assert use_case.get(child_id=created.id, vehicle_id=mine.id, user_id="user-a") == created

    updated = use_case.update(
        child_id=created.id,
        vehicle_id=mine.id,
        user_id="user-a",
        changes={"mileage": 12500},
    )
    assert updated.mileage == 12500
    assert updated.date == created.date

    use_case.delete(child_id=created.id, vehicle_id=mine.id, user_id="user-a")
    assert use_case.list_all(vehicle_id=mine.id, user_id="user-a") == []


def test_history_is_listed_most_recent_first():
    store, mine, _ = _garage()
    use_case = MileageAccessUseCase(store_port=store)
    for value, day in ((100, 3), (300, 20), (200, 10)):
        use_case.create(vehicle_id=mine.id, user_id="user-a", data=_mileage(value, day))

    listed = use_case.list_all(vehicle_id=mine.id, user_id="user-a")

    assert [item.mileage for item in listed] == [300, 200, 100]


def test_children_of_foreign_vehicle_are_unreachable():
    store, _, theirs = _garage()
    use_case = SpendingAccessUseCase(store_port=store)
    foreign = use_case.create(vehicle_id=theirs.id, user_id="user-b", data=_charge())

    with pytest.raises(VehicleNotFoundError):
        use_case.list_all(vehicle_id=theirs.id, user_id="user-a")
    with pytest.raises(VehicleNotFoundError):
        use_case.get(child_id=foreign.id, vehicle_id=theirs.id, user_id="user-a")
    with pytest.raises(VehicleNotFoundError):
        use_case.create(vehicle_id=theirs.id, user_id="user-a", data=_charge())
    with pytest.raises(VehicleNotFoundError):
        use_case.update(child_id=foreign.id, vehicle_id=theirs.id, user_id="user-a", changes={"name": "x"})
    with pytest.raises(VehicleNotFoundError):
        use_case.delete(child_id=foreign.id, vehicle_id=theirs.id, user_id="user-a")

    assert len(store.tables["spendings"]) == 1
    assert store.tables["spendings"][foreign.id].name is None


def test_child_addressed_through_wrong_vehicle_is_not_found():
    store, mine, theirs = _garage()
    use_case = SpendingAccessUseCase(store_port=store)
    foreign = use_case.create(vehicle_id=theirs.id, user_id="user-b", data=_charge())

    with pytest.raises(SpendingNotFoundError) as excinfo:
        use_case.get(child_id=foreign.id, vehicle_id=mine.id, user_id="user-a")
    with pytest.raises(SpendingNotFoundError):
        use_case.delete(child_id=foreign.id, vehicle_id=mine.id, user_id="user-a")

    assert str(excinfo.value) == "Spending entry not found."
    assert foreign.id in store.tables["spendings"]


def test_missing_mileage_entry_is_not_found():
    store, mine, _ = _garage()
    use_case = MileageAccessUseCase(store_port=store)

    with pytest.raises(MileageNotFoundError):
        use_case.update(child_id="nope", vehicle_id=mine.id, user_id="user-a", changes={"mileage": 1})


def test_spending_update_rejects_reparenting():
    store, mine, theirs = _garage()
    use_case = SpendingAccessUseCase(store_port=store)
    spending = use_case.create(vehicle_id=mine.id, user_id="user-a", data=_charge())

    with pytest.raises(ValidationFailedError):
        use_case.update(
            child_id=spending.id,
            vehicle_id=mine.id,
            user_id="user-a",
            changes={"vehicle_id": theirs.id},
        )

    assert store.tables["spendings"][spending.id].vehicle_id == mine.id


def test_spending_partial_update_keeps_other_fields():
    store, mine, _ = _garage()
    use_case = SpendingAccessUseCase(store_port=store)
    spending = use_case.create(vehicle_id=mine.id, user_id="user-a", data=_charge())

    updated = use_case.update(
        child_id=spending.id,
        vehicle_id=mine.id,
        user_id="user-a",
        changes={"amount": Decimal("15.00"), "name": "Supercharger"},
    )

    assert updated.amount == Decimal("15.00")
    assert updated.name == "Supercharger"
    assert updated.elec_quantity == Decimal("41.00")
    assert updated.currency_code == "EUR"


def test_mutations_lock_the_parent_vehicle_and_reads_do_not():
    store, mine, _ = _garage()
    use_case = MileageAccessUseCase(store_port=store)

    created = use_case.create(vehicle_id=mine.id, user_id="user-a", data=_mileage())
    use_case.update(child_id=created.id, vehicle_id=mine.id, user_id="user-a", changes={"mileage": 12100})
    assert store.locked == [mine.id, mine.id]

    use_case.get(child_id=created.id, vehicle_id=mine.id, user_id="user-a")
    use_case.list_all(vehicle_id=mine.id, user_id="user-a")
    assert store.locked == [mine.id, mine.id]

    use_case.delete(child_id=created.id, vehicle_id=mine.id, user_id="user-a")
    assert store.locked == [mine.id, mine.id, mine.id]


def test_mileage_of_deleted_vehicle_is_not_found():
    store, mine, _ = _garage()
    vehicles = VehicleAccessUseCase(store_port=store)
    mileages = MileageAccessUseCase(store_port=store)
    created = mileages.create(vehicle_id=mine.id, user_id="user-a", data=_mileage())

    vehicles.delete(vehicle_id=mine.id, user_id="user-a")

    with pytest.raises(VehicleNotFoundError):
        mileages.get(child_id=created.id, vehicle_id=mine.id, user_id="user-a")
    assert store.tables["mileages"] == {}
