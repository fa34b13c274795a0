from __future__ import annotations

from typing import Any, Callable, Mapping, Protocol, Sequence, TypeVar

from carkit.domain.entities.mileage import Mileage
from carkit.domain.entities.spending import Spending
from carkit.domain.entities.vehicle import Vehicle


TRecord = TypeVar("TRecord")
TResult = TypeVar("TResult")

OrderBy = Sequence[tuple[str, str]]


class RecordStorePort(Protocol[TRecord]):
    def find_one(self, *, filters: Mapping[str, Any], for_update: bool = False) -> TRecord | None:
        ...

    def find_many(self, *, filters: Mapping[str, Any], order_by: OrderBy = ()) -> list[TRecord]:
        ...

    def insert(self, *, record: TRecord) -> TRecord:
        ...

    def update(self, *, record: TRecord) -> TRecord:
        ...

    def delete(self, *, filters: Mapping[str, Any]) -> int:
        ...


class GarageStorePort(Protocol):
    @property
    def vehicles(self) -> RecordStorePort[Vehicle]:
        ...

    @property
    def mileages(self) -> RecordStorePort[Mileage]:
        ...

    @property
    def spendings(self) -> RecordStorePort[Spending]:
        ...

    def execute_in_transaction(self, fn: Callable[[GarageStorePort], TResult]) -> TResult:
        ...
