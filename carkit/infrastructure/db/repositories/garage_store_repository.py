"""SQL adapter for the vehicle/mileage/spending store.

A store built with ``conn`` runs every statement on that connection, so a
callback given to ``execute_in_transaction`` sees one transaction end to end.
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Callable, Iterator, Mapping, TypeVar

import sqlalchemy as sa
from sqlalchemy.engine import Connection

from carkit.application.ports.garage_store_port import GarageStorePort, OrderBy, RecordStorePort
from carkit.domain.exceptions import NotFoundError
from carkit.infrastructure.db.mappers.garage_mapper import (
    map_record_to_row,
    map_row_to_mileage,
    map_row_to_spending,
    map_row_to_vehicle,
)
from carkit.infrastructure.db.models.garage import MileageModel, SpendingModel, VehicleModel


TRecord = TypeVar("TRecord")
TResult = TypeVar("TResult")


class SqlRecordStore(RecordStorePort[TRecord]):
    def __init__(
        self,
        *,
        table: sa.Table,
        mapper: Callable[[Mapping[str, Any]], TRecord],
        engine,
        conn: Connection | None = None,
    ):
        self._table = table
        self._mapper = mapper
        self._engine = engine
        self._conn = conn

    @contextmanager
    def _connection(self) -> Iterator[Connection]:
        if self._conn is not None:
            yield self._conn
            return
        with self._engine.begin() as conn:
            yield conn

    def _column(self, name: str) -> sa.Column:
        if name not in self._table.c:
            raise ValueError(f"Unknown column {name!r} for {self._table.name}.")
        return self._table.c[name]

    def _filtered(self, stmt, filters: Mapping[str, Any]):
        for name, value in filters.items():
            stmt = stmt.where(self._column(name) == value)
        return stmt

    def find_one(self, *, filters: Mapping[str, Any], for_update: bool = False) -> TRecord | None:
        stmt = self._filtered(sa.select(self._table), filters).limit(1)
        if for_update:
            stmt = stmt.with_for_update()
        with self._connection() as conn:
            row = conn.execute(stmt).mappings().first()
        if row is None:
            return None
        return self._mapper(row)

    def find_many(self, *, filters: Mapping[str, Any], order_by: OrderBy = ()) -> list[TRecord]:
        stmt = self._filtered(sa.select(self._table), filters)
        for name, direction in order_by:
            column = self._column(name)
            stmt = stmt.order_by(column.desc() if direction == "desc" else column.asc())
        with self._connection() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [self._mapper(row) for row in rows]

    def insert(self, *, record: TRecord) -> TRecord:
        with self._connection() as conn:
            conn.execute(sa.insert(self._table).values(**map_record_to_row(record)))
        return record

    def update(self, *, record: TRecord) -> TRecord:
        values = map_record_to_row(record)
        record_id = values.pop("id")
        stmt = sa.update(self._table).where(self._table.c.id == record_id).values(**values)
        with self._connection() as conn:
            result = conn.execute(stmt)
        if result.rowcount == 0:
            raise NotFoundError(f"{self._table.name} record {record_id} not found.")
        return record

    def delete(self, *, filters: Mapping[str, Any]) -> int:
        stmt = self._filtered(sa.delete(self._table), filters)
        with self._connection() as conn:
            result = conn.execute(stmt)
        return result.rowcount


class SqlGarageStore(GarageStorePort):
    def __init__(self, engine, conn: Connection | None = None):
        self._engine = engine
        self._conn = conn

    def _records(self, model, mapper) -> SqlRecordStore:
        return SqlRecordStore(table=model.__table__, mapper=mapper, engine=self._engine, conn=self._conn)

    @property
    def vehicles(self) -> SqlRecordStore:
        return self._records(VehicleModel, map_row_to_vehicle)

    @property
    def mileages(self) -> SqlRecordStore:
        return self._records(MileageModel, map_row_to_mileage)

    @property
    def spendings(self) -> SqlRecordStore:
        return self._records(SpendingModel, map_row_to_spending)

    def execute_in_transaction(self, fn: Callable[[GarageStorePort], TResult]) -> TResult:
        if self._conn is not None:
            return fn(self)
        with self._engine.begin() as conn:
            return fn(SqlGarageStore(self._engine, conn=conn))
