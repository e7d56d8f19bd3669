"""SQL Document Store — DocumentCollection adapter over one ORM model.

Invariants:
    - Every method opens its own session and commits before returning: no call
      shares a transaction with another (the engine must not assume atomicity)
    - Documents are returned as plain dicts of column name -> value
    - Unknown field names in filters or updates raise ValueError (programming error)
    - Database failures surface as StoreFailureError via DatabaseSessionManager

Design Decisions:
    - One generic class, two instances (tasks, users): the engine only needs the
      six CRUD calls, so no per-entity repository subclasses
    - update_many is a single UPDATE ... WHERE statement, not read-modify-write
"""

from typing import Any, Mapping

from sqlalchemy import select, update
from sqlalchemy.sql.elements import ColumnElement

from assignment_tracker.core.repository_protocols import Filters
from assignment_tracker.db.base import Base
from assignment_tracker.infrastructure.database import DatabaseSessionManager

_MEMBERSHIP_TYPES = (list, tuple, set, frozenset)


class SqlDocumentCollection:
    """Implements core.repository_protocols.DocumentCollection for one table."""

    def __init__(self, manager: DatabaseSessionManager, model: type[Base]):
        self._manager = manager
        self._model = model
        self._columns = {column.key for column in model.__table__.columns}

    @property
    def name(self) -> str:
        return self._model.__tablename__

    async def find_by_id(self, doc_id: str) -> dict | None:
        async with self._manager.session() as db:
            row = await db.get(self._model, doc_id)
            return self._to_document(row) if row is not None else None

    async def find(self, filters: Filters) -> list[dict]:
        query = select(self._model)
        conditions = self._build_conditions(filters)
        if conditions:
            query = query.where(*conditions)
        query = query.order_by(self._model.date_created, self._model.id)
        async with self._manager.session() as db:
            result = await db.execute(query)
            return [self._to_document(row) for row in result.scalars().all()]

    async def insert(self, document: Mapping[str, Any]) -> dict:
        self._check_fields(document)
        row = self._model(**document)
        async with self._manager.session() as db:
            db.add(row)
            await db.commit()
            return self._to_document(row)

    async def update_by_id(
        self, doc_id: str, fields: Mapping[str, Any],
    ) -> dict | None:
        self._check_update_fields(fields)
        async with self._manager.session() as db:
            row = await db.get(self._model, doc_id)
            if row is None:
                return None
            for key, value in fields.items():
                setattr(row, key, value)
            await db.commit()
            return self._to_document(row)

    async def update_many(
        self, filters: Filters, fields: Mapping[str, Any],
    ) -> int:
        self._check_update_fields(fields)
        statement = update(self._model).values(**fields)
        conditions = self._build_conditions(filters)
        if conditions:
            statement = statement.where(*conditions)
        statement = statement.execution_options(synchronize_session=False)
        async with self._manager.session() as db:
            result = await db.execute(statement)
            await db.commit()
            return result.rowcount

    async def delete_by_id(self, doc_id: str) -> dict | None:
        async with self._manager.session() as db:
            row = await db.get(self._model, doc_id)
            if row is None:
                return None
            document = self._to_document(row)
            await db.delete(row)
            await db.commit()
            return document

    # ─── helpers ────────────────────────────────────────────────

    def _to_document(self, row: Base) -> dict:
        document = {key: getattr(row, key) for key in self._columns}
        if "pending_tasks" in document:
            document["pending_tasks"] = list(document["pending_tasks"] or [])
        return document

    def _build_conditions(self, filters: Filters) -> list[ColumnElement[bool]]:
        self._check_fields(filters)
        conditions = []
        for key, value in filters.items():
            column = getattr(self._model, key)
            if isinstance(value, _MEMBERSHIP_TYPES):
                conditions.append(column.in_(list(value)))
            elif value is None:
                conditions.append(column.is_(None))
            else:
                conditions.append(column == value)
        return conditions

    def _check_fields(self, fields: Mapping[str, Any]) -> None:
        unknown = set(fields) - self._columns
        if unknown:
            raise ValueError(
                f"Unknown field(s) for {self.name}: {', '.join(sorted(unknown))}",
            )

    def _check_update_fields(self, fields: Mapping[str, Any]) -> None:
        self._check_fields(fields)
        if "id" in fields:
            raise ValueError(f"Document id is immutable ({self.name})")
