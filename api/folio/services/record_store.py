"""Generic record store: CRUD table access over SQLAlchemy async sessions.

Rows cross this boundary as plain dicts keyed by column name. Every
operation runs in its own session, so independent calls can be awaited
concurrently.
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import delete, inspect, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from folio.models import Blog, Education, Experience, Profile, Project

logger = logging.getLogger(__name__)

TABLES = {
    "profiles": Profile,
    "projects": Project,
    "education": Education,
    "experience": Experience,
    "blogs": Blog,
}

# Substrings that identify a unique-constraint violation across backends
DUPLICATE_KEY_MARKERS = ("duplicate key", "unique constraint", "UNIQUE constraint failed")

Row = dict[str, Any]


class RecordStoreError(Exception):
    """A store operation failed (transport, permission or constraint)."""

    def __init__(self, message: str, *, table: str | None = None, code: str = "store_error"):
        super().__init__(message)
        self.message = message
        self.table = table
        self.code = code

    @property
    def is_duplicate_key(self) -> bool:
        return self.code == "duplicate_key"


def is_duplicate_key(error: BaseException) -> bool:
    """Check an error's signature for a duplicate-key violation."""
    if isinstance(error, RecordStoreError):
        return error.is_duplicate_key
    message = str(error)
    return any(marker in message for marker in DUPLICATE_KEY_MARKERS)


def _model_for(table: str):
    try:
        return TABLES[table]
    except KeyError:
        raise RecordStoreError(f"Unknown table '{table}'", table=table, code="unknown_table") from None


def _row_to_dict(instance) -> Row:
    return {attr.key: getattr(instance, attr.key) for attr in inspect(instance).mapper.column_attrs}


def _clean(model, values: Mapping[str, Any]) -> Row:
    """Drop keys that are not columns of ``model``."""
    columns = {attr.key for attr in inspect(model).column_attrs}
    return {key: value for key, value in values.items() if key in columns}


def _where(model, filters: Mapping[str, Any] | None, exclude: Mapping[str, Any] | None = None):
    clauses = []
    for key, value in (filters or {}).items():
        column = getattr(model, key)
        clauses.append(column.is_(None) if value is None else column == value)
    for key, value in (exclude or {}).items():
        column = getattr(model, key)
        clauses.append(column.is_not(None) if value is None else column != value)
    return clauses


def _order(model, order: Sequence[str] | None):
    """Translate ``["-created_at", "title"]`` into ORDER BY clauses."""
    clauses = []
    for spec in order or ():
        if spec.startswith("-"):
            clauses.append(getattr(model, spec[1:]).desc())
        else:
            clauses.append(getattr(model, spec).asc())
    return clauses


def _wrap(exc: SQLAlchemyError, table: str) -> RecordStoreError:
    message = str(getattr(exc, "orig", None) or exc)
    if isinstance(exc, IntegrityError):
        code = "duplicate_key" if is_duplicate_key(exc) else "integrity_error"
        return RecordStoreError(message, table=table, code=code)
    return RecordStoreError(message, table=table)


class SqlRecordStore:
    """Record store backed by an ``async_sessionmaker``."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def select(
        self,
        table: str,
        filters: Mapping[str, Any] | None = None,
        order: Sequence[str] | None = None,
        *,
        exclude: Mapping[str, Any] | None = None,
        limit: int | None = None,
    ) -> list[Row]:
        """Return all rows matching ``filters`` (equality) and ``exclude`` (inequality)."""
        model = _model_for(table)
        query = select(model).where(*_where(model, filters, exclude)).order_by(*_order(model, order))
        if limit is not None:
            query = query.limit(limit)
        try:
            async with self.session_factory() as session:
                result = await session.execute(query)
                return [_row_to_dict(row) for row in result.scalars().all()]
        except SQLAlchemyError as exc:
            raise _wrap(exc, table) from exc

    async def select_one(
        self,
        table: str,
        filters: Mapping[str, Any],
        order: Sequence[str] | None = None,
    ) -> Row | None:
        """Return the first matching row, or None."""
        rows = await self.select(table, filters, order, limit=1)
        return rows[0] if rows else None

    async def insert(self, table: str, row: Mapping[str, Any]) -> Row:
        model = _model_for(table)
        try:
            async with self.session_factory() as session:
                instance = model(**_clean(model, row))
                session.add(instance)
                await session.commit()
                await session.refresh(instance)
                return _row_to_dict(instance)
        except SQLAlchemyError as exc:
            raise _wrap(exc, table) from exc

    async def update(
        self,
        table: str,
        filters: Mapping[str, Any],
        patch: Mapping[str, Any],
    ) -> list[Row]:
        """Apply ``patch`` to every row matching ``filters``; return the updated rows."""
        model = _model_for(table)
        values = _clean(model, patch)
        where = _where(model, filters)
        try:
            async with self.session_factory() as session:
                if values:
                    await session.execute(update(model).where(*where).values(**values))
                    await session.commit()
                result = await session.execute(select(model).where(*where))
                return [_row_to_dict(row) for row in result.scalars().all()]
        except SQLAlchemyError as exc:
            raise _wrap(exc, table) from exc

    async def delete(self, table: str, filters: Mapping[str, Any]) -> int:
        """Delete rows matching ``filters``; return how many were removed."""
        model = _model_for(table)
        try:
            async with self.session_factory() as session:
                result = await session.execute(delete(model).where(*_where(model, filters)))
                await session.commit()
                return result.rowcount or 0
        except SQLAlchemyError as exc:
            raise _wrap(exc, table) from exc

    async def upsert(
        self,
        table: str,
        row: Mapping[str, Any],
        conflict_key: str = "id",
        *,
        ignore_duplicates: bool = False,
    ) -> Row | None:
        """
        Insert ``row`` or, when ``conflict_key`` already exists, update it.

        With ``ignore_duplicates`` an existing row is left untouched. Returns
        the stored row.
        """
        model = _model_for(table)
        values = _clean(model, row)
        # Column defaults (timestamps, generated ids) are applied by the ORM,
        # not by a Core INSERT, so fill them in explicitly.
        for column in inspect(model).columns:
            if column.key not in values and column.default is not None and column.default.is_callable:
                if column.key != conflict_key:
                    values[column.key] = column.default.arg(None)
        try:
            async with self.session_factory() as session:
                dialect = session.bind.dialect.name
                insert = postgresql.insert if dialect == "postgresql" else sqlite.insert
                statement = insert(model).values(**values)
                if ignore_duplicates:
                    statement = statement.on_conflict_do_nothing(index_elements=[conflict_key])
                else:
                    changes = {key: value for key, value in _clean(model, row).items() if key != conflict_key}
                    if changes:
                        statement = statement.on_conflict_do_update(
                            index_elements=[conflict_key], set_=changes
                        )
                    else:
                        statement = statement.on_conflict_do_nothing(index_elements=[conflict_key])
                await session.execute(statement)
                await session.commit()
                result = await session.execute(
                    select(model).where(getattr(model, conflict_key) == values[conflict_key])
                )
                stored = result.scalar_one_or_none()
                return _row_to_dict(stored) if stored is not None else None
        except SQLAlchemyError as exc:
            raise _wrap(exc, table) from exc
