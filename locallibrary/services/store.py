"""Catalog store: CRUD over the catalog models, one session per operation."""

import asyncio
import logging
from collections.abc import Awaitable, Iterable, Sequence
from typing import Any, TypeVar

from sqlalchemy import ColumnElement, func, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from locallibrary.core.database import Base, async_session
from locallibrary.core.tracing import get_tracer

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)

ModelT = TypeVar("ModelT", bound=Base)


async def fetch_all(**operations: Awaitable[Any]) -> dict[str, Any]:
    """Run independent store operations concurrently and collect their results.

    Results are keyed like the keyword arguments. The first failure is raised
    to the caller; the other operations are left to finish on their own.

    Example:
        results = await fetch_all(
            author=store.get(Author, author_id),
            books=store.find(Book, Book.author_id == author_id),
        )
    """
    with tracer.start_as_current_span("catalog.fetch_all") as span:
        span.set_attribute("catalog.operations", ",".join(operations))
        values = await asyncio.gather(*operations.values())
    return dict(zip(operations, values))


class CatalogStore:
    """Persistence operations for catalog records.

    Every call opens its own short-lived session, so calls can be issued
    concurrently with :func:`fetch_all`. Records come back detached; any
    reference a caller wants to read must be requested through ``populate``.

    Population contract: a populated single reference whose target is gone
    reads as ``None``; missing targets of a list reference are omitted. When
    writing, list references are given as identifiers and unknown
    identifiers are dropped.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @staticmethod
    def _populate(model: type[ModelT], populate: Iterable[str]) -> list:
        return [selectinload(getattr(model, name)) for name in populate]

    @staticmethod
    def _list_references(model: type[Base]) -> dict[str, type[Base]]:
        return {
            rel.key: rel.mapper.class_
            for rel in inspect(model).relationships
            if rel.uselist
        }

    async def _resolve_references(
        self,
        session: AsyncSession,
        model: type[Base],
        values: dict[str, Any],
    ) -> dict[str, Any]:
        resolved = dict(values)
        for key, target in self._list_references(model).items():
            if key not in resolved:
                continue
            ids = list(resolved[key] or [])
            if not ids:
                resolved[key] = []
                continue
            result = await session.execute(select(target).where(target.id.in_(ids)))
            resolved[key] = list(result.scalars().all())
        return resolved

    async def get(
        self,
        model: type[ModelT],
        record_id: int,
        populate: Sequence[str] = (),
    ) -> ModelT | None:
        """Fetch one record by identifier, or None."""
        async with self._session_factory() as session:
            return await session.get(model, record_id, options=self._populate(model, populate))

    async def find(
        self,
        model: type[ModelT],
        *criteria: ColumnElement[bool],
        order_by: Sequence[Any] = (),
        populate: Sequence[str] = (),
    ) -> list[ModelT]:
        """Fetch every record matching the criteria, in the requested order."""
        query = select(model).where(*criteria).options(*self._populate(model, populate))
        if order_by:
            query = query.order_by(*order_by)
        async with self._session_factory() as session:
            result = await session.execute(query)
            return list(result.scalars().all())

    async def find_one(
        self,
        model: type[ModelT],
        *criteria: ColumnElement[bool],
    ) -> ModelT | None:
        """Fetch the first record matching the criteria, or None."""
        query = select(model).where(*criteria).order_by(model.id).limit(1)
        async with self._session_factory() as session:
            result = await session.execute(query)
            return result.scalars().first()

    async def count(self, model: type[Base], *criteria: ColumnElement[bool]) -> int:
        query = select(func.count()).select_from(model).where(*criteria)
        async with self._session_factory() as session:
            result = await session.execute(query)
            return result.scalar() or 0

    async def create(self, model: type[ModelT], values: dict[str, Any]) -> ModelT:
        """Insert a new record and return it with its identifier assigned."""
        async with self._session_factory() as session:
            record = model(**await self._resolve_references(session, model, values))
            session.add(record)
            await session.commit()
        logger.info(f"Created {record!r}")
        return record

    async def replace(
        self,
        model: type[ModelT],
        record_id: int,
        values: dict[str, Any],
    ) -> ModelT | None:
        """Overwrite the given fields of a record in place; None if it is gone."""
        list_refs = [key for key in self._list_references(model) if key in values]
        async with self._session_factory() as session:
            record = await session.get(model, record_id, options=self._populate(model, list_refs))
            if record is None:
                return None
            for key, value in (await self._resolve_references(session, model, values)).items():
                setattr(record, key, value)
            await session.commit()
        logger.info(f"Updated {record!r}")
        return record

    async def delete(self, model: type[Base], record_id: int) -> bool:
        """Delete a record by identifier. Returns False if it did not exist."""
        list_refs = list(self._list_references(model))
        async with self._session_factory() as session:
            record = await session.get(model, record_id, options=self._populate(model, list_refs))
            if record is None:
                return False
            await session.delete(record)
            await session.commit()
        logger.info(f"Deleted {model.__name__} {record_id}")
        return True


catalog_store = CatalogStore(async_session)


async def get_store() -> CatalogStore:
    """Dependency that provides the catalog store."""
    return catalog_store
