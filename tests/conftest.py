"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator
from datetime import date

import pytest
from httpx import ASGITransport, AsyncClient

from locallibrary.core.database import create_engine, create_session_factory, init_db
from locallibrary.main import app
from locallibrary.models import Author, Book, BookInstance, BookInstanceStatus, Genre
from locallibrary.services.store import CatalogStore, get_store


@pytest.fixture
async def test_engine(tmp_path):
    """Create a test database engine backed by a temporary SQLite file.

    A file rather than ``:memory:`` so that concurrent store operations, each
    with its own connection, see the same data.
    """
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def store(test_engine) -> CatalogStore:
    """Create a catalog store bound to the test database."""
    return CatalogStore(create_session_factory(test_engine))


@pytest.fixture
async def client(store: CatalogStore) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client."""
    app.dependency_overrides[get_store] = lambda: store

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def sample_author(store: CatalogStore) -> Author:
    """Create a sample author."""
    return await store.create(
        Author,
        {
            "first_name": "Jane",
            "family_name": "Austen",
            "date_of_birth": date(1775, 12, 16),
            "date_of_death": date(1817, 7, 18),
        },
    )


@pytest.fixture
async def sample_genre(store: CatalogStore) -> Genre:
    """Create a sample genre."""
    return await store.create(Genre, {"name": "Fiction"})


@pytest.fixture
async def sample_book(store: CatalogStore, sample_author, sample_genre) -> Book:
    """Create a sample book by the sample author in the sample genre."""
    return await store.create(
        Book,
        {
            "title": "Emma",
            "author_id": sample_author.id,
            "summary": "A young woman meddles in the love lives of her friends.",
            "isbn": "9780141439587",
            "genres": [sample_genre.id],
        },
    )


@pytest.fixture
async def sample_book_instance(store: CatalogStore, sample_book) -> BookInstance:
    """Create a sample copy of the sample book."""
    return await store.create(
        BookInstance,
        {
            "book_id": sample_book.id,
            "imprint": "Penguin Classics, 2003",
            "status": BookInstanceStatus.LOANED,
            "due_back": date(2026, 11, 2),
        },
    )
