"""Integration tests for the catalog home page and the error boundary."""

from unittest.mock import AsyncMock

from httpx import AsyncClient
from sqlalchemy.exc import OperationalError

from locallibrary.models import BookInstance, BookInstanceStatus


class TestCatalogHome:
    """Tests for the home page."""

    async def test_root_redirects_to_catalog(self, client: AsyncClient):
        response = await client.get("/", follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/catalog/"

    async def test_home_empty(self, client: AsyncClient):
        response = await client.get("/catalog/")
        assert response.status_code == 200
        assert "Local Library Home" in response.text
        assert '<span id="book-count">0</span>' in response.text

    async def test_home_counts(self, client: AsyncClient, store, sample_book_instance, sample_book):
        await store.create(
            BookInstance,
            {"book_id": sample_book.id, "imprint": "Vintage", "status": BookInstanceStatus.AVAILABLE},
        )

        response = await client.get("/catalog/")
        assert response.status_code == 200
        assert '<span id="book-count">1</span>' in response.text
        assert '<span id="book-instance-count">2</span>' in response.text
        assert '<span id="book-instance-available-count">1</span>' in response.text
        assert '<span id="author-count">1</span>' in response.text
        assert '<span id="genre-count">1</span>' in response.text


class TestErrorPages:
    """Tests for the HTML error boundary."""

    async def test_unknown_route(self, client: AsyncClient):
        response = await client.get("/catalog/nowhere")
        assert response.status_code == 404
        assert "text/html" in response.headers["content-type"]

    async def test_store_failure_renders_error_page(self, client: AsyncClient, store):
        store.find = AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("db down")))

        response = await client.get("/catalog/genres")
        assert response.status_code == 500
        assert "Something went wrong" in response.text

    async def test_failure_in_parallel_lookup_aborts_detail(
        self, client: AsyncClient, store, sample_author
    ):
        store.find = AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("db down")))

        response = await client.get(sample_author.url)
        assert response.status_code == 500
