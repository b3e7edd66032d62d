"""Unit tests for database models."""

from datetime import date

from locallibrary.models import Author, BookInstance, BookInstanceStatus, Genre
from locallibrary.models.dates import format_medium


class TestAuthorModel:
    """Tests for the Author model."""

    def test_names(self):
        author = Author(id=3, first_name="Jane", family_name="Austen")
        assert author.name == "Austen, Jane"
        assert author.full_name == "Jane Austen"
        assert author.url == "/catalog/author/3"

    def test_lifespan_without_dates(self):
        author = Author(first_name="Jane", family_name="Austen")
        assert author.date_of_birth_formatted == ""
        assert author.lifespan == ""

    def test_lifespan_with_dates(self):
        author = Author(
            first_name="Jane",
            family_name="Austen",
            date_of_birth=date(1775, 12, 16),
            date_of_death=date(1817, 7, 18),
        )
        assert author.lifespan == "Dec 16, 1775 - Jul 18, 1817"

    def test_lifespan_living_author(self):
        author = Author(first_name="Zadie", family_name="Smith", date_of_birth=date(1975, 10, 25))
        assert author.lifespan == "Oct 25, 1975 - "

    async def test_stored_author(self, sample_author):
        assert sample_author.id is not None
        assert sample_author.url == f"/catalog/author/{sample_author.id}"
        assert "Austen" in repr(sample_author)


class TestGenreModel:
    """Tests for the Genre model."""

    def test_url(self):
        assert Genre(id=5, name="Poetry").url == "/catalog/genre/5"


class TestBookModel:
    """Tests for the Book model."""

    async def test_url_and_repr(self, sample_book):
        assert sample_book.url == f"/catalog/book/{sample_book.id}"
        assert "Emma" in repr(sample_book)

    async def test_genres_are_stored(self, sample_book, sample_genre):
        assert [genre.id for genre in sample_book.genres] == [sample_genre.id]


class TestBookInstanceModel:
    """Tests for the BookInstance model."""

    def test_due_back_formatted(self):
        instance = BookInstance(id=9, due_back=date(2026, 10, 19))
        assert instance.due_back_formatted == "Oct 19, 2026"
        assert instance.url == "/catalog/bookinstance/9"

    async def test_defaults_applied_on_insert(self, store, sample_book):
        instance = await store.create(BookInstance, {"book_id": sample_book.id, "imprint": "Vintage"})
        assert instance.status == BookInstanceStatus.MAINTENANCE
        assert instance.due_back == date.today()

    def test_status_values(self):
        assert [status.value for status in BookInstanceStatus] == [
            "Available",
            "Maintenance",
            "Loaned",
            "Reserved",
        ]


def test_format_medium():
    assert format_medium(date(2026, 1, 5)) == "Jan 5, 2026"
    assert format_medium(None) == ""
