"""Genre pages."""

from typing import Any

from locallibrary.api.crud import Resource, build_router
from locallibrary.api.rendering import form_text
from locallibrary.models import Book, Genre
from locallibrary.services.store import CatalogStore
from locallibrary.services.validation import body

rules = [
    body("name")
    .trim()
    .not_empty()
    .with_message("Genre name required")
    .bail()
    .escape()
    .is_length(min=3, max=100)
    .with_message("Genre name must be between 3 and 100 characters."),
]


async def list_genres(store: CatalogStore) -> list[Genre]:
    return await store.find(Genre, order_by=[Genre.name])


async def books_in_genre(store: CatalogStore, genre_id: int) -> list[Book]:
    return await store.find(Book, Book.genres.any(Genre.id == genre_id), order_by=[Book.title])


async def find_same_name(store: CatalogStore, values: dict[str, Any]) -> Genre | None:
    # Exact, case-sensitive match on the sanitized name
    return await store.find_one(Genre, Genre.name == values["name"])


resource = Resource(
    model=Genre,
    name="genre",
    plural="genres",
    label="Genre",
    rules=rules,
    list_records=list_genres,
    to_values=lambda values: {"name": values["name"]},
    to_form=lambda genre: {"name": form_text(genre.name)},
    dependents=books_in_genre,
    find_existing=find_same_name,
)

router = build_router(resource)
