"""Author pages."""

from typing import Any

from locallibrary.api.crud import Resource, build_router
from locallibrary.api.rendering import form_text
from locallibrary.models import Author, Book
from locallibrary.services.store import CatalogStore
from locallibrary.services.validation import body

rules = [
    body("first_name")
    .trim()
    .not_empty()
    .with_message("First name must be specified.")
    .bail()
    .is_length(max=100)
    .with_message("First name must be at most 100 characters.")
    .escape()
    .is_alphanumeric()
    .with_message("First name has non-alphanumeric characters."),
    body("family_name")
    .trim()
    .not_empty()
    .with_message("Family name must be specified.")
    .bail()
    .is_length(max=100)
    .with_message("Family name must be at most 100 characters.")
    .escape()
    .is_alphanumeric()
    .with_message("Family name has non-alphanumeric characters."),
    body("date_of_birth", "Invalid date of birth").optional().trim().is_iso_date().to_date(),
    body("date_of_death", "Invalid date of death").optional().trim().is_iso_date().to_date(),
]


async def list_authors(store: CatalogStore) -> list[Author]:
    return await store.find(Author, order_by=[Author.family_name, Author.first_name])


async def books_by_author(store: CatalogStore, author_id: int) -> list[Book]:
    return await store.find(Book, Book.author_id == author_id, order_by=[Book.title])


def to_values(values: dict[str, Any]) -> dict[str, Any]:
    return {
        "first_name": values["first_name"],
        "family_name": values["family_name"],
        "date_of_birth": values["date_of_birth"],
        "date_of_death": values["date_of_death"],
    }


def to_form(author: Author) -> dict[str, Any]:
    return {
        "first_name": form_text(author.first_name),
        "family_name": form_text(author.family_name),
        "date_of_birth": author.date_of_birth.isoformat() if author.date_of_birth else "",
        "date_of_death": author.date_of_death.isoformat() if author.date_of_death else "",
    }


resource = Resource(
    model=Author,
    name="author",
    plural="authors",
    label="Author",
    rules=rules,
    list_records=list_authors,
    to_values=to_values,
    to_form=to_form,
    dependents=books_by_author,
)

router = build_router(resource)
