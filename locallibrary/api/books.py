"""Book pages."""

from typing import Any

from locallibrary.api.crud import Resource, build_router
from locallibrary.api.rendering import form_text
from locallibrary.models import Author, Book, BookInstance, Genre
from locallibrary.services.store import CatalogStore
from locallibrary.services.validation import body

rules = [
    body("title", "Title must not be empty.").trim().not_empty().escape(),
    body("author", "Author must not be empty.")
    .trim()
    .not_empty()
    .bail()
    .is_int()
    .with_message("Author must be chosen from the list.")
    .to_int(),
    body("summary", "Summary must not be empty.").trim().not_empty().escape(),
    body("isbn", "ISBN must not be empty.")
    .trim()
    .not_empty()
    .bail()
    .escape()
    .is_length(max=20)
    .with_message("ISBN must be at most 20 characters."),
    body("genre", "Genre must be chosen from the list.").each().trim().is_int().to_int(),
]


async def list_books(store: CatalogStore) -> list[Book]:
    books = await store.find(Book, populate=("author",))
    return sorted(books, key=lambda book: book.title.casefold())


async def copies_of_book(store: CatalogStore, book_id: int) -> list[BookInstance]:
    return await store.find(BookInstance, BookInstance.book_id == book_id, order_by=[BookInstance.id])


def form_sources(store: CatalogStore) -> dict:
    return {
        "authors": store.find(Author, order_by=[Author.family_name, Author.first_name]),
        "genres": store.find(Genre, order_by=[Genre.name]),
    }


def to_values(values: dict[str, Any]) -> dict[str, Any]:
    return {
        "title": values["title"],
        "author_id": values["author"],
        "summary": values["summary"],
        "isbn": values["isbn"],
        "genres": values["genre"],
    }


def to_form(book: Book) -> dict[str, Any]:
    return {
        "title": form_text(book.title),
        "author": str(book.author_id),
        "summary": form_text(book.summary),
        "isbn": form_text(book.isbn),
        "genre": [str(genre.id) for genre in book.genres],
    }


resource = Resource(
    model=Book,
    name="book",
    plural="books",
    label="Book",
    rules=rules,
    list_records=list_books,
    to_values=to_values,
    to_form=to_form,
    dependents=copies_of_book,
    detail_populate=("author", "genres"),
    form_populate=("genres",),
    form_sources=form_sources,
    detail_title=lambda book: book.title,
)

router = build_router(resource)
