"""Book instance (copy) pages."""

from datetime import date
from typing import Any

from locallibrary.api.crud import Resource, build_router
from locallibrary.api.rendering import form_text
from locallibrary.models import Book, BookInstance, BookInstanceStatus
from locallibrary.services.store import CatalogStore
from locallibrary.services.validation import body

STATUS_CHOICES = [choice.value for choice in BookInstanceStatus]

rules = [
    body("book", "Book must be specified")
    .trim()
    .not_empty()
    .bail()
    .is_int()
    .with_message("Book must be chosen from the list.")
    .to_int(),
    body("imprint", "Imprint must be specified").trim().not_empty().escape(),
    body("status", "Invalid status")
    .optional(default=BookInstanceStatus.MAINTENANCE.value)
    .trim()
    .is_in(STATUS_CHOICES),
    body("due_back", "Invalid date").optional(default=date.today).trim().is_iso_date().to_date(),
]


async def list_book_instances(store: CatalogStore) -> list[BookInstance]:
    return await store.find(BookInstance, order_by=[BookInstance.id], populate=("book",))


def to_values(values: dict[str, Any]) -> dict[str, Any]:
    return {
        "book_id": values["book"],
        "imprint": values["imprint"],
        "status": BookInstanceStatus(values["status"]),
        "due_back": values["due_back"],
    }


def to_form(instance: BookInstance) -> dict[str, Any]:
    return {
        "book": str(instance.book_id),
        "imprint": form_text(instance.imprint),
        "status": instance.status.value,
        "due_back": instance.due_back.isoformat() if instance.due_back else "",
    }


def detail_title(instance: BookInstance) -> str:
    return f"Copy: {instance.book.title}" if instance.book else "Copy"


resource = Resource(
    model=BookInstance,
    name="bookinstance",
    plural="bookinstances",
    label="Book Instance",
    rules=rules,
    list_records=list_book_instances,
    to_values=to_values,
    to_form=to_form,
    detail_populate=("book",),
    form_sources=lambda store: {"books": store.find(Book, order_by=[Book.title])},
    detail_title=detail_title,
)

router = build_router(resource)
