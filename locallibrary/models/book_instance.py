"""Book instance (physical copy) model."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import Date, ForeignKey, String
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from locallibrary.core.database import Base
from locallibrary.models.dates import format_medium

if TYPE_CHECKING:
    from locallibrary.models.book import Book


class BookInstanceStatus(str, Enum):
    """Availability of a physical copy."""

    AVAILABLE = "Available"
    MAINTENANCE = "Maintenance"
    LOANED = "Loaned"
    RESERVED = "Reserved"


class BookInstance(Base):
    """Model representing one physical copy of a book."""

    __tablename__ = "book_instances"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    book_id: Mapped[int] = mapped_column(ForeignKey("books.id"), nullable=False)
    imprint: Mapped[str] = mapped_column(String(500), nullable=False)
    status: Mapped[BookInstanceStatus] = mapped_column(
        SQLEnum(BookInstanceStatus),
        default=BookInstanceStatus.MAINTENANCE,
        nullable=False,
    )
    due_back: Mapped[date] = mapped_column(Date, default=date.today, nullable=False)

    book: Mapped[Book] = relationship("Book")

    @property
    def url(self) -> str:
        return f"/catalog/bookinstance/{self.id}"

    @property
    def due_back_formatted(self) -> str:
        return format_medium(self.due_back)

    def __repr__(self) -> str:
        return f"<BookInstance(id={self.id}, book_id={self.book_id}, status='{self.status}')>"
