"""Book model and its genre association table."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Column, ForeignKey, String, Table, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from locallibrary.core.database import Base

if TYPE_CHECKING:
    from locallibrary.models.author import Author
    from locallibrary.models.genre import Genre


book_genres = Table(
    "book_genres",
    Base.metadata,
    Column("book_id", ForeignKey("books.id", ondelete="CASCADE"), primary_key=True),
    Column("genre_id", ForeignKey("genres.id", ondelete="CASCADE"), primary_key=True),
)


class Book(Base):
    """Model representing a catalogued title."""

    __tablename__ = "books"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    author_id: Mapped[int] = mapped_column(ForeignKey("authors.id"), nullable=False)
    summary: Mapped[str] = mapped_column(Text, nullable=False)
    isbn: Mapped[str] = mapped_column(String(20), nullable=False)

    # References are loaded on demand by the store (populate=...)
    author: Mapped[Author] = relationship("Author")
    genres: Mapped[list[Genre]] = relationship(
        "Genre",
        secondary=book_genres,
        passive_deletes=True,
        order_by="Genre.name",
    )

    @property
    def url(self) -> str:
        return f"/catalog/book/{self.id}"

    def __repr__(self) -> str:
        return f"<Book(id={self.id}, title='{self.title}')>"
