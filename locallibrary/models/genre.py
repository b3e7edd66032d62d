"""Genre model."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from locallibrary.core.database import Base


class Genre(Base):
    """Model representing a book genre."""

    __tablename__ = "genres"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    @property
    def url(self) -> str:
        return f"/catalog/genre/{self.id}"

    def __repr__(self) -> str:
        return f"<Genre(id={self.id}, name='{self.name}')>"
