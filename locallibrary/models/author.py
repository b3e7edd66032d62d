"""Author model."""

from datetime import date

from sqlalchemy import Date, String
from sqlalchemy.orm import Mapped, mapped_column

from locallibrary.core.database import Base
from locallibrary.models.dates import format_medium


class Author(Base):
    """Model representing a book author."""

    __tablename__ = "authors"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    family_name: Mapped[str] = mapped_column(String(100), nullable=False)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    date_of_death: Mapped[date | None] = mapped_column(Date, nullable=True)

    @property
    def url(self) -> str:
        return f"/catalog/author/{self.id}"

    @property
    def name(self) -> str:
        """Name in catalog order, e.g. ``Austen, Jane``."""
        return f"{self.family_name}, {self.first_name}"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.family_name}"

    @property
    def date_of_birth_formatted(self) -> str:
        return format_medium(self.date_of_birth)

    @property
    def date_of_death_formatted(self) -> str:
        return format_medium(self.date_of_death)

    @property
    def lifespan(self) -> str:
        if not self.date_of_birth and not self.date_of_death:
            return ""
        return f"{self.date_of_birth_formatted} - {self.date_of_death_formatted}"

    def __repr__(self) -> str:
        return f"<Author(id={self.id}, name='{self.name}')>"
