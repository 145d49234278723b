from sqlalchemy import JSON, Column
from sqlmodel import Field

from catalog.models.base import BaseModel


class Book(BaseModel, table=True):
    """
    SQLModel representing a book record.

    The author reference is a bare integer column without a foreign key;
    readers must tolerate references that no longer resolve.

    Attributes:
        id: Primary key identifier for the book
        title: Non-empty book title
        published: Publication year
        genres: Ordered, de-duplicated list of genre names
        author_id: Identifier of the referenced Author
    """

    __table_args__ = {"extend_existing": True}

    id: int | None = Field(default=None, primary_key=True)
    title: str = Field(nullable=False)
    published: int
    genres: list[str] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    author_id: int = Field(index=True)


class BookGenre(BaseModel, table=True):
    """
    Genre index entry, one row per (book, genre) pair.

    Mirrors `Book.genres` so that genre filters are evaluated by the store
    with exact, case-sensitive equality.
    """

    __tablename__ = "book_genre"
    __table_args__ = {"extend_existing": True}

    book_id: int = Field(primary_key=True)
    genre: str = Field(primary_key=True, index=True)
