"""
Read models produced by the catalog commands.

These projections are computed on every read and never persisted. They
decouple the GraphQL types from the table models and double as the
payload of BOOK_ADDED notifications.
"""

from pydantic import BaseModel, ConfigDict

from catalog.models.author import Author
from catalog.models.book import Book


class AuthorWithCount(BaseModel):  # type: ignore[misc]
    """
    An author together with the number of books referencing it.

    `book_count` is None when it was not computed up front; readers then
    count on demand.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    born: int | None = None
    book_count: int | None = None

    @classmethod
    def from_author(
        cls, author: Author, book_count: int | None = None
    ) -> "AuthorWithCount":
        return cls(
            id=author.id,
            name=author.name,
            born=author.born,
            book_count=book_count,
        )


class BookWithAuthor(BaseModel):  # type: ignore[misc]
    """A book with its author reference resolved (None if dangling)."""

    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    published: int
    genres: list[str]
    author: AuthorWithCount | None = None

    @classmethod
    def from_book(
        cls, book: Book, author: Author | None
    ) -> "BookWithAuthor":
        return cls(
            id=book.id,
            title=book.title,
            published=book.published,
            genres=list(book.genres),
            author=AuthorWithCount.from_author(author) if author else None,
        )
