"""
Repository for Book records and their genre index.

Books keep their genres on the record itself (ordered) and mirror them
into the `book_genre` index so genre filters run inside the store.
"""

from sqlalchemy.exc import IntegrityError
from sqlmodel import col, func, select
from sqlmodel.ext.asyncio.session import AsyncSession

from catalog.exceptions import ValidationFailure
from catalog.models.book import Book, BookGenre
from catalog.repositories.base import BaseRepository


def normalize_genres(genres: list[str]) -> list[str]:
    """
    De-duplicate genres keeping the first occurrence of each.

    Args:
        genres: Genre names as received.

    Returns:
        Ordered list without duplicates. Matching is exact and
        case-sensitive, so "SciFi" and "scifi" are both kept.
    """
    return list(dict.fromkeys(genres))


class BookRepository(BaseRepository[Book]):
    """Repository for Book entity operations."""

    def __init__(self, session: AsyncSession):
        """
        Initialize Book repository.

        Args:
            session: Database session for executing queries.
        """
        super().__init__(session, Book)

    async def find(self, genre: str | None = None) -> list[Book]:
        """
        List books, optionally restricted to one genre.

        Args:
            genre: Exact, case-sensitive genre name. None lists every book.

        Returns:
            Matching books ordered by ID; an unknown genre gives an
            empty list.
        """
        stmt = select(Book)
        if genre is not None:
            stmt = stmt.join(
                BookGenre, col(BookGenre.book_id) == col(Book.id)
            ).where(BookGenre.genre == genre)
        stmt = stmt.order_by(col(Book.id))

        result = await self.session.exec(stmt)
        return list(result.all())

    async def count_by_author(self, author_id: int) -> int:
        """
        Count books referencing an author.

        Args:
            author_id: Identifier of the author.

        Returns:
            Number of books whose author reference equals `author_id`.
        """
        stmt = (
            select(func.count())
            .select_from(Book)
            .where(Book.author_id == author_id)
        )
        result = await self.session.exec(stmt)
        return int(result.one())

    async def create(
        self, title: str, published: int, genres: list[str], author_id: int
    ) -> Book:
        """
        Create a book and its genre index entries.

        Args:
            title: Non-empty title.
            published: Publication year.
            genres: Non-empty list of genre names.
            author_id: Identifier of an existing author.

        Returns:
            The created book with its generated ID.

        Raises:
            ValidationFailure: If the title or genres are empty, or the
                store rejects the record.
        """
        if not title or not title.strip():
            raise ValidationFailure("Saving book failed", "title", title)

        genres = normalize_genres(genres)
        if not genres or any(not genre for genre in genres):
            raise ValidationFailure("Saving book failed", "genres", genres)

        try:
            book = await self.add(
                Book(
                    title=title,
                    published=published,
                    genres=genres,
                    author_id=author_id,
                )
            )
            self.session.add_all(
                [BookGenre(book_id=book.id, genre=genre) for genre in genres]
            )
            await self.session.flush()
        except IntegrityError as ex:
            raise ValidationFailure("Saving book failed", "title", title) from ex

        return book
