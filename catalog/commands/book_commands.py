"""
Commands for Book business operations.

Example:
    ```python
    from catalog.commands.book_commands import ListBooksCommand, ListBooksInput

    async with session_scope(context.session_factory) as session:
        command = ListBooksCommand(
            AuthorRepository(session), BookRepository(session)
        )
        books = await command.execute(ListBooksInput(genre="refactoring"))
    ```
"""

from pydantic import BaseModel, Field
from sqlalchemy.exc import SQLAlchemyError

from catalog.commands.base import BaseCommand
from catalog.constants import BOOK_ADDED
from catalog.exceptions import InternalFailure
from catalog.logging import logger
from catalog.managers.notification_bus import NotificationBus
from catalog.repositories.author_repository import AuthorRepository
from catalog.repositories.book_repository import BookRepository
from catalog.schemas.catalog import BookWithAuthor

# ============================================================================
# Input Models
# ============================================================================


class ListBooksInput(BaseModel):  # type: ignore[misc]
    """Input model for listing books."""

    author: str | None = Field(
        default=None, description="Exact name of the author"
    )
    genre: str | None = Field(
        default=None, description="Exact, case-sensitive genre"
    )


class AddBookInput(BaseModel):  # type: ignore[misc]
    """Input model for adding a book."""

    title: str = Field(..., description="Book title")
    author: str = Field(..., description="Author name")
    published: int = Field(..., description="Publication year")
    genres: list[str] = Field(..., description="Genre names")


# ============================================================================
# Commands
# ============================================================================


class CountBooksCommand(BaseCommand[None, int]):
    """Command returning the total number of books."""

    def __init__(self, repository: BookRepository):
        self.repository = repository

    async def execute(self, input_data: None = None) -> int:
        return await self.repository.count()


class ListBooksCommand(BaseCommand[ListBooksInput, list[BookWithAuthor]]):
    """
    Command listing books with their authors resolved.

    The genre filter is evaluated by the store. Author references of the
    whole page are resolved with one batched lookup, and the author filter
    is applied afterwards on the resolved name. A reference that does not
    resolve yields a book with no author rather than a failure.
    """

    def __init__(self, authors: AuthorRepository, books: BookRepository):
        """
        Initialize command with repositories.

        Args:
            authors: Author repository for resolving references.
            books: Book repository for the listing itself.
        """
        self.authors = authors
        self.books = books

    async def execute(
        self, input_data: ListBooksInput
    ) -> list[BookWithAuthor]:
        """
        Execute command to list books.

        Args:
            input_data: Optional author and genre filters.

        Returns:
            Matching books ordered by ID.

        Raises:
            InternalFailure: If fetching books or authors fails.
        """
        try:
            books = await self.books.find(genre=input_data.genre)
            authors = await self.authors.get_many_by_ids(
                book.author_id for book in books
            )
        except SQLAlchemyError as ex:
            logger.error(f"Listing books failed: {ex}", exc_info=True)
            raise InternalFailure() from ex

        result = [
            BookWithAuthor.from_book(book, authors.get(book.author_id))
            for book in books
        ]

        if input_data.author is not None:
            result = [
                book
                for book in result
                if book.author is not None
                and book.author.name == input_data.author
            ]

        return result


class AddBookCommand(BaseCommand[AddBookInput, BookWithAuthor]):
    """
    Command adding a book, creating its author on first mention.

    The unit of work is committed before BOOK_ADDED is published, so
    subscribers never hear about a book that was rolled back.
    """

    def __init__(
        self,
        authors: AuthorRepository,
        books: BookRepository,
        bus: NotificationBus,
    ):
        """
        Initialize command with repositories and the notification bus.

        Args:
            authors: Author repository, used for get-or-create.
            books: Book repository; its session is committed here.
            bus: Bus the BOOK_ADDED event is published on.
        """
        self.authors = authors
        self.books = books
        self.bus = bus

    async def execute(self, input_data: AddBookInput) -> BookWithAuthor:
        """
        Execute command to add a book.

        Args:
            input_data: Book fields and the author name.

        Returns:
            The stored book with its author resolved.

        Raises:
            ValidationFailure: If the author or book is rejected.
        """
        # Must stay the first write: a lost race rolls the session back
        author, created = await self.authors.get_or_create(input_data.author)
        if created:
            logger.info(f"Created author '{author.name}' (id={author.id})")

        book = await self.books.create(
            title=input_data.title,
            published=input_data.published,
            genres=input_data.genres,
            author_id=author.id,  # type: ignore[arg-type]
        )
        await self.books.session.commit()

        added = BookWithAuthor.from_book(book, author)
        await self.bus.publish(BOOK_ADDED, added)
        return added
