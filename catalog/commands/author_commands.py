"""
Commands for Author business operations.

Example:
    ```python
    from catalog.commands.author_commands import (
        EditAuthorCommand,
        EditAuthorInput,
    )

    async with session_scope(context.session_factory) as session:
        command = EditAuthorCommand(AuthorRepository(session))
        author = await command.execute(
            EditAuthorInput(name="Sandi Metz", set_born_to=1953)
        )
    ```
"""

from collections import Counter

from pydantic import BaseModel, Field

from catalog.commands.base import BaseCommand
from catalog.repositories.author_repository import AuthorRepository
from catalog.repositories.book_repository import BookRepository
from catalog.schemas.catalog import AuthorWithCount

# ============================================================================
# Input Models
# ============================================================================


class EditAuthorInput(BaseModel):  # type: ignore[misc]
    """Input model for setting an author's birth year."""

    name: str = Field(..., description="Exact name of the author")
    set_born_to: int = Field(..., description="New birth year")


# ============================================================================
# Commands
# ============================================================================


class CountAuthorsCommand(BaseCommand[None, int]):
    """Command returning the total number of authors."""

    def __init__(self, repository: AuthorRepository):
        self.repository = repository

    async def execute(self, input_data: None = None) -> int:
        return await self.repository.count()


class ListAuthorsCommand(BaseCommand[None, list[AuthorWithCount]]):
    """
    Command listing every author with a freshly computed book count.

    Both collections are read once and joined in memory, so the counts
    reflect the snapshot taken by this call.
    """

    def __init__(self, authors: AuthorRepository, books: BookRepository):
        self.authors = authors
        self.books = books

    async def execute(self, input_data: None = None) -> list[AuthorWithCount]:
        authors = await self.authors.get_all()
        books = await self.books.get_all()
        counts = Counter(book.author_id for book in books)

        return [
            AuthorWithCount.from_author(author, counts.get(author.id, 0))  # type: ignore[arg-type]
            for author in authors
        ]


class CountAuthorBooksCommand(BaseCommand[int, int]):
    """Command counting the books of a single author."""

    def __init__(self, repository: BookRepository):
        self.repository = repository

    async def execute(self, input_data: int) -> int:
        return await self.repository.count_by_author(input_data)


class EditAuthorCommand(BaseCommand[EditAuthorInput, AuthorWithCount | None]):
    """
    Command overwriting an author's birth year.

    An unknown name is not an error: nothing is changed and None is
    returned.
    """

    def __init__(self, repository: AuthorRepository):
        """
        Initialize command with repository.

        Args:
            repository: Author repository for data access.
        """
        self.repository = repository

    async def execute(
        self, input_data: EditAuthorInput
    ) -> AuthorWithCount | None:
        """
        Execute command to edit an author.

        Args:
            input_data: Author name and the new birth year.

        Returns:
            The updated author (name unchanged), or None if no author has
            that name.

        Raises:
            ValidationFailure: If the store rejects the update.
        """
        author = await self.repository.find_by_name(input_data.name)
        if author is None:
            return None

        author = await self.repository.update_birth_year(
            author.id, input_data.set_born_to  # type: ignore[arg-type]
        )
        return AuthorWithCount.from_author(author)
