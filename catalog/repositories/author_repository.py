"""
Repository for Author records.

Besides plain lookups this repository owns the two author invariants the
store alone cannot express: a non-empty name, and exactly one record per
distinct name (via `get_or_create`).

Example:
    ```python
    from catalog.repositories.author_repository import AuthorRepository
    from catalog.storage.db import session_scope

    async with session_scope() as session:
        repo = AuthorRepository(session)
        author, created = await repo.get_or_create("Frank Herbert")
        await repo.update_birth_year(author.id, 1920)
    ```
"""

from collections.abc import Iterable

from sqlalchemy.exc import IntegrityError
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from catalog.exceptions import ValidationFailure
from catalog.logging import logger
from catalog.models.author import Author
from catalog.repositories.base import BaseRepository


class AuthorRepository(BaseRepository[Author]):
    """
    Repository for Author entity operations.

    Provides operations inherited from BaseRepository plus name based
    lookups, batched lookups and the birth year update.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize Author repository.

        Args:
            session: Database session for executing queries.
        """
        super().__init__(session, Author)

    async def find_by_name(self, name: str) -> Author | None:
        """
        Get author by exact (case-sensitive) name match.

        Args:
            name: Exact author name to search for.

        Returns:
            Author if found, None otherwise.
        """
        stmt = select(Author).where(Author.name == name)
        result = await self.session.exec(stmt)
        return result.first()

    async def get_many_by_ids(self, ids: Iterable[int]) -> dict[int, Author]:
        """
        Resolve many author references with a single query.

        Args:
            ids: Author identifiers; duplicates are collapsed.

        Returns:
            Mapping of identifier to Author for every id that resolved.
            Identifiers without a record are simply absent.
        """
        wanted = set(ids)
        if not wanted:
            return {}

        stmt = select(Author).where(col(Author.id).in_(wanted))
        result = await self.session.exec(stmt)
        return {author.id: author for author in result.all()}  # type: ignore[misc]

    async def create(self, name: str) -> Author:
        """
        Create a new author.

        Args:
            name: Author name, must be non-empty and not taken.

        Returns:
            The created author with its generated ID.

        Raises:
            ValidationFailure: If the name is empty or already exists.
        """
        if not name or not name.strip():
            raise ValidationFailure("Adding new Author failed", "name", name)

        try:
            return await self.add(Author(name=name))
        except IntegrityError as ex:
            raise ValidationFailure(
                "Adding new Author failed", "name", name
            ) from ex

    async def get_or_create(self, name: str) -> tuple[Author, bool]:
        """
        Get the author with this name, creating it when missing.

        The unique constraint on `author.name` arbitrates concurrent
        creators: the loser gets an IntegrityError, its transaction is
        rolled back and the winner's record is fetched instead. Because of
        that rollback this must be the first write of the unit of work.

        Args:
            name: Author name.

        Returns:
            Tuple of (author, created) where `created` tells whether this
            call inserted the record.

        Raises:
            ValidationFailure: If the name is empty, or the insert failed
                and no record can be fetched afterwards.
        """
        author = await self.find_by_name(name)
        if author is not None:
            return author, False

        try:
            return await self.create(name), True
        except ValidationFailure as ex:
            if not isinstance(ex.__cause__, IntegrityError):
                raise

            logger.info(
                f"Author '{name}' was created concurrently, re-fetching"
            )
            author = await self.find_by_name(name)
            if author is None:
                raise
            return author, False

    async def update_birth_year(self, author_id: int, year: int) -> Author:
        """
        Overwrite the birth year of an author.

        Args:
            author_id: Identifier of the author to update.
            year: New birth year.

        Returns:
            The updated author; its name is left unchanged.

        Raises:
            ValidationFailure: If no author with that ID exists or the
                store rejects the update.
        """
        author = await self.get_by_id(author_id)
        if author is None:
            raise ValidationFailure(
                "Modifying author failed", "id", author_id
            )

        author.born = year
        try:
            return await self.add(author)
        except IntegrityError as ex:
            raise ValidationFailure(
                "Modifying author failed", "setBornTo", year
            ) from ex
