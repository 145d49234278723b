"""
Base repository with common CRUD operations.

The Repository pattern separates data access logic from business logic,
making it easier to test and maintain. Repositories encapsulate all
store operations for a specific collection.

Example:
    ```python
    from catalog.repositories.base import BaseRepository
    from catalog.models.author import Author


    class AuthorRepository(BaseRepository[Author]):
        def __init__(self, session: AsyncSession):
            super().__init__(session, Author)

        async def find_by_name(self, name: str) -> Author | None:
            stmt = select(Author).where(Author.name == name)
            result = await self.session.exec(stmt)
            return result.first()
    ```
"""

from typing import Any, Generic, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import func, select
from sqlmodel.ext.asyncio.session import AsyncSession

from catalog.logging import logger

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base repository providing common CRUD operations.

    Reads never fail on "not found": they return None or an empty list.

    Type Parameters:
        T: The SQLModel type this repository manages.

    Attributes:
        session: The database session for executing queries.
        model: The SQLModel class this repository manages.
    """

    def __init__(self, session: AsyncSession, model: Type[T]):
        """
        Initialize repository with session and model.

        Args:
            session: Database session for executing queries.
            model: The SQLModel class to manage.
        """
        self.session = session
        self.model = model

    async def get_by_id(self, id: int) -> T | None:
        """
        Get entity by primary key ID.

        Args:
            id: Primary key value.

        Returns:
            Entity if found, None otherwise.
        """
        return await self.session.get(self.model, id)

    async def get_all(self, **filters: Any) -> list[T]:
        """
        Get all entities matching the provided filters.

        Args:
            **filters: Field name and value pairs to filter by.
                Example: get_all(name="Sandi Metz")

        Returns:
            List of entities matching all filters, ordered by ID.

        Raises:
            SQLAlchemyError: If database query fails.
        """
        try:
            stmt = select(self.model)
            for key, value in filters.items():
                if value is not None:
                    stmt = stmt.where(getattr(self.model, key) == value)
            stmt = stmt.order_by(self.model.id)  # type: ignore[attr-defined]
            result = await self.session.exec(stmt)
            return list(result.all())
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving {self.model.__name__}: {e}")
            raise

    async def count(self) -> int:
        """
        Count all entities in the collection.

        Returns:
            Number of stored entities.

        Raises:
            SQLAlchemyError: If database query fails.
        """
        try:
            stmt = select(func.count()).select_from(self.model)
            result = await self.session.exec(stmt)
            return int(result.one())
        except SQLAlchemyError as e:
            logger.error(f"Error counting {self.model.__name__}: {e}")
            raise

    async def add(self, entity: T) -> T:
        """
        Persist a new or modified entity.

        Args:
            entity: The entity instance to write.

        Returns:
            The entity with generated fields populated.

        Raises:
            SQLAlchemyError: If database operation fails.
        """
        try:
            self.session.add(entity)
            await self.session.flush()
            await self.session.refresh(entity)
            return entity
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Error writing {self.model.__name__}: {e}")
            raise
