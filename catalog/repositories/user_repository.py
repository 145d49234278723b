from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from catalog.exceptions import ValidationFailure
from catalog.models.user import User
from catalog.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for registered users."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, User)

    async def get_by_username(self, username: str) -> User | None:
        """
        Get user by exact username.

        Args:
            username: Login name.

        Returns:
            User if found, None otherwise.
        """
        stmt = select(User).where(User.username == username)
        result = await self.session.exec(stmt)
        return result.first()

    async def create(self, username: str, favorite_genre: str) -> User:
        """
        Register a new user.

        Raises:
            ValidationFailure: If the username is empty or already taken.
        """
        if not username or not username.strip():
            raise ValidationFailure(
                "Creating the user failed", "username", username
            )

        try:
            return await self.add(
                User(username=username, favorite_genre=favorite_genre)
            )
        except IntegrityError as ex:
            raise ValidationFailure(
                "Creating the user failed", "username", username
            ) from ex
