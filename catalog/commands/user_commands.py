"""Commands for user registration and login."""

import hmac

from pydantic import BaseModel, Field

from catalog.commands.base import BaseCommand
from catalog.exceptions import InvalidCredentials
from catalog.logging import logger
from catalog.managers.token_manager import TokenManager
from catalog.models.user import User
from catalog.repositories.user_repository import UserRepository
from catalog.schemas.user import Identity
from catalog.utils.metrics import MetricsCollector


class CreateUserInput(BaseModel):  # type: ignore[misc]
    """Input model for registering a user."""

    username: str = Field(..., description="Unique login name")
    favorite_genre: str = Field(..., description="Preferred genre")


class LoginInput(BaseModel):  # type: ignore[misc]
    """Input model for logging in."""

    username: str
    password: str


class CreateUserCommand(BaseCommand[CreateUserInput, User]):
    """Command registering a new user."""

    def __init__(self, repository: UserRepository):
        self.repository = repository

    async def execute(self, input_data: CreateUserInput) -> User:
        """
        Raises:
            ValidationFailure: If the username is empty or taken.
        """
        user = await self.repository.create(
            input_data.username, input_data.favorite_genre
        )
        logger.info(f"Registered user '{user.username}' (id={user.id})")
        return user


class LoginCommand(BaseCommand[LoginInput, str]):
    """
    Command exchanging credentials for a signed token.

    Every user shares the same password, taken from the settings.
    """

    def __init__(
        self,
        repository: UserRepository,
        token_manager: TokenManager,
        shared_password: str,
    ):
        """
        Initialize command.

        Args:
            repository: User repository for the username lookup.
            token_manager: Signer for the issued token.
            shared_password: The password accepted for every user.
        """
        self.repository = repository
        self.token_manager = token_manager
        self.shared_password = shared_password

    async def execute(self, input_data: LoginInput) -> str:
        """
        Execute command to log in.

        Args:
            input_data: Username and password.

        Returns:
            Serialized token embedding the user's name and ID.

        Raises:
            InvalidCredentials: If the user is unknown or the password is
                wrong. Both cases look the same to the caller.
        """
        user = await self.repository.get_by_username(input_data.username)
        password_ok = hmac.compare_digest(
            input_data.password.encode(), self.shared_password.encode()
        )
        if user is None or not password_ok:
            MetricsCollector.record_login("failure")
            logger.info(f"Failed login for '{input_data.username}'")
            raise InvalidCredentials()

        MetricsCollector.record_login("success")
        return self.token_manager.issue(
            Identity(username=user.username, id=user.id)  # type: ignore[arg-type]
        )
