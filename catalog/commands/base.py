"""
Base command for encapsulating business operations.

The Command pattern encapsulates business logic as objects, keeping the
GraphQL resolvers thin and the logic testable in isolation with mocked
repositories.

Example:
    ```python
    from pydantic import BaseModel
    from catalog.commands.base import BaseCommand


    class EditAuthorInput(BaseModel):
        name: str
        set_born_to: int


    class EditAuthorCommand(BaseCommand[EditAuthorInput, Author | None]):
        def __init__(self, repository: AuthorRepository):
            self.repository = repository

        async def execute(self, input_data: EditAuthorInput) -> Author | None:
            author = await self.repository.find_by_name(input_data.name)
            if author is None:
                return None
            return await self.repository.update_birth_year(
                author.id, input_data.set_born_to
            )


    # Usage in a resolver
    async with session_scope(context.session_factory) as session:
        command = EditAuthorCommand(AuthorRepository(session))
        return await command.execute(EditAuthorInput(name=name, set_born_to=1920))
    ```
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

TInput = TypeVar("TInput")
TOutput = TypeVar("TOutput")


class BaseCommand(ABC, Generic[TInput, TOutput]):
    """
    Base command for business operations.

    Commands depend on repositories (and, for writes that notify, on the
    notification bus) and never on the GraphQL layer.

    Type Parameters:
        TInput: Input data type (usually a Pydantic model).
        TOutput: Output data type.
    """

    @abstractmethod
    async def execute(self, input_data: TInput) -> TOutput:
        """
        Execute the command.

        Args:
            input_data: Input data for the command.

        Returns:
            Result of the command execution.

        Raises:
            AppException: For business rule violations; resolvers turn
                these into GraphQL errors.
        """
        pass
