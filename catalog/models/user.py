from sqlmodel import Field

from catalog.models.base import BaseModel


class User(BaseModel, table=True):
    """
    SQLModel representing a registered user.

    Attributes:
        id: Primary key identifier for the user
        username: Unique login name
        favorite_genre: Genre used for recommendations
    """

    __table_args__ = {"extend_existing": True}

    id: int | None = Field(default=None, primary_key=True)
    username: str = Field(unique=True, index=True, nullable=False)
    favorite_genre: str
