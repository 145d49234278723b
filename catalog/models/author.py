from sqlmodel import Field

from catalog.models.base import BaseModel


class Author(BaseModel, table=True):
    """
    SQLModel representing an author record.

    Authors are created lazily the first time a book names them. The
    unique constraint on `name` is what keeps one record per distinct
    author name when two writers race on the same new name.

    Attributes:
        id: Primary key identifier for the author
        name: Unique, non-empty author name
        born: Optional birth year
    """

    __table_args__ = {"extend_existing": True}

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(unique=True, index=True, nullable=False)
    born: int | None = Field(default=None)
