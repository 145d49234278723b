"""
Base model for all catalog tables.

All table models inherit from BaseModel, which combines SQLModel with
SQLAlchemy's AsyncAttrs mixin so attributes can be awaited safely inside
async sessions.
"""

from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlmodel import SQLModel


class BaseModel(SQLModel, AsyncAttrs):  # type: ignore[misc]
    """
    Base model for all database tables with async attribute support.

    The catalog keeps its records document-style: references between
    tables are plain integer columns and no foreign keys are declared,
    so referential consistency is maintained by the repositories.

    Example:
        class Author(BaseModel, table=True):
            id: int | None = Field(default=None, primary_key=True)
            name: str = Field(unique=True)
    """

    pass
