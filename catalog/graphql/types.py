"""
GraphQL object types.

Field names follow Python conventions here; strawberry exposes them in
camelCase (`book_count` becomes `bookCount`), which is the wire contract.
"""

import strawberry
from strawberry.types import Info

from catalog.graphql import resolvers
from catalog.graphql.context import CatalogContext
from catalog.models.user import User as UserRecord
from catalog.schemas.catalog import AuthorWithCount, BookWithAuthor


@strawberry.type
class Author:
    """An author and, on request, the number of books referencing it."""

    name: str
    id: strawberry.ID
    born: int | None = None
    precomputed_book_count: strawberry.Private[int | None] = None

    @strawberry.field
    async def book_count(self, info: Info[CatalogContext, None]) -> int | None:
        if self.precomputed_book_count is not None:
            return self.precomputed_book_count
        return await resolvers.author_book_count(info.context, int(self.id))

    @classmethod
    def from_view(cls, author: AuthorWithCount) -> "Author":
        return cls(
            name=author.name,
            id=strawberry.ID(str(author.id)),
            born=author.born,
            precomputed_book_count=author.book_count,
        )


@strawberry.type
class Book:
    """A book; `author` is null when its reference does not resolve."""

    title: str
    published: int
    author: Author | None
    id: strawberry.ID
    genres: list[str]

    @classmethod
    def from_view(cls, book: BookWithAuthor) -> "Book":
        return cls(
            title=book.title,
            published=book.published,
            author=Author.from_view(book.author) if book.author else None,
            id=strawberry.ID(str(book.id)),
            genres=list(book.genres),
        )


@strawberry.type
class User:
    username: str
    favorite_genre: str
    id: strawberry.ID

    @classmethod
    def from_record(cls, user: UserRecord) -> "User":
        return cls(
            username=user.username,
            favorite_genre=user.favorite_genre,
            id=strawberry.ID(str(user.id)),
        )


@strawberry.type
class Token:
    value: str
