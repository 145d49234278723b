"""
The catalog GraphQL schema.

Root fields are thin adapters: they pull the context from `info`, call
the matching function in `catalog.graphql.resolvers` and convert the
returned read model into a GraphQL type.
"""

import time
from collections.abc import AsyncGenerator, Iterator

import strawberry
from strawberry.extensions import SchemaExtension
from strawberry.types import Info

from catalog.graphql import resolvers
from catalog.graphql.context import CatalogContext
from catalog.graphql.types import Author, Book, Token, User
from catalog.utils.metrics import MetricsCollector


@strawberry.type
class Query:
    @strawberry.field
    async def book_count(self, info: Info[CatalogContext, None]) -> int:
        return await resolvers.book_count(info.context)

    @strawberry.field
    async def author_count(self, info: Info[CatalogContext, None]) -> int:
        return await resolvers.author_count(info.context)

    @strawberry.field
    async def all_books(
        self,
        info: Info[CatalogContext, None],
        author: str | None = None,
        genre: str | None = None,
    ) -> list[Book]:
        books = await resolvers.all_books(
            info.context, author=author, genre=genre
        )
        return [Book.from_view(book) for book in books]

    @strawberry.field
    async def all_authors(self, info: Info[CatalogContext, None]) -> list[Author]:
        authors = await resolvers.all_authors(info.context)
        return [Author.from_view(author) for author in authors]

    @strawberry.field
    async def me(self, info: Info[CatalogContext, None]) -> User | None:
        user = await resolvers.me(info.context)
        return User.from_record(user) if user else None


@strawberry.type
class Mutation:
    @strawberry.mutation
    async def add_book(
        self,
        info: Info[CatalogContext, None],
        title: str,
        author: str,
        published: int,
        genres: list[str],
    ) -> Book | None:
        book = await resolvers.add_book(
            info.context,
            title=title,
            author=author,
            published=published,
            genres=genres,
        )
        return Book.from_view(book)

    @strawberry.mutation
    async def edit_author(
        self, info: Info[CatalogContext, None], name: str, set_born_to: int
    ) -> Author | None:
        author = await resolvers.edit_author(
            info.context, name=name, set_born_to=set_born_to
        )
        return Author.from_view(author) if author else None

    @strawberry.mutation
    async def create_user(
        self, info: Info[CatalogContext, None], username: str, favorite_genre: str
    ) -> User | None:
        user = await resolvers.create_user(
            info.context, username=username, favorite_genre=favorite_genre
        )
        return User.from_record(user)

    @strawberry.mutation
    async def login(
        self, info: Info[CatalogContext, None], username: str, password: str
    ) -> Token | None:
        value = await resolvers.login(
            info.context, username=username, password=password
        )
        return Token(value=value)


@strawberry.type
class Subscription:
    @strawberry.subscription
    async def book_added(
        self, info: Info[CatalogContext, None]
    ) -> AsyncGenerator[Book | None, None]:
        async for book in resolvers.book_added(info.context.bus):
            yield Book.from_view(book)


class MetricsExtension(SchemaExtension):
    """Records the count, outcome and duration of every operation."""

    def on_operation(self) -> Iterator[None]:
        start = time.perf_counter()
        yield

        ctx = self.execution_context
        try:
            operation_type = ctx.operation_type.value
        except RuntimeError:
            # The document did not parse or names no known operation
            operation_type = "unknown"

        failed = bool(getattr(ctx, "pre_execution_errors", None)) or bool(
            getattr(ctx.result, "errors", None)
        )
        MetricsCollector.record_graphql_operation(
            operation_type, time.perf_counter() - start, failed
        )


schema = strawberry.Schema(
    query=Query,
    mutation=Mutation,
    subscription=Subscription,
    extensions=[MetricsExtension],
)
