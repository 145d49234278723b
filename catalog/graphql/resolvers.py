"""
Resolver functions behind the GraphQL schema.

Each function takes the request context first, opens its own unit of work
and delegates to a command. They return read models (or table models for
users); `catalog.graphql.schema` converts them to GraphQL types.

Protected mutations are wrapped with `authenticated`, which rejects the
call before any store access when there is no current user.
"""

from collections.abc import AsyncGenerator

from catalog.commands.author_commands import (
    CountAuthorBooksCommand,
    CountAuthorsCommand,
    EditAuthorCommand,
    EditAuthorInput,
    ListAuthorsCommand,
)
from catalog.commands.book_commands import (
    AddBookCommand,
    AddBookInput,
    CountBooksCommand,
    ListBooksCommand,
    ListBooksInput,
)
from catalog.commands.user_commands import (
    CreateUserCommand,
    CreateUserInput,
    LoginCommand,
    LoginInput,
)
from catalog.constants import BOOK_ADDED
from catalog.graphql.context import CatalogContext
from catalog.managers.notification_bus import NotificationBus
from catalog.models.user import User
from catalog.repositories.author_repository import AuthorRepository
from catalog.repositories.book_repository import BookRepository
from catalog.repositories.user_repository import UserRepository
from catalog.schemas.catalog import AuthorWithCount, BookWithAuthor
from catalog.storage.db import session_scope
from catalog.utils.error_handler import authenticated, handle_graphql_errors

# ============================================================================
# Queries
# ============================================================================


@handle_graphql_errors
async def book_count(context: CatalogContext) -> int:
    async with session_scope(context.session_factory) as session:
        return await CountBooksCommand(BookRepository(session)).execute()


@handle_graphql_errors
async def author_count(context: CatalogContext) -> int:
    async with session_scope(context.session_factory) as session:
        return await CountAuthorsCommand(AuthorRepository(session)).execute()


@handle_graphql_errors
async def all_books(
    context: CatalogContext,
    author: str | None = None,
    genre: str | None = None,
) -> list[BookWithAuthor]:
    async with session_scope(context.session_factory) as session:
        command = ListBooksCommand(
            AuthorRepository(session), BookRepository(session)
        )
        return await command.execute(
            ListBooksInput(author=author, genre=genre)
        )


@handle_graphql_errors
async def all_authors(context: CatalogContext) -> list[AuthorWithCount]:
    async with session_scope(context.session_factory) as session:
        command = ListAuthorsCommand(
            AuthorRepository(session), BookRepository(session)
        )
        return await command.execute()


@handle_graphql_errors
async def author_book_count(context: CatalogContext, author_id: int) -> int:
    """Count an author's books when the count was not precomputed."""
    async with session_scope(context.session_factory) as session:
        command = CountAuthorBooksCommand(BookRepository(session))
        return await command.execute(author_id)


async def me(context: CatalogContext) -> User | None:
    return context.current_user


# ============================================================================
# Mutations
# ============================================================================


@handle_graphql_errors
@authenticated
async def add_book(
    context: CatalogContext,
    title: str,
    author: str,
    published: int,
    genres: list[str],
) -> BookWithAuthor:
    async with session_scope(context.session_factory) as session:
        command = AddBookCommand(
            AuthorRepository(session), BookRepository(session), context.bus
        )
        return await command.execute(
            AddBookInput(
                title=title, author=author, published=published, genres=genres
            )
        )


@handle_graphql_errors
@authenticated
async def edit_author(
    context: CatalogContext, name: str, set_born_to: int
) -> AuthorWithCount | None:
    async with session_scope(context.session_factory) as session:
        command = EditAuthorCommand(AuthorRepository(session))
        return await command.execute(
            EditAuthorInput(name=name, set_born_to=set_born_to)
        )


@handle_graphql_errors
async def create_user(
    context: CatalogContext, username: str, favorite_genre: str
) -> User:
    async with session_scope(context.session_factory) as session:
        command = CreateUserCommand(UserRepository(session))
        return await command.execute(
            CreateUserInput(username=username, favorite_genre=favorite_genre)
        )


@handle_graphql_errors
async def login(context: CatalogContext, username: str, password: str) -> str:
    async with session_scope(context.session_factory) as session:
        command = LoginCommand(
            UserRepository(session),
            context.token_manager,
            context.shared_password,
        )
        return await command.execute(
            LoginInput(username=username, password=password)
        )


# ============================================================================
# Subscriptions
# ============================================================================


async def book_added(
    bus: NotificationBus,
) -> AsyncGenerator[BookWithAuthor, None]:
    """
    Stream every book added while the caller stays subscribed.

    The registration is released when the generator is closed, which
    happens when the client unsubscribes or disconnects.
    """
    async with bus.subscribe(BOOK_ADDED) as subscription:
        async for event in subscription:
            yield event
