"""
End-to-end tests of the GraphQL schema against an in-memory store.

Operations are executed directly on the schema with a hand-built
context, so no HTTP layer is involved.
"""

import asyncio
from unittest.mock import patch

import pytest
from sqlmodel import SQLModel

from catalog.constants import BOOK_ADDED
from catalog.graphql.context import CatalogContext
from catalog.graphql.schema import schema
from catalog.managers.token_manager import TokenManager
from catalog.models.book import Book
from catalog.models.user import User
from catalog.storage.db import create_session_factory, session_scope
from tests.conftest import create_file_engine

ADD_BOOK = """
mutation AddBook($title: String!, $author: String!, $published: Int!, $genres: [String!]!) {
  addBook(title: $title, author: $author, published: $published, genres: $genres) {
    id
    title
    published
    genres
    author { id name born bookCount }
  }
}
"""

EDIT_AUTHOR = """
mutation EditAuthor($name: String!, $setBornTo: Int!) {
  editAuthor(name: $name, setBornTo: $setBornTo) { name born }
}
"""

CREATE_USER = """
mutation CreateUser($username: String!, $favoriteGenre: String!) {
  createUser(username: $username, favoriteGenre: $favoriteGenre) {
    id username favoriteGenre
  }
}
"""

LOGIN = """
mutation Login($username: String!, $password: String!) {
  login(username: $username, password: $password) { value }
}
"""

ALL_BOOKS = """
query AllBooks($author: String, $genre: String) {
  allBooks(author: $author, genre: $genre) { title genres author { name } }
}
"""

COUNTS = "{ bookCount authorCount }"

ALL_AUTHORS = "{ allAuthors { name born bookCount } }"


async def add_book(context, title, author, genres, published=2000):
    result = await schema.execute(
        ADD_BOOK,
        variable_values={
            "title": title,
            "author": author,
            "published": published,
            "genres": genres,
        },
        context_value=context,
    )
    assert result.errors is None, result.errors
    return result.data["addBook"]


@pytest.fixture
def context(make_context, user):
    """Provides an authenticated context."""
    return make_context(current_user=user)


class TestAddBook:
    """Tests for the addBook mutation."""

    @pytest.mark.asyncio
    async def test_unauthenticated_is_rejected(self, make_context):
        """Test addBook without a user fails and stores nothing."""
        anonymous = make_context()

        result = await schema.execute(
            ADD_BOOK,
            variable_values={
                "title": "Dune",
                "author": "Frank Herbert",
                "published": 1965,
                "genres": ["scifi"],
            },
            context_value=anonymous,
        )

        assert result.data == {"addBook": None}
        assert result.errors[0].message == "not authenticated"
        assert result.errors[0].extensions == {"code": "UNAUTHENTICATED"}

        counts = await schema.execute(COUNTS, context_value=anonymous)
        assert counts.data == {"bookCount": 0, "authorCount": 0}

    @pytest.mark.asyncio
    async def test_creates_author_once(self, context):
        """Test two books by a new author leave one author record."""
        first = await add_book(context, "Dune", "Frank Herbert", ["scifi"], 1965)
        second = await add_book(
            context, "Dune Messiah", "Frank Herbert", ["scifi"], 1969
        )

        assert first["author"]["id"] == second["author"]["id"]
        assert second["author"]["bookCount"] == 2

        counts = await schema.execute(COUNTS, context_value=context)
        assert counts.data == {"bookCount": 2, "authorCount": 1}

    @pytest.mark.asyncio
    async def test_concurrent_adds_create_one_author(self, tmp_path, bus):
        """Test simultaneous addBook calls on separate sessions share the author."""
        file_engine = create_file_engine(tmp_path / "catalog.db")
        async with file_engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

        context = CatalogContext(
            session_factory=create_session_factory(file_engine),
            bus=bus,
            token_manager=TokenManager("test-secret"),
            current_user=User(
                id=1, username="mluukkai", favorite_genre="refactoring"
            ),
        )
        mutation = """
        mutation($title: String!) {
          addBook(title: $title, author: "Frank Herbert", published: 1965, genres: ["scifi"]) {
            title
          }
        }
        """

        try:
            results = await asyncio.gather(
                *(
                    schema.execute(
                        mutation,
                        variable_values={"title": title},
                        context_value=context,
                    )
                    for title in ("Dune", "Dune Messiah")
                )
            )
            counts = await schema.execute(COUNTS, context_value=context)
        finally:
            await file_engine.dispose()

        assert [result.errors for result in results] == [None, None]
        assert counts.data == {"bookCount": 2, "authorCount": 1}

    @pytest.mark.asyncio
    async def test_returns_stored_book(self, context):
        """Test the result carries the stored fields."""
        book = await add_book(
            context, "Dune", "Frank Herbert", ["scifi", "classic", "scifi"], 1965
        )

        assert book["title"] == "Dune"
        assert book["published"] == 1965
        assert book["genres"] == ["scifi", "classic"]
        assert book["author"] == {
            "id": book["author"]["id"],
            "name": "Frank Herbert",
            "born": None,
            "bookCount": 1,
        }

    @pytest.mark.asyncio
    async def test_invalid_title_is_bad_user_input(self, context):
        """Test a rejected write echoes the offending argument."""
        result = await schema.execute(
            ADD_BOOK,
            variable_values={
                "title": "",
                "author": "Frank Herbert",
                "published": 1965,
                "genres": ["scifi"],
            },
            context_value=context,
        )

        assert result.data == {"addBook": None}
        assert result.errors[0].extensions == {
            "code": "BAD_USER_INPUT",
            "invalidArgs": {"title": ""},
        }

    @pytest.mark.asyncio
    async def test_empty_author_name_is_bad_user_input(self, context):
        """Test a book cannot name an empty author."""
        result = await schema.execute(
            ADD_BOOK,
            variable_values={
                "title": "Dune",
                "author": "",
                "published": 1965,
                "genres": ["scifi"],
            },
            context_value=context,
        )

        assert result.errors[0].extensions["code"] == "BAD_USER_INPUT"
        assert result.errors[0].extensions["invalidArgs"] == {"name": ""}


class TestEditAuthor:
    """Tests for the editAuthor mutation."""

    @pytest.mark.asyncio
    async def test_unknown_author_returns_null(self, context):
        """Test editing a missing author is a silent no-op."""
        result = await schema.execute(
            EDIT_AUTHOR,
            variable_values={"name": "Nobody", "setBornTo": 1900},
            context_value=context,
        )

        assert result.errors is None
        assert result.data == {"editAuthor": None}

        counts = await schema.execute(COUNTS, context_value=context)
        assert counts.data["authorCount"] == 0

    @pytest.mark.asyncio
    async def test_sets_birth_year(self, context):
        """Test the birth year is overwritten and the name kept."""
        await add_book(context, "Clean Code", "Robert Martin", ["refactoring"])

        result = await schema.execute(
            EDIT_AUTHOR,
            variable_values={"name": "Robert Martin", "setBornTo": 1952},
            context_value=context,
        )

        assert result.data == {
            "editAuthor": {"name": "Robert Martin", "born": 1952}
        }

    @pytest.mark.asyncio
    async def test_unauthenticated_is_rejected(self, context, make_context):
        """Test editAuthor without a user fails and changes nothing."""
        await add_book(context, "Clean Code", "Robert Martin", ["refactoring"])

        result = await schema.execute(
            EDIT_AUTHOR,
            variable_values={"name": "Robert Martin", "setBornTo": 1952},
            context_value=make_context(),
        )

        assert result.data == {"editAuthor": None}
        assert result.errors[0].extensions["code"] == "UNAUTHENTICATED"

        authors = await schema.execute(ALL_AUTHORS, context_value=context)
        assert authors.data["allAuthors"][0]["born"] is None


class TestUsers:
    """Tests for createUser, login and me."""

    @pytest.mark.asyncio
    async def test_create_user(self, make_context):
        """Test registering a user returns it."""
        result = await schema.execute(
            CREATE_USER,
            variable_values={"username": "hellas", "favoriteGenre": "classic"},
            context_value=make_context(),
        )

        assert result.errors is None
        assert result.data["createUser"]["username"] == "hellas"
        assert result.data["createUser"]["favoriteGenre"] == "classic"

    @pytest.mark.asyncio
    async def test_duplicate_user_is_bad_user_input(self, make_context, user):
        """Test a taken username is rejected."""
        result = await schema.execute(
            CREATE_USER,
            variable_values={"username": user.username, "favoriteGenre": "x"},
            context_value=make_context(),
        )

        assert result.data == {"createUser": None}
        assert result.errors[0].extensions == {
            "code": "BAD_USER_INPUT",
            "invalidArgs": {"username": "mluukkai"},
        }

    @pytest.mark.asyncio
    async def test_login_round_trip(self, make_context, token_manager, user):
        """Test the issued token decodes to the user's identity."""
        result = await schema.execute(
            LOGIN,
            variable_values={"username": "mluukkai", "password": "secret"},
            context_value=make_context(),
        )

        identity = token_manager.decode(result.data["login"]["value"])
        assert identity.username == "mluukkai"
        assert identity.id == user.id

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, make_context, user):
        """Test a wrong password yields wrong credentials."""
        result = await schema.execute(
            LOGIN,
            variable_values={"username": "mluukkai", "password": "nope"},
            context_value=make_context(),
        )

        assert result.data == {"login": None}
        assert result.errors[0].message == "wrong credentials"
        assert result.errors[0].extensions == {"code": "BAD_USER_INPUT"}

    @pytest.mark.asyncio
    async def test_login_unknown_user(self, make_context):
        """Test an unknown user yields wrong credentials."""
        result = await schema.execute(
            LOGIN,
            variable_values={"username": "ghost", "password": "secret"},
            context_value=make_context(),
        )

        assert result.errors[0].message == "wrong credentials"

    @pytest.mark.asyncio
    async def test_me(self, context, make_context, user):
        """Test me returns the current user, or null when anonymous."""
        query = "{ me { id username favoriteGenre } }"

        mine = await schema.execute(query, context_value=context)
        anonymous = await schema.execute(query, context_value=make_context())

        assert mine.data == {
            "me": {
                "id": str(user.id),
                "username": "mluukkai",
                "favoriteGenre": "refactoring",
            }
        }
        assert anonymous.data == {"me": None}


class TestQueries:
    """Tests for the read queries."""

    @pytest.mark.asyncio
    async def test_genre_filter_is_case_sensitive(self, context):
        """Test genre filtering uses exact string equality."""
        await add_book(context, "Dune", "Frank Herbert", ["SciFi"])

        lower = await schema.execute(
            ALL_BOOKS, variable_values={"genre": "scifi"}, context_value=context
        )
        exact = await schema.execute(
            ALL_BOOKS, variable_values={"genre": "SciFi"}, context_value=context
        )
        unknown = await schema.execute(
            ALL_BOOKS, variable_values={"genre": "poetry"}, context_value=context
        )

        assert lower.data == {"allBooks": []}
        assert [b["title"] for b in exact.data["allBooks"]] == ["Dune"]
        assert unknown.errors is None
        assert unknown.data == {"allBooks": []}

    @pytest.mark.asyncio
    async def test_author_and_genre_filters_combine(self, context):
        """Test both filters apply together."""
        await add_book(context, "Crime and punishment", "Fyodor Dostoevsky", ["classic", "crime"])
        await add_book(context, "Demons", "Fyodor Dostoevsky", ["classic", "revolution"])
        await add_book(context, "Clean Code", "Robert Martin", ["refactoring"])

        result = await schema.execute(
            ALL_BOOKS,
            variable_values={"author": "Fyodor Dostoevsky", "genre": "crime"},
            context_value=context,
        )

        assert result.data == {
            "allBooks": [
                {
                    "title": "Crime and punishment",
                    "genres": ["classic", "crime"],
                    "author": {"name": "Fyodor Dostoevsky"},
                }
            ]
        }

    @pytest.mark.asyncio
    async def test_dangling_author_reference(self, context, session_factory):
        """Test a book whose author is gone is listed with a null author."""
        async with session_scope(session_factory) as session:
            session.add(
                Book(title="Orphan", published=1999, genres=["misc"], author_id=404)
            )

        result = await schema.execute(ALL_BOOKS, context_value=context)

        assert result.errors is None
        assert result.data == {
            "allBooks": [{"title": "Orphan", "genres": ["misc"], "author": None}]
        }

    @pytest.mark.asyncio
    async def test_all_authors_book_counts(self, context):
        """Test every author's count matches the books referencing it."""
        await add_book(context, "Crime and punishment", "Fyodor Dostoevsky", ["classic"])
        await add_book(context, "Demons", "Fyodor Dostoevsky", ["classic"])
        await add_book(context, "Clean Code", "Robert Martin", ["refactoring"])

        result = await schema.execute(ALL_AUTHORS, context_value=context)

        assert result.data == {
            "allAuthors": [
                {"name": "Fyodor Dostoevsky", "born": None, "bookCount": 2},
                {"name": "Robert Martin", "born": None, "bookCount": 1},
            ]
        }

    @pytest.mark.asyncio
    async def test_unexpected_error_is_masked(self, make_context):
        """Test internal errors reach the client only as a generic error."""
        with patch(
            "catalog.repositories.book_repository.BookRepository.count",
            side_effect=RuntimeError("connection string leaked"),
        ):
            result = await schema.execute(COUNTS, context_value=make_context())

        assert result.data is None
        assert result.errors[0].message == "Internal server error"
        assert result.errors[0].extensions == {"code": "INTERNAL_SERVER_ERROR"}


class TestBookAddedSubscription:
    """Tests for the BOOK_ADDED event stream."""

    @pytest.mark.asyncio
    async def test_subscriber_receives_exactly_one_event(self, context, bus):
        """Test one addBook delivers one event to a live subscriber."""
        subscription = bus.subscribe(BOOK_ADDED)

        await add_book(context, "Dune", "Frank Herbert", ["scifi"], 1965)

        event = await asyncio.wait_for(anext(subscription), timeout=1)
        assert event.title == "Dune"
        assert event.author.name == "Frank Herbert"

        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(anext(subscription), timeout=0.05)
        subscription.close()

    @pytest.mark.asyncio
    async def test_late_subscriber_receives_nothing(self, context, bus):
        """Test events are not replayed to subscribers joining later."""
        await add_book(context, "Dune", "Frank Herbert", ["scifi"], 1965)

        late = bus.subscribe(BOOK_ADDED)
        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(anext(late), timeout=0.05)
        late.close()

    @pytest.mark.asyncio
    async def test_rejected_add_publishes_nothing(self, make_context, bus):
        """Test an unauthenticated addBook never notifies subscribers."""
        subscription = bus.subscribe(BOOK_ADDED)

        await schema.execute(
            ADD_BOOK,
            variable_values={
                "title": "Dune",
                "author": "Frank Herbert",
                "published": 1965,
                "genres": ["scifi"],
            },
            context_value=make_context(),
        )

        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(anext(subscription), timeout=0.05)
        subscription.close()
