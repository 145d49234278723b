"""Tests for the sample catalog loader and the CLI."""

import pytest
from typer.testing import CliRunner

from catalog.repositories.author_repository import AuthorRepository
from catalog.repositories.book_repository import BookRepository
from catalog.seed import AUTHORS, BOOKS, seed_catalog
from catalog.storage.db import session_scope
from cli import typer_app


@pytest.mark.asyncio
async def test_seed_loads_sample_catalog(session_factory):
    """Test every sample author and book is stored."""
    report = await seed_catalog(session_factory)

    assert report.skipped is False
    assert report.authors == len(AUTHORS)
    assert report.books == len(BOOKS)

    async with session_scope(session_factory) as session:
        authors = AuthorRepository(session)
        books = BookRepository(session)
        dostoevsky = await authors.find_by_name("Fyodor Dostoevsky")

        assert await authors.count() == 5
        assert await books.count() == 7
        assert dostoevsky.born == 1821
        assert await books.count_by_author(dostoevsky.id) == 2
        assert [b.title for b in await books.find(genre="patterns")] == [
            "Agile software development",
            "Refactoring to patterns",
        ]


@pytest.mark.asyncio
async def test_seed_skips_non_empty_catalog(session_factory):
    """Test seeding twice does not duplicate books."""
    await seed_catalog(session_factory)

    report = await seed_catalog(session_factory)

    assert report.skipped is True
    async with session_scope(session_factory) as session:
        assert await BookRepository(session).count() == 7


def test_cli_prints_schema():
    """Test the schema command prints the GraphQL SDL."""
    result = CliRunner().invoke(typer_app, ["schema"])

    assert result.exit_code == 0
    assert "type Book" in result.output
    assert "bookAdded" in result.output
    assert "editAuthor(name: String!, setBornTo: Int!): Author" in result.output
