"""
Sample catalog used for local development and demos.

Loading goes through the same repository operations as `addBook`, so
authors are created on first mention and books get their genre index.
"""

from dataclasses import dataclass

from catalog.logging import logger
from catalog.repositories.author_repository import AuthorRepository
from catalog.repositories.book_repository import BookRepository
from catalog.storage.db import SessionFactory, session_scope

AUTHORS: list[dict] = [
    {"name": "Robert Martin", "born": 1952},
    {"name": "Martin Fowler", "born": 1963},
    {"name": "Fyodor Dostoevsky", "born": 1821},
    {"name": "Joshua Kerievsky"},
    {"name": "Sandi Metz"},
]

BOOKS: list[dict] = [
    {
        "title": "Clean Code",
        "published": 2008,
        "author": "Robert Martin",
        "genres": ["refactoring"],
    },
    {
        "title": "Agile software development",
        "published": 2002,
        "author": "Robert Martin",
        "genres": ["agile", "patterns", "design"],
    },
    {
        "title": "Refactoring, edition 2",
        "published": 2018,
        "author": "Martin Fowler",
        "genres": ["refactoring"],
    },
    {
        "title": "Refactoring to patterns",
        "published": 2008,
        "author": "Joshua Kerievsky",
        "genres": ["refactoring", "patterns"],
    },
    {
        "title": "Practical Object-Oriented Design, An Agile Primer Using Ruby",
        "published": 2012,
        "author": "Sandi Metz",
        "genres": ["refactoring", "design"],
    },
    {
        "title": "Crime and punishment",
        "published": 1866,
        "author": "Fyodor Dostoevsky",
        "genres": ["classic", "crime"],
    },
    {
        "title": "Demons",
        "published": 1872,
        "author": "Fyodor Dostoevsky",
        "genres": ["classic", "revolution"],
    },
]


@dataclass
class SeedReport:
    authors: int = 0
    books: int = 0
    skipped: bool = False


async def seed_catalog(session_factory: SessionFactory) -> SeedReport:
    """
    Load the sample authors and books into an empty catalog.

    Args:
        session_factory: Factory for the loading session.

    Returns:
        How many authors and books were created. Nothing is loaded when
        the catalog already holds books.
    """
    report = SeedReport()

    async with session_scope(session_factory) as session:
        authors = AuthorRepository(session)
        books = BookRepository(session)

        if await books.count() > 0:
            logger.info("Catalog already has books, skipping seed")
            report.skipped = True
            return report

        for data in AUTHORS:
            author, created = await authors.get_or_create(data["name"])
            report.authors += int(created)
            if data.get("born") is not None and author.born is None:
                await authors.update_birth_year(author.id, data["born"])  # type: ignore[arg-type]

        for data in BOOKS:
            author, created = await authors.get_or_create(data["author"])
            report.authors += int(created)
            await books.create(
                title=data["title"],
                published=data["published"],
                genres=data["genres"],
                author_id=author.id,  # type: ignore[arg-type]
            )
            report.books += 1

    logger.info(
        f"Seeded {report.authors} authors and {report.books} books"
    )
    return report
