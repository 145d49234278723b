"""
CLI tool for catalog administration.

Provides commands for loading the sample catalog, registering users,
issuing access tokens and printing the GraphQL schema.
"""

import asyncio

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from catalog.exceptions import AppException
from catalog.graphql.schema import schema
from catalog.managers.token_manager import TokenManager
from catalog.repositories.user_repository import UserRepository
from catalog.schemas.user import Identity
from catalog.seed import seed_catalog
from catalog.storage.db import async_session, engine, init_db, session_scope

# Initialize Typer app with help text
typer_app = typer.Typer(
    name="catalog-cli",
    help="Library Catalog CLI - Seed data, manage users and tokens",
    add_completion=False,
)
console = Console()


@typer_app.command(name="seed")
def seed():
    """
    Load the sample authors and books into an empty catalog.

    Example:
        python cli.py seed
    """
    console.print()
    console.print(
        Panel.fit(
            "[bold cyan]Seeding sample catalog[/bold cyan]",
            border_style="cyan",
        )
    )
    console.print()

    async def run():
        await init_db(engine)
        return await seed_catalog(async_session)

    report = asyncio.run(run())

    if report.skipped:
        console.print(
            "[yellow]⚠[/yellow] Catalog already contains books, nothing loaded"
        )
        console.print()
        return

    table = Table("Collection", "Created", title="Seed summary")
    table.add_row("Authors", f"[green]{report.authors}[/green]")
    table.add_row("Books", f"[green]{report.books}[/green]")
    console.print(table)
    console.print()


@typer_app.command(name="create-user")
def create_user(
    username: str = typer.Argument(..., help="Unique login name"),
    favorite_genre: str = typer.Option(
        ..., "--favorite-genre", "-g", help="Preferred genre"
    ),
):
    """
    Register a new user.

    Example:
        python cli.py create-user mluukkai -g refactoring
    """

    async def run():
        await init_db(engine)
        async with session_scope(async_session) as session:
            return await UserRepository(session).create(
                username, favorite_genre
            )

    try:
        user = asyncio.run(run())
    except AppException as ex:
        console.print(f"[red]✗ {ex.message}[/red]")
        raise typer.Exit(code=1)

    console.print(
        f"[green]✓[/green] Created user [cyan]{user.username}[/cyan] "
        f"(id={user.id})"
    )


@typer_app.command(name="token")
def token(username: str = typer.Argument(..., help="Existing username")):
    """
    Issue an access token for an existing user.

    The token goes in the `Authorization: Bearer <token>` header, or in
    the `Authorization` query parameter for WebSocket connections.

    Example:
        python cli.py token mluukkai
    """

    async def run():
        async with session_scope(async_session) as session:
            return await UserRepository(session).get_by_username(username)

    user = asyncio.run(run())
    if user is None:
        console.print(f"[red]✗ No user named[/red] [cyan]{username}[/cyan]")
        raise typer.Exit(code=1)

    value = TokenManager.from_settings().issue(
        Identity(username=user.username, id=user.id)
    )
    console.print(value)


@typer_app.command(name="schema")
def print_schema():
    """
    Print the GraphQL schema in SDL form.

    Example:
        python cli.py schema > schema.graphql
    """
    console.print(
        schema.as_str(), highlight=False, markup=False, soft_wrap=True
    )


if __name__ == "__main__":
    typer_app()
