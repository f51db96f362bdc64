"""Command-line interface for CoinNavigator.

This module provides the CLI commands for managing coin lists: creating and
deleting lists, adding, showing, searching, editing, deleting and moving
coins. It also remembers the last opened list between runs.
"""

from dataclasses import dataclass
from typing import Any, BinaryIO, NoReturn

import click

from coinnavigator import __version__
from coinnavigator.core.config import Settings, get_settings
from coinnavigator.core.logging import LoggingContext, configure_logging
from coinnavigator.domain.entities import Coin, get_attribute, ordered_attributes
from coinnavigator.domain.services import (
    REQUIRED_FIELDS_LABEL,
    CoinNavigatorError,
    CollectionService,
    FieldError,
    MoveService,
    SearchService,
)
from coinnavigator.infrastructure.persistence.database import DatabaseManager, init_database
from coinnavigator.infrastructure.persistence.repositories import PreferenceRepository

LAST_LIST_KEY = "last_list"


@dataclass
class AppContext:
    """Objects shared by every command of one CLI invocation."""

    settings: Settings
    db: DatabaseManager
    store: CollectionService
    search: SearchService
    mover: MoveService

    def get_last_opened_list(self) -> str | None:
        with self.db.connect() as conn:
            return PreferenceRepository(conn).get(LAST_LIST_KEY)

    def set_last_opened_list(self, list_name: str) -> None:
        with self.db.begin() as conn:
            PreferenceRepository(conn).set(LAST_LIST_KEY, list_name)

    def resolve_list(self, list_name: str | None) -> str:
        """Pick the list a command works on and remember it.

        Falls back to the last opened list, then to the first default list.
        """
        if list_name is None:
            last = self.get_last_opened_list()
            if last and self.store.collection_exists(last):
                list_name = last
            else:
                list_name = self.store.default_collections[0]

        if not self.store.collection_exists(list_name):
            raise click.ClickException(f"List '{list_name}' does not exist")

        self.set_last_opened_list(list_name)
        return list_name


def format_field_error(error: FieldError) -> str:
    """Render a field error as a user-facing message."""
    if error.field == REQUIRED_FIELDS_LABEL:
        return f"Invalid input for {error.field}; all are required"
    return f"Invalid input for {error.field}; a(n) {error.expected} is required"


def format_coin_table(coins: list[Coin]) -> str:
    """Render coins as a fixed-width table with one column per attribute."""
    headers = ["id"] + [attribute.name for attribute in ordered_attributes()]
    rows = [
        [str(coin.id)[:8]]
        + [coin.get_attribute_value(attribute.name) for attribute in ordered_attributes()]
        for coin in coins
    ]
    widths = [
        max(len(headers[i]), *(len(row[i]) for row in rows)) if rows else len(headers[i])
        for i in range(len(headers))
    ]
    lines = ["  ".join(h.ljust(w) for h, w in zip(headers, widths))]
    lines.append("  ".join("-" * w for w in widths))
    for row in rows:
        lines.append("  ".join(v.ljust(w) for v, w in zip(row, widths)))
    return "\n".join(lines)


def find_coin(app: AppContext, list_name: str, coin_ref: str) -> Coin:
    """Find a coin by full identity or unique identity prefix."""
    coin = app.store.get_by_id(list_name, coin_ref)
    if coin is not None:
        return coin

    ref = coin_ref.lower()
    matches = [c for c in app.store.get_all(list_name) if str(c.id).startswith(ref)]
    if not matches:
        raise click.ClickException(f"No coin '{coin_ref}' in list '{list_name}'")
    if len(matches) > 1:
        raise click.ClickException(f"Coin id prefix '{coin_ref}' is ambiguous")
    return matches[0]


def attribute_options(func: Any) -> Any:
    """Add one --<attribute> option per registered attribute."""
    for attribute in reversed(ordered_attributes()):
        func = click.option(
            f"--{attribute.name}",
            attribute.name,
            type=str,
            default=None,
            help=f"{attribute.name} ({attribute.type.value}"
            + (", required)" if attribute.required else ")"),
        )(func)
    return func


list_option = click.option(
    "--list",
    "-l",
    "list_name",
    type=str,
    default=None,
    help="List to work on (defaults to the last opened list)",
)


pass_app = click.make_pass_decorator(AppContext)


@click.group()
@click.version_option(version=__version__, prog_name="CoinNavigator")
@click.option(
    "--database-url",
    type=str,
    default=None,
    help="SQLite database URL (overrides config)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    default=None,
    help="Set log level (overrides config)",
)
@click.pass_context
def cli(ctx: click.Context, database_url: str | None, log_level: str | None) -> None:
    """CoinNavigator - keep track of your coins in named lists.

    "Owned" and "Wishlist" always exist and cannot be deleted.
    """
    overrides: dict[str, Any] = {}
    if database_url:
        overrides["database_url"] = database_url
    if log_level:
        overrides["log_level"] = log_level
    settings = get_settings()
    if overrides:
        settings = Settings(**{**settings.model_dump(), **overrides})

    configure_logging(settings)

    db = init_database(DatabaseManager(settings))
    ctx.call_on_close(db.disconnect)

    store = CollectionService(db)
    store.initialize()
    ctx.obj = AppContext(
        settings=settings,
        db=db,
        store=store,
        search=SearchService(store),
        mover=MoveService(store),
    )


@cli.command("lists")
@pass_app
def list_lists(app: AppContext) -> None:
    """Show all lists. Protected lists are marked with *."""
    last = app.get_last_opened_list()
    for name in app.store.list_collection_names():
        marker = "*" if app.store.is_protected(name) else " "
        current = "  (last opened)" if name == last else ""
        click.echo(f"{marker} {name} [{app.store.count(name)}]{current}")


@cli.command("create-list")
@click.argument("name")
@pass_app
def create_list(app: AppContext, name: str) -> None:
    """Create a new list (no-op if it already exists)."""
    try:
        app.store.create_collection(name)
    except ValueError as e:
        raise click.ClickException(str(e))
    app.set_last_opened_list(name)
    click.echo(f"List '{name}' ready.")


@cli.command("delete-list")
@click.argument("name")
@click.option("--yes", is_flag=True, help="Skip confirmation prompt")
@pass_app
def delete_list(app: AppContext, name: str, yes: bool) -> None:
    """Delete a list and every coin in it."""
    if not yes and not app.store.is_protected(name):
        click.confirm(f"Delete list '{name}' and all of its coins?", abort=True, default=False)

    try:
        deleted = app.store.delete_collection(name)
    except CoinNavigatorError as e:
        raise click.ClickException(e.message)

    if not deleted:
        raise click.ClickException(f"List '{name}' does not exist")
    click.echo(f"List '{name}' deleted.")


@cli.command("attributes")
def list_attributes() -> None:
    """Show the coin attributes that can be edited and searched."""
    for attribute in ordered_attributes():
        required = " (required)" if attribute.required else ""
        click.echo(f"{attribute.name:<14}{attribute.type.value}{required}")


@cli.command("add")
@list_option
@attribute_options
@click.option("--obverse", type=click.File("rb"), default=None, help="Obverse image file")
@click.option("--reverse", type=click.File("rb"), default=None, help="Reverse image file")
@pass_app
def add_coin(
    app: AppContext,
    list_name: str | None,
    obverse: BinaryIO | None,
    reverse: BinaryIO | None,
    **raw_fields: str | None,
) -> None:
    """Add a coin. Prompts for each attribute when none is given.

    Image files are stored as given and never interpreted.
    """
    list_name = app.resolve_list(list_name)

    if all(value is None for value in raw_fields.values()):
        for attribute in ordered_attributes():
            raw_fields[attribute.name] = click.prompt(
                attribute.name, default="", show_default=False
            )

    with LoggingContext(command="add", collection_name=list_name):
        result = app.store.create_coin(
            list_name,
            {k: v for k, v in raw_fields.items() if v is not None},
            obverse_bytes=obverse.read() if obverse else None,
            reverse_bytes=reverse.read() if reverse else None,
        )

    if not result.is_valid:
        for error in result.errors:
            click.echo(format_field_error(error), err=True)
        raise SystemExit(1)

    click.echo(f"Coin added to '{list_name}' with ID: {result.created_id}")


@cli.command("ls")
@list_option
@pass_app
def list_coins(app: AppContext, list_name: str | None) -> None:
    """List all coins in a list."""
    list_name = app.resolve_list(list_name)
    coins = app.store.get_all(list_name)
    if not coins:
        click.echo(f"[No coins in '{list_name}']")
        return
    click.echo(format_coin_table(coins))


@cli.command("show")
@click.argument("coin_id")
@list_option
@pass_app
def show_coin(app: AppContext, coin_id: str, list_name: str | None) -> None:
    """Show one coin's details."""
    list_name = app.resolve_list(list_name)
    coin = find_coin(app, list_name, coin_id)
    click.echo(f"{'id':<14}{coin.id}")
    for attribute in ordered_attributes():
        click.echo(f"{attribute.name:<14}{coin.get_attribute_value(attribute.name)}")
    for label, data in (("obverse", coin.obverse_bytes), ("reverse", coin.reverse_bytes)):
        size = f"{len(data)} bytes" if data else "-"
        click.echo(f"{label:<14}{size}")


@cli.command("search")
@click.argument("attribute")
@click.argument("value")
@list_option
@pass_app
def search_coins(app: AppContext, attribute: str, value: str, list_name: str | None) -> None:
    """Search a list by ATTRIBUTE.

    Text attributes match partially (ignoring case), numbers match exactly.
    """
    list_name = app.resolve_list(list_name)
    if get_attribute(attribute) is None:
        raise click.ClickException(f"Unknown attribute '{attribute}'")

    coins = app.search.search(list_name, attribute, value)
    if not coins:
        click.echo("[No coins match that attribute/value pair]")
        return
    click.echo(format_coin_table(coins))


@cli.command("edit")
@click.argument("coin_id")
@click.argument("attribute")
@click.argument("value")
@list_option
@pass_app
def edit_coin(app: AppContext, coin_id: str, attribute: str, value: str, list_name: str | None) -> None:
    """Set one ATTRIBUTE of a coin to VALUE."""
    list_name = app.resolve_list(list_name)
    registered = get_attribute(attribute)
    if registered is None:
        raise click.ClickException(f"Unknown attribute '{attribute}'")

    coin = find_coin(app, list_name, coin_id)
    if not coin.set_attribute_value(attribute, value.strip()):
        raise click.ClickException(
            format_field_error(FieldError(field=attribute, expected=registered.type.expected_label))
        )

    with LoggingContext(command="edit", collection_name=list_name):
        app.store.update(list_name, coin)
    click.echo(f"Coin {coin.id} updated.")


@cli.command("rm")
@click.argument("coin_id")
@list_option
@pass_app
def delete_coin(app: AppContext, coin_id: str, list_name: str | None) -> None:
    """Delete a coin from a list."""
    list_name = app.resolve_list(list_name)
    coin = find_coin(app, list_name, coin_id)
    with LoggingContext(command="rm", collection_name=list_name):
        app.store.delete(list_name, coin.id)
    click.echo("Coin deleted.")


@cli.command("move")
@click.argument("coin_id")
@click.argument("target")
@list_option
@pass_app
def move_coin(app: AppContext, coin_id: str, target: str, list_name: str | None) -> None:
    """Move a coin to the TARGET list."""
    list_name = app.resolve_list(list_name)
    coin = find_coin(app, list_name, coin_id)

    with LoggingContext(command="move", collection_name=list_name):
        moved = app.mover.move(list_name, target, coin)
    if not moved:
        raise click.ClickException(f'Failed to move coin to "{target}"')
    click.echo(f"Coin {coin.id} moved to '{target}'.")


@cli.command()
@pass_app
def info(app: AppContext) -> None:
    """Display CoinNavigator configuration."""
    settings = app.settings
    click.echo(f"""
CoinNavigator v{__version__}
{'=' * 40}

Configuration:
  Environment:  {settings.environment}
  Debug:        {settings.debug}

Database:
  URL:          {settings.database_url}
  Echo:         {settings.db_echo}
  Lists:        {len(app.store.list_collection_names())}
  Last opened:  {app.get_last_opened_list() or '-'}

Logging:
  Level:        {settings.log_level}
  Format:       {settings.log_format}
""")


def main() -> NoReturn:
    """Main entry point for the CLI.

    This function is called when the `coinnavigator` command is run
    or when using `python -m coinnavigator`.
    """
    cli()


if __name__ == "__main__":
    main()
