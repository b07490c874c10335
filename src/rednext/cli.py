"""Command-line interface for rednext.

This module provides the commands for managing collections and their items
on the configured backend, and for serving the local collections over HTTP.
"""

import functools
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, NoReturn

import click
from pydantic import ValidationError

from rednext import __version__
from rednext.core.config import Settings, get_settings
from rednext.core.logging import LoggingContext, configure_logging, get_logger
from rednext.domain.entities import FieldType, Record, Schema, format_timestamp
from rednext.domain.exceptions import StoreError, ValueTypeError
from rednext.domain.services import RecordValidator
from rednext.infrastructure.storage import Catalog, CollectionHandle, open_catalog

logger = get_logger(__name__)


def store_command(func: Callable[..., Any]) -> Callable[..., Any]:
    """Report store failures as ``Error: ...`` and exit with status 1."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except (StoreError, ValueTypeError) as e:
            logger.debug("Command failed", command=func.__name__, error=str(e))
            click.echo(f"Error: {e}", err=True)
            raise SystemExit(1) from e

    return wrapper


@contextmanager
def open_store(settings: Settings) -> Iterator[Catalog]:
    catalog = open_catalog(settings)
    try:
        yield catalog
    finally:
        catalog.close()


@contextmanager
def open_collection(settings: Settings, name: str) -> Iterator[CollectionHandle]:
    with LoggingContext(collection=name), open_store(settings) as catalog:
        with catalog.open(name) as handle:
            yield handle


def parse_field_type(text: str) -> FieldType:
    """Parse a type name, ignoring case."""
    for member in FieldType:
        if member.value.lower() == text.lower():
            return member
    choices = ", ".join(member.value for member in FieldType)
    raise click.BadParameter(f"unknown type {text!r} (choose from {choices})")


def parse_schema(definitions: tuple[str, ...]) -> Schema:
    """Build a schema from ``FIELD:TYPE`` arguments."""
    pairs = []
    for definition in definitions:
        name, sep, type_name = definition.partition(":")
        if not sep:
            raise click.BadParameter(
                f"{definition!r} is not of the form FIELD:TYPE", param_hint="FIELDS"
            )
        pairs.append((name, parse_field_type(type_name)))
    return Schema.of(*pairs)


def parse_assignments(assignments: tuple[str, ...]) -> dict[str, str]:
    """Turn ``FIELD=VALUE`` arguments into a mapping."""
    data: dict[str, str] = {}
    for assignment in assignments:
        name, sep, value = assignment.partition("=")
        if not sep:
            raise click.BadParameter(
                f"{assignment!r} is not of the form FIELD=VALUE", param_hint="VALUES"
            )
        if name in data:
            raise click.BadParameter(f"field {name!r} given twice", param_hint="VALUES")
        data[name] = value
    return data


def format_record(record: Record) -> str:
    line = f"{record.id}. " + ", ".join(f"{f.name}: {f.value}" for f in record.fields)
    if record.completed_at is not None:
        line += f" (done {format_timestamp(record.completed_at)})"
    return line


def echo_records(records: list[Record]) -> None:
    for record in records:
        click.echo(format_record(record))


@click.group()
@click.version_option(version=__version__, prog_name="rednext")
@click.option(
    "--backend",
    type=click.Choice(["sqlite", "http"]),
    default=None,
    help="Storage backend (overrides REDNEXT_BACKEND)",
)
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding the sqlite collections (overrides REDNEXT_DATA_DIR)",
)
@click.option(
    "--url",
    type=str,
    default=None,
    help="Base URL of a rednext server (overrides REDNEXT_REMOTE_URL)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    default=None,
    help="Set log level (overrides REDNEXT_LOG_LEVEL)",
)
@click.pass_context
def cli(
    ctx: click.Context,
    backend: str | None,
    data_dir: Path | None,
    url: str | None,
    log_level: str | None,
) -> None:
    """rednext - simple random tasks manager.

    Keeps named collections of items with a fixed schema, locally in sqlite
    files or on a remote rednext server.
    """
    overrides = {
        key: value
        for key, value in {
            "backend": backend,
            "data_dir": data_dir,
            "remote_url": url,
            "log_level": log_level,
        }.items()
        if value is not None
    }
    try:
        settings = Settings(**overrides) if overrides else get_settings()
    except ValidationError as e:
        raise click.UsageError("; ".join(error["msg"] for error in e.errors())) from e

    configure_logging(settings)
    ctx.obj = settings


@cli.command("list")
@click.pass_obj
@store_command
def list_collections(settings: Settings) -> None:
    """List available collections."""
    with open_store(settings) as catalog:
        for i, name in enumerate(catalog.list_collections(), start=1):
            click.echo(f"{i}. {name}")


@cli.command()
@click.argument("name")
@click.argument("fields", nargs=-1, required=True)
@click.pass_obj
@store_command
def new(settings: Settings, name: str, fields: tuple[str, ...]) -> None:
    """Create collection NAME with FIELDS given as FIELD:TYPE.

    TYPE is one of Text, Number, Boolean or DateTime.
    """
    schema = parse_schema(fields)
    with LoggingContext(collection=name), open_store(settings) as catalog:
        catalog.create(name, schema).close()
    click.echo(f"Created collection '{name}'")


@cli.command()
@click.argument("name")
@click.option("--yes", is_flag=True, help="Skip confirmation prompt")
@click.pass_obj
@store_command
def delete(settings: Settings, name: str, yes: bool) -> None:
    """Delete collection NAME and all of its items."""
    if not yes:
        click.confirm(
            f"Delete collection '{name}' and all of its items?",
            abort=True,
            default=False,
        )
    with LoggingContext(collection=name), open_store(settings) as catalog:
        catalog.delete(name)
    click.echo(f"Deleted collection '{name}'")


@cli.command()
@click.argument("name")
@click.option("--done", "state", flag_value="done", help="Only done items")
@click.option("--undone", "state", flag_value="undone", help="Only pending items")
@click.pass_obj
@store_command
def items(settings: Settings, name: str, state: str | None) -> None:
    """List the items of collection NAME."""
    with open_collection(settings, name) as handle:
        if state == "done":
            records = handle.list_done()
        elif state == "undone":
            records = handle.list_undone()
        else:
            records = handle.list_items()
    echo_records(records)


@cli.command()
@click.argument("name")
@click.argument("values", nargs=-1, required=True)
@click.pass_obj
@store_command
def add(settings: Settings, name: str, values: tuple[str, ...]) -> None:
    """Add an item to collection NAME, with VALUES given as FIELD=VALUE."""
    data = parse_assignments(values)
    with open_collection(settings, name) as handle:
        fields, errors = RecordValidator.parse_input(data, handle.schema())
        if errors:
            for error in errors:
                click.echo(f"Error: {error.message}", err=True)
            raise SystemExit(1)
        record_id = handle.insert(fields)
    click.echo(f"Added item {record_id}")


@cli.command()
@click.argument("name")
@click.argument("record_id", metavar="ID", type=int)
@click.pass_obj
@store_command
def remove(settings: Settings, name: str, record_id: int) -> None:
    """Remove item ID from collection NAME."""
    with open_collection(settings, name) as handle:
        handle.delete(record_id)
    click.echo(f"Removed item {record_id}")


@cli.command()
@click.argument("name")
@click.argument("record_id", metavar="ID", type=int)
@click.option(
    "--at",
    "completed_at",
    type=click.DateTime(),
    default=None,
    help="Completion time (defaults to now)",
)
@click.pass_obj
@store_command
def done(settings: Settings, name: str, record_id: int, completed_at: datetime | None) -> None:
    """Mark item ID of collection NAME as done."""
    if completed_at is None:
        completed_at = datetime.now().replace(microsecond=0)
    with open_collection(settings, name) as handle:
        handle.done(record_id, completed_at)
    click.echo(f"Marked item {record_id} done")


@cli.command()
@click.argument("name")
@click.argument("record_id", metavar="ID", type=int)
@click.pass_obj
@store_command
def undone(settings: Settings, name: str, record_id: int) -> None:
    """Mark item ID of collection NAME as pending again."""
    with open_collection(settings, name) as handle:
        handle.undone(record_id)
    click.echo(f"Marked item {record_id} pending")


@cli.command()
@click.argument("name")
@click.pass_obj
@store_command
def random(settings: Settings, name: str) -> None:
    """Show one pending item of collection NAME picked at random."""
    with open_collection(settings, name) as handle:
        record = handle.get_random()
    if record is None:
        click.echo("No pending items")
        return
    click.echo(format_record(record))


@cli.command()
@click.argument("name")
@click.argument("text")
@click.pass_obj
@store_command
def find(settings: Settings, name: str, text: str) -> None:
    """List items of collection NAME with a Text field containing TEXT."""
    with open_collection(settings, name) as handle:
        records = handle.find(text)
    echo_records(records)


@cli.command()
@click.argument("name")
@click.pass_obj
@store_command
def schema(settings: Settings, name: str) -> None:
    """Show the fields of collection NAME."""
    with open_collection(settings, name) as handle:
        for descriptor in handle.schema():
            click.echo(f"{descriptor.name}: {descriptor.type}")


@cli.command()
@click.option(
    "--host",
    type=str,
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
@click.pass_obj
def serve(settings: Settings, host: str | None, port: int | None) -> None:
    """Serve the local sqlite collections over HTTP."""
    import uvicorn

    from rednext.infrastructure.api import create_app
    from rednext.infrastructure.persistence import SqliteCatalog

    bind_host = host or settings.host
    bind_port = port or settings.port

    logger.info(
        "Starting rednext server",
        host=bind_host,
        port=bind_port,
        data_dir=str(settings.data_dir),
        environment=settings.environment,
    )

    catalog = SqliteCatalog(settings.data_dir)
    try:
        uvicorn.run(
            create_app(catalog, settings),
            host=bind_host,
            port=bind_port,
            log_level=settings.log_level.lower(),
            access_log=True,
        )
    finally:
        catalog.close()


def main() -> NoReturn:
    """Main entry point for the CLI.

    This function is called when the `rednext` command is run
    or when using `python -m rednext`.
    """
    cli()


if __name__ == "__main__":
    main()
