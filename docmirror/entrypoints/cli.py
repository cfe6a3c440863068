"""docmirror CLI entrypoint.

Command-line interface for checking the search cluster and rebuilding the
documents of a mapped model.
"""

from __future__ import annotations

import functools
import importlib
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click
import tomli_w
from elasticsearch import ApiError
from elasticsearch import ConnectionError as ESConnectionError
from sqlalchemy.exc import SQLAlchemyError

if TYPE_CHECKING:
    from docmirror.domain.config import DocMirrorConfig

from docmirror.core.errors import (
    DocMirrorCliError,
    config_exists_error,
    connection_failed_error,
    invalid_model_error,
)
from docmirror.domain.exceptions import DocMirrorDomainError
from docmirror.shared.config_io import CONFIG_FILENAME
from docmirror.version import __version__

logger = logging.getLogger(__name__)

_RECORD_ATTRIBUTES = (
    "exists",
    "document_index",
    "document_type",
    "document_key",
    "build_document",
)


def handle_cli_errors(command_name: str):
    """Decorator to handle common CLI errors.

    Converts domain, Elasticsearch and database errors into DocMirrorCliError
    with hints, and shows tracebacks for unexpected errors in verbose mode.

    Args:
        command_name: Name of the command for error messages.

    Returns:
        Decorated function with error handling.
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except DocMirrorCliError:
                raise
            except DocMirrorDomainError as e:
                raise DocMirrorCliError(e.message, hint=e.hint) from e
            except ESConnectionError as e:
                raise DocMirrorCliError(
                    f"Connection to Elasticsearch failed: {e}",
                    hint="Run 'docmirror status' to check the connection settings",
                ) from e
            except ApiError as e:
                raise DocMirrorCliError(
                    f"Elasticsearch rejected the request: {e}",
                    hint="Run with --verbose for more details",
                ) from e
            except SQLAlchemyError as e:
                raise DocMirrorCliError(
                    f"Database error in {command_name}: {e}",
                    hint="Check --database-url and that the model's table exists",
                ) from e
            except Exception as e:
                ctx = click.get_current_context()
                if ctx.obj.get("verbose", False):
                    import traceback

                    traceback.print_exc()
                raise DocMirrorCliError(
                    f"Unexpected error in {command_name}: {e}",
                    hint="Run with --verbose for more details",
                ) from e

        return wrapper

    return decorator


def _load_config(ctx: click.Context) -> DocMirrorConfig:
    """Load configuration for the current directory.

    Uses ConfigFactory so an explicit --config path replaces the local lookup.
    """
    from docmirror.adapters.factory import ConfigFactory

    provider = ConfigFactory().create_config_provider(ctx.obj.get("config_path"))
    return provider.load(Path.cwd())


def _import_model(model_path: str) -> type[Any]:
    """Import a mapped SearchableMixin class from 'package.module:ClassName'.

    The current directory is put on sys.path so project modules resolve.
    """
    from sqlalchemy import inspect as sa_inspect

    module_name, _, class_name = model_path.partition(":")
    if not module_name or not class_name:
        invalid_model_error(model_path, "expected 'package.module:ClassName'")

    cwd = str(Path.cwd())
    if cwd not in sys.path:
        sys.path.insert(0, cwd)

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        invalid_model_error(model_path, f"cannot import {module_name} ({e})")

    model = getattr(module, class_name, None)
    if not isinstance(model, type):
        invalid_model_error(model_path, f"{class_name} is not a class in {module_name}")
    if sa_inspect(model, raiseerr=False) is None:
        invalid_model_error(model_path, f"{class_name} is not a mapped class")
    missing = [name for name in _RECORD_ATTRIBUTES if not hasattr(model, name)]
    if missing:
        invalid_model_error(
            model_path,
            f"{class_name} is not a searchable record (missing {', '.join(missing)})",
        )
    if not callable(getattr(model, "build_document", None)):
        invalid_model_error(model_path, f"{class_name} does not define build_document()")
    return model


@click.group()
@click.version_option(version=__version__, prog_name="docmirror")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Suppress non-essential output.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help=f"Config file to use instead of ./{CONFIG_FILENAME}.",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool, config_path: Path | None) -> None:
    """docmirror - keep SQLAlchemy records mirrored in Elasticsearch."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = config_path

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@cli.command()
@click.option(
    "--force",
    "-f",
    is_flag=True,
    help=f"Overwrite an existing {CONFIG_FILENAME}.",
)
@click.option(
    "--index",
    "default_index",
    type=str,
    default="docmirror",
    show_default=True,
    help="Default index for models without __document_index__.",
)
@click.pass_context
@handle_cli_errors("init")
def init(ctx: click.Context, force: bool, default_index: str) -> None:
    """Create a docmirror.toml in the current directory."""
    from docmirror.shared.config_io import create_default_config_file

    path = Path.cwd() / CONFIG_FILENAME
    if path.exists() and not force:
        config_exists_error(str(path))

    create_default_config_file(path, default_index=default_index)
    if not ctx.obj.get("quiet", False):
        click.echo(f"✓ Created {CONFIG_FILENAME}")


@cli.command()
@click.pass_context
@handle_cli_errors("status")
def status(ctx: click.Context) -> None:
    """Check that the configured cluster is reachable."""
    from docmirror.adapters.elasticsearch import check_connection
    from docmirror.adapters.factory import ConnectionFactory

    config = _load_config(ctx)
    client = ConnectionFactory(config).create_client()

    if not check_connection(client):
        connection_failed_error(config.connection.hosts)

    click.echo(f"✓ Connected to {', '.join(config.connection.hosts)}")
    if not ctx.obj.get("quiet", False):
        click.echo("\nDetails:")
        click.echo(f"  Default index: {config.connection.default_index}")
        click.echo(f"  Auto sync: {'on' if config.sync.enabled else 'off'}")
        click.echo(f"  Refresh: {config.sync.refresh or 'cluster default'}")


@cli.command()
@click.argument("model_path", metavar="MODEL", type=str)
@click.option(
    "--database-url",
    "-d",
    required=True,
    envvar="DATABASE_URL",
    help="SQLAlchemy database URL (defaults to $DATABASE_URL).",
)
@click.option(
    "--chunk-size",
    "-n",
    type=click.IntRange(min=1),
    default=None,
    help="Records per bulk request (defaults to [sync] chunk_size).",
)
@click.pass_context
@handle_cli_errors("reindex")
def reindex(
    ctx: click.Context, model_path: str, database_url: str, chunk_size: int | None
) -> None:
    """Delete and re-index the documents of every row of MODEL.

    MODEL is a mapped class using SearchableMixin, given as
    'package.module:ClassName'.
    """
    from sqlalchemy import create_engine, select
    from sqlalchemy.orm import Session

    from docmirror.adapters.factory import ConnectionFactory

    model = _import_model(model_path)
    config = _load_config(ctx)
    size = chunk_size or config.sync.chunk_size
    persistence = ConnectionFactory(config).create_persistence()
    quiet = ctx.obj.get("quiet", False)

    engine = create_engine(database_url)
    total = 0
    try:
        with Session(engine) as session:
            rows = session.scalars(select(model).execution_options(yield_per=size))
            for chunk in rows.partitions(size):
                persistence.reindex(chunk)
                total += len(chunk)
                logger.debug("Reindexed %d %s records so far", total, model.__name__)
                if not quiet:
                    click.echo(f"  … {total} records", err=True)
    finally:
        engine.dispose()

    click.echo(f"✓ Reindexed {total} {model.__name__} records")


@cli.group(name="config")
def config_group() -> None:
    """Inspect configuration."""
    pass


@config_group.command(name="show")
@click.pass_context
@handle_cli_errors("config show")
def config_show(ctx: click.Context) -> None:
    """Print the effective configuration as TOML (secrets masked)."""
    from docmirror.shared.config_io import config_to_data

    effective = _load_config(ctx)
    click.echo(tomli_w.dumps(config_to_data(effective, mask_secrets=True)), nl=False)


def main() -> int:
    """Main entrypoint for the CLI."""
    try:
        cli(obj={})
        return 0
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
