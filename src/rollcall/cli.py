"""CLI entry point for Rollcall."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from rollcall.config import ConfigError, Settings, load_settings
from rollcall.logging import setup_logging


def _load(config_path: Path | None) -> Settings:
    try:
        return load_settings(config_path)
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)


@click.group()
@click.version_option(package_name="rollcall")
def main() -> None:
    """Rollcall - university attendance sessions."""
    pass


@main.command()
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    help="Path to a YAML settings file (defaults to $ROLLCALL_CONFIG)",
)
@click.option("--host", default="127.0.0.1", show_default=True, help="Interface to bind")
@click.option("--port", default=8000, show_default=True, type=int, help="Port to bind")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def serve(config_path: Path | None, host: str, port: int, verbose: bool) -> None:
    """Run the HTTP API."""
    import uvicorn  # noqa: PLC0415

    from rollcall.api import create_app  # noqa: PLC0415

    settings = _load(config_path)
    setup_logging(
        log_dir=settings.log_dir,
        level="DEBUG" if verbose else settings.log_level,
    )
    click.echo(f"Serving Rollcall on http://{host}:{port} (database: {settings.db_path})")
    uvicorn.run(create_app(settings), host=host, port=port, log_config=None)


@main.command("init-db")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    help="Path to a YAML settings file (defaults to $ROLLCALL_CONFIG)",
)
def init_db(config_path: Path | None) -> None:
    """Create the database tables."""
    from rollcall.api.dependencies import build_services  # noqa: PLC0415

    settings = _load(config_path)
    services = build_services(settings)
    services.close()
    click.echo(f"Database ready at {settings.db_path}")


@main.command("show-config")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    help="Path to a YAML settings file (defaults to $ROLLCALL_CONFIG)",
)
def show_config(config_path: Path | None) -> None:
    """Print the effective settings."""
    settings = _load(config_path)
    for name, value in vars(settings).items():
        click.echo(f"{name}: {value}")


if __name__ == "__main__":
    main()
