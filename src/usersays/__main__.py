"""CLI entry point for usersays.

Provides commands for running the upload server and for extracting
phrases from a local archive without going through HTTP.
"""

import asyncio
from pathlib import Path

import click

from usersays import __version__


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """Intent phrase extraction from agent export archives.

    Upload a ZIP export and get back the training phrases of every
    intents/*_usersays_en.json file, grouped by file.
    """
    pass


@cli.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.option("--host", help="Override the listen host")
@click.option("--port", type=click.IntRange(1, 65535), help="Override the listen port")
def serve(config: Path | None, host: str | None, port: int | None) -> None:
    """Start the HTTP upload server."""
    from usersays.config.loader import load_config
    from usersays.server import run_service
    from usersays.utils.logging import configure_logging

    cfg = load_config(config)
    if host:
        cfg.server.host = host
    if port is not None:
        cfg.server.port = port

    configure_logging(cfg.logging)
    run_service(cfg)


@cli.command()
@click.argument("archive", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.option(
    "--show-errors",
    is_flag=True,
    help="Append files that failed to parse to the report",
)
def extract(archive: Path, config: Path | None, show_errors: bool) -> None:
    """Print the phrase report for a local ARCHIVE."""
    from usersays.config.loader import load_config
    from usersays.services.orchestrator import UploadOrchestrator
    from usersays.utils.logging import configure_logging

    cfg = load_config(config)
    if show_errors:
        cfg.upload.report_failures = True

    configure_logging(cfg.logging)

    orchestrator = UploadOrchestrator(cfg.upload)
    result = asyncio.run(orchestrator.handle_upload(archive.read_bytes()))
    if result:
        click.echo(result)


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
