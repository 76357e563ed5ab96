# src/podcapacity/cli/main.py
"""
This module is the main entry point for the podcapacity CLI.
"""

import logging

import typer

from ..core.config import config
from . import estimate

# --- Setup Logger ---
logging.basicConfig(
    level=config.LOG_LEVEL.upper(),
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


app = typer.Typer(
    name="podcapacity",
    help="Estimate how many more replicas of a pod your Kubernetes cluster can schedule.",
    add_completion=False,
)


def version_callback(value: bool):
    """
    Prints the version of podcapacity.
    """
    if value:
        from .. import __version__

        typer.echo(f"podcapacity version: {__version__}")
        raise typer.Exit()


@app.command()
def version():
    """
    Show the version of podcapacity.
    """
    from .. import __version__

    typer.echo(f"podcapacity version: {__version__}")


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
):
    """
    podcapacity CLI main entry point.
    """
    pass


app.add_typer(estimate.app, name="estimate")


if __name__ == "__main__":
    app()
