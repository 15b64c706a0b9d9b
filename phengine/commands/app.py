"""
Defines the root Click command group for phengine.

This module provides:
- The root `cli` command group for the application.
- Registration of the `generate` and `registry` subcommands.

Usage:
Import `cli` to run the command-line interface.
"""

import click
from phengine.commands.base import RichGroup
from phengine.commands.generate import generate
from phengine.commands.registry import registry
from phengine.phengine import __version__


@click.group(
    cls=RichGroup,
    help="""
    Placeholder Engine

    Resolve {{module:action:args|transforms}} placeholders in JSON and text.
    """,
)
@click.version_option(version=__version__, prog_name="phengine")
def cli() -> None:
    """
    The root Click command group for phengine.
    """
    pass


cli.add_command(generate)
cli.add_command(registry)
