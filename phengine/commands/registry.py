"""
Registry inspection commands.

Lists the plugins and transforms bound in the standard engine.

Usage:
    phengine registry plugins
    phengine registry transforms
"""

import click
from rich.table import Table
from phengine.commands.base import RichCommand, RichGroup, rich_help
from phengine.config.settings import console
from phengine.lib.engine import PlaceholderEngine


def names_table(title: str, names: list[str], source: dict[str, object]) -> Table:
    """
    Build a Rich table of registered names and their implementing classes.

    Args:
        title: Table title
        names: Registered names, in registration order
        source: Mapping of name to registered object

    Returns:
        Table: Renderable table
    """
    table: Table = Table(title=title, border_style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Class", style="white")
    for name in names:
        table.add_row(name, type(source[name]).__name__)
    return table


@click.group(
    cls=RichGroup,
    short_help="Inspect registered plugins and transforms",
    help="""
    Registry Inspection

    Show what the standard engine can resolve.
    """,
)
def registry() -> None:
    """Command group for registry inspection."""
    pass


@registry.command(
    cls=RichCommand,
    short_help="List registered plugins",
    help=rich_help(
        command="plugins",
        description="List the modules placeholders can address",
        usage="phengine registry plugins",
        args={"<None>": "no arguments"},
    ),
)
def plugins() -> None:
    """Print the plugin table."""
    engine: PlaceholderEngine = PlaceholderEngine.standard()
    names: list[str] = engine.registry.plugin_names()
    console.print(
        names_table(
            "Plugins",
            names,
            {name: engine.registry.get_plugin(name) for name in names},
        )
    )


@registry.command(
    cls=RichCommand,
    short_help="List registered transforms",
    help=rich_help(
        command="transforms",
        description="List the transforms usable after '|'",
        usage="phengine registry transforms",
        args={"<None>": "no arguments"},
    ),
)
def transforms() -> None:
    """Print the transform table."""
    engine: PlaceholderEngine = PlaceholderEngine.standard()
    names: list[str] = engine.registry.transform_names()
    console.print(
        names_table(
            "Transforms",
            names,
            {name: engine.registry.get_transform(name) for name in names},
        )
    )
