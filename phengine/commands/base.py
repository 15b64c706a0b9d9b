"""
Base classes for Rich-enhanced Click commands and groups.

This module defines:
- `RichGroup`: A Click group that renders its help with Rich.
- `RichCommand`: A Click command that renders its help in a Rich panel.
- `rich_help`: Builds colorized help text for command docstrings.

Help goes to the shared stderr console, so it never mixes with processed
output written to stdout.
"""

import click
from rich.panel import Panel
from phengine.config.settings import console
from phengine.lib.log import LOG


def rich_help(command: str, description: str, usage: str, args: dict[str, str]) -> str:
    """
    Generate Rich-enhanced help text for commands.

    :param command: The command name.
    :param description: Description of the command.
    :param usage: Usage syntax for the command.
    :param args: Dictionary of arguments and options and their descriptions.
    :return: Formatted Rich help string.
    """
    help_text: str = f"[bold cyan]{command}[/bold cyan]: {description}\n\n"
    help_text += f"[bold yellow]Usage:[/bold yellow]\n    [green]{usage}[/green]\n\n"
    help_text += "[bold yellow]Arguments:[/bold yellow]\n"
    for arg, desc in args.items():
        help_text += f"    [green]{arg}[/green]: {desc}\n"
    return help_text


class RichGroup(click.Group):
    """
    A Click Group that uses Rich for rendering help messages.

    Methods:
        format_help(ctx, formatter): Renders the group-level help message.
    """

    def format_help(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        """
        Render the help message for the group using Rich.

        :param ctx: The Click context for the command group.
        :param formatter: The Click help formatter.
        """
        try:
            console.print(
                f"[bold yellow]Usage:[/bold yellow] [cyan]{ctx.command_path}[/cyan] "
                f"[magenta][OPTIONS] COMMAND [ARGS]...[/magenta]\n"
            )

            if self.help:
                console.print(f"[bold cyan]{self.help.strip()}[/bold cyan]\n")

            if self.commands:
                console.print("[bold green]Available Commands:[/bold green]")
                for name, command in self.commands.items():
                    summary: str = command.get_short_help_str(limit=60)
                    console.print(
                        f"- [cyan]{name}[/cyan]: "
                        f"[white]{summary or 'No description available.'}[/white]"
                    )
                console.print()

            options: list[click.Parameter] = [
                param for param in self.get_params(ctx) if isinstance(param, click.Option)
            ]
            if options:
                console.print("[bold yellow]Options:[/bold yellow]")
                for option in options:
                    console.print(
                        f"- [cyan]{', '.join(option.opts)}[/cyan]: "
                        f"{option.help or 'No description'}"
                    )
        except Exception as e:
            LOG(f"Help rendering error: {e}")
            console.print(f"[bold red]Help rendering error:[/bold red] {e}")


class RichCommand(click.Command):
    """
    A Click Command that uses Rich for rendering help messages.

    Methods:
        format_help(ctx, formatter): Renders the command help in a panel,
            followed by its options.
    """

    def format_help(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        """
        Render the help message for the command using Rich.

        :param ctx: The Click context for the command.
        :param formatter: The Click help formatter.
        """
        try:
            help_text: str = self.help or "No help text available."
            panel_width: int = max(len(line) for line in help_text.splitlines()) + 10
            panel_width = min(panel_width, 80)
            console.print(
                Panel(help_text, expand=False, width=panel_width, border_style="cyan")
            )

            options: list[click.Option] = [
                param for param in self.get_params(ctx) if isinstance(param, click.Option)
            ]
            if options:
                console.print("[bold yellow]Options:[/bold yellow]")
                for option in options:
                    console.print(
                        f"- [cyan]{', '.join(option.opts)}[/cyan]: "
                        f"{option.help or 'No description available.'}"
                    )
        except Exception as e:
            LOG(f"Help rendering error: {e}")
            console.print(f"[bold red]Help rendering error:[/bold red] {e}")
