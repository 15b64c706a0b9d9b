"""
phengine Main Module.

This module is the entry point of the placeholder engine command line.

Features:
- Resolves `{{module:action:args|transforms}}` placeholders in JSON documents
  and plain text
- Lists the registered plugins and transforms
- Handles graceful termination on user interruption

Examples:
    Resolve a JSON template:
        $ phengine generate template.json

    Resolve text from stdin with a fixed base time:
        $ echo "at {{time:calc:0:HH\\:mm}}" | \\
            phengine generate --format text --context startTimeTest=1710508545

    Resolve only generator placeholders, leaving time ones for later:
        $ phengine generate template.json --include gen

    List what can be resolved:
        $ phengine registry plugins
"""

import signal
import sys
from types import FrameType
from typing import Final, Optional
from phengine.config.settings import console

__version__: Final[str] = "0.1.0"


def signal_handle(sig: int, frame: Optional[FrameType]) -> None:
    """Signal handler for graceful interruption.

    Args:
        sig: Signal number
        frame: Current stack frame
    """
    console.print("\n[bold cyan]Interrupted by user. Exiting.[/bold cyan]")
    sys.exit(130)


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point.

    Args:
        argv: Command-line arguments; sys.argv by default

    Note:
        The CLI group is imported here so that importing this module for its
        version string does not pull in the command tree.
    """
    from phengine.commands.app import cli

    signal.signal(signal.SIGINT, signal_handle)
    cli.main(args=argv, prog_name="phengine")


if __name__ == "__main__":
    main()
