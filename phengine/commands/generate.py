"""
Generate command: resolve placeholders in a document.

Reads a JSON document or free text from a file or stdin, resolves every
placeholder with the standard engine, and writes the result to stdout or a
file. Errors are reported on the console and reflected in the exit code.

Usage:
    phengine generate template.json
    phengine generate --format text --context startTimeTest=1710508545 < msg.txt
    phengine generate template.json --include gen --output partial.json
"""

import asyncio
import json
from pathlib import Path
from typing import Any, Optional
import click
from pydantic import ValidationError
from rich.markup import escape
from phengine.commands.base import RichCommand, rich_help
from phengine.config.settings import appsettings, console, context_loadDefault
from phengine.lib.engine import PlaceholderEngine
from phengine.lib.errors import PlaceholderError
from phengine.lib.log import LOG
from phengine.models.dataModel import Format, ProcessingOptions, ProcessResult


def context_pairParse(pairs: tuple[str, ...]) -> dict[str, Any]:
    """
    Parse `KEY=VALUE` pairs into a context dictionary.

    Values that are valid JSON (numbers, booleans, objects) are decoded;
    anything else is kept as a string.

    Args:
        pairs: Raw `KEY=VALUE` strings

    Returns:
        dict: Parsed context entries

    Raises:
        click.BadParameter: If a pair has no `=` or an empty key
    """
    context: dict[str, Any] = {}
    for pair in pairs:
        key, sep, raw = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            raise click.BadParameter(
                f"'{pair}' is not of the form KEY=VALUE", param_hint="--context"
            )
        try:
            context[key] = json.loads(raw)
        except json.JSONDecodeError:
            context[key] = raw
    return context


def context_fileRead(context_file: Optional[Path]) -> dict[str, Any]:
    """
    Read a JSON object of context entries from a file.

    Raises:
        click.BadParameter: If the file does not hold a JSON object
    """
    if context_file is None:
        return {}
    try:
        data: Any = json.loads(context_file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"invalid JSON: {e}", param_hint="--context-file") from e
    if not isinstance(data, dict):
        raise click.BadParameter("must hold a JSON object", param_hint="--context-file")
    return data


async def generate_do(
    content: str,
    options: ProcessingOptions,
    engine: Optional[PlaceholderEngine] = None,
) -> ProcessResult:
    """
    Process content and capture the outcome.

    Args:
        content: Document or text to process
        options: Processing options
        engine: Engine to use; the standard engine by default

    Returns:
        ProcessResult: Processed text, or the error with exit code 1
    """
    engine = engine or PlaceholderEngine.standard()
    try:
        text: str = await engine.process_generate(content, options)
    except PlaceholderError as e:
        LOG(f"Generation failed: {e}")
        return ProcessResult(text="", error=str(e), success=False, exit_code=1)
    return ProcessResult(text=text)


@click.command(
    cls=RichCommand,
    short_help="Resolve placeholders in a document",
    help=rich_help(
        command="generate",
        description="Resolve all placeholders in a JSON document or text",
        usage="phengine generate [FILE] [OPTIONS]",
        args={
            "FILE": "input file; stdin when omitted or '-'",
            "--format": "json (default), text, or xml",
            "--include": "only resolve this module (repeatable)",
            "--exclude": "never resolve this module (repeatable)",
            "--context": "context entry KEY=VALUE (repeatable)",
            "--context-file": "JSON file of context entries",
            "--output": "write the result to this file",
            "--max-depth": "maximum placeholder nesting depth",
            "--concurrent": "resolve sibling values concurrently",
        },
    ),
)
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option(
    "--format",
    "fmt",
    type=click.Choice([f.value for f in Format]),
    default=Format.JSON.value,
    help="Input format",
)
@click.option("--include", multiple=True, help="Only resolve these modules")
@click.option("--exclude", multiple=True, help="Never resolve these modules")
@click.option("--context", "context_pairs", multiple=True, help="Context KEY=VALUE")
@click.option(
    "--context-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON file of context entries",
)
@click.option(
    "--output",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Output file (default: stdout)",
)
@click.option(
    "--max-depth", type=click.IntRange(min=1), help="Maximum placeholder nesting depth"
)
@click.option(
    "--concurrent/--sequential",
    default=None,
    help="Resolve sibling values concurrently",
)
@click.pass_context
def generate(
    ctx: click.Context,
    source: Any,
    fmt: str,
    include: tuple[str, ...],
    exclude: tuple[str, ...],
    context_pairs: tuple[str, ...],
    context_file: Optional[Path],
    output: Optional[Path],
    max_depth: Optional[int],
    concurrent: Optional[bool],
) -> None:
    """Resolve placeholders and write the result."""
    context: dict[str, Any] = {
        **context_loadDefault(),
        **context_fileRead(context_file),
        **context_pairParse(context_pairs),
    }
    try:
        options: ProcessingOptions = ProcessingOptions(
            format=fmt,
            include_plugins=set(include) if include else None,
            exclude_plugins=set(exclude) if exclude else None,
            context=context,
            max_nesting_depth=max_depth,
            concurrent=appsettings.concurrentLeaves if concurrent is None else concurrent,
        )
    except ValidationError as e:
        LOG(f"Invalid processing options: {e}")
        raise click.UsageError(f"Invalid context: {e}", ctx=ctx) from e

    content: str = source.read()
    result: ProcessResult = asyncio.run(generate_do(content, options))
    if not result.success:
        console.print(f"[bold red]Error:[/bold red] {escape(result.error or '')}")
        ctx.exit(result.exit_code)

    if output is not None:
        output.write_text(result.text + "\n", encoding="utf-8")
        console.print(f"[bold green]Wrote {output}[/bold green]")
    else:
        click.echo(result.text)
