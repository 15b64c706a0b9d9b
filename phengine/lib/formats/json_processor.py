"""
Type-preserving JSON processor.

Walks a parsed JSON document and rewrites string leaves that carry
placeholders. A leaf that is exactly one token becomes the token's typed
value, so `"{{gen:number:42}}"` turns into the number 42. A leaf that mixes
tokens with literal text is interpolated and stays a string, so
`"Count: {{gen:number:42}}"` becomes `"Count: 42"`.

Example:
    processor = JsonProcessor(parser, resolver)
    await processor.process('{"count": "{{gen:number:42}}"}', ProcessingOptions())
    # '{\\n  "count": 42\\n}'
"""

import asyncio
import json
from typing import Any, Sequence
from phengine.config.settings import appsettings
from phengine.lib.errors import DocumentParseError
from phengine.lib.formats.base import FormatProcessor, SubstitutionOutcome
from phengine.lib.log import LOG
from phengine.models.dataModel import ProcessingOptions, TypedValue


class JsonProcessor(FormatProcessor):
    """Processor for JSON documents."""

    async def process(self, document: str, options: ProcessingOptions) -> str:
        """Process a JSON document string.

        Args:
            document: JSON text with placeholders in string values
            options: Processing options

        Returns:
            Serialized JSON with placeholders replaced

        Raises:
            DocumentParseError: If the input is not valid JSON
            PlaceholderResolutionError: If any placeholder fails to resolve
        """
        try:
            tree: Any = json.loads(document)
        except json.JSONDecodeError as e:
            LOG(f"Invalid JSON input: {e}")
            raise DocumentParseError(f"Invalid JSON document: {e}") from e

        processed: Any = await self.process_node(tree, options, [])
        return json.dumps(processed, indent=appsettings.jsonIndent, ensure_ascii=False)

    async def process_node(
        self, node: Any, options: ProcessingOptions, path: Sequence[str | int]
    ) -> Any:
        """Process one node of a parsed document, returning a new node.

        Args:
            node: Parsed JSON value
            options: Processing options
            path: Keys and indices leading to this node

        Returns:
            The processed node; strings may come back as any JSON type
        """
        if isinstance(node, list):
            return await self._children_process(list(enumerate(node)), options, path)

        if isinstance(node, dict):
            values: list[Any] = await self._children_process(
                list(node.items()), options, path
            )
            return dict(zip(node.keys(), values))

        if isinstance(node, str):
            return await self.string_process(node, options, path)

        return node

    async def _children_process(
        self,
        children: list[tuple[str | int, Any]],
        options: ProcessingOptions,
        path: Sequence[str | int],
    ) -> list[Any]:
        if options.concurrent:
            try:
                async with asyncio.TaskGroup() as group:
                    tasks: list[asyncio.Task[Any]] = [
                        group.create_task(self.process_node(child, options, [*path, step]))
                        for step, child in children
                    ]
            except ExceptionGroup as eg:
                # siblings are cancelled by now; surface the first real failure
                raise eg.exceptions[0]
            return [task.result() for task in tasks]
        return [
            await self.process_node(child, options, [*path, step])
            for step, child in children
        ]

    async def string_process(
        self, value: str, options: ProcessingOptions, path: Sequence[str | int]
    ) -> Any:
        """Process a string leaf.

        Args:
            value: The string leaf
            options: Processing options
            path: Path of the leaf

        Returns:
            A typed value for pure placeholders, otherwise a string
        """
        tokens: list[str] = self.parser.find_placeholders(value)
        if not tokens:
            return value

        pure: bool = self.parser.is_placeholder(value)
        if pure and len(tokens) == 1:
            resolved: TypedValue = await self.resolver.resolve(value, options, path)
            return resolved.value

        outcome: SubstitutionOutcome = await self.substitute(value, options, path)
        if not pure:
            return outcome.text

        if outcome.last_single is not None:
            return outcome.last_single.value
        remaining: list[str] = self.parser.find_placeholders(outcome.text)
        if self.parser.is_placeholder(outcome.text) and len(remaining) == 1:
            final: TypedValue = await self.resolver.resolve(outcome.text, options, path)
            return final.value
        return outcome.text
