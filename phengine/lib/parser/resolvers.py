"""
Placeholder resolution pipeline.

Turns one token into a typed value:
1. Parse the token
2. Skip modules filtered out by include/exclude lists (token kept verbatim)
3. Look up the module's plugin and resolve (awaiting async plugins)
4. Fold the value through the transform chain in declared order

Any failure is re-raised as `PlaceholderResolutionError` carrying the token
text and, for documents, the path of the leaf being processed.
"""

import inspect
from typing import Any, Self, Sequence
from phengine.lib.errors import NestingDepthExceeded, PlaceholderResolutionError
from phengine.lib.log import LOG
from phengine.lib.parser.base import PlaceholderParser
from phengine.lib.registry import PluginRegistry
from phengine.models.dataModel import (
    ParsedPlaceholder,
    PlaceholderPlugin,
    ProcessingOptions,
    TypedValue,
)


def path_format(path: Sequence[str | int]) -> str:
    """Render a document path in dot/bracket notation.

    Args:
        path: Object keys (str) and array indices (int), outermost first

    Returns:
        e.g. "items[0].id"; "" for the document root
    """
    rendered: str = ""
    for part in path:
        if isinstance(part, int):
            rendered += f"[{part}]"
        elif rendered:
            rendered += f".{part}"
        else:
            rendered = part
    return rendered


class PlaceholderResolver:
    """Resolver for single tokens using the plugin registry."""

    def __init__(self: Self, parser: PlaceholderParser, registry: PluginRegistry) -> None:
        self.parser: PlaceholderParser = parser
        self.registry: PluginRegistry = registry

    async def resolve(
        self: Self,
        token: str,
        options: ProcessingOptions,
        path: Sequence[str | int] | None = None,
    ) -> TypedValue:
        """Resolve one token to a typed value.

        Args:
            token: Token text
            options: Processing options (filters, context, depth limit)
            path: Document path of the leaf, or None outside documents

        Returns:
            The resolved typed value; a string value equal to the token when
            the token's module is filtered out

        Raises:
            PlaceholderResolutionError: Wrapping any parse, lookup, plugin,
                or transform failure
        """
        try:
            return await self._resolve(token, options)
        except Exception as e:
            raise self._error_wrap(token, e, path) from e

    def depth_check(
        self: Self,
        token: str,
        options: ProcessingOptions,
        path: Sequence[str | int] | None = None,
    ) -> None:
        """Reject a token that nests deeper than `options.max_nesting_depth`.

        Processors call this on every token they find, before inner tokens
        are substituted away.

        Raises:
            PlaceholderResolutionError: Wrapping NestingDepthExceeded
        """
        try:
            self._depth_check(token, options)
        except NestingDepthExceeded as e:
            raise self._error_wrap(token, e, path) from e

    def _depth_check(self: Self, token: str, options: ProcessingOptions) -> None:
        if options.max_nesting_depth is None:
            return
        depth: int = self.parser.depth_measure(token)
        if depth > options.max_nesting_depth:
            raise NestingDepthExceeded(depth, options.max_nesting_depth)

    def _error_wrap(
        self: Self,
        token: str,
        error: Exception,
        path: Sequence[str | int] | None,
    ) -> PlaceholderResolutionError:
        where: str | None = path_format(path) if path is not None else None
        LOG(f"Resolution of {token} failed at {where!r}: {error}")
        return PlaceholderResolutionError(token, error, where)

    async def _resolve(self: Self, token: str, options: ProcessingOptions) -> TypedValue:
        self._depth_check(token, options)

        placeholder: ParsedPlaceholder = self.parser.parse(token)

        if not options.module_allowed(placeholder.module):
            return TypedValue(value=token, type="string")

        plugin: PlaceholderPlugin = self.registry.get_plugin(placeholder.module)
        outcome: Any = plugin.resolve(placeholder, options.context)
        if inspect.isawaitable(outcome):
            outcome = await outcome
        result: TypedValue = self._typed_ensure(outcome, placeholder.module)

        for spec in placeholder.transforms:
            transform = self.registry.get_transform(spec.name)
            result = self._typed_ensure(transform.apply(result, spec.params), spec.name)

        return result

    def _typed_ensure(self: Self, outcome: Any, source: str) -> TypedValue:
        if not isinstance(outcome, TypedValue):
            raise TypeError(
                f"'{source}' returned {type(outcome).__name__}, expected TypedValue"
            )
        return outcome
