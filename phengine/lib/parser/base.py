r"""
Placeholder scanner and token parser.

Placeholders have the grammar

    {{ MODULE : ACTION ( : ARG )* ( | TRANSFORM ( : PARAM )* )* }}

where every segment may itself contain complete nested `{{...}}` tokens.

The parser handles:
- Discovery of top-level and nested tokens by brace-depth counting
- Deduplication of identical token strings
- Pipe and colon splitting that ignores separators inside nested tokens
- Escaped colons (`\:`) in the module/action/argument part

Example:
    parser = PlaceholderParser()
    parser.find_placeholders("{{time:format:{{gen:number:1}}:dd.MM.yyyy}}")
    # ['{{time:format:{{gen:number:1}}:dd.MM.yyyy}}', '{{gen:number:1}}']
    parser.parse(r"{{time:calc:0:HH\:mm\:ss}}").args
    # ['0', 'HH:mm:ss']
"""

import re
from typing import Final, Self
from phengine.lib.errors import MalformedPlaceholder
from phengine.models.dataModel import ParsedPlaceholder, TransformSpec

OPEN: Final[str] = "{{"
CLOSE: Final[str] = "}}"
ESCAPED_COLON: Final[str] = "\\:"

_placeholder_re: Final[re.Pattern[str]] = re.compile(r"\{\{.+\}\}")


class PlaceholderParser:
    """Scanner and parser for `{{module:action:args|transforms}}` tokens.

    The parser is stateless; one instance may be shared by any number of
    concurrent processing calls.
    """

    def is_placeholder(self: Self, text: str) -> bool:
        """Check whether the whole (trimmed) text is one token.

        Args:
            text: Candidate text

        Returns:
            True if the trimmed text starts with `{{`, ends with `}}`, and has
            at least one character between them
        """
        return _placeholder_re.fullmatch(text.strip()) is not None

    def find_placeholders(self: Self, text: str) -> list[str]:
        """Find all tokens in text, including nested ones.

        Args:
            text: Text to scan

        Returns:
            Distinct token strings in discovery order. Each top-level token
            precedes the tokens nested inside it.

        Note:
            Unterminated fragments are dropped without error.
        """
        found: dict[str, None] = {}
        self._scan(text, found)
        return list(found)

    def _scan(self: Self, text: str, found: dict[str, None]) -> None:
        depth: int = 0
        start: int = -1
        i: int = 0
        length: int = len(text)

        while i < length:
            pair: str = text[i : i + 2]
            if pair == OPEN:
                if depth == 0:
                    start = i
                depth += 1
                i += 2
                continue
            if pair == CLOSE and depth > 0:
                depth -= 1
                if depth == 0:
                    token: str = text[start : i + 2]
                    found.setdefault(token, None)
                    self._scan(token[2:-2], found)
                i += 2
                continue
            i += 1

    def depth_measure(self: Self, text: str) -> int:
        """Return the maximum brace nesting depth reached in text."""
        depth: int = 0
        deepest: int = 0
        i: int = 0
        while i < len(text):
            pair: str = text[i : i + 2]
            if pair == OPEN:
                depth += 1
                deepest = max(deepest, depth)
                i += 2
            elif pair == CLOSE and depth > 0:
                depth -= 1
                i += 2
            else:
                i += 1
        return deepest

    def parse(self: Self, token: str) -> ParsedPlaceholder:
        """Parse one token into its components.

        Args:
            token: Token text, e.g. "{{gen:uuid:inst1|toString}}"

        Returns:
            ParsedPlaceholder with module, action, args, and transforms

        Raises:
            MalformedPlaceholder: If the text is not a token, lacks a module
                or action, or names an empty transform
        """
        trimmed: str = token.strip()
        if not self.is_placeholder(trimmed):
            raise MalformedPlaceholder(f"Invalid placeholder format: {token}")

        inner: str = trimmed[2:-2]
        parts: list[str] = self._split(inner, "|", unescape_colon=False)
        main_part: str = parts[0] if parts else ""

        segments: list[str] = self._split(main_part, ":", unescape_colon=True)
        if len(segments) < 2:
            raise MalformedPlaceholder(
                "Invalid placeholder format. Expected at least module:action, "
                f"got: {main_part}"
            )
        module, action, *args = segments
        if not module or not action:
            raise MalformedPlaceholder(
                f"Placeholder module and action must not be empty: {trimmed}"
            )

        transforms: list[TransformSpec] = [
            self._transform_parse(part, trimmed) for part in parts[1:]
        ]

        return ParsedPlaceholder(
            original=trimmed,
            module=module,
            action=action,
            args=args,
            transforms=transforms,
        )

    def _split(self: Self, content: str, separator: str, unescape_colon: bool) -> list[str]:
        """Split on a separator at nesting depth 0.

        Args:
            content: Text to split
            separator: Single separator character
            unescape_colon: Turn `\\:` into a literal colon that never splits

        Returns:
            Trimmed segments; a trailing empty segment is dropped
        """
        parts: list[str] = []
        current: list[str] = []
        depth: int = 0
        i: int = 0

        while i < len(content):
            pair: str = content[i : i + 2]
            char: str = content[i]
            if pair == OPEN:
                depth += 1
                current.append(pair)
                i += 2
            elif pair == CLOSE and depth > 0:
                depth -= 1
                current.append(pair)
                i += 2
            elif unescape_colon and pair == ESCAPED_COLON:
                current.append(":")
                i += 2
            elif char == separator and depth == 0:
                parts.append("".join(current).strip())
                current = []
                i += 1
            else:
                current.append(char)
                i += 1

        if current:
            parts.append("".join(current).strip())
        return parts

    def _transform_parse(self: Self, part: str, token: str) -> TransformSpec:
        name, *params = [segment.strip() for segment in part.split(":")]
        if not name:
            raise MalformedPlaceholder(f"Empty transform name in placeholder: {token}")
        return TransformSpec(name=name, params=params)
