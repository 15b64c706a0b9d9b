"""
Generator plugin for test data.

Actions (module "gen"):
- uuid[:id]       the given identifier, or a random UUID4
- number[:n]      the given number, or a random integer 0-9999
- zugnummer[:n]   alias for number
- string[:s]      the given string, or a random 8-character alphanumeric
- boolean[:b]     true/1/yes or false/0/no, or a random boolean

Examples:
    {{gen:uuid:12345678-1234-1234-1234-123456789012}}  -> "12345678-..."
    {{gen:number:42}}                                  -> 42
    {{gen:zugnummer:4837}}                             -> 4837
"""

import random
import string
import uuid
from typing import Callable, Final
from phengine.lib.errors import PluginResolutionError
from phengine.lib.values import number_parse
from phengine.models.dataModel import (
    ParsedPlaceholder,
    ProcessingContext,
    TypedValue,
    ValueType,
)

ALPHANUMERIC: Final[str] = string.ascii_letters + string.digits


class GeneratorPlugin:
    """Plugin producing identifiers, numbers, strings, and booleans."""

    name: str = "gen"

    def __init__(self, rng: random.Random | None = None) -> None:
        """Initialize the plugin.

        Args:
            rng: Random source for generated values; seeded instances make
                output reproducible
        """
        self.rng: random.Random = rng or random.Random()
        self._actions: dict[str, Callable[[str, list[str]], TypedValue]] = {
            "uuid": self._uuid,
            "number": self._number,
            "zugnummer": self._number,
            "string": self._string,
            "boolean": self._boolean,
        }

    def resolve(
        self, placeholder: ParsedPlaceholder, context: ProcessingContext
    ) -> TypedValue:
        handler = self._actions.get(placeholder.action)
        if handler is None:
            raise PluginResolutionError(
                self.name,
                placeholder.action,
                f"unknown action '{placeholder.action}'. "
                f"Available: {', '.join(self._actions)}",
            )
        return handler(placeholder.action, placeholder.args)

    def _uuid(self, action: str, args: list[str]) -> TypedValue:
        if args and args[0]:
            return TypedValue(value=args[0], type=ValueType.STRING)
        generated: uuid.UUID = uuid.UUID(int=self.rng.getrandbits(128), version=4)
        return TypedValue(value=str(generated), type=ValueType.STRING)

    def _number(self, action: str, args: list[str]) -> TypedValue:
        if args and args[0]:
            try:
                return TypedValue(value=number_parse(args[0]), type=ValueType.NUMBER)
            except ValueError:
                raise PluginResolutionError(
                    self.name, action, f"invalid number '{args[0]}'"
                ) from None
        return TypedValue(value=self.rng.randrange(10000), type=ValueType.NUMBER)

    def _string(self, action: str, args: list[str]) -> TypedValue:
        if args and args[0]:
            return TypedValue(value=args[0], type=ValueType.STRING)
        generated: str = "".join(self.rng.choice(ALPHANUMERIC) for _ in range(8))
        return TypedValue(value=generated, type=ValueType.STRING)

    def _boolean(self, action: str, args: list[str]) -> TypedValue:
        if args and args[0]:
            lowered: str = args[0].lower()
            if lowered in ("true", "1", "yes"):
                return TypedValue(value=True, type=ValueType.BOOLEAN)
            if lowered in ("false", "0", "no"):
                return TypedValue(value=False, type=ValueType.BOOLEAN)
            raise PluginResolutionError(self.name, action, f"invalid boolean '{args[0]}'")
        return TypedValue(value=self.rng.random() >= 0.5, type=ValueType.BOOLEAN)
