"""
Built-in value transforms.

Transforms run after a plugin has resolved a placeholder, chained with `|`:

    {{gen:string:42|toNumber}}          -> 42
    {{gen:number:42|toString}}          -> "42"
    {{gen:string:yes|toBoolean}}        -> true

Each transform is a pure function of its input and always returns a value
whose type tag matches the value.
"""

from typing import Final
from phengine.lib.errors import TransformApplicationError
from phengine.lib.values import number_parse, value_stringify
from phengine.models.dataModel import Transform, TypedValue, ValueType


class ToNumberTransform:
    """Convert a value to a number.

    Strings are parsed (blank text is 0), booleans become 1 or 0. Null,
    objects, arrays, and non-numeric strings are rejected.
    """

    name: str = "toNumber"

    def apply(self, value: TypedValue, params: list[str]) -> TypedValue:
        if value.type == ValueType.NUMBER:
            return value
        if value.type == ValueType.BOOLEAN:
            return TypedValue(value=1 if value.value else 0, type=ValueType.NUMBER)
        if value.type == ValueType.STRING:
            try:
                number: int | float = number_parse(value.value, blank_is_zero=True)
            except ValueError:
                raise TransformApplicationError(
                    self.name, f'Cannot convert "{value.value}" to number'
                ) from None
            return TypedValue(value=number, type=ValueType.NUMBER)
        if value.type == ValueType.NULL:
            raise TransformApplicationError(self.name, "Cannot convert null to number")
        raise TransformApplicationError(
            self.name, f"Cannot convert {value.type.value} to number"
        )


class ToStringTransform:
    """Convert a value to its string form.

    Objects and arrays become compact JSON, null becomes "null".
    """

    name: str = "toString"

    def apply(self, value: TypedValue, params: list[str]) -> TypedValue:
        if value.type == ValueType.STRING:
            return value
        return TypedValue(value=value_stringify(value.value), type=ValueType.STRING)


class ToBooleanTransform:
    """Convert a value to a boolean.

    Recognized strings (case-insensitive, trimmed):
        true:  true, yes, 1, on, y
        false: false, no, 0, off, n, ""
    Numbers are false only when zero. Anything else follows truthiness.
    """

    name: str = "toBoolean"

    TRUTHY: Final[frozenset[str]] = frozenset({"true", "yes", "1", "on", "y"})
    FALSY: Final[frozenset[str]] = frozenset({"false", "no", "0", "off", "n", ""})

    def apply(self, value: TypedValue, params: list[str]) -> TypedValue:
        if value.type == ValueType.BOOLEAN:
            return value

        result: bool
        if value.type == ValueType.STRING:
            lowered: str = value.value.strip().lower()
            if lowered in self.TRUTHY:
                result = True
            elif lowered in self.FALSY:
                result = False
            else:
                result = bool(value.value)
        elif value.type == ValueType.NUMBER:
            result = value.value != 0
        elif value.type == ValueType.NULL:
            result = False
        else:
            # objects and arrays are truthy even when empty
            result = True
        return TypedValue(value=result, type=ValueType.BOOLEAN)


def standard_transforms() -> list[Transform]:
    """Return fresh instances of the built-in transforms."""
    return [ToNumberTransform(), ToStringTransform(), ToBooleanTransform()]
