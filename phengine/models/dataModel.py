"""
dataModel.py

This module defines the data models and schemas used throughout the
placeholder engine. The models leverage Pydantic for validation and type
safety.

Features:
- Enum classes for value types and document formats.
- The typed value exchanged between plugins, transforms, and processors.
- Parsed placeholder and transform records.
- Processing context and processing options.
- Plugin and transform Protocols.
- CLI processing results.

Usage:
Import these models to validate and structure data used in the engine.
"""

from pydantic import BaseModel, Field, ConfigDict, model_validator
from typing import Any, Awaitable, Optional, Protocol, Self, runtime_checkable
from datetime import datetime
from enum import Enum
from phengine.lib.values import value_stringify


class ValueType(str, Enum):
    """
    Enum for the runtime shape of a resolved value.
    """

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"
    NULL = "null"


class Format(str, Enum):
    """
    Enum for document formats.
    """

    JSON = "json"
    TEXT = "text"
    XML = "xml"


def _type_infer(value: Any) -> ValueType | None:
    if value is None:
        return ValueType.NULL
    if isinstance(value, bool):
        return ValueType.BOOLEAN
    if isinstance(value, (int, float)):
        return ValueType.NUMBER
    if isinstance(value, str):
        return ValueType.STRING
    if isinstance(value, dict):
        return ValueType.OBJECT
    if isinstance(value, list):
        return ValueType.ARRAY
    return None


class TypedValue(BaseModel):
    """A resolved value paired with a tag describing its shape.

    The tag must describe the value: a number-tagged value holds an int or
    float (never a bool), an object-tagged value holds a dict, and so on.
    Construction fails otherwise.

    Attributes:
        value: The resolved value
        type: Shape of `value`
    """

    model_config = ConfigDict(frozen=True)

    value: Any = None
    type: ValueType

    @model_validator(mode="after")
    def type_check(self) -> Self:
        inferred: ValueType | None = _type_infer(self.value)
        if inferred is None:
            raise ValueError(
                f"Unsupported value of type {type(self.value).__name__}"
            )
        if inferred != self.type:
            raise ValueError(
                f"Value {self.value!r} is tagged '{self.type.value}' "
                f"but has shape '{inferred.value}'"
            )
        return self

    @classmethod
    def of(cls, value: Any) -> "TypedValue":
        """Build a typed value, inferring the tag from the value."""
        inferred: ValueType | None = _type_infer(value)
        if inferred is None:
            raise ValueError(f"Unsupported value of type {type(value).__name__}")
        return cls(value=value, type=inferred)

    def as_text(self) -> str:
        """String form used when the value is interpolated into text."""
        return value_stringify(self.value)


class TransformSpec(BaseModel):
    """One `|name:param:...` segment of a placeholder.

    Attributes:
        name: Transform name
        params: Ordered parameters
    """

    name: str
    params: list[str] = Field(default_factory=list)


class ParsedPlaceholder(BaseModel):
    """Structured form of a `{{module:action:args|transforms}}` token.

    Attributes:
        original: Trimmed token text
        module: Resolver namespace (maps to one plugin)
        action: Operation within the module
        args: Ordered arguments, validated by the plugin
        transforms: Transform chain in declared order
    """

    original: str
    module: str
    action: str
    args: list[str] = Field(default_factory=list)
    transforms: list[TransformSpec] = Field(default_factory=list)


class ProcessingContext(BaseModel):
    """Caller-supplied data passed untouched to plugins.

    Two keys have a recognized meaning as base-time anchors; any other key is
    kept as an extra field.

    Attributes:
        testcaseId: Optional identifier of the running test case
        startTimeTest: Base time of the test (preferred anchor)
        startTimeScript: Base time of the script (fallback anchor)
    """

    model_config = ConfigDict(extra="allow", arbitrary_types_allowed=True)

    testcaseId: Optional[str | int] = None
    startTimeTest: Optional[datetime | int | float | str] = None
    startTimeScript: Optional[datetime | int | float | str] = None

    def anchor_get(self) -> Optional[datetime | int | float | str]:
        """Return the preferred base-time anchor, if any."""
        if self.startTimeTest not in (None, ""):
            return self.startTimeTest
        if self.startTimeScript not in (None, ""):
            return self.startTimeScript
        return None

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a declared or extra key."""
        if key in type(self).model_fields:
            value: Any = getattr(self, key)
            return default if value is None else value
        extra: dict[str, Any] = self.model_extra or {}
        return extra.get(key, default)


class ProcessingOptions(BaseModel):
    """Options for one processing call.

    Attributes:
        format: Document format
        include_plugins: When set, only these modules are resolved
        exclude_plugins: When set, these modules are never resolved
        context: Data bag handed to plugins
        max_nesting_depth: Maximum brace nesting of a single token
        concurrent: Resolve sibling document leaves concurrently
    """

    format: Format = Format.JSON
    include_plugins: Optional[set[str]] = None
    exclude_plugins: Optional[set[str]] = None
    context: ProcessingContext = Field(default_factory=ProcessingContext)
    max_nesting_depth: Optional[int] = Field(default=None, ge=1)
    concurrent: bool = False

    def module_allowed(self, module: str) -> bool:
        """Whether tokens addressing `module` are resolved in this call.

        The include list is checked first; the exclude list can still
        suppress a module that the include list names.
        """
        if self.include_plugins is not None and module not in self.include_plugins:
            return False
        if self.exclude_plugins is not None and module in self.exclude_plugins:
            return False
        return True


class ProcessResult(BaseModel):
    """Result of a CLI processing run.

    Attributes:
        text: Processed output text
        error: Optional error message
        success: Whether processing succeeded
        exit_code: Exit code for the CLI
    """

    text: str
    error: str | None = None
    success: bool = True
    exit_code: int = 0


@runtime_checkable
class PlaceholderPlugin(Protocol):
    """Protocol for value-producing plugins.

    `name` is the module a token addresses. `resolve` may be a plain method
    or a coroutine; the resolution pipeline awaits the result when needed.
    """

    name: str

    def resolve(
        self, placeholder: ParsedPlaceholder, context: ProcessingContext
    ) -> TypedValue | Awaitable[TypedValue]:
        """Resolve a parsed placeholder to a typed value.

        Raises:
            PluginResolutionError: If the action or arguments are rejected
        """
        ...


@runtime_checkable
class Transform(Protocol):
    """Protocol for value transforms.

    Transforms are synchronous and must return a value whose tag matches its
    shape.
    """

    name: str

    def apply(self, value: TypedValue, params: list[str]) -> TypedValue:
        """Transform a typed value.

        Raises:
            TransformApplicationError: If the input cannot be transformed
        """
        ...
