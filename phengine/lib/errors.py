"""
Error taxonomy for the placeholder engine.

Every failure raised by the engine derives from `PlaceholderError`. Errors
that map naturally onto a builtin category also inherit from it (e.g.
`MalformedPlaceholder` is a `ValueError`), so callers may catch either.

Hierarchy:
    PlaceholderError
    ├── MalformedPlaceholder (ValueError)
    │   └── NestingDepthExceeded
    ├── PluginNotFound (LookupError)
    ├── TransformNotFound (LookupError)
    ├── PluginResolutionError
    ├── TransformApplicationError
    ├── UnimplementedFeature (NotImplementedError)
    ├── RegistrationError (ValueError)
    ├── IterationLimitExceeded
    ├── DocumentParseError (ValueError)
    └── PlaceholderResolutionError
"""

from typing import Iterable, Optional, Sequence


class PlaceholderError(Exception):
    """Base class for all engine errors."""


class MalformedPlaceholder(PlaceholderError, ValueError):
    """Token text does not match the placeholder grammar."""


class NestingDepthExceeded(MalformedPlaceholder):
    """Token nests deeper than the configured maximum."""

    def __init__(self, depth: int, limit: int) -> None:
        self.depth: int = depth
        self.limit: int = limit
        super().__init__(f"Placeholder nesting depth {depth} exceeds maximum {limit}")


def _names_join(names: Iterable[str]) -> str:
    joined: str = ", ".join(names)
    return joined or "none"


class PluginNotFound(PlaceholderError, LookupError):
    """No plugin is registered under the requested module name."""

    def __init__(self, name: str, available: Sequence[str]) -> None:
        self.name: str = name
        self.available: list[str] = list(available)
        super().__init__(
            f"Plugin '{name}' not found. Available plugins: {_names_join(self.available)}"
        )


class TransformNotFound(PlaceholderError, LookupError):
    """No transform is registered under the requested name."""

    def __init__(self, name: str, available: Sequence[str]) -> None:
        self.name: str = name
        self.available: list[str] = list(available)
        super().__init__(
            f"Transform '{name}' not found. "
            f"Available transforms: {_names_join(self.available)}"
        )


class PluginResolutionError(PlaceholderError):
    """A plugin rejected the action or its arguments."""

    def __init__(self, module: str, action: str, message: str) -> None:
        self.module: str = module
        self.action: str = action
        super().__init__(f"{module}:{action}: {message}")


class TransformApplicationError(PlaceholderError):
    """A transform rejected its input value."""

    def __init__(self, transform: str, message: str) -> None:
        self.transform: str = transform
        super().__init__(f"{transform}: {message}")


class UnimplementedFeature(PlaceholderError, NotImplementedError):
    """Feature exists in the interface but has no implementation."""


class RegistrationError(PlaceholderError, ValueError):
    """A plugin or transform name is already registered."""


class IterationLimitExceeded(PlaceholderError):
    """Fixed-point substitution did not settle within the pass limit."""

    def __init__(self, text: str, limit: int) -> None:
        self.text: str = text
        self.limit: int = limit
        super().__init__(
            f"Substitution did not settle after {limit} passes: {text!r}"
        )


class DocumentParseError(PlaceholderError, ValueError):
    """Input document is not valid for the requested format."""


class PlaceholderResolutionError(PlaceholderError):
    """
    Failure while resolving one token, annotated with where it happened.

    Attributes:
        token: The token text whose resolution failed
        path: Document path in dot/bracket notation, or None in text mode
        cause: The underlying error
    """

    def __init__(
        self, token: str, cause: BaseException, path: Optional[str] = None
    ) -> None:
        self.token: str = token
        self.path: Optional[str] = path
        self.cause: BaseException = cause
        location: str = f' at path "{path}"' if path is not None else ""
        super().__init__(f'Failed to resolve placeholder "{token}"{location}: {cause}')
