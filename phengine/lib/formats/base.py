"""
Shared substitution loop for format processors.

Both processors rewrite strings by repeated passes: each pass resolves only
the tokens that do not contain another current token (the innermost ones),
replaces every occurrence of each with its string form, and the loop stops
when a pass changes nothing or the pass limit is reached. Resolving
innermost-first lets an outer token whose arguments are themselves tokens be
re-parsed once those arguments are concrete.
"""

from dataclasses import dataclass
from typing import Optional, Sequence
from phengine.config.settings import appsettings
from phengine.lib.errors import IterationLimitExceeded
from phengine.lib.log import LOG
from phengine.lib.parser import PlaceholderParser, PlaceholderResolver
from phengine.models.dataModel import ProcessingOptions, TypedValue


@dataclass
class SubstitutionOutcome:
    """Result of the substitution loop over one string.

    Attributes:
        text: The rewritten string
        last_single: Typed value of the final pass, set only when that pass
            resolved the whole text as one token
    """

    text: str
    last_single: Optional[TypedValue] = None


class FormatProcessor:
    """Base class holding the parser, resolver, and the substitution loop."""

    def __init__(
        self,
        parser: PlaceholderParser,
        resolver: PlaceholderResolver,
        max_iterations: Optional[int] = None,
        strict_iterations: Optional[bool] = None,
    ) -> None:
        """Initialize the processor.

        Args:
            parser: Token scanner/parser
            resolver: Resolution pipeline
            max_iterations: Pass limit; defaults to `appsettings.maxIterations`
            strict_iterations: Raise when the limit is hit; defaults to
                `appsettings.strictIterations`
        """
        self.parser: PlaceholderParser = parser
        self.resolver: PlaceholderResolver = resolver
        self.max_iterations: int = (
            max_iterations if max_iterations is not None else appsettings.maxIterations
        )
        self.strict_iterations: bool = (
            strict_iterations
            if strict_iterations is not None
            else appsettings.strictIterations
        )

    def innermost_select(self, tokens: list[str]) -> list[str]:
        """Return the tokens that contain no other token from the list."""
        return [
            token
            for token in tokens
            if not any(other != token and other in token for other in tokens)
        ]

    async def substitute(
        self,
        text: str,
        options: ProcessingOptions,
        path: Optional[Sequence[str | int]] = None,
    ) -> SubstitutionOutcome:
        """Run the fixed-point substitution loop over one string.

        Args:
            text: String containing tokens
            options: Processing options
            path: Document path for error reporting, None in text mode

        Returns:
            SubstitutionOutcome with the rewritten text

        Raises:
            PlaceholderResolutionError: If any token fails to resolve
            IterationLimitExceeded: If strict and the pass limit is hit
                while the text is still changing
        """
        outcome: SubstitutionOutcome = SubstitutionOutcome(text=text)
        passes: int = 0
        settled: bool = False

        while passes < self.max_iterations:
            tokens: list[str] = self.parser.find_placeholders(outcome.text)
            if not tokens:
                settled = True
                break

            for token in tokens:
                self.resolver.depth_check(token, options, path)

            before: str = outcome.text
            outcome.last_single = None
            for token in self.innermost_select(tokens):
                if token not in outcome.text:
                    continue
                resolved: TypedValue = await self.resolver.resolve(token, options, path)
                if len(tokens) == 1 and token == outcome.text.strip():
                    outcome.last_single = resolved
                outcome.text = outcome.text.replace(token, resolved.as_text())

            passes += 1
            if outcome.text == before:
                settled = True
                break

        if not settled and self.parser.find_placeholders(outcome.text):
            LOG(f"Substitution stopped after {passes} passes: {outcome.text}")
            if self.strict_iterations:
                raise IterationLimitExceeded(outcome.text, self.max_iterations)
        return outcome
