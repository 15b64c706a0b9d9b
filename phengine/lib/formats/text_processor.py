"""
Plain-text processor.

Text has no structural types to preserve, so every placeholder is replaced by
the string form of its resolved value using the shared innermost-first loop.

Example:
    await TextProcessor(parser, resolver).process(
        "Hello {{gen:string:World}}!", ProcessingOptions(format="text")
    )
    # 'Hello World!'
"""

from phengine.lib.formats.base import FormatProcessor, SubstitutionOutcome
from phengine.models.dataModel import ProcessingOptions


class TextProcessor(FormatProcessor):
    """Processor for free-form text."""

    async def process(self, text: str, options: ProcessingOptions) -> str:
        """Replace all placeholders in text with their string forms.

        Raises:
            PlaceholderResolutionError: If any placeholder fails to resolve
        """
        if not self.parser.find_placeholders(text):
            return text
        outcome: SubstitutionOutcome = await self.substitute(text, options)
        return outcome.text
