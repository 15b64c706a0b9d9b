"""
Placeholder engine facade.

The engine owns a parser, a registry, and one processor per format. It is the
entry point for library callers:

    engine = PlaceholderEngine.standard()
    result = await engine.process_generate(
        '{"id": "{{gen:uuid:abc}}", "at": "{{time:calc:0:seconds}}"}',
        ProcessingOptions(format="json", context={"startTimeTest": 1710508545}),
    )

Multi-phase processing resolves one set of modules at a time, leaving the
other tokens verbatim for a later phase.
"""

from typing import Iterable, Optional, Self, Sequence
from phengine.lib.errors import UnimplementedFeature
from phengine.lib.formats.json_processor import JsonProcessor
from phengine.lib.formats.text_processor import TextProcessor
from phengine.lib.log import LOG
from phengine.lib.parser import PlaceholderParser, PlaceholderResolver
from phengine.lib.plugins.clock import TimePlugin
from phengine.lib.plugins.generator import GeneratorPlugin
from phengine.lib.registry import PluginRegistry
from phengine.lib.transforms import standard_transforms
from phengine.models.dataModel import (
    Format,
    PlaceholderPlugin,
    ProcessingOptions,
    Transform,
)


class PlaceholderEngine:
    """Main entry point for placeholder processing."""

    def __init__(
        self: Self,
        registry: Optional[PluginRegistry] = None,
        parser: Optional[PlaceholderParser] = None,
    ) -> None:
        """Initialize the engine.

        Args:
            registry: Plugin/transform bindings; a fresh registry by default
            parser: Token parser; a fresh parser by default
        """
        self._parser: PlaceholderParser = parser or PlaceholderParser()
        self._registry: PluginRegistry = registry or PluginRegistry()
        resolver: PlaceholderResolver = PlaceholderResolver(self._parser, self._registry)
        self._json: JsonProcessor = JsonProcessor(self._parser, resolver)
        self._text: TextProcessor = TextProcessor(self._parser, resolver)

    @classmethod
    def standard(cls) -> "PlaceholderEngine":
        """Build an engine with the gen and time plugins and built-in transforms."""
        engine: PlaceholderEngine = cls()
        engine.register_plugins([GeneratorPlugin(), TimePlugin()])
        engine.register_transforms(standard_transforms())
        return engine

    @property
    def parser(self: Self) -> PlaceholderParser:
        return self._parser

    @property
    def registry(self: Self) -> PluginRegistry:
        return self._registry

    def register_plugin(self: Self, plugin: PlaceholderPlugin) -> None:
        self._registry.register_plugin(plugin)

    def register_plugins(self: Self, plugins: Iterable[PlaceholderPlugin]) -> None:
        self._registry.register_plugins(plugins)

    def register_transform(self: Self, transform: Transform) -> None:
        self._registry.register_transform(transform)

    def register_transforms(self: Self, transforms: Iterable[Transform]) -> None:
        self._registry.register_transforms(transforms)

    async def process_generate(
        self: Self, content: str, options: Optional[ProcessingOptions] = None
    ) -> str:
        """Resolve all placeholders in content.

        Args:
            content: Document or text with placeholders
            options: Processing options; JSON format by default

        Returns:
            Processed content

        Raises:
            UnimplementedFeature: For the xml format
            DocumentParseError: If a JSON document is invalid
            PlaceholderResolutionError: If any placeholder fails to resolve
        """
        options = options or ProcessingOptions()
        if options.format == Format.JSON:
            return await self._json.process(content, options)
        if options.format == Format.TEXT:
            return await self._text.process(content, options)
        LOG(f"Format '{options.format.value}' requested but not implemented")
        raise UnimplementedFeature(f"{options.format.value.upper()} format not yet implemented")

    async def process_compare(
        self: Self, actual: str, expected: str, options: Optional[ProcessingOptions] = None
    ) -> None:
        """Compare actual content against an expected template.

        Raises:
            UnimplementedFeature: Always
        """
        raise UnimplementedFeature("Compare mode not yet implemented")

    async def process_three_phase(
        self: Self,
        template: str,
        actual: str,
        options: Optional[ProcessingOptions] = None,
        phases: Sequence[Iterable[str]] = (("gen",), ("time",)),
    ) -> None:
        """Resolve a template phase by phase, then compare with actual.

        Each phase resolves only the modules it names; tokens of other
        modules stay verbatim for the next phase.

        Args:
            template: Expected content with placeholders
            actual: Actual content to compare against
            options: Base options; include lists are replaced per phase
            phases: Module sets, in processing order

        Raises:
            UnimplementedFeature: From the compare step
        """
        options = options or ProcessingOptions()
        current: str = template
        for modules in phases:
            phase_options: ProcessingOptions = options.model_copy(
                update={"include_plugins": set(modules)}
            )
            current = await self.process_generate(current, phase_options)
        await self.process_compare(actual, current, options)
