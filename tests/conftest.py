"""Shared fixtures: mock plugins and ready-made engines."""

import asyncio
from datetime import datetime, timezone
import pytest
from phengine.lib.engine import PlaceholderEngine
from phengine.lib.plugins.clock import TimePlugin
from phengine.lib.plugins.generator import GeneratorPlugin
from phengine.lib.transforms import standard_transforms
from phengine.models.dataModel import (
    ParsedPlaceholder,
    ProcessingContext,
    TypedValue,
    ValueType,
)
from phengine.lib.values import number_parse

FIXED_NOW: datetime = datetime(2025, 3, 15, 14, 30, 45, tzinfo=timezone.utc)


class MockPlugin:
    """Synchronous test plugin: echo, uppercase, reverse, number, constant."""

    name: str = "mock"

    def resolve(
        self, placeholder: ParsedPlaceholder, context: ProcessingContext
    ) -> TypedValue:
        if not placeholder.args:
            raise ValueError(
                f"Mock plugin: action '{placeholder.action}' requires an argument"
            )
        value: str = placeholder.args[0]
        match placeholder.action:
            case "echo" | "constant":
                return TypedValue(value=value, type=ValueType.STRING)
            case "uppercase":
                return TypedValue(value=value.upper(), type=ValueType.STRING)
            case "reverse":
                return TypedValue(value=value[::-1], type=ValueType.STRING)
            case "number":
                return TypedValue(value=number_parse(value), type=ValueType.NUMBER)
        raise ValueError(f"Mock plugin: unknown action '{placeholder.action}'")


class AsyncMockPlugin:
    """Coroutine test plugin: echo, uppercase, delay, number, fetchValue."""

    name: str = "asyncMock"

    DATA: dict[str, object] = {"user": "John Doe", "age": 30, "active": True}

    async def resolve(
        self, placeholder: ParsedPlaceholder, context: ProcessingContext
    ) -> TypedValue:
        if not placeholder.args:
            raise ValueError(
                f"AsyncMock plugin: action '{placeholder.action}' requires an argument"
            )
        value: str = placeholder.args[0]
        match placeholder.action:
            case "echo":
                await asyncio.sleep(0.001)
                return TypedValue(value=value, type=ValueType.STRING)
            case "uppercase":
                await asyncio.sleep(0.001)
                return TypedValue(value=value.upper(), type=ValueType.STRING)
            case "delay":
                ms: int = int(placeholder.args[1]) if len(placeholder.args) > 1 else 10
                await asyncio.sleep(ms / 1000)
                return TypedValue(value=value, type=ValueType.STRING)
            case "number":
                await asyncio.sleep(0.001)
                return TypedValue(value=number_parse(value), type=ValueType.NUMBER)
            case "fetchValue":
                await asyncio.sleep(0.005)
                if value not in self.DATA:
                    raise KeyError(f"key '{value}' not found in mock data")
                return TypedValue.of(self.DATA[value])
        raise ValueError(f"AsyncMock plugin: unknown action '{placeholder.action}'")


@pytest.fixture
def mock_plugin() -> MockPlugin:
    return MockPlugin()


@pytest.fixture
def async_mock_plugin() -> AsyncMockPlugin:
    return AsyncMockPlugin()


@pytest.fixture
def engine(mock_plugin: MockPlugin, async_mock_plugin: AsyncMockPlugin) -> PlaceholderEngine:
    """Engine with mock plugins, gen, a fixed-clock time plugin, and transforms."""
    engine = PlaceholderEngine()
    engine.register_plugins(
        [mock_plugin, async_mock_plugin, GeneratorPlugin(), TimePlugin(now=lambda: FIXED_NOW)]
    )
    engine.register_transforms(standard_transforms())
    return engine


@pytest.fixture
def mock_engine(mock_plugin: MockPlugin, async_mock_plugin: AsyncMockPlugin) -> PlaceholderEngine:
    """Engine with only the mock plugins and the standard transforms."""
    engine = PlaceholderEngine()
    engine.register_plugins([mock_plugin, async_mock_plugin])
    engine.register_transforms(standard_transforms())
    return engine
