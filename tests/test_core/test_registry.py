"""Tests for plugin and transform registration."""

import pytest
from phengine.lib.errors import (
    PluginNotFound,
    RegistrationError,
    TransformNotFound,
)
from phengine.lib.registry import PluginRegistry
from phengine.lib.transforms import ToNumberTransform, standard_transforms


@pytest.fixture
def registry() -> PluginRegistry:
    return PluginRegistry()


def test_register_and_get(registry: PluginRegistry, mock_plugin) -> None:
    registry.register_plugin(mock_plugin)
    assert registry.has_plugin("mock")
    assert registry.get_plugin("mock") is mock_plugin
    assert registry.plugin_names() == ["mock"]


def test_register_many_keeps_order(registry: PluginRegistry, mock_plugin, async_mock_plugin) -> None:
    registry.register_plugins([async_mock_plugin, mock_plugin])
    assert registry.plugin_names() == ["asyncMock", "mock"]


def test_duplicate_plugin_rejected(registry: PluginRegistry, mock_plugin) -> None:
    registry.register_plugin(mock_plugin)
    with pytest.raises(RegistrationError, match="Plugin 'mock' is already registered"):
        registry.register_plugin(mock_plugin)


def test_non_plugin_rejected(registry: PluginRegistry) -> None:
    with pytest.raises(TypeError):
        registry.register_plugin(object())


def test_missing_plugin_lists_available(registry: PluginRegistry, mock_plugin) -> None:
    registry.register_plugin(mock_plugin)
    with pytest.raises(PluginNotFound) as info:
        registry.get_plugin("gen")
    assert str(info.value) == "Plugin 'gen' not found. Available plugins: mock"
    assert info.value.available == ["mock"]


def test_missing_plugin_in_empty_registry(registry: PluginRegistry) -> None:
    with pytest.raises(PluginNotFound, match="Available plugins: none"):
        registry.get_plugin("gen")
    assert not registry.has_plugin("gen")


def test_transforms(registry: PluginRegistry) -> None:
    registry.register_transforms(standard_transforms())
    assert registry.transform_names() == ["toNumber", "toString", "toBoolean"]
    assert isinstance(registry.get_transform("toNumber"), ToNumberTransform)
    assert registry.has_transform("toBoolean")


def test_duplicate_transform_rejected(registry: PluginRegistry) -> None:
    registry.register_transform(ToNumberTransform())
    with pytest.raises(RegistrationError):
        registry.register_transform(ToNumberTransform())


def test_missing_transform(registry: PluginRegistry) -> None:
    with pytest.raises(TransformNotFound, match="Transform 'shout' not found"):
        registry.get_transform("shout")


def test_clear(registry: PluginRegistry, mock_plugin) -> None:
    registry.register_plugin(mock_plugin)
    registry.register_transforms(standard_transforms())
    registry.clear()
    assert registry.plugin_names() == []
    assert registry.transform_names() == []
