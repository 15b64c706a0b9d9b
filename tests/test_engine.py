"""Tests for the engine facade."""

import json
import pytest
from unittest.mock import AsyncMock, patch
from phengine.lib.engine import PlaceholderEngine
from phengine.lib.errors import RegistrationError, UnimplementedFeature
from phengine.lib.parser import PlaceholderParser
from phengine.lib.registry import PluginRegistry
from phengine.models.dataModel import Format, ProcessingOptions


def test_standard_engine_bindings() -> None:
    engine = PlaceholderEngine.standard()
    assert engine.registry.plugin_names() == ["gen", "time"]
    assert engine.registry.transform_names() == ["toNumber", "toString", "toBoolean"]


def test_engines_do_not_share_registries(mock_plugin) -> None:
    first = PlaceholderEngine()
    second = PlaceholderEngine()
    first.register_plugin(mock_plugin)
    assert not second.registry.has_plugin("mock")


def test_injected_collaborators() -> None:
    registry = PluginRegistry()
    parser = PlaceholderParser()
    engine = PlaceholderEngine(registry=registry, parser=parser)
    assert engine.registry is registry
    assert engine.parser is parser


def test_duplicate_registration_through_engine(mock_plugin) -> None:
    engine = PlaceholderEngine()
    engine.register_plugin(mock_plugin)
    with pytest.raises(RegistrationError):
        engine.register_plugins([mock_plugin])


@pytest.mark.asyncio
async def test_standard_engine_end_to_end() -> None:
    engine = PlaceholderEngine.standard()
    document = json.dumps(
        {
            "id": "{{gen:uuid:abc}}",
            "train": "{{gen:zugnummer:4837}}",
            "at": "{{time:calc:0:seconds}}",
            "day": "{{time:calc:0:dd.MM.yyyy}}",
        }
    )
    options = ProcessingOptions(context={"startTimeTest": "2025-03-15T14:30:45Z"})
    result = json.loads(await engine.process_generate(document, options))
    assert result == {
        "id": "abc",
        "train": 4837,
        "at": 1742049045,
        "day": "15.03.2025",
    }


@pytest.mark.asyncio
async def test_default_options_are_json(mock_engine) -> None:
    assert await mock_engine.process_generate('["{{mock:number:1}}"]') == "[\n  1\n]"


@pytest.mark.asyncio
async def test_xml_unimplemented(mock_engine) -> None:
    with pytest.raises(UnimplementedFeature, match="XML format not yet implemented"):
        await mock_engine.process_generate("<a/>", ProcessingOptions(format=Format.XML))


@pytest.mark.asyncio
async def test_unimplemented_is_not_implemented_error(mock_engine) -> None:
    with pytest.raises(NotImplementedError):
        await mock_engine.process_compare("{}", "{}")


@pytest.mark.asyncio
async def test_three_phase_runs_phases_then_compare(engine) -> None:
    template = json.dumps(
        {"id": "{{gen:number:7}}", "at": "{{time:calc:0:seconds}}", "m": "{{mock:echo:x}}"}
    )
    options = ProcessingOptions(context={"startTimeTest": 1742049045})
    with patch.object(engine, "process_compare", new=AsyncMock()) as compare:
        await engine.process_three_phase(template, "{}", options)

    actual, expected, passed = compare.await_args.args
    assert actual == "{}"
    assert passed is options
    assert json.loads(expected) == {
        "id": 7,
        "at": 1742049045,
        "m": "{{mock:echo:x}}",
    }


@pytest.mark.asyncio
async def test_three_phase_phase_order(engine) -> None:
    calls: list[set[str]] = []
    original = engine.process_generate

    async def spy(content, options):
        calls.append(options.include_plugins)
        return await original(content, options)

    with patch.object(engine, "process_generate", side_effect=spy):
        with pytest.raises(UnimplementedFeature, match="Compare mode"):
            await engine.process_three_phase(
                '{"a": "{{mock:echo:a}}"}',
                "{}",
                phases=(("mock",), ("gen", "time")),
            )
    assert calls == [{"mock"}, {"gen", "time"}]


@pytest.mark.asyncio
async def test_three_phase_does_not_mutate_options(engine) -> None:
    options = ProcessingOptions(include_plugins={"mock"})
    with pytest.raises(UnimplementedFeature):
        await engine.process_three_phase('{"a": 1}', "{}", options)
    assert options.include_plugins == {"mock"}
