"""Tests for user-defined plugins registered alongside the built-ins."""

import json
import random
import pytest
from phengine.lib.engine import PlaceholderEngine
from phengine.lib.errors import PlaceholderResolutionError
from phengine.models.dataModel import (
    ParsedPlaceholder,
    PlaceholderPlugin,
    ProcessingContext,
    ProcessingOptions,
    TypedValue,
    ValueType,
)


class TrainPlugin:
    """Example domain plugin producing train schedule data."""

    name = "train"

    START_STATIONS = ["Berlin Hbf", "München Hbf", "Hamburg Hbf"]
    END_STATIONS = ["Stuttgart Hbf", "Dresden Hbf", "Leipzig Hbf"]
    TYPES = ["ICE", "IC", "RE", "RB", "S"]

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng or random.Random()

    def resolve(self, placeholder: ParsedPlaceholder, context: ProcessingContext) -> TypedValue:
        args = placeholder.args
        match placeholder.action:
            case "icenumber":
                number = self._int(args, 100, 999)
                return TypedValue(value=f"ICE {number}", type=ValueType.STRING)
            case "platform":
                return TypedValue(value=self._int(args, 1, 12), type=ValueType.NUMBER)
            case "delay":
                return TypedValue(value=self._int(args, 0, 30), type=ValueType.NUMBER)
            case "station":
                if not args:
                    raise ValueError("station requires start, end, or a name")
                if args[0] == "start":
                    return TypedValue.of(self.rng.choice(self.START_STATIONS))
                if args[0] == "end":
                    return TypedValue.of(self.rng.choice(self.END_STATIONS))
                return TypedValue.of(args[0])
            case "type":
                return TypedValue.of(args[0] if args else self.rng.choice(self.TYPES))
        raise ValueError(f"unknown action '{placeholder.action}'")

    def _int(self, args: list[str], low: int, high: int) -> int:
        if args and args[0]:
            return int(args[0])
        return self.rng.randint(low, high)


@pytest.fixture
def train_engine() -> PlaceholderEngine:
    engine = PlaceholderEngine.standard()
    engine.register_plugin(TrainPlugin(rng=random.Random(3)))
    return engine


def test_train_plugin_satisfies_protocol() -> None:
    assert isinstance(TrainPlugin(), PlaceholderPlugin)


@pytest.mark.asyncio
async def test_train_schedule(train_engine: PlaceholderEngine) -> None:
    template = json.dumps(
        {
            "train": "{{train:icenumber:789}}",
            "type": "{{train:type:ICE}}",
            "platform": "{{train:platform:5}}",
            "delay": "{{train:delay:15}}",
            "from": "{{train:station:Köln Hbf}}",
            "label": "{{train:type:IC}} {{gen:zugnummer:2024}} to {{train:station:Bremen Hbf}}",
            "departure": "{{time:calc:0:HH\\:mm}}",
        }
    )
    options = ProcessingOptions(context={"startTimeTest": "2025-03-15T14:30:45Z"})
    result = json.loads(await train_engine.process_generate(template, options))
    assert result == {
        "train": "ICE 789",
        "type": "ICE",
        "platform": 5,
        "delay": 15,
        "from": "Köln Hbf",
        "label": "IC 2024 to Bremen Hbf",
        "departure": "14:30",
    }


@pytest.mark.asyncio
async def test_train_random_values(train_engine: PlaceholderEngine) -> None:
    template = json.dumps(
        [
            {
                "train": "{{train:icenumber}}",
                "platform": "{{train:platform}}",
                "start": "{{train:station:start}}",
                "end": "{{train:station:end}}",
            }
            for _ in range(3)
        ]
    )
    entries = json.loads(await train_engine.process_generate(template))
    for entry in entries:
        assert entry["train"].startswith("ICE ")
        assert 1 <= entry["platform"] <= 12
        assert entry["start"] in TrainPlugin.START_STATIONS
        assert entry["end"] in TrainPlugin.END_STATIONS


@pytest.mark.asyncio
async def test_train_plugin_errors(train_engine: PlaceholderEngine) -> None:
    with pytest.raises(PlaceholderResolutionError, match="unknown action 'wagon'"):
        await train_engine.process_generate('{"w": "{{train:wagon}}"}')
    with pytest.raises(PlaceholderResolutionError):
        await train_engine.process_generate('{"p": "{{train:platform:x}}"}')
