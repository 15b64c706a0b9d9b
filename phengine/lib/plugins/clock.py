"""
Time plugin for date/time calculations and formatting.

Actions (module "time"):
- calc:<offset>:<unit|format>
    Offset the base time. When the second argument is a unit (milliseconds,
    seconds, minutes, hours, days, weeks, months, years) the result is the
    Unix timestamp in seconds, as a number. Otherwise the argument is a
    format string and the offset is taken in seconds.
- format:<timestamp>:<format>
    Format a Unix timestamp (seconds below 10^10, milliseconds above).

The base time comes from the context: `startTimeTest`, then
`startTimeScript`, then the current time. All times are UTC.

Format strings use Luxon-style tokens (`dd.MM.yyyy HH:mm:ss`); text in single
quotes is literal. Colons in a format string must be escaped in the token:

    {{time:calc:300:seconds}}          -> base + 300s as Unix seconds
    {{time:calc:0:dd.MM.yyyy}}         -> "15.03.2025"
    {{time:calc:0:HH\\:mm\\:ss}}        -> "14:30:45"
    {{time:format:1710508245:yyyy-MM-dd}} -> "2024-03-15"
"""

import calendar
import math
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Final
from phengine.lib.errors import PluginResolutionError
from phengine.lib.values import number_parse
from phengine.models.dataModel import (
    ParsedPlaceholder,
    ProcessingContext,
    TypedValue,
    ValueType,
)

SECONDS_THRESHOLD: Final[float] = 10_000_000_000

UNITS: Final[tuple[str, ...]] = (
    "milliseconds",
    "seconds",
    "minutes",
    "hours",
    "days",
    "weeks",
    "months",
    "years",
)

MONTH_NAMES: Final[tuple[str, ...]] = tuple(calendar.month_name)
WEEKDAY_NAMES: Final[tuple[str, ...]] = tuple(calendar.day_name)


def epoch_convert(value: float) -> datetime:
    """Convert a Unix timestamp in seconds or milliseconds to a UTC datetime."""
    seconds: float = value if abs(value) < SECONDS_THRESHOLD else value / 1000
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def months_add(moment: datetime, months: int) -> datetime:
    """Add calendar months, clamping the day to the target month's length."""
    index: int = moment.year * 12 + (moment.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    day: int = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def _hour12(moment: datetime) -> int:
    return moment.hour % 12 or 12


def _ordinal(moment: datetime) -> int:
    return moment.timetuple().tm_yday


_FIELDS: Final[dict[str, Callable[[datetime], str]]] = {
    "y": lambda m: str(m.year),
    "yy": lambda m: f"{m.year % 100:02d}",
    "yyyy": lambda m: f"{m.year:04d}",
    "yyyyyy": lambda m: f"{m.year:06d}",
    "M": lambda m: str(m.month),
    "MM": lambda m: f"{m.month:02d}",
    "MMM": lambda m: MONTH_NAMES[m.month][:3],
    "MMMM": lambda m: MONTH_NAMES[m.month],
    "MMMMM": lambda m: MONTH_NAMES[m.month][0],
    "d": lambda m: str(m.day),
    "dd": lambda m: f"{m.day:02d}",
    "o": lambda m: str(_ordinal(m)),
    "ooo": lambda m: f"{_ordinal(m):03d}",
    "E": lambda m: str(m.isoweekday()),
    "EEE": lambda m: WEEKDAY_NAMES[m.weekday()][:3],
    "EEEE": lambda m: WEEKDAY_NAMES[m.weekday()],
    "EEEEE": lambda m: WEEKDAY_NAMES[m.weekday()][0],
    "H": lambda m: str(m.hour),
    "HH": lambda m: f"{m.hour:02d}",
    "h": lambda m: str(_hour12(m)),
    "hh": lambda m: f"{_hour12(m):02d}",
    "m": lambda m: str(m.minute),
    "mm": lambda m: f"{m.minute:02d}",
    "s": lambda m: str(m.second),
    "ss": lambda m: f"{m.second:02d}",
    "S": lambda m: str(m.microsecond // 1000),
    "SSS": lambda m: f"{m.microsecond // 1000:03d}",
    "a": lambda m: "AM" if m.hour < 12 else "PM",
    "q": lambda m: str((m.month - 1) // 3 + 1),
    "qq": lambda m: f"{(m.month - 1) // 3 + 1:02d}",
    "W": lambda m: str(m.isocalendar()[1]),
    "WW": lambda m: f"{m.isocalendar()[1]:02d}",
    "kkkk": lambda m: f"{m.isocalendar()[0]:04d}",
    "X": lambda m: str(math.floor(m.timestamp())),
    "x": lambda m: str(math.floor(m.timestamp() * 1000)),
    "Z": lambda m: "+0",
    "ZZ": lambda m: "+00:00",
    "ZZZ": lambda m: "+0000",
    "ZZZZ": lambda m: "UTC",
    "z": lambda m: "UTC",
    "D": lambda m: f"{m.month}/{m.day}/{m.year}",
    "DD": lambda m: f"{MONTH_NAMES[m.month][:3]} {m.day}, {m.year}",
    "DDD": lambda m: f"{MONTH_NAMES[m.month]} {m.day}, {m.year}",
    "t": lambda m: f"{_hour12(m)}:{m.minute:02d} {'AM' if m.hour < 12 else 'PM'}",
    "tt": lambda m: (
        f"{_hour12(m)}:{m.minute:02d}:{m.second:02d} {'AM' if m.hour < 12 else 'PM'}"
    ),
    "T": lambda m: f"{m.hour:02d}:{m.minute:02d}",
    "TT": lambda m: f"{m.hour:02d}:{m.minute:02d}:{m.second:02d}",
}

# standalone forms render like their format counterparts
for _standalone, _formatted in (("L", "M"), ("c", "E")):
    for _width in range(1, 6):
        if _formatted * _width in _FIELDS:
            _FIELDS[_standalone * _width] = _FIELDS[_formatted * _width]


def luxon_format(moment: datetime, fmt: str) -> str:
    """Format a datetime with Luxon-style tokens.

    Runs of one repeated letter form a token; unknown tokens and all other
    characters are copied through. Text between single quotes is literal.

    Args:
        moment: Time to format
        fmt: Format string, e.g. "dd.MM.yyyy HH:mm"

    Returns:
        Formatted string
    """
    out: list[str] = []
    i: int = 0
    while i < len(fmt):
        char: str = fmt[i]
        if char == "'":
            end: int = fmt.find("'", i + 1)
            if end == -1:
                out.append(fmt[i + 1 :])
                break
            out.append(fmt[i + 1 : end])
            i = end + 1
            continue
        j: int = i
        while j < len(fmt) and fmt[j] == char:
            j += 1
        token: str = fmt[i:j]
        render = _FIELDS.get(token)
        out.append(render(moment) if render else token)
        i = j
    return "".join(out)


class TimePlugin:
    """Plugin for time offsets and timestamp formatting."""

    name: str = "time"

    def __init__(self, now: Callable[[], datetime] | None = None) -> None:
        """Initialize the plugin.

        Args:
            now: Clock used when the context has no base time
        """
        self.now: Callable[[], datetime] = now or (lambda: datetime.now(timezone.utc))

    def resolve(
        self, placeholder: ParsedPlaceholder, context: ProcessingContext
    ) -> TypedValue:
        if placeholder.action == "calc":
            return self._calc(placeholder.args, context)
        if placeholder.action == "format":
            return self._format(placeholder.args)
        raise PluginResolutionError(
            self.name,
            placeholder.action,
            f"unknown action '{placeholder.action}'. Available: calc, format",
        )

    def _calc(self, args: list[str], context: ProcessingContext) -> TypedValue:
        if len(args) < 2:
            raise PluginResolutionError(
                self.name, "calc", "requires 2 arguments (offset, unit/format)"
            )
        try:
            offset: int | float = number_parse(args[0])
        except ValueError:
            raise PluginResolutionError(
                self.name, "calc", f"invalid offset '{args[0]}'"
            ) from None

        base: datetime = self.base_time(context)
        unit: str = args[1].lower()
        if unit in UNITS:
            shifted: datetime = self._shift(base, offset, unit)
            return TypedValue(value=math.floor(shifted.timestamp()), type=ValueType.NUMBER)

        shifted = base + timedelta(seconds=offset)
        return TypedValue(value=luxon_format(shifted, args[1]), type=ValueType.STRING)

    def _format(self, args: list[str]) -> TypedValue:
        if len(args) < 2:
            raise PluginResolutionError(
                self.name, "format", "requires 2 arguments (timestamp, format)"
            )
        try:
            timestamp: int | float = number_parse(args[0])
        except ValueError:
            raise PluginResolutionError(
                self.name, "format", f"invalid timestamp '{args[0]}'"
            ) from None
        moment: datetime = epoch_convert(timestamp)
        return TypedValue(value=luxon_format(moment, args[1]), type=ValueType.STRING)

    def _shift(self, base: datetime, offset: int | float, unit: str) -> datetime:
        if unit in ("months", "years"):
            if not float(offset).is_integer():
                raise PluginResolutionError(
                    self.name, "calc", f"offset in {unit} must be a whole number"
                )
            months: int = int(offset) * (12 if unit == "years" else 1)
            return months_add(base, months)
        return base + timedelta(**{unit: offset})

    def base_time(self, context: ProcessingContext) -> datetime:
        """Return the base time for calculations, in UTC.

        Raises:
            PluginResolutionError: If the context anchor cannot be parsed
        """
        anchor: Any = context.anchor_get()
        if anchor is None:
            return self.now().astimezone(timezone.utc)
        return self._anchor_parse(anchor)

    def _anchor_parse(self, anchor: Any) -> datetime:
        if isinstance(anchor, datetime):
            moment: datetime = anchor
        elif isinstance(anchor, (int, float)) and not isinstance(anchor, bool):
            return epoch_convert(anchor)
        elif isinstance(anchor, str):
            try:
                return epoch_convert(number_parse(anchor))
            except ValueError:
                pass
            try:
                moment = datetime.fromisoformat(anchor.strip())
            except ValueError:
                raise PluginResolutionError(
                    self.name, "calc", f"cannot parse time value '{anchor}'"
                ) from None
        else:
            raise PluginResolutionError(
                self.name, "calc", f"cannot parse time value '{anchor}'"
            )
        if moment.tzinfo is None:
            return moment.replace(tzinfo=timezone.utc)
        return moment.astimezone(timezone.utc)
