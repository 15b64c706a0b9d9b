"""
Debug logging for the placeholder engine, backed by Loguru.

`LOG` writes one debug record per call to stderr through a logger bound with
`app="PHENGINE"`. Records carry the caller's module, function, and line, and
are dropped entirely while `appsettings.beQuiet` is set.

Messages routinely contain placeholder tokens such as `{{gen:uuid}}`, so the
text is always handed to Loguru as a single argument and never formatted.

Example:
    from phengine.lib.log import LOG
    LOG("Resolving {{gen:uuid}}", path="items[0].id")

Environment:
- `PHE_BEQUIET=True` silences the engine's debug records.
"""

from loguru import logger
from typing import Any
import sys

engine_logger = logger.bind(app="PHENGINE")

record_format = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<yellow>{name: >32}</yellow>::"
    "<cyan>{function: <24}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

engine_logger.remove()
engine_logger.add(sys.stderr, format=record_format)


def LOG(*parts: Any, **extra: Any) -> None:
    """
    Emit a debug record unless the engine is quiet.

    :param parts: Message pieces, joined with single spaces.
    :param extra: Values bound onto the record, available as `record["extra"]`.
    """
    try:
        from phengine.config.settings import appsettings

        if appsettings.beQuiet:
            return
        message: str = " ".join(str(part) for part in parts)
        engine_logger.bind(**extra).opt(depth=1).debug("{}", message)
    except Exception as e:
        print(f"Logging error: {e}", file=sys.stderr)
