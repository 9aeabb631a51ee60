"""
Result Interpreter.

Turns the raw value returned by an operation into a health status and a
one-line summary for the monitoring system.

    None      -> CRITICAL, "Value not set" message
    mapping   -> CRITICAL when `status` is present and not exactly "UP", else OK
    sequence  -> OK
    scalar    -> OK (int, float, str)
    other     -> UnsupportedResultTypeError
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from jmxcheck.core.config_schema import ExitCodesSchema
from jmxcheck.core.exceptions import UnsupportedResultTypeError

NULL_VALUE_MESSAGE = "Value not set. JMX query returned null value."
STATUS_KEY = "status"
HEALTHY_STATUS = "UP"


class ExitStatus(str, Enum):
    OK = "OK"
    CRITICAL = "CRITICAL"
    UNKNOWN = "UNKNOWN"

    def exit_code(self, codes: ExitCodesSchema) -> int:
        """Numeric process exit code for this status."""
        return getattr(codes, self.name.lower())


@dataclass(frozen=True)
class Interpretation:
    status: ExitStatus
    text: str


def _is_scalar(value: Any) -> bool:
    return isinstance(value, (int, float, str)) and not isinstance(value, bool)


def render_value(value: Any) -> str:
    """
    Render a nested value the way the JVM prints it.

    Mappings become `{key=value, ...}`, sequences `[a, b]`, None `null` and
    booleans `true`/`false`. Strings are not quoted.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Mapping):
        return "{" + render_pairs(value) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(render_value(item) for item in value) + "]"
    return str(value)


def render_pairs(mapping: Mapping[Any, Any]) -> str:
    return ", ".join(f"{key}={render_value(value)}" for key, value in mapping.items())


def interpret(value: Any) -> Interpretation:
    """
    Classify a raw operation result.

    Raises:
        UnsupportedResultTypeError: For values that are neither None,
            a mapping, a sequence nor a number or string.
    """
    if value is None:
        return Interpretation(ExitStatus.CRITICAL, NULL_VALUE_MESSAGE)

    if isinstance(value, Mapping):
        status = ExitStatus.OK
        if STATUS_KEY in value and value[STATUS_KEY] != HEALTHY_STATUS:
            status = ExitStatus.CRITICAL
        return Interpretation(status, render_pairs(value))

    if isinstance(value, (list, tuple)):
        return Interpretation(ExitStatus.OK, ", ".join(render_value(item) for item in value))

    if _is_scalar(value):
        return Interpretation(ExitStatus.OK, str(value))

    raise UnsupportedResultTypeError(
        f"Type of return value not supported [{type(value).__name__}]. "
        "Must be a number, string, mapping or sequence."
    )
