"""Value transforms between remote raw fields and tree values.

Reading direction (raw -> tree) is used by the reconciler, writing
direction (tree -> raw) by the setting handlers.  Coercion helpers turn
loosely typed user writes into canonical values and raise
SettingValidationError when a value is outside its domain.
"""

import logging
import math
import re
from collections.abc import Mapping, Sequence
from typing import Any

from climasync.base.constants import (
    MODE_OPTIONS,
    SCHEDULE_DISABLED,
)
from climasync.errors import SettingValidationError

logger = logging.getLogger(__name__)

_TIME_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")
_TRUE_WORDS = frozenset({"true", "1", "on", "yes"})
_FALSE_WORDS = frozenset({"false", "0", "off", "no"})


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)


# Reading direction


def is_number(raw: Any) -> bool:
    """True for int and float readings; bool does not count."""
    return isinstance(raw, (int, float)) and not isinstance(raw, bool)


def scale_sensor(raw: Any) -> float | None:
    """Convert a hundredths fixed-point sensor reading to a float.

    Missing or non-numeric readings give None so one bad field does not
    spoil the rest of a snapshot.
    """
    if not is_number(raw):
        if raw is not None:
            logger.debug("Ignoring non-numeric reading %r", raw)
        return None
    return round(raw / 100, 2)


def scale_vpd(raw: Any) -> float | None:
    """Convert a tenths-of-kPa threshold to kPa."""
    if not is_number(raw):
        return None
    return round(raw / 10, 1)


def seconds_to_minutes(raw: int | float | None) -> int | None:
    if raw is None:
        return None
    return int(raw // 60)


def format_time(minutes: int) -> str:
    """Format minutes after midnight as ``HH:MM``."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def decode_schedule(raw: int | None) -> tuple[bool | None, str | None]:
    """Split a raw schedule value into (enabled, time).

    The sentinel 65535 means disabled; the time is then unknown and
    returned as None so an earlier time is kept in the tree.
    """
    if raw is None:
        return None, None
    if raw == SCHEDULE_DISABLED:
        return False, None
    return True, format_time(int(raw))


def decode_flag(raw: int | None) -> bool | None:
    if raw is None:
        return None
    return raw == 1


def decode_option(
    options: Sequence[str] | Mapping[int, str],
    raw: int | None,
    label: str = "value",
) -> str | None:
    """Look up a raw index in an option table.

    Indices outside the table are reported and produce None, so nothing
    is written for them.
    """
    if raw is None:
        return None
    if isinstance(options, Mapping):
        name = options.get(raw)
    elif isinstance(raw, int) and 0 <= raw < len(options):
        name = options[raw]
    else:
        name = None
    if name is None:
        logger.warning("Ignoring unknown %s index %r", label, raw)
    return name


def decode_mode(at_type: int | None) -> str | None:
    """Map a one-based raw mode to its name."""
    if at_type is None:
        return None
    return decode_option(MODE_OPTIONS, at_type - 1, "mode")


def is_celsius(unit_flag: int | None) -> bool:
    """Interpret the controller's temperature unit flag (>0 is Celsius)."""
    return unit_flag is None or unit_flag > 0


# Writing direction


def encode_vpd(kpa: float) -> int:
    """Convert kPa to the remote tenths representation."""
    return round_half_up(kpa * 10)


def minutes_to_seconds(minutes: int) -> int:
    return int(minutes) * 60


def celsius_to_fahrenheit(celsius: float) -> int:
    return round_half_up(celsius * 1.8 + 32)


def dynamic_temperature(value: int, celsius: bool) -> tuple[int, int]:
    """Return the (Celsius, Fahrenheit) raw pair for a dynamic threshold.

    Dynamic temperature steps are stored as a pair where one Celsius
    step equals two Fahrenheit steps.
    """
    if celsius:
        return value, value * 2
    return value // 2, value


def encode_flag(enabled: bool) -> int:
    return 1 if enabled else 0


def encode_option(options: Sequence[str], name: str) -> int:
    """Return the index of ``name`` within ``options``."""
    try:
        return options.index(name)
    except ValueError as e:
        raise SettingValidationError(
            f"{name!r} is not one of {list(options)}"
        ) from e


# Coercion of user writes


def to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    raise SettingValidationError(f"{value!r} is not a boolean")


def _to_number(value: Any) -> float:
    if isinstance(value, bool):
        raise SettingValidationError(f"{value!r} is not a number")
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError as e:
            raise SettingValidationError(f"{value!r} is not a number") from e
    else:
        raise SettingValidationError(f"{value!r} is not a number")
    if math.isnan(number) or math.isinf(number):
        raise SettingValidationError(f"{value!r} is not a finite number")
    return number


def _check_range(
    number: float, minimum: float | None, maximum: float | None
) -> None:
    if minimum is not None and number < minimum:
        raise SettingValidationError(f"{number} is below minimum {minimum}")
    if maximum is not None and number > maximum:
        raise SettingValidationError(f"{number} is above maximum {maximum}")


def to_int(
    value: Any, minimum: int | None = None, maximum: int | None = None
) -> int:
    """Coerce to an integer, truncating fractions like the remote UI."""
    number = int(_to_number(value))
    _check_range(number, minimum, maximum)
    return number


def to_float(
    value: Any,
    minimum: float | None = None,
    maximum: float | None = None,
    digits: int = 1,
) -> float:
    number = round(_to_number(value), digits)
    _check_range(number, minimum, maximum)
    return number


def to_option(value: Any, options: Sequence[str]) -> str:
    """Coerce a name (case-insensitive) or an index to an option name."""
    if isinstance(value, str):
        wanted = value.strip().lower()
        for option in options:
            if option.lower() == wanted:
                return option
        if wanted.isdigit():
            value = int(wanted)
    if isinstance(value, int) and not isinstance(value, bool):
        if 0 <= value < len(options):
            return options[value]
    raise SettingValidationError(f"{value!r} is not one of {list(options)}")


def parse_time(value: Any) -> int:
    """Parse ``HH:MM`` into minutes after midnight."""
    if not isinstance(value, str):
        raise SettingValidationError(f"{value!r} is not an HH:MM time")
    match = _TIME_PATTERN.match(value)
    if match is None:
        raise SettingValidationError(f"{value!r} is not an HH:MM time")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise SettingValidationError(f"{value!r} is not a valid time of day")
    return hours * 60 + minutes


def to_time(value: Any) -> str:
    """Coerce to a canonical zero-padded ``HH:MM`` string."""
    return format_time(parse_time(value))
