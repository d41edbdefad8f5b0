#!/usr/bin/env python3
"""IntesisBox - helper functions, to convert values to/from their wire format."""

from __future__ import annotations

import math
from typing import TypeAlias

from . import exceptions as exc
from .const import TEMPERATURE_FUNCTIONS, Function

AttributeValueT: TypeAlias = bool | float | str

_ON = "ON"
_OFF = "OFF"


def bool_from_str(value: str) -> bool:
    """Convert an ON/OFF string to a bool."""
    if value == _ON:
        return True
    if value == _OFF:
        return False
    raise exc.ValueInvalid(f"Invalid value: {value}, is not ON/OFF")


def bool_to_str(value: bool) -> str:
    """Convert a bool to an ON/OFF string."""
    if not isinstance(value, bool):
        raise exc.ValueInvalid(f"Invalid value: {value}, is not a bool")
    return _ON if value else _OFF


def temp_from_str(value: str) -> float:
    """Convert a string of tenths of a degree (e.g. '220') to a float (22.0)."""
    try:
        return int(value) / 10
    except (TypeError, ValueError) as err:
        raise exc.ValueInvalid(f"Invalid temp: {value}, is not an integer") from err


def temp_to_tenths(value: float) -> int:
    """Convert a float (e.g. 21.55) to tenths of a degree (216)."""
    if isinstance(value, bool) or not isinstance(value, float | int):
        raise exc.ValueInvalid(f"Invalid temp: {value}, is not a float")
    if not math.isfinite(value):
        raise exc.ValueInvalid(f"Invalid temp: {value}, is not finite")
    # round half away from zero (c.f. banker's rounding of round())
    return int(math.copysign(math.floor(abs(value) * 10 + 0.5), value))


def temp_to_str(value: float) -> str:
    """Convert a float (e.g. 22.0) to a string of tenths of a degree ('220')."""
    return str(temp_to_tenths(value))


def value_from_wire(function: Function, value: str) -> AttributeValueT:
    """Convert the payload of a CHN line into its typed value.

    ONOFF is a bool, SETPTEMP/AMBTEMP are a float (°C), all others are a str.
    """

    if function == Function.ONOFF:
        return bool_from_str(value)
    if function in TEMPERATURE_FUNCTIONS:
        return temp_from_str(value)
    return value


def value_to_wire(function: Function, value: AttributeValueT) -> str:
    """Convert a typed value into the payload of a SET line (no clamping)."""

    if function == Function.ONOFF:
        return bool_to_str(value)  # type: ignore[arg-type]
    if function in TEMPERATURE_FUNCTIONS:
        return temp_to_str(value)  # type: ignore[arg-type]
    if not isinstance(value, str):
        raise exc.ValueInvalid(f"Invalid value: {value}, is not a str")
    return value
