#!/usr/bin/env python3
"""IntesisBox - Test the conversion of values to/from their wire format."""

import pytest

from intesisbox import exceptions as exc
from intesisbox.const import Function
from intesisbox.helpers import (
    bool_from_str,
    bool_to_str,
    temp_from_str,
    temp_to_str,
    temp_to_tenths,
    value_from_wire,
    value_to_wire,
)


def test_bool() -> None:
    assert bool_from_str("ON") is True
    assert bool_from_str("OFF") is False
    assert bool_to_str(True) == "ON"
    assert bool_to_str(False) == "OFF"


@pytest.mark.parametrize("value", ("on", "TRUE", "1", ""))
def test_bool_from_str_invalid(value: str) -> None:
    with pytest.raises(exc.ValueInvalid):
        bool_from_str(value)


def test_bool_to_str_invalid() -> None:
    with pytest.raises(exc.ValueInvalid):
        bool_to_str(1)  # type: ignore[arg-type]


@pytest.mark.parametrize(
    "value, expected", (("220", 22.0), ("215", 21.5), ("0", 0.0), ("1", 0.1))
)
def test_temp_from_str(value: str, expected: float) -> None:
    assert temp_from_str(value) == expected


@pytest.mark.parametrize("value", ("22.0", "ON", ""))
def test_temp_from_str_invalid(value: str) -> None:
    with pytest.raises(exc.ValueInvalid):
        temp_from_str(value)


@pytest.mark.parametrize(
    "value, expected",
    ((22.0, 220), (21.5, 215), (21.25, 213), (21.24, 212), (22, 220), (-0.25, -3)),
)
def test_temp_to_tenths(value: float, expected: int) -> None:
    assert temp_to_tenths(value) == expected


@pytest.mark.parametrize("value", (True, "22.0", None, float("nan"), float("inf")))
def test_temp_to_tenths_invalid(value: float) -> None:
    with pytest.raises(exc.ValueInvalid):
        temp_to_tenths(value)


def test_temp_to_str() -> None:
    assert temp_to_str(22.0) == "220"


def test_value_from_wire() -> None:
    assert value_from_wire(Function.ONOFF, "ON") is True
    assert value_from_wire(Function.SETPTEMP, "220") == 22.0
    assert value_from_wire(Function.AMBTEMP, "235") == 23.5
    assert value_from_wire(Function.MODE, "HEAT") == "HEAT"
    assert value_from_wire(Function.ERRCODE, "0") == "0"


def test_value_from_wire_invalid() -> None:
    with pytest.raises(exc.ValueInvalid):
        value_from_wire(Function.ONOFF, "HEAT")
    with pytest.raises(exc.ValueInvalid):
        value_from_wire(Function.SETPTEMP, "HEAT")


def test_value_to_wire() -> None:
    assert value_to_wire(Function.ONOFF, False) == "OFF"
    assert value_to_wire(Function.SETPTEMP, 21.5) == "215"
    assert value_to_wire(Function.MODE, "COOL") == "COOL"

    with pytest.raises(exc.ValueInvalid):
        value_to_wire(Function.MODE, 1.0)
