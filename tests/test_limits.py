#!/usr/bin/env python3
"""IntesisBox - Test the limits registry."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from intesisbox import exceptions as exc
from intesisbox.const import Function
from intesisbox.limits import LimitsRegistry


@pytest.fixture()
def limits() -> LimitsRegistry:
    return LimitsRegistry()


def test_setpoint_limits(limits: LimitsRegistry) -> None:
    limits.apply_limits(Function.SETPTEMP, ["180", "300"])

    assert limits.min_setpoint == 180  # 18.0 °C
    assert limits.max_setpoint == 300  # 30.0 °C

    assert limits.clamp_setpoint(350) == 300
    assert limits.clamp_setpoint(100) == 180
    assert limits.clamp_setpoint(215) == 215


@pytest.mark.parametrize("values", (["180"], ["180", "250", "300"], [""]))
def test_setpoint_limits_wrong_arity(limits: LimitsRegistry, values) -> None:
    limits.apply_limits(Function.SETPTEMP, ["180", "300"])

    with pytest.raises(exc.LimitsInvalid):
        limits.apply_limits(Function.SETPTEMP, values)

    assert (limits.min_setpoint, limits.max_setpoint) == (180, 300)


def test_setpoint_limits_not_numeric(limits: LimitsRegistry) -> None:
    limits.apply_limits(Function.SETPTEMP, ["180", "300"])

    with pytest.raises(exc.LimitsInvalid):
        limits.apply_limits(Function.SETPTEMP, ["LOW", "HIGH"])

    assert (limits.min_setpoint, limits.max_setpoint) == (180, 300)


def test_clamp_without_limits(limits: LimitsRegistry) -> None:
    assert limits.min_setpoint is None
    assert limits.max_setpoint is None

    assert limits.clamp_setpoint(350) == 350
    assert limits.clamp_setpoint(-50) == -50


def test_is_allowed(limits: LimitsRegistry) -> None:
    assert not limits.is_allowed(Function.MODE, "HEAT")  # fails closed
    assert limits.allowed_values(Function.MODE) is None

    limits.apply_limits(Function.MODE, ["AUTO", "COOL", "HEAT"])

    assert limits.is_allowed(Function.MODE, "HEAT")
    assert not limits.is_allowed(Function.MODE, "BOGUS")
    assert not limits.is_allowed(Function.FANSP, "HEAT")
    assert limits.allowed_values(Function.MODE) == {"AUTO", "COOL", "HEAT"}


def test_limits_are_replaced(limits: LimitsRegistry) -> None:
    limits.apply_limits(Function.MODE, ["AUTO", "COOL", "HEAT"])
    limits.apply_limits(Function.MODE, ["COOL", "FAN"])

    assert not limits.is_allowed(Function.MODE, "HEAT")  # no merge
    assert limits.is_allowed(Function.MODE, "FAN")


def test_clear(limits: LimitsRegistry) -> None:
    limits.apply_limits(Function.MODE, ["AUTO", "COOL", "HEAT"])
    limits.apply_limits(Function.SETPTEMP, ["180", "300"])

    limits.clear()

    assert not limits.is_allowed(Function.MODE, "HEAT")
    assert limits.clamp_setpoint(350) == 350


def test_concurrent_access(limits: LimitsRegistry) -> None:
    """Concurrent writers/readers leave the setpoint bounds as a consistent pair."""

    bounds = (["180", "300"], ["160", "320"])

    def write(idx: int) -> None:
        limits.apply_limits(Function.SETPTEMP, bounds[idx % 2])

    def read(_: int) -> int:
        return limits.clamp_setpoint(500)

    with ThreadPoolExecutor(max_workers=8) as executor:
        list(executor.map(write, range(200)))
        results = list(executor.map(read, range(200)))

    assert set(results) <= {300, 320}
    assert (limits.min_setpoint, limits.max_setpoint) in ((180, 300), (160, 320))
