#!/usr/bin/env python3
"""IntesisBox - Test the construction of commands (lines sent to the IntesisBox)."""

import pytest

from intesisbox import exceptions as exc
from intesisbox.command import Command
from intesisbox.const import Cmd, Function


def test_constructors() -> None:
    assert str(Command.set_value(Function.MODE, "HEAT")) == "SET,1:MODE,HEAT"
    assert str(Command.set_value(Function.SETPTEMP, "215")) == "SET,1:SETPTEMP,215"
    assert str(Command.get_value(Function.AMBTEMP)) == "GET,1:AMBTEMP"
    assert str(Command.keepalive()) == "GET,1:ONOFF"
    assert str(Command.get_limits()) == "LIMITS:*"
    assert str(Command.get_id()) == "ID"
    assert str(Command.get_info()) == "INFO"


def test_attrs() -> None:
    cmd = Command.set_value(Function.FANSP, "3")

    assert cmd.command == Cmd.SET
    assert cmd.function == Function.FANSP
    assert cmd.value == "3"
    assert repr(cmd) == "Command('SET,1:FANSP,3')"


def test_unit_idx() -> None:
    cmd = Command(Cmd.GET, Function.MODE, unit_idx=2)
    assert str(cmd) == "GET,2:MODE"


def test_equality() -> None:
    assert Command.keepalive() == Command.get_value(Function.ONOFF)
    assert Command.keepalive() != Command.get_value(Function.MODE)
    assert len({Command.keepalive(), Command.get_value(Function.ONOFF)}) == 1


@pytest.mark.parametrize("value", ("heat", "", "HEAT MODE", "21.5", "-10", "ON\r\n"))
def test_invalid_values(value: str) -> None:
    with pytest.raises(exc.CommandInvalid):
        Command.set_value(Function.MODE, value)


def test_value_without_function() -> None:
    with pytest.raises(exc.CommandInvalid):
        Command(Cmd.SET, None, "HEAT")


def test_unknown_function() -> None:
    with pytest.raises(ValueError):
        Command(Cmd.GET, "BOGUS")  # type: ignore[arg-type]
