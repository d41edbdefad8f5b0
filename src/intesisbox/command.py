#!/usr/bin/env python3
"""IntesisBox - construct a command (a line that is to be sent).

Outbound lines are of the form:
  SET,1:MODE,HEAT
  GET,1:ONOFF
  LIMITS:*
"""

from __future__ import annotations

import re
from typing import Final

from . import exceptions as exc
from .const import UNIT_ALL, UNIT_IDX, Cmd, Function

__all__ = ["Command"]


VALUE_REGEX: Final = re.compile(r"[A-Z0-9,\[\]]+")


class Command:
    """The Command class (lines to be sent to the IntesisBox).

    Will raise CommandInvalid if it is invalid.
    """

    __slots__ = ("_line", "command", "function", "value")

    def __init__(
        self,
        command: Cmd,
        function: Function | None = None,
        value: str | None = None,
        /,
        *,
        unit_idx: int | str | None = UNIT_IDX,
    ) -> None:
        """Create a command from its constituent parts."""

        if value is not None and not VALUE_REGEX.fullmatch(value):
            raise exc.CommandInvalid(f"Bad value: {command} {function}: {value!r}")
        if value is not None and function is None:
            raise exc.CommandInvalid(f"Bad command: {command} has a value, no function")

        self.command = Cmd(command)
        self.function = Function(function) if function else None
        self.value = value

        line = str(self.command)
        if unit_idx is not None and self.function:
            line += f",{unit_idx}"
        if self.function or unit_idx == UNIT_ALL:
            line += f":{self.function or UNIT_ALL}"
        if self.value is not None:
            line += f",{self.value}"

        self._line = line

    def __repr__(self) -> str:
        """Return an unambiguous string representation of this object."""
        return f"{self.__class__.__name__}({self._line!r})"

    def __str__(self) -> str:
        """Return the line (without its line terminator)."""
        return self._line

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Command):
            return NotImplemented
        return self._line == other._line

    def __hash__(self) -> int:
        return hash(self._line)

    @classmethod
    def set_value(cls, function: Function, value: str) -> Command:
        """Constructor to set the value of a function (e.g. SET,1:MODE,HEAT)."""
        return cls(Cmd.SET, function, value)

    @classmethod
    def get_value(cls, function: Function) -> Command:
        """Constructor to query the value of a function (e.g. GET,1:MODE).

        The IntesisBox will respond with a CHN line.
        """
        return cls(Cmd.GET, function)

    @classmethod
    def keepalive(cls) -> Command:
        """Constructor for the keepalive (GET,1:ONOFF)."""
        return cls.get_value(Function.ONOFF)

    @classmethod
    def get_limits(cls) -> Command:
        """Constructor to query the limits of all functions (LIMITS:*)."""
        return cls(Cmd.LIMITS, unit_idx=UNIT_ALL)

    @classmethod
    def get_id(cls) -> Command:
        """Constructor to query the identity of the IntesisBox (ID)."""
        return cls(Cmd.ID, unit_idx=None)

    @classmethod
    def get_info(cls) -> Command:
        """Constructor to query the status of the IntesisBox (INFO)."""
        return cls(Cmd.INFO, unit_idx=None)
