#!/usr/bin/env python3
"""IntesisBox - decode a line (that was received) into a message.

The grammar of a line is:
  COMMAND[,unit_idx]:FUNCTION[,VALUE]

For example:
  CHN,1:SETPTEMP,220
  LIMITS,1:MODE,[AUTO,HEAT,DRY,FAN,COOL]
"""

from __future__ import annotations

import re
from typing import Final

from . import exceptions as exc
from .const import ACK, COMMANDS_WITH_VALUE, Cmd, Function

__all__ = ["Message", "decode", "is_ack"]


MESSAGE_REGEX: Final = re.compile(
    rf"^(?P<command>{'|'.join(Cmd)})"
    r"(?:,(?P<unit_idx>\d+))?"
    rf":(?P<function>{'|'.join(Function)})"
    r"(?:,(?P<value>[A-Z0-9,\[\]]+))?$"
)


class Message:
    """The Message class (a decoded line); is immutable once created.

    Will raise MessageInvalid if the line is not valid.
    """

    command: Cmd
    unit_idx: int | None
    function: Function
    value: str | None

    __slots__ = ("_line", "command", "unit_idx", "function", "value")

    def __init__(self, line: str) -> None:
        """Create a message from a line (without its line terminator)."""

        if not isinstance(line, str) or not (match := MESSAGE_REGEX.fullmatch(line)):
            raise exc.MessageInvalid(f"Bad line: invalid structure: >>>{line}<<<")

        self._line = line

        self.command = Cmd(match["command"])
        self.function = Function(match["function"])
        self.unit_idx = int(match["unit_idx"]) if match["unit_idx"] else None
        self.value = match["value"]

        if self.unit_idx == 0:
            raise exc.MessageInvalid(f"Bad line: invalid unit index: >>>{line}<<<")

        if self.value is None and self.command in COMMANDS_WITH_VALUE:
            raise exc.MessageInvalid(f"Bad line: no value for {self.command}: {line}")

    def __repr__(self) -> str:
        """Return an unambiguous string representation of this object."""
        return f"{self.__class__.__name__}({self._line!r})"

    def __str__(self) -> str:
        """Return the line, as it was received."""
        return self._line

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Message):
            return NotImplemented
        return self._line == other._line

    def __hash__(self) -> int:
        return hash(self._line)

    @property
    def limits(self) -> list[str]:
        """Return the values of a (bracketed) LIMITS payload, e.g. [AUTO,HEAT].

        Will raise LimitsInvalid if the payload is not a bracketed list.
        """

        value = self.value or ""
        if len(value) < 2 or value[0] != "[" or value[-1] != "]":
            raise exc.LimitsInvalid(f"Bad limits: not a bracketed list: {self}")
        if "[" in value[1:-1] or "]" in value[1:-1]:
            raise exc.LimitsInvalid(f"Bad limits: nested brackets: {self}")
        return value[1:-1].split(",")


def is_ack(line: str) -> bool:
    """Return True if the line is a no-op acknowledgement (an empty line, or ACK)."""
    return line in ("", ACK)


def decode(line: str) -> Message | None:
    """Decode a line (without its terminator) into a Message.

    Return None if the line is a no-op acknowledgement (which is not an error). Will
    raise MessageInvalid if the line does not match the grammar.
    """

    if is_ack(line):
        return None
    return Message(line)
