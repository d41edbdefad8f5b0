#!/usr/bin/env python3
"""IntesisBox - exceptions within the codec/protocol/transport layers."""

from __future__ import annotations


class _IntesisBaseException(Exception):
    """Base class for all intesisbox exceptions."""

    pass


class IntesisException(_IntesisBaseException):
    """Base class for all intesisbox exceptions."""

    HINT: None | str = None

    def __init__(self, *args: object):
        super().__init__(*args)
        self.message: str | None = args[0] if args else None  # type: ignore[assignment]

    def __str__(self) -> str:
        if self.message and self.HINT:
            return f"{self.message} (hint: {self.HINT})"
        if self.message:
            return self.message
        if self.HINT:
            return f"Hint: {self.HINT}"
        return ""


class ConfigError(IntesisException):
    """The configuration is invalid (e.g. no host has been specified)."""

    HINT = "check the host/port of the IntesisBox"


########################################################################################
# Errors at/below the protocol/transport layer


class ProtocolError(IntesisException):
    """An error occurred when sending or receiving lines."""


class ProtocolSendFailed(ProtocolError):
    """The line was not sent (not connected, or the write failed)."""


class TransportError(ProtocolError):
    """An error when connecting to, or exchanging lines with, the TCP socket."""


class TransportConnectFailed(TransportError):
    """Unable to open a connection to the IntesisBox."""


class TransportClosed(TransportError):
    """The transport is closing, or has closed."""


########################################################################################
# Errors within the codec (decoding lines, converting values)


class ParserError(IntesisException):
    """The line (or its payload) cannot be parsed without error."""


class MessageInvalid(ParserError):
    """The line does not match the protocol grammar."""


class LimitsInvalid(ParserError):
    """The LIMITS payload is not consistent with its function."""


class ValueInvalid(ParserError):
    """The value cannot be converted to/from its wire format."""


class CommandInvalid(IntesisException):
    """The command is not internally consistent (cannot be sent)."""
