#!/usr/bin/env python3
"""IntesisBox - a virtual IntesisBox (a TCP server), for testing.

Answers LIMITS:*, GET and SET as the device would, and can push lines to (or drop) its
clients.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Final

DEFAULT_LIMITS: Final[dict[str, list[str]]] = {
    "ONOFF": ["ON", "OFF"],
    "MODE": ["AUTO", "HEAT", "DRY", "FAN", "COOL"],
    "FANSP": ["AUTO", "1", "2", "3"],
    "VANEUD": ["AUTO", "1", "2", "3", "SWING"],
    "SETPTEMP": ["180", "300"],
}

DEFAULT_VALUES: Final[dict[str, str]] = {
    "ONOFF": "OFF",
    "MODE": "AUTO",
    "SETPTEMP": "210",
    "FANSP": "AUTO",
    "VANEUD": "AUTO",
    "AMBTEMP": "235",
    "ERRSTATUS": "OK",
    "ERRCODE": "0",
}

_LOGGER = logging.getLogger(__name__)


class VirtualIntesisBox:
    """A virtual IntesisBox, listening on an ephemeral port of 127.0.0.1."""

    def __init__(
        self,
        limits: dict[str, list[str]] | None = None,
        values: dict[str, str] | None = None,
    ) -> None:
        self._limits = DEFAULT_LIMITS if limits is None else limits
        self._values = dict(DEFAULT_VALUES if values is None else values)

        self._server: asyncio.Server | None = None
        self._writers: list[asyncio.StreamWriter] = []

        self.port: int = 0
        self.lines_rx: list[str] = []  # all lines received, from all clients
        self.num_connections: int = 0

    async def start(self) -> None:
        self._server = await asyncio.start_server(self._handle_client, "127.0.0.1", 0)
        self.port = self._server.sockets[0].getsockname()[1]

    async def stop(self) -> None:
        await self.drop_connections()

        if self._server:
            self._server.close()
            await self._server.wait_closed()
            self._server = None

    @property
    def num_clients(self) -> int:
        return len(self._writers)

    async def send(self, line: str) -> None:
        """Push a line (e.g. a CHN) to every connected client."""

        for writer in list(self._writers):
            writer.write(f"{line}\r\n".encode("ascii"))
            await writer.drain()

    async def drop_connections(self) -> None:
        """Close every client connection (as if the network had failed)."""

        for writer in list(self._writers):
            writer.close()
        await asyncio.sleep(0)

    async def _handle_client(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        self.num_connections += 1
        self._writers.append(writer)

        try:
            while data := await reader.readline():
                line = data.decode("ascii").strip()
                self.lines_rx.append(line)

                for reply in self._replies(line):
                    writer.write(f"{reply}\r\n".encode("ascii"))
                await writer.drain()

        except OSError as err:  # incl. ConnectionResetError
            _LOGGER.debug("Virtual box: client dropped: %s", err)

        finally:
            if writer in self._writers:
                self._writers.remove(writer)
            writer.close()

    def _replies(self, line: str) -> list[str]:
        if line == "LIMITS:*":
            return [
                f"LIMITS,1:{function},[{','.join(values)}]"
                for function, values in self._limits.items()
            ]

        if line.startswith("GET,1:"):
            function = line[6:]
            if function in self._values:
                return [f"CHN,1:{function},{self._values[function]}"]
            return ["ACK"]

        if line.startswith("SET,1:"):
            function, value = line[6:].split(",", 1)
            self._values[function] = value
            return ["ACK", f"CHN,1:{function},{value}"]

        return ["ACK"]
