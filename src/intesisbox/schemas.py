#!/usr/bin/env python3
"""IntesisBox - schema processor for the gateway configuration."""

from __future__ import annotations

import logging
from typing import Any, Final, NotRequired, TypedDict

import voluptuous as vol

from . import exceptions as exc
from .const import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_PORT,
    SZ_CONNECT_TIMEOUT,
    SZ_HOST,
    SZ_MAC_ADDRESS,
    SZ_POLL_INTERVAL,
    SZ_PORT,
)

_LOGGER = logging.getLogger(__name__)


MAC_ADDRESS_REGEX: Final = r"^([0-9A-Fa-f]{2}:){5}[0-9A-Fa-f]{2}$|^[0-9A-Fa-f]{12}$"


class GatewayConfigT(TypedDict):
    host: str
    port: int
    poll_interval: float
    connect_timeout: float
    mac_address: NotRequired[str]


SCH_GATEWAY_CONFIG = vol.Schema(
    {
        vol.Required(SZ_HOST): vol.All(str, vol.Strip, vol.Length(min=1)),
        vol.Optional(SZ_PORT, default=DEFAULT_PORT): vol.All(
            vol.Coerce(int), vol.Range(min=1, max=65535)
        ),
        vol.Optional(SZ_POLL_INTERVAL, default=DEFAULT_POLL_INTERVAL): vol.All(
            vol.Coerce(float), vol.Range(min=1, max=3600)
        ),
        vol.Optional(SZ_CONNECT_TIMEOUT, default=DEFAULT_CONNECT_TIMEOUT): vol.All(
            vol.Coerce(float), vol.Range(min=0.1, max=60)
        ),
        vol.Optional(SZ_MAC_ADDRESS): vol.All(str, vol.Match(MAC_ADDRESS_REGEX)),
    },
    extra=vol.PREVENT_EXTRA,
)


def validate_config(config: dict[str, Any]) -> GatewayConfigT:
    """Return a validated configuration (with defaults), or raise ConfigError.

    The absence of a host is reported as a configuration error (not a transport one).
    """

    if not config.get(SZ_HOST):
        raise exc.ConfigError("No IP address specified")

    try:
        return SCH_GATEWAY_CONFIG(config)  # type: ignore[no-any-return]
    except vol.Invalid as err:
        raise exc.ConfigError(f"Invalid configuration: {err}") from err
