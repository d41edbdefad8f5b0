#!/usr/bin/env python3
"""IntesisBox - the registry of limits (allowed values), as reported by the device.

The limits are authoritative only for the current connection, as they are (re-)sent
by the IntesisBox in response to every LIMITS:* query.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from threading import Lock

from . import exceptions as exc
from .const import Function

_LOGGER = logging.getLogger(__name__)


class LimitsRegistry:
    """A thread-safe store of the allowed values of each function.

    Setpoint limits are in tenths of a degree Celsius (e.g. 180 is 18.0 °C).
    """

    def __init__(self) -> None:
        self._lock = Lock()

        self._allowed: dict[Function, frozenset[str]] = {}
        self._min_setpoint: int | None = None
        self._max_setpoint: int | None = None

    def __repr__(self) -> str:
        with self._lock:
            allowed = {str(k): sorted(v) for k, v in self._allowed.items()}
            bounds = (self._min_setpoint, self._max_setpoint)
        return f"{self.__class__.__name__}(allowed={allowed}, setpoint={bounds})"

    @property
    def min_setpoint(self) -> int | None:
        """Return the lower setpoint limit (tenths of a degree), if known."""
        with self._lock:
            return self._min_setpoint

    @property
    def max_setpoint(self) -> int | None:
        """Return the upper setpoint limit (tenths of a degree), if known."""
        with self._lock:
            return self._max_setpoint

    def allowed_values(self, function: Function) -> frozenset[str] | None:
        """Return the allowed values of a function, or None if they are not known."""
        with self._lock:
            return self._allowed.get(function)

    def clear(self) -> None:
        """Forget all limits (e.g. when a new connection is made)."""
        with self._lock:
            self._allowed = {}
            self._min_setpoint = self._max_setpoint = None

    def apply_limits(self, function: Function, values: Iterable[str]) -> None:
        """Store the limits of a function, replacing any existing limits.

        For SETPTEMP, the values must be exactly [min, max] (as integer strings), or
        LimitsInvalid is raised and the existing bounds are retained.
        """

        values = list(values)

        if function != Function.SETPTEMP:
            with self._lock:
                self._allowed[function] = frozenset(values)
            _LOGGER.debug("Limits for %s are now: %s", function, values)
            return

        if len(values) != 2:
            raise exc.LimitsInvalid(
                f"Bad limits: {function} expects [min,max], but got: {values}"
            )

        try:
            lower, upper = (int(v) for v in values)
        except ValueError as err:
            raise exc.LimitsInvalid(
                f"Bad limits: {function} expects integers, but got: {values}"
            ) from err

        with self._lock:
            self._min_setpoint, self._max_setpoint = lower, upper
        _LOGGER.debug("Limits for %s are now: %s-%s", function, lower, upper)

    def is_allowed(self, function: Function, value: str) -> bool:
        """Return True if the value is allowed for the function.

        Return False if the function's limits have not been received.
        """
        with self._lock:
            return value in self._allowed.get(function, ())

    def clamp_setpoint(self, value: int) -> int:
        """Return the setpoint (tenths of a degree), clamped to the known limits.

        Unknown limits do not constrain the setpoint.
        """
        with self._lock:
            if self._min_setpoint is not None and value < self._min_setpoint:
                return self._min_setpoint
            if self._max_setpoint is not None and value > self._max_setpoint:
                return self._max_setpoint
            return value
