#!/usr/bin/env python3
"""Fixtures for testing."""

import asyncio
from collections.abc import AsyncGenerator, Callable

import pytest_asyncio

from intesisbox import Function, Gateway
from intesisbox.helpers import AttributeValueT

from .virtual_box import VirtualIntesisBox

ASSERT_CYCLE_TIME = 0.001  # max_cycles_per_assert = max_sleep / ASSERT_CYCLE_TIME
DEFAULT_MAX_SLEEP = 1.0


async def assert_this(
    condition: Callable[[], bool], max_sleep: float = DEFAULT_MAX_SLEEP
) -> None:
    """Wait until the condition is True (or the max_sleep has elapsed)."""

    for _ in range(int(max_sleep / ASSERT_CYCLE_TIME)):
        if condition():
            break
        await asyncio.sleep(ASSERT_CYCLE_TIME)
    assert condition()


class Recorder:
    """Record the callbacks (notifications) of a gateway."""

    def __init__(self, gwy: Gateway) -> None:
        self.attributes: list[tuple[Function, AttributeValueT]] = []
        self.connectivity: list[bool] = []

        gwy.add_attribute_handler(self._attribute_changed)
        gwy.add_connectivity_handler(self.connectivity.append)

    def _attribute_changed(self, function: Function, value: AttributeValueT) -> None:
        self.attributes.append((function, value))


#######################################################################################


@pytest_asyncio.fixture()
async def box() -> AsyncGenerator[VirtualIntesisBox, None]:
    """Utilize a virtual IntesisBox."""

    box = VirtualIntesisBox()
    await box.start()

    try:
        yield box
    finally:
        await box.stop()


@pytest_asyncio.fixture()
async def gwy(box: VirtualIntesisBox) -> AsyncGenerator[Gateway, None]:
    """Utilize a gateway (not started) to the virtual IntesisBox.

    The poller will not tick during a test, so tests invoke tick() as required.
    """

    gwy = Gateway("127.0.0.1", box.port, poll_interval=3600, connect_timeout=1)

    try:
        yield gwy
    finally:
        await gwy.stop()


@pytest_asyncio.fixture()
async def started_gwy(
    box: VirtualIntesisBox, gwy: Gateway
) -> AsyncGenerator[Gateway, None]:
    """Utilize a started gateway, with its limits (and keepalive reply) received."""

    await gwy.start()

    await assert_this(lambda: gwy.limits.max_setpoint is not None)
    await assert_this(lambda: Function.ONOFF in gwy.attributes)  # keepalive reply

    yield gwy
