#!/usr/bin/env python3
"""A CLI for the intesisbox library."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Any, Final

import click
from colorama import Fore, Style, init as colorama_init

from intesisbox import Function, Gateway, exceptions as exc
from intesisbox.const import SZ_CONNECT_TIMEOUT, SZ_POLL_INTERVAL, WRITABLE_FUNCTIONS
from intesisbox.helpers import AttributeValueT
from intesisbox.logger import set_logging

EXECUTE: Final = "execute"
MONITOR: Final = "monitor"

SZ_DEBUG: Final = "debug"
SZ_GET_VALUE: Final = "get_value"
SZ_SET_VALUE: Final = "set_value"

LIMITS_WAIT: Final[float] = 1.0  # secs, for the LIMITS lines to arrive after connect
REPLY_WAIT: Final[float] = 2.0  # secs, for the CHN lines to arrive after GET/SET

COLORS = {
    Function.ONOFF: Style.BRIGHT + Fore.GREEN,
    Function.MODE: Fore.CYAN,
    Function.SETPTEMP: Fore.MAGENTA,
    Function.AMBTEMP: Fore.YELLOW,
    Function.ERRSTATUS: Style.BRIGHT + Fore.RED,
    Function.ERRCODE: Style.BRIGHT + Fore.RED,
}

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])


class FunctionParamType(click.ParamType):
    name = "function"

    def __init__(self, functions: tuple[Function, ...] = tuple(Function)) -> None:
        self._functions = functions

    def convert(self, value: str, param, ctx):
        if (function := str(value).upper()) in self._functions:
            return Function(function)
        self.fail(f"{value!r} is not a valid function", param, ctx)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option("-z", "--debug", count=True, help="-z for Rx/Tx lines, -zz for all")
@click.pass_context
def cli(ctx, **kwargs: Any) -> None:
    """A CLI for the intesisbox library."""
    ctx.obj = kwargs


# Args/Params for all commands
class HostCommand(click.Command):  # client.py <command> <host> --port xxx
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.params.insert(0, click.Argument(("host",)))
        self.params.insert(  # --port
            1,
            click.Option(
                ("-p", "--port"),
                type=click.IntRange(1, 65535),
                default=None,
                help="TCP port of the IntesisBox (default is 3310)",
            ),
        )
        self.params.insert(  # --poll-interval
            2,
            click.Option(
                ("-i", "--poll-interval"),
                type=click.FloatRange(1, 3600),
                default=None,
                help="secs between keepalives/reconnects",
            ),
        )


def split_kwargs(obj: dict, kwargs: dict) -> tuple[dict, dict]:
    """Split kwargs into cli/library kwargs."""

    lib_keys = ("host", "port", SZ_POLL_INTERVAL, SZ_CONNECT_TIMEOUT)

    cli_kwargs = obj | {k: v for k, v in kwargs.items() if k not in lib_keys}
    lib_kwargs = {k: v for k, v in kwargs.items() if k in lib_keys and v is not None}

    return cli_kwargs, lib_kwargs


#
# 1/2: MONITOR (print all attribute changes, until interrupted)
@click.command(cls=HostCommand)
@click.pass_obj
def monitor(obj, **kwargs: Any):
    """Monitor an IntesisBox for changes of attributes and connectivity."""
    config, lib_config = split_kwargs(obj, kwargs)
    return MONITOR, lib_config, config


#
# 2/2: EXECUTE (get/set attributes, then stop)
@click.command(cls=HostCommand)
@click.option(  # --get-value ONOFF
    "-g",
    "--get-value",
    multiple=True,
    type=FunctionParamType(),
    help="e.g. 'SETPTEMP'",
)
@click.option(  # --set-value MODE HEAT
    "-s",
    "--set-value",
    multiple=True,
    type=(FunctionParamType(WRITABLE_FUNCTIONS), str),
    help="e.g. 'MODE HEAT', 'SETPTEMP 21.5', 'ONOFF ON'",
)
@click.pass_obj
def execute(obj, **kwargs: Any):
    """Get/set attributes of an IntesisBox, print the results, then quit."""
    config, lib_config = split_kwargs(obj, kwargs)
    return EXECUTE, lib_config, config


def print_results(gwy: Gateway, **kwargs: Any) -> None:
    print(f"\r\nclient.py: Attributes of {gwy}:")
    for function, value in sorted(gwy.attributes.items()):
        print(f"{COLORS.get(function, '')}  {function:<9} {value}")


async def async_main(command: str, lib_kwargs: dict, **kwargs: Any) -> None:
    """Do certain things."""

    def handle_attribute(function: Function, value: AttributeValueT) -> None:
        """Process the attribute as it changes (a callback).

        In this case, the change is merely printed.
        """
        print(f"{COLORS.get(function, '')}{function:<9} {value}")

    def handle_connectivity(is_online: bool) -> None:
        if is_online:
            print(f"{Style.BRIGHT}{Fore.GREEN}{gwy} is online")
        else:
            print(f"{Style.BRIGHT}{Fore.RED}{gwy} is offline")

    gwy = Gateway(lib_kwargs.pop("host"), **lib_kwargs)

    colorama_init(autoreset=True)
    gwy.add_attribute_handler(handle_attribute)
    gwy.add_connectivity_handler(handle_connectivity)

    print("\r\nclient.py: Starting gateway...")

    try:  # main code here
        await gwy.start()

        if command == EXECUTE:
            await gwy.wait_for_connection(timeout=gwy.config.connect_timeout)
            await asyncio.sleep(LIMITS_WAIT)

            for function in kwargs[SZ_GET_VALUE]:
                await gwy.async_refresh_attribute(function)
            for function, value in kwargs[SZ_SET_VALUE]:
                await gwy.async_set_attribute(function, value)

            await asyncio.sleep(REPLY_WAIT)

        elif command == MONITOR:
            await asyncio.get_running_loop().create_future()  # until cancelled

    except asyncio.CancelledError:
        msg = "ended via: CancelledError (e.g. SIGINT)"
    except TimeoutError:
        msg = "ended via: TimeoutError (unable to connect)"
    except exc.IntesisException as err:
        msg = f"ended via: IntesisException: {err}"
    else:
        msg = "ended without error"
    finally:
        await gwy.stop()

    print(f"\r\nclient.py: Gateway stopped: {msg}")

    if command == EXECUTE:
        print_results(gwy, **kwargs)


cli.add_command(monitor)
cli.add_command(execute)


def main() -> None:
    print("\r\nclient.py: Starting intesisbox...")

    try:
        result = cli(standalone_mode=False)
    except click.UsageError as err:
        print(f"Error: {err}")
        sys.exit(-1)

    if isinstance(result, int):
        sys.exit(result)

    (command, lib_kwargs, kwargs) = result

    if kwargs[SZ_DEBUG] > 1:
        set_logging(logging.getLogger("intesisbox"), logging.DEBUG)
    elif kwargs[SZ_DEBUG]:
        set_logging(logging.getLogger("intesisbox"), logging.INFO)
    else:
        set_logging(logging.getLogger("intesisbox"), logging.WARNING)

    try:
        asyncio.run(async_main(command, lib_kwargs, **kwargs))
    except KeyboardInterrupt:
        print("\r\nclient.py: Gateway stopped: ended via: KeyboardInterrupt")
    except exc.ConfigError as err:
        print(f"Error: {err}")
        sys.exit(-1)

    print(" - finished intesisbox.\r\n")


if __name__ == "__main__":
    main()
