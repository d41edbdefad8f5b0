#!/usr/bin/env python3
"""IntesisBox - a client for the IntesisBox WMP (ASCII) protocol."""

__version__ = "0.1.0"
VERSION = __version__
