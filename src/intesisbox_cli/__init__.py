#!/usr/bin/env python3
"""A CLI for the intesisbox library."""

from __future__ import annotations
