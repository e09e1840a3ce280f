#!/usr/bin/env python3
"""
common
======

Shared helpers: logging and exceptions.
"""

from __future__ import annotations

__author__ = "jslorrma"
__maintainer__ = "jslorrma"
__email__ = "jslorrma@gmail.com"
