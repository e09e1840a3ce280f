#!/usr/bin/env python3
"""
hadoop
======

Submodule implementing Hadoop core and HDFS client config handling.
"""

from __future__ import annotations

__author__ = "jslorrma"
__maintainer__ = "jslorrma"
__email__ = "jslorrma@gmail.com"
