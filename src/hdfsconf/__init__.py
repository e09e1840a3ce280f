#!/usr/bin/env python3
"""
hdfsconf
========

`hdfsconf` is a small library and CLI that resolves an HDFS client's
connection configuration from the Hadoop [XML configuration files][1].

Features:
---------
- **Config Loading**: `core-site.xml` and `hdfs-site.xml` are read from an
  explicit directory, `HADOOP_CONF_DIR` or `${HADOOP_HOME}/conf` and merged
  into a single key-value mapping. Missing or malformed files never fail the
  load, but every file's outcome is kept in a load report.
- **Namenode Discovery**: The namenode RPC addresses of the default (or a
  given) filesystem cluster are derived from the
  `dfs.namenode.rpc-address.<cluster>.*` keys.
- **No Global State**: The resolved default filesystem name is returned with
  each resolution and can be tracked in an explicitly passed `FSContext`.

[1]: https://hadoop.apache.org/docs/stable/hadoop-project-dist/hadoop-hdfs/hdfs-default.xml
"""

from __future__ import annotations

__author__ = "jslorrma"
__maintainer__ = "jslorrma"
__email__ = "jslorrma@gmail.com"


# version
try:
    from ._version import __version__, __version_tuple__, version
except ImportError:
    __version__ = version = "0.0.0"
    __version_tuple__ = (0, 0, 0)

import pathlib

LIBRARY_NAME = __name__

# set up logging
from .common.logging import get_logger  # noqa: E402

logger = get_logger(__name__)

# type definitions
PathType = str | pathlib.Path

# public api
from .common.exceptions import (  # noqa: E402
    HdfsConfError,
    UnresolvedDefaultFSError,
    UnresolvedNamenodeError,
)
from .hadoop.config import (  # noqa: E402
    FileOutcome,
    FSContext,
    HadoopConf,
    LoadReport,
    LoadStatus,
    NamenodeResolution,
    load_hadoop_conf,
    resolve_namenodes,
)

__all__ = [
    "FSContext",
    "FileOutcome",
    "HadoopConf",
    "HdfsConfError",
    "LoadReport",
    "LoadStatus",
    "NamenodeResolution",
    "UnresolvedDefaultFSError",
    "UnresolvedNamenodeError",
    "__version__",
    "get_logger",
    "load_hadoop_conf",
    "logger",
    "resolve_namenodes",
]
