#!/usr/bin/env python3
"""
common/exceptions.py
====================

This module implements the exceptions raised while resolving the HDFS client
configuration.
"""

from __future__ import annotations

__author__ = "jslorrma"
__maintainer__ = "jslorrma"
__email__ = "jslorrma@gmail.com"


_UNRESOLVED_DEFAULT_FS_HINT = (
    "no defaultFS in configuration\n\n"
    "Neither a filesystem name was given nor is `fs.defaultFS` set in the loaded "
    "configuration. Pass the cluster name explicitly or check that `core-site.xml` "
    "can be found in the Hadoop configuration directory ({config_dir})."
)

_UNRESOLVED_NAMENODE_HINT = (
    "no namenode address in configuration\n\n"
    "No key starting with `{prefix}` was found for the filesystem '{fs_name}'. "
    "Check the `dfs.namenode.rpc-address.*` entries of `hdfs-site.xml`."
)


class HdfsConfError(Exception):
    """Basic hdfsconf exception"""


class UnresolvedDefaultFSError(HdfsConfError):
    """No filesystem name could be determined"""

    def __init__(self, config_dir: object = None):
        self.config_dir = config_dir
        super().__init__(
            _UNRESOLVED_DEFAULT_FS_HINT.format(config_dir=config_dir or "unknown")
        )


class UnresolvedNamenodeError(HdfsConfError):
    """A filesystem name was determined, but no namenode address is configured for it"""

    def __init__(self, fs_name: str, prefix: str):
        self.fs_name = fs_name
        self.prefix = prefix
        super().__init__(_UNRESOLVED_NAMENODE_HINT.format(fs_name=fs_name, prefix=prefix))
