#!/usr/bin/env python3
"""
hadoop/config.py
================

This module implements the parts of Hadoop core and HDFS config handling an
HDFS client needs to connect: it parses `core-site.xml` and `hdfs-site.xml`,
merges them into a `HadoopConf` mapping and derives the namenode RPC addresses
of the default (or a given) filesystem cluster.

Parsed files are kept in a bounded LRU cache. A file is parsed again if its
modification time, change time, size or inode changed. This is done by the
`config_cache` decorator, which is applied to `_parse_hadoop_config`.

Example
-------

```python
from hdfsconf.hadoop.config import FSContext, load_hadoop_conf

# Load the configuration from a directory
conf = load_hadoop_conf('/path/to/hadoop/config/files')

# Resolve the namenodes of the default filesystem
context = FSContext()
conf.namenodes(context=context).addresses
# ['nn1.example.com:8020', 'nn2.example.com:8020']
context.get_default_fs()
# 'mycluster'
```

If no path is given, the directory is taken from the `HADOOP_CONF_DIR`
environment variable or, if that isn't set either, `${HADOOP_HOME}/conf` is
used:

```python
import os
from hdfsconf.hadoop.config import load_hadoop_conf

os.environ['HADOOP_CONF_DIR'] = '/path/to/hadoop/config/files'
conf = load_hadoop_conf()
```
"""

from __future__ import annotations

__author__ = "jslorrma"
__maintainer__ = "jslorrma"
__email__ = "jslorrma@gmail.com"

# imports
import enum
import os
import pathlib
import threading
import xml.etree.ElementTree as ET
from collections.abc import Mapping
from functools import lru_cache, wraps
from typing import TYPE_CHECKING, NamedTuple

# module imports
from .. import PathType, logger
from ..common.exceptions import UnresolvedDefaultFSError, UnresolvedNamenodeError

if TYPE_CHECKING:
    from collections.abc import Callable

# HADOOP config files, later files take precedence
CONFIG_FILES = ("core-site.xml", "hdfs-site.xml")

DEFAULT_FS_KEY = "fs.defaultFS"
RPC_ADDRESS_KEY = "dfs.namenode.rpc-address"
HDFS_SCHEME = "hdfs://"


# Parsed files kept in the config cache
CONFIG_CACHE_SIZE = 64


def _file_signature(conf_file: pathlib.Path) -> tuple[int, int, int, int]:
    # ctime can't be reset by `cp -p`, `rsync -t` or `os.utime`
    stat = conf_file.stat()
    return (stat.st_mtime_ns, stat.st_ctime_ns, stat.st_size, stat.st_ino)


def config_cache(func: Callable):
    """
    A decorator that caches the results of a function per configuration file
    and re-runs it if the file has been modified.

    A file counts as modified if its modification time, change time, size or
    inode differ from the last call. The signature is passed to `func` as
    second argument, so it becomes part of the cache key.

    Parameters
    ----------
    func : Callable
        The function to be decorated, taking the file and its signature. It
        must provide a `cache_clear` method, e.g. by being wrapped with
        `functools.lru_cache`.

    Returns
    -------
    Callable
        The decorated function.
    """
    conf_files_sig: dict[pathlib.Path, tuple[int, int, int, int]] = {}

    @wraps(func)
    def wrapper(conf_file: pathlib.Path):
        try:
            signature = _file_signature(conf_file)
        except FileNotFoundError:
            conf_files_sig.pop(conf_file, None)
            raise

        if conf_files_sig.get(conf_file, signature) != signature:
            logger.debug(f"'{conf_file}' changed on disk, parsing it again")
        # re-insert, so pruning drops the least recently used file
        conf_files_sig.pop(conf_file, None)
        conf_files_sig[conf_file] = signature
        # keep the signatures bounded like the cache itself
        while len(conf_files_sig) > CONFIG_CACHE_SIZE:
            conf_files_sig.pop(next(iter(conf_files_sig)))

        return func(conf_file, signature)

    def cache_clear():
        conf_files_sig.clear()
        func.cache_clear()

    wrapper.cache_clear = cache_clear
    wrapper.cache_info = func.cache_info
    wrapper.tracked_files = lambda: len(conf_files_sig)
    return wrapper


@config_cache
@lru_cache(maxsize=CONFIG_CACHE_SIZE)
def _parse_hadoop_config(
    config: pathlib.Path, signature: tuple[int, int, int, int] | None = None
) -> dict[str, str]:
    """
    Parse a Hadoop configuration file and return a dictionary of configuration
    properties.

    The root element may have any name, only its direct `<property>` children
    are read. A property without `<name>` is ignored, a missing `<value>` is
    read as the empty string.

    Parameters
    ----------
    config : pathlib.Path
        The path to the Hadoop configuration file.
    signature : tuple[int, int, int, int], optional
        The file's stat signature, only used as cache key.

    Returns
    -------
    dict[str, str]
        A dictionary where the keys are the names of the properties and the
        values are the corresponding property values. The dictionary is shared
        by all callers and must not be modified.

    Raises
    ------
    OSError
        If the file can't be read.
    xml.etree.ElementTree.ParseError
        If the file isn't well-formed XML.
    """
    root = ET.parse(str(config)).getroot()

    properties = {}
    for prop in root.findall("./property"):
        name = prop.findtext("name")
        # a nameless property is dropped instead of being stored under ""
        if name is None:
            logger.debug(f"Skipping property without name in '{config}'")
            continue
        properties[name] = prop.findtext("value", default="")

    return properties


def hadoop_conf_dir(path: PathType | None = None) -> pathlib.Path:
    """
    Get the Hadoop configuration directory.

    The given `path` is used if set, then the `HADOOP_CONF_DIR` environment
    variable and finally `${HADOOP_HOME}/conf`.
    """
    return pathlib.Path(
        path
        or os.getenv("HADOOP_CONF_DIR")
        or pathlib.Path(os.getenv("HADOOP_HOME", ""), "conf")
    )


class LoadStatus(enum.Enum):
    """Outcome of loading a single configuration file."""

    LOADED = "loaded"
    NOT_FOUND = "not-found"
    UNREADABLE = "unreadable"
    PARSE_ERROR = "parse-error"


class FileOutcome(NamedTuple):
    path: pathlib.Path
    status: LoadStatus
    error: str | None = None


class LoadReport(tuple):
    """
    The ordered `FileOutcome`s of a configuration load, one for each file in
    `CONFIG_FILES`.
    """

    @property
    def loaded(self) -> list[pathlib.Path]:
        """Files that contributed properties to the configuration."""
        return [o.path for o in self if o.status is LoadStatus.LOADED]

    @property
    def missing(self) -> list[pathlib.Path]:
        return [o.path for o in self if o.status is LoadStatus.NOT_FOUND]

    @property
    def failed(self) -> list[FileOutcome]:
        """Files that exist, but couldn't be read or parsed."""
        return [
            o for o in self if o.status in (LoadStatus.UNREADABLE, LoadStatus.PARSE_ERROR)
        ]

    def __repr__(self):
        return f"LoadReport({list(self)!r})"


class NamenodeResolution(NamedTuple):
    """Result of a namenode resolution."""

    default_fs: str
    """The filesystem name used for the lookup, as recorded in `FSContext`."""
    addresses: list[str]
    """The sorted and deduplicated namenode RPC addresses."""


class FSContext:
    """
    Caller owned holder of the current default filesystem name.

    The value is empty until a namenode resolution receiving this context
    determined a filesystem name. Access is guarded by a lock, so a context
    may be shared between threads, but independent callers should rather use
    independent contexts.
    """

    def __init__(self, default_fs: str = ""):
        self._lock = threading.Lock()
        self._default_fs = default_fs

    def get_default_fs(self) -> str:
        """Return the last resolved default filesystem name ("" if never set)."""
        with self._lock:
            return self._default_fs

    def set_default_fs(self, default_fs: str):
        with self._lock:
            self._default_fs = default_fs

    def __repr__(self):
        return f"FSContext(default_fs={self.get_default_fs()!r})"


class HadoopConf(dict):
    """
    A mapping of all the key value configuration pairs found in a user's Hadoop
    configuration files.

    Instances are created with `HadoopConf.load` (or `load_hadoop_conf`) and
    keep the directory they were loaded from and the per-file `LoadReport`.
    They are not modified after loading.
    """

    def __init__(
        self,
        *args,
        config_dir: pathlib.Path | None = None,
        report: LoadReport | None = None,
        **kwargs,
    ):
        super().__init__(*args, **kwargs)
        self.config_dir = config_dir
        self.report = report if report is not None else LoadReport()

    @classmethod
    def load(cls, path: PathType | None = None) -> HadoopConf:
        """
        Load the Hadoop configuration from `core-site.xml` and `hdfs-site.xml`.

        Parameters
        ----------
        path : PathType | None, optional
            The directory containing the XML files. If not provided,
            `HADOOP_CONF_DIR` is used, or `${HADOOP_HOME}/conf` if that isn't
            set either.

        Returns
        -------
        HadoopConf
            The merged configuration, where values of `hdfs-site.xml` take
            precedence over `core-site.xml`. Files that are missing or can't be
            parsed are skipped, so the result may be empty. This method never
            raises for those cases; the outcome of every file is available in
            `HadoopConf.report`.
        """
        config_dir = hadoop_conf_dir(path)

        merged: dict[str, str] = {}
        outcomes = []
        for filename in CONFIG_FILES:
            conf_file = config_dir / filename
            try:
                properties = _parse_hadoop_config(conf_file)
            except FileNotFoundError:
                logger.debug(f"'{filename}' not found in '{config_dir}', skipping")
                outcomes.append(FileOutcome(conf_file, LoadStatus.NOT_FOUND))
                continue
            except OSError as exc:
                logger.warning(f"Can't read '{conf_file}', skipping: {exc}")
                outcomes.append(FileOutcome(conf_file, LoadStatus.UNREADABLE, str(exc)))
                continue
            except ET.ParseError as exc:
                logger.warning(f"Can't parse '{conf_file}', skipping: {exc}")
                outcomes.append(FileOutcome(conf_file, LoadStatus.PARSE_ERROR, str(exc)))
                continue

            logger.debug(f"Loaded {len(properties)} properties from '{conf_file}'")
            merged.update(properties)
            outcomes.append(FileOutcome(conf_file, LoadStatus.LOADED))

        return cls(merged, config_dir=config_dir, report=LoadReport(outcomes))

    def namenodes(
        self, given_fs: str | None = None, context: FSContext | None = None
    ) -> NamenodeResolution:
        """
        Resolve the namenode RPC addresses, see `resolve_namenodes`.
        """
        return resolve_namenodes(self, given_fs=given_fs, context=context)

    def __repr__(self):
        return f"HadoopConf({dict.__repr__(self)}, config_dir={self.config_dir!r})"


def load_hadoop_conf(path: PathType | None = None) -> HadoopConf:
    """Load the Hadoop configuration, see `HadoopConf.load`."""
    return HadoopConf.load(path)


def resolve_namenodes(
    conf: Mapping[str, str],
    given_fs: str | None = None,
    context: FSContext | None = None,
) -> NamenodeResolution:
    """
    Resolve the namenode RPC addresses of a filesystem cluster.

    Parameters
    ----------
    conf : Mapping[str, str]
        The Hadoop configuration.
    given_fs : str, optional
        The filesystem (cluster) name. If not provided, the value of
        `fs.defaultFS` without its `hdfs://` prefix is used. A given name is
        used as is, no prefix is stripped.
    context : FSContext, optional
        If provided, its default filesystem name is set to the name used as
        soon as it is determined, i.e. also if no namenode is found afterwards.

    Returns
    -------
    NamenodeResolution
        The filesystem name used and the sorted, deduplicated values of all
        `dfs.namenode.rpc-address.<name>.*` keys.

    Raises
    ------
    UnresolvedDefaultFSError
        If no name is given and `fs.defaultFS` isn't set.
    UnresolvedNamenodeError
        If no namenode address is configured for the filesystem name.
    """
    if not given_fs:
        fs_name = conf.get(DEFAULT_FS_KEY) or ""
        fs_name = fs_name.removeprefix(HDFS_SCHEME)
        if not fs_name:
            raise UnresolvedDefaultFSError(getattr(conf, "config_dir", None))
        default_fs = fs_name
    else:
        fs_name = default_fs = given_fs

    if context is not None:
        context.set_default_fs(default_fs)

    prefix = f"{RPC_ADDRESS_KEY}.{fs_name}."
    addresses = sorted({value for key, value in conf.items() if key.startswith(prefix)})
    if not addresses:
        raise UnresolvedNamenodeError(fs_name, prefix)

    logger.debug(f"Resolved namenodes {addresses} for filesystem '{fs_name}'")
    return NamenodeResolution(default_fs=default_fs, addresses=addresses)
