#!/usr/bin/env python3
"""
hdfsconf
========

Command line interface to inspect the HDFS client configuration resolved from
the Hadoop configuration directory.

```
$ hdfsconf -c /etc/hadoop/conf namenodes
mycluster
nn1.example.com:8020
nn2.example.com:8020
```
"""

from __future__ import annotations

__author__ = "jslorrma"
__maintainer__ = "jslorrma"
__email__ = "jslorrma@gmail.com"

import os
import pathlib
import shutil

import rich_click as click
from rich.console import Console
from rich.table import Table
from rich.traceback import install

from . import LIBRARY_NAME, __version__, get_logger
from .common.exceptions import HdfsConfError
from .common.logging import LOG_LEVEL_ENV
from .hadoop.config import LoadStatus, load_hadoop_conf

# install rich traceback
install(show_locals=True, max_frames=5)

click.rich_click.USE_RICH_MARKUP = True

logger = get_logger(__name__)

_STATUS_STYLES = {
    LoadStatus.LOADED: "green",
    LoadStatus.NOT_FOUND: "dim",
    LoadStatus.UNREADABLE: "red3",
    LoadStatus.PARSE_ERROR: "red3",
}


# create a output table
def _make_output_table(title: str, header: list[tuple[str, dict]], rows: list[list[str]], **kwargs):
    """
    Create a table for output.

    Parameters
    ----------
    title : str
        The title of the table.
    header : list[tuple[str, dict]]
        The header of the table. Each tuple contains the column name and a
        dictionary of keyword arguments to pass to `rich.table.Table.add_column`.
    rows : list[list[str]]
        The rows of the table. Each list contains the values for a row.

    Returns
    -------
    table : rich.table.Table
        The table.
    """
    table = Table(
        show_header=any(h[0] for h in header),
        header_style="bold deep_sky_blue1",
        show_lines=False,
        box=None,
        title=title,
        min_width=min(120, shutil.get_terminal_size().columns),
        title_justify="left",
        expand=True,
        **kwargs,
    )
    for i, (col, header_kwargs) in enumerate(header):
        if "style" not in header_kwargs:
            header_kwargs["style"] = "dim" if i == 0 else None
        table.add_column(col, **header_kwargs)
    for row in rows:
        table.add_row(*row)
    return table


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase verbosity (can be passed multiple times)",
)
@click.option(
    "-c",
    "--hadoop-conf",
    type=click.Path(exists=True, file_okay=False, resolve_path=True, path_type=pathlib.Path),
    help=(
        "The path to the Hadoop configuration directory, where the "
        "`{core, hdfs}-site.xml` files can be found. If not provided, the "
        "directory is taken from `HADOOP_CONF_DIR` or `${HADOOP_HOME}/conf`."
    ),
)
@click.version_option(version=__version__, prog_name=LIBRARY_NAME)
def cli(verbose: int, hadoop_conf: pathlib.Path | None):
    """
    hdfsconf resolves the HDFS client configuration (merged `core-site.xml`
    and `hdfs-site.xml`, default filesystem and namenode addresses).

    You can try using --help at the top level and also for
    specific subcommands.
    """
    if verbose > 0:
        os.environ[LOG_LEVEL_ENV] = "INFO" if verbose == 1 else "DEBUG"

    if hadoop_conf:
        os.environ["HADOOP_CONF_DIR"] = f"{hadoop_conf}"

    # in case the log level was changed, update loggers
    get_logger(LIBRARY_NAME)
    globals().update({"logger": get_logger(__name__)})


@cli.command(name="files", help="Show which configuration files were loaded")
def files():
    conf = load_hadoop_conf()
    rows = [
        [
            outcome.path.name,
            f"[{_STATUS_STYLES[outcome.status]}]{outcome.status.value}[/]",
            f"{outcome.path}",
            outcome.error or "",
        ]
        for outcome in conf.report
    ]
    Console().print(
        _make_output_table(
            title=f"Hadoop configuration in '{conf.config_dir}'",
            header=[
                ("File", {"no_wrap": True}),
                ("Status", {"no_wrap": True}),
                ("Path", {"overflow": "fold"}),
                ("Error", {"overflow": "fold"}),
            ],
            rows=rows,
        )
    )


@cli.command(name="get", help="Get a configuration value")
@click.argument("key", type=str)
def get(key: str):
    conf = load_hadoop_conf()
    if key not in conf:
        logger.error(f"'{key}' not found in the configuration loaded from '{conf.config_dir}'")
        raise SystemExit(1)
    click.echo(conf[key])


@cli.command(name="namenodes", help="Resolve the namenode RPC addresses")
@click.option(
    "--fs",
    "fs_name",
    type=str,
    default=None,
    help="The filesystem (cluster) name. Defaults to the value of `fs.defaultFS`.",
)
def namenodes(fs_name: str | None = None):
    conf = load_hadoop_conf()
    try:
        resolution = conf.namenodes(given_fs=fs_name)
    except HdfsConfError as e:
        logger.error(f"Resolving namenodes failed: {e}")
        raise SystemExit(1) from e

    click.echo(resolution.default_fs)
    for address in resolution.addresses:
        click.echo(address)


# main function
main = cli

if __name__ == "__main__":
    main()
