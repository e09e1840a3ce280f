#!/usr/bin/env python3
"""
Pytest configuration and fixtures for hdfsconf testing.
"""

from __future__ import annotations

import pathlib
import xml.etree.ElementTree as ET

import pytest

from hdfsconf.common.logging import LOG_LEVEL_ENV


def write_site(directory: pathlib.Path, filename: str, properties: dict[str, str]) -> pathlib.Path:
    """Write a Hadoop `*-site.xml` file with the given properties."""
    root = ET.Element("configuration")
    for key, value in properties.items():
        prop = ET.SubElement(root, "property")
        ET.SubElement(prop, "name").text = key
        ET.SubElement(prop, "value").text = value

    path = directory / filename
    ET.ElementTree(root).write(str(path), encoding="utf-8", xml_declaration=True)
    return path


@pytest.fixture(autouse=True)
def hadoop_env(monkeypatch):
    """Isolate tests from the Hadoop environment of the machine running them."""
    # set before deleting, so values exported by the CLI are undone as well
    for name in ("HADOOP_CONF_DIR", "HADOOP_HOME", LOG_LEVEL_ENV):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


@pytest.fixture
def ha_cluster_dir(tmp_path):
    """A configuration directory of an HA cluster `clusterA` with two namenodes."""
    write_site(
        tmp_path,
        "core-site.xml",
        {"fs.defaultFS": "hdfs://clusterA", "hadoop.tmp.dir": "/tmp/hadoop"},
    )
    write_site(
        tmp_path,
        "hdfs-site.xml",
        {
            "dfs.nameservices": "clusterA",
            "dfs.ha.namenodes.clusterA": "nn1,nn2",
            "dfs.namenode.rpc-address.clusterA.nn2": "host2:8020",
            "dfs.namenode.rpc-address.clusterA.nn1": "host1:8020",
            "dfs.namenode.http-address.clusterA.nn1": "host1:9870",
        },
    )
    return tmp_path
