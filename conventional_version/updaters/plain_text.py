"""Updater for files whose whole content is the version (VERSION.txt)."""

from __future__ import annotations


def read_version(contents: str) -> str:
    return contents.strip()


def write_version(contents: str, version: str) -> str:
    return version
