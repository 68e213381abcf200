"""Filesystem access for template trees and archives, via fsspec.

Anything fsspec understands can be used: local paths, ``memory://`` stores, or
remote URLs (e.g. s3://bucket/templates/default).
"""

from __future__ import annotations

import os
import posixpath
from collections.abc import Iterator
from typing import TYPE_CHECKING, cast

import fsspec
import fsspec.core

if TYPE_CHECKING:
    import io

    from fsspec import AbstractFileSystem

__all__ = ["open_tree", "read_bytes_from_uri", "walk_tree", "write_bytes_to_uri"]


def read_bytes_from_uri(uri: str | os.PathLike) -> bytes:
    """Read the full contents of a file at a URI (local or remote).

    Parameters
    ----------
    uri : str or os.PathLike
        The URI to read from.  This can be a local file path, or a remote URL
        (e.g. s3://bucket/key/run.eds).

    Returns
    -------
    bytes
        The raw file contents.
    """
    with fsspec.open(os.fspath(uri), "rb") as f:
        return cast("io.BufferedIOBase", f).read()


def write_bytes_to_uri(uri: str | os.PathLike, data: bytes) -> None:
    """Write `data` to a URI (local or remote), replacing any existing file."""
    with fsspec.open(os.fspath(uri), "wb") as f:
        cast("io.BufferedIOBase", f).write(data)


def open_tree(uri: str | os.PathLike) -> tuple[AbstractFileSystem, str]:
    """Return the filesystem and normalized root path of a directory tree.

    Raises
    ------
    FileNotFoundError
        If `uri` is not an existing directory.
    """
    fs, root = fsspec.core.url_to_fs(os.fspath(uri))
    if root != "/":
        root = root.rstrip("/")
    if not fs.isdir(root):
        raise FileNotFoundError(f"Template directory not found: {os.fspath(uri)}")
    return fs, root


def walk_tree(fs: AbstractFileSystem, root: str) -> Iterator[tuple[str, bool]]:
    """Yield ``(relative_path, is_dir)`` for every entry below `root`.

    Relative paths use "/" separators on every platform, and parents are always
    yielded before their children.
    """
    listing = fs.find(root, withdirs=True, detail=True)
    for path in sorted(listing):
        rel = posixpath.relpath(path, root)
        if rel == ".":
            continue
        yield rel, listing[path]["type"] == "directory"
