from __future__ import annotations

import io
import os
import zipfile
from typing import IO, TypeAlias

from edskit._errors import MissingArchiveMember
from edskit._io import read_bytes_from_uri

__all__ = ["ArchiveSource", "load_archive", "read_member"]

ArchiveSource: TypeAlias = "str | os.PathLike | bytes | bytearray | memoryview | IO[bytes]"


def load_archive(source: ArchiveSource) -> zipfile.ZipFile:
    """Open an .eds archive from a path / fsspec URI, raw bytes, or a binary file.

    Raises
    ------
    FileNotFoundError
        If a path or URI does not exist.
    zipfile.BadZipFile
        If the data is not a zip archive.
    """
    if isinstance(source, (str, os.PathLike)):
        return zipfile.ZipFile(io.BytesIO(read_bytes_from_uri(source)))
    if isinstance(source, (bytes, bytearray, memoryview)):
        return zipfile.ZipFile(io.BytesIO(source))
    return zipfile.ZipFile(source)


def read_member(zf: zipfile.ZipFile, name: str) -> str:
    """Return the text of archive member `name`.

    Bytes that are not valid UTF-8 (e.g. a cp1252 0xB5 byte in a sample name) decode
    to U+FFFD instead of failing the whole read.

    Raises
    ------
    MissingArchiveMember
        If the archive has no member called `name`.
    """
    try:
        data = zf.read(name)
    except KeyError:
        raise MissingArchiveMember(
            f"{name} not found in .eds archive", member=name
        ) from None
    return data.decode("utf-8-sig", errors="replace")
