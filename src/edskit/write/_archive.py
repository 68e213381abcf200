"""Packing a template tree and the generated documents into an .eds archive."""

from __future__ import annotations

import io
import logging
import zipfile
from collections.abc import Mapping
from typing import TYPE_CHECKING

from edskit._io import walk_tree

if TYPE_CHECKING:
    from edskit._template import EDSTemplate

__all__ = ["COMPRESSION_LEVEL", "assemble_archive"]

log = logging.getLogger(__name__)

COMPRESSION_LEVEL = 6


def assemble_archive(template: EDSTemplate, documents: Mapping[str, str]) -> bytes:
    """Return the bytes of a zip archive holding the template tree.

    Every directory of the tree gets an explicit folder entry and every file is
    copied verbatim, except the files named in `documents`, which are replaced
    by the given text.

    Parameters
    ----------
    template : EDSTemplate
        The template tree to copy.
    documents : Mapping[str, str]
        Generated documents, keyed by their path inside the archive
        (e.g. "apldbio/sds/plate_setup.xml").
    """
    buf = io.BytesIO()
    copied = 0
    with zipfile.ZipFile(
        buf, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=COMPRESSION_LEVEL
    ) as zf:
        for relpath, is_dir in walk_tree(template.fs, template.root):
            if is_dir:
                zf.mkdir(relpath)
            elif relpath not in documents:
                zf.writestr(relpath, template.read_file(relpath))
                copied += 1
        for member, text in documents.items():
            zf.writestr(member, text.encode("utf-8"))

    log.debug(
        "Assembled archive from %s: %d files copied, %d generated",
        template.root,
        copied,
        len(documents),
    )
    return buf.getvalue()
