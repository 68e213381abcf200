"""Template documents: immutable, validated sources for the generated XML.

A template tree is a directory laid out like an unpacked .eds archive.  Three of its
documents are rewritten for every run; `EDSTemplate` parses and validates those three
once, and hands each builder an independent deep copy to edit.
"""

from __future__ import annotations

import copy
import logging
import os
import posixpath
import xml.etree.ElementTree as ET
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING

from edskit._errors import AnchorNotFound, FieldNotFound, TemplateIntegrityError
from edskit._io import open_tree
from edskit._xml import find_region_by_id, select, select_all

if TYPE_CHECKING:
    from fsspec import AbstractFileSystem

__all__ = [
    "ANALYSIS_PROTOCOL_PATH",
    "EXPERIMENT_PATH",
    "PLATE_SETUP_PATH",
    "EDSTemplate",
    "TemplateDocument",
    "TemplateSchema",
    "default_template_dir",
]

log = logging.getLogger(__name__)

PLATE_SETUP_PATH = "apldbio/sds/plate_setup.xml"
EXPERIMENT_PATH = "apldbio/sds/experiment.xml"
ANALYSIS_PROTOCOL_PATH = "apldbio/sds/analysis_protocol.xml"

TEMPLATE_DIR_ENV = "EDSKIT_TEMPLATE_DIR"


def default_template_dir() -> str:
    """Return the template directory to use when none is given explicitly.

    `EDSKIT_TEMPLATE_DIR` takes precedence over the template bundled with edskit.
    """
    if env := os.getenv(TEMPLATE_DIR_ENV):
        return env
    return str(Path(__file__).parent / "templates" / "default")


@dataclass(frozen=True)
class TemplateSchema:
    """Where, inside one template document, edskit reads and writes.

    All paths are resolved by `edskit._xml.select` and friends.
    """

    member: str
    """Path of the document inside the template tree / archive."""
    root_tag: str
    fields: Mapping[str, str] = field(default_factory=dict)
    """Scalar fields: name -> path.  Each must match a node."""
    regions: Mapping[str, str] = field(default_factory=dict)
    """Feature regions: region id -> scope path of the candidate nodes."""
    anchors: Mapping[str, str] = field(default_factory=dict)
    """Insertion anchors: name -> path.  Each must match at least one node."""
    checks: tuple[Callable[[ET.Element], object], ...] = ()
    """Extra validators; each raises a TemplateIntegrityError on failure."""

    def field_node(self, root: ET.Element, name: str) -> ET.Element:
        path = self.fields[name]
        node = select(root, path)
        if node is None:
            raise FieldNotFound(
                f"Unable to find {path!r} in {self.member} template",
                field=name,
                path=path,
            )
        return node

    def validate(self, root: ET.Element) -> None:
        """Raise a TemplateIntegrityError if `root` lacks anything this schema needs."""
        if root.tag != self.root_tag:
            raise TemplateIntegrityError(
                f"Expected <{self.root_tag}> as the root of {self.member}, "
                f"found <{root.tag}>",
                expected=self.root_tag,
                found=root.tag,
            )
        for name in self.fields:
            self.field_node(root, name)
        for region_id, path in self.regions.items():
            find_region_by_id(root, path, region_id)
        for name, path in self.anchors.items():
            if not select_all(root, path):
                raise AnchorNotFound(
                    f"No {path!r} node to anchor {name} in {self.member} template",
                    anchor=name,
                    path=path,
                )
        for check in self.checks:
            check(root)


class TemplateDocument:
    """A parsed, validated template document.  Never edited in place."""

    __slots__ = ("_root", "schema", "source")

    def __init__(self, root: ET.Element, schema: TemplateSchema, source: str = "") -> None:
        schema.validate(root)
        self._root = root
        self.schema = schema
        self.source = source

    @classmethod
    def from_string(
        cls, text: str | bytes, schema: TemplateSchema, source: str = "<string>"
    ) -> TemplateDocument:
        return cls(ET.fromstring(text), schema, source)

    def working_copy(self) -> ET.Element:
        """Return a deep copy of the document root, safe to mutate."""
        return copy.deepcopy(self._root)

    def __repr__(self) -> str:
        return f"<TemplateDocument {self.schema.member} from {self.source!r}>"


class EDSTemplate:
    """A template tree plus its three validated, editable documents.

    Load once with `EDSTemplate.load()` and reuse for any number of runs.
    """

    def __init__(
        self,
        fs: AbstractFileSystem,
        root: str,
        documents: Mapping[str, TemplateDocument],
    ) -> None:
        self.fs = fs
        self.root = root
        self.documents = MappingProxyType(dict(documents))

    @classmethod
    def load(cls, uri: str | os.PathLike | None = None) -> EDSTemplate:
        """Load and validate the template tree at `uri`.

        Parameters
        ----------
        uri : str | os.PathLike | None
            Directory (or fsspec URI) laid out like an unpacked .eds archive.
            Defaults to `default_template_dir()`.

        Raises
        ------
        FileNotFoundError
            If the directory or one of the edited documents does not exist.
        TemplateIntegrityError
            If one of the edited documents lacks a node edskit needs.
        """
        from edskit.write._analysis_protocol import ANALYSIS_PROTOCOL_SCHEMA
        from edskit.write._experiment import EXPERIMENT_SCHEMA
        from edskit.write._plate_setup import PLATE_SETUP_SCHEMA

        uri = default_template_dir() if uri is None else uri
        fs, root = open_tree(uri)
        documents = {}
        for schema in (PLATE_SETUP_SCHEMA, EXPERIMENT_SCHEMA, ANALYSIS_PROTOCOL_SCHEMA):
            path = posixpath.join(root, schema.member)
            documents[schema.member] = TemplateDocument.from_string(
                fs.cat_file(path), schema, source=path
            )
        log.debug("Loaded template tree %s", root)
        return cls(fs, root, documents)

    @property
    def plate_setup(self) -> TemplateDocument:
        return self.documents[PLATE_SETUP_PATH]

    @property
    def experiment(self) -> TemplateDocument:
        return self.documents[EXPERIMENT_PATH]

    @property
    def analysis_protocol(self) -> TemplateDocument:
        return self.documents[ANALYSIS_PROTOCOL_PATH]

    def read_file(self, relpath: str) -> bytes:
        """Return the raw bytes of a file inside the tree."""
        return self.fs.cat_file(posixpath.join(self.root, relpath))

    def __repr__(self) -> str:
        return f"<EDSTemplate {self.root!r}>"
