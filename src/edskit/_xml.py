"""Tree-editing primitives used to mutate template documents.

ElementTree elements do not know their parent, so every operation that needs one
takes the document root and looks the parent up.  Template documents are small
(a few hundred nodes), so the lookup is a plain walk.

Paths are ElementTree paths.  A path whose first step names the root tag itself
(e.g. "Plate/BarCode" on a document whose root is <Plate>) is resolved from the
root; any other path is searched for anywhere in the document.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Sequence
from typing import TypeAlias

from edskit._errors import DetachedNode, RegionNotFound

__all__ = [
    "build_element",
    "find_region_by_id",
    "insert_all_before",
    "next_element_sibling",
    "parent_of",
    "remove_all",
    "select",
    "select_all",
    "serialize",
    "text_of",
]

Content: TypeAlias = "str | int | float | ET.Element | None"


def _split_root(root: ET.Element, path: str) -> str | None:
    """Return `path` relative to `root`, or None if `path` does not start at root."""
    head, _, rest = path.partition("/")
    if head != root.tag:
        return None
    return rest


def select(root: ET.Element, path: str) -> ET.Element | None:
    """Return the first node matching `path`, or None."""
    rest = _split_root(root, path)
    if rest is None:
        return root.find(f".//{path}")
    return root.find(rest) if rest else root


def select_all(root: ET.Element, path: str) -> list[ET.Element]:
    """Return all nodes matching `path`, in document order."""
    rest = _split_root(root, path)
    if rest is None:
        return root.findall(f".//{path}")
    return root.findall(rest) if rest else [root]


def text_of(node: ET.Element | None) -> str | None:
    """Return the stripped text of `node`, or None if it is absent or blank."""
    if node is None or node.text is None:
        return None
    return node.text.strip() or None


def parent_of(root: ET.Element, node: ET.Element) -> ET.Element | None:
    for parent in root.iter():
        for child in parent:
            if child is node:
                return parent
    return None


def next_element_sibling(root: ET.Element, node: ET.Element) -> ET.Element | None:
    """Return the element directly after `node` in its parent, if any."""
    parent = parent_of(root, node)
    if parent is None:
        return None
    children = list(parent)
    idx = children.index(node)
    return children[idx + 1] if idx + 1 < len(children) else None


def remove_all(root: ET.Element, nodes: Sequence[ET.Element] | None) -> int:
    """Remove `nodes` from their shared parent and return how many were removed.

    The parent is taken from the first node.

    Raises
    ------
    DetachedNode
        If the first node has no parent within `root`.
    """
    if not nodes:
        return 0

    parent = parent_of(root, nodes[0])
    if parent is None:
        raise DetachedNode(f"Can't remove <{nodes[0].tag}>: node has no parent")

    count = 0
    for node in nodes:
        parent.remove(node)
        count += 1
    return count


def build_element(tag: str, content: Content = None) -> ET.Element:
    """Create `<tag>` holding text, a stringified number, or a child element."""
    node = ET.Element(tag)
    if isinstance(content, ET.Element):
        node.append(content)
    elif isinstance(content, (int, float)):
        node.text = str(content)
    elif content is not None:
        node.text = content
    return node


def find_region_by_id(
    root: ET.Element, scope_path: str, region_id: str, id_path: str = "Feature/Id"
) -> ET.Element:
    """Return the node at `scope_path` whose `id_path` child has text `region_id`.

    Raises
    ------
    RegionNotFound
        If no node under `scope_path` carries that id.
    """
    for region in select_all(root, scope_path):
        id_node = region.find(id_path)
        if id_node is not None and (id_node.text or "").strip() == region_id:
            return region
    raise RegionNotFound(
        f"Unable to find {region_id!r} region at {scope_path!r} in <{root.tag}> "
        "template",
        region=region_id,
        path=scope_path,
    )


def insert_all_before(
    parent: ET.Element,
    nodes: Sequence[ET.Element],
    reference: ET.Element | None,
) -> None:
    """Insert `nodes`, in order, directly before `reference`.

    With no `reference` the nodes are appended to `parent`.
    """
    idx = len(parent) if reference is None else list(parent).index(reference)
    for offset, node in enumerate(nodes):
        parent.insert(idx + offset, node)


def serialize(root: ET.Element) -> str:
    """Return `root` as markup text, re-indented after editing."""
    ET.indent(root, space="    ")
    return ET.tostring(root, encoding="unicode")
