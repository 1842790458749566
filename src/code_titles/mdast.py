"""Insert code titles into mdast-shaped Markdown trees.

Trees are plain mutable mappings following the mdast vocabulary: every node
has a ``type``, containers hold an ordered ``children`` list and code nodes
expose ``lang`` and ``meta``.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, MutableMapping
import logging
from typing import Any

from code_titles.annotation import parse_annotation, render_title


__all__ = [
    "CODE_NODE",
    "HTML_NODE",
    "Node",
    "Visitor",
    "build_label",
    "transform",
    "visit",
]


logger = logging.getLogger(__name__)

CODE_NODE = "code"
HTML_NODE = "html"

Node = MutableMapping[str, Any]
Visitor = Callable[[Node, int | None, Node | None], int | None]


def visit(tree: Node, node_type: str, visitor: Visitor) -> None:
    """Walk ``tree`` depth-first and call ``visitor`` on nodes of ``node_type``.

    The visitor receives ``(node, index, parent)`` and may insert siblings
    before ``node``. It returns how many nodes it inserted (``None`` means
    none) so the walk skips past them instead of revisiting ``node``.
    """
    _visit(tree, node_type, visitor, None, None)


def _visit(
    node: Node,
    node_type: str,
    visitor: Visitor,
    index: int | None,
    parent: Node | None,
) -> int:
    inserted = 0
    if node.get("type") == node_type:
        inserted = visitor(node, index, parent) or 0

    children = node.get("children")
    if not isinstance(children, list):
        return inserted

    position = 0
    while position < len(children):
        child = children[position]
        if not isinstance(child, MutableMapping):
            position += 1
            continue
        position += _visit(child, node_type, visitor, position, node) + 1
    return inserted


def build_label(title: str) -> Node:
    """Create the raw HTML node announcing ``title``."""
    return {"type": HTML_NODE, "value": render_title(title)}


def _insert_title(node: Node, index: int | None, parent: Node | None) -> int:
    lang = node.get("lang")
    meta = node.get("meta")
    if not isinstance(lang, (str, type(None))) or not isinstance(meta, (str, type(None))):
        logger.warning(
            "Skipping code node with unexpected annotation fields: lang=%r meta=%r",
            lang,
            meta,
        )
        return 0

    annotation = parse_annotation(lang, meta)
    if annotation is None or not annotation.has_title or not annotation.language:
        return 0
    if parent is None or index is None:
        logger.warning("Skipping titled code node without a parent: %r", lang)
        return 0

    node["lang"] = annotation.without_title().render()
    if "meta" in node:
        node["meta"] = None
    parent["children"].insert(index, build_label(annotation.title))
    logger.debug("Inserted code title %r before %r block.", annotation.title, node["lang"])
    return 1


def transform(tree: Node, options: Mapping[str, Any] | None = None) -> Node:
    """Rewrite every titled code block of ``tree`` in place and return it.

    ``options`` is accepted for pipeline compatibility and currently ignored.
    """
    del options
    visit(tree, CODE_NODE, _insert_title)
    return tree
