"""Read-only helpers over a BeautifulSoup content tree.

Extraction code only ever looks at the tree: text, parents, siblings,
selector matches and attributes. Nothing here mutates a node.
"""

from __future__ import annotations

import re

from bs4 import BeautifulSoup, NavigableString, Tag

_CONTROL_WS_RE = re.compile(r"[\r\n\t]")
_MULTI_WS_RE = re.compile(r"\s+")
_ZERO_WIDTH_RE = re.compile(r"[\u200B-\u200D\uFEFF]")


def normalize_text(text: str | None) -> str:
    """Collapse whitespace and drop zero-width characters."""
    if not text:
        return ""
    text = _CONTROL_WS_RE.sub(" ", text)
    text = _MULTI_WS_RE.sub(" ", text)
    text = _ZERO_WIDTH_RE.sub("", text)
    return text.strip()


def as_element(node) -> Tag | None:
    """Text nodes stand for their parent element."""
    if isinstance(node, Tag):
        return node
    if isinstance(node, NavigableString):
        return node.parent
    return None


def node_text(node) -> str:
    if node is None:
        return ""
    if isinstance(node, NavigableString):
        return normalize_text(str(node))
    return normalize_text(node.get_text())


def document_root(node) -> Tag | None:
    element = as_element(node)
    if element is None:
        return None
    root = element
    while root.parent is not None:
        root = root.parent
    return root


def page_title(node) -> str:
    root = document_root(node)
    if root is None:
        return ""
    title = root.find("title")
    return node_text(title) if title else ""


def meta_content(node, *, name: str | None = None, prop: str | None = None) -> str:
    root = document_root(node)
    if root is None:
        return ""
    attrs = {"name": name} if name else {"property": prop}
    meta = root.find("meta", attrs=attrs)
    if meta is None:
        return ""
    return normalize_text(meta.get("content", ""))


def closest(node, selector: str) -> Tag | None:
    """Nearest ancestor-or-self matching ``selector``."""
    element = as_element(node)
    if element is None or isinstance(element, BeautifulSoup):
        return None
    return element.css.closest(selector)


def select_all(node, selector: str) -> list[Tag]:
    element = as_element(node)
    if element is None:
        return []
    return element.select(selector)


def select_one(node, selector: str) -> Tag | None:
    element = as_element(node)
    if element is None:
        return None
    return element.select_one(selector)


def element_parent(node) -> Tag | None:
    element = as_element(node)
    if element is None:
        return None
    parent = element.parent
    if parent is None or isinstance(parent, BeautifulSoup):
        return None
    return parent


def previous_elements(node, limit: int) -> list[Tag]:
    """Up to ``limit`` preceding sibling elements, nearest first."""
    element = as_element(node)
    if element is None or limit <= 0:
        return []
    return element.find_previous_siblings(True, limit=limit)


def next_elements(node, limit: int) -> list[Tag]:
    element = as_element(node)
    if element is None or limit <= 0:
        return []
    return element.find_next_siblings(True, limit=limit)


def class_names(element: Tag) -> list[str]:
    classes = element.get("class") or []
    if isinstance(classes, str):
        return classes.split()
    return list(classes)


def css_path(node) -> str:
    """Short descriptor of an element: tag#id or tag plus its first two classes."""
    element = as_element(node)
    if element is None:
        return ""
    descriptor = element.name.lower()
    element_id = element.get("id")
    if element_id:
        return f"{descriptor}#{element_id}"
    classes = [c for c in class_names(element) if c]
    if classes:
        descriptor += "." + ".".join(classes[:2])
    return descriptor


def is_inside(node, selector: str) -> bool:
    """True when the node or one of its ancestors matches ``selector``."""
    return closest(node, selector) is not None


def tree_distance(a: Tag, b: Tag) -> int:
    """Number of edges between two elements through their lowest common ancestor."""
    a_chain = [a] + list(a.parents)
    b_chain = [b] + list(b.parents)
    b_index = {id(node): i for i, node in enumerate(b_chain)}
    for i, node in enumerate(a_chain):
        j = b_index.get(id(node))
        if j is not None:
            return i + j
    return len(a_chain) + len(b_chain)
