"""Build trees from text, nested lists and mappings.

Supported inputs:

- Parenthesized expressions, as produced by ``Node.as_string()``:
  ``(root child1 child2 (child3 grandchild1))``. Quote labels that contain
  spaces or parentheses: ``(root "first child")``.
- Nested lists: ``["root", "child1", ["child3", "grandchild1"]]``.
- Nested mappings, the natural YAML/JSON shape:

  ```yaml
  root:
    - child1
    - child2
    - child3:
        - grandchild1
  ```
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any, List, Union

import yaml
from pyparsing import OneOrMore, ParseException, nested_expr

from dataknobs_treedraw.exceptions import ValidationError
from dataknobs_treedraw.tree import Node

logger = logging.getLogger(__name__)

FORMATS = ("auto", "sexpr", "yaml", "json")

_SUFFIX_FORMATS = {
    ".yaml": "yaml",
    ".yml": "yaml",
    ".json": "json",
}

_ESCAPE_RE = re.compile(r"\\(.)")

_ESCAPES = {"n": "\n", "r": "\r"}


def build_tree_from_string(from_string: str) -> Node:
    """Build a tree from a parenthesized expression.

    Args:
        from_string: The expression, e.g. ``"(root (a b) c)"``. A string that
            does not start with ``(`` becomes a single node.

    Returns:
        The root of the new tree.

    Raises:
        ValidationError: If the expression is unbalanced, empty, or holds more
            than one top-level tree.

    Example:
        ```python
        tree = build_tree_from_string("(root (child1 leaf1 leaf2) child2)")
        print(tree.num_children)            # 2
        print(tree.get_child(0).label)      # "child1"
        ```
    """
    text = from_string.strip()
    if not text.startswith("("):
        return Node(_unquote(text))
    try:
        data = OneOrMore(nested_expr()).parse_string(text, parse_all=True)
    except ParseException as e:
        raise ValidationError(
            f"malformed tree expression: {e}",
            context={"expression": from_string, "column": e.col},
        ) from e
    parsed = data.as_list()
    if len(parsed) != 1:
        raise ValidationError(
            "expected exactly one top-level tree",
            context={"expression": from_string, "trees": len(parsed)},
        )
    return build_tree_from_list(_unquote_tokens(parsed[0]))


def build_tree_from_list(data: Union[Any, List]) -> Node:
    """Build a tree from a nested list ``[parent, child1, child2, ...]``.

    Children may themselves be nested lists. A non-list value becomes a leaf.

    Raises:
        ValidationError: If a list is empty.
    """
    if isinstance(data, list):
        if not data:
            raise ValidationError("a tree list must start with its root label")
        node = build_tree_from_list(data[0])
        for cdata in data[1:]:
            node.add_child(build_tree_from_list(cdata))
        return node
    return Node(data)


def build_tree_from_mapping(data: Any) -> Node:
    """Build a tree from a single-rooted nested mapping.

    The mapping's one key is the root label. A value may be None (leaf), a
    scalar (one child), a list of scalars and single-key mappings, or a
    mapping whose keys become children in order.

    Raises:
        ValidationError: If the root mapping does not have exactly one key or
            a list is nested directly inside another list.
    """
    if isinstance(data, Mapping):
        if len(data) != 1:
            raise ValidationError(
                "a tree mapping must have exactly one root key",
                context={"keys": [str(key) for key in data]},
            )
        ((label, children),) = data.items()
        root = Node(label)
        _attach_children(root, children)
        return root
    if isinstance(data, (list, tuple)) or data is None:
        raise ValidationError(
            "a tree document must be a single-key mapping or a label",
            context={"type": type(data).__name__},
        )
    return Node(data)


def _attach_children(parent: Node, children: Any) -> None:
    if children is None:
        return
    if isinstance(children, Mapping):
        for label, grandchildren in children.items():
            _attach_children(parent.new_child(label), grandchildren)
    elif isinstance(children, (list, tuple)):
        for item in children:
            if isinstance(item, Mapping):
                _attach_children(parent, item)
            elif isinstance(item, (list, tuple)):
                raise ValidationError(
                    "lists cannot be nested directly inside lists",
                    context={"parent": parent.label},
                )
            else:
                parent.new_child(item)
    else:
        parent.new_child(children)


def parse_tree(text: str, fmt: str = "auto") -> Node:
    """Parse a tree document in the given format.

    Args:
        text: The document.
        fmt: One of 'sexpr', 'yaml', 'json' or 'auto'. 'auto' treats text
            starting with ``(`` as an expression and anything else as YAML
            (which also accepts JSON).

    Raises:
        ValidationError: If the format is unknown or the document is invalid.
    """
    if fmt not in FORMATS:
        raise ValidationError(f"unknown tree format: {fmt}", context={"format": fmt, "formats": FORMATS})
    if fmt == "auto":
        fmt = "sexpr" if text.lstrip().startswith("(") else "yaml"
    if fmt == "sexpr":
        return build_tree_from_string(text)
    try:
        data = json.loads(text) if fmt == "json" else yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ValidationError(f"invalid {fmt} tree document: {e}", context={"format": fmt}) from e
    return build_tree_from_mapping(data)


def load_tree(path: Union[str, Path], fmt: str = "auto") -> Node:
    """Load a tree from a file.

    With ``fmt='auto'`` the format follows the file suffix (``.yaml``,
    ``.yml``, ``.json``); other files are sniffed as in ``parse_tree``.
    """
    path = Path(path)
    if fmt == "auto":
        fmt = _SUFFIX_FORMATS.get(path.suffix.lower(), "auto")
    logger.debug("Loading tree from %s as %s", path, fmt)
    return parse_tree(path.read_text(encoding="utf-8"), fmt=fmt)


def _unquote_tokens(data: Union[str, List]) -> Union[str, List]:
    if isinstance(data, list):
        return [_unquote_tokens(item) for item in data]
    return _unquote(data)


def _unquote(token: str) -> str:
    if len(token) >= 2 and token[0] == token[-1] and token[0] in "\"'":
        return _ESCAPE_RE.sub(lambda m: _ESCAPES.get(m.group(1), m.group(1)), token[1:-1])
    return token
