"""Shared fixtures for treedraw tests."""

import re

import pytest

from dataknobs_treedraw import Node

ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


def strip_ansi(text: str) -> str:
    return ANSI_RE.sub("", text)


def make_simple_tree() -> Node:
    # (root child1 child2 (child3 grandchild1))
    root = Node("root")
    root.new_child("child1")
    root.new_child("child2")
    root.new_child("child3").new_child("grandchild1")
    return root


def make_letter_tree() -> Node:
    # (a (b d (e h)) (c f (g i)))
    a = Node("a")
    b = a.new_child("b")
    c = a.new_child("c")
    b.new_child("d")
    b.new_child("e").new_child("h")
    c.new_child("f")
    c.new_child("g").new_child("i")
    return a


def assert_depths(node: Node, expected: int = 0) -> None:
    assert node.depth == expected, f"{node.label}: {node.depth} != {expected}"
    for child in node.children:
        assert_depths(child, expected + 1)


@pytest.fixture
def simple_tree() -> Node:
    return make_simple_tree()


@pytest.fixture
def letter_tree() -> Node:
    return make_letter_tree()
