"""Shortcut normalization."""

from __future__ import annotations

from typing import Iterable

from gdindex.models import Node


def resolve_shortcut(node: Node) -> Node:
    """
    Return the node as callers should see it.

    A raw shortcut is replaced by its target's id and mime type; any other
    node (or a shortcut whose target is unknown) is returned unchanged.
    """
    if node.is_raw_shortcut and node.shortcut_target is not None:
        return node.with_target_identity()
    return node


def resolve_shortcuts(nodes: Iterable[Node]) -> list[Node]:
    return [resolve_shortcut(n) for n in nodes]
