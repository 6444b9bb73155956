#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbslate/marks.py
"""Distribution of pending marks onto text leaves."""

from __future__ import annotations

from dataclasses import replace
from typing import Union

from bbslate.nodes import Container, Mark, Node, PendingMark, Text


def apply_mark(pending: PendingMark) -> list[Node]:
    """Resolve a pending mark into the nodes it wraps.

    Every text leaf inside the mark's scope gets the mark appended to its
    ``marks``. Nested pending marks resolve first, so a leaf inside
    ``italic(bold("x"))`` ends up with ``[bold, italic]``. Containers are
    copied with the mark applied to their children; the input is not
    modified.

    Parameters
    ----------
    pending : PendingMark
        Mark returned by a deserialize rule

    Returns
    -------
    list of Node
        Decorated nodes, with nested expansions spliced flat

    """
    mark = pending.to_mark()
    result: list[Node] = []
    for child in pending.nodes:
        result.extend(_decorate(child, mark))
    return result


def _decorate(node: Union[Node, PendingMark], mark: Mark) -> list[Node]:
    if isinstance(node, PendingMark):
        decorated: list[Node] = []
        for resolved in apply_mark(node):
            decorated.extend(_decorate(resolved, mark))
        return decorated

    if isinstance(node, Text):
        return [replace(node, marks=[*node.marks, Mark(type=mark.type, data=dict(mark.data or {}))])]

    if isinstance(node, Container):
        children: list[Node] = []
        for child in node.nodes:
            children.extend(_decorate(child, mark))
        return [replace(node, nodes=children)]

    return [node]
