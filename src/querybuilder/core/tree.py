"""
Tree traversal.

The walk is breadth-first from the root, so a "first match" found by
scanning it is the match closest to the root, leftmost within its level.
"""

from __future__ import annotations

from collections import deque
from typing import Iterator

from querybuilder.core.nodes import Group, Node


def traverse(root: Node) -> Iterator[Node]:
    """
    Walk every node of the tree breadth-first.

    A group's children are queued before the group itself is yielded, and
    each group's ``rules`` are read at the moment it is dequeued. Every
    call starts a fresh walk over the current state of the tree.
    """
    queue = deque([root])
    while queue:
        current = queue.popleft()
        if isinstance(current, Group):
            queue.extend(current.rules)
        yield current
