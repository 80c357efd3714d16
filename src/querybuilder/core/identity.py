"""
Node identity allocation.

Ids look like ``g-0`` or ``r-3``: a per-kind mark and a per-kind counter.
Counters only ever move forward, so an id is never handed out twice by
the same allocator, even after the node carrying it is removed.
"""

from __future__ import annotations

from querybuilder.core.nodes import NodeKind


class IdentityAllocator:
    """
    Issues unique, monotonically increasing ids partitioned by node kind.

    Each tree model owns exactly one allocator.
    """

    def __init__(self, group_mark: str = "g", rule_mark: str = "r", initial_value: int = 0):
        """
        Args:
            group_mark: Prefix for group ids
            rule_mark: Prefix for rule ids
            initial_value: First counter value for both kinds
        """
        self.check_settings(group_mark, rule_mark, initial_value)
        self.group_mark = group_mark
        self.rule_mark = rule_mark
        self._counters = {
            NodeKind.GROUP: initial_value,
            NodeKind.RULE: initial_value,
        }

    @staticmethod
    def check_settings(group_mark: str, rule_mark: str, initial_value: int = 0):
        """Raise ValueError for settings that could issue the same id twice."""
        if group_mark == rule_mark:
            raise ValueError(f"Group and rule ids need different marks, both are {group_mark!r}")
        if initial_value < 0:
            raise ValueError(f"Id counters start at 0 or above, got {initial_value}")

    def allocate(self, kind: NodeKind | str) -> str:
        """Return the next id for ``kind`` and advance its counter."""
        kind = NodeKind(kind)
        mark = self.group_mark if kind is NodeKind.GROUP else self.rule_mark
        num = self._counters[kind]
        self._counters[kind] = num + 1
        return f"{mark}-{num}"

    def peek(self, kind: NodeKind | str) -> int:
        """Counter value the next ``allocate(kind)`` call will use."""
        return self._counters[NodeKind(kind)]
