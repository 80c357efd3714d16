"""
Query builder model and its change notification protocol.

The builder owns the live tree. Callers only get a frozen handle with the
three editing operations; every call runs the operation and then hands a
deep, independent snapshot of the whole tree to the ``on_change`` callback.
"""

from __future__ import annotations

import logging
from copy import deepcopy
from dataclasses import dataclass
from typing import Any, Callable

from querybuilder.core import (
    Combinator,
    IdentityAllocator,
    MutationEngine,
    MutationResult,
    NodeKind,
    normalize,
)

logger = logging.getLogger(__name__)

Snapshot = dict[str, Any]
ChangeCallback = Callable[[Snapshot], None]


@dataclass
class BuilderConfig:
    """Configuration for a query builder."""

    # Id allocation
    group_mark: str = "g"
    rule_mark: str = "r"
    initial_id_value: int = 0

    # Combinator for new and fallback groups
    default_combinator: str = Combinator.AND.value

    def __post_init__(self):
        IdentityAllocator.check_settings(self.group_mark, self.rule_mark, self.initial_id_value)


class QueryBuilder:
    """
    Owns a query tree, its id allocator and its observer.

    Not reentrant: an ``on_change`` callback that edits the same builder
    runs its edit before the outer call returns.
    """

    def __init__(
        self,
        initial_tree: Any,
        on_change: ChangeCallback,
        config: BuilderConfig | None = None,
    ):
        """
        Args:
            initial_tree: Plain group/rule structure to start from, or None
            on_change: Called with a snapshot after construction and every edit
            config: Builder configuration
        """
        self.config = config or BuilderConfig()
        self.on_change = on_change
        self._allocator = IdentityAllocator(
            group_mark=self.config.group_mark,
            rule_mark=self.config.rule_mark,
            initial_value=self.config.initial_id_value,
        )

        self._tree = normalize(initial_tree, self._allocator, self.config.default_combinator)
        self._engine = MutationEngine(
            self._tree,
            self._allocator,
            default_combinator=self.config.default_combinator,
        )
        self._notify()

    def snapshot(self) -> Snapshot:
        """Deep plain copy of the live tree."""
        return deepcopy(self._tree.to_plain())

    def add_child(self, parent_id: str, kind: NodeKind | str) -> None:
        self._apply(self._engine.add_child(parent_id, kind))

    def modify_field(self, node_id: str, field: str, value: str) -> None:
        self._apply(self._engine.modify_field(node_id, field, value))

    def remove_child(self, node_id: str) -> None:
        self._apply(self._engine.remove_child(node_id))

    def handle(self) -> QueryBuilderHandle:
        """The restricted interface handed to the presentation layer."""
        return QueryBuilderHandle(
            add_child=lambda parent_id, kind: self.add_child(parent_id, kind),
            modify_field=lambda node_id, field, value: self.modify_field(node_id, field, value),
            remove_child=lambda node_id: self.remove_child(node_id),
        )

    def _apply(self, result: MutationResult):
        if result.changed:
            logger.debug(f"{result.op.value} {result.target_id}: {result.node_id}")
        self._notify()

    def _notify(self):
        self.on_change(self.snapshot())


@dataclass(frozen=True)
class QueryBuilderHandle:
    """
    Editing interface of a query builder.

    Frozen: its operations cannot be reassigned and it gives no access to
    the live tree.
    """
    add_child: Callable[[str, str], None]
    modify_field: Callable[[str, str, str], None]
    remove_child: Callable[[str], None]

    def __repr__(self) -> str:
        return "QueryBuilderHandle(add_child, modify_field, remove_child)"


def create_query_builder(
    initial_tree: Any = None,
    on_change: ChangeCallback | None = None,
    config: BuilderConfig | None = None,
) -> QueryBuilderHandle:
    """
    Build a query builder and return its editing handle.

    The initial tree is normalized (malformed input falls back to an empty
    root group) and ``on_change`` receives the first snapshot before this
    function returns.

    Args:
        initial_tree: Plain group/rule structure, or None for an empty tree
        on_change: Observer receiving a fresh snapshot after every call
        config: Builder configuration

    Returns:
        Frozen handle with ``add_child``, ``modify_field`` and ``remove_child``
    """
    if on_change is None:
        raise TypeError("create_query_builder() requires an on_change callback")
    return QueryBuilder(initial_tree, on_change, config).handle()
