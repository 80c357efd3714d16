"""
Shared fixtures for querybuilder tests.
"""

import pytest

from querybuilder.core import Group, Rule, check_node, traverse


class Recorder:
    """Observer that keeps every snapshot it is handed."""

    def __init__(self):
        self.snapshots = []

    def __call__(self, snapshot):
        self.snapshots.append(snapshot)

    @property
    def last(self):
        return self.snapshots[-1]

    def __len__(self):
        return len(self.snapshots)


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def nested_tree():
    """
    g-0 (OR)
      g-1 (AND)
        r-1
      r-0
    """
    return Group(
        id="g-0",
        combinator="OR",
        rules=[
            Group(id="g-1", rules=[Rule(id="r-1", field="name", operator="=", value="bob")]),
            Rule(id="r-0", field="twitter", operator=">", value="x"),
        ],
    )


def iter_plain(snapshot):
    """Walk a plain snapshot breadth-first."""
    queue = [snapshot]
    while queue:
        node = queue.pop(0)
        if "rules" in node:
            queue.extend(node["rules"])
        yield node


def assert_well_formed(snapshot):
    """Every node passes the shape check and every id is unique."""
    ids = []
    for node in iter_plain(snapshot):
        assert check_node(node).ok, node
        assert node["id"]
        ids.append(node["id"])
    assert "rules" in snapshot
    assert len(ids) == len(set(ids))


def ids_in_order(root):
    return [node.id for node in traverse(root)]


def find(root, node_id):
    """First node with ``node_id`` in traversal order, or None."""
    return next((node for node in traverse(root) if node.id == node_id), None)


def assert_unique_ids(root):
    ids = ids_in_order(root)
    assert len(ids) == len(set(ids))
