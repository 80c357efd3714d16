"""
Text rendering of query tree snapshots.
"""

from __future__ import annotations

from typing import Any

from querybuilder.options import EditorOptions

INDENT = "  "
BLANK = "_"


def render_tree(snapshot: dict[str, Any], options: EditorOptions | None = None) -> str:
    """
    Render a snapshot as an indented outline, one node per line.

    Values outside the editor's option lists are marked with ``?``.
    """
    options = options or EditorOptions()
    lines = []
    _render_node(snapshot, 0, options, lines)
    return "\n".join(lines)


def _render_node(node: dict[str, Any], depth: int, options: EditorOptions, lines: list[str]):
    pad = INDENT * depth
    if "rules" in node:
        combinator = _show(node["combinator"], "combinator", options)
        lines.append(f"{pad}[{node['id']}] {combinator} ({len(node['rules'])})")
        for child in node["rules"]:
            _render_node(child, depth + 1, options, lines)
    else:
        field = _show(node["field"], "field", options)
        operator = _show(node["operator"], "operator", options)
        lines.append(f"{pad}[{node['id']}] {field} {operator} {node['value']!r}")


def _show(value: str, field: str, options: EditorOptions) -> str:
    if value == "":
        return BLANK
    if not options.is_suggested(field, value):
        return f"{value}?"
    return value
