"""Build a navigable tree from a run's flat timeline records.

The timeline API returns Stage, Job and Task records as a flat list where
each record names its parent by id. Referential integrity is not
guaranteed, so building never fails: a record whose parent is missing (or
unknown) becomes a root, and records caught in a parent cycle are promoted
to roots instead of being dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator

from .models import TimelineRecord

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class TreeNode:
    """A timeline record and its children, sorted by record order."""

    record: TimelineRecord
    children: list["TreeNode"] = field(default_factory=list)

    def has_children(self) -> bool:
        return bool(self.children)

    def walk(self) -> Iterator["TreeNode"]:
        """Yield this node and all descendants in pre-order."""
        for row in flatten([self]):
            yield row.node


@dataclass(frozen=True)
class FlatRow:
    """One display row: a node and its depth below the roots (roots are 0)."""

    node: TreeNode
    depth: int

    @property
    def record(self) -> TimelineRecord:
        return self.node.record


def _by_order(nodes: list[TreeNode]) -> list[TreeNode]:
    # sorted() is stable, so equal orders keep server order
    return sorted(nodes, key=lambda n: n.record.order)


def build_timeline_tree(records: Iterable[TimelineRecord]) -> list[TreeNode]:
    """Reconstruct the ordered multi-root tree for a run's timeline.

    Every input record yields exactly one node; none is duplicated or
    dropped. Roots and every child list are sorted ascending by ``order``.

    Args:
        records: Flat, parent-referenced timeline records.

    Returns:
        The root nodes, sorted by order. Empty for empty input.
    """
    nodes = [TreeNode(record=r) for r in records]
    if not nodes:
        return []

    # First occurrence of an id owns that id's children
    owner: dict[str, TreeNode] = {}
    for node in nodes:
        owner.setdefault(node.record.id, node)

    groups: dict[str, list[TreeNode]] = {}
    roots: list[TreeNode] = []
    for node in nodes:
        parent_id = node.record.parent_id
        if parent_id is None:
            roots.append(node)
        elif parent_id not in owner:
            logger.debug(
                "Timeline record %s (%s) references unknown parent %s; treating as root",
                node.record.id,
                node.record.name,
                parent_id,
            )
            roots.append(node)
        else:
            groups.setdefault(parent_id, []).append(node)

    for parent_id, children in groups.items():
        groups[parent_id] = _by_order(children)

    attached: set[int] = set()

    def attach(root: TreeNode) -> None:
        attached.add(id(root))
        stack = [root]
        while stack:
            node = stack.pop()
            if owner.get(node.record.id) is not node:
                continue
            for child in groups.get(node.record.id, []):
                if id(child) in attached:
                    continue
                attached.add(id(child))
                node.children.append(child)
                stack.append(child)

    for root in roots:
        attach(root)

    # Anything left is only reachable through a parent cycle
    for node in nodes:
        if id(node) not in attached:
            logger.warning(
                "Timeline record %s (%s) is part of a parent cycle; treating as root",
                node.record.id,
                node.record.name,
            )
            roots.append(node)
            attach(node)

    return _by_order(roots)


def flatten(roots: Iterable[TreeNode]) -> list[FlatRow]:
    """Flatten a tree into pre-order rows.

    Each node is followed by its whole subtree before any of its siblings.
    Pure: the tree is not modified and repeated calls give equal results.
    """
    rows: list[FlatRow] = []
    stack = [(node, 0) for node in reversed(list(roots))]
    while stack:
        node, depth = stack.pop()
        rows.append(FlatRow(node=node, depth=depth))
        for child in reversed(node.children):
            stack.append((child, depth + 1))
    return rows
