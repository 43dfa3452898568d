"""
Reverse-mode backward pass over a graph of nodes.

The graph is acyclic by construction: an operation can only reference nodes
that already exist. No cycle check is made here.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from nodegrad.node import Node

logger = logging.getLogger(__name__)


def topological_order(root: Node) -> list[Node]:
    """
    Performs a topological sort of the computational graph using depth-first search.

    Traverses the graph starting from ``root`` and builds a post-order where
    each node appears after all of its operands. A node reachable through
    several paths is emitted exactly once. Operands are visited in
    declaration order, so the result is deterministic.

    The walk uses an explicit stack instead of recursion, so deep graphs do
    not hit the interpreter's recursion limit.

    Args:
        root: The node to start from.

    Returns:
        A list of nodes, operands before the nodes that consume them. Reversed,
        it lists every node before any of its operands.
    """
    topo_ordering: list[Node] = []

    # Keyed by identity: Node does not override __eq__/__hash__.
    visited: set[Node] = set()

    # (node, expanded) pairs. A node is emitted when it is popped the second
    # time, after everything pushed for its operands has been emitted.
    stack: list[tuple[Node, bool]] = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        if expanded:
            topo_ordering.append(node)
            continue
        if node in visited:
            continue
        visited.add(node)
        stack.append((node, True))
        for operand in reversed(node.operands):
            if operand not in visited:
                stack.append((operand, False))

    return topo_ordering


def collect_nodes(root: Node) -> list[Node]:
    """Every node reachable from ``root``, in topological order."""
    return topological_order(root)


def zero_grad(root: Node) -> None:
    """
    Reset the gradient of every node reachable from ``root`` to zero.

    The backward pass only ever accumulates, so this is the way to clear
    residue before running it again over the same graph.
    """
    for node in collect_nodes(root):
        node.grad = 0.0


def run_backward(root: Node) -> None:
    """
    Performs backward propagation from ``root``.

    1. Get a topological ordering of all nodes (operands before consumers).
    2. Seed ``root.grad`` with 1.0 (d(root)/d(root) = 1).
    3. Traverse the ordering in reverse and apply each node's local backward
       rule, accumulating into its operands.

    Because of the ordering, a node has received the contributions of all its
    consumers before it propagates to its own operands. Leaves have nothing
    to propagate and keep whatever was accumulated into them.

    Existing gradients are not cleared; see ``zero_grad``.
    """
    topo_order = topological_order(root)
    logger.debug(
        "backward from %r over %d nodes", root.label, len(topo_order)
    )

    root.grad = 1.0

    for node in reversed(topo_order):
        if node.op is not None:
            node.op.backward(node)
