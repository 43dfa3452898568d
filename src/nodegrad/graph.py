from __future__ import annotations

import logging
from pathlib import Path

from graphviz import Digraph

from nodegrad.engine import topological_order
from nodegrad.node import Node

logger = logging.getLogger(__name__)

_RECORD_SPECIALS = str.maketrans({c: "\\" + c for c in "{}<>|"})


def collect_nodes_and_edges(root: Node) -> tuple[list[Node], list[tuple[Node, Node]]]:
    """
    Traverses the computational graph starting from the root node.

    Args:
        root: The root node of the computational graph.

    Returns:
        A tuple containing:
        - nodes: Every reachable node, operands before their consumers.
        - edges: (operand, consumer) pairs, one per operand slot. ``x + x``
          yields two edges from ``x``.
    """
    nodes = topological_order(root)
    edges = [(operand, node) for node in nodes for operand in node.operands]
    return nodes, edges


def draw_graph(root: Node, rankdir: str = "LR") -> Digraph:
    """
    Visualizes the computational graph using Graphviz.

    Each node becomes a record showing its label, value and gradient. Each
    non-leaf node also gets a small operator vertex: operands point into the
    operator, and the operator points into the result. Reading the graph
    never changes it.

    Args:
        root: The root node of the computational graph to visualize.
        rankdir: Graphviz layout direction.

    Returns:
        A Digraph object representing the computational graph.
    """
    graph = Digraph(format="svg", graph_attr={"rankdir": rankdir})

    nodes, edges = collect_nodes_and_edges(root)

    # Stable ids in traversal order rather than memory addresses.
    ids = {node: f"n{i}" for i, node in enumerate(nodes)}

    for node in nodes:
        node_id = ids[node]
        label = (node.label or "").translate(_RECORD_SPECIALS)
        graph.node(
            name=node_id,
            label=f"{label} | data {node.data:.4f} | grad {node.grad:.4f}",
            shape="record",
        )

        # If node has an operation, create an operation node and connect it.
        if node.op is not None:
            op_id = f"{node_id}_op"
            graph.node(name=op_id, label=node.op.symbol, shape="circle")
            graph.edge(op_id, node_id)

    for operand, consumer in edges:
        graph.edge(ids[operand], f"{ids[consumer]}_op")

    return graph


def save_dot(root: Node, filename: str | Path) -> Path:
    """
    Write the graph rooted at ``root`` to ``<filename>.dot``.

    Returns:
        Path of the written file.
    """
    path = Path(f"{filename}.dot")
    draw_graph(root).save(str(path))
    logger.info("graph saved to %s", path)
    logger.info("render it with: dot -Tpng %s -o %s.png", path, filename)
    return path
