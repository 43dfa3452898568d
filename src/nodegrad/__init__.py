from nodegrad.engine import collect_nodes, run_backward, topological_order, zero_grad
from nodegrad.node import Node, sum_nodes
from nodegrad.ops import OPERATIONS, Add, Exp, Mul, Operation, Pow, Tanh

__all__ = [
    "Node",
    "sum_nodes",
    "run_backward",
    "topological_order",
    "collect_nodes",
    "zero_grad",
    "Operation",
    "OPERATIONS",
    "Add",
    "Mul",
    "Pow",
    "Exp",
    "Tanh",
]
