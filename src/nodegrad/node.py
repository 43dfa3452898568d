from __future__ import annotations

from typing import Iterable, Union

from nodegrad.engine import run_backward
from nodegrad.ops import Add, Exp, Mul, Operation, Pow, Tanh

Operand = Union["Node", int, float]


class Node:
    """
    Represents a node in a computational graph for automatic differentiation.

    Each node stores a scalar value (data), an accumulated gradient, and,
    for anything other than a leaf, the operation that produced it. Every
    arithmetic call on a node returns a new node whose operation references
    the operands, so the graph is built as a side effect of ordinary
    arithmetic.

    Nodes compare and hash by identity. Two leaves holding the same value
    are still distinct vertices of the graph.
    """

    def __init__(
        self,
        data: float,
        label: str | None = None,
        op: Operation | None = None,
    ) -> None:
        """
        Initialize a Node in the computational graph.

        Args:
            data: The numerical value stored in this node.
            label: Human-readable label for visualization purposes.
            op: The operation that produced this node, or None for leaves
                (inputs, parameters and constants).
        """
        self.data = float(data)
        self.grad = 0.0
        self.op = op
        self.label = label

    @classmethod
    def apply(cls, op: Operation) -> Node:
        """Evaluate an operation and wrap the result in a new node."""
        return cls(op.forward(), label=op.describe(), op=op)

    @property
    def operands(self) -> tuple[Node, ...]:
        return self.op.operands if self.op is not None else ()

    @property
    def is_leaf(self) -> bool:
        return self.op is None

    def __repr__(self) -> str:
        return f"Node(data={self.data}, grad={self.grad}, label={self.label!r})"

    def __add__(self, other: Operand) -> Node:
        other = _as_node(other)
        if other is None:
            return NotImplemented
        return Node.apply(Add(self, other))

    def __mul__(self, other: Operand) -> Node:
        other = _as_node(other)
        if other is None:
            return NotImplemented
        return Node.apply(Mul(self, other))

    def __pow__(self, exponent: Operand) -> Node:
        exponent = _as_node(exponent)
        if exponent is None:
            return NotImplemented
        return Node.apply(Pow(self, exponent))

    def pow(self, exponent: Operand) -> Node:
        """Raise this node to ``exponent``; the exponent gets no gradient."""
        node = _as_node(exponent)
        if node is None:
            raise TypeError(
                f"unsupported exponent type: {type(exponent).__name__}"
            )
        return self**node

    def exp(self) -> Node:
        return Node.apply(Exp(self))

    def tanh(self) -> Node:
        return Node.apply(Tanh(self))

    # Derived operators, composed from the primitives above.

    def __neg__(self) -> Node:
        return self * -1.0

    def __sub__(self, other: Operand) -> Node:
        other = _as_node(other)
        if other is None:
            return NotImplemented
        return self + (-other)

    def __truediv__(self, other: Operand) -> Node:
        other = _as_node(other)
        if other is None:
            return NotImplemented
        return self * other**-1.0

    def __radd__(self, other: Operand) -> Node:
        other = _as_node(other)
        if other is None:
            return NotImplemented
        return other + self

    def __rmul__(self, other: Operand) -> Node:
        other = _as_node(other)
        if other is None:
            return NotImplemented
        return other * self

    def __rsub__(self, other: Operand) -> Node:
        other = _as_node(other)
        if other is None:
            return NotImplemented
        return other - self

    def __rtruediv__(self, other: Operand) -> Node:
        other = _as_node(other)
        if other is None:
            return NotImplemented
        return other / self

    def backward(self) -> None:
        """
        Populate gradients of every node this one depends on.

        See ``nodegrad.engine.run_backward``.
        """
        run_backward(self)


def _as_node(value: object) -> Node | None:
    """Promote a Python number to a constant leaf; None if unsupported."""
    if isinstance(value, Node):
        return value
    # bool is an int subclass but never a sensible operand.
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return Node(value, label=f"{value:g}")
    return None


def sum_nodes(nodes: Iterable[Operand]) -> Node:
    """
    Sum nodes as a left fold over addition starting from a zero leaf.

    Args:
        nodes: Nodes (or plain numbers) to add up.

    Returns:
        A node equal to the sum; the zero leaf alone for an empty input.
    """
    total = Node(0.0, label="0")
    for node in nodes:
        total = total + node
    return total
