"""
Differentiable primitive operations.

Each operation records the operand nodes that produced a result and knows
two things about itself: how to compute the forward value from its operands,
and how to distribute the result's gradient back onto those operands. The set
is closed: derived arithmetic is built by composing these five.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from math import tanh
from typing import TYPE_CHECKING, ClassVar

import numpy as np

if TYPE_CHECKING:
    from nodegrad.node import Node


def _exp(x: float) -> float:
    with np.errstate(all="ignore"):
        return float(np.exp(x))


def _pow(base: float, exponent: float) -> float:
    # math.pow raises on overflow and domain errors; numpy follows IEEE 754.
    with np.errstate(all="ignore"):
        return float(np.power(np.float64(base), np.float64(exponent)))


def _name(node: Node) -> str:
    return node.label or ""


class Operation(ABC):
    """
    Provenance of a non-leaf node.

    Subclasses hold references to their operand nodes. The same operand may
    be shared with any number of other operations.
    """

    symbol: ClassVar[str] = ""

    @property
    @abstractmethod
    def operands(self) -> tuple[Node, ...]:
        """Operand nodes in declaration order."""

    @abstractmethod
    def forward(self) -> float:
        """Compute the result value from the operand values."""

    @abstractmethod
    def backward(self, out: Node) -> None:
        """Accumulate ``out.grad`` into the operand gradients."""

    @abstractmethod
    def describe(self) -> str:
        """Display label for the result node."""


@dataclass(frozen=True, eq=False)
class Add(Operation):
    a: Node
    b: Node

    symbol: ClassVar[str] = "+"

    @property
    def operands(self) -> tuple[Node, ...]:
        return (self.a, self.b)

    def forward(self) -> float:
        return self.a.data + self.b.data

    def backward(self, out: Node) -> None:
        self.a.grad += 1.0 * out.grad
        self.b.grad += 1.0 * out.grad

    def describe(self) -> str:
        return f"{_name(self.a)}+{_name(self.b)}"


@dataclass(frozen=True, eq=False)
class Mul(Operation):
    a: Node
    b: Node

    symbol: ClassVar[str] = "*"

    @property
    def operands(self) -> tuple[Node, ...]:
        return (self.a, self.b)

    def forward(self) -> float:
        return self.a.data * self.b.data

    def backward(self, out: Node) -> None:
        # Product rule: d(ab)/da = b, d(ab)/db = a.
        self.a.grad += self.b.data * out.grad
        self.b.grad += self.a.data * out.grad

    def describe(self) -> str:
        return f"{_name(self.a)}*{_name(self.b)}"


@dataclass(frozen=True, eq=False)
class Pow(Operation):
    """
    ``base ** exponent``.

    The exponent is a node so that it shows up in the graph, but it is
    treated as a constant: no gradient ever flows into it.
    """

    base: Node
    exponent: Node

    symbol: ClassVar[str] = "pow"

    @property
    def operands(self) -> tuple[Node, ...]:
        return (self.base, self.exponent)

    def forward(self) -> float:
        return _pow(self.base.data, self.exponent.data)

    def backward(self, out: Node) -> None:
        k = self.exponent.data
        self.base.grad += k * _pow(self.base.data, k - 1.0) * out.grad

    def describe(self) -> str:
        return f"({_name(self.base)})^({self.exponent.data:g})"


@dataclass(frozen=True, eq=False)
class Exp(Operation):
    a: Node

    symbol: ClassVar[str] = "exp"

    @property
    def operands(self) -> tuple[Node, ...]:
        return (self.a,)

    def forward(self) -> float:
        return _exp(self.a.data)

    def backward(self, out: Node) -> None:
        # d(e^x)/dx = e^x, which is the result itself.
        self.a.grad += out.data * out.grad

    def describe(self) -> str:
        return f"exp({_name(self.a)})"


@dataclass(frozen=True, eq=False)
class Tanh(Operation):
    a: Node

    symbol: ClassVar[str] = "tanh"

    @property
    def operands(self) -> tuple[Node, ...]:
        return (self.a,)

    def forward(self) -> float:
        return tanh(self.a.data)

    def backward(self, out: Node) -> None:
        # d(tanh(x))/dx = 1 - tanh²(x)
        self.a.grad += (1.0 - tanh(self.a.data) ** 2) * out.grad

    def describe(self) -> str:
        return f"tanh({_name(self.a)})"


OPERATIONS: tuple[type[Operation], ...] = (Add, Mul, Pow, Exp, Tanh)
