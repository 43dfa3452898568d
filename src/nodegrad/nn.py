"""
Neurons, dense layers and multi-layer perceptrons built on nodes.

Every forward pass here is plain node arithmetic; nothing in this module
looks at how a node was produced.
"""

from __future__ import annotations

import random
from typing import Sequence

from nodegrad.node import Node, Operand, sum_nodes


class Module:
    """Base class for anything that owns trainable parameters."""

    def parameters(self) -> list[Node]:
        return []

    def zero_grad(self) -> None:
        """Reset every parameter gradient before the next backward pass."""
        for p in self.parameters():
            p.grad = 0.0


class Neuron(Module):
    """
    A single neuron: ``tanh(b + w0*x0 + w1*x1 + ...)``.

    Weights and bias are drawn uniformly from [-1, 1).
    """

    def __init__(
        self,
        nin: int,
        nonlin: bool = True,
        rng: random.Random | None = None,
    ) -> None:
        """
        Args:
            nin: Number of inputs.
            nonlin: Apply tanh to the weighted sum. If False, the neuron is linear.
            rng: Random source for initialization. Defaults to the ``random``
                module's global generator.
        """
        rng = rng or random
        self.nin = nin
        self.w = [Node(rng.uniform(-1.0, 1.0), label=f"w{i}") for i in range(nin)]
        self.b = Node(rng.uniform(-1.0, 1.0), label="b")
        self.nonlin = nonlin

    def __call__(self, x: Sequence[Operand]) -> Node:
        if len(x) != self.nin:
            raise ValueError(f"expected {self.nin} inputs, got {len(x)}")
        act = self.b + sum_nodes(wi * xi for wi, xi in zip(self.w, x))
        return act.tanh() if self.nonlin else act

    def parameters(self) -> list[Node]:
        return self.w + [self.b]

    def __repr__(self) -> str:
        return f"{'Tanh' if self.nonlin else 'Linear'}Neuron({self.nin})"


class Layer(Module):
    """A dense layer of ``nout`` neurons that all see the same ``nin`` inputs."""

    def __init__(self, nin: int, nout: int, **kwargs) -> None:
        self.nin = nin
        self.nout = nout
        self.neurons = [Neuron(nin, **kwargs) for _ in range(nout)]

    def __call__(self, x: Sequence[Operand]) -> Node | list[Node]:
        out = [n(x) for n in self.neurons]
        # A single-output layer yields a scalar rather than a one-element list.
        return out[0] if len(out) == 1 else out

    def parameters(self) -> list[Node]:
        return [p for n in self.neurons for p in n.parameters()]

    def __repr__(self) -> str:
        return f"Layer of [{', '.join(str(n) for n in self.neurons)}]"


class MLP(Module):
    """
    Multi-layer perceptron: ``MLP(3, [4, 4, 1])`` maps 3 inputs through two
    hidden layers of 4 neurons to a single output. Every layer uses tanh.
    """

    def __init__(
        self,
        nin: int,
        nouts: Sequence[int],
        rng: random.Random | None = None,
    ) -> None:
        sz = [nin] + list(nouts)
        self.layers = [
            Layer(sz[i], sz[i + 1], rng=rng) for i in range(len(nouts))
        ]

    def __call__(self, x: Sequence[Operand]) -> Node | list[Node]:
        for layer in self.layers:
            out = layer(x)
            x = [out] if isinstance(out, Node) else out
        return x[0] if len(x) == 1 else x

    def parameters(self) -> list[Node]:
        return [p for layer in self.layers for p in layer.parameters()]

    def __repr__(self) -> str:
        return f"MLP of [{', '.join(str(layer) for layer in self.layers)}]"
