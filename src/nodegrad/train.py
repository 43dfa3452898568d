from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

import matplotlib.pyplot as plt

from nodegrad.nn import Module
from nodegrad.node import Node, Operand, sum_nodes

logger = logging.getLogger(__name__)

# Four samples, three features each, with +/-1 targets.
TOY_INPUTS: list[list[float]] = [
    [2.0, 3.0, -1.0],
    [3.0, -1.0, 0.5],
    [0.5, 1.0, 1.0],
    [1.0, 1.0, -1.0],
]
TOY_TARGETS: list[float] = [1.0, -1.0, -1.0, 1.0]


@dataclass(frozen=True)
class TrainConfig:
    steps: int = 100
    learning_rate: float = 0.05
    seed: int = 1337
    log_interval: int = 10

    # Hidden and output widths of the MLP trained by the command line.
    layer_sizes: tuple[int, ...] = (4, 4, 1)


def mse_loss(predictions: Sequence[Node], targets: Sequence[Operand]) -> Node:
    """
    Sum of squared errors between predictions and targets.

    Args:
        predictions: Model outputs, one node per sample.
        targets: Expected values, nodes or plain numbers.

    Returns:
        Scalar loss node.
    """
    if len(predictions) != len(targets):
        raise ValueError(
            f"got {len(predictions)} predictions for {len(targets)} targets"
        )
    return sum_nodes(
        (pred - target) ** 2 for pred, target in zip(predictions, targets)
    )


def sgd_step(parameters: Sequence[Node], learning_rate: float) -> None:
    """Nudge every parameter against its gradient."""
    for p in parameters:
        p.data += -learning_rate * p.grad


def train(
    model: Module,
    xs: Sequence[Sequence[Operand]],
    ys: Sequence[Operand],
    config: TrainConfig = TrainConfig(),
) -> list[float]:
    """
    Fit ``model`` to ``(xs, ys)`` with plain gradient descent.

    Each step runs a forward pass over every sample, computes the summed
    squared error, clears the previous gradients, backpropagates, and
    applies the update.

    Args:
        model: A single-output model, e.g. ``MLP(3, [4, 4, 1])``.
        xs: Input samples.
        ys: Target per sample.
        config: Number of steps, learning rate and logging cadence.

    Returns:
        Loss value at every step, measured before that step's update.
    """
    if len(xs) != len(ys):
        raise ValueError(f"got {len(xs)} samples for {len(ys)} targets")
    if config.log_interval <= 0:
        raise ValueError(
            f"log_interval must be positive, got {config.log_interval}"
        )

    losses: list[float] = []
    for step in range(config.steps):
        # Forward pass.
        predictions = [model(x) for x in xs]
        loss = mse_loss(predictions, ys)

        # Backward pass.
        model.zero_grad()
        loss.backward()

        # Update.
        sgd_step(model.parameters(), config.learning_rate)

        losses.append(loss.data)
        if step % config.log_interval == 0:
            logger.info("step %d: loss = %.6f", step, loss.data)

    if losses:
        logger.info("final loss after %d steps: %.6f", config.steps, losses[-1])
    return losses


def plot_losses(losses: Sequence[float], path: str | Path) -> Path:
    """
    Save the training loss curve as an image.

    Args:
        losses: Loss per step, as returned by ``train``.
        path: Output file; the format follows the extension.

    Returns:
        The path written.
    """
    path = Path(path)
    fig, ax = plt.subplots(figsize=(8, 5))
    ax.plot(range(len(losses)), losses)
    ax.set_xlabel("Step")
    ax.set_ylabel("Loss")
    ax.set_title("Training Loss")
    fig.savefig(path)
    plt.close(fig)
    logger.info("loss curve saved to %s", path)
    return path
