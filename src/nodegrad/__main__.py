from __future__ import annotations

import argparse
import logging
import random
from typing import Sequence

from nodegrad.graph import draw_graph, save_dot
from nodegrad.nn import MLP
from nodegrad.node import Node
from nodegrad.train import TOY_INPUTS, TOY_TARGETS, TrainConfig, plot_losses, train

NEURON_LEAVES: dict[str, float] = {
    "x1": 2.0,
    "x2": 0.0,
    "w1": -3.0,
    "w2": 1.0,
    # Pre-activation comes out at atanh(1/sqrt(2)), so the output is ~0.7071.
    "b": 6.8813735870195432,
}


def build_neuron() -> tuple[Node, dict[str, Node]]:
    """
    Build ``tanh(x1*w1 + x2*w2 + b)`` for the classic two-input example.

    Returns:
        The output node and the leaves by name.
    """
    leaves = {
        name: Node(value, label=name)
        for name, value in NEURON_LEAVES.items()
    }
    x1, x2, w1, w2, b = (leaves[name] for name in NEURON_LEAVES)

    # Intermediate nodes keep their derived labels, e.g. "x1*w1+x2*w2".
    n = x1 * w1 + x2 * w2 + b
    n.label = "n"
    o = n.tanh()
    o.label = "o"

    return o, leaves


def run_neuron(args: argparse.Namespace) -> None:
    o, leaves = build_neuron()
    print(o)

    o.backward()

    for name, leaf in leaves.items():
        print(f"{name}: data={leaf.data:.4f} grad={leaf.grad:.4f}")

    if args.dot:
        save_dot(o, args.dot)
    if args.render:
        draw_graph(o).render(args.render, cleanup=True)


def run_train(args: argparse.Namespace) -> None:
    config = TrainConfig(
        steps=args.steps, learning_rate=args.lr, seed=args.seed
    )
    model = MLP(
        len(TOY_INPUTS[0]), config.layer_sizes, rng=random.Random(config.seed)
    )
    print(model)

    losses = train(model, TOY_INPUTS, TOY_TARGETS, config)
    if losses:
        print(f"final loss: {losses[-1]:.6f}")

    for x, y in zip(TOY_INPUTS, TOY_TARGETS):
        print(f"{x} -> {model(x).data:+.4f} (target {y:+.1f})")

    if args.plot:
        plot_losses(losses, args.plot)


def build_parser() -> argparse.ArgumentParser:
    defaults = TrainConfig()
    parser = argparse.ArgumentParser(
        prog="nodegrad", description="Scalar reverse-mode autodiff demos."
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log at DEBUG level."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    neuron = subparsers.add_parser(
        "neuron", help="Backpropagate through the two-input tanh neuron."
    )
    neuron.add_argument(
        "--dot", default=None, help="Write the graph to <DOT>.dot."
    )
    neuron.add_argument(
        "--render",
        default=None,
        help="Render the graph to <RENDER>.svg (needs the Graphviz binaries).",
    )
    neuron.set_defaults(func=run_neuron)

    train_cmd = subparsers.add_parser(
        "train", help="Train a small MLP on the four-sample toy dataset."
    )
    train_cmd.add_argument("--steps", type=int, default=defaults.steps)
    train_cmd.add_argument("--lr", type=float, default=defaults.learning_rate)
    train_cmd.add_argument("--seed", type=int, default=defaults.seed)
    train_cmd.add_argument(
        "--plot", default=None, help="Save the loss curve to this image file."
    )
    train_cmd.set_defaults(func=run_train)

    return parser


def main(argv: Sequence[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    args.func(args)


if __name__ == "__main__":
    main()
