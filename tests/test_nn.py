import math
import random

import pytest

from nodegrad import Node
from nodegrad.nn import MLP, Layer, Neuron


def test_neuron_parameters_are_uniform_leaves():
    n = Neuron(3, rng=random.Random(0))
    params = n.parameters()
    assert len(params) == 4
    assert params[-1] is n.b
    for p in params:
        assert p.is_leaf
        assert -1.0 <= p.data < 1.0
    assert [p.label for p in params] == ["w0", "w1", "w2", "b"]


def test_neuron_forward_matches_closed_form():
    n = Neuron(2, rng=random.Random(1))
    x = [0.5, -2.0]
    expected = math.tanh(n.b.data + sum(w.data * xi for w, xi in zip(n.w, x)))
    assert n(x).data == pytest.approx(expected)

    linear = Neuron(2, nonlin=False, rng=random.Random(1))
    out = linear(x)
    assert out.data == pytest.approx(
        linear.b.data + sum(w.data * xi for w, xi in zip(linear.w, x))
    )


def test_neuron_rejects_wrong_width():
    with pytest.raises(ValueError):
        Neuron(3)([1.0, 2.0])


def test_neuron_backward_reaches_parameters_and_inputs():
    n = Neuron(2, rng=random.Random(2))
    x = [Node(1.0, "x0"), Node(-1.0, "x1")]
    out = n(x)
    out.backward()
    dact = 1 - out.data**2
    assert n.b.grad == pytest.approx(dact)
    for w, xi in zip(n.w, x):
        assert w.grad == pytest.approx(xi.data * dact)
        assert xi.grad == pytest.approx(w.data * dact)


def test_layer_outputs():
    layer = Layer(3, 4, rng=random.Random(0))
    out = layer([1.0, 2.0, 3.0])
    assert isinstance(out, list)
    assert len(out) == 4
    assert len(layer.parameters()) == 4 * 4

    single = Layer(3, 1, rng=random.Random(0))
    assert isinstance(single([1.0, 2.0, 3.0]), Node)


def test_mlp_shapes_and_parameter_count():
    model = MLP(3, [4, 4, 1], rng=random.Random(0))
    assert len(model.parameters()) == 4 * 4 + 4 * 5 + 1 * 5
    out = model([2.0, 3.0, -1.0])
    assert isinstance(out, Node)
    assert -1.0 < out.data < 1.0


def test_mlp_through_single_neuron_hidden_layer():
    model = MLP(2, [1, 3], rng=random.Random(0))
    out = model([0.1, 0.2])
    assert isinstance(out, list)
    assert len(out) == 3


def test_mlp_is_reproducible_with_seeded_rng():
    a = MLP(3, [4, 1], rng=random.Random(42))
    b = MLP(3, [4, 1], rng=random.Random(42))
    assert [p.data for p in a.parameters()] == [p.data for p in b.parameters()]


def test_zero_grad_clears_parameters():
    model = MLP(2, [3, 1], rng=random.Random(0))
    model([1.0, -1.0]).backward()
    assert any(p.grad != 0.0 for p in model.parameters())
    model.zero_grad()
    assert all(p.grad == 0.0 for p in model.parameters())


def test_repr():
    model = MLP(2, [2, 1], rng=random.Random(0))
    assert repr(model) == (
        "MLP of [Layer of [TanhNeuron(2), TanhNeuron(2)], Layer of [TanhNeuron(2)]]"
    )
