from nodegrad import Node
from nodegrad.__main__ import build_neuron
from nodegrad.graph import collect_nodes_and_edges, draw_graph, save_dot


def test_collect_nodes_and_edges_of_neuron():
    o, leaves = build_neuron()
    nodes, edges = collect_nodes_and_edges(o)

    assert len(nodes) == 10
    assert set(leaves.values()) <= set(nodes)
    # Four binary operations and one tanh.
    assert len(edges) == 9
    for operand, consumer in edges:
        assert operand in consumer.operands


def test_shared_operand_gets_an_edge_per_slot():
    x = Node(3.0, "x")
    nodes, edges = collect_nodes_and_edges(x + x)
    assert len(nodes) == 2
    assert edges == [(x, nodes[-1]), (x, nodes[-1])]


def test_draw_graph_mirrors_structure():
    o, _ = build_neuron()
    source = draw_graph(o).source

    assert source.startswith("digraph")
    assert "rankdir=LR" in source
    # One operator vertex per non-leaf node.
    assert source.count("_op [") == 5
    # Operator -> result edges plus operand -> operator edges.
    assert source.count("->") == 5 + 9
    assert "tanh" in source
    assert "data 2.0000" in source


def test_draw_graph_is_read_only():
    o, leaves = build_neuron()
    o.backward()
    before = [(n.data, n.grad) for n in leaves.values()]
    draw_graph(o)
    assert [(n.data, n.grad) for n in leaves.values()] == before


def test_record_specials_are_escaped():
    x = Node(1.0, "a|b")
    assert "a\\|b" in draw_graph(x.tanh()).source


def test_save_dot(tmp_path):
    o, _ = build_neuron()
    path = save_dot(o, tmp_path / "neuron")
    assert path == tmp_path / "neuron.dot"
    assert path.read_text().startswith("digraph")


def test_neuron_intermediate_labels():
    o, _ = build_neuron()
    nodes, _ = collect_nodes_and_edges(o)
    labels = [n.label for n in nodes if not n.is_leaf]
    assert labels == ["x1*w1", "x2*w2", "x1*w1+x2*w2", "n", "o"]
