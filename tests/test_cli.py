import pytest

from nodegrad.__main__ import build_parser, main


def test_neuron_command_prints_gradients(capsys):
    main(["neuron"])
    out = capsys.readouterr().out
    assert "x1: data=2.0000 grad=-1.5000" in out
    assert "w1: data=-3.0000 grad=1.0000" in out
    assert "b: data=6.8814 grad=0.5000" in out


def test_neuron_command_writes_dot(tmp_path):
    main(["neuron", "--dot", str(tmp_path / "neuron")])
    assert (tmp_path / "neuron.dot").exists()


def test_train_command(tmp_path, capsys):
    plot = tmp_path / "loss.png"
    main(["train", "--steps", "5", "--lr", "0.05", "--plot", str(plot)])
    out = capsys.readouterr().out
    assert "final loss:" in out
    assert "target +1.0" in out
    assert plot.exists()


def test_command_is_required():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])
