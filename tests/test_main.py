"""Tests for the command-line entry point."""

from colony.main import dispatch_defaults, main

COLONY = (
    "colon(A).colon(B).ressource(R1).ressource(R2).\n"
    "deteste(A,B).\npreferences(A,R1,R2).preferences(B,R1,R2).\n"
)


def test_solve_file_and_write_output(tmp_path, capsys):
    source = tmp_path / "colony.txt"
    source.write_text(COLONY, encoding="utf-8")
    out = tmp_path / "out.txt"

    code = main([str(source), "--strategy", "max-lef", "--param", "3", "--seed", "1", "--output", str(out)])
    assert code == 0
    assert "There are 1 jealous settlers" in capsys.readouterr().out
    lines = out.read_text(encoding="utf-8").splitlines()
    assert sorted(line.split(":")[0] for line in lines) == ["A", "B"]


def test_invalid_colony_file_is_reported(tmp_path, capsys):
    source = tmp_path / "colony.txt"
    source.write_text("ressource(R1).", encoding="utf-8")
    assert main([str(source), "--strategy", "linear"]) == 1
    assert "Settlers should be defined first" in capsys.readouterr().err


def test_missing_file_and_size(tmp_path, capsys):
    assert main([str(tmp_path / "nope.txt")]) == 2
    assert main(["--size", "40"]) == 2


def test_experiment_mode(tmp_path, capsys):
    config = tmp_path / "config.yaml"
    config.write_text(
        "experiment:\n"
        "  num_settlers: 5\n  density: 2\n  num_colonies: 2\n"
        "  max_lef_instances: 2\n  switch_trials: 2\n  render_plots: false\n"
        f"  log_dir: {tmp_path / 'logs'}\n  plot_dir: {tmp_path / 'plots'}\n",
        encoding="utf-8",
    )
    assert main(["--experiment", "--config", str(config), "--seed", "3"]) == 0
    assert "max-lef" in capsys.readouterr().out


def test_dispatch_defaults():
    assert dispatch_defaults({}, 7) == {"max-lef": 7, "switch": 7}
    assert dispatch_defaults({"dispatch": {"max_lef_instances": 30}}, 7) == {"max-lef": 30, "switch": 7}


def test_invalid_strategy_parameter_is_reported(tmp_path, capsys):
    source = tmp_path / "colony.txt"
    source.write_text(COLONY, encoding="utf-8")
    assert main([str(source), "--strategy", "max-lef", "--param", "0"]) == 1
    assert "at least one instance" in capsys.readouterr().err
    assert main([str(source), "--strategy", "switch", "--param", "-2"]) == 1
    assert "non-negative" in capsys.readouterr().err


def test_output_errors_are_reported(tmp_path, capsys):
    source = tmp_path / "colony.txt"
    source.write_text(COLONY, encoding="utf-8")
    assert main([str(source), "--strategy", "linear", "--output", str(source)]) == 1
    assert "Refusing to overwrite" in capsys.readouterr().err
    assert source.read_text(encoding="utf-8") == COLONY

    missing_dir = tmp_path / "missing" / "out.txt"
    assert main([str(source), "--strategy", "linear", "--output", str(missing_dir)]) == 1
    assert not missing_dir.exists()
