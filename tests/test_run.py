"""End-to-end tests of the simulation driver."""

import math
import sys

import pytest

import run
from cppm import DipoleConstraint, Nonbonded, SimulationConfig


def small_config(tmp_path, **overrides):
    settings = dict(
        radius=10.0,
        num_total=12,
        num_plus=3,
        num_minus=2,
        steps=200,
        angular_displacement=0.1,
        seed=7,
        output_file=tmp_path / "cppm.pqr",
        output_dir=tmp_path / "outputs",
    )
    settings.update(overrides)
    return SimulationConfig(**settings)


def test_build_hamiltonian(tmp_path) -> None:
    plain = run.build_hamiltonian(small_config(tmp_path))
    assert [type(term) for term in plain] == [Nonbonded]

    restrained = run.build_hamiltonian(small_config(tmp_path, dipole_spring_constant=0.5))
    assert [type(term) for term in restrained] == [Nonbonded, DipoleConstraint]


def test_run_simulation_writes_coordinates(tmp_path, capsys) -> None:
    config = small_config(tmp_path)
    result = run.run_simulation(config)

    assert len(result.particles) == 12
    charges = [p.charge for p in result.particles]
    assert (charges.count(1.0), charges.count(-1.0)) == (3, 2)
    for particle in result.particles:
        assert math.sqrt(sum(x * x for x in particle.position)) == pytest.approx(10.0)

    assert result.moments.number_of_samples == 200
    assert sum(move.attempted for move in result.propagator.moves) == 200

    lines = config.output_file.read_text().splitlines()
    assert lines[0] == "12"
    assert len(lines) == 14

    out = capsys.readouterr().out
    assert "acceptance ratio" in out
    assert "CPPM properties" in out
    assert not config.output_dir.exists()


def test_same_seed_same_result(tmp_path) -> None:
    first = run.run_simulation(small_config(tmp_path, steps=50), write_output=False)
    second = run.run_simulation(small_config(tmp_path, steps=50), write_output=False)
    assert [p.position.tolist() for p in first.particles] == [p.position.tolist() for p in second.particles]
    assert [p.charge for p in first.particles] == [p.charge for p in second.particles]


def test_zero_steps(tmp_path) -> None:
    result = run.run_simulation(small_config(tmp_path, steps=0))
    assert result.moments.number_of_samples == 0
    assert (tmp_path / "cppm.pqr").exists()


def test_frames_produce_animation(tmp_path) -> None:
    config = small_config(tmp_path, steps=20, frame_interval=10)
    result = run.run_simulation(config)

    assert result.energy_steps == [10, 20]
    assert len(result.energies) == 2
    assert (config.output_dir / "cppm_N12_20steps.gif").exists()
    assert (config.output_dir / "cppm_energy.png").exists()


def test_config_from_args() -> None:
    args = run.parse_args([
        "-o", "cli.xyz", "-r", "8", "-N", "6", "-p", "1", "-m", "1",
        "-s", "30", "--seed", "3", "--dipole-k", "0.1",
    ])
    config = run.config_from_args(args)
    assert (config.radius, config.num_total, config.num_plus, config.num_minus) == (8.0, 6, 1, 1)
    assert config.steps == 30
    assert config.seed == 3
    assert len(run.build_hamiltonian(config)) == 2


def test_main_exits_successfully(tmp_path) -> None:
    output = tmp_path / "cli.xyz"
    argv = ["-o", str(output), "-r", "8", "-N", "4", "-p", "1", "-m", "1", "-s", "5", "--seed", "1"]

    # console scripts wrap the entry point in sys.exit()
    with pytest.raises(SystemExit) as excinfo:
        sys.exit(run.main(argv))
    assert excinfo.value.code in (None, 0)
    assert output.read_text().splitlines()[0] == "4"


def test_timer_laps() -> None:
    timer = run.Timer()
    first = timer.lap()
    second = timer.lap()
    assert first >= 0.0
    assert second >= 0.0
    assert timer.total >= first + second


def test_progress_line_reports_interval_time(tmp_path, capsys) -> None:
    run.run_simulation(small_config(tmp_path, steps=run.PROGRESS_INTERVAL), write_output=False)
    assert f"Last {run.PROGRESS_INTERVAL}:" in capsys.readouterr().out


def test_main_rejects_bad_counts(tmp_path) -> None:
    with pytest.raises(SystemExit, match="exceeds total"):
        run.main(["-o", str(tmp_path / "x.pqr"), "-N", "4", "-p", "3", "-m", "3"])


def test_main_requires_output_file() -> None:
    with pytest.raises(SystemExit) as excinfo:
        run.main([])
    assert excinfo.value.code == 2
