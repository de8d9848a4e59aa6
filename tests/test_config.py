"""Tests for SimulationConfig validation and derived properties."""

from pathlib import Path

import numpy as np
import pytest
import torch

from cppm import SimulationConfig


def test_defaults(capsys) -> None:
    config = SimulationConfig()
    assert (config.radius, config.num_total, config.num_plus, config.num_minus) == (20.0, 643, 29, 37)
    assert config.bjerrum_length == 7.0
    assert config.steps == 10000
    assert config.num_neutral == 643 - 29 - 37
    assert config.output_file == Path("cppm.pqr")
    assert isinstance(config.output_dir, Path)
    assert config.torch_device == torch.device("cpu")
    assert not config.capture_frames
    assert config.surface_area == pytest.approx(4.0 * np.pi * 400.0)
    assert "No seed set" in capsys.readouterr().out


def test_seed_gives_reproducible_generator(capsys) -> None:
    first = SimulationConfig(seed=42)
    second = SimulationConfig(seed=42)
    assert first.rng.random(5).tolist() == second.rng.random(5).tolist()
    assert "Seed set to: 42" in capsys.readouterr().out


def test_paths_are_converted() -> None:
    config = SimulationConfig(output_file="out.xyz", output_dir="somewhere", frame_interval=5)
    assert config.output_file == Path("out.xyz")
    assert config.output_dir == Path("somewhere")
    assert config.capture_frames


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"num_total": 10, "num_plus": 6, "num_minus": 6}, "exceeds total"),
        ({"num_total": 0, "num_plus": 0, "num_minus": 0}, "at least 1"),
        ({"num_plus": -1}, "non-negative"),
        ({"radius": 0.0}, "radius"),
        ({"steps": -1}, "steps"),
        ({"angular_displacement": 0.0}, "angular_displacement"),
        ({"dipole_spring_constant": -1.0}, "dipole_spring_constant"),
        ({"frame_interval": -2}, "frame_interval"),
        ({"output_file": "cppm.pdb"}, "must end with"),
    ],
)
def test_invalid_configurations(overrides, message) -> None:
    with pytest.raises(ValueError, match=message):
        SimulationConfig(**overrides)


def test_repr_mentions_composition() -> None:
    text = repr(SimulationConfig(num_total=10, num_plus=2, num_minus=3, seed=1))
    assert "N=10" in text
    assert "0x5" in text
