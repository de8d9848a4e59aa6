"""Tests for the XYZ and PQR coordinate writers."""

import math

import pytest

from cppm import Particle, save_coordinates
from cppm.output import COMMENT, atom_name


@pytest.fixture
def three_particles():
    return [
        Particle(charge=1.0, radius=10.0, phi=0.0),
        Particle(charge=-1.0, radius=10.0, phi=math.pi),
        Particle(charge=0.0, radius=10.0, phi=math.pi / 2),
    ]


def test_atom_names(three_particles) -> None:
    assert [atom_name(p) for p in three_particles] == ["PP", "MP", "NP"]


def test_xyz_file(tmp_path, three_particles) -> None:
    path = save_coordinates(tmp_path / "out.xyz", three_particles)
    lines = path.read_text().splitlines()

    assert lines[0] == "3"
    assert lines[1] == COMMENT
    assert len(lines) == 5

    name, *coords = lines[2].split()
    assert name == "PP"
    assert [float(c) for c in coords] == pytest.approx([0.0, 0.0, 10.0], abs=1e-12)
    assert lines[3].split()[0] == "MP"
    assert float(lines[3].split()[3]) == pytest.approx(-10.0)
    assert lines[4].split()[0] == "NP"


def test_pqr_file(tmp_path, three_particles) -> None:
    path = save_coordinates(tmp_path / "out.pqr", three_particles)
    lines = path.read_text().splitlines()

    assert lines[0] == "3"
    assert lines[1] == COMMENT
    records = lines[2:]
    assert len(records) == 3
    assert all(record.startswith("ATOM  ") for record in records)

    first = records[0]
    assert first[6:11] == "    1"
    assert first[12:16] == " PP "
    fields = first.split()
    assert fields[-5:] == ["0.000", "0.000", "10.000", "1.00", "2.00"]
    assert records[1].split()[-2] == "-1.00"
    assert records[2].split()[-2] == "0.00"
    # fixed width: coordinates, charge and radius end at the same column
    assert len({len(record) for record in records}) == 1


def test_output_preserves_particle_order(tmp_path, particles) -> None:
    lines = save_coordinates(tmp_path / "order.xyz", particles).read_text().splitlines()
    names = [line.split()[0] for line in lines[2:]]
    assert names == [atom_name(p) for p in particles]


def test_unknown_suffix(tmp_path, three_particles) -> None:
    with pytest.raises(ValueError):
        save_coordinates(tmp_path / "out.pdb", three_particles)
    assert not (tmp_path / "out.pdb").exists()
