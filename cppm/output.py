"""
Coordinate file writers.

Saves a particle configuration as XYZ (names and positions) or PQR
(names, positions, charges and radii). Records follow the order of the
particle list.
"""

from pathlib import Path
from typing import Sequence


PQR_RADIUS = 2.0
COMMENT = "generated by cppm-generator"


def atom_name(particle) -> str:
    """Atom name from charge: PP (plus), MP (minus) or NP (neutral)."""
    if particle.charge > 0.0:
        return "PP"
    if particle.charge < 0.0:
        return "MP"
    return "NP"


def save_xyzfile(path: Path | str, particles: Sequence) -> Path:
    """Save in XYZ molecular file format."""
    path = Path(path)
    with open(path, "w") as f:
        f.write(f"{len(particles)}\n{COMMENT}\n")
        for particle in particles:
            x, y, z = particle.position
            f.write(f"{atom_name(particle)} {x} {y} {z}\n")
    return path


def save_pqrfile(path: Path | str, particles: Sequence) -> Path:
    """Save in PQR molecular file format (fixed-width ATOM records)."""
    path = Path(path)
    with open(path, "w") as f:
        f.write(f"{len(particles)}\n{COMMENT}\n")
        for index, particle in enumerate(particles, start=1):
            x, y, z = particle.position
            f.write(
                f"{'ATOM':6}{index:5d} {atom_name(particle):^4.4}A{'CPP':3.3} A{1:4d}0   "
                f"{x:8.3f}{y:8.3f}{z:8.3f}{particle.charge:6.2f}{PQR_RADIUS:6.2f}\n"
            )
    return path


def save_coordinates(path: Path | str, particles: Sequence) -> Path:
    """
    Save particles to a coordinate file, format chosen by suffix.

    Args:
        path: Output file ending in .xyz or .pqr
        particles: Particle list

    Returns:
        Path of the written file

    Raises:
        ValueError: for any other suffix
    """
    path = Path(path)
    if path.suffix == ".xyz":
        return save_xyzfile(path, particles)
    if path.suffix == ".pqr":
        return save_pqrfile(path, particles)
    raise ValueError(f"file suffix must be .xyz or .pqr, got '{path.suffix}'")
