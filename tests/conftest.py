"""
Shared pytest fixtures for the CPPM generator.

Fixtures provide seeded random generators and small particle systems so
tests stay fast and reproducible.
"""

from __future__ import annotations

import os
import pathlib
import sys

import numpy as np
import pytest

os.environ.setdefault("MPLBACKEND", "Agg")

REPO_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from cppm import Coulomb, Hamiltonian, Nonbonded, generate_particles  # noqa: E402


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded random number generator."""
    return np.random.default_rng(1738)


@pytest.fixture
def particles(rng):
    """Ten particles on a 20 Å sphere: 3 cations, 3 anions, 4 neutral."""
    return generate_particles(20.0, 10, 3, 3, rng)


@pytest.fixture
def coulomb() -> Coulomb:
    return Coulomb(bjerrum_length=7.0)


@pytest.fixture
def hamiltonian(coulomb) -> Hamiltonian:
    """Hamiltonian with a single nonbonded Coulomb term."""
    return Hamiltonian([Nonbonded(coulomb)])
