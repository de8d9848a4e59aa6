"""
Charged Patchy Particle Model (CPPM) Generator

A Metropolis Monte Carlo framework for sampling charged and neutral
point particles on the surface of a sphere, interacting through a
soft-core Coulomb potential.

Main Components:
---------------
config.SimulationConfig - Central configuration management
particle.Particle - Spherical coordinate particle model
energy.Hamiltonian - Sum of energy terms (Nonbonded, DipoleConstraint)
markov.Propagator - Random selection among Monte Carlo moves
analysis.Moments - Dipole and charge-center statistics
output.save_coordinates - XYZ / PQR writers
plotting.* - Visualization classes

Module Structure:
----------------
├── run.py                  # Command line simulation driver
├── local/                  # Output isolation
└── cppm/                   # Module library files
    ├── config.py           # Configuration management
    ├── core.py             # Geometric utilities (projection, tensors)
    ├── samplers.py         # Sphere point picking and disc displacement
    ├── particle.py         # Particle model and generation
    ├── energy.py           # Pair potentials, energy terms, Hamiltonian
    ├── markov.py           # Metropolis moves and propagator
    ├── analysis.py         # Charge and dipole analysis tools
    ├── output.py           # Coordinate file writers
    ├── plotting.py         # Visualization classes
    └── __init__.py         # This file

For detailed usage, see run.py.
"""

from .config import SimulationConfig
from .particle import Particle, generate_particles
from .energy import (
    PairPotential,
    Coulomb,
    EnergyTerm,
    Nonbonded,
    DipoleConstraint,
    Hamiltonian,
    UnsupportedEnergyRequest,
)
from .markov import (
    accept_move,
    MoveAlgorithm,
    DisplaceParticle,
    SwapCharges,
    MonteCarloMove,
    Propagator,
)
from .analysis import Moments, dipole_moment, global_properties, print_global_properties
from .output import save_coordinates
from .plotting import SpherePlotter, EnergyPlotter

__version__ = "0.2.0"

__all__ = [
    # Configuration
    'SimulationConfig',

    # Particles
    'Particle',
    'generate_particles',

    # Energy
    'PairPotential',
    'Coulomb',
    'EnergyTerm',
    'Nonbonded',
    'DipoleConstraint',
    'Hamiltonian',
    'UnsupportedEnergyRequest',

    # Monte Carlo
    'accept_move',
    'MoveAlgorithm',
    'DisplaceParticle',
    'SwapCharges',
    'MonteCarloMove',
    'Propagator',

    # Analysis and output
    'Moments',
    'dipole_moment',
    'global_properties',
    'print_global_properties',
    'save_coordinates',

    # Plotting
    'SpherePlotter',
    'EnergyPlotter',
]
