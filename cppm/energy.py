"""
Energy evaluation for particles on a sphere.

All energies are in units of kT. The module is built from three layers:

    PairPotential (abstract)
    └── Coulomb           soft-core repulsion + unscreened Coulomb law

    EnergyTerm (abstract)
    ├── Nonbonded         pairwise additive sum of a PairPotential
    ├── DipoleConstraint  harmonic restraint on the total dipole moment
    └── Hamiltonian       ordered sum of energy terms

Energy terms share one contract, energy(particles, indices):
    indices = [] or all indices   total system energy
    indices = [i]                 particle i against all others
    indices = [i, j]              pair (i, j) plus i and j against all others
Anything else raises UnsupportedEnergyRequest.
"""

import numpy as np
import torch
from abc import ABC, abstractmethod
from typing import List, Sequence

from .analysis import dipole_moment
from .core import stack_positions, stack_charges, pair_distances


class UnsupportedEnergyRequest(ValueError):
    """Raised when an energy term receives an index subset it cannot evaluate."""


def _check_distances(distances) -> None:
    """Reject coincident particles instead of propagating inf/NaN."""
    if (distances <= 0.0).any():
        raise ValueError("coincident particles: pair distance is zero")


# =============================================================================
# Pair potentials
# =============================================================================

class PairPotential(ABC):
    """
    Pair interaction law between two particles.

    Subclasses implement energy_from_distance() with plain arithmetic so
    the same expression works on floats, NumPy arrays and torch tensors.
    """

    @abstractmethod
    def energy_from_distance(self, distance, charge_1, charge_2):
        """
        Pair energy as a function of distance and the two charges.

        Args:
            distance: Separation(s), float, ndarray or tensor
            charge_1: Charge(s) of the first particle(s)
            charge_2: Charge(s) of the second particle(s)

        Returns:
            Energy (kT), same type and shape as distance
        """
        ...

    def energy(self, particle_1, particle_2) -> float:
        """Pair energy of two particles (kT)."""
        distance = float(np.linalg.norm(particle_1.position - particle_2.position))
        if distance == 0.0:
            raise ValueError("coincident particles: pair distance is zero")
        return float(
            self.energy_from_distance(distance, particle_1.charge, particle_2.charge)
        )


class Coulomb(PairPotential):
    """
    Coulomb interaction plus soft-core repulsion.

        u(d) = ε (σ/d)^12 + l_B q₁ q₂ / d

    The r⁻¹² term keeps particles from overlapping; the Bjerrum length
    l_B = e²/(4πε₀εᵣkT) sets the electrostatic coupling in kT.

    Attributes:
        bjerrum_length: Bjerrum length l_B (Å)
        sigma: Soft-core diameter σ (Å)
        epsilon: Soft-core strength ε (kT)
    """

    def __init__(self, bjerrum_length: float, sigma: float = 4.0, epsilon: float = 4.0):
        self.bjerrum_length = bjerrum_length
        self.sigma = sigma
        self.epsilon = epsilon

    def energy_from_distance(self, distance, charge_1, charge_2):
        repulsion = self.epsilon * (self.sigma / distance) ** 12
        return repulsion + self.bjerrum_length * charge_1 * charge_2 / distance

    def __repr__(self) -> str:
        return (
            f"Coulomb(bjerrum_length={self.bjerrum_length}, "
            f"sigma={self.sigma}, epsilon={self.epsilon})"
        )


# =============================================================================
# Energy terms
# =============================================================================

class EnergyTerm(ABC):
    """
    Abstract contributor to the total energy.

    Terms hold interaction parameters only; particle data is passed in on
    every call and never modified.
    """

    @abstractmethod
    def energy(self, particles: Sequence, indices: Sequence[int] = ()) -> float:
        """
        Energy of the full system or of an index subset (kT).

        Args:
            particles: Particle list
            indices: Empty/full range, [i] or [i, j]

        Returns:
            Energy in kT
        """
        ...

    @staticmethod
    def is_full_range(particles: Sequence, indices: Sequence[int]) -> bool:
        """True when indices request the total system energy."""
        return len(indices) == 0 or sorted(indices) == list(range(len(particles)))


class Nonbonded(EnergyTerm):
    """
    Pairwise additive nonbonded interactions.

    Single-particle and pair-swap requests cost O(N) and are evaluated
    with NumPy; the total system energy, O(N²), is evaluated in one
    vectorized torch pass over all unordered pairs.
    """

    def __init__(self, pair_potential: PairPotential, device: str | torch.device = "cpu"):
        """
        Args:
            pair_potential: Pair interaction law
            device: Device for the vectorized total energy
        """
        self.pair_potential = pair_potential
        self._device = torch.device(device)

    def system_energy(self, particles: Sequence) -> float:
        """Sum of all pair interactions in the particle list (kT)."""
        if len(particles) < 2:
            return 0.0
        positions = stack_positions(particles, self._device)
        charges = stack_charges(particles, self._device)
        first, second, distances = pair_distances(positions)
        _check_distances(distances)
        energies = self.pair_potential.energy_from_distance(
            distances, charges[first], charges[second]
        )
        return float(energies.sum())

    def _energy_against(self, particles: Sequence, index: int, exclude: Sequence[int]) -> float:
        """Interaction of particle `index` with every particle not in `exclude`."""
        others = [p for i, p in enumerate(particles) if i not in exclude]
        if not others:
            return 0.0
        target = particles[index]
        positions = np.stack([p.position for p in others])
        charges = np.array([p.charge for p in others])
        distances = np.linalg.norm(positions - target.position, axis=1)
        _check_distances(distances)
        return float(
            self.pair_potential.energy_from_distance(distances, target.charge, charges).sum()
        )

    def particle_energy(self, particles: Sequence, index: int) -> float:
        """Interaction energy of a single particle with all the rest (kT)."""
        return self._energy_against(particles, index, exclude=(index,))

    def swap_move_energy(self, particles: Sequence, first: int, second: int) -> float:
        """
        Energy of the pair-swap neighborhood (kT).

        The (first, second) pair plus each of them against every other
        particle. Pairs not involving first or second are left out since a
        charge swap cannot change them.
        """
        exclude = (first, second)
        energy = self.pair_potential.energy(particles[first], particles[second])
        energy += self._energy_against(particles, first, exclude)
        energy += self._energy_against(particles, second, exclude)
        return energy

    @staticmethod
    def _normalize_indices(particles: Sequence, indices: Sequence[int]) -> List[int]:
        """Map negative indices to positions; reject indices outside the list."""
        n = len(particles)
        normalized = []
        for index in indices:
            if not -n <= index < n:
                raise UnsupportedEnergyRequest(
                    f"particle index {index} out of range for {n} particles"
                )
            normalized.append(index % n)
        return normalized

    def energy(self, particles: Sequence, indices: Sequence[int] = ()) -> float:
        indices = self._normalize_indices(particles, indices)
        if len(indices) == 1:
            return self.particle_energy(particles, indices[0])
        if len(indices) == 2 and indices[0] != indices[1]:
            return self.swap_move_energy(particles, indices[0], indices[1])
        if self.is_full_range(particles, indices):
            return self.system_energy(particles)
        raise UnsupportedEnergyRequest(
            f"{type(self).__name__} cannot evaluate an index subset of size "
            f"{len(indices)} (supported: empty/full range, 1 or 2 indices)"
        )


class DipoleConstraint(EnergyTerm):
    """
    Harmonic restraint on the magnitude of the total dipole moment.

        U = ½ k (|μ| - μ₀)²,   μ = Σᵢ qᵢ rᵢ

    The dipole moment depends on every particle, so the full particle set
    is used regardless of the requested indices. The cost is O(N).

    Attributes:
        spring_constant: Spring constant k (kT/(eÅ)²)
        target: Target dipole magnitude μ₀ (eÅ)
    """

    def __init__(self, spring_constant: float, target: float = 0.0):
        self.spring_constant = spring_constant
        self.target = target

    def energy(self, particles: Sequence, indices: Sequence[int] = ()) -> float:
        mu = float(torch.linalg.norm(dipole_moment(particles)))
        return 0.5 * self.spring_constant * (mu - self.target) ** 2

    def __repr__(self) -> str:
        return f"DipoleConstraint(spring_constant={self.spring_constant}, target={self.target})"


class Hamiltonian(EnergyTerm):
    """
    Ordered collection of energy terms.

    Built once before the simulation loop and treated as read-only while
    it runs. New kinds of terms are added by subclassing EnergyTerm.

    Example:
        >>> hamiltonian = Hamiltonian()
        >>> hamiltonian.push(Nonbonded(Coulomb(bjerrum_length=7.0)))
        >>> hamiltonian.push(DipoleConstraint(spring_constant=0.1))
        >>> len(hamiltonian)
        2
    """

    def __init__(self, terms: Sequence[EnergyTerm] = ()):
        self.terms: List[EnergyTerm] = list(terms)

    def push(self, term: EnergyTerm) -> None:
        """Register an energy term."""
        self.terms.append(term)

    def energy(self, particles: Sequence, indices: Sequence[int] = ()) -> float:
        return float(sum(term.energy(particles, indices) for term in self.terms))

    def __len__(self) -> int:
        return len(self.terms)

    def __iter__(self):
        return iter(self.terms)
