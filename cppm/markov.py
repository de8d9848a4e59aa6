"""
Metropolis Monte Carlo moves for particles on a sphere.

Provides the move algorithms and the propagator that drives them:
  - DisplaceParticle : random angular displacement of one particle
  - SwapCharges      : exchange of charges between two particles

Class hierarchy:
    MoveAlgorithm (abstract)
    ├── DisplaceParticle
    ├── SwapCharges
    └── MonteCarloMove   wraps a move and tracks its acceptance ratio

    Propagator           picks one registered move per step

Every move follows the same sequence:
    propose → energy before/after → Metropolis test → commit or rollback
so particle state and energy are consistent after every step, whether
the move was accepted or not.
"""

import math
import numpy as np
from abc import ABC, abstractmethod
from typing import List, Sequence, Tuple

from .energy import EnergyTerm


def accept_move(energy_change: float, rng: np.random.Generator) -> bool:
    """
    Metropolis criterion for a proposed move.

    Accepts with probability min(1, exp(-ΔE)). The exponent is clamped at
    zero so a large negative ΔE saturates to 1 instead of overflowing; a
    large positive ΔE underflows to 0 and is always rejected. One uniform
    number is drawn per call.

    Args:
        energy_change: New energy minus old energy (kT)
        rng: Random number generator

    Returns:
        True if the move is accepted
    """
    acceptance_probability = math.exp(-max(energy_change, 0.0))
    return rng.random() < acceptance_probability


# =============================================================================
# Move algorithms
# =============================================================================

class MoveAlgorithm(ABC):
    """
    Interface for Monte Carlo move algorithms.

    A move borrows the particle list and the Hamiltonian for a single
    step. It holds only its own parameters.
    """

    @abstractmethod
    def do_move(
        self,
        hamiltonian: EnergyTerm,
        particles: List,
        rng: np.random.Generator
    ) -> bool:
        """
        Perform one Metropolis move.

        Args:
            hamiltonian: Energy function with the (particles, indices) contract
            particles:   Particle list, modified in place
            rng:         Random number generator

        Returns:
            True if the move was accepted
        """
        ...

    @property
    def name(self) -> str:
        return type(self).__name__


class DisplaceParticle(MoveAlgorithm):
    """
    Randomly displace the spherical angles of a single particle.

    The new point is drawn on a disc of radius `angular_displacement`
    around the old one. Only the energy of the displaced particle against
    the rest is evaluated (O(N)). A rejected move restores the particle
    to an exact copy of its previous state.
    """

    def __init__(self, angular_displacement: float = 0.01):
        """
        Args:
            angular_displacement: Maximum angular step in radians
        """
        if angular_displacement <= 0.0:
            raise ValueError(
                f"angular_displacement={angular_displacement} must be positive"
            )
        self.angular_displacement = angular_displacement

    def do_move(self, hamiltonian, particles, rng) -> bool:
        index = int(rng.integers(len(particles)))
        backup = particles[index].copy()
        old_energy = hamiltonian.energy(particles, [index])

        particles[index].displace_angle(self.angular_displacement, rng)
        new_energy = hamiltonian.energy(particles, [index])

        if not accept_move(new_energy - old_energy, rng):
            particles[index].restore(backup)
            return False
        return True

    def __repr__(self) -> str:
        return f"DisplaceParticle(angular_displacement={self.angular_displacement})"


class SwapCharges(MoveAlgorithm):
    """
    Swap the charges of two randomly selected particles.

    Only the energy of the two particles against the rest and against each
    other is evaluated (O(N)). Swapping equal charges cannot change the
    energy, so such moves are accepted without evaluating anything.
    """

    @staticmethod
    def swap_charges(particles: List, first: int, second: int) -> None:
        """Swap charges of two particles given by their indices."""
        particles[first].charge, particles[second].charge = (
            particles[second].charge, particles[first].charge
        )

    @staticmethod
    def random_indices(number_of_particles: int, rng: np.random.Generator) -> Tuple[int, int]:
        """
        Pick two random, non-repeating particle indices.

        Raises:
            ValueError: if fewer than two particles are available
        """
        if number_of_particles < 2:
            raise ValueError(
                f"swapping charges needs at least 2 particles, got {number_of_particles}"
            )
        first, second = rng.choice(number_of_particles, size=2, replace=False)
        return int(first), int(second)

    def do_move(self, hamiltonian, particles, rng) -> bool:
        first, second = self.random_indices(len(particles), rng)
        if particles[first].charge == particles[second].charge:
            return True

        old_energy = hamiltonian.energy(particles, [first, second])
        self.swap_charges(particles, first, second)
        new_energy = hamiltonian.energy(particles, [first, second])

        if not accept_move(new_energy - old_energy, rng):
            self.swap_charges(particles, first, second)  # restore old charges
            return False
        return True

    def __repr__(self) -> str:
        return "SwapCharges()"


# =============================================================================
# Acceptance tracking and propagation
# =============================================================================

class MonteCarloMove(MoveAlgorithm):
    """
    Move algorithm plus running acceptance statistics.

    Instances are normally created by Propagator.push(). The statistics
    are for reporting only and never feed back into the move.

    Attributes:
        move_algorithm: Wrapped move
        attempted: Number of attempted moves
        accepted: Number of accepted moves
    """

    def __init__(self, move_algorithm: MoveAlgorithm):
        self.move_algorithm = move_algorithm
        self.attempted = 0
        self.accepted = 0

    def do_move(self, hamiltonian, particles, rng) -> bool:
        accepted = self.move_algorithm.do_move(hamiltonian, particles, rng)
        self.attempted += 1
        self.accepted += int(accepted)
        return accepted

    def mean_acceptance(self) -> float:
        """Ratio of accepted vs. attempted moves (NaN before the first attempt)."""
        if self.attempted == 0:
            return math.nan
        return self.accepted / self.attempted

    @property
    def name(self) -> str:
        return self.move_algorithm.name


class Propagator:
    """
    Aggregator for multiple Monte Carlo moves.

    Each step selects one registered move uniformly at random, independent
    of acceptance ratios, and delegates to it.

    Example:
        >>> propagator = Propagator()
        >>> propagator.push(DisplaceParticle(angular_displacement=0.01))
        >>> propagator.push(SwapCharges())
        >>> accepted = propagator.step(hamiltonian, particles, rng)
    """

    def __init__(self, moves: Sequence[MoveAlgorithm] = ()):
        self.moves: List[MonteCarloMove] = []
        for move in moves:
            self.push(move)

    def push(self, move_algorithm: MoveAlgorithm) -> None:
        """Register a move algorithm."""
        self.moves.append(MonteCarloMove(move_algorithm))

    def step(
        self,
        hamiltonian: EnergyTerm,
        particles: List,
        rng: np.random.Generator
    ) -> bool:
        """
        Run one randomly selected move.

        Returns:
            True if the move was accepted

        Raises:
            ValueError: if no moves are registered
        """
        if not self.moves:
            raise ValueError("no Monte Carlo moves registered")
        move = self.moves[int(rng.integers(len(self.moves)))]
        return move.do_move(hamiltonian, particles, rng)

    def mean_acceptance(self, index: int) -> float:
        """Acceptance ratio of the move registered at `index`."""
        return self.moves[index].mean_acceptance()

    @property
    def acceptance_ratios(self) -> List[float]:
        return [move.mean_acceptance() for move in self.moves]

    def report(self) -> None:
        """Print the acceptance ratio of every registered move."""
        for i, move in enumerate(self.moves):
            print(f"move {i} ({move.name}) acceptance ratio = {move.mean_acceptance():.2f}")

    def __len__(self) -> int:
        return len(self.moves)
