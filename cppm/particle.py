"""
Particle model for charged patchy particles on a sphere.

A particle is stored by its spherical angles; the cartesian position is
derived and kept in sync whenever the angles change.
"""

import numpy as np
from dataclasses import dataclass, field
from typing import List

from .core import spherical_to_cartesian
from .samplers import uniform_sphere_angles, disc_displacement


@dataclass
class Particle:
    """
    Point particle on the surface of a sphere.

    Attributes:
        charge: Particle charge in units of e
        radius: Radius of the sphere the particle lives on (Å)
        phi: Polar angle, 0 ≤ φ ≤ π (ISO convention)
        theta: Azimuthal angle, 0 ≤ θ < 2π
        position: Cartesian position, shape (3,). Derived from
            (phi, theta, radius); never assign it directly.
    """

    charge: float = 0.0
    radius: float = 1.0
    phi: float = 0.0
    theta: float = 0.0
    position: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        self._update_cartesian()

    def _update_cartesian(self) -> None:
        """Recompute the cartesian position from the current angles."""
        self.position = spherical_to_cartesian(self.phi, self.theta, self.radius)

    def set_angles(self, phi: float, theta: float) -> None:
        """
        Set angles and update the cartesian position.

        Angles are stored as given. Values outside the canonical ranges
        are harmless since only their sines and cosines enter the position.
        """
        self.phi = phi
        self.theta = theta
        self._update_cartesian()

    def random_angles(self, rng: np.random.Generator) -> None:
        """Place the particle uniformly at random on the sphere."""
        self.set_angles(*uniform_sphere_angles(rng))

    def displace_angle(self, step: float, rng: np.random.Generator) -> None:
        """Randomly displace phi and theta on a disc of radius `step`."""
        delta_phi, delta_theta = disc_displacement(rng, step)
        self.set_angles(self.phi + delta_phi, self.theta + delta_theta)

    def copy(self) -> "Particle":
        """Independent value copy, used as a rollback snapshot."""
        clone = Particle(self.charge, self.radius, self.phi, self.theta)
        clone.position = self.position.copy()
        return clone

    def restore(self, snapshot: "Particle") -> None:
        """Restore the exact state of a snapshot taken with copy()."""
        self.charge = snapshot.charge
        self.radius = snapshot.radius
        self.phi = snapshot.phi
        self.theta = snapshot.theta
        self.position = snapshot.position.copy()


def generate_particles(
        radius: float,
        num_total: int,
        num_plus: int,
        num_minus: int,
        rng: np.random.Generator
) -> List[Particle]:
    """
    Generate charged and neutral particles randomly placed on a sphere.

    Cations are placed at the front of the list and anions at the back;
    everything in between is neutral. Every particle then gets uniformly
    random angles.

    Args:
        radius: Sphere radius (Å)
        num_total: Total number of particles
        num_plus: Number of particles with charge +1
        num_minus: Number of particles with charge -1
        rng: Random number generator

    Returns:
        List of num_total particles

    Raises:
        ValueError: if num_total < 1 or num_plus + num_minus > num_total

    Example:
        >>> rng = np.random.default_rng(0)
        >>> particles = generate_particles(20.0, 10, 3, 3, rng)
        >>> [p.charge for p in particles]
        [1.0, 1.0, 1.0, 0.0, 0.0, 0.0, 0.0, -1.0, -1.0, -1.0]
    """
    if num_total < 1:
        raise ValueError(f"num_total={num_total} must be at least 1")
    if num_plus < 0 or num_minus < 0:
        raise ValueError(
            f"charged particle counts must be non-negative "
            f"(num_plus={num_plus}, num_minus={num_minus})"
        )
    if num_plus + num_minus > num_total:
        raise ValueError(
            f"number of charged particles ({num_plus} + {num_minus}) "
            f"exceeds total number of particles ({num_total})"
        )

    particles = [Particle(charge=0.0, radius=radius) for _ in range(num_total)]

    for particle in particles[:num_plus]:
        particle.charge = 1.0
    for particle in particles[num_total - num_minus:]:
        particle.charge = -1.0

    for particle in particles:
        particle.random_angles(rng)

    return particles
