"""
Analysis tools for charged patchy particle configurations.

This module provides observables of a particle list and an accumulator
that samples them during a Monte Carlo run:
- Net and absolute charge
- Geometric center and center of charge
- Dipole moment (origin at 0,0,0)
- Global CPPM properties such as surface charge density

Observables gather the particle list into torch tensors once and reduce
them in a single vectorized pass. Particles are read, never modified.
"""

import math
import torch
from typing import Dict, Optional, Sequence

from .core import stack_positions, stack_charges


# 1 Debye expressed in eÅ
DEBYE_IN_EA = 0.2081943


# ------------------------------------------------------------------
# Observables
# ------------------------------------------------------------------

def net_charge(particles: Sequence) -> float:
    """Total charge Σ qᵢ (e)."""
    return float(stack_charges(particles).sum())


def absolute_charge(particles: Sequence) -> float:
    """Total absolute charge Σ |qᵢ| (e)."""
    return float(stack_charges(particles).abs().sum())


def geometric_center(particles: Sequence) -> Optional[torch.Tensor]:
    """
    Geometric center Σ rᵢ / N.

    Returns:
        Center, shape (3,), or None for an empty particle list
    """
    if len(particles) == 0:
        return None
    return stack_positions(particles).mean(dim=0)


def charge_center(particles: Sequence) -> torch.Tensor:
    """
    Center of charge Σ |qᵢ| rᵢ / Σ |qᵢ|.

    Returns:
        Center, shape (3,). The zero vector when no particle is charged.
    """
    weights = stack_charges(particles).abs()
    total = weights.sum()
    if total == 0:
        return torch.zeros(3, dtype=torch.float64)
    return (weights.unsqueeze(1) * stack_positions(particles)).sum(dim=0) / total


def dipole_moment(particles: Sequence) -> torch.Tensor:
    """
    Dipole moment μ = Σ qᵢ rᵢ with origin at (0, 0, 0).

    Returns:
        Dipole vector in eÅ, shape (3,)
    """
    if len(particles) == 0:
        return torch.zeros(3, dtype=torch.float64)
    charges = stack_charges(particles)
    return (charges.unsqueeze(1) * stack_positions(particles)).sum(dim=0)


# ------------------------------------------------------------------
# Accumulated moments
# ------------------------------------------------------------------

class Moments:
    """
    Running averages of geometric center, charge center and dipole moment.

    Sample once per Monte Carlo step; the averages are over all samples.

    Attributes:
        number_of_samples: Number of configurations sampled so far
    """

    def __init__(self):
        self.number_of_samples = 0
        self._geometric_center = torch.zeros(3, dtype=torch.float64)
        self._charge_center = torch.zeros(3, dtype=torch.float64)
        self._dipole_moment = torch.zeros(3, dtype=torch.float64)
        self._dipole_moment_scalar = 0.0

    def sample(self, particles: Sequence) -> None:
        """
        Add one configuration to the averages.

        Raises:
            ValueError: if the particle list is empty
        """
        center = geometric_center(particles)
        if center is None:
            raise ValueError("no particles to sample")

        mu = dipole_moment(particles)
        self._geometric_center += center
        self._charge_center += charge_center(particles)
        self._dipole_moment += mu
        self._dipole_moment_scalar += float(torch.linalg.norm(mu))
        self.number_of_samples += 1

    def _check_sampled(self) -> None:
        if self.number_of_samples == 0:
            raise ValueError("no samples collected")

    @property
    def mean_geometric_center(self) -> torch.Tensor:
        """⟨Σ rᵢ / N⟩, shape (3,)."""
        self._check_sampled()
        return self._geometric_center / self.number_of_samples

    @property
    def mean_charge_center(self) -> torch.Tensor:
        """⟨Σ |qᵢ| rᵢ / Σ |qᵢ|⟩, shape (3,)."""
        self._check_sampled()
        return self._charge_center / self.number_of_samples

    @property
    def mean_dipole_moment(self) -> torch.Tensor:
        """⟨μ⟩ as a vector, shape (3,)."""
        self._check_sampled()
        return self._dipole_moment / self.number_of_samples

    @property
    def mean_dipole_moment_scalar(self) -> float:
        """⟨|μ|⟩ in eÅ."""
        self._check_sampled()
        return self._dipole_moment_scalar / self.number_of_samples

    def report(self) -> None:
        """Print the averaged moments."""
        cog = float(torch.linalg.norm(self.mean_geometric_center))
        coc = float(torch.linalg.norm(self.mean_charge_center))
        mu = self.mean_dipole_moment_scalar

        print(f"geometric center displacement = |⟨∑𝐫ᵢ/N⟩|     = {cog:.1f} Å")
        print(f"charge center displacement    = |⟨∑|qᵢ|𝐫ᵢ⟩/N| = {coc:.1f} eÅ")
        print(
            f"mean dipole moment 𝛍          = ⟨|∑qᵢ𝐫ᵢ|⟩      = "
            f"{mu:.1f} eÅ = {mu / DEBYE_IN_EA:.1f} D"
        )


# ------------------------------------------------------------------
# Global properties
# ------------------------------------------------------------------

def _area_per(area: float, amount: float) -> float:
    return area / amount if amount != 0 else math.inf


def global_properties(particles: Sequence) -> Dict[str, float]:
    """
    Global properties of a CPPM configuration.

    Args:
        particles: Non-empty particle list sharing one sphere radius

    Returns:
        Dictionary with particle count, charges, radius, surface area,
        dipole moment (eÅ and Debye) and surface densities (Å² per
        particle / per unit charge; inf when the charge is zero)

    Raises:
        ValueError: if the particle list is empty
    """
    if len(particles) == 0:
        raise ValueError("no particles to analyze")

    radius = particles[0].radius
    area = 4.0 * math.pi * radius ** 2
    mu = float(torch.linalg.norm(dipole_moment(particles)))
    monopole = net_charge(particles)
    abs_charge = absolute_charge(particles)

    return {
        "number_of_particles": len(particles),
        "absolute_charge": abs_charge,
        "radius": radius,
        "surface_area": area,
        "monopole_moment": monopole,
        "dipole_moment": mu,
        "dipole_moment_debye": mu / DEBYE_IN_EA,
        "area_per_particle": area / len(particles),
        "area_per_charge": _area_per(area, monopole),
        "area_per_absolute_charge": _area_per(area, abs_charge),
    }


def print_global_properties(particles: Sequence) -> None:
    """Print surface charge density, net charge etc. of a configuration."""
    props = global_properties(particles)
    print("CPPM properties:")
    print(f"  number of particles       = {props['number_of_particles']}")
    print(f"  abs. net charge           = {props['absolute_charge']}")
    print(f"  radius                    = {props['radius']} Å")
    print(f"  surface area              = {props['surface_area']:.2f} Å²")
    print(f"  monopole moment           = {props['monopole_moment']:.2f}e")
    print(
        f"  dipole moment |𝛍|         = {props['dipole_moment']:.2f} eÅ "
        f"= {props['dipole_moment_debye']:.2f} D"
    )
    print(f"  particle density          = {props['area_per_particle']:.2f} Å²/particle")
    print(f"  surf. charge density      = {props['area_per_charge']:.2f} Å²/e")
    print(f"  abs. surf. charge density = {props['area_per_absolute_charge']:.2f} Å²/e")
