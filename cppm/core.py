"""
Core geometric utilities for particles on a sphere.

This module provides the spherical to cartesian projection used by every
particle, plus helpers that gather a particle list into batched torch
tensors for vectorized evaluation (pair distances, moments).
"""

import math
import torch
import numpy as np
from typing import Sequence, Tuple


def spherical_to_cartesian(phi: float, theta: float, radius: float) -> np.ndarray:
    """
    Project spherical angles onto a cartesian position.

    Uses the ISO convention where phi is measured from the z-axis:
        x = r sin(φ) cos(θ)
        y = r sin(φ) sin(θ)
        z = r cos(φ)

    Args:
        phi: Polar angle in radians
        theta: Azimuthal angle in radians
        radius: Sphere radius

    Returns:
        Cartesian position, shape (3,)

    Example:
        >>> spherical_to_cartesian(0.0, 0.0, 2.0)
        array([0., 0., 2.])
    """
    sin_phi = math.sin(phi)
    return np.array([
        radius * sin_phi * math.cos(theta),
        radius * sin_phi * math.sin(theta),
        radius * math.cos(phi),
    ])


def stack_positions(particles: Sequence, device: str | torch.device = "cpu") -> torch.Tensor:
    """
    Gather particle positions into one tensor.

    Args:
        particles: Sequence of Particle objects
        device: Device for the returned tensor

    Returns:
        Positions, shape (N, 3), float64
    """
    if len(particles) == 0:
        return torch.zeros((0, 3), dtype=torch.float64, device=device)
    positions = np.stack([p.position for p in particles])
    return torch.as_tensor(positions, dtype=torch.float64, device=device)


def stack_charges(particles: Sequence, device: str | torch.device = "cpu") -> torch.Tensor:
    """
    Gather particle charges into one tensor.

    Args:
        particles: Sequence of Particle objects
        device: Device for the returned tensor

    Returns:
        Charges, shape (N,), float64
    """
    return torch.tensor(
        [p.charge for p in particles], dtype=torch.float64, device=device
    )


def pair_distances(positions: torch.Tensor) -> Tuple[torch.Tensor, torch.Tensor, torch.Tensor]:
    """
    Distances of all unordered particle pairs.

    Args:
        positions: Particle positions, shape (N, 3)

    Returns:
        (first, second, distance) where first/second are the pair indices
        (first < second) and distance has shape (N(N-1)/2,)
    """
    n = positions.shape[0]
    first, second = torch.triu_indices(n, n, offset=1, device=positions.device)
    dist = torch.cdist(
        positions, positions, compute_mode="donot_use_mm_for_euclid_dist"
    )  # (N, N)
    return first, second, dist[first, second]
