"""
Angle samplers for particles on a sphere.

Two proposal distributions are provided:
- Uniform sphere point picking via inverse CDF sampling of the polar angle
- Symmetric displacement on a small angular disc, used by Monte Carlo moves

Every sampler takes the random number generator explicitly, so a seeded
generator reproduces the same sequence of draws.
"""

import numpy as np
from typing import Tuple


TWO_PI = 2.0 * np.pi


def uniform_sphere_angles(
        rng: np.random.Generator,
        size: int | None = None
) -> Tuple[float | np.ndarray, float | np.ndarray]:
    """
    Draw angles uniformly distributed over the sphere surface.

    Sampling phi and theta independently and uniformly would cluster points
    at the poles. Instead the polar angle is drawn through the inverse CDF
    of its marginal, sin(φ)/2 on [0, π]:

        φ = arccos(2u - 1),   θ = 2πv,   u, v ~ U[0, 1)

    so that cos(φ) is uniform in [-1, 1].
    See https://mathworld.wolfram.com/SpherePointPicking.html

    Args:
        rng: Random number generator
        size: Number of samples (None returns scalars)

    Returns:
        (phi, theta) in radians

    Example:
        >>> rng = np.random.default_rng(1)
        >>> phi, theta = uniform_sphere_angles(rng, size=1000)
        >>> phi.shape
        (1000,)
    """
    u = rng.random(size)
    v = rng.random(size)
    phi = np.arccos(2.0 * u - 1.0)
    theta = TWO_PI * v
    if size is None:
        return float(phi), float(theta)
    return phi, theta


def disc_displacement(
        rng: np.random.Generator,
        step: float
) -> Tuple[float, float]:
    """
    Draw an angular displacement on a disc of radius `step`.

    A direction ψ ~ U[0, 2π) and a length ℓ ~ U[0, step) are drawn, giving

        Δφ = ℓ sin(ψ),   Δθ = ℓ cos(ψ)

    The proposal is symmetric (moving from A to B is as likely as moving
    from B to A), so the plain Metropolis rule satisfies detailed balance.

    Args:
        rng: Random number generator
        step: Maximum displacement in radians

    Returns:
        (delta_phi, delta_theta) in radians
    """
    direction = TWO_PI * rng.random()
    length = step * rng.random()
    return length * np.sin(direction), length * np.cos(direction)
