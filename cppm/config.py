"""
Configuration management for the CPPM Monte Carlo simulation.

This module provides a centralized configuration class that manages
all simulation parameters, RNG seeding, device allocation, and paths.
"""

from dataclasses import dataclass, field
from pathlib import Path
import numpy as np
import torch


SUPPORTED_SUFFIXES = (".xyz", ".pqr")


@dataclass
class SimulationConfig:
    """
    Central configuration for a charged patchy particle simulation.

    This class manages:
    - System composition (radius, particle counts, charges)
    - Interaction parameters (Bjerrum length, dipole restraint)
    - Monte Carlo parameters (steps, angular displacement)
    - Random number generator seeding
    - Output paths and optional animation settings

    All lengths are in Ångström and all energies in units of kT.

    Attributes:
        radius: Sphere radius shared by every particle
        num_total: Total number of particles on the sphere
        num_plus: Number of particles with charge +1
        num_minus: Number of particles with charge -1
        bjerrum_length: Coulomb coupling strength, e²/(4πε₀εᵣkT)
        steps: Number of Monte Carlo steps
        angular_displacement: Maximum angular step of DisplaceParticle
        dipole_spring_constant: Strength of the dipole restraint (0 = off)
        target_dipole: Target dipole magnitude |μ| of the restraint (eÅ)
        seed: Random seed for reproducibility (None = random seed)
        device: Device for PyTorch tensors ("cpu" or "cuda")
        output_file: Coordinate file written after the run (.xyz or .pqr)
        output_dir: Directory for animation outputs
        frame_interval: Capture a plot frame every n steps (0 = disabled)
        frame_dpi: DPI resolution for animation frames
        gif_duration: Duration per frame in milliseconds
    """

    # System composition
    radius: float = 20.0
    num_total: int = 643
    num_plus: int = 29
    num_minus: int = 37

    # Interactions
    bjerrum_length: float = 7.0
    dipole_spring_constant: float = 0.0
    target_dipole: float = 0.0

    # Monte Carlo
    steps: int = 10000
    angular_displacement: float = 0.01
    seed: int | None = None

    # Hardware configuration
    device: str = "cpu"

    # File system paths
    output_file: Path = field(default_factory=lambda: Path("cppm.pqr"))
    output_dir: Path = field(default_factory=lambda: Path("./local/outputs"))

    # Visualization parameters
    frame_interval: int = 0
    frame_dpi: int = 96
    gif_duration: int = 40  # milliseconds per frame

    # Private fields (computed in __post_init__)
    _torch_device: torch.device = field(init=False, repr=False)
    _rng: np.random.Generator = field(init=False, repr=False)

    def __post_init__(self):
        """Validate parameters and initialize derived properties."""
        self.output_file = Path(self.output_file)
        self.output_dir = Path(self.output_dir)

        self.validate()

        self._torch_device = torch.device(self.device)
        self.apply_seed()

    def validate(self) -> None:
        """
        Check the configuration before any Monte Carlo step runs.

        Raises:
            ValueError: on inconsistent particle counts, non-positive
                radius/steps/displacement or an unknown output suffix
        """
        if self.num_total < 1:
            raise ValueError(f"num_total={self.num_total} must be at least 1")
        if self.num_plus < 0 or self.num_minus < 0:
            raise ValueError(
                f"charged particle counts must be non-negative "
                f"(num_plus={self.num_plus}, num_minus={self.num_minus})"
            )
        if self.num_plus + self.num_minus > self.num_total:
            raise ValueError(
                f"number of charged particles ({self.num_plus} + {self.num_minus}) "
                f"exceeds total number of particles ({self.num_total})"
            )
        if self.radius <= 0.0:
            raise ValueError(f"radius={self.radius} must be positive")
        if self.steps < 0:
            raise ValueError(f"steps={self.steps} must be non-negative")
        if self.angular_displacement <= 0.0:
            raise ValueError(
                f"angular_displacement={self.angular_displacement} must be positive"
            )
        if self.dipole_spring_constant < 0.0:
            raise ValueError(
                f"dipole_spring_constant={self.dipole_spring_constant} must be non-negative"
            )
        if self.frame_interval < 0:
            raise ValueError(f"frame_interval={self.frame_interval} must be non-negative")
        if self.output_file.suffix not in SUPPORTED_SUFFIXES:
            raise ValueError(
                f"output file '{self.output_file}' must end with "
                f"{' or '.join(SUPPORTED_SUFFIXES)}"
            )

    def apply_seed(self) -> None:
        """
        Create the random number generator shared by the whole run.

        The generator is passed explicitly to particle generation, move
        selection and the Metropolis test; nothing reads global RNG state.
        """
        self._rng = np.random.default_rng(self.seed)

        if self.seed is None:
            print("⚠️  No seed set - using random initialization")
        else:
            print(f"🌱 Seed set to: {self.seed}")

    @property
    def rng(self) -> np.random.Generator:
        """Random number generator for this run."""
        return self._rng

    @property
    def torch_device(self) -> torch.device:
        """Get PyTorch device object for tensor allocation."""
        return self._torch_device

    @property
    def num_neutral(self) -> int:
        """Number of uncharged particles."""
        return self.num_total - self.num_plus - self.num_minus

    @property
    def surface_area(self) -> float:
        """Sphere surface area 4πR² in Å²."""
        return 4.0 * np.pi * self.radius ** 2

    @property
    def capture_frames(self) -> bool:
        """True when the run should record animation frames."""
        return self.frame_interval > 0

    def __repr__(self) -> str:
        """Formatted string representation of configuration."""
        return (
            f"SimulationConfig(\n"
            f"  radius={self.radius}, N={self.num_total} "
            f"(+{self.num_plus}, -{self.num_minus}, 0x{self.num_neutral})\n"
            f"  bjerrum_length={self.bjerrum_length}, "
            f"dipole_k={self.dipole_spring_constant}, target_dipole={self.target_dipole}\n"
            f"  steps={self.steps}, angular_displacement={self.angular_displacement}\n"
            f"  seed={self.seed}, device={self.device}\n"
            f"  output_file={self.output_file}\n"
            f"  output_dir={self.output_dir}\n"
            f")"
        )
