"""
Main simulation runner for the CPPM generator.

This script orchestrates the full simulation workflow:
1. Configuration setup from the command line
2. Particle generation on the sphere
3. Hamiltonian and Monte Carlo propagator setup
4. Monte Carlo loop with moment sampling and progress reporting
5. Reporting and coordinate file output

Example:
    python run.py -o cppm.pqr -r 20 -N 643 -p 29 -m 37 -s 10000
"""

import argparse
import time
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from cppm import SimulationConfig, generate_particles
from cppm import Hamiltonian, Nonbonded, Coulomb, DipoleConstraint
from cppm import Propagator, DisplaceParticle, SwapCharges
from cppm import Moments, print_global_properties, save_coordinates
from cppm import SpherePlotter, EnergyPlotter


PROGRESS_INTERVAL = 100


class Timer:
    """Simple timer for performance monitoring."""

    def __init__(self):
        self.start_time = time.perf_counter()
        self.last_lap = time.perf_counter()

    def lap(self) -> float:
        now = time.perf_counter()
        delta = now - self.last_lap
        self.last_lap = now
        return delta

    @property
    def total(self) -> float:
        return time.perf_counter() - self.start_time


@dataclass
class SimulationResult:
    """Everything a finished run hands back to its caller."""

    particles: List
    hamiltonian: Hamiltonian
    propagator: Propagator
    moments: Moments
    energy_steps: List[int] = field(default_factory=list)
    energies: List[float] = field(default_factory=list)


def build_hamiltonian(config: SimulationConfig) -> Hamiltonian:
    """
    Assemble the Hamiltonian for a configuration.

    Always contains the nonbonded Coulomb term; a dipole restraint is added
    when its spring constant is non-zero.
    """
    hamiltonian = Hamiltonian()
    pair_potential = Coulomb(bjerrum_length=config.bjerrum_length)
    hamiltonian.push(Nonbonded(pair_potential, device=config.torch_device))

    if config.dipole_spring_constant > 0.0:
        hamiltonian.push(
            DipoleConstraint(config.dipole_spring_constant, config.target_dipole)
        )
    return hamiltonian


def build_propagator(config: SimulationConfig) -> Propagator:
    """Displacement and charge swap moves, selected with equal probability."""
    propagator = Propagator()
    propagator.push(DisplaceParticle(angular_displacement=config.angular_displacement))
    propagator.push(SwapCharges())
    return propagator


def run_simulation(config: SimulationConfig, write_output: bool = True) -> SimulationResult:
    """
    Main simulation entry point.

    Args:
        config: Simulation configuration
        write_output: Write the coordinate file and GIFs when True

    Returns:
        SimulationResult with the final particles and statistics
    """
    rng = config.rng

    print(f"\n{'='*60}")
    print(f"CPPM Monte Carlo Simulation")
    print(f"{'='*60}")
    print(f"Sphere radius:  {config.radius} Å")
    print(f"Particles:      {config.num_total} "
          f"(+{config.num_plus} / -{config.num_minus} / 0×{config.num_neutral})")
    print(f"Bjerrum length: {config.bjerrum_length} Å")
    print(f"Steps:          {config.steps}")
    print(f"Device:         {config.device}")
    print(f"Seed:           {config.seed}")
    print(f"{'='*60}\n")

    particles = generate_particles(
        config.radius, config.num_total, config.num_plus, config.num_minus, rng
    )
    hamiltonian = build_hamiltonian(config)
    propagator = build_propagator(config)
    moments = Moments()
    result = SimulationResult(particles, hamiltonian, propagator, moments)

    sphere_plotter: Optional[SpherePlotter] = None
    if config.capture_frames:
        sphere_plotter = SpherePlotter()
        sphere_plotter.set_size(6, 6)

    timer = Timer()
    print(f"🔄 Running {config.steps} Monte Carlo steps...")

    # main Monte Carlo loop
    for step in range(1, config.steps + 1):
        propagator.step(hamiltonian, particles, rng)
        moments.sample(particles)

        if sphere_plotter is not None and step % config.frame_interval == 0:
            result.energy_steps.append(step)
            result.energies.append(hamiltonian.energy(particles))
            sphere_plotter.plot(particles, title=f"step {step}")
            sphere_plotter.capture_frame(dpi=config.frame_dpi)

        if step % PROGRESS_INTERVAL == 0 or step == config.steps:
            print(
                f"\r  ↳ [Step {step}/{config.steps}] "
                f"Total: {timer.total:.2f}s | "
                f"Last {PROGRESS_INTERVAL}: {timer.lap():.2f}s",
                end=""
            )

    print(f"\n✅ Monte Carlo complete in {timer.total:.2f}s\n")

    propagator.report()
    if moments.number_of_samples > 0:
        moments.report()
    print_global_properties(particles)

    if write_output:
        path = save_coordinates(config.output_file, particles)
        print(f"💾 Saved coordinates: {path}")

        if sphere_plotter is not None:
            _save_animations(config, sphere_plotter, result)

    if sphere_plotter is not None:
        sphere_plotter.close()

    return result


def _save_animations(
    config: SimulationConfig,
    sphere_plotter: SpherePlotter,
    result: SimulationResult
) -> None:
    """Write the configuration GIF and the energy trace figure."""
    config.output_dir.mkdir(parents=True, exist_ok=True)
    stem = config.output_file.stem

    sphere_plotter.save_gif(
        config.output_dir / f"{stem}_N{config.num_total}_{config.steps}steps.gif",
        duration=config.gif_duration,
        loop=0
    )

    energy_plotter = EnergyPlotter()
    energy_plotter.plot(result.energy_steps, result.energies)
    energy_path = config.output_dir / f"{stem}_energy.png"
    energy_plotter.fig.savefig(energy_path, dpi=config.frame_dpi)
    energy_plotter.close()
    print(f"✅ Saved energy trace: {energy_path}")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    p = argparse.ArgumentParser(
        description="Generates charged patchy particles by Monte Carlo sampling on a sphere"
    )
    p.add_argument('-o', '--file', type=str, required=True,
                   help="Output structure (.xyz or .pqr)")
    p.add_argument('-r', '--radius', type=float, default=20.0,
                   help="Sphere radius (Å)")
    p.add_argument('-s', '--steps', type=int, default=10000,
                   help="Number of Monte Carlo iterations")
    p.add_argument('-N', dest='num_total', type=int, default=643,
                   help="Total number of particles")
    p.add_argument('-p', '--plus', dest='num_plus', type=int, default=29,
                   help="Number of positive (+1e) particles")
    p.add_argument('-m', '--minus', dest='num_minus', type=int, default=37,
                   help="Number of negative (-1e) particles")
    p.add_argument('-b', '--bjerrum-length', type=float, default=7.0,
                   help="Bjerrum length (Å)")
    p.add_argument('--displacement', type=float, default=0.01,
                   help="Maximum angular displacement per move (radians)")
    p.add_argument('--dipole-k', type=float, default=0.0,
                   help="Spring constant of the dipole restraint (0 disables it)")
    p.add_argument('--dipole-target', type=float, default=0.0,
                   help="Target dipole moment |μ| of the restraint (eÅ)")
    p.add_argument('--seed', type=int, default=None,
                   help="Random seed for reproducibility")
    p.add_argument('--frame-interval', type=int, default=0,
                   help="Capture an animation frame every n steps (0 disables)")
    p.add_argument('--output-dir', type=str, default="./local/outputs",
                   help="Directory for animation output")
    return p.parse_args(argv)


def config_from_args(args: argparse.Namespace) -> SimulationConfig:
    """Build the configuration from parsed command line arguments."""
    return SimulationConfig(
        radius=args.radius,
        num_total=args.num_total,
        num_plus=args.num_plus,
        num_minus=args.num_minus,
        bjerrum_length=args.bjerrum_length,
        dipole_spring_constant=args.dipole_k,
        target_dipole=args.dipole_target,
        steps=args.steps,
        angular_displacement=args.displacement,
        seed=args.seed,
        output_file=args.file,
        output_dir=args.output_dir,
        frame_interval=args.frame_interval,
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point for the simulation."""
    args = parse_args(argv)

    try:
        config = config_from_args(args)
    except ValueError as err:
        raise SystemExit(f"error: {err}")

    run_simulation(config)


if __name__ == "__main__":
    main()
