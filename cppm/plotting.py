"""
Visualization tools for charged patchy particle configurations.

This module provides plotting classes for snapshots of the particles on
the sphere and for the energy trace of a run, with built-in support for
animation frame capture and GIF generation.
"""

import io
import numpy as np
import matplotlib.pyplot as plt
from PIL import Image
from pathlib import Path
from typing import Optional, Sequence

# Camera and colors
DEFAULT_ELEVATION = 20
DEFAULT_AZIMUTH = 45
CHARGE_COLORS = {1: "tab:red", -1: "tab:blue", 0: "lightgray"}


class FrameCapture:
    """Buffer of rendered figures that can be written out as an animated GIF."""

    def __init__(self):
        """Start with no frames."""
        self.frames: list[Image.Image] = []

    def capture(self, fig: plt.Figure, dpi: int = 64) -> None:
        """
        Render the figure and append it to the buffer as a PNG image.

        Args:
            fig: Matplotlib figure to capture
            dpi: Resolution in dots per inch
        """
        fig.canvas.draw()
        buf = io.BytesIO()
        fig.savefig(buf, format='png', dpi=dpi)
        buf.seek(0)
        self.frames.append(Image.open(buf))

    def save_gif(
            self,
            output_path: Path | str,
            duration: int = 40,
            loop: int = 0
    ) -> Optional[Path]:
        """
        Write the buffered frames to an animated GIF and clear the buffer.

        Args:
            output_path: Output file path
            duration: Duration per frame in milliseconds
            loop: Number of loops (0 = infinite)

        Returns:
            Path of the GIF, or None when no frames were captured
        """
        if not self.frames:
            print("⚠️  No frames captured, skipping GIF save")
            return None

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        self.frames[0].save(
            output_path,
            save_all=True,
            append_images=self.frames[1:],
            optimize=False,
            duration=duration,
            loop=loop
        )

        print(f"✅ Saved GIF: {output_path}")
        self.frames = []
        return output_path


class BasePlotter:
    """
    Common figure handling for the CPPM plotters.

    Owns one figure and axes pair and a FrameCapture for animations.
    """

    def __init__(self, fig: Optional[plt.Figure] = None, ax=None):
        """
        Args:
            fig: Matplotlib figure (creates new if None)
            ax: Matplotlib axes (creates new if None)
        """
        self.fig = fig if fig else plt.figure()
        self.ax = ax if ax else self.fig.add_subplot(111)
        self.frame_capture = FrameCapture()

    def set_size(self, width: float, height: float) -> None:
        """Set figure size in inches."""
        self.fig.set_figwidth(width)
        self.fig.set_figheight(height)

    def capture_frame(self, dpi: int = 64) -> None:
        """Append the current figure to the frame buffer."""
        self.frame_capture.capture(self.fig, dpi=dpi)

    def save_gif(
            self,
            output_path: Path | str,
            duration: int = 40,
            loop: int = 0
    ) -> Optional[Path]:
        """Write buffered frames to a GIF, see FrameCapture.save_gif."""
        return self.frame_capture.save_gif(output_path, duration, loop)

    def close(self) -> None:
        """Release the figure."""
        plt.close(self.fig)

    def plot(self, *args, **kwargs):
        """Plot data. Must be implemented by subclasses."""
        raise NotImplementedError("Subclasses must implement plot()")


class SpherePlotter(BasePlotter):
    """
    3D scatter of the particles on their sphere.

    Cations are drawn red, anions blue and neutral particles gray.
    """

    def __init__(
            self,
            fig: Optional[plt.Figure] = None,
            ax=None,
            marker_size: float = 12.0
    ):
        """
        Initialize 3D plotter.

        Args:
            fig: Matplotlib figure
            ax: 3D axes (will create if None)
            marker_size: Scatter marker size in points²
        """
        if ax is None:
            fig = fig if fig else plt.figure()
            ax = fig.add_subplot(111, projection="3d")

        super().__init__(fig, ax)
        self.marker_size = marker_size

    def plot(self, particles: Sequence, title: Optional[str] = None) -> None:
        """
        Plot a particle configuration.

        Args:
            particles: Particle list
            title: Optional axes title
        """
        self.ax.clear()
        self.ax.set_axis_off()

        positions = np.stack([p.position for p in particles])
        charges = np.sign([p.charge for p in particles]).astype(int)
        colors = [CHARGE_COLORS[q] for q in charges]

        half_range = particles[0].radius * 1.1
        self.ax.set_xlim(-half_range, half_range)
        self.ax.set_ylim(-half_range, half_range)
        self.ax.set_zlim(-half_range, half_range)
        self.ax.set_box_aspect([1, 1, 1])
        self.ax.view_init(elev=DEFAULT_ELEVATION, azim=DEFAULT_AZIMUTH)

        x, y, z = positions.T
        self.ax.scatter(x, y, z, c=colors, s=self.marker_size, depthshade=True)

        if title:
            self.ax.set_title(title)


class EnergyPlotter(BasePlotter):
    """Energy trace of a Monte Carlo run."""

    def plot(self, steps: Sequence[int], energies: Sequence[float]) -> None:
        """
        Plot sampled total energies.

        Args:
            steps: Monte Carlo step of each sample
            energies: Total energy (kT) of each sample
        """
        self.ax.clear()
        self.ax.plot(steps, energies, lw=1.5)
        self.ax.set_xlabel("Monte Carlo step")
        self.ax.set_ylabel("Energy (kT)")
        self.ax.set_title("Total energy")


__all__ = [
    'FrameCapture',
    'BasePlotter',
    'SpherePlotter',
    'EnergyPlotter',
]
