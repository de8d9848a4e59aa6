"""Tests for the sphere and energy plotters."""

import pytest
from PIL import Image

from cppm import EnergyPlotter, SpherePlotter
from cppm.plotting import BasePlotter, FrameCapture


def test_sphere_plotter_gif(tmp_path, particles) -> None:
    plotter = SpherePlotter()
    plotter.set_size(3, 3)
    for step in range(3):
        plotter.plot(particles, title=f"step {step}")
        plotter.capture_frame(dpi=30)

    path = plotter.save_gif(tmp_path / "nested" / "sphere.gif", duration=20)
    plotter.close()

    assert path.exists()
    with Image.open(path) as gif:
        assert gif.n_frames == 3
    assert plotter.frame_capture.frames == []


def test_sphere_plot_draws_every_particle(particles) -> None:
    plotter = SpherePlotter()
    plotter.plot(particles)
    offsets = plotter.ax.collections[0].get_offsets()
    assert len(offsets) == len(particles)
    plotter.close()


def test_empty_capture_skips_gif(tmp_path, capsys) -> None:
    assert FrameCapture().save_gif(tmp_path / "empty.gif") is None
    assert not (tmp_path / "empty.gif").exists()
    assert "No frames captured" in capsys.readouterr().out


def test_energy_plotter(tmp_path) -> None:
    plotter = EnergyPlotter()
    plotter.plot([1, 2, 3], [-1.0, -2.0, -2.5])
    line = plotter.ax.get_lines()[0]
    assert list(line.get_ydata()) == [-1.0, -2.0, -2.5]
    plotter.fig.savefig(tmp_path / "energy.png")
    plotter.close()
    assert (tmp_path / "energy.png").exists()


def test_base_plotter_is_abstract() -> None:
    plotter = BasePlotter()
    with pytest.raises(NotImplementedError):
        plotter.plot()
    plotter.close()
