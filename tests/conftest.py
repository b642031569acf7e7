"""Pytest fixtures for Fireworks tests."""
import pytest


@pytest.fixture
def sim():
    """A started, seeded Simulation with auto-launch off."""
    from fireworks.core.config import Config
    from fireworks.core.simulation import Simulation
    s = Simulation(Config(auto_launch=False), seed=1234)
    s.start()
    return s


@pytest.fixture
def show():
    """A started, seeded Simulation with auto-launch on."""
    from fireworks.core.config import Config
    from fireworks.core.simulation import Simulation
    s = Simulation(Config(auto_launch=True), seed=42)
    s.start()
    return s


@pytest.fixture
def run_frames():
    """Advance a simulation by a number of 60 FPS frames."""
    def run(s, frames: int, frame_time: float = 1000 / 60) -> None:
        for _ in range(frames):
            s.update(frame_time, 1.0)
    return run
