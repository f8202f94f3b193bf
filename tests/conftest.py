"""Pytest configuration and fixtures for the OpenFOAM reader tests."""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from foam_case import build_box_mesh, write_case  # noqa: E402


@pytest.fixture(scope="session")
def cavity_mesh():
    """40 x 40 x 2 cavity: 3200 cells, 11360 faces, 5043 points."""
    return build_box_mesh(40, 40, 2, lx=0.1, ly=0.1, lz=0.01)


@pytest.fixture(scope="session")
def cavity_case(tmp_path_factory, cavity_mesh):
    """Case directory holding the cavity mesh plus ``0.5/C`` and ``0/U``."""
    return write_case(tmp_path_factory.mktemp("cavity"), cavity_mesh)


@pytest.fixture
def small_mesh():
    """2 x 2 x 1 box: 4 cells, 4 internal faces, 20 faces in total."""
    return build_box_mesh(2, 2, 1)


@pytest.fixture
def small_case(tmp_path, small_mesh):
    return write_case(tmp_path / "small", small_mesh)
