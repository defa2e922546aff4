"""Shared test fixtures."""

import pytest
from pathlib import Path
import tempfile

import trimesh

from cadpipe.logging_config import reset_logger


@pytest.fixture(autouse=True)
def clean_logger():
    """Start every test with logging not yet initialized."""
    reset_logger()
    yield
    reset_logger()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_script(temp_dir):
    """Create a sample model script."""
    script = temp_dir / "sample.py"
    script.write_text('''
from build123d import *
from cadpipe import SolidModel, ModelMetadata

part = Box(20, 10, 5)

model = SolidModel(
    part=part,
    metadata=ModelMetadata(name="test_box", description="Test box")
)
''')
    return script


@pytest.fixture
def sample_stl(temp_dir):
    """Create a sample STL file."""
    mesh = trimesh.creation.box(extents=[10, 10, 10])
    stl_path = temp_dir / "sample.stl"
    mesh.export(str(stl_path))
    return stl_path


@pytest.fixture
def valid_mesh():
    """Create a valid watertight mesh."""
    return trimesh.creation.box(extents=[10, 10, 10])


@pytest.fixture
def non_watertight_mesh():
    """Create a mesh with holes (not watertight)."""
    mesh = trimesh.creation.box(extents=[10, 10, 10])
    # Remove the top face by filtering triangles
    mask = mesh.face_normals[:, 2] < 0.9
    mesh.update_faces(mask)
    return mesh


@pytest.fixture
def faceless_mesh():
    """Two loose vertices and no triangles."""
    return trimesh.Trimesh(vertices=[[0, 0, 0], [1, 2, 3]], faces=[])


@pytest.fixture
def flat_mesh():
    """A 2 x 4 rectangle in the XY plane, made of two triangles."""
    return trimesh.Trimesh(
        vertices=[[0, 0, 0], [2, 0, 0], [2, 4, 0], [0, 4, 0]],
        faces=[[0, 1, 2], [0, 2, 3]],
    )


class FakeViewer:
    """Records meshes instead of opening a viewer."""

    def __init__(self, error=None):
        self.error = error
        self.displayed = []

    def spawn_and_display(self, mesh, name=None):
        if self.error is not None:
            raise self.error
        self.displayed.append((mesh, name))


@pytest.fixture
def fake_viewer():
    return FakeViewer()


@pytest.fixture
def make_viewer():
    """Factory for fake viewers, e.g. ``make_viewer(error=ViewerError("boom"))``."""
    return FakeViewer
