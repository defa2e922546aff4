"""Tests for mesh export."""

import os
from pathlib import Path

import numpy as np
import pytest
import trimesh

from cadpipe.core.exporter import (
    ExportError,
    ExportResult,
    ExportSettings,
    MeshExporter,
    STLFormat,
    mesh_from_triangles,
)


@pytest.fixture
def exporter():
    """Create a MeshExporter instance."""
    return MeshExporter()


@pytest.fixture
def triangles(valid_mesh):
    """Triangles of a 10 x 10 x 10 cube."""
    return valid_mesh.triangles


class TestExportSettings:
    """Tests for ExportSettings class."""

    def test_default_settings(self):
        assert ExportSettings().stl_format == STLFormat.BINARY

    def test_file_types(self):
        settings = ExportSettings()

        assert settings.file_type(Path("a.stl")) == "stl"
        assert settings.file_type(Path("a.STL")) == "stl"
        assert settings.file_type(Path("a.obj")) == "obj"
        assert settings.file_type(Path("a.ply")) == "ply"
        assert ExportSettings(stl_format=STLFormat.ASCII).file_type(Path("a.stl")) == "stl_ascii"

    def test_unknown_format(self):
        with pytest.raises(ExportError, match="Unknown export format"):
            ExportSettings().file_type(Path("model.step"))

    def test_missing_extension(self):
        with pytest.raises(ExportError):
            ExportSettings().file_type(Path("model"))


class TestMeshFromTriangles:
    """Tests for mesh_from_triangles."""

    def test_merges_shared_vertices(self, triangles):
        mesh = mesh_from_triangles(triangles)

        assert len(mesh.faces) == 12
        assert len(mesh.vertices) == 8
        assert mesh.is_watertight

    def test_empty(self):
        mesh = mesh_from_triangles(np.zeros((0, 3, 3)))

        assert len(mesh.faces) == 0


class TestMeshExporter:
    """Tests for MeshExporter class."""

    def test_export_binary_stl(self, exporter, triangles, temp_dir):
        output_path = temp_dir / "test.stl"

        result = exporter.export(triangles, output_path)

        assert output_path.exists()
        assert result.file_path == output_path
        assert result.file_size_bytes == output_path.stat().st_size
        assert result.triangle_count == 12
        # Binary STL: 84 byte header + 50 bytes per triangle
        assert result.file_size_bytes == 84 + 50 * 12

    def test_export_ascii_stl(self, triangles, temp_dir):
        output_path = temp_dir / "test_ascii.stl"
        exporter = MeshExporter(ExportSettings(stl_format=STLFormat.ASCII))

        exporter.export(triangles, output_path)

        assert "solid" in output_path.read_text().lower()

    def test_export_obj(self, exporter, triangles, temp_dir):
        output_path = temp_dir / "test.obj"

        exporter.export(triangles, output_path)

        loaded = trimesh.load(str(output_path), force="mesh")
        assert len(loaded.faces) == 12

    def test_export_ply(self, exporter, triangles, temp_dir):
        output_path = temp_dir / "test.ply"

        exporter.export(triangles, output_path)

        loaded = trimesh.load(str(output_path), force="mesh")
        assert len(loaded.faces) == 12

    def test_round_trip_preserves_bounds(self, exporter, triangles, temp_dir):
        output_path = temp_dir / "bounds.stl"

        exporter.export(triangles, output_path)

        loaded = trimesh.load(str(output_path), force="mesh")
        assert np.allclose(loaded.bounds, [[-5, -5, -5], [5, 5, 5]])

    def test_export_creates_parent_dirs(self, exporter, triangles, temp_dir):
        output_path = temp_dir / "nested" / "dirs" / "test.stl"

        exporter.export(triangles, output_path)

        assert output_path.exists()

    def test_unknown_format_writes_nothing(self, exporter, triangles, temp_dir):
        output_path = temp_dir / "test.step"

        with pytest.raises(ExportError):
            exporter.export(triangles, output_path)

        assert not output_path.exists()

    @pytest.mark.skipif(
        hasattr(os, "geteuid") and os.geteuid() == 0,
        reason="root ignores file permissions",
    )
    def test_write_failure_keeps_os_error(self, exporter, triangles, temp_dir):
        locked = temp_dir / "locked"
        locked.mkdir()
        locked.chmod(0o500)

        try:
            with pytest.raises(ExportError) as exc_info:
                exporter.export(triangles, locked / "test.stl")
        finally:
            locked.chmod(0o700)

        assert isinstance(exc_info.value.__cause__, OSError)

    def test_parent_is_a_file(self, exporter, triangles, temp_dir):
        """Writing below a regular file fails with the OS error as cause."""
        blocker = temp_dir / "blocker"
        blocker.write_text("")

        with pytest.raises(ExportError) as exc_info:
            exporter.export(triangles, blocker / "test.stl")

        assert isinstance(exc_info.value.__cause__, OSError)


class TestExportResult:
    """Tests for ExportResult class."""

    def test_summary(self, temp_dir):
        result = ExportResult(
            file_path=temp_dir / "test.stl",
            file_size_bytes=2048,
            triangle_count=1200,
        )

        summary = result.summary()
        assert "Export Summary" in summary
        assert "2.0 KB" in summary
        assert "1,200" in summary
