"""Tests for the count-then-data list readers.

Tests:
- parse_scalars / read_scalars (owner, neighbour)
- parse_points / read_points
- parse_faces / read_faces
- count mismatches and structural errors
"""

import numpy as np
import pytest

from foam_case import foam_header, foam_list
from foammesh.errors import (
    CountMismatchError,
    FoamFileReadError,
    StructuralError,
    UnsupportedFormatError,
)
from foammesh.parsing.lists import (
    parse_faces,
    parse_points,
    parse_scalars,
    read_faces,
    read_points,
    read_scalars,
)


# =============================================================================
# Scalars
# =============================================================================


class TestScalars:
    """Tests for the scalar-list reader."""

    def test_reads_declared_values(self):
        text = foam_list("labelList", "owner", ["42", "0", "3"])
        values = parse_scalars(text)
        assert values.tolist() == [42, 0, 3]

    def test_comments_and_blank_lines_are_skipped(self):
        body = "\n".join(["3", "", "(", "1", "// a comment", "", "2", "3", ")"])
        text = foam_header("labelList", "owner") + body
        assert parse_scalars(text).tolist() == [1, 2, 3]

    def test_float_values(self):
        text = foam_list("scalarField", "p", ["0.5", "-1e-3", "2"])
        values = parse_scalars(text, scalar_type=float)
        assert np.allclose(values, [0.5, -1e-3, 2.0])

    def test_count_mismatch(self):
        body = "\n".join(["4", "(", "1", "2", "3", ")"])
        text = foam_header("labelList", "owner") + body
        with pytest.raises(CountMismatchError) as excinfo:
            parse_scalars(text)
        assert excinfo.value.expected == 4
        assert excinfo.value.found == 3

    def test_empty_list(self):
        text = foam_list("labelList", "neighbour", [])
        assert len(parse_scalars(text)) == 0

    def test_missing_count(self):
        text = foam_header("labelList", "owner") + "(\n)\n"
        with pytest.raises(StructuralError):
            parse_scalars(text)

    def test_skip_parameter(self):
        # Without skipping, the first integer line is taken as the count
        text = "2\n(\n7\n8\n)\n"
        assert parse_scalars(text, skip=0).tolist() == [7, 8]
        with pytest.raises(StructuralError):
            parse_scalars(text, skip=5)

    def test_read_cavity_owners(self, cavity_case):
        owners = read_scalars(cavity_case / "constant/polyMesh/owner")
        assert len(owners) == 11360
        assert owners[0] == 0
        assert owners[11359] == 3199


# =============================================================================
# Points
# =============================================================================


class TestPoints:
    """Tests for the point-list reader."""

    def test_reads_points(self):
        text = foam_list("vectorField", "points", ["(42 0 1)", "(3 2.001 13.37)"])
        points = parse_points(text)
        assert points.shape == (2, 3)
        assert np.allclose(points[1], [3.0, 2.001, 13.37])

    def test_points_are_read_only(self):
        points = parse_points(foam_list("vectorField", "points", ["(0 0 0)"]))
        with pytest.raises(ValueError):
            points[0, 0] = 1.0

    def test_non_bracket_lines_are_skipped(self):
        body = "\n".join(["2", "(", "// comment", "(0 0 0)", "", "(1 1 1)", ")"])
        points = parse_points(foam_header("vectorField", "points") + body)
        assert len(points) == 2

    def test_bad_point_is_structural_error(self):
        text = foam_list("vectorField", "points", ["(0 0 0)", "(1 1)"])
        with pytest.raises(StructuralError) as excinfo:
            parse_points(text)
        assert excinfo.value.line == "(1 1)"
        # 17 header lines, count, "(", first point, then the bad one
        assert excinfo.value.lineno == 21

    def test_count_mismatch(self):
        body = "\n".join(["3", "(", "(0 0 0)", "(1 1 1)", ")"])
        with pytest.raises(CountMismatchError):
            parse_points(foam_header("vectorField", "points") + body)

    def test_read_cavity_points(self, cavity_case):
        points = read_points(cavity_case / "constant/polyMesh/points")
        assert len(points) == 5043
        assert np.allclose(points[0], [0.0, 0.0, 0.0])
        assert np.allclose(points[5042], [0.1, 0.1, 0.01])


# =============================================================================
# Faces
# =============================================================================


class TestFaces:
    """Tests for the face-list reader."""

    def test_winding_order_is_kept(self):
        text = foam_list("faceList", "faces", ["4(1 42 1723 1682)", "3(2 3 4)"])
        faces = parse_faces(text)
        assert faces == [[1, 42, 1723, 1682], [2, 3, 4]]

    def test_vertex_count_mismatch(self):
        text = foam_list("faceList", "faces", ["4(1 42 1723 1682)", "4(2 3 4)"])
        with pytest.raises(StructuralError) as excinfo:
            parse_faces(text)
        assert excinfo.value.lineno == 21
        assert "4(2 3 4)" in str(excinfo.value)

    def test_count_mismatch(self):
        body = "\n".join(["3", "(", "3(0 1 2)", "3(1 2 3)", ")"])
        with pytest.raises(CountMismatchError):
            parse_faces(foam_header("faceList", "faces") + body)

    def test_read_cavity_faces(self, cavity_case):
        faces = read_faces(cavity_case / "constant/polyMesh/faces")
        assert len(faces) == 11360
        assert faces[0] == [1, 42, 1723, 1682]


# =============================================================================
# Path-based readers
# =============================================================================


class TestReadFromPath:
    """Tests for error reporting of the path-based readers."""

    def test_missing_file(self, tmp_path):
        missing = tmp_path / "owner"
        with pytest.raises(FoamFileReadError) as excinfo:
            read_scalars(missing)
        assert excinfo.value.path == str(missing)
        assert str(missing) in str(excinfo.value)

    def test_missing_file_is_oserror(self, tmp_path):
        with pytest.raises(OSError):
            read_points(tmp_path / "points")

    def test_parse_error_carries_path(self, tmp_path):
        path = tmp_path / "faces"
        path.write_text(foam_list("faceList", "faces", ["4(1 2 3)"]))
        with pytest.raises(StructuralError) as excinfo:
            read_faces(path)
        assert excinfo.value.path == str(path)
        assert str(excinfo.value).startswith(str(path))

    def test_binary_format_is_rejected(self, tmp_path):
        path = tmp_path / "owner"
        path.write_text(foam_list("labelList", "owner", ["0"], fmt="binary"))
        with pytest.raises(UnsupportedFormatError):
            read_scalars(path)

    def test_undecodable_bytes_are_rejected(self, tmp_path):
        path = tmp_path / "owner"
        path.write_bytes(b"\xff\xfe\x00\x01binary owner data")
        with pytest.raises(UnsupportedFormatError) as excinfo:
            read_scalars(path)
        assert excinfo.value.path == str(path)
        assert "utf-8" in str(excinfo.value)
