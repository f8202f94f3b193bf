"""Tests for building cell adjacency from owner/neighbour lists.

Tests:
- Hand-checked adjacency on a 2 x 2 x 1 box
- Parallel cell_faces / cell_neighbors and adjacency symmetry on the cavity
- Boundary sentinels and placeholder handling
"""

import numpy as np
import pytest

from foammesh.datastructures import BoundaryPatch
from foammesh.errors import StructuralError
from foammesh.topology import build_topology, set_boundary_faces


def patches_of(mesh, boundary_id_start=-10):
    return {
        name: BoundaryPatch(name, patch_type, n, start, boundary_id_start - i)
        for i, (name, patch_type, n, start) in enumerate(mesh.patches)
    }


@pytest.fixture
def small_topology(small_mesh):
    return build_topology(small_mesh.owners, small_mesh.neighbors, patches_of(small_mesh))


@pytest.fixture(scope="module")
def cavity_topology(cavity_mesh):
    return build_topology(
        cavity_mesh.owners, cavity_mesh.neighbors, patches_of(cavity_mesh)
    )


class TestSmallBox:
    """Adjacency of the 2 x 2 x 1 box, checked by hand."""

    def test_sizes(self, small_topology):
        assert small_topology.num_cells == 4
        assert small_topology.num_inner_faces == 4
        assert small_topology.num_faces == 20

    def test_extended_neighbors(self, small_topology):
        expected = [1, 2, 3, 3] + [-10] * 2 + [-11] * 6 + [-12] * 8
        assert small_topology.neighbors.tolist() == expected

    def test_corner_cell(self, small_topology):
        assert small_topology.cell_faces[0] == (0, 1, 6, 10, 12, 16)
        assert small_topology.cell_neighbors[0] == (1, 2, -11, -11, -12, -12)

    def test_neighbor_side_entries(self, small_topology):
        # cell 3 only owns boundary faces; its internal faces come from
        # the neighbour side of faces 2 and 3
        assert small_topology.cell_faces[3] == (2, 3, 5, 9, 15, 19)
        assert small_topology.cell_neighbors[3] == (1, 2, -10, -11, -12, -12)


class TestInvariants:
    """Properties that hold for every cell of the cavity."""

    def test_parallel_lists(self, cavity_topology):
        for faces, neighbors in zip(
            cavity_topology.cell_faces, cavity_topology.cell_neighbors
        ):
            assert len(faces) == len(neighbors)

    def test_hexahedra_have_six_faces(self, cavity_topology):
        assert {len(faces) for faces in cavity_topology.cell_faces} == {6}

    def test_face_to_neighbor_correspondence(self, cavity_mesh, cavity_topology):
        owners = cavity_mesh.owners
        neighbors = cavity_topology.neighbors
        for cell, (faces, adjacent) in enumerate(
            zip(cavity_topology.cell_faces, cavity_topology.cell_neighbors)
        ):
            for face, other in zip(faces, adjacent):
                if owners[face] == cell:
                    assert other == neighbors[face]
                else:
                    assert neighbors[face] == cell
                    assert other == owners[face]

    def test_symmetry(self, cavity_mesh, cavity_topology):
        for face in range(cavity_topology.num_inner_faces):
            owner = cavity_mesh.owners[face]
            neighbor = cavity_mesh.neighbors[face]
            assert neighbor in cavity_topology.cell_neighbors[owner]
            assert owner in cavity_topology.cell_neighbors[neighbor]

    def test_sentinels_come_from_patches(self, cavity_mesh, cavity_topology):
        ids = {p.boundary_id for p in patches_of(cavity_mesh).values()}
        for adjacent in cavity_topology.cell_neighbors:
            for other in adjacent:
                assert other >= 0 or other in ids

    def test_boundary_faces_match_patch_ranges(self, cavity_mesh, cavity_topology):
        in_patch = np.zeros(cavity_topology.num_faces, dtype=bool)
        for _, _, n, start in cavity_mesh.patches:
            in_patch[start : start + n] = True
        assert np.array_equal(cavity_topology.neighbors < 0, in_patch)


class TestBoundaryFaces:
    """Tests for set_boundary_faces."""

    def test_uncovered_faces_keep_placeholder(self):
        patch = BoundaryPatch("wall", "wall", 1, 2, -10)
        extended = set_boundary_faces([1], 4, {"wall": patch}, placeholder=-99)
        assert extended.tolist() == [1, -99, -10, -99]

    def test_overlapping_patches_are_not_detected(self):
        a = BoundaryPatch("a", "patch", 2, 1, -10)
        b = BoundaryPatch("b", "patch", 2, 2, -11)
        extended = set_boundary_faces([1], 4, {"a": a, "b": b})
        assert extended.tolist() == [1, -10, -11, -11]

    def test_patch_past_last_face(self):
        patch = BoundaryPatch("wall", "wall", 5, 2, -10)
        with pytest.raises(StructuralError, match="wall"):
            set_boundary_faces([1], 4, {"wall": patch})

    def test_more_neighbors_than_faces(self):
        with pytest.raises(StructuralError):
            set_boundary_faces([1, 2, 3], 2, {})


def test_neighbor_index_beyond_owner_cells():
    # Cell 2 never owns a face but appears as a neighbour
    topology = build_topology([0, 1, 0], [2], {})
    assert topology.num_cells == 2
    assert len(topology.cell_faces) == 3
    assert topology.cell_faces[2] == (0,)
    assert topology.cell_neighbors[2] == (0,)


def test_empty_mesh():
    topology = build_topology([], [], {})
    assert topology.num_cells == 0
    assert topology.cell_faces == ()


def test_negative_owner():
    with pytest.raises(StructuralError, match="owner"):
        build_topology([0, -1], [], {})


def test_adjacency_is_immutable(small_topology):
    with pytest.raises(AttributeError):
        small_topology.cell_neighbors[0].append(-10)
    with pytest.raises(TypeError):
        small_topology.cell_faces[0] = (0,)
