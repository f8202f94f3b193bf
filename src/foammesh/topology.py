"""Cell adjacency from owner/neighbour face lists.

OpenFOAM stores connectivity face-wise: ``owner[f]`` is the cell on the
canonical side of face ``f`` and ``neighbour[f]`` the cell on the other side,
for internal faces only (internal faces come first). This module turns those
lists into per-cell face and neighbour lists. Boundary faces get the
``boundary_id`` of their patch in the neighbour slot, so every face has a
neighbour entry and a negative entry always means "boundary".
"""

import logging
from typing import Dict, Sequence

import numpy as np

from foammesh.config import DEFAULT_BOUNDARY_ID_START
from foammesh.datastructures import BoundaryPatch, Topology
from foammesh.errors import StructuralError

log = logging.getLogger(__name__)


def set_boundary_faces(
    neighbors: Sequence[int],
    num_faces: int,
    boundary: Dict[str, BoundaryPatch],
    placeholder: int = DEFAULT_BOUNDARY_ID_START,
) -> np.ndarray:
    """Extend ``neighbors`` to one entry per face, filling in boundary ids.

    Faces past the internal ones start out as ``placeholder`` and are then
    overwritten with the ``boundary_id`` of the patch whose face range holds
    them. Overlapping patch ranges are not detected; the patch applied last
    wins.
    """
    num_inner_faces = len(neighbors)
    if num_inner_faces > num_faces:
        raise StructuralError(
            f"{num_inner_faces} neighbours given for only {num_faces} faces"
        )

    extended = np.full(num_faces, placeholder, dtype=np.int64)
    extended[:num_inner_faces] = np.asarray(neighbors, dtype=np.int64)
    for patch in boundary.values():
        if patch.start_face < 0 or patch.end_face > num_faces:
            raise StructuralError(
                f"Boundary patch '{patch.name}' covers faces "
                f"{patch.start_face}..{patch.end_face - 1}, "
                f"but the mesh has {num_faces} faces"
            )
        extended[patch.start_face : patch.end_face] = patch.boundary_id
    return extended


def build_topology(
    owners: Sequence[int],
    neighbors: Sequence[int],
    boundary: Dict[str, BoundaryPatch],
    placeholder: int = DEFAULT_BOUNDARY_ID_START,
) -> Topology:
    """Build cell-centric adjacency.

    Parameters
    ----------
    owners : sequence of int
        Owner cell per face (all faces).
    neighbors : sequence of int
        Neighbour cell per internal face.
    boundary : dict
        Boundary patches keyed by name.
    placeholder : int
        Neighbour value for boundary faces not covered by any patch.

    Returns
    -------
    Topology
        Extended neighbour array plus ``cell_faces`` and ``cell_neighbors``,
        which are parallel per cell. Per-cell entries are tuples, so the
        adjacency cannot be changed after construction.
    """
    owners = np.asarray(owners, dtype=np.int64)
    num_faces = len(owners)
    num_inner_faces = len(neighbors)
    if num_faces and owners.min() < 0:
        raise StructuralError(f"Negative owner cell index {int(owners.min())}")

    extended = set_boundary_faces(neighbors, num_faces, boundary, placeholder)

    num_cells = int(owners.max()) + 1 if num_faces else 0
    max_neighbor = int(extended.max()) + 1 if num_faces else 0
    cell_count = max(num_cells, max_neighbor)

    cell_faces = [[] for _ in range(cell_count)]
    cell_neighbors = [[] for _ in range(cell_count)]
    for face, (owner, neighbor) in enumerate(zip(owners.tolist(), extended.tolist())):
        cell_faces[owner].append(face)
        if neighbor >= 0:
            cell_faces[neighbor].append(face)
            cell_neighbors[neighbor].append(owner)
        cell_neighbors[owner].append(neighbor)

    log.debug(
        f"Built topology: {num_cells} cells, {num_faces} faces "
        f"({num_inner_faces} internal)"
    )
    extended.setflags(write=False)
    return Topology(
        neighbors=extended,
        cell_faces=tuple(tuple(faces) for faces in cell_faces),
        cell_neighbors=tuple(tuple(adjacent) for adjacent in cell_neighbors),
        num_cells=num_cells,
        num_inner_faces=num_inner_faces,
    )
