"""Data structures for mesh topology and boundary patches.

Structure:
- BoundaryPatch: one entry of a polyMesh ``boundary`` file
- Topology: cell-centric adjacency built from owner/neighbour lists
- CellRef: what lies on the other side of a face (a cell or a patch)
"""

from dataclasses import dataclass, asdict
from typing import Dict, Optional, Tuple, Union

import numpy as np
import pandas as pd


# ========================================================
# Boundary
# ========================================================


@dataclass(frozen=True)
class BoundaryPatch:
    """A named, contiguous range of boundary faces.

    ``boundary_id`` is the negative sentinel written into the neighbour slot
    of every face in ``[start_face, start_face + num_faces)``.
    """

    name: str
    patch_type: str
    num_faces: int
    start_face: int
    boundary_id: int

    @property
    def end_face(self) -> int:
        """One past the last face of the patch."""
        return self.start_face + self.num_faces

    def face_range(self) -> range:
        return range(self.start_face, self.end_face)

    def contains_face(self, face_id: int) -> bool:
        return self.start_face <= face_id < self.end_face


def boundary_to_dataframe(boundary: Dict[str, BoundaryPatch]) -> pd.DataFrame:
    """One row per patch, in file order."""
    columns = ["name", "patch_type", "num_faces", "start_face", "boundary_id"]
    return pd.DataFrame([asdict(p) for p in boundary.values()], columns=columns)


# ========================================================
# Cell references
# ========================================================


@dataclass(frozen=True)
class InternalCell:
    """The other side of the face is a cell."""

    cell: int

    @property
    def sentinel(self) -> int:
        return self.cell

    @property
    def is_boundary(self) -> bool:
        return False


@dataclass(frozen=True)
class BoundaryRef:
    """The other side of the face is a boundary patch.

    ``patch`` is None when no patch carries ``boundary_id`` (a boundary face
    that no patch range covers keeps the placeholder sentinel).
    """

    boundary_id: int
    patch: Optional[str] = None

    @property
    def sentinel(self) -> int:
        return self.boundary_id

    @property
    def is_boundary(self) -> bool:
        return True


CellRef = Union[InternalCell, BoundaryRef]


def cell_ref_from_sentinel(
    value: int, patch_names: Optional[Dict[int, str]] = None
) -> CellRef:
    """Decode a raw neighbour entry (cell index or negative sentinel)."""
    value = int(value)
    if value >= 0:
        return InternalCell(value)
    name = patch_names.get(value) if patch_names else None
    return BoundaryRef(value, name)


# ========================================================
# Topology
# ========================================================


@dataclass
class Topology:
    """Cell-centric adjacency derived from face lists.

    ``cell_faces[c]`` and ``cell_neighbors[c]`` are parallel: entry ``k`` of
    ``cell_neighbors[c]`` is the cell (or boundary sentinel) across face
    ``cell_faces[c][k]``.
    """

    neighbors: np.ndarray  # one entry per face, boundary faces hold sentinels
    cell_faces: Tuple[Tuple[int, ...], ...]
    cell_neighbors: Tuple[Tuple[int, ...], ...]
    num_cells: int
    num_inner_faces: int

    @property
    def num_faces(self) -> int:
        return len(self.neighbors)
