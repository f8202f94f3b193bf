"""FoamMesh: mesh topology of an OpenFOAM case plus attached fields.

The mesh is read from ``<case>/constant/polyMesh/`` (points, faces, owner,
neighbour, boundary). Construction is all-or-nothing: if any file fails to
parse, no mesh is returned.

Indexing conventions:
- Face-based arrays (owners, neighbors) use face indexing (0 to n_faces-1).
- Cell-based lists (cell_faces, cell_neighbors) and fields use cell indexing.
- ``neighbors`` has full-face length. Boundary faces hold the negative
  ``boundary_id`` of their patch (-10, -11, ... in file order).

Example::

    mesh = FoamMesh.from_case("cavity")
    mesh.read_cell_centers("cavity/0.5/C")
    flow = read_internal_field("cavity/0.5/U", parse_vector3)
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

import numpy as np
import pandas as pd

from foammesh.config import DEFAULT_BOUNDARY_ID_START, as_reader_config
from foammesh.datastructures import (
    BoundaryPatch,
    CellRef,
    boundary_to_dataframe,
    cell_ref_from_sentinel,
)
from foammesh.parsing.boundary import read_boundary
from foammesh.parsing.fields import Decoder, read_internal_field
from foammesh.parsing.lists import read_faces, read_points, read_scalars
from foammesh.parsing.values import parse_point3, parse_scalar
from foammesh.topology import build_topology

log = logging.getLogger(__name__)

CELL_CENTERS = "cell_centers"


class FoamMesh:
    """Mesh topology with boundary queries.

    Use FoamMesh.from_case to read a case directory. The topology is fixed
    after construction; only attached fields may be replaced.
    """

    def __init__(
        self,
        path: Union[str, Path],
        boundary: Dict[str, BoundaryPatch],
        points: np.ndarray,
        faces: List[List[int]],
        owners: np.ndarray,
        neighbors: np.ndarray,
        boundary_id_start: int = DEFAULT_BOUNDARY_ID_START,
        encoding: str = "utf-8",
    ):
        topology = build_topology(owners, neighbors, boundary, boundary_id_start)
        owners = np.array(owners, dtype=np.int64)
        owners.setflags(write=False)

        self.path = Path(path)
        self.boundary = boundary
        self.points = points
        # A face is a list of point indices; each face also appears in
        # owners and neighbors at the same position.
        self.faces = tuple(tuple(face) for face in faces)
        self.owners = owners
        self.neighbors = topology.neighbors
        self.cell_faces = topology.cell_faces
        self.cell_neighbors = topology.cell_neighbors
        self.fields: Dict[str, np.ndarray] = {}
        # Field files are read with the same encoding as the mesh
        self.encoding = encoding

        # Geometry is not computed by the readers
        self.cell_volumes = None
        self.face_areas = None

        self._num_cells = topology.num_cells
        self._num_inner_faces = topology.num_inner_faces
        self._patch_names = {p.boundary_id: name for name, p in boundary.items()}

    @classmethod
    def from_case(cls, case_dir: Union[str, Path], config=None) -> "FoamMesh":
        """Read the mesh of a case directory.

        Parameters
        ----------
        case_dir : str or Path
            Case root; mesh files are looked up under ``config.mesh_dir``.
        config : ReaderConfig or mapping, optional
            Reader settings (header lines to skip, sentinel start, ...).
        """
        cfg = as_reader_config(config)
        mesh_dir = cfg.mesh_path(case_dir)
        skip, enc = cfg.skip_lines, cfg.encoding

        boundary = read_boundary(
            mesh_dir / "boundary",
            skip=skip,
            boundary_id_start=cfg.boundary_id_start,
            max_blank_lines=cfg.max_blank_lines,
            encoding=enc,
        )
        faces = read_faces(mesh_dir / "faces", skip=skip, encoding=enc)
        owners = read_scalars(mesh_dir / "owner", skip=skip, encoding=enc)
        # OpenFOAM uses the British spelling
        neighbors = read_scalars(mesh_dir / "neighbour", skip=skip, encoding=enc)
        points = read_points(mesh_dir / "points", skip=skip, encoding=enc)

        mesh = cls(
            case_dir,
            boundary,
            points,
            faces,
            owners,
            neighbors,
            cfg.boundary_id_start,
            cfg.encoding,
        )
        log.info(
            f"Read mesh from {mesh_dir}: {mesh.num_cells()} cells, "
            f"{mesh.num_faces()} faces, {mesh.num_points()} points, "
            f"{len(boundary)} patches"
        )
        return mesh

    # =========================================================================
    # Fields
    # =========================================================================

    def attach_field(
        self,
        path: Union[str, Path],
        decoder: Decoder = parse_scalar,
        name: Optional[str] = None,
    ) -> np.ndarray:
        """Read the internal field at ``path`` and store it under ``name``.

        ``name`` defaults to the file name (``U`` for ``0.5/U``). A field
        already stored under that name is replaced. The file is decoded with
        the mesh's ``encoding``.
        """
        name = name or Path(path).name
        values = read_internal_field(path, decoder, self.encoding)
        if name in self.fields:
            log.debug(f"Replacing field '{name}'")
        self.fields[name] = values
        log.info(f"Attached field '{name}' ({len(values)} values) from {path}")
        return values

    def read_cell_centers(self, path: Union[str, Path]) -> np.ndarray:
        """Read cell center coordinates (e.g. ``0/C``).

        Such a file can be generated by running
        ``postProcess -func writeCellCentres -time 0``.
        """
        return self.attach_field(path, parse_point3, name=CELL_CENTERS)

    @property
    def cell_centers(self) -> Optional[np.ndarray]:
        return self.fields.get(CELL_CENTERS)

    def field(self, name: str) -> Optional[np.ndarray]:
        return self.fields.get(name)

    # =========================================================================
    # Sizes
    # =========================================================================

    def num_cells(self) -> int:
        return self._num_cells

    def num_inner_faces(self) -> int:
        return self._num_inner_faces

    def num_faces(self) -> int:
        return len(self.owners)

    def num_points(self) -> int:
        return len(self.points)

    # =========================================================================
    # Topology queries
    # =========================================================================

    def _has_cell(self, cell_id: int) -> bool:
        # Cells that only appear as a neighbour have adjacency entries too
        return 0 <= cell_id < len(self.cell_neighbors)

    def cell_neighbor_cells(self, cell_id: int) -> Optional[List[int]]:
        """Neighbour entries of a cell (cell indices or boundary ids).

        Returns a new list, or None if ``cell_id`` is out of range.
        """
        if not self._has_cell(cell_id):
            return None
        return list(self.cell_neighbors[cell_id])

    def cell_neighbor_refs(self, cell_id: int) -> Optional[List[CellRef]]:
        """Like cell_neighbor_cells, decoded into InternalCell/BoundaryRef."""
        neighbors = self.cell_neighbor_cells(cell_id)
        if neighbors is None:
            return None
        return [cell_ref_from_sentinel(n, self._patch_names) for n in neighbors]

    def _boundary_id(self, patch_name: str) -> Optional[int]:
        patch = self.boundary.get(patch_name)
        return None if patch is None else patch.boundary_id

    def is_cell_on_boundary(
        self, cell_id: int, patch_name: Optional[str] = None
    ) -> bool:
        """Check if a cell has a face on a boundary (any, or the named patch).

        Run-time complexity is in O(n), where n is the number of neighbours
        of the cell. Unknown patches and out-of-range cells give False.
        """
        if not self._has_cell(cell_id):
            return False
        if patch_name is None:
            return any(n < 0 for n in self.cell_neighbors[cell_id])
        bid = self._boundary_id(patch_name)
        if bid is None:
            return False
        return bid in self.cell_neighbors[cell_id]

    def is_face_on_boundary(
        self, face_id: int, patch_name: Optional[str] = None
    ) -> bool:
        """Check if a face is a boundary face (in O(1))."""
        if not 0 <= face_id < self.num_faces():
            return False
        if patch_name is None:
            return bool(self.neighbors[face_id] < 0)
        bid = self._boundary_id(patch_name)
        if bid is None:
            return False
        return bool(self.neighbors[face_id] == bid)

    def boundary_cells(self, patch_name: str) -> List[int]:
        """Owner cells of the faces of a patch, in face order.

        Returns an empty list if the named patch does not exist.
        """
        patch = self.boundary.get(patch_name)
        if patch is None:
            return []
        return self.owners[patch.start_face : patch.end_face].tolist()

    # =========================================================================
    # Summaries
    # =========================================================================

    def boundary_dataframe(self) -> pd.DataFrame:
        return boundary_to_dataframe(self.boundary)

    def summary(self) -> dict:
        return {
            "path": str(self.path),
            "n_points": self.num_points(),
            "n_faces": self.num_faces(),
            "n_inner_faces": self.num_inner_faces(),
            "n_cells": self.num_cells(),
            "n_patches": len(self.boundary),
            "fields": sorted(self.fields),
        }

    def __repr__(self):
        return (
            f"FoamMesh(path='{self.path}', cells={self.num_cells()}, "
            f"faces={self.num_faces()}, patches={len(self.boundary)})"
        )


def read_field_into(
    mesh: FoamMesh,
    path: Union[str, Path],
    decoder: Decoder = parse_scalar,
    name: Optional[str] = None,
) -> np.ndarray:
    """Parse the field file at ``path`` and attach it to ``mesh``."""
    return mesh.attach_field(path, decoder, name)
