"""Readers for OpenFOAM ASCII mesh and field files.

This package decodes a case's polyMesh into cell-centric topology and reads
internal fields for post-processing.

Layers:
-------
parsing (grammar readers: scalars, points, faces, boundary, internalField)
└── topology (owner/neighbour lists -> cell adjacency)
    └── FoamMesh (aggregate with boundary queries and attached fields)
"""

from foammesh.config import ReaderConfig, load_config
from foammesh.datastructures import (
    BoundaryPatch,
    BoundaryRef,
    CellRef,
    InternalCell,
    Topology,
    cell_ref_from_sentinel,
)
from foammesh.errors import (
    CountMismatchError,
    FoamError,
    FoamFileReadError,
    FoamParseError,
    StructuralError,
    UnsupportedFormatError,
)
from foammesh.mesh import FoamMesh, read_field_into
from foammesh.parsing import (
    parse_boundary,
    parse_faces,
    parse_internal_field,
    parse_point3,
    parse_points,
    parse_scalar,
    parse_scalars,
    parse_vector3,
    read_boundary,
    read_faces,
    read_internal_field,
    read_points,
    read_scalars,
)
from foammesh.topology import build_topology

__version__ = "0.1.0"

__all__ = [
    # Mesh
    "FoamMesh",
    "read_field_into",
    "build_topology",
    # Configuration
    "ReaderConfig",
    "load_config",
    # Data structures
    "BoundaryPatch",
    "Topology",
    "CellRef",
    "InternalCell",
    "BoundaryRef",
    "cell_ref_from_sentinel",
    # Readers
    "parse_scalars",
    "parse_points",
    "parse_faces",
    "parse_boundary",
    "parse_internal_field",
    "read_scalars",
    "read_points",
    "read_faces",
    "read_boundary",
    "read_internal_field",
    # Element decoders
    "parse_scalar",
    "parse_point3",
    "parse_vector3",
    # Errors
    "FoamError",
    "FoamFileReadError",
    "FoamParseError",
    "CountMismatchError",
    "StructuralError",
    "UnsupportedFormatError",
]
