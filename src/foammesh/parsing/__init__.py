"""Grammar readers for OpenFOAM ASCII files.

Every reader comes in two forms: ``parse_*`` takes file text, ``read_*``
takes a path. All of them skip a fixed number of header lines first.
"""

from foammesh.parsing.boundary import BoundaryParser, parse_boundary, read_boundary
from foammesh.parsing.fields import parse_internal_field, read_internal_field
from foammesh.parsing.lists import (
    parse_faces,
    parse_points,
    parse_scalars,
    read_faces,
    read_points,
    read_scalars,
)
from foammesh.parsing.values import parse_point3, parse_scalar, parse_vector3

__all__ = [
    "BoundaryParser",
    "parse_boundary",
    "read_boundary",
    "parse_internal_field",
    "read_internal_field",
    "parse_scalars",
    "parse_points",
    "parse_faces",
    "read_scalars",
    "read_points",
    "read_faces",
    "parse_scalar",
    "parse_point3",
    "parse_vector3",
]
