"""Count-then-data list readers for polyMesh files.

All three grammars share the same shape::

    // header, skipped
    11360
    (
    ...one element per line...
    )

The first line (after ``skip``) that is a bare non-negative integer declares
the element count. Data lines follow; lines that are not data (brackets,
blanks, comments) are skipped. The number of decoded elements must match the
declared count.
"""

import re
from pathlib import Path
from typing import Callable, List, Optional, Union

import numpy as np

from foammesh.config import DEFAULT_SKIP_LINES
from foammesh.errors import CountMismatchError, StructuralError
from foammesh.parsing.text import numbered_lines, read_and_parse
from foammesh.parsing.values import parse_point3

_COUNT_RE = re.compile(r"^\d+$")
_INT_RE = re.compile(r"\d+")


def _parse_count(line: str) -> Optional[int]:
    line = line.strip()
    if _COUNT_RE.match(line):
        return int(line)
    return None


def _check_count(expected: Optional[int], found: int, what: str):
    if expected is None:
        raise StructuralError(f"No {what} count found")
    if found != expected:
        raise CountMismatchError(expected, found, what)


# =============================================================================
# Scalars (owner, neighbour, ...)
# =============================================================================


def parse_scalars(
    text: str,
    skip: int = DEFAULT_SKIP_LINES,
    scalar_type: Callable[[str], object] = int,
) -> np.ndarray:
    """Parse a list of scalars, one per line.

    Expects text in the following format::

        // ...

        11360
        (
        42
        0
        3
        // ...
        )

    Parameters
    ----------
    text : str
        File content.
    skip : int
        Number of leading header lines to ignore.
    scalar_type : callable
        Converter for data lines, ``int`` or ``float``. Lines it rejects
        with ValueError are skipped.

    Returns
    -------
    np.ndarray
        1D array of the decoded values.

    Raises
    ------
    CountMismatchError
        If the number of values differs from the declared count.
    """
    num_expected = None
    data = []
    for _, line in numbered_lines(text, skip):
        if num_expected is None:
            num_expected = _parse_count(line)
            continue
        try:
            data.append(scalar_type(line))
        except ValueError:
            continue
    _check_count(num_expected, len(data), "values")
    return np.array(data, dtype=scalar_type)


# =============================================================================
# Points
# =============================================================================


def parse_points(text: str, skip: int = DEFAULT_SKIP_LINES) -> np.ndarray:
    """Parse mesh points, one ``(x y z)`` per line.

    Lines that do not both start with ``(`` and end with ``)`` are list
    markers or comments and are skipped. A bracketed line that does not hold
    three floats is corrupt data and raises StructuralError.

    Returns
    -------
    np.ndarray
        Read-only array of shape (n_points, 3).
    """
    num_expected = None
    data = []
    for lineno, line in numbered_lines(text, skip):
        if num_expected is None:
            num_expected = _parse_count(line)
            continue
        if not (line.startswith("(") and line.endswith(")")):
            continue
        point = parse_point3(line)
        if point is None:
            raise StructuralError(
                "Malformed points file: could not parse three floats", lineno, line
            )
        data.append(point)
    _check_count(num_expected, len(data), "points")

    points = np.array(data, dtype=np.float64).reshape(-1, 3)
    points.setflags(write=False)
    return points


# =============================================================================
# Faces
# =============================================================================


def parse_faces(text: str, skip: int = DEFAULT_SKIP_LINES) -> List[List[int]]:
    """Parse faces, each a list of point indices.

    Expects text in the following format::

        // ...

        11360
        (
        4(1 42 1723 1682)
        3(2 3 4)
        // ...
        )

    The leading number on each line is the vertex count and is dropped. The
    order of the remaining indices defines the face winding and is kept.

    Raises
    ------
    StructuralError
        If a line announces a different number of vertices than it holds.
    CountMismatchError
        If the number of faces differs from the declared count.
    """
    num_expected = None
    data = []
    for lineno, line in numbered_lines(text, skip):
        if num_expected is None:
            num_expected = _parse_count(line)
            continue
        vals = [int(tok) for tok in _INT_RE.findall(line)]
        if not vals:
            continue
        if len(vals) != vals[0] + 1:
            raise StructuralError(
                "Malformed faces file: mismatch between number of vertices "
                "announced and found",
                lineno,
                line,
            )
        data.append(vals[1:])
    _check_count(num_expected, len(data), "faces")
    return data


# =============================================================================
# Path-based variants
# =============================================================================


def read_scalars(
    path: Union[str, Path],
    skip: int = DEFAULT_SKIP_LINES,
    scalar_type=int,
    encoding: str = "utf-8",
) -> np.ndarray:
    """Read a scalar list file such as ``owner`` or ``neighbour``."""
    return read_and_parse(
        path, parse_scalars, encoding, skip=skip, scalar_type=scalar_type
    )


def read_points(
    path: Union[str, Path], skip: int = DEFAULT_SKIP_LINES, encoding: str = "utf-8"
) -> np.ndarray:
    """Read a ``points`` file."""
    return read_and_parse(path, parse_points, encoding, skip=skip)


def read_faces(
    path: Union[str, Path], skip: int = DEFAULT_SKIP_LINES, encoding: str = "utf-8"
) -> List[List[int]]:
    """Read a ``faces`` file."""
    return read_and_parse(path, parse_faces, encoding, skip=skip)
