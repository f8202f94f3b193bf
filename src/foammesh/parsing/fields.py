"""Reader for the ``internalField`` entry of field files (``0.5/U``, ``0/C``, ...).

Two declarations are understood::

    internalField   uniform (0 0 0);

    internalField   nonuniform List<vector>
    3200
    (
    (0.00125 0.00125 0.0025)
    ...
    )
    ;

Short lists may also be written on the declaration line, as in
``internalField nonuniform List<scalar> 3(1 2 3);``. Only the first ``internalField`` line of a file is honoured.
"""

import re
from pathlib import Path
from typing import Callable, List, Optional, TypeVar, Union

import numpy as np

from foammesh.errors import CountMismatchError, StructuralError
from foammesh.parsing.text import read_and_parse
from foammesh.parsing.values import parse_scalar

T = TypeVar("T")
Decoder = Callable[[str], Optional[T]]

_COUNT_RE = re.compile(r"^\d+$")
# "nonuniform List<scalar> 3(1 2 3);" written on the declaration line
_INLINE_RE = re.compile(r"nonuniform\s+(?:List<\w+>\s*)?(\d+)\s*\((.*)\)\s*;?\s*$")
_GROUP_RE = re.compile(r"\([^()]*\)")


def parse_internal_field(text: str, decoder: Decoder = parse_scalar) -> np.ndarray:
    """Decode the internal field of a field file.

    Parameters
    ----------
    text : str
        File content.
    decoder : callable
        Turns one value token (e.g. ``"(0.1 0 3.3)"``) into a value, or
        returns None if the token does not match. See foammesh.parsing.values.

    Returns
    -------
    np.ndarray
        Read-only array of decoded values, shape (n,) for scalars or (n, 3)
        for vectors. A uniform declaration yields a single element.

    Raises
    ------
    StructuralError
        If no ``internalField`` line exists, it is neither uniform nor
        nonuniform, or the data block is malformed or truncated.
    CountMismatchError
        If a nonuniform list decodes to a different number of values than
        declared.
    """
    lines = [line.rstrip() for line in text.split("\n")]
    for i, line in enumerate(lines):
        if not line.startswith("internalField"):
            continue
        if "nonuniform" in line:
            values = _parse_nonuniform(lines, i, decoder)
        elif "uniform" in line:
            values = _parse_uniform(line, i + 1, decoder)
        else:
            raise StructuralError(
                "Malformed internal field file: not defined as either "
                "uniform or nonuniform",
                i + 1,
                line,
            )
        result = np.asarray(values)
        result.setflags(write=False)
        return result

    raise StructuralError("Did not find any data in internal field file")


def _parse_uniform(line: str, lineno: int, decoder: Decoder) -> List:
    # "internalField   uniform (0 0 0);" -> ["(0 0 0)"]
    start = line.find("(")
    end = line.find(")")
    if start != -1 and end > start:
        token = line[start : end + 1]
    else:
        tokens = line.split()
        pos = tokens.index("uniform") if "uniform" in tokens else -1
        token = tokens[pos + 1] if 0 <= pos < len(tokens) - 1 else ""

    value = decoder(token)
    if value is None:
        raise StructuralError(
            "Malformed internal field uniform data line", lineno, line
        )
    return [value]


def _parse_inline(num_expected: int, body: str, decoder: Decoder) -> List:
    # "(1 2 3) (4 5 6)" for vectors, "1 2 3" for scalars
    tokens = _GROUP_RE.findall(body) if "(" in body else body.split()
    data = [value for value in map(decoder, tokens) if value is not None]
    if len(data) != num_expected:
        raise CountMismatchError(num_expected, len(data))
    return data


def _parse_nonuniform(lines: List[str], start: int, decoder: Decoder) -> List:
    inline = _INLINE_RE.search(lines[start])
    if inline is not None:
        return _parse_inline(int(inline.group(1)), inline.group(2), decoder)

    count_line = lines[start + 1].strip() if start + 1 < len(lines) else ""
    if not _COUNT_RE.match(count_line):
        raise StructuralError(
            "Malformed internal field file: number of expected values not given",
            start + 2,
            count_line,
        )
    num_expected = int(count_line)

    # count line, then the "(" marker, then the data
    first = start + 3
    if first + num_expected > len(lines):
        raise StructuralError(
            f"Internal field file is shorter than declared ({num_expected} values)"
        )

    data = []
    for line in lines[first : first + num_expected]:
        value = decoder(line)
        if value is not None:
            data.append(value)
    if len(data) != num_expected:
        raise CountMismatchError(num_expected, len(data))
    return data


def read_internal_field(
    path: Union[str, Path], decoder: Decoder = parse_scalar, encoding: str = "utf-8"
) -> np.ndarray:
    """Read the internal field of the file at ``path``."""
    return read_and_parse(path, parse_internal_field, encoding, decoder=decoder)
