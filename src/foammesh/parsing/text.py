"""Shared helpers for reading case files as text."""

import logging
import re
from pathlib import Path
from typing import Iterator, Tuple, Union

from foammesh.errors import FoamFileReadError, FoamParseError, UnsupportedFormatError

log = logging.getLogger(__name__)

_FORMAT_RE = re.compile(r"^\s*format\s+(\w+)\s*;", re.MULTILINE)
_HEADER_CHARS = 4096  # the FoamFile dictionary always sits at the top


def read_text(path: Union[str, Path], encoding: str = "utf-8") -> str:
    """Read a whole file, re-raising OS errors with the offending path."""
    try:
        with open(path, "r", encoding=encoding) as f:
            text = f.read()
    except UnicodeDecodeError as e:
        raise UnsupportedFormatError(
            f"File is not valid {encoding} text ({e.reason})"
        ).with_path(path) from e
    except OSError as e:
        raise FoamFileReadError(path, e.strerror or e) from e
    log.debug(f"Read {len(text)} characters from {path}")
    return text


def check_ascii(text: str) -> None:
    """Reject files whose FoamFile header declares a non-ASCII format."""
    match = _FORMAT_RE.search(text[:_HEADER_CHARS])
    if match is not None and match.group(1) != "ascii":
        raise UnsupportedFormatError(
            f"Only ASCII files are supported, header declares '{match.group(1)}'"
        )


def numbered_lines(text: str, skip: int = 0) -> Iterator[Tuple[int, str]]:
    """Yield ``(lineno, line)`` pairs after the first ``skip`` lines.

    Line numbers are 1-based positions in the original text. Trailing
    whitespace (including a carriage return) is removed from each line.
    """
    for i, line in enumerate(text.split("\n")):
        if i < skip:
            continue
        yield i + 1, line.rstrip()


def read_and_parse(
    path: Union[str, Path], parser, encoding: str = "utf-8", **kwargs
):
    """Read ``path`` and run ``parser`` on its text.

    Parse errors are re-raised with the file path attached.
    """
    text = read_text(path, encoding)
    try:
        check_ascii(text)
        result = parser(text, **kwargs)
    except FoamParseError as e:
        e.with_path(path)
        raise
    log.debug(f"Parsed {len(result)} entries from {path}")
    return result
