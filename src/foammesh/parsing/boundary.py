"""Reader for polyMesh ``boundary`` files.

Expects text in the following format::

    // ...

    3
    (
        inlet
        {
            type            patch;
            nFaces          605;
            startFace       971201;
        }
        outlet
        {
            type            patch;
            nFaces          605;
            startFace       971806;
        }
        walls
        {
            type            wall;
            inGroups        List<word> 1(wall);
            nFaces          23848;
            startFace       972411;
        }
    )

The file is read line by line with a small finite-state machine. The number
of blank lines tolerated between the patch count and ``(``, and between a
patch name and ``{``, is configurable in one place (``max_blank_lines``).
"""

import logging
from enum import Enum, auto
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from foammesh.config import DEFAULT_BOUNDARY_ID_START, DEFAULT_SKIP_LINES
from foammesh.datastructures import BoundaryPatch
from foammesh.errors import StructuralError
from foammesh.parsing.text import numbered_lines, read_and_parse

log = logging.getLogger(__name__)


class BoundaryState(Enum):
    SEEKING = auto()
    EXPECT_OPEN_PAREN = auto()
    IN_BLOCK = auto()
    EXPECT_OPEN_BRACE = auto()
    IN_PATCH = auto()
    DONE = auto()


_PATCH_KEYS = ("type", "nFaces", "startFace")


def _value_of(tokens: List[str], lineno: int, line: str) -> str:
    # "        nFaces          605;" -> "605"
    if len(tokens) < 2 or not tokens[1].endswith(";"):
        raise StructuralError(
            "Malformed key-value pair in boundary definition", lineno, line
        )
    return tokens[1][:-1]


class BoundaryParser:
    """Line-driven state machine producing BoundaryPatch records.

    Parameters
    ----------
    boundary_id_start : int
        Sentinel for the first patch; each further patch gets one less.
    max_blank_lines : int
        Blank lines tolerated before ``(`` and before ``{``.
    """

    def __init__(
        self,
        boundary_id_start: int = DEFAULT_BOUNDARY_ID_START,
        max_blank_lines: int = 1,
    ):
        self.boundary_id_start = boundary_id_start
        self.max_blank_lines = max_blank_lines
        self.state = BoundaryState.SEEKING
        self.declared_count: Optional[int] = None
        self.patches: Dict[str, BoundaryPatch] = {}

        self._blank_lines = 0
        self._num_finalized = 0
        self._name = ""
        self._fields: Dict[str, Optional[Tuple[str, int, str]]] = {}

        self._handlers = {
            BoundaryState.SEEKING: self._seeking,
            BoundaryState.EXPECT_OPEN_PAREN: self._expect_open_paren,
            BoundaryState.IN_BLOCK: self._in_block,
            BoundaryState.EXPECT_OPEN_BRACE: self._expect_open_brace,
            BoundaryState.IN_PATCH: self._in_patch,
        }

    @property
    def done(self) -> bool:
        return self.state is BoundaryState.DONE

    def feed(self, lineno: int, line: str) -> None:
        """Advance the machine by one line."""
        self._handlers[self.state](lineno, line)

    def finish(self) -> Dict[str, BoundaryPatch]:
        """Return the patches, failing if the block was never closed."""
        if not self.done:
            raise StructuralError(
                "Reached end of file unexpectedly. Missing closing bracket?"
            )
        if self.declared_count != len(self.patches):
            log.warning(
                f"Boundary file declares {self.declared_count} patches, "
                f"but {len(self.patches)} were read"
            )
        return self.patches

    # --- states ---

    def _seeking(self, lineno, line):
        try:
            self.declared_count = int(line.strip())
        except ValueError:
            return
        self._goto(BoundaryState.EXPECT_OPEN_PAREN)

    def _expect_open_paren(self, lineno, line):
        stripped = line.strip()
        if stripped.startswith("("):
            self._goto(BoundaryState.IN_BLOCK)
        elif not stripped and self._blank_lines < self.max_blank_lines:
            self._blank_lines += 1
        else:
            raise StructuralError(
                "Missing '(' after number of boundaries", lineno, line
            )

    def _in_block(self, lineno, line):
        stripped = line.strip()
        if stripped.startswith(")"):
            self._goto(BoundaryState.DONE)
        elif stripped:
            self._name = stripped
            self._goto(BoundaryState.EXPECT_OPEN_BRACE)

    def _expect_open_brace(self, lineno, line):
        stripped = line.strip()
        if stripped == "{":
            self._fields = dict.fromkeys(_PATCH_KEYS)
            self._goto(BoundaryState.IN_PATCH)
        elif not stripped and self._blank_lines < self.max_blank_lines:
            self._blank_lines += 1
        else:
            raise StructuralError(
                f"Missing '{{' after boundary patch '{self._name}'", lineno, line
            )

    def _in_patch(self, lineno, line):
        stripped = line.strip()
        if stripped == "}":
            self._finalize(lineno, line)
            self._goto(BoundaryState.IN_BLOCK)
            return
        if stripped.startswith(")"):
            raise StructuralError(
                f"Boundary patch '{self._name}' is not closed", lineno, line
            )
        tokens = stripped.split()
        if tokens and tokens[0] in _PATCH_KEYS:
            self._fields[tokens[0]] = (
                _value_of(tokens, lineno, line),
                lineno,
                line,
            )

    # --- helpers ---

    def _goto(self, state: BoundaryState):
        self.state = state
        self._blank_lines = 0

    def _int_field(self, key, lineno, line) -> int:
        entry = self._fields[key]
        if entry is None:
            raise StructuralError(
                f"Boundary patch '{self._name}' has no {key} entry", lineno, line
            )
        value, value_lineno, value_line = entry
        try:
            return int(value)
        except ValueError:
            raise StructuralError(
                "Malformatted boundary data", value_lineno, value_line
            ) from None

    def _finalize(self, lineno, line):
        patch_type = self._fields["type"]
        patch = BoundaryPatch(
            name=self._name,
            patch_type=patch_type[0] if patch_type is not None else "",
            num_faces=self._int_field("nFaces", lineno, line),
            start_face=self._int_field("startFace", lineno, line),
            boundary_id=self.boundary_id_start - self._num_finalized,
        )
        self._num_finalized += 1
        if patch.name in self.patches:
            log.warning(f"Duplicate boundary patch '{patch.name}', keeping the last")
        self.patches[patch.name] = patch


def parse_boundary(
    text: str,
    skip: int = DEFAULT_SKIP_LINES,
    boundary_id_start: int = DEFAULT_BOUNDARY_ID_START,
    max_blank_lines: int = 1,
) -> Dict[str, BoundaryPatch]:
    """Parse a boundary file into patches keyed by name (file order kept).

    Raises
    ------
    StructuralError
        On a missing ``(`` or ``{``, a malformed ``key value;`` line, a
        missing ``nFaces``/``startFace`` entry, or end of input before the
        closing ``)``.
    """
    parser = BoundaryParser(boundary_id_start, max_blank_lines)
    for lineno, line in numbered_lines(text, skip):
        parser.feed(lineno, line)
        if parser.done:
            break
    return parser.finish()


def read_boundary(
    path: Union[str, Path],
    skip: int = DEFAULT_SKIP_LINES,
    boundary_id_start: int = DEFAULT_BOUNDARY_ID_START,
    max_blank_lines: int = 1,
    encoding: str = "utf-8",
) -> Dict[str, BoundaryPatch]:
    """Read a polyMesh ``boundary`` file."""
    return read_and_parse(
        path,
        parse_boundary,
        encoding,
        skip=skip,
        boundary_id_start=boundary_id_start,
        max_blank_lines=max_blank_lines,
    )
