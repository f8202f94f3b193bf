"""Exception types raised while reading OpenFOAM case files.

Hierarchy:
- FoamError
  ├── FoamFileReadError (also an OSError)
  └── FoamParseError (also a ValueError)
      ├── CountMismatchError
      ├── StructuralError
      └── UnsupportedFormatError

Lookup misses (unknown patch names, out-of-range ids) are not errors; the
query methods on FoamMesh return False, [] or None for those.
"""

from typing import Optional


class FoamError(Exception):
    """Base class for all foammesh errors."""


class FoamFileReadError(FoamError, OSError):
    """A case file could not be read."""

    def __init__(self, path, reason):
        self.path = str(path)
        self.reason = str(reason)
        super().__init__(f'Could not read "{self.path}": {self.reason}')

    def __reduce__(self):
        return type(self), (self.path, self.reason)


class FoamParseError(FoamError, ValueError):
    """File content does not match the expected grammar.

    Parameters
    ----------
    message : str
        Description of the problem.
    lineno : int, optional
        1-based line number in the file, where known.
    line : str, optional
        Raw text of the offending line.
    """

    def __init__(
        self, message: str, lineno: Optional[int] = None, line: Optional[str] = None
    ):
        self.message = message
        self.lineno = lineno
        self.line = line
        self.path: Optional[str] = None
        super().__init__(self._format())

    def _format(self) -> str:
        text = self.message
        if self.lineno is not None:
            text = f"l. {self.lineno}: {text}"
            if self.line is not None:
                text = f'{text} ("{self.line}")'
        if self.path is not None:
            text = f"{self.path}: {text}"
        return text

    def with_path(self, path):
        """Attach the source file path and refresh the message."""
        self.path = str(path)
        self.args = (self._format(),)
        return self

    def _init_args(self) -> tuple:
        return self.message, self.lineno, self.line

    def __reduce__(self):
        # Rebuild from the constructor arguments; the state restores path
        return type(self), self._init_args(), self.__dict__

    def __str__(self):
        return self._format()


class CountMismatchError(FoamParseError):
    """Declared element count differs from the number of decoded elements."""

    def __init__(self, expected: int, found: int, what: str = "values"):
        self.expected = expected
        self.found = found
        self.what = what
        super().__init__(f"{expected} {what} expected, but parsed {found}.")

    def _init_args(self) -> tuple:
        return self.expected, self.found, self.what


class StructuralError(FoamParseError):
    """A delimiter, bracket or key/value shape is missing or malformed."""


class UnsupportedFormatError(FoamParseError):
    """The file header declares an encoding other than ASCII."""
