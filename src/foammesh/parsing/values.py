"""Element decoders for single values in field and point files.

Each decoder takes one token (for example ``"(0.1 0 3.3)"``) and returns the
decoded value, or None if the token does not have the expected shape. They
are passed to the internal-field reader to select the element type.
"""

from typing import List, Optional, Tuple

Vector3 = Tuple[float, float, float]


def _to_float(token: str) -> Optional[float]:
    try:
        return float(token)
    except ValueError:
        return None


def parse_bracketed(s: str) -> Optional[List[float]]:
    """Numbers inside ``( ... )``; tokens that are not numbers are dropped."""
    s = s.strip()
    if not (s.startswith("(") and s.endswith(")")):
        return None
    values = [_to_float(token) for token in s[1:-1].split()]
    return [v for v in values if v is not None]


def parse_point3(s: str) -> Optional[Vector3]:
    """Decode ``"(x y z)"`` into a coordinate tuple."""
    vals = parse_bracketed(s)
    if vals is None or len(vals) != 3:
        return None
    return (vals[0], vals[1], vals[2])


def parse_vector3(s: str) -> Optional[Vector3]:
    """Decode ``"(u v w)"`` into a vector tuple.

    Same grammar as parse_point3; kept separate so call sites state which
    kind of quantity they read.
    """
    return parse_point3(s)


def parse_scalar(s: str) -> Optional[float]:
    """Decode a bare number, tolerating surrounding brackets and ``;``."""
    s = s.strip().rstrip(";").strip()
    if s.startswith("(") and s.endswith(")"):
        s = s[1:-1].strip()
    return _to_float(s)
