"""Grid track and grid-area parsing.

Track tokens follow the CSS grid track-size grammar restricted to what a
kiosk layout needs: flexible (``1fr``), fixed lengths, ``auto``,
``min-content``/``max-content``, ``minmax()`` and ``fit-content()``.
``repeat()`` and named lines are not supported.

Grid areas use the ``row-start / column-start / row-end / column-end``
shorthand. Missing trailing values are ``auto``. Line numbers are 1-based;
negative numbers count from the last line. Every explicit line must exist in
the grid defined by the document's columns and rows.
"""

import re
from dataclasses import dataclass
from typing import Optional, Sequence

_NUMBER = r"(?:\d+(?:\.\d+)?|\.\d+)"
_LENGTH_RE = re.compile(rf"^(?:{_NUMBER}(?:px|em|rem|%|vw|vh|vmin|vmax|pt|pc|cm|mm|in|ch|ex)|0)$")
_FLEX_RE = re.compile(rf"^{_NUMBER}fr$")
_FUNCTION_RE = re.compile(r"^(minmax|fit-content)\((.*)\)$")
_SPAN_RE = re.compile(r"^span\s+(\d+)$")
_LINE_RE = re.compile(r"^-?\d+$")

TRACK_KEYWORDS = frozenset({"auto", "min-content", "max-content"})


def _is_breadth(token: str, allow_flex: bool) -> bool:
    if token in TRACK_KEYWORDS or _LENGTH_RE.match(token):
        return True
    return allow_flex and bool(_FLEX_RE.match(token))


def is_valid_track_token(token: object) -> bool:
    """Check a single track-size token such as ``1fr`` or ``minmax(100px, 1fr)``."""
    if not isinstance(token, str):
        return False
    token = token.strip().lower()
    if not token:
        return False
    if _is_breadth(token, allow_flex=True):
        return True

    match = _FUNCTION_RE.match(token)
    if not match:
        return False

    name = match.group(1)
    args = [arg.strip() for arg in match.group(2).split(",")]
    if name == "fit-content":
        return len(args) == 1 and bool(_LENGTH_RE.match(args[0]))
    return (
        len(args) == 2
        and _is_breadth(args[0], allow_flex=False)
        and _is_breadth(args[1], allow_flex=True)
    )


def invalid_track_tokens(tokens: Sequence[object]) -> list[str]:
    """Return the tokens in ``tokens`` that are not valid track sizes."""
    return [repr(token) for token in tokens if not is_valid_track_token(token)]


@dataclass(frozen=True)
class GridLine:
    """One side of a grid-area: an explicit line, a span, or auto (both None)."""

    line: Optional[int] = None
    span: Optional[int] = None


@dataclass(frozen=True)
class GridPlacement:
    """Resolved grid-area of a region.

    Start/end lines are 1-based and normalised to positive numbers. They are
    None on an axis left to auto-placement, in which case only the span is
    known.
    """

    value: str
    row_start: Optional[int]
    column_start: Optional[int]
    row_end: Optional[int]
    column_end: Optional[int]
    row_span: int
    column_span: int

    @property
    def css(self) -> str:
        """Value suitable for the CSS ``grid-area`` property."""
        return " / ".join(part.strip() for part in self.value.split("/"))


def _parse_line(token: str, track_count: int, axis: str) -> GridLine:
    token = " ".join(token.lower().split())
    if token == "auto":
        return GridLine()

    span_match = _SPAN_RE.match(token)
    if span_match:
        span = int(span_match.group(1))
        if span < 1:
            raise ValueError(f"{axis} span must be at least 1, got {token!r}")
        return GridLine(span=span)

    if not _LINE_RE.match(token):
        raise ValueError(f"{axis} line {token!r} is not a line number, 'span N' or 'auto'")

    line_count = track_count + 1
    line = int(token)
    if line == 0 or abs(line) > line_count:
        raise ValueError(f"{axis} line {line} is outside the grid (lines 1..{line_count})")
    if line < 0:
        line = line_count + 1 + line
    return GridLine(line=line)


def _resolve_axis(
    start: GridLine, end: GridLine, track_count: int, axis: str
) -> tuple[Optional[int], Optional[int], int]:
    if start.line is not None and end.line is not None:
        first, last = sorted((start.line, end.line))
        if first == last:
            last = first + 1
    elif start.line is not None:
        first = start.line
        last = first + (end.span or 1)
    elif end.line is not None:
        last = end.line
        first = last - (start.span or 1)
    else:
        span = start.span or end.span or 1
        if span > track_count:
            raise ValueError(f"{axis} span {span} exceeds the {track_count} defined track(s)")
        return None, None, span

    if first < 1 or last > track_count + 1:
        raise ValueError(
            f"{axis} lines {first}..{last} fall outside the grid (lines 1..{track_count + 1})"
        )
    return first, last, last - first


def parse_grid_placement(value: str, column_count: int, row_count: int) -> GridPlacement:
    """Parse and validate a ``row-start / column-start / row-end / column-end`` value.

    Args:
        value: Grid-area string from the layout document
        column_count: Number of column tracks in the grid
        row_count: Number of row tracks in the grid

    Returns:
        Resolved placement

    Raises:
        ValueError: If the value is malformed or references lines outside the grid
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError("grid area must be a non-empty string")

    parts = [part.strip() for part in value.split("/")]
    if len(parts) > 4:
        raise ValueError(f"grid area {value!r} has more than four values")
    if any(not part for part in parts):
        raise ValueError(f"grid area {value!r} has an empty value")
    parts += ["auto"] * (4 - len(parts))

    row_start = _parse_line(parts[0], row_count, "row")
    column_start = _parse_line(parts[1], column_count, "column")
    row_end = _parse_line(parts[2], row_count, "row")
    column_end = _parse_line(parts[3], column_count, "column")

    row_first, row_last, row_span = _resolve_axis(row_start, row_end, row_count, "row")
    column_first, column_last, column_span = _resolve_axis(
        column_start, column_end, column_count, "column"
    )

    return GridPlacement(
        value=value,
        row_start=row_first,
        column_start=column_first,
        row_end=row_last,
        column_end=column_last,
        row_span=row_span,
        column_span=column_span,
    )
