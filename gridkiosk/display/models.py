"""Display topology data model.

Classes:
    Rect: Axis-aligned rectangle in the shared desktop coordinate space
    Display: One physical or logical display
    DisplayTopology: Ordered displays plus the currently selected index
"""

from dataclasses import dataclass, replace
from typing import Iterator, Optional, Sequence


@dataclass(frozen=True)
class Rect:
    """Rectangle in desktop coordinates (pixels)."""

    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @classmethod
    def union(cls, rects: Sequence["Rect"]) -> "Rect":
        """Return the bounding box of ``rects``.

        Raises:
            ValueError: If ``rects`` is empty
        """
        if not rects:
            raise ValueError("Cannot compute the union of zero rectangles")
        left = min(r.left for r in rects)
        top = min(r.top for r in rects)
        right = max(r.right for r in rects)
        bottom = max(r.bottom for r in rects)
        return cls(left=left, top=top, width=right - left, height=bottom - top)


@dataclass(frozen=True)
class Display:
    """One display's geometry in the shared coordinate space.

    Width and height are clamped to zero; offsets are kept as reported since
    displays left of or above the origin legitimately have negative offsets.

    Attributes:
        index: Position of the display in its topology
        left: Horizontal offset of the display
        top: Vertical offset of the display
        width: Display width in pixels
        height: Display height in pixels
        is_primary: Whether the host reports this display as primary
        name: Host-reported output name, if any
    """

    index: int
    left: float
    top: float
    width: float
    height: float
    is_primary: bool = False
    name: Optional[str] = None

    def __post_init__(self) -> None:
        if self.width < 0:
            object.__setattr__(self, "width", 0)
        if self.height < 0:
            object.__setattr__(self, "height", 0)

    @property
    def rect(self) -> Rect:
        return Rect(left=self.left, top=self.top, width=self.width, height=self.height)

    def to_dict(self) -> dict[str, object]:
        return {
            "index": self.index,
            "name": self.name,
            "left": self.left,
            "top": self.top,
            "width": self.width,
            "height": self.height,
            "isPrimary": self.is_primary,
        }


@dataclass
class DisplayTopology:
    """Ordered sequence of displays plus the selected index.

    The selected index always points at an existing display. A topology is
    never empty; build single-display topologies with :meth:`single`.

    Attributes:
        displays: Displays in host order, re-indexed from zero
        selected_index: Index of the display targeted by the next presentation
        source: Name of the detection strategy that produced the topology
    """

    displays: tuple[Display, ...]
    selected_index: int = 0
    source: str = "viewport"

    def __post_init__(self) -> None:
        if not self.displays:
            raise ValueError("A display topology needs at least one display")
        self.displays = tuple(
            d if d.index == i else replace(d, index=i)
            for i, d in enumerate(self.displays)
        )
        if not 0 <= self.selected_index < len(self.displays):
            self.selected_index = 0

    @classmethod
    def single(cls, width: float, height: float, source: str = "viewport") -> "DisplayTopology":
        """Build the single full-viewport fallback topology."""
        return cls(displays=(Display(0, 0, 0, width, height, is_primary=True),), source=source)

    def __len__(self) -> int:
        return len(self.displays)

    def __iter__(self) -> Iterator[Display]:
        return iter(self.displays)

    def __getitem__(self, index: int) -> Display:
        return self.displays[index]

    def is_valid_index(self, index: Optional[int]) -> bool:
        return index is not None and 0 <= index < len(self.displays)

    def select(self, index: int) -> bool:
        """Select ``index`` when it is in range.

        Returns:
            True if the selection changed to ``index``, False if out of range
        """
        if not self.is_valid_index(index):
            return False
        self.selected_index = index
        return True

    @property
    def selected(self) -> Display:
        return self.displays[self.selected_index]

    @property
    def primary(self) -> Display:
        """First display flagged primary, or the first display."""
        return next((d for d in self.displays if d.is_primary), self.displays[0])

    @property
    def bounds(self) -> Rect:
        """Bounding box of every display."""
        return Rect.union([d.rect for d in self.displays])

    def to_dict(self) -> dict[str, object]:
        return {
            "source": self.source,
            "selected": self.selected_index,
            "displays": [d.to_dict() for d in self.displays],
        }
