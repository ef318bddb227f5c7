"""Content surface interface and the frame-backed default implementation."""

import logging
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


class ContentSurface(Protocol):
    """Opaque embeddable viewport that loads a URI."""

    @property
    def source(self) -> str:
        """URI currently loaded."""
        ...

    @property
    def closed(self) -> bool:
        """Whether the surface has been torn down."""
        ...

    def navigate(self, uri: str) -> None:
        """Point the surface at ``uri`` without recreating it.

        Args:
            uri: New content URI
        """
        ...

    def close(self) -> None:
        """Tear the surface down; further navigation is an error."""
        ...


SurfaceFactory = Callable[[str], ContentSurface]


class FrameSurface:
    """Surface rendered as an ``<iframe>`` in the composed page.

    The browser page polls the layout snapshot and re-points the matching
    iframe in place, so in-frame state of unchanged regions is kept.
    """

    def __init__(self, uri: str) -> None:
        self._source = uri
        self._closed = False
        self.navigation_count = 0

    @property
    def source(self) -> str:
        return self._source

    @property
    def closed(self) -> bool:
        return self._closed

    def navigate(self, uri: str) -> None:
        if self._closed:
            raise RuntimeError("Cannot navigate a closed surface")
        self._source = uri
        self.navigation_count += 1

    def close(self) -> None:
        self._closed = True

    def __repr__(self) -> str:
        return f"FrameSurface(source={self._source!r}, closed={self._closed})"
