"""
Presentation controller: full-screen presentation pinned to a chosen display.

The controller is a small state machine::

    WINDOWED --enter--> REQUESTING --granted--> FULLSCREEN
        ^                    |                      |
        +------refused-------+<--------exit---------+

Entering while already FULLSCREEN exits first and then re-enters on the
(possibly new) selected display.

Classes:
    PresentationPhase: Presentation state machine phases
    PresentationState: Current phase plus the active display
    PresentationSurface: Host window that can be moved and made full-screen
    PresentationController: Drives the surface and reconciles the composer

Example:
    >>> controller = PresentationController(surface, composer, topology)
    >>> await controller.enter_fullscreen(1)
    True
    >>> controller.state.active_display_index
    1
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from ..display.models import DisplayTopology, Rect
from ..layout.composer import LayoutComposer
from .exceptions import PresentationAcquisitionFailure

logger = logging.getLogger(__name__)


class PresentationPhase(Enum):
    """Presentation state machine phases."""

    WINDOWED = "windowed"
    REQUESTING = "requesting"
    FULLSCREEN = "fullscreen"


@dataclass(frozen=True)
class PresentationState:
    """Snapshot of the presentation state.

    Attributes:
        phase: Current phase
        active_display_index: Display being presented on while FULLSCREEN
        spanning: Whether the presentation covers every display
    """

    phase: PresentationPhase = PresentationPhase.WINDOWED
    active_display_index: Optional[int] = None
    spanning: bool = False

    @property
    def is_fullscreen(self) -> bool:
        return self.phase is PresentationPhase.FULLSCREEN

    def to_dict(self) -> dict[str, Any]:
        return {
            "phase": self.phase.value,
            "isFullscreen": self.is_fullscreen,
            "activeDisplayIndex": self.active_display_index,
            "spanning": self.spanning,
        }


class PresentationSurface(ABC):
    """Host window the grid is presented in."""

    @abstractmethod
    async def move_to(self, geometry: Rect) -> None:
        """Move and resize the window to ``geometry``. Best effort."""

    @abstractmethod
    async def request_fullscreen(self, geometry: Rect) -> None:
        """Acquire exclusive full-screen presentation on ``geometry``.

        Raises:
            PresentationAcquisitionFailure: If the host refuses
        """

    @abstractmethod
    async def exit_fullscreen(self) -> None:
        """Leave full-screen presentation."""


class PresentationController:
    """Drive full-screen presentation on the selected display.

    Holds the current display topology. Until the resolver delivers a real
    one, a single display sized to the viewport is used.
    """

    def __init__(
        self,
        surface: PresentationSurface,
        composer: LayoutComposer,
        topology: Optional[DisplayTopology] = None,
        viewport: tuple[int, int] = (1920, 1080),
    ) -> None:
        """Initialize the controller.

        Args:
            surface: Window to present in
            composer: Composer whose container is fitted to the target geometry
            topology: Initial topology; defaults to a single viewport display
            viewport: Size of the default single display
        """
        self.surface = surface
        self.composer = composer
        self._topology = topology or DisplayTopology.single(*viewport)
        self._state = PresentationState()
        self.logger = logging.getLogger(f"{__name__}.PresentationController")

    @property
    def state(self) -> PresentationState:
        return self._state

    @property
    def topology(self) -> DisplayTopology:
        return self._topology

    def update_topology(self, topology: DisplayTopology) -> None:
        """Install a newly resolved topology, keeping the selection when still valid."""
        previous = self._topology.selected_index
        if not topology.select(previous):
            self.logger.debug(f"Selected display {previous} not in new topology, using 0")
            topology.select(0)
        self._topology = topology
        self.logger.info(
            f"Display topology updated: {len(topology)} display(s) via {topology.source}"
        )

    def get_monitor_count(self) -> int:
        return len(self._topology)

    def set_monitor(self, index: int) -> bool:
        """Select the display used by the next :meth:`enter_fullscreen`.

        Does not affect a presentation already in progress.

        Returns:
            True if selected, False (selection unchanged) when out of range
        """
        if not self._topology.select(index):
            self.logger.warning(
                f"Display index {index} out of range (0-{len(self._topology) - 1})"
            )
            return False
        self.logger.info(f"Selected display {index}")
        return True

    def target_geometry(self) -> tuple[Rect, bool]:
        """Geometry the next presentation covers and whether it spans displays."""
        spanning = self.composer.container.spanning and len(self._topology) > 1
        if spanning:
            return self._topology.bounds, True
        return self._topology.selected.rect, False

    async def enter_fullscreen(self, display_index: Optional[int] = None) -> bool:
        """Present the grid full-screen on the selected display.

        Args:
            display_index: Display to select first; an invalid index is ignored

        Returns:
            True if presentation was acquired, False otherwise
        """
        if self._state.phase is PresentationPhase.REQUESTING:
            self.logger.warning("Full-screen request already in progress")
            return False

        if display_index is not None and not self._topology.select(display_index):
            self.logger.warning(
                f"Ignoring invalid display index {display_index}, "
                f"using display {self._topology.selected_index}"
            )

        if self._state.is_fullscreen:
            await self.exit_fullscreen()

        self._state = PresentationState(phase=PresentationPhase.REQUESTING)
        display = self._topology.selected
        geometry, spanning = self.target_geometry()
        self.composer.fit_to_geometry(geometry)

        try:
            await self.surface.move_to(geometry)
        except Exception as e:
            self.logger.debug(f"Could not move presentation window: {e}")

        try:
            await self.surface.request_fullscreen(geometry)
        except PresentationAcquisitionFailure as e:
            self.logger.warning(f"Full-screen presentation refused: {e.message}")
            self._state = PresentationState()
            return False
        except Exception:
            self.logger.exception("Full-screen request failed")
            self._state = PresentationState()
            return False

        self._state = PresentationState(
            phase=PresentationPhase.FULLSCREEN,
            active_display_index=display.index,
            spanning=spanning,
        )
        self.logger.info(
            f"Full-screen on display {display.index}"
            + (f" spanning {len(self._topology)} displays" if spanning else "")
        )
        return True

    async def exit_fullscreen(self) -> None:
        """Leave full-screen presentation; a no-op unless FULLSCREEN."""
        if not self._state.is_fullscreen:
            return

        try:
            await self.surface.exit_fullscreen()
        except Exception:
            self.logger.exception("Error leaving full-screen presentation")

        self._state = PresentationState()
        self.logger.info("Left full-screen presentation")
