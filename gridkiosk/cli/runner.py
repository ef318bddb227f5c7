"""Run modes for the gridkiosk command."""

import argparse
import asyncio
import contextlib
import logging
import signal
from typing import Optional

from ..display.resolver import DisplayTopologyResolver
from ..display.sources import build_sources
from ..layout.exceptions import LayoutError
from ..player import GridPlayer
from ..settings.models import PlayerSettings
from ..web.server import start_server

logger = logging.getLogger(__name__)


async def list_monitors(settings: PlayerSettings) -> int:
    """Print the detected display topology.

    Returns:
        Exit code (always 0; detection falls back to the viewport)
    """
    detection = settings.detection
    resolver = DisplayTopologyResolver(
        build_sources(detection.sources, detection.x_display),
        viewport=(settings.viewport.width, settings.viewport.height),
    )
    topology = await resolver.resolve()

    print(f"{len(topology)} display(s) detected via {topology.source}:")
    for display in topology:
        flags = " (primary)" if display.is_primary else ""
        name = f" {display.name}" if display.name else ""
        print(
            f"  [{display.index}]{name} {int(display.width)}x{int(display.height)}"
            f"+{int(display.left)}+{int(display.top)}{flags}"
        )
    return 0


async def run_player(
    settings: PlayerSettings, stop_event: Optional[asyncio.Event] = None
) -> int:
    """Run the player and its control server until signalled to stop.

    Args:
        settings: Player settings with command-line overrides applied
        stop_event: Optional event to signal shutdown; signal handlers are
            registered only when the caller does not supply one

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    player = GridPlayer(settings)
    player.start()

    try:
        runner, _port = await start_server(player, settings.server)
    except OSError:
        logger.exception("Control server could not be started")
        await player.stop()
        return 1

    try:
        try:
            if not await player.load_configuration():
                logger.warning("Starting with an empty layout")
        except LayoutError as e:
            logger.error(f"Configuration rejected: {e}")

        if settings.start_fullscreen:
            await player.wait_for_displays()
            if not await player.enter_fullscreen():
                logger.warning("Full-screen presentation could not be acquired")

        if stop_event is None:
            stop_event = asyncio.Event()
            loop = asyncio.get_running_loop()

            def _on_signal() -> None:
                logger.info("Shutdown signal received")
                stop_event.set()

            for sig in (signal.SIGINT, signal.SIGTERM):
                with contextlib.suppress(NotImplementedError):
                    loop.add_signal_handler(sig, _on_signal)

        await stop_event.wait()
        return 0

    finally:
        await player.stop()
        await runner.cleanup()
        logger.info("gridkiosk stopped")


def apply_cli_overrides(settings: PlayerSettings, args: argparse.Namespace) -> PlayerSettings:
    """Apply player-related command-line arguments to ``settings`` in place."""
    if args.config:
        settings.config_path = args.config
    if args.monitor is not None:
        settings.initial_monitor = args.monitor
    if args.fullscreen:
        settings.start_fullscreen = True
    if args.host:
        settings.server.host = args.host
    if args.port:
        settings.server.port = args.port
    return settings
