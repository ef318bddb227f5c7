"""aiohttp control server: serves the kiosk page and the control API."""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from aiohttp import web

from .routes import register_api_routes, register_page_routes

if TYPE_CHECKING:
    from ..player import GridPlayer
    from ..settings.models import ServerSettings

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"
MAX_PORT_ATTEMPTS = 10


def create_app(player: "GridPlayer", settings: "ServerSettings") -> web.Application:
    """Create the aiohttp application with routes wired to ``player``."""
    app = web.Application()
    register_page_routes(app, player, STATIC_DIR, settings.poll_interval)
    register_api_routes(app, player)

    async def _shutdown(_app: web.Application) -> None:
        logger.info("Control server shutdown requested")

    app.on_shutdown.append(_shutdown)
    return app


async def start_server(
    player: "GridPlayer", settings: "ServerSettings"
) -> tuple[web.AppRunner, int]:
    """Start the control server, trying successive ports when one is in use.

    The player's page URL is updated to the port actually bound.

    Returns:
        The running ``AppRunner`` and the bound port

    Raises:
        OSError: If binding fails for a reason other than the port being in
            use, or no port in the range is free
    """
    runner = web.AppRunner(create_app(player, settings))
    await runner.setup()

    host = settings.host
    actual_port = settings.port
    for port_offset in range(MAX_PORT_ATTEMPTS):
        actual_port = settings.port + port_offset
        site = web.TCPSite(runner, host=host, port=actual_port)
        try:
            await site.start()
            break
        except OSError as e:
            if "address already in use" not in str(e).lower():
                logger.exception(f"Failed to start server on {host}:{actual_port}")
                await runner.cleanup()
                raise
            logger.debug(f"Port {actual_port} in use, trying next port")
    else:
        await runner.cleanup()
        raise OSError(
            f"Could not find available port in range "
            f"{settings.port}-{settings.port + MAX_PORT_ATTEMPTS - 1}"
        )

    player.page_url = f"http://{host}:{actual_port}/"
    logger.info(f"Control server listening on {player.page_url}")
    return runner, actual_port
