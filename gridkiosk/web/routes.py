"""Control API and page routes for the grid player."""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from aiohttp import web

from ..layout.exceptions import LayoutError, LayoutValidationError
from ..layout.renderer import render_page

if TYPE_CHECKING:
    from ..player import GridPlayer

logger = logging.getLogger(__name__)


async def _read_json_object(request: web.Request) -> dict[str, Any]:
    """Request body as a JSON object; an empty body counts as ``{}``.

    Raises:
        web.HTTPBadRequest: If the body is not a JSON object
    """
    if not request.can_read_body:
        return {}
    try:
        data = await request.json()
    except ValueError:
        raise web.HTTPBadRequest(
            text='{"error": "invalid json"}', content_type="application/json"
        ) from None
    if not isinstance(data, dict):
        raise web.HTTPBadRequest(
            text='{"error": "expected a json object"}', content_type="application/json"
        )
    return data


def _is_index(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def register_page_routes(
    app: web.Application, player: "GridPlayer", static_dir: Path, poll_interval: float
) -> None:
    """Register the kiosk page and its static assets.

    Args:
        app: aiohttp web application
        player: Player whose layout is rendered
        static_dir: Directory holding ``player.js``
        poll_interval: Seconds between layout polls in the page
    """

    async def serve_page(_request: web.Request) -> web.Response:
        page = render_page(
            player.composer.container,
            player.registry,
            revision=player.registry.revision,
            poll_interval=poll_interval,
        )
        return web.Response(text=page, content_type="text/html")

    app.router.add_get("/", serve_page)
    app.router.add_static("/static", static_dir)


def register_api_routes(app: web.Application, player: "GridPlayer") -> None:
    """Register the JSON control API.

    Args:
        app: aiohttp web application
        player: Player the routes operate on
    """

    async def get_layout(_request: web.Request) -> web.Response:
        return web.json_response(player.composer.snapshot())

    async def get_status(_request: web.Request) -> web.Response:
        return web.json_response(player.get_status().to_dict())

    async def get_monitors(_request: web.Request) -> web.Response:
        topology = player.controller.topology
        return web.json_response({"count": player.get_monitor_count(), **topology.to_dict()})

    async def post_monitor(request: web.Request) -> web.Response:
        data = await _read_json_object(request)
        index = data.get("index")
        if not _is_index(index):
            return web.json_response({"error": "missing or invalid index"}, status=400)
        if not player.set_monitor(index):
            return web.json_response(
                {"error": "monitor index out of range", "count": player.get_monitor_count()},
                status=400,
            )
        return web.json_response({"selected": index})

    async def post_fullscreen(request: web.Request) -> web.Response:
        data = await _read_json_object(request)
        monitor = data.get("monitor")
        if monitor is not None and not _is_index(monitor):
            return web.json_response({"error": "invalid monitor"}, status=400)

        success = await player.enter_fullscreen(monitor)
        return web.json_response(
            {"success": success, "presentation": player.controller.state.to_dict()},
            status=200 if success else 409,
        )

    async def delete_fullscreen(_request: web.Request) -> web.Response:
        await player.exit_fullscreen()
        return web.json_response({"presentation": player.controller.state.to_dict()})

    async def post_screen(request: web.Request) -> web.Response:
        region_id = request.match_info["region_id"]
        data = await _read_json_object(request)
        content = data.get("content")
        if not content or not isinstance(content, str):
            return web.json_response({"error": "missing or invalid content"}, status=400)

        if not player.update_screen(region_id, content):
            return web.json_response({"error": f"unknown screen: {region_id}"}, status=404)
        return web.json_response({"id": region_id, "content": content})

    async def post_config(request: web.Request) -> web.Response:
        data = await _read_json_object(request)
        path = data.get("path")
        if path is not None and (not path or not isinstance(path, str)):
            return web.json_response({"error": "invalid path"}, status=400)

        try:
            loaded = await player.load_configuration(path)
        except LayoutValidationError as e:
            return web.json_response({"error": e.message, "details": e.errors}, status=422)
        except LayoutError as e:
            logger.exception("Applying configuration failed")
            return web.json_response({"error": str(e)}, status=500)

        if not loaded:
            return web.json_response(
                {"loaded": False, "error": player.get_status().last_error}, status=502
            )
        return web.json_response({"loaded": True, "regions": player.registry.ids()})

    app.router.add_get("/api/layout", get_layout)
    app.router.add_get("/api/status", get_status)
    app.router.add_get("/api/monitors", get_monitors)
    app.router.add_post("/api/monitor", post_monitor)
    app.router.add_post("/api/fullscreen", post_fullscreen)
    app.router.add_delete("/api/fullscreen", delete_fullscreen)
    app.router.add_post("/api/screens/{region_id}", post_screen)
    app.router.add_post("/api/config", post_config)
