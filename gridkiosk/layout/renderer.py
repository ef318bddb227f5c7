"""HTML rendering of the composed layout for the kiosk browser."""

import html
import logging
from typing import Iterable

from .composer import LayoutContainer
from .registry import ContentRegion

logger = logging.getLogger(__name__)

PAGE_STYLE = """
html, body { margin: 0; padding: 0; background: #000; overflow: hidden; }
#container { display: grid; }
.screen { position: relative; overflow: hidden; }
.screen iframe { width: 100%; height: 100%; border: 0; display: block; }
"""


def _attr(value: object) -> str:
    return html.escape(str(value), quote=True)


def container_style(container: LayoutContainer) -> str:
    """Inline CSS for the grid container."""
    declarations = [
        f"grid-template-columns: {container.grid_template_columns}",
        f"grid-template-rows: {container.grid_template_rows}",
        f"width: {container.width}",
        f"height: {container.height}",
        f"overflow: {container.overflow}",
    ]
    return "; ".join(declarations)


def render_region(region: ContentRegion) -> str:
    """Markup for one region: a positioned div holding an iframe."""
    return (
        f'<div class="screen" data-region-id="{_attr(region.id)}" '
        f'style="grid-area: {_attr(region.grid_area)}; z-index: {int(region.stack_order)}">'
        f'<iframe src="{_attr(region.content_uri)}" allow="autoplay; fullscreen"></iframe>'
        "</div>"
    )


def render_page(
    container: LayoutContainer,
    regions: Iterable[ContentRegion],
    revision: int = 0,
    poll_interval: float = 2.0,
    layout_url: str = "/api/layout",
    script_url: str = "/static/player.js",
) -> str:
    """Render the full page the kiosk browser loads.

    Args:
        container: Composed container descriptor
        regions: Regions in document order
        revision: Registry revision the page was rendered at
        poll_interval: Seconds between layout polls in the page
        layout_url: Endpoint serving the layout snapshot
        script_url: URL of the page script

    Returns:
        HTML document
    """
    body = "\n".join(render_region(region) for region in regions)
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>gridkiosk</title>
<style>{PAGE_STYLE}</style>
</head>
<body>
<div id="container" data-revision="{int(revision)}" data-layout-url="{_attr(layout_url)}"
     data-poll-interval="{float(poll_interval)}" style="{_attr(container_style(container))}">
{body}
</div>
<script src="{_attr(script_url)}"></script>
</body>
</html>
"""
