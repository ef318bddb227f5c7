"""Unit tests for ConfigurationLoader."""

import json
from pathlib import Path
from typing import Any, AsyncIterator

import pytest
import pytest_asyncio
from aiohttp import test_utils, web

from gridkiosk.layout.exceptions import ConfigurationRetrievalFailure, LayoutValidationError
from gridkiosk.layout.loader import ConfigurationLoader

YAML_LAYOUT = """
layout:
  columns: [1fr, 1fr]
  rows: [1fr]
screens:
  - id: a
    content: https://example.com/a
    gridArea: 1 / 1
settings:
  spanMonitors: true
"""


@pytest_asyncio.fixture
async def config_server(
    layout_mapping: dict[str, Any],
) -> AsyncIterator[test_utils.TestServer]:
    """HTTP server serving layout documents."""

    async def json_layout(request: web.Request) -> web.Response:
        return web.json_response(layout_mapping)

    async def yaml_layout(request: web.Request) -> web.Response:
        return web.Response(text=YAML_LAYOUT, content_type="text/yaml")

    async def broken(request: web.Request) -> web.Response:
        return web.Response(text="{not json", content_type="application/json")

    async def undecodable(request: web.Request) -> web.Response:
        return web.Response(
            body=b'{"layout": "\xff\xfe"}', content_type="application/json", charset="utf-8"
        )

    app = web.Application()
    app.router.add_get("/layout.json", json_layout)
    app.router.add_get("/layout.yaml", yaml_layout)
    app.router.add_get("/broken.json", broken)
    app.router.add_get("/undecodable.json", undecodable)

    server = test_utils.TestServer(app)
    await server.start_server()
    try:
        yield server
    finally:
        await server.close()


class TestConfigurationLoaderFiles:
    """Test loading documents from the file system."""

    @pytest.mark.asyncio
    async def test_load_document_when_json_file_then_document(
        self, tmp_path: Path, layout_mapping: dict[str, Any]
    ) -> None:
        path = tmp_path / "layout.json"
        path.write_text(json.dumps(layout_mapping))

        document = await ConfigurationLoader().load_document(path)

        assert [region.id for region in document.regions] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_load_document_when_yaml_file_then_document(self, tmp_path: Path) -> None:
        path = tmp_path / "layout.yml"
        path.write_text(YAML_LAYOUT)

        document = await ConfigurationLoader().load_document(str(path))

        assert document.presentation.span_monitors is True
        assert document.regions[0].grid_placement == "1 / 1"

    @pytest.mark.asyncio
    async def test_fetch_when_relative_path_then_resolved_against_base_dir(
        self, tmp_path: Path, layout_mapping: dict[str, Any]
    ) -> None:
        (tmp_path / "layout.json").write_text(json.dumps(layout_mapping))

        data = await ConfigurationLoader(base_dir=tmp_path).fetch("layout.json")

        assert data == layout_mapping

    @pytest.mark.asyncio
    async def test_fetch_when_file_missing_then_retrieval_failure(self, tmp_path: Path) -> None:
        missing = tmp_path / "missing.json"

        with pytest.raises(ConfigurationRetrievalFailure) as exc_info:
            await ConfigurationLoader().fetch(missing)

        assert exc_info.value.location == str(missing)

    @pytest.mark.asyncio
    async def test_fetch_when_invalid_json_then_retrieval_failure(self, tmp_path: Path) -> None:
        path = tmp_path / "layout.json"
        path.write_text("{not json")

        with pytest.raises(ConfigurationRetrievalFailure, match="not valid JSON"):
            await ConfigurationLoader().fetch(path)

    @pytest.mark.asyncio
    async def test_fetch_when_invalid_yaml_then_retrieval_failure(self, tmp_path: Path) -> None:
        path = tmp_path / "layout.yaml"
        path.write_text("layout: [unclosed")

        with pytest.raises(ConfigurationRetrievalFailure, match="not valid YAML"):
            await ConfigurationLoader().fetch(path)

    @pytest.mark.asyncio
    async def test_fetch_when_file_not_utf8_then_retrieval_failure(self, tmp_path: Path) -> None:
        path = tmp_path / "layout.json"
        path.write_bytes(b'{"layout": "\xff\xfe"}')

        with pytest.raises(ConfigurationRetrievalFailure, match="not valid UTF-8") as exc_info:
            await ConfigurationLoader().fetch(path)

        assert exc_info.value.location == str(path)

    @pytest.mark.asyncio
    async def test_load_document_when_decoded_but_invalid_then_validation_error(
        self, tmp_path: Path
    ) -> None:
        path = tmp_path / "layout.json"
        path.write_text(json.dumps({"layout": {"columns": [], "rows": ["1fr"]}}))

        with pytest.raises(LayoutValidationError):
            await ConfigurationLoader().load_document(path)


class TestConfigurationLoaderHttp:
    """Test loading documents over HTTP."""

    @pytest.mark.asyncio
    async def test_load_document_when_json_url_then_document(
        self, config_server: test_utils.TestServer
    ) -> None:
        url = str(config_server.make_url("/layout.json"))

        document = await ConfigurationLoader(timeout=5).load_document(url)

        assert len(document.regions) == 2

    @pytest.mark.asyncio
    async def test_load_document_when_yaml_url_then_decoded_as_yaml(
        self, config_server: test_utils.TestServer
    ) -> None:
        url = str(config_server.make_url("/layout.yaml"))

        document = await ConfigurationLoader(timeout=5).load_document(url)

        assert document.presentation.span_monitors is True

    @pytest.mark.asyncio
    async def test_fetch_when_http_error_status_then_retrieval_failure(
        self, config_server: test_utils.TestServer
    ) -> None:
        url = str(config_server.make_url("/missing.json"))

        with pytest.raises(ConfigurationRetrievalFailure, match="HTTP 404") as exc_info:
            await ConfigurationLoader(timeout=5).fetch(url)

        assert exc_info.value.location == url

    @pytest.mark.asyncio
    async def test_fetch_when_body_not_json_then_retrieval_failure(
        self, config_server: test_utils.TestServer
    ) -> None:
        url = str(config_server.make_url("/broken.json"))

        with pytest.raises(ConfigurationRetrievalFailure, match="not valid JSON"):
            await ConfigurationLoader(timeout=5).fetch(url)

    @pytest.mark.asyncio
    async def test_fetch_when_server_unreachable_then_retrieval_failure(
        self, config_server: test_utils.TestServer
    ) -> None:
        url = str(config_server.make_url("/layout.json"))
        await config_server.close()

        with pytest.raises(ConfigurationRetrievalFailure, match="Could not retrieve"):
            await ConfigurationLoader(timeout=5).fetch(url)

    @pytest.mark.asyncio
    async def test_fetch_when_body_not_utf8_then_retrieval_failure(
        self, config_server: test_utils.TestServer
    ) -> None:
        url = str(config_server.make_url("/undecodable.json"))

        with pytest.raises(ConfigurationRetrievalFailure, match="not valid text") as exc_info:
            await ConfigurationLoader(timeout=5).fetch(url)

        assert exc_info.value.location == url
