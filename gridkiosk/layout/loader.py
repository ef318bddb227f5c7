"""Configuration document retrieval from local files or HTTP(S) URLs."""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

import aiohttp
import yaml

from .exceptions import ConfigurationRetrievalFailure
from .models import LayoutDocument

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")


def _is_url(location: str) -> bool:
    return location.startswith(("http://", "https://"))


class ConfigurationLoader:
    """Fetch and decode layout configuration documents.

    JSON is the default format; paths or URLs ending in ``.yaml``/``.yml``
    are decoded as YAML.

    Example:
        >>> loader = ConfigurationLoader(timeout=10)
        >>> document = await loader.load_document("config.json")
    """

    def __init__(self, timeout: float = 30.0, base_dir: Optional[Path] = None) -> None:
        """Initialize the loader.

        Args:
            timeout: Total timeout in seconds for HTTP retrieval
            base_dir: Directory relative file paths are resolved against
        """
        self.timeout = timeout
        self.base_dir = base_dir
        self.logger = logging.getLogger(f"{__name__}.ConfigurationLoader")

    async def fetch(self, location: Union[str, Path]) -> Any:
        """Retrieve and decode the document at ``location``.

        Args:
            location: File path or http(s) URL

        Returns:
            Decoded document (normally a mapping)

        Raises:
            ConfigurationRetrievalFailure: If the document cannot be read or decoded
        """
        location = str(location)
        if _is_url(location):
            text = await self._fetch_url(location)
        else:
            text = await self._read_file(location)
        return self._decode(text, location)

    async def load_document(self, location: Union[str, Path]) -> LayoutDocument:
        """Retrieve ``location`` and validate it as a layout document.

        Raises:
            ConfigurationRetrievalFailure: If the document cannot be read or decoded
            LayoutValidationError: If the document is not a valid layout
        """
        data = await self.fetch(location)
        return LayoutDocument.from_mapping(data)

    async def _fetch_url(self, url: str) -> str:
        self.logger.debug(f"Fetching configuration from {url}")
        try:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(url) as response:
                    if response.status != 200:
                        raise ConfigurationRetrievalFailure(
                            f"HTTP {response.status} retrieving configuration", location=url
                        )
                    return await response.text()
        except ConfigurationRetrievalFailure:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ConfigurationRetrievalFailure(
                f"Could not retrieve configuration: {e}", location=url
            ) from e
        except UnicodeDecodeError as e:
            raise ConfigurationRetrievalFailure(
                f"Configuration is not valid text: {e}", location=url
            ) from e

    async def _read_file(self, location: str) -> str:
        path = Path(location).expanduser()
        if not path.is_absolute() and self.base_dir is not None:
            path = self.base_dir / path

        self.logger.debug(f"Reading configuration from {path}")
        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8")
        except OSError as e:
            raise ConfigurationRetrievalFailure(
                f"Could not read configuration: {e}", location=str(path)
            ) from e
        except UnicodeDecodeError as e:
            raise ConfigurationRetrievalFailure(
                f"Configuration is not valid UTF-8: {e}", location=str(path)
            ) from e

    def _decode(self, text: str, location: str) -> Any:
        is_yaml = location.split("?", 1)[0].lower().endswith(YAML_SUFFIXES)
        try:
            if is_yaml:
                return yaml.safe_load(text)
            return json.loads(text)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigurationRetrievalFailure(
                f"Configuration is not valid {'YAML' if is_yaml else 'JSON'}: {e}",
                location=location,
            ) from e
