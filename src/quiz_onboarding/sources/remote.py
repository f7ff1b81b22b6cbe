"""
Remote-config quiz source

Fetches the quiz definition from a remote-config endpoint over HTTP. The
endpoint may return the quiz JSON directly, an object holding the quiz as a
string parameter, or a Firebase-style template
(parameters.<key>.defaultValue.value).
"""

import json
import logging
from typing import Optional

import httpx

from ..config import RemoteConfig
from ..errors import NetworkFailure, NotFound
from .base import RemoteQuizSource

logger = logging.getLogger(__name__)


class RemoteConfigSource(RemoteQuizSource):
    """
    Remote-config backed quiz source.

    Settings are passed in explicitly; the HTTP client is created lazily and
    lives until close().
    """

    def __init__(
        self,
        settings: Optional[RemoteConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize remote source.

        Args:
            settings: Endpoint, parameter key, API key and timeout
            client: Pre-built HTTP client (tests inject a MockTransport here)
        """
        self.settings = settings or RemoteConfig()
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        """Lazy initialization of HTTP client."""
        if self._client is None:
            headers = {"Accept": "application/json"}
            if self.settings.api_key:
                headers["Authorization"] = f"Bearer {self.settings.api_key}"
            self._client = httpx.AsyncClient(
                headers=headers,
                timeout=self.settings.timeout_seconds,
            )
        return self._client

    @property
    def name(self) -> str:
        return "remote-config"

    async def fetch(self) -> bytes:
        """Fetch the quiz payload from remote config."""
        if not self.settings.enabled:
            raise NotFound("No remote config URL configured")

        client = self._get_client()
        try:
            response = await client.get(self.settings.url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise NetworkFailure(
                f"Remote config returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise NetworkFailure(f"Remote config request failed: {e}") from e

        return self._extract_payload(response)

    def _extract_payload(self, response: httpx.Response) -> bytes:
        """Pull the quiz JSON out of a remote-config response."""
        key = self.settings.parameter_key
        try:
            data = response.json()
        except ValueError:
            # Not JSON at all; let the decoder report it
            return response.content

        if not isinstance(data, dict):
            return response.content

        if key in data:
            value = data[key]
        elif isinstance(data.get("parameters"), dict) and key in data["parameters"]:
            parameter = data["parameters"][key]
            default = parameter.get("defaultValue") if isinstance(parameter, dict) else None
            if parameter is not None and not isinstance(default, dict):
                raise NotFound(f"Remote config parameter '{key}' is malformed")
            value = default.get("value") if default else None
        elif "questions" in data:
            # The endpoint served the quiz itself
            return response.content
        else:
            raise NotFound(f"Remote config has no '{key}' parameter")

        if value is None:
            raise NotFound(f"Remote config parameter '{key}' is empty")

        logger.debug(f"Read quiz from remote config parameter '{key}'")
        if isinstance(value, str):
            return value.encode("utf-8")
        return json.dumps(value).encode("utf-8")

    async def close(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "RemoteConfigSource":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
