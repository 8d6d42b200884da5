"""HTTP client for a remote audio node speaking the Lavalink v4 REST API."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from node_player.application.interfaces.remote_node import RemoteNode
from node_player.domain.player.entities import Track
from node_player.domain.shared.exceptions import NodeRequestError
from node_player.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from node_player.config.settings import NodeSettings
    from node_player.domain.player.value_objects import PlayerUpdate

logger = logging.getLogger(__name__)

API_PREFIX = "/v4"


class RestNode(RemoteNode):
    """Sends player commands to one node over HTTP.

    Player commands never raise: transport errors and HTTP error statuses are
    logged and reported as ``False``. ``load_tracks`` raises
    ``NodeRequestError`` instead, because its caller needs the result.
    """

    def __init__(self, settings: NodeSettings, client: httpx.AsyncClient | None = None) -> None:
        self._settings = settings
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=settings.request_timeout_s)
        self.session_id = settings.session_id

    @property
    def identifier(self) -> str:
        return self._settings.identifier

    @property
    def base_url(self) -> str:
        scheme = "https" if self._settings.secure else "http"
        return f"{scheme}://{self._settings.host}:{self._settings.port}"

    @property
    def _headers(self) -> dict[str, str]:
        return {"Authorization": self._settings.password.get_secret_value()}

    def _player_path(self, room_id: str) -> str:
        return f"{API_PREFIX}/sessions/{self.session_id}/players/{room_id}"

    async def update_player(
        self, room_id: str, update: PlayerUpdate, *, no_replace: bool = False
    ) -> bool:
        return await self._send(
            "PATCH",
            self._player_path(room_id),
            json=update.to_payload(),
            params={"noReplace": "true" if no_replace else "false"},
        )

    async def destroy_player(self, room_id: str) -> bool:
        return await self._send("DELETE", self._player_path(room_id))

    async def load_tracks(self, identifier: str) -> list[Track]:
        """Run a track lookup on the node (a URL or ``prefix:query`` search)."""
        response = await self._request(
            "GET", f"{API_PREFIX}/loadtracks", params={"identifier": identifier}
        )
        body = response.json()
        load_type = body.get("loadType")
        data = body.get("data")

        if load_type == "error":
            message = (data or {}).get("message", "unknown error")
            raise NodeRequestError(ErrorMessages.NODE_LOAD_FAILED.format(message=message))
        if load_type == "track":
            payloads = [data]
        elif load_type == "playlist":
            payloads = data.get("tracks", [])
        elif load_type == "search":
            payloads = data
        else:
            payloads = []

        return [Track.from_node_payload(payload) for payload in payloads]

    async def _send(self, method: str, path: str, **kwargs: Any) -> bool:
        try:
            await self._request(method, path, **kwargs)
        except NodeRequestError:
            return False
        return True

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        logger.debug(LogTemplates.NODE_REQUEST, method, path)
        try:
            response = await self._client.request(
                method, f"{self.base_url}{path}", headers=self._headers, **kwargs
            )
        except httpx.HTTPError as e:
            logger.warning(LogTemplates.NODE_TRANSPORT_ERROR, self.identifier, method, path, e)
            raise NodeRequestError(ErrorMessages.NODE_TRANSPORT_ERROR.format(error=e)) from e

        if response.is_error:
            logger.warning(
                LogTemplates.NODE_HTTP_ERROR, self.identifier, response.status_code, method, path
            )
            raise NodeRequestError(
                ErrorMessages.NODE_HTTP_ERROR.format(
                    status=response.status_code, method=method, path=path
                ),
                status_code=response.status_code,
            )
        return response

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
            logger.debug(LogTemplates.NODE_CLIENT_CLOSED, self.identifier)
