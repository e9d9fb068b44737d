"""HTTP collection source for the MeAd conditions and geography services.

Both services expose the same pair of read-only JSON endpoints: a list of
items and one detail record per item. RemoteCollectionClient reads either of
them depending on the CollectionKind it is built for.
"""

from __future__ import annotations

import asyncio
from typing import Any
from urllib.parse import quote

import aiohttp

from mead.core.errors import ConfigurationError, TransportError
from mead.core.kinds import CollectionKind
from mead.core.logging import get_logger
from mead.core.records import (
    CollectionItem,
    DetailRecord,
    MalformedRecordError,
    parse_collection,
)

logger = get_logger(__name__)

JSON_HEADERS = {"Accept": "application/json"}


class RemoteCollectionClient:
    """Reads one MeAd collection over HTTP.

    A new aiohttp session is opened per request unless a shared session is
    passed in; a shared session is never closed by the client.

    Args:
        kind: The collection to read.
        base_url: Service base URL, e.g. ``http://localhost:8081``. May be
            None; the missing URL is reported when the first call is made.
        session: Optional shared aiohttp session.

    Example:
        client = RemoteCollectionClient(CONDITIONS, "http://localhost:8081")
        items = await client.fetch_collection()
        detail = await client.fetch_detail(items[0].id)
    """

    def __init__(
        self,
        kind: CollectionKind,
        base_url: str | None,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._kind = kind
        self._base_url = base_url.rstrip("/") if base_url else None
        self._session = session

    @property
    def kind(self) -> CollectionKind:
        return self._kind

    @property
    def base_url(self) -> str | None:
        return self._base_url

    @property
    def is_configured(self) -> bool:
        return bool(self._base_url)

    def _require_base_url(self) -> str:
        if not self._base_url:
            raise ConfigurationError(
                f"{self._kind.base_url_env} is not set; "
                f"the {self._kind.name} service is not configured.",
                setting=self._kind.base_url_env,
            )
        return self._base_url

    async def fetch_collection(self) -> list[CollectionItem]:
        """Fetch every item of the collection.

        Raises:
            ConfigurationError: If no base URL is configured.
            TransportError: If the request fails or the body is not an array
                of objects.
        """
        status, payload = await self._get_json(self._kind.list_path)
        try:
            items = parse_collection(payload)
        except MalformedRecordError as ex:
            logger.error("malformed_collection", kind=self._kind.name, error=str(ex))
            raise TransportError(status, str(ex), malformed=True) from ex

        logger.debug("collection_fetched", kind=self._kind.name, count=len(items))
        return items

    async def fetch_detail(self, item_id: str) -> DetailRecord:
        """Fetch the detail record of one item.

        Raises:
            ConfigurationError: If no base URL is configured.
            TransportError: If the request fails or the body is not an object.
        """
        path = self._kind.detail_path.format(id=quote(str(item_id), safe=""))
        status, payload = await self._get_json(path)
        try:
            return self._kind.parse_detail(payload)
        except MalformedRecordError as ex:
            logger.error(
                "malformed_detail",
                kind=self._kind.name,
                item_id=item_id,
                error=str(ex),
            )
            raise TransportError(status, str(ex), malformed=True) from ex

    async def _get_json(self, path: str) -> tuple[int, Any]:
        url = f"{self._require_base_url()}{path}"
        logger.debug("remote_get", kind=self._kind.name, url=url)

        try:
            if self._session is not None:
                return await self._request(self._session, url)
            async with aiohttp.ClientSession() as session:
                return await self._request(session, url)
        except aiohttp.ClientError as ex:
            logger.error("remote_get_network_error", url=url, error=str(ex))
            raise TransportError(None, str(ex) or ex.__class__.__name__) from ex
        except asyncio.TimeoutError as ex:
            logger.error("remote_get_timeout", url=url)
            raise TransportError(None, "Request timeout") from ex

    async def _request(
        self, session: aiohttp.ClientSession, url: str
    ) -> tuple[int, Any]:
        async with session.get(url, headers=JSON_HEADERS) as response:
            if not 200 <= response.status < 300:
                body = await _best_effort_text(response)
                logger.warning(
                    "remote_get_failed",
                    url=url,
                    status=response.status,
                    body=body[:200],
                )
                raise TransportError(response.status, body or (response.reason or ""))

            try:
                payload = await response.json(content_type=None)
            except ValueError as ex:
                logger.error("remote_get_invalid_json", url=url, error=str(ex))
                raise TransportError(response.status, str(ex), malformed=True) from ex

            return response.status, payload


async def _best_effort_text(response: aiohttp.ClientResponse) -> str:
    try:
        return await response.text()
    except (aiohttp.ClientError, UnicodeDecodeError):
        return ""
