"""HTTP peer source for the Lisk Core 1.x REST API, built on aiohttp.

Endpoints used::

    GET /api/delegates?limit=101&sort=rank:asc
    GET /api/delegates/forgers?limit=101
    GET /api/blocks?limit=100
    GET /api/blocks?generatorPublicKey=<key>&limit=1

Every response is the standard ``{"data": ..., "meta": ...}`` envelope.
"""

from __future__ import annotations

import logging
from typing import Any

import aiohttp
from pydantic import ValidationError

from delegatewatch.config import MonitorSettings
from delegatewatch.models.chain import (
    Block,
    DelegateSnapshot,
    ForgerSchedulePage,
    ForgerSlotEntry,
)
from delegatewatch.source import PeerSourceError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Payload parsing
# ---------------------------------------------------------------------------


def parse_delegate(item: dict[str, Any]) -> DelegateSnapshot:
    account = item.get("account") or {}
    return DelegateSnapshot(
        public_key=account.get("publicKey", ""),
        rank=item["rank"],
        produced_blocks=item.get("producedBlocks", 0),
        username=item.get("username", ""),
    )


def parse_block(item: dict[str, Any]) -> Block:
    return Block(
        height=item["height"],
        generator_public_key=item["generatorPublicKey"],
    )


def parse_forgers(body: dict[str, Any]) -> ForgerSchedulePage:
    meta = body.get("meta") or {}
    return ForgerSchedulePage(
        entries=[
            ForgerSlotEntry(public_key=item["publicKey"], next_slot=item["nextSlot"])
            for item in body.get("data", [])
        ],
        current_slot=meta["currentSlot"],
    )


class HttpPeerSource:
    """Queries a single Lisk node over HTTP.

    Parameters
    ----------
    base_url:
        Root URL of the node API, e.g. ``http://localhost:7000``.
    settings:
        Timeout and page-size settings.  Defaults to ``MonitorSettings()``.
    session:
        An existing ``aiohttp.ClientSession`` to reuse.  When omitted the
        source creates one lazily and closes it in ``close()``.
    """

    def __init__(
        self,
        base_url: str | None = None,
        settings: MonitorSettings | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._settings = settings or MonitorSettings()
        self._base_url = (base_url or self._settings.peer_url).rstrip("/")
        self._session = session
        self._owns_session = session is None
        self._best_height = 0

    @property
    def base_url(self) -> str:
        return self._base_url

    def best_height(self) -> int:
        return self._best_height

    def _observe_height(self, height: int | None) -> None:
        if height is not None and height > self._best_height:
            self._best_height = height

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> HttpPeerSource:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        if self._session is not None and self._owns_session:
            await self._session.close()
            self._session = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(
                    total=self._settings.request_timeout_seconds
                )
            )
        return self._session

    async def _get(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        url = f"{self._base_url}{path}"
        try:
            async with self._get_session().get(url, params=params) as response:
                if response.status != 200:
                    raise PeerSourceError(
                        f"GET {path} returned HTTP {response.status}"
                    )
                body = await response.json()
        except aiohttp.ClientError as exc:
            raise PeerSourceError(f"GET {path} failed: {exc}") from exc
        except TimeoutError as exc:
            raise PeerSourceError(f"GET {path} timed out") from exc

        if not isinstance(body, dict):
            raise PeerSourceError(
                f"GET {path} returned {type(body).__name__}, expected an object"
            )
        return body

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_delegate_roster(self) -> list[DelegateSnapshot]:
        body = await self._get(
            "/api/delegates",
            {"limit": self._settings.roster_limit, "sort": "rank:asc"},
        )
        try:
            return [parse_delegate(item) for item in body.get("data", [])]
        except (KeyError, TypeError, ValidationError) as exc:
            raise PeerSourceError(f"Malformed delegate roster: {exc}") from exc

    async def get_forger_schedule(self) -> ForgerSchedulePage:
        body = await self._get(
            "/api/delegates/forgers", {"limit": self._settings.roster_limit}
        )
        try:
            page = parse_forgers(body)
        except (KeyError, TypeError, ValidationError) as exc:
            raise PeerSourceError(f"Malformed forger schedule: {exc}") from exc
        self._observe_height((body.get("meta") or {}).get("lastBlock"))
        return page

    async def get_recent_blocks(self) -> list[Block]:
        body = await self._get("/api/blocks", {"limit": self._settings.blocks_limit})
        try:
            blocks = [parse_block(item) for item in body.get("data", [])]
        except (KeyError, TypeError, ValidationError) as exc:
            raise PeerSourceError(f"Malformed block list: {exc}") from exc
        if blocks:
            self._observe_height(max(b.height for b in blocks))
        return blocks

    async def get_last_block_of(self, public_key: str) -> Block | None:
        body = await self._get(
            "/api/blocks", {"generatorPublicKey": public_key, "limit": 1}
        )
        data = body.get("data") or []
        if not data:
            return None
        try:
            return parse_block(data[0])
        except (KeyError, TypeError, ValidationError) as exc:
            raise PeerSourceError(f"Malformed block for {public_key}: {exc}") from exc
