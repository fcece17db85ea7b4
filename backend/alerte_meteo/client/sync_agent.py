# alerte_meteo/client/sync_agent.py
# ------------------------------------------------------------
# Polling client for the public display.
#
# Per cycle:  idle -> fetching -> applying -> idle
#                          \-> error-held (kept until next success)
#
# - Last known good alert is kept and re-rendered while the
#   backend is unreachable (hosting cold starts take ~30-60s).
# - Only a failure with nothing cached shows an error view.
# - Wilaya geodata is fetched lazily, only once an active alert
#   names wilayas, with the same keep-what-you-have policy.
# - A poll never overlaps a poll still in flight.
# ------------------------------------------------------------

from __future__ import annotations

import asyncio
import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Literal, Optional, Sequence

import httpx
import structlog

from ..activation import evaluate_activation
from ..geo import RegionIndex
from ..models import AlertRecord, WilayaDataset, utcnow
from ..normalizer import normalize_alert
from .display import RECONNECTING_WARNING, AlertView, build_error_view, build_view

logger = structlog.get_logger(__name__)

Renderer = Callable[[AlertView], None]
PollOutcome = Literal["ok", "failed", "skipped"]

# errors that mean "backend unavailable right now"
TRANSIENT_ERRORS = (httpx.HTTPError, ValueError)


class SyncPhase(str, enum.Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    APPLYING = "applying"
    ERROR_HELD = "error-held"


@dataclass
class SyncState:
    """Per-agent sync state; never shared between agents."""

    last_good: Optional[AlertRecord] = None
    consecutive_failures: int = 0
    phase: SyncPhase = SyncPhase.IDLE
    warning: Optional[str] = None


@dataclass
class RegionDataState:
    index: Optional[RegionIndex] = None
    consecutive_failures: int = 0


class AlertSyncAgent:
    """
    Keeps a renderer fed with the current alert.

    Example:
        async with AlertSyncAgent("https://alertes.example", renderer=print) as agent:
            await agent.run()
    """

    def __init__(
        self,
        base_url: str,
        renderer: Renderer,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 8.0,
        poll_interval: float = 30.0,
        cold_start_delays: Sequence[float] = (2.0, 5.0, 10.0),
        clock: Callable[[], datetime] = utcnow,
    ):
        self.base_url = base_url.rstrip("/")
        self.renderer = renderer
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.cold_start_delays = list(cold_start_delays)
        self.clock = clock

        self.state = SyncState()
        self.regions = RegionDataState()

        self._client = http_client
        self._owns_client = http_client is None
        self._poll_lock = asyncio.Lock()
        self._stop = asyncio.Event()

    # --------------------------------------------------------
    # Lifecycle
    # --------------------------------------------------------
    async def __aenter__(self) -> "AlertSyncAgent":
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
            self._owns_client = True
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def stop(self) -> None:
        self._stop.set()

    # --------------------------------------------------------
    # Fetching
    # --------------------------------------------------------
    async def _get_json(self, path: str) -> Any:
        client = self._ensure_client()
        resp = await client.get(
            f"{self.base_url}{path}",
            headers={"Cache-Control": "no-cache"},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()

    async def fetch_alert(self) -> AlertRecord:
        data = await self._get_json("/api/alert")
        if not isinstance(data, dict):
            raise ValueError("alert payload is not a JSON object")
        record = normalize_alert(data)
        # trust the server's read-time evaluation, but never an active "none"
        record.active = bool(data.get("active")) and record.level != "none"
        return record

    async def _ensure_regions(self) -> None:
        if self.regions.index is not None:
            return
        try:
            data = await self._get_json("/api/wilayas")
            index = RegionIndex.from_dataset(WilayaDataset.model_validate(data))
        except TRANSIENT_ERRORS as exc:
            # silent: the alert still renders, markers appear on a later poll
            self.regions.consecutive_failures += 1
            logger.debug(
                "wilaya dataset unavailable",
                error=str(exc),
                failures=self.regions.consecutive_failures,
            )
            return
        self.regions.index = index
        self.regions.consecutive_failures = 0
        logger.debug("wilaya dataset loaded", entries=len(index))

    # --------------------------------------------------------
    # One cycle
    # --------------------------------------------------------
    async def poll_once(self) -> PollOutcome:
        if self._poll_lock.locked():
            logger.debug("poll skipped, previous fetch still in flight")
            return "skipped"

        async with self._poll_lock:
            self.state.phase = SyncPhase.FETCHING
            try:
                record = await self.fetch_alert()
            except TRANSIENT_ERRORS as exc:
                self._on_failure(exc)
                return "failed"

            self.state.phase = SyncPhase.APPLYING
            self.state.last_good = record
            self.state.consecutive_failures = 0
            self.state.warning = None

            if record.active and record.regions:
                await self._ensure_regions()

            self._render(build_view(record, self.regions.index))
            self.state.phase = SyncPhase.IDLE
            return "ok"

    def _on_failure(self, exc: Exception) -> None:
        self.state.consecutive_failures += 1
        self.state.phase = SyncPhase.ERROR_HELD
        self.state.warning = RECONNECTING_WARNING

        logger.warning(
            "alert fetch failed",
            error=f"{type(exc).__name__}: {exc}",
            failures=self.state.consecutive_failures,
            holding_last_good=self.state.last_good is not None,
        )

        if self.state.last_good is not None:
            # the held alert may run past its endAt while the backend is down
            held = evaluate_activation(self.state.last_good, self.clock())
            self._render(build_view(held, self.regions.index, warning=self.state.warning))
        else:
            self._render(build_error_view())

    def _render(self, view: AlertView) -> None:
        self.renderer(view)

    # --------------------------------------------------------
    # Loop
    # --------------------------------------------------------
    async def _sleep(self, seconds: float) -> bool:
        """Sleep unless stopped first. True means stop was requested."""
        try:
            await asyncio.wait_for(self._stop.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            return False
        return True

    async def run(self) -> None:
        """
        Initial load, quick cold-start retries, then the fixed interval,
        until stop() is called.
        """
        self._stop.clear()
        await self.poll_once()

        for delay in self.cold_start_delays:
            if await self._sleep(delay):
                return
            await self.poll_once()

        while not await self._sleep(self.poll_interval):
            await self.poll_once()
