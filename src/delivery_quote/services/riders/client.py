"""HTTP client for the live rider availability service."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from ...config import settings
from ...models.domain import RiderAvailability

logger = logging.getLogger(__name__)


def default_snapshot() -> RiderAvailability:
    # placeholder until every zone reports live rider counts
    return RiderAvailability(
        active_riders=settings.default_active_riders,
        queued_jobs=settings.default_queued_jobs,
    )


class RiderAvailabilityClient:
    """Fetch a per-zone rider snapshot, bounded by a short timeout.

    Any transport failure or malformed payload yields the default snapshot
    so quote latency stays bounded.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url if base_url is not None else settings.rider_service_url
        self.timeout = timeout if timeout is not None else settings.rider_service_timeout_seconds
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url or "",
            timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 1.0)),
            transport=self._transport,
        )

    def snapshot(self, zone_code: Optional[str] = None) -> RiderAvailability:
        if not self.base_url:
            return default_snapshot()

        params = {"zone": zone_code} if zone_code else None
        try:
            with self._get_client() as client:
                response = client.get("/availability", params=params)
                response.raise_for_status()
                data = response.json()
            return RiderAvailability(
                active_riders=max(0, int(data["active_riders"])),
                queued_jobs=max(0, int(data["queued_jobs"])),
            )
        except httpx.TimeoutException as exc:
            logger.warning(f"Rider availability request timed out after {self.timeout}s: {exc}")
        except httpx.HTTPError as exc:
            logger.warning(f"Rider availability request failed: {exc}")
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning(f"Rider availability response malformed: {exc}")
        return default_snapshot()
