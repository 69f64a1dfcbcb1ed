from __future__ import annotations

import logging

import httpx

from openport.catalog.registry import CatalogLoadError, CatalogProvider, parse_catalog
from openport.core.models import EventDefinition

logger = logging.getLogger(__name__)


class CatalogClient:
    """Fetches the event catalog from the catalog editing service.

    Any failure (connection error, non-2xx status, malformed payload) degrades to
    the `fallback` provider so a run never starts without data.
    """

    def __init__(
        self,
        *,
        base_url: str,
        fallback: CatalogProvider,
        timeout: float = 2.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.fallback = fallback
        self.timeout = timeout
        self._transport = transport

    @property
    def events_url(self) -> str:
        return f"{self.base_url}/api/events"

    def fetch(self) -> list[EventDefinition]:
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                resp = client.get(self.events_url)
                resp.raise_for_status()
                events = parse_catalog(resp.json())
        except (httpx.HTTPError, ValueError, CatalogLoadError) as e:
            logger.warning("Catalog fetch from %s failed (%s); using fallback catalog", self.events_url, e)
            return self.fallback()

        logger.info("Fetched %d events from %s", len(events), self.events_url)
        return events

    def __call__(self) -> list[EventDefinition]:
        return self.fetch()
