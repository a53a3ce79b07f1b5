"""Retrieval of the tabular and narrative observation texts over HTTP."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .config import Settings
from .models import ObservationRecord
from .parsing.selector import SourceSelector
from .parsing.units import NormalizedObservation


class NDBCTextFetcher:
    """Fetches plaintext observation feeds for one station.

    Every request is bounded by the configured timeout. A failed request is
    logged and reported as None so callers can treat it as an absent source.
    """

    def __init__(self, settings: Settings, logger: logging.Logger) -> None:
        self.settings = settings
        self.logger = logger
        self._client = httpx.Client(
            timeout=settings.fetch_timeout_seconds,
            headers={
                "Accept": "text/plain",
                "User-Agent": settings.user_agent,
            },
            follow_redirects=True,
        )

    def __enter__(self) -> NDBCTextFetcher:
        return self

    def __exit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def fetch_tabular(self) -> str | None:
        return self.fetch_text(self.settings.tabular_url, context="tabular fetch")

    def fetch_narrative(self) -> str | None:
        return self.fetch_text(self.settings.narrative_url, context="narrative fetch")

    def fetch_text(self, url: str, context: str) -> str | None:
        """GET a plaintext document, returning None on any HTTP or transport failure."""
        try:
            response = self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self.logger.warning(
                "Observation %s failed with status %d at %s",
                context, exc.response.status_code, url,
            )
            return None
        except httpx.TimeoutException:
            self.logger.warning(
                "Observation %s timed out after %.1fs at %s",
                context, self.settings.fetch_timeout_seconds, url,
            )
            return None
        except httpx.HTTPError as exc:
            self.logger.warning(
                "Observation %s request failed (%s) at %s",
                context, type(exc).__name__, url,
            )
            return None

        self.logger.debug("Observation %s returned %d bytes", context, len(response.content))
        return response.text


def observe_station(
    fetcher: NDBCTextFetcher,
    selector: SourceSelector | None = None,
) -> NormalizedObservation:
    """Fetch the tabular feed and, only if it is rejected, the narrative report."""
    selector = selector or SourceSelector(logger=fetcher.logger)
    tabular_text = fetcher.fetch_tabular()
    return selector.observe(tabular_text, fetcher.fetch_narrative)


def fetch_observation(
    fetcher: NDBCTextFetcher,
    selector: SourceSelector | None = None,
) -> ObservationRecord:
    return observe_station(fetcher, selector).record
