"""Source selection: probe the tabular text, fall back to the narrative report."""

from __future__ import annotations

import logging
from collections.abc import Callable

from ..exceptions import FetchFailureError, MissingTimestampError
from ..models import (
    ObservationRecord,
    ObservationSource,
    ParseDiagnostics,
    RawTabularFields,
    TabularProbe,
)
from .narrative import RAW_SNIPPET_LENGTH, NarrativeParser
from .tabular import REQUIRED_TOKENS, TabularParser, probe_tabular
from .units import NormalizedObservation, UnitNormalizer

NarrativeLoader = Callable[[], str | None]


class SourceSelector:
    """Chooses which encoding to trust and drives extraction and normalization.

    One call walks PROBE_TABULAR -> PARSE_TABULAR | PARSE_NARRATIVE -> NORMALIZE.
    A rejected tabular row moves on to the narrative report; only a missing
    source or a narrative report without a timestamp ends in failure.
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        *,
        tabular_parser: TabularParser | None = None,
        narrative_parser: NarrativeParser | None = None,
        normalizer: UnitNormalizer | None = None,
    ) -> None:
        self.logger = logger or logging.getLogger("buoy_obs.parsing.selector")
        self.tabular_parser = tabular_parser or TabularParser(logger=self.logger)
        self.narrative_parser = narrative_parser or NarrativeParser(logger=self.logger)
        self.normalizer = normalizer or UnitNormalizer(logger=self.logger)

    def select(self, tabular_text: str | None) -> tuple[ObservationSource, TabularProbe]:
        """Return the source the probe routes to, with the probe verdict."""
        probe = probe_tabular(tabular_text)
        return ("tabular" if probe.usable else "narrative"), probe

    def parse(self, tabular_text: str | None, narrative_text: str | None) -> ObservationRecord:
        """Parse pre-fetched candidate texts."""
        return self.run(tabular_text, lambda: narrative_text)

    def run(self, tabular_text: str | None, load_narrative: NarrativeLoader) -> ObservationRecord:
        """Parse the tabular text, calling `load_narrative` only if it is rejected."""
        return self.observe(tabular_text, load_narrative).record

    def observe(
        self, tabular_text: str | None, load_narrative: NarrativeLoader
    ) -> NormalizedObservation:
        """Like `run`, but also returns the chosen source and non-fatal anomalies."""
        source, probe = self.select(tabular_text)
        diagnostics = ParseDiagnostics(
            source=source,
            tabular_token_count=probe.token_count if probe.line is not None else None,
            required_token_count=REQUIRED_TOKENS,
            tabular_rejection=probe.reason,
        )

        if source == "tabular" and tabular_text is not None:
            result = self.tabular_parser.parse(tabular_text)
            if isinstance(result, RawTabularFields):
                normalized = self.normalizer.normalize_tabular(result)
                self.logger.info(
                    "Parsed tabular observation at %s (%d columns)",
                    normalized.record.timestamp.isoformat(), probe.token_count,
                    extra={"source": "tabular"},
                )
                return normalized
            self.logger.info("Tabular row rejected (%s); using narrative report", result.message)
            diagnostics = diagnostics.model_copy(
                update={
                    "source": "narrative",
                    "tabular_token_count": result.actual_tokens,
                    "tabular_rejection": result.message,
                }
            )
        elif probe.reason:
            self.logger.info("Tabular text not usable (%s); using narrative report", probe.reason)

        narrative_text = load_narrative()
        if narrative_text is None or not narrative_text.strip():
            snippet = tabular_text[:RAW_SNIPPET_LENGTH] if tabular_text else None
            raise FetchFailureError(
                "Failed to fetch observation: no data available from any source",
                diagnostics=diagnostics.model_copy(update={"raw_snippet": snippet}),
            )

        try:
            raw = self.narrative_parser.parse(narrative_text)
        except MissingTimestampError as exc:
            exc.diagnostics = diagnostics.model_copy(
                update={"raw_snippet": narrative_text[:RAW_SNIPPET_LENGTH]}
            )
            raise

        normalized = self.normalizer.normalize_narrative(raw)
        self.logger.info(
            "Parsed narrative observation at %s",
            normalized.record.timestamp.isoformat(),
            extra={"source": "narrative"},
        )
        return normalized


def parse_observation(
    tabular_text: str | None,
    narrative_text: str | None,
    *,
    logger: logging.Logger | None = None,
) -> ObservationRecord:
    """Normalize one observation from the tabular and/or narrative text.

    Raises FetchFailureError when no usable text is available and
    MissingTimestampError when the narrative report has no GMT timestamp.
    """
    return SourceSelector(logger=logger).parse(tabular_text, narrative_text)
