"""Label-keyed extraction of the four summary counters."""

from __future__ import annotations

from scoutdesk.core.schema import ReportSummary
from scoutdesk.core.vocabulary import VOCABULARY, ReportVocabulary


def parse(text: str, vocabulary: ReportVocabulary = VOCABULARY) -> ReportSummary:
    counts: dict[str, int] = {}
    for key, pattern in vocabulary.summary.items():
        match = pattern.search(text)
        if not match:
            continue
        try:
            counts[key] = int(match.group(1))
        except (IndexError, ValueError):
            continue
    return ReportSummary(**counts)
