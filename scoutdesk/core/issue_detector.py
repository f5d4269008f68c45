"""Flags scouting runs whose report suggests the agent or its tools failed."""

from __future__ import annotations

from dataclasses import dataclass, field

from scoutdesk.core.schema import ReportSummary
from scoutdesk.core.vocabulary import VOCABULARY, ReportVocabulary


@dataclass
class TechnicalIssues:
    had_technical_issues: bool = False
    technical_errors: list[str] = field(default_factory=list)


def matches_failure_pattern(text: str, vocabulary: ReportVocabulary = VOCABULARY) -> bool:
    return any(pattern.search(text) for pattern in vocabulary.failure_patterns)


def detect(
    text: str,
    summary: ReportSummary,
    error_sentences: list[str],
    vocabulary: ReportVocabulary = VOCABULARY,
) -> TechnicalIssues:
    errors = list(error_sentences)
    flagged = bool(text) and matches_failure_pattern(text, vocabulary)

    if summary.has_count_mismatch:
        flagged = True
        if not errors:
            errors.append(vocabulary.count_mismatch_message or "Technologies were evaluated but none was processed.")

    return TechnicalIssues(had_technical_issues=flagged, technical_errors=errors)
