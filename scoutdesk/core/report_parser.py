"""Best-effort parser for the scouting agent's free-form report.

Each section of the report is handled by an independent extractor in
:mod:`scoutdesk.extractors`; a missing or malformed section leaves its
defaults untouched and never aborts the parse.
"""

from __future__ import annotations

import json
from typing import Any

from scoutdesk.core import issue_detector
from scoutdesk.core.schema import ParsedReport
from scoutdesk.core.vocabulary import VOCABULARY, ReportVocabulary
from scoutdesk.extractors import prose, sections, summary as summary_extractor


def parse(text: str | None, vocabulary: ReportVocabulary = VOCABULARY) -> ParsedReport:
    if not text:
        return ParsedReport(raw_text=text or "")

    summary = summary_extractor.parse(text, vocabulary)
    error_sentences = prose.parse_error_sentences(text, vocabulary)
    issues = issue_detector.detect(text, summary, error_sentences, vocabulary)

    return ParsedReport(
        summary=summary,
        technologies=sections.parse(text, vocabulary),
        conclusions=prose.parse_conclusions(text, vocabulary),
        recommendations=prose.parse_recommendations(text, vocabulary),
        technical_errors=issues.technical_errors,
        had_technical_issues=issues.had_technical_issues,
        raw_text=text,
    )


def extract_report_text(history_item: dict[str, Any] | None) -> str:
    """Locate the report text of a scouting run history row.

    ``results_summary`` wins when present; otherwise the first log entry of
    the ``report`` phase (or mentioning ``INFORME``) is used.
    """

    if not history_item:
        return ""

    results = history_item.get("results_summary")
    if isinstance(results, str) and results:
        return results
    if isinstance(results, dict) and results:
        candidate = results.get("raw_output") or results.get("report")
        if isinstance(candidate, str) and candidate:
            return candidate
        return json.dumps(results, indent=2, ensure_ascii=False)

    for log in history_item.get("logs") or []:
        if not isinstance(log, dict):
            continue
        message = log.get("message")
        if log.get("phase") == "report" or (isinstance(message, str) and "INFORME" in message):
            return message if isinstance(message, str) else ""
    return ""
