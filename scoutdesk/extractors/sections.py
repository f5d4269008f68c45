"""Category sections and delimited technology rows.

The agent groups technologies under section titles (or their status glyphs)
and lists them as markdown-ish table rows::

    ✅ AÑADIDAS
    | Tecnología | Proveedor | Score | Razón |
    |---|---|---|---|
    | Sensor Y | AcmeCo | 85 | Buen ajuste |

Rows seen before any title fall into the default category so nothing is
dropped when the agent forgets a header.
"""

from __future__ import annotations

import re

from scoutdesk.core.schema import Category, ParsedTechnology, TechnologyBuckets
from scoutdesk.core.vocabulary import VOCABULARY, ReportVocabulary

ROW_PATTERN = re.compile(r"\|\s*([^|]+?)\s*\|\s*([^|]+?)\s*\|\s*([^|]+?)\s*\|\s*([^|]+?)\s*\|")


def detect_category(line: str, vocabulary: ReportVocabulary = VOCABULARY) -> Category | None:
    for category, markers in vocabulary.section_markers.items():
        if any(marker in line for marker in markers):
            return category  # type: ignore[return-value]
    return None


def _is_header_alias(cell: str, vocabulary: ReportVocabulary) -> bool:
    lowered = cell.lower()
    return lowered in vocabulary.header_aliases or vocabulary.rule_filler in cell


def parse_row(line: str, vocabulary: ReportVocabulary = VOCABULARY) -> ParsedTechnology | None:
    match = ROW_PATTERN.search(line)
    if not match:
        return None
    name, provider, score_cell, reason = (group.strip() for group in match.groups())
    if _is_header_alias(name, vocabulary) or _is_header_alias(provider, vocabulary):
        return None
    if not (score_cell.isascii() and score_cell.isdigit()):
        return None
    return ParsedTechnology(name=name, provider=provider, score=int(score_cell), reason=reason)


def parse(text: str, vocabulary: ReportVocabulary = VOCABULARY) -> TechnologyBuckets:
    buckets = TechnologyBuckets()
    current: Category = vocabulary.default_category  # type: ignore[assignment]
    for line in text.split("\n"):
        technology = parse_row(line, vocabulary)
        if technology is not None:
            buckets.bucket(current).append(technology)
            continue
        if ROW_PATTERN.search(line):
            continue
        category = detect_category(line, vocabulary)
        if category is not None:
            current = category
    return buckets
