"""Report vocabulary loaded from ``config/report_vocabulary.yaml``.

The scouting agent writes its report in Spanish prose with a handful of
recurring labels, section titles and glyphs.  Keeping them as data lets the
extractors stay generic while the wording of the upstream prompt evolves.
"""
from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"
CATEGORIES = ("added", "review", "rejected")


@dataclass(frozen=True)
class ProseBlock:
    start: re.Pattern[str]
    stop: tuple[str, ...] = ()

    def pattern(self) -> re.Pattern[str]:
        stops = [re.escape(item) for item in self.stop]
        lookahead = "|".join(stops + [r"\Z"])
        return re.compile(rf"{self.start.pattern}([\s\S]*?)(?={lookahead})", re.IGNORECASE)


@dataclass(frozen=True)
class ReportVocabulary:
    summary: dict[str, re.Pattern[str]] = field(default_factory=dict)
    section_markers: dict[str, tuple[str, ...]] = field(default_factory=dict)
    default_category: str = "review"
    header_aliases: frozenset[str] = frozenset()
    rule_filler: str = "---"
    prose: dict[str, ProseBlock] = field(default_factory=dict)
    bullet: re.Pattern[str] = re.compile(r"^[-*•]\s*")
    not_applicable: str = "n/a"
    failure_patterns: tuple[re.Pattern[str], ...] = ()
    error_sentences: tuple[re.Pattern[str], ...] = ()
    count_mismatch_message: str = ""


def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern, re.IGNORECASE)


def _build(data: dict[str, Any]) -> ReportVocabulary:
    summary = {
        key: _compile(value)
        for key, value in (data.get("summary") or {}).items()
        if key in {"evaluated", *CATEGORIES}
    }
    markers = {
        key: tuple(str(marker) for marker in values)
        for key, values in (data.get("section_markers") or {}).items()
        if key in CATEGORIES
    }
    default_category = str(data.get("default_category") or "review")
    if default_category not in CATEGORIES:
        default_category = "review"

    prose_data = data.get("prose") or {}
    prose = {
        key: ProseBlock(start=_compile(block["start"]), stop=tuple(block.get("stop") or ()))
        for key, block in prose_data.items()
        if isinstance(block, dict) and block.get("start")
    }

    return ReportVocabulary(
        summary=summary,
        section_markers=markers,
        default_category=default_category,
        header_aliases=frozenset(str(alias).lower() for alias in data.get("header_aliases") or ()),
        rule_filler=str(data.get("rule_filler") or "---"),
        prose=prose,
        bullet=re.compile(prose_data.get("bullet") or r"^[-*•]\s*"),
        not_applicable=str(prose_data.get("not_applicable") or "n/a").lower(),
        failure_patterns=tuple(_compile(item) for item in data.get("failure_patterns") or ()),
        error_sentences=tuple(_compile(item) for item in data.get("error_sentences") or ()),
        count_mismatch_message=str(data.get("count_mismatch_message") or ""),
    )


def load_vocabulary(path: Path | None = None) -> ReportVocabulary:
    if path is None:
        env_path = os.getenv("SCOUTING_VOCABULARY_PATH")
        path = Path(env_path) if env_path else CONFIG_DIR / "report_vocabulary.yaml"
    if not path.exists():
        return ReportVocabulary()
    with path.open("r", encoding="utf-8") as fp:
        return _build(yaml.safe_load(fp) or {})


VOCABULARY = load_vocabulary()
