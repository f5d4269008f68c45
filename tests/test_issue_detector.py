from __future__ import annotations

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from scoutdesk.core.issue_detector import detect, matches_failure_pattern
from scoutdesk.core.report_parser import parse
from scoutdesk.core.schema import ReportSummary
from scoutdesk.core.vocabulary import VOCABULARY


def test_count_mismatch_synthesises_a_message():
    report = parse("Tecnologías evaluadas: 5")

    assert report.had_technical_issues is True
    assert report.technical_errors == [VOCABULARY.count_mismatch_message]


def test_count_mismatch_keeps_extracted_sentences():
    summary = ReportSummary(evaluated=3)

    issues = detect("texto", summary, ["Debido a un error de red."])

    assert issues.had_technical_issues is True
    assert issues.technical_errors == ["Debido a un error de red."]


def test_partial_mismatch_is_not_flagged():
    report = parse("Tecnologías evaluadas: 5\nAñadidas: 1")

    assert report.had_technical_issues is False
    assert report.technical_errors == []


def test_failure_phrases_flag_without_sentences():
    for text in (
        "La herramienta de búsqueda falló dos veces",
        "The search tool failed to respond",
        "No se pudo completar el análisis",
        "Hubo problemas técnicos durante la ejecución",
        "check_duplicate devolvió un timeout",
    ):
        assert matches_failure_pattern(text), text
        report = parse(text)
        assert report.had_technical_issues is True
        assert report.technical_errors == []


def test_clean_report_is_not_flagged():
    report = parse("Tecnologías evaluadas: 2\nAñadidas: 2\nTodo correcto.")

    assert report.had_technical_issues is False
