"""Extraction of free-text blocks: conclusions, recommendations, error sentences."""

from __future__ import annotations

from scoutdesk.core.vocabulary import VOCABULARY, ReportVocabulary


def _clean_lines(block: str, vocabulary: ReportVocabulary) -> list[str]:
    lines: list[str] = []
    for line in block.split("\n"):
        cleaned = vocabulary.bullet.sub("", line.strip(), count=1).strip()
        if not cleaned or cleaned.startswith("|"):
            continue
        if vocabulary.not_applicable and vocabulary.not_applicable in cleaned.lower():
            continue
        lines.append(cleaned)
    return lines


def parse_block(text: str, name: str, vocabulary: ReportVocabulary = VOCABULARY) -> list[str]:
    """Return the bullet lines of the block introduced by ``name``'s start label."""

    block = vocabulary.prose.get(name)
    if block is None:
        return []
    match = block.pattern().search(text)
    if not match:
        return []
    return _clean_lines(match.group(1), vocabulary)


def parse_conclusions(text: str, vocabulary: ReportVocabulary = VOCABULARY) -> list[str]:
    return parse_block(text, "conclusions", vocabulary)


def parse_recommendations(text: str, vocabulary: ReportVocabulary = VOCABULARY) -> list[str]:
    return parse_block(text, "recommendations", vocabulary)


def parse_error_sentences(text: str, vocabulary: ReportVocabulary = VOCABULARY) -> list[str]:
    sentences: list[str] = []
    for pattern in vocabulary.error_sentences:
        sentences.extend(match.group(0).strip() for match in pattern.finditer(text))
    return sentences
