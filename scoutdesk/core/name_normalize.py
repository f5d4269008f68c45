from __future__ import annotations

import unicodedata


def normalize(name: str | None) -> str:
    normalized = unicodedata.normalize("NFKC", name or "").strip().lower()
    return " ".join(normalized.split())


def first_word(name: str | None) -> str:
    words = normalize(name).split(" ")
    return words[0]
