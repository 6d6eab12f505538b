"""Display helpers for interview round types."""
from __future__ import annotations

import re

KNOWN_ROUND_LABELS = {
    "HR": "HR Round",
    "TechnicalRound1": "Technical Round 1",
    "TechnicalRound2": "Technical Round 2",
    "SystemDesign": "System Design",
    "Managerial": "Managerial Round",
    "Assignment": "Take-home Assignment",
    "Final": "Final Round",
}

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z])(?=[A-Z0-9])|(?<=[0-9])(?=[A-Za-z])")


def is_known_round_type(round_type: str) -> bool:
    return round_type in KNOWN_ROUND_LABELS


def format_round_label(round_type: str | None) -> str:
    """Readable label for any round type, including ones we don't know about."""
    raw = (round_type or "").strip()
    if not raw:
        return "Interview Round"
    if raw in KNOWN_ROUND_LABELS:
        return KNOWN_ROUND_LABELS[raw]

    spaced = _CAMEL_BOUNDARY.sub(" ", re.sub(r"[_-]+", " ", raw))
    words = []
    for word in spaced.split():
        if word.lower() == "hr":
            words.append("HR")
        elif word.isdigit():
            words.append(word)
        else:
            words.append(word[0].upper() + word[1:].lower())
    return " ".join(words) or "Interview Round"
