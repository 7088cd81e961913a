from __future__ import annotations

import re

WHITESPACE_PATTERN = re.compile(r"\s+")
TRUE_VALUES = {"true", "1", "yes"}


def clean_value(raw: str | None) -> str | None:
    if raw is None:
        return None
    cleaned = WHITESPACE_PATTERN.sub(" ", raw).strip()
    return cleaned or None


def parse_flag(raw: str | None) -> bool:
    if raw is None:
        return False
    return raw.strip().lower() in TRUE_VALUES
