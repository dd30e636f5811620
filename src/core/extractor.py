"""Deterministic field extraction over OCR text from disposal tickets.

Each field has an ordered list of FieldRules. Rules are tried in order and
the first one that matches and whose transform returns a value wins. A field
with no winning rule is absent (None). Nothing here raises on str input.
"""
import re
from decimal import Decimal, InvalidOperation
from typing import Callable, NamedTuple

from src.core.ticket import ExtractedFields


def _first_group(match: re.Match) -> str | None:
    return match.group(1)


def _stripped(match: re.Match) -> str | None:
    value = match.group(1).strip()
    return value or None


def _driver_name(match: re.Match) -> str | None:
    value = match.group(1).strip()
    return value if len(value) >= 3 else None


def _whole_line(match: re.Match) -> str | None:
    return match.group(0)


def normalize_weight(raw: str) -> str | None:
    """Strip grouping commas; return None unless the result is a decimal."""
    value = raw.replace(",", "").strip()
    if not value:
        return None
    try:
        Decimal(value)
    except InvalidOperation:
        return None
    return value


def _weight(match: re.Match) -> str | None:
    return normalize_weight(match.group(1))


# ASCII: labels and letter classes never case-fold U+017F or U+212A.
_FLAGS = re.IGNORECASE | re.ASCII


class FieldRule(NamedTuple):
    pattern: re.Pattern
    transform: Callable[[re.Match], str | None] = _first_group
    # Full-match each trimmed, non-empty line instead of searching the text.
    per_line: bool = False


FIELD_RULES: dict[str, list[FieldRule]] = {
    "ticket_number": [
        FieldRule(re.compile(r"Ticket\s*#?:?\s*([0-9]{3,})", _FLAGS)),
        FieldRule(re.compile(r"[0-9]{3,}"), _whole_line, per_line=True),
    ],
    "weight_tons": [
        FieldRule(re.compile(r"Weight\s*[:\-]?\s*([0-9.,]+)", _FLAGS), _weight),
    ],
    "truck_number": [
        FieldRule(re.compile(r"Truck\s*(?:No|#)?\s*[:\-]?\s*([A-Za-z0-9\-]+)", _FLAGS)),
    ],
    "driver_actual": [
        FieldRule(re.compile(r"Driver\s*[:\-]?\s*([A-Za-z .'\-]{3,})", _FLAGS), _driver_name),
    ],
    "driver_badge": [
        FieldRule(re.compile(r"Monitor Name\(Id\):\s*([A-Za-z0-9]+)", _FLAGS)),
    ],
    "debris_type": [
        FieldRule(re.compile(r"Debris\s*Type\s*[:\-]?\s*([A-Za-z ]+)", _FLAGS), _stripped),
    ],
}


def split_lines(text: str) -> list[str]:
    return [line.strip() for line in re.split(r"\r?\n", text) if line.strip()]


def apply_rules(text: str, rules: list[FieldRule]) -> str | None:
    lines = None
    for rule in rules:
        if rule.per_line:
            if lines is None:
                lines = split_lines(text)
            candidates = (rule.pattern.fullmatch(line) for line in lines)
        else:
            candidates = (rule.pattern.search(text),)
        for match in candidates:
            if match is None:
                continue
            value = rule.transform(match)
            if value is not None:
                return value
    return None


def extract(text: str) -> ExtractedFields:
    """Map recognized ticket text to ExtractedFields."""
    text = text or ""
    return ExtractedFields(**{
        field: apply_rules(text, rules) for field, rules in FIELD_RULES.items()
    })


def needs_fix(fields: ExtractedFields) -> bool:
    return fields.needs_fix
