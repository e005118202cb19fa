from __future__ import annotations

import re
from typing import Any


def as_str(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()


def as_int(value: object) -> int | None:
    """
    Strict numeric conversion.

    - Accepts: int, integral float
    - Rejects: bool, strings (even if numeric)
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    return None


def as_positive_int(value: object) -> int | None:
    """Strict numeric conversion that also treats zero and negatives as missing."""
    n = as_int(value)
    if n is None or n <= 0:
        return None
    return n


def year_from_text(value: object) -> int | None:
    """
    Extract YYYY from 'YYYY-MM-DD' or any string containing a 4-digit year.

    Steam store dates are localized text ("Oct 19, 2020", "19 Oct, 2020", "Q1 2025").
    """
    s = as_str(value)
    if len(s) >= 4 and s[:4].isdigit():
        y = int(s[:4])
        if 1900 <= y <= 2100:
            return y
    m = re.search(r"\b(19\d{2}|20\d{2})\b", s)
    if not m:
        return None
    return int(m.group(1))


def count_listed_languages(value: object) -> int:
    """
    Count entries of Steam's `supported_languages` string.

    The field is a comma-separated list with inline markup (e.g.
    "English<strong>*</strong>, French, German"); markup does not affect the count.
    """
    s = as_str(value)
    if not s:
        return 0
    return len(s.split(","))


def normalize_str_list(values: object) -> list[str]:
    """
    Normalize a list-ish value into a de-duped list of non-empty strings.

    Accepts only real lists; returns [] for anything else.
    """
    if not isinstance(values, list):
        return []
    out: list[str] = []
    seen: set[str] = set()
    for v in values:
        s = as_str(v)
        if not s:
            continue
        k = s.casefold()
        if k in seen:
            continue
        seen.add(k)
        out.append(s)
    return out


def get_list_of_dicts(value: Any) -> list[dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, dict)]


def descriptions(value: Any) -> list[str]:
    """Collect `description` strings from a list of {id, description} entries."""
    return normalize_str_list([d.get("description") for d in get_list_of_dicts(value)])
