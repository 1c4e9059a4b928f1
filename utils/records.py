"""Helpers for scraped place/review/photo records."""

import re
from collections.abc import Mapping
from typing import Any, Iterable, Optional

ID_KINDS = ("reviews", "photos", "places")


def extract_id(text: str, kind: str) -> Optional[str]:
    """
    Path segment following the last '<kind>/' in a URL.

    Returns None unless text mentions one of reviews/photos/places, or when
    '<kind>/' does not occur.
    """
    if not any(k in text for k in ID_KINDS):
        return None
    match = re.search(rf".*{re.escape(kind)}/([^/]*)/*.*", text)
    return match.group(1) if match else None


def dedupe_by_key(items: Iterable[Mapping], key: str) -> list:
    """Keep the first record for each value of key, preserving order."""
    seen = set()
    out = []
    for item in items:
        value = item.get(key)
        if value in seen:
            continue
        seen.add(value)
        out.append(item)
    return out


def _fields(obj: Any) -> Mapping:
    return obj if isinstance(obj, Mapping) else vars(obj)


def instances_equal_excluding(obj1: Any, obj2: Any, excluded: str) -> bool:
    """Field-by-field equality of two dicts or objects, ignoring one field."""
    a, b = _fields(obj1), _fields(obj2)
    keys_a = {k for k in a if k != excluded}
    keys_b = {k for k in b if k != excluded}
    if keys_a != keys_b:
        return False
    return all(a[k] == b[k] for k in keys_a)
