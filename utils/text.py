"""Text helpers: URL slugs, truncation, case conversion, random identifiers."""

import re
import secrets
import string

from slugify import slugify as _slugify

from config import RANDOM_STRING_LENGTH

# Applied before slugging: symbols spelled out, apostrophes dropped so "Joe's" -> "joes".
SLUG_REPLACEMENTS = [
    ["&", " and "],
    ["@", " at "],
    ["#", " number "],
    ["%", " percent "],
    ["+", " plus "],
    ["'", ""],
    ["’", ""],
]

_RANDOM_ALPHABET = string.ascii_letters + string.digits + "_"
_SLUG_SEPARATORS = re.compile(r"[-._~]+")
_CAMEL_BOUNDARY = re.compile(r"([a-z])([A-Z])")


def slugify(name) -> str:
    """URL slug for a place or category name. Empty string for empty or non-str input."""
    if not name or not isinstance(name, str):
        return ""
    return _slugify(name.lower(), replacements=SLUG_REPLACEMENTS)


def deslugify(slug) -> str:
    """Turn a slug back into space-separated words ("joes-pizza" -> "joes pizza")."""
    if not slug or not isinstance(slug, str):
        return ""
    return " ".join(part for part in _SLUG_SEPARATORS.split(slug.strip()) if part)


def truncate(text: str, num_chars: int, ellipsis: bool = True) -> str:
    """Cut text to num_chars characters, the trailing '...' included when ellipsis is set."""
    if len(text) <= num_chars:
        return text
    if not ellipsis:
        return text[:num_chars]
    return text[:max(num_chars - 3, 0)] + "..."


def camel_to_snake_case(text: str) -> str:
    return _CAMEL_BOUNDARY.sub(r"\1_\2", text).lower()


def generate_random_string(length: int = RANDOM_STRING_LENGTH) -> str:
    return "".join(secrets.choice(_RANDOM_ALPHABET) for _ in range(length))
