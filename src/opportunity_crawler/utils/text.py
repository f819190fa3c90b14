from __future__ import annotations

import random
import re
import string
import time

from slugify import slugify as _slugify

_MULTISPACE = re.compile(r"\s+")
_DISALLOWED = r"[^-a-z0-9]+"
# Removed outright rather than turned into a separator.
_STRIPPED_PUNCTUATION = "*+~.()'\"!:@"
_REPLACEMENTS = [["&", "and"]] + [[char, ""] for char in _STRIPPED_PUNCTUATION]
_PLACEHOLDER_ALPHABET = string.ascii_lowercase + string.digits


def normalize_whitespace(value: str | None) -> str:
    if not value:
        return ""
    return _MULTISPACE.sub(" ", value).strip()


def contains_phrase(value: str | None, phrase: str) -> bool:
    return phrase.lower() in (value or "").lower()


def slugify(value: str | None) -> str:
    """Build an identifier-safe token from free text.

    ``&`` is spelled out and accented letters are transliterated, so
    ``"J&K Bourse d'Études"`` becomes ``"jandk-bourse-detudes"``.

    Empty input yields a time-based placeholder that is unique per call and
    therefore never stable across runs.
    """
    slug = _slugify(
        normalize_whitespace(value),
        lowercase=True,
        regex_pattern=_DISALLOWED,
        replacements=_REPLACEMENTS,
    )
    if not slug:
        return _placeholder_slug()
    return slug


def _placeholder_slug() -> str:
    suffix = "".join(random.choices(_PLACEHOLDER_ALPHABET, k=5))
    return f"scheme-{int(time.time() * 1000)}-{suffix}"
