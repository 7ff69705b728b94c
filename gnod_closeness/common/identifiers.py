"""Canonical item ids from Gnod URL fragments.

Gnod links to related items with URL-encoded slugs (``the+beatles``,
``simon+%26+garfunkel``). The same item has to map to the same key across
independent scrapes, so ids are derived from the slug with a fixed,
order-sensitive pipeline.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from urllib.parse import unquote

NUMERIC_PREFIX = "i"

_STRIPPED_PUNCTUATION = re.compile(r"[%&/'\":?]")
_NON_ID_CHARACTER = re.compile(r"[^A-Za-z0-9_]")
_ALL_DIGITS = re.compile(r"^[0-9]+$")


def normalize(raw: str) -> str:
    """Convert a raw URL fragment into a canonical item id.

    Steps, in order: ``+`` becomes ``_``; ``%XX`` escapes are decoded;
    ``% & / ' " : ?`` are dropped; each doubled underscore becomes one,
    in a single left-to-right pass (``___`` leaves ``__``); anything
    outside ``[A-Za-z0-9_]`` is dropped; an all-digit result gets an ``i``
    prefix so it can't be mistaken for a position index.

    Args:
        raw: URL fragment or slug as it appears in the page.

    Returns:
        The normalized id. Empty if nothing survives the pipeline.

    Examples:
        >>> normalize("the+beatles")
        'the_beatles'
        >>> normalize("simon+%26+garfunkel")
        'simon_garfunkel'
        >>> normalize("12345")
        'i12345'
    """
    value = raw.replace("+", "_")
    value = unquote(value)
    value = _STRIPPED_PUNCTUATION.sub("", value)
    value = value.replace("__", "_")
    value = _NON_ID_CHARACTER.sub("", value)
    if _ALL_DIGITS.match(value):
        value = NUMERIC_PREFIX + value
    return value


def normalize_all(raws: Iterable[str]) -> list[str]:
    """Normalize every fragment in ``raws``, preserving order."""
    return [normalize(raw) for raw in raws]
