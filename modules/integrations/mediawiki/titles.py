"""
🔤 MediaWiki Titles - Normalisation des noms de pages

Pure functions, no I/O:
- to_canonical_title: "bronze axe" → "Bronze_Axe" (URL path segment)
- to_display_title:   "BRONZE axe" → "Bronze Axe" (reply text only)
- to_query_key:       "bronze axe" → "bronze_axe" (api.php titles=)
- from_url_segment:   "Bronze_Axe" → "Bronze Axe" (legacy URLs)
"""

import re
from urllib.parse import quote, unquote

# Same unreserved set as encodeURIComponent: alnum and - _ . ! ~ * ' ( )
URL_SEGMENT_SAFE = "!~*'()"

WORD_START = re.compile(r"\b(\w)")


def encode_segment(value: str) -> str:
    """Percent-encode a value as a single URL path segment."""
    return quote(value, safe=URL_SEGMENT_SAFE)


def to_canonical_title(raw: str) -> str:
    """
    Build the URL form of a page name.

    Each space-delimited word gets its first character upper-cased, the
    rest of the word is left untouched. Consecutive spaces produce
    consecutive underscores.
    """
    if not raw:
        return ""

    words = [word[:1].upper() + word[1:] for word in raw.split(" ")]
    return encode_segment("_".join(words))


def to_display_title(raw: str) -> str:
    """Lower-case then capitalize every word: "BRONZE axe" → "Bronze Axe"."""
    if not raw:
        return ""

    return WORD_START.sub(lambda m: m.group(1).upper(), raw.lower())


def to_query_key(raw: str) -> str:
    """Key sent to the MediaWiki API: spaces → underscores, percent-encoded."""
    return encode_segment(raw.replace(" ", "_"))


def from_url_segment(segment: str) -> str:
    """Recover a human-style title from a wiki URL path segment."""
    return unquote(segment.replace("_", " "))


__all__ = [
    'to_canonical_title',
    'to_display_title',
    'to_query_key',
    'from_url_segment',
    'encode_segment',
]
