"""
🔗 Link Extractor - Références wiki dans un message

Deux syntaxes reconnues:
- [[Page Name]]                                    (lien interne)
- https://highspell.fandom.com/wiki/Page_Name      (ancien wiki Fandom)

Generators are re-created per message, no scan position is kept.
"""

import re
from functools import lru_cache
from typing import Iterator, Pattern

from modules.integrations.mediawiki.titles import from_url_segment

BRACKETED_LINK = re.compile(r"\[\[(.*?)\]\]", re.DOTALL)

# A path segment stops at whitespace, URL delimiters and the usual chat wrappers
LEGACY_SEGMENT = r"([^\s/?#<>()\[\]]+)"


@lru_cache(maxsize=8)
def legacy_link_pattern(base_url: str) -> Pattern[str]:
    """Regex matching `base_url` followed by one path segment."""
    return re.compile(re.escape(base_url) + LEGACY_SEGMENT)


def extract_bracketed(text: str) -> Iterator[str]:
    """
    Yield the inner content of every [[...]] span, stripped.

    Spans that are empty once stripped are skipped.
    """
    for match in BRACKETED_LINK.finditer(text or ""):
        raw_title = match.group(1).strip()
        if raw_title:
            yield raw_title


def extract_legacy_links(text: str, base_url: str) -> Iterator[str]:
    """
    Yield the page title of every legacy wiki URL in `text`.

    "https://highspell.fandom.com/wiki/Bronze_Axe" → "Bronze Axe"
    """
    if not base_url:
        return
    for match in legacy_link_pattern(base_url).finditer(text or ""):
        raw_title = from_url_segment(match.group(1))
        if raw_title.strip():
            yield raw_title


__all__ = [
    'extract_bracketed',
    'extract_legacy_links',
]
