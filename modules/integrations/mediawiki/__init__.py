"""
MediaWiki integration - titres, extraction de liens, lookup d'existence
"""

from modules.integrations.mediawiki.client import MediaWikiClient
from modules.integrations.mediawiki.links import extract_bracketed, extract_legacy_links
from modules.integrations.mediawiki.titles import to_canonical_title, to_display_title

__all__ = [
    "MediaWikiClient",
    "extract_bracketed",
    "extract_legacy_links",
    "to_canonical_title",
    "to_display_title",
]
