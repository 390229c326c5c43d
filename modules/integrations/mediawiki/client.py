"""
🌐 MediaWiki Client - Vérification d'existence des pages

Interroge api.php (action=query, prop=info) pour savoir si une page existe.
Fail-closed: toute erreur réseau ou de parsing = page introuvable.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from modules.integrations.mediawiki.titles import (
    encode_segment,
    to_canonical_title,
    to_query_key,
)

LOGGER = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://highspell.wiki/w/"
DEFAULT_USER_AGENT = "WikiLinkBot/1.0 (+https://highspell.wiki)"
DEFAULT_TIMEOUT = 10.0

# Page id returned by the API for a title that does not exist
MISSING_PAGE_ID = "-1"


class MediaWikiClient:
    """Client pour une instance MediaWiki (lookup + construction d'URLs)."""

    def __init__(self, http_client: httpx.AsyncClient, base_url: str = DEFAULT_BASE_URL):
        """
        Args:
            http_client: Client HTTP partagé (injecté, fermé via aclose())
            base_url: Racine du wiki, terminée par "/" (ex: https://highspell.wiki/w/)
        """
        self.http_client = http_client
        self.base_url = base_url if base_url.endswith("/") else f"{base_url}/"

    @classmethod
    def from_config(cls, config: Dict[str, Any], http_client: Optional[httpx.AsyncClient] = None) -> "MediaWikiClient":
        """
        Construit le client depuis la config YAML (sections `wiki` et `timeouts`).
        """
        wiki_config = config.get("wiki", {}) or {}
        timeouts = config.get("timeouts", {}) or {}

        if http_client is None:
            http_client = httpx.AsyncClient(
                timeout=timeouts.get("wiki_request", DEFAULT_TIMEOUT),
                headers={"User-Agent": wiki_config.get("user_agent", DEFAULT_USER_AGENT)},
            )

        return cls(http_client, base_url=wiki_config.get("base_url", DEFAULT_BASE_URL))

    @property
    def api_endpoint(self) -> str:
        return f"{self.base_url}api.php"

    def page_url(self, raw_title: str) -> str:
        """URL publique de la page: https://highspell.wiki/w/Bronze_Axe"""
        return f"{self.base_url}{to_canonical_title(raw_title)}"

    def search_url(self, display_title: str) -> str:
        """URL de recherche (Special:Search) pour un titre affiché."""
        return f"{self.base_url}Special:Search?search={encode_segment(display_title)}"

    async def exists(self, raw_title: str) -> bool:
        """
        Vérifie si la page existe sur le wiki (redirects suivis).

        Args:
            raw_title: Nom de page brut saisi par l'utilisateur

        Returns:
            True si l'API renvoie une page, False si absente OU en cas d'erreur
        """
        try:
            params = {
                "action": "query",
                "prop": "info",
                "titles": to_query_key(raw_title),
                "format": "json",
                "redirects": 1,
            }
            resp = await self.http_client.get(self.api_endpoint, params=params)
            resp.raise_for_status()
            pages = resp.json()["query"]["pages"]
            page_ids = set(pages.keys())
        except Exception as e:
            LOGGER.error(f"❌ Error checking wiki page existence for '{raw_title}': {e}", exc_info=True)
            return False

        found = page_ids != {MISSING_PAGE_ID}
        LOGGER.debug(f"{'✅' if found else '❌'} Wiki lookup '{raw_title}' → {sorted(page_ids)}")
        return found

    async def aclose(self) -> None:
        """Ferme le client HTTP sous-jacent."""
        await self.http_client.aclose()


__all__ = [
    'MediaWikiClient',
    'MISSING_PAGE_ID',
]
