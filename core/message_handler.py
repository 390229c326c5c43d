#!/usr/bin/env python3
"""
Message Handler
Traite les messages et slash commands, publie les réponses sur MessageBus
"""
import logging
from typing import Any, Dict, Optional

from core.message_bus import MessageBus
from core.message_types import ChatMessage, CommandInvocation
from modules.integrations.mediawiki.client import MediaWikiClient

LOGGER = logging.getLogger(__name__)

# Plages Unicode invisibles utilisées pour cacher du texte dans un message
INVISIBLE_RANGES = (
    (0xE0000, 0xE01FF),  # Tag Characters
    (0x200B, 0x200F),    # Zero-width spaces et directional marks
    (0x2028, 0x202F),    # Line/paragraph separators invisibles
    (0x2060, 0x206F),    # Word joiners et format chars
    (0xFEFF, 0xFEFF),    # BOM
)


class MessageHandler:
    """
    Handler pour les événements chat

    Traite:
    - /wiki page:<nom>: Lien vers une page du wiki
    - [[Page]] dans un message: Lien vers la page
    - https://highspell.fandom.com/wiki/<Page>: Redirection vers le nouveau wiki
    """

    def __init__(self, bus: MessageBus, wiki: MediaWikiClient, config: Optional[Dict[str, Any]] = None):
        """
        Args:
            bus: MessageBus pour subscribe/publish
            wiki: Client MediaWiki (lookup d'existence, URLs)
            config: Configuration du bot (section wiki)
        """
        self.bus = bus
        self.wiki = wiki
        self.config = config or {}
        self.command_count = 0

        self.bus.subscribe("chat.inbound", self._handle_chat_message)
        self.bus.subscribe("command.inbound", self._handle_command)

        LOGGER.info("MessageHandler initialisé")

    def _sanitize_unicode_injection(self, text: str) -> str:
        """
        🛡️ SANITIZER: Supprime les caractères Unicode invisibles.

        Un caractère invisible entre les crochets (ex: U+200B dans "[[Bronze Axe]]")
        casserait le lookup sans être visible pour l'utilisateur.

        Args:
            text: Texte brut du message

        Returns:
            Texte nettoyé sans caractères invisibles
        """
        if not text:
            return text

        cleaned = [
            char for char in text
            if not any(low <= ord(char) <= high for low, high in INVISIBLE_RANGES)
        ]
        result = ''.join(cleaned)

        if len(result) != len(text):
            LOGGER.warning(f"🛡️ Unicode invisible nettoyé: '{text[:50]}' → '{result[:50]}'")

        return result

    async def _handle_chat_message(self, msg: ChatMessage) -> None:
        """
        Traite un message chat entrant (recherche de références wiki).

        Args:
            msg: Message chat reçu
        """
        # Ignorer les bots (y compris nous-mêmes)
        if msg.is_bot:
            LOGGER.debug(f"🤖 Ignoring bot message from {msg.user_login}")
            return

        text = self._sanitize_unicode_injection((msg.text or "").strip())
        if not text:
            return

        LOGGER.debug(f"📥 Message from {msg.user_login} in #{msg.channel}: \"{text[:100]}\"")

        from modules.classic_commands.user_commands.wiki import handle_wiki_links
        await handle_wiki_links(self, msg, text)

    async def _handle_command(self, invocation: CommandInvocation) -> None:
        """
        Route une slash command vers le handler approprié.
        """
        command = invocation.name.lower()

        LOGGER.info(f"🤖 Command: /{command} from {invocation.user_login} in #{invocation.channel}")

        if command == "wiki":
            await self._cmd_wiki(invocation)
        else:
            LOGGER.debug(f"Unknown command: {command}")
            return

        self.command_count += 1

    async def _cmd_wiki(self, invocation: CommandInvocation) -> None:
        """Commande /wiki - Déléguée à modules/"""
        from modules.classic_commands.user_commands.wiki import handle_wiki
        await handle_wiki(self, invocation)
