"""
Commande /wiki et liens [[...]] - Liens vers le wiki HighSpell.

Handlers appelés par MessageHandler:
- handle_wiki: slash command /wiki page:<nom>
- handle_wiki_links: message libre contenant [[Page]] ou des liens Fandom
"""
import logging
from typing import TYPE_CHECKING, List, Tuple

from core.message_types import OutboundMessage
from modules.classic_commands.user_commands.wiki_replies import (
    DEFAULT_WIKI_NAME,
    format_found_reply,
    format_legacy_reply,
    format_missing_argument_reply,
    format_not_found_reply,
)
from modules.integrations.mediawiki.links import extract_bracketed, extract_legacy_links
from modules.integrations.mediawiki.titles import to_display_title

if TYPE_CHECKING:
    from core.message_handler import MessageHandler
    from core.message_types import ChatMessage, CommandInvocation

LOGGER = logging.getLogger(__name__)

DEFAULT_LEGACY_BASE_URL = "https://highspell.fandom.com/wiki/"


def _wiki_name(handler: "MessageHandler") -> str:
    return (handler.config.get("wiki") or {}).get("name", DEFAULT_WIKI_NAME)


def _legacy_base_url(handler: "MessageHandler") -> str:
    return (handler.config.get("wiki") or {}).get("legacy_base_url", DEFAULT_LEGACY_BASE_URL)


async def build_link_reply(handler: "MessageHandler", raw_title: str) -> Tuple[bool, str]:
    """
    Lookup + template found/not found pour un titre brut.

    Returns:
        (page trouvée, texte de la réponse)
    """
    page_exists = await handler.wiki.exists(raw_title)
    display_title = to_display_title(raw_title)

    if page_exists:
        return True, format_found_reply(display_title, handler.wiki.page_url(raw_title))
    return False, format_not_found_reply(display_title, _wiki_name(handler))


async def build_legacy_reply(handler: "MessageHandler", raw_title: str) -> str:
    """Lookup + template "Fandom is outdated" pour un titre issu d'un lien Fandom."""
    display_title = to_display_title(raw_title)
    page_exists = await handler.wiki.exists(raw_title)

    return format_legacy_reply(
        display_title,
        page_exists,
        handler.wiki.page_url(raw_title),
        handler.wiki.search_url(display_title),
    )


async def handle_wiki(handler: "MessageHandler", invocation: "CommandInvocation") -> None:
    """
    /wiki page:<nom> - Lien vers une page du wiki

    Args:
        handler: Instance MessageHandler
        invocation: Slash command entrante
    """
    page_name = invocation.get_string("page").strip()

    if not page_name:
        await handler.bus.publish("chat.outbound", OutboundMessage(
            channel=invocation.channel,
            channel_id=invocation.channel_id,
            text=format_missing_argument_reply(),
            reply_to=invocation.interaction_id,
            ephemeral=True
        ))
        return

    LOGGER.info(f"📚 Received /wiki command for page: \"{page_name}\" from {invocation.user_login}")

    try:
        page_exists, text = await build_link_reply(handler, page_name)
    except Exception as e:
        LOGGER.error(f"❌ Error processing /wiki for \"{page_name}\": {e}", exc_info=True)
        page_exists = False
        text = format_not_found_reply(to_display_title(page_name), _wiki_name(handler))

    await handler.bus.publish("chat.outbound", OutboundMessage(
        channel=invocation.channel,
        channel_id=invocation.channel_id,
        text=text,
        reply_to=invocation.interaction_id,
        ephemeral=True
    ))

    await handler.bus.publish("command.executed", {
        'command': invocation.name,
        'user': invocation.user_login,
        'channel': invocation.channel,
        'args': page_name,
        'result': 'found' if page_exists else 'not_found'
    })


async def handle_wiki_links(handler: "MessageHandler", msg: "ChatMessage", text: str) -> None:
    """
    Répond aux références wiki d'un message libre.

    Une ligne par référence, dans l'ordre: liens [[...]] puis liens Fandom.
    Les lookups sont faits un par un. Rien n'est envoyé sans référence.

    Args:
        handler: Instance MessageHandler
        msg: Message chat entrant
        text: Texte nettoyé du message
    """
    lines: List[str] = []

    for raw_title in extract_bracketed(text):
        LOGGER.info(f"🔗 Found internal link raw page name: \"{raw_title}\"")
        try:
            _, line = await build_link_reply(handler, raw_title)
        except Exception as e:
            LOGGER.error(f"❌ Error processing [[{raw_title}]]: {e}", exc_info=True)
            line = format_not_found_reply(to_display_title(raw_title), _wiki_name(handler))
        lines.append(line)

    for raw_title in extract_legacy_links(text, _legacy_base_url(handler)):
        LOGGER.info(f"🕰️ Found Fandom link page name: \"{raw_title}\"")
        try:
            line = await build_legacy_reply(handler, raw_title)
        except Exception as e:
            LOGGER.error(f"❌ Error processing Fandom link \"{raw_title}\": {e}", exc_info=True)
            line = format_not_found_reply(to_display_title(raw_title), _wiki_name(handler))
        lines.append(line)

    if not lines:
        return

    await handler.bus.publish("chat.outbound", OutboundMessage(
        channel=msg.channel,
        channel_id=msg.channel_id,
        text="\n".join(lines),
        meta={'references': len(lines)}
    ))
    LOGGER.info(f"✅ [wiki] {len(lines)} link(s) answered for {msg.user_login} in #{msg.channel}")
