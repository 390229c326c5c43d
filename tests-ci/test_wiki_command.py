"""
Tests de /wiki et des liens [[...]] - pipeline complet via MessageBus
message → MessageHandler → handlers wiki → MediaWikiClient (faux api.php) → chat.outbound
"""
from unittest.mock import AsyncMock

import pytest

from core.command_logger import CommandLogger
from core.message_handler import MessageHandler
from core.message_types import ChatMessage, CommandInvocation
from modules.integrations.mediawiki.titles import to_display_title
from modules.classic_commands.user_commands.wiki_replies import (
    format_found_reply,
    format_legacy_reply,
    format_not_found_reply,
)

LEGACY = "https://highspell.fandom.com/wiki/"


def make_message(text, is_bot=False):
    return ChatMessage(
        channel="general",
        channel_id="1001",
        user_login="player#0001",
        user_id="42",
        text=text,
        is_bot=is_bot,
        transport="test"
    )


def make_invocation(page, name="wiki"):
    return CommandInvocation(
        name=name,
        channel="general",
        channel_id="1001",
        user_login="player#0001",
        user_id="42",
        interaction_id="9001",
        options={"page": page},
        transport="test"
    )


@pytest.fixture
def outbox(bus):
    """Capture de tout ce qui est publié sur chat.outbound"""
    messages = []

    async def capture(msg):
        messages.append(msg)

    bus.subscribe("chat.outbound", capture)
    return messages


@pytest.fixture
def handler(bus, wiki_client, mock_config, outbox):
    return MessageHandler(bus, wiki_client, mock_config)


async def dispatch(bus, topic, data):
    await bus.publish(topic, data)
    await bus.wait_all()


@pytest.mark.integration
class TestWikiLinksInMessages:

    @pytest.mark.asyncio
    async def test_nonexistent_page_reply(self, bus, handler, outbox):
        await dispatch(bus, "chat.inbound", make_message("[[Nonexistent Page]]"))

        assert len(outbox) == 1
        assert outbox[0].text == (
            "Sorry, I couldn't find a wiki page for **Nonexistent Page** on HighSpell Wiki."
        )
        assert outbox[0].channel_id == "1001"
        assert outbox[0].reply_to is None

    @pytest.mark.asyncio
    async def test_existing_page_reply(self, bus, handler, outbox, fake_wiki_api):
        fake_wiki_api.existing.add("bronze_axe")

        await dispatch(bus, "chat.inbound", make_message("where is the [[bronze axe]]?"))

        assert outbox[0].text == format_found_reply("Bronze Axe", "https://highspell.wiki/w/Bronze_Axe")

    @pytest.mark.asyncio
    async def test_lines_follow_extraction_order(self, bus, handler, outbox, fake_wiki_api):
        fake_wiki_api.existing.update({"Iron_Ore", "Coal"})
        text = f"[[Iron Ore]] [[Mithril Bar]] {LEGACY}Coal and [[Coal]]"

        await dispatch(bus, "chat.inbound", make_message(text))

        assert len(outbox) == 1
        assert outbox[0].text.split("\n") == [
            format_found_reply("Iron Ore", "https://highspell.wiki/w/Iron_Ore"),
            format_not_found_reply("Mithril Bar"),
            format_found_reply("Coal", "https://highspell.wiki/w/Coal"),
            format_legacy_reply(
                "Coal", True,
                "https://highspell.wiki/w/Coal",
                "https://highspell.wiki/w/Special:Search?search=Coal"
            ),
        ]
        # Un lookup par référence, dans l'ordre
        assert fake_wiki_api.titles == ["Iron_Ore", "Mithril_Bar", "Coal", "Coal"]

    @pytest.mark.asyncio
    async def test_legacy_link_not_found_suggests_search(self, bus, handler, outbox):
        await dispatch(bus, "chat.inbound", make_message(f"old page: {LEGACY}Rune_Scimitar"))

        assert outbox[0].text == (
            "Heads up! The Fandom wiki is outdated. You're looking for **Rune Scimitar**? "
            "While the Fandom link is old, I couldn't find a direct match for **Rune Scimitar** "
            "on our new wiki. You might need to search for it: "
            "<https://highspell.wiki/w/Special:Search?search=Rune%20Scimitar>"
        )

    @pytest.mark.asyncio
    async def test_no_reference_no_reply(self, bus, handler, outbox, fake_wiki_api):
        await dispatch(bus, "chat.inbound", make_message("just chatting [[ ]]"))

        assert outbox == []
        assert fake_wiki_api.requests == []

    @pytest.mark.asyncio
    async def test_bot_messages_ignored(self, bus, handler, outbox, fake_wiki_api):
        await dispatch(bus, "chat.inbound", make_message("[[Bronze Axe]]", is_bot=True))

        assert outbox == []
        assert fake_wiki_api.requests == []

    @pytest.mark.asyncio
    async def test_invisible_characters_removed(self, bus, handler, outbox, fake_wiki_api):
        fake_wiki_api.existing.add("Bronze_Axe")

        await dispatch(bus, "chat.inbound", make_message("[[Bronze\u200b Axe\ufeff]]"))

        assert fake_wiki_api.titles == ["Bronze_Axe"]
        assert outbox[0].text == format_found_reply("Bronze Axe", "https://highspell.wiki/w/Bronze_Axe")

    @pytest.mark.asyncio
    async def test_lookup_failure_reads_as_not_found(self, bus, handler, outbox, fake_wiki_api):
        fake_wiki_api.existing.add("Bronze_Axe")
        fake_wiki_api.status_code = 500

        await dispatch(bus, "chat.inbound", make_message("[[Bronze Axe]]"))

        assert outbox[0].text == format_not_found_reply("Bronze Axe")


@pytest.mark.integration
class TestWikiSlashCommand:

    @pytest.mark.asyncio
    async def test_found(self, bus, handler, outbox, fake_wiki_api):
        fake_wiki_api.existing.add("BRONZE_axe")

        await dispatch(bus, "command.inbound", make_invocation("BRONZE axe"))

        assert len(outbox) == 1
        reply = outbox[0]
        assert reply.text == (
            "Here's a link to the wiki page for **Bronze Axe**: <https://highspell.wiki/w/BRONZE_Axe>"
        )
        assert reply.reply_to == "9001"
        assert reply.ephemeral is True

    @pytest.mark.asyncio
    async def test_not_found(self, bus, handler, outbox):
        await dispatch(bus, "command.inbound", make_invocation("dragon claws"))

        assert outbox[0].text == format_not_found_reply("Dragon Claws")
        assert outbox[0].reply_to == "9001"

    @pytest.mark.asyncio
    async def test_empty_argument_prompts_without_lookup(self, bus, handler, outbox, fake_wiki_api):
        await dispatch(bus, "command.inbound", make_invocation("   "))

        assert outbox[0].text == "Please provide a page name!"
        assert outbox[0].ephemeral is True
        assert fake_wiki_api.requests == []
        assert handler.command_count == 1

    @pytest.mark.asyncio
    async def test_unknown_command_ignored(self, bus, handler, outbox, fake_wiki_api):
        await dispatch(bus, "command.inbound", make_invocation("Bronze Axe", name="ping"))

        assert outbox == []
        assert handler.command_count == 0

    @pytest.mark.asyncio
    async def test_execution_logged(self, bus, handler, mock_config):
        command_logger = CommandLogger(bus, mock_config)

        await dispatch(bus, "command.inbound", make_invocation("Bronze Axe"))

        assert command_logger.get_command_count() == 1


@pytest.mark.integration
class TestWikiErrorPaths:
    """Une erreur inattendue donne toujours une réponse visible"""

    @pytest.mark.asyncio
    async def test_unencodable_page_name_still_answers_interaction(self, bus, handler, outbox, fake_wiki_api):
        await dispatch(bus, "command.inbound", make_invocation("bronze \ud800axe"))

        assert len(outbox) == 1
        assert outbox[0].reply_to == "9001"
        assert outbox[0].text == format_not_found_reply(to_display_title("bronze \ud800axe"))
        assert fake_wiki_api.requests == []

    @pytest.mark.asyncio
    async def test_lookup_crash_answers_interaction(self, bus, handler, outbox):
        handler.wiki.exists = AsyncMock(side_effect=RuntimeError("boom"))

        await dispatch(bus, "command.inbound", make_invocation("bronze axe"))

        assert len(outbox) == 1
        assert outbox[0].reply_to == "9001"
        assert outbox[0].ephemeral is True
        assert outbox[0].text == format_not_found_reply("Bronze Axe")

    @pytest.mark.asyncio
    async def test_lookup_crash_keeps_other_references(self, bus, handler, outbox, fake_wiki_api):
        fake_wiki_api.existing.add("Coal")
        real_exists = handler.wiki.exists

        async def flaky_exists(raw_title):
            if raw_title == "Iron Ore":
                raise RuntimeError("boom")
            return await real_exists(raw_title)

        handler.wiki.exists = flaky_exists

        await dispatch(bus, "chat.inbound", make_message(f"[[Iron Ore]] [[Coal]] {LEGACY}Iron_Ore"))

        assert outbox[0].text.split("\n") == [
            format_not_found_reply("Iron Ore"),
            format_found_reply("Coal", "https://highspell.wiki/w/Coal"),
            format_not_found_reply("Iron Ore"),
        ]
