#!/usr/bin/env python3
"""
Discord Client - transport gateway + slash commands
- Écoute les messages → Publie sur chat.inbound
- Écoute /wiki → Réponse différée + publie sur command.inbound
- Écoute chat.outbound → Envoie dans le channel ou complète l'interaction
"""

import asyncio
import logging
from typing import Dict, Optional

import discord
from discord import app_commands

from core.message_bus import MessageBus
from core.message_types import ChatMessage, CommandInvocation, OutboundMessage
from modules.classic_commands.user_commands.wiki_replies import truncate_message

LOGGER = logging.getLogger(__name__)


def _parse_guild_id(guild_id) -> Optional[int]:
    """
    Guild id de la config ("" ou None = commandes globales).

    Raises:
        ValueError: si l'id n'est pas numérique
    """
    if guild_id is None or str(guild_id).strip() == "":
        return None
    try:
        return int(str(guild_id).strip())
    except ValueError:
        raise ValueError(f"discord.guild_id must be a numeric Discord id, got {guild_id!r}") from None


class DiscordClient(discord.Client):
    """
    Client Discord (bidirectionnel)
    - Enregistre la slash command /wiki (guild ou globale)
    - Messages entrants → chat.inbound
    - Slash commands → command.inbound
    - Messages sortants ← chat.outbound
    """

    def __init__(
        self,
        bus: MessageBus,
        guild_id: Optional[str] = None,
        send_timeout: float = 5.0,
        wiki_name: str = "HighSpell Wiki"
    ):
        """
        Args:
            bus: MessageBus pour publier/écouter
            guild_id: Guild où enregistrer les commandes (None = globale)
            send_timeout: Timeout d'envoi d'un message en secondes
            wiki_name: Nom du wiki affiché dans la description de /wiki
        """
        guild = _parse_guild_id(guild_id)

        intents = discord.Intents.default()
        intents.guilds = True
        intents.guild_messages = True
        intents.message_content = True
        super().__init__(intents=intents)

        self.bus = bus
        self.guild_id = guild
        self.send_timeout = send_timeout
        self.wiki_name = wiki_name
        self.tree = app_commands.CommandTree(self)

        # Interactions différées en attente de réponse: interaction_id -> Interaction
        self._pending_interactions: Dict[str, discord.Interaction] = {}

        self._register_commands()
        self.bus.subscribe("chat.outbound", self._handle_outbound_message)

        LOGGER.info(f"DiscordClient init (guild={guild_id or 'global'}, timeout={send_timeout}s)")

    def _register_commands(self) -> None:
        """Déclare /wiki page:<string> dans le CommandTree"""

        @self.tree.command(name="wiki", description=f"Links to a page on the {self.wiki_name}.")
        @app_commands.describe(page="The name of the wiki page.")
        async def wiki(interaction: discord.Interaction, page: str) -> None:
            await self._on_slash_command(interaction, "wiki", {"page": page})

    async def setup_hook(self) -> None:
        """Synchronise les slash commands avant la connexion gateway"""
        LOGGER.info("Started refreshing application (/) commands.")
        try:
            if self.guild_id:
                guild = discord.Object(id=self.guild_id)
                self.tree.copy_global_to(guild=guild)
                synced = await self.tree.sync(guild=guild)
            else:
                synced = await self.tree.sync()
            LOGGER.info(f"✅ Successfully reloaded {len(synced)} application (/) commands.")
        except discord.HTTPException as e:
            LOGGER.error(f"❌ Failed to reload application (/) commands: {e}")

    async def on_ready(self) -> None:
        LOGGER.info(f"✅ Logged in as {self.user}! Bot is online and ready.")

    async def on_message(self, message: discord.Message) -> None:
        """
        Callback quand un message arrive
        → Publie sur MessageBus (topic: chat.inbound)
        """
        chat_msg = ChatMessage(
            channel=getattr(message.channel, "name", None) or "dm",
            channel_id=str(message.channel.id),
            user_login=str(message.author),
            user_id=str(message.author.id),
            text=message.content or "",
            is_bot=message.author.bot,
            transport="discord",
            meta={"message_id": str(message.id)}
        )

        try:
            await self.bus.publish("chat.inbound", chat_msg)
        except Exception as e:
            LOGGER.error(f"❌ Erreur publish chat.inbound: {e}")

    async def _on_slash_command(self, interaction: discord.Interaction, name: str, options: dict) -> None:
        """
        Diffère la réponse (ephemeral) puis publie sur command.inbound.
        La réponse finale arrive via chat.outbound (reply_to=interaction_id).
        """
        self._prune_expired_interactions()

        try:
            await interaction.response.defer(ephemeral=True, thinking=True)
        except discord.HTTPException as e:
            LOGGER.error(f"❌ Impossible de différer /{name}: {e}")
            return

        interaction_id = str(interaction.id)
        self._pending_interactions[interaction_id] = interaction

        channel = interaction.channel
        invocation = CommandInvocation(
            name=name,
            channel=getattr(channel, "name", None) or "dm",
            channel_id=str(interaction.channel_id or ""),
            user_login=str(interaction.user),
            user_id=str(interaction.user.id),
            interaction_id=interaction_id,
            options=options,
            transport="discord"
        )
        await self.bus.publish("command.inbound", invocation)

    def _prune_expired_interactions(self) -> None:
        expired = [key for key, inter in self._pending_interactions.items() if inter.is_expired()]
        for key in expired:
            del self._pending_interactions[key]
        if expired:
            LOGGER.warning(f"⏱️ {len(expired)} interaction(s) expirée(s) sans réponse")

    async def _handle_outbound_message(self, msg: OutboundMessage) -> None:
        """
        Envoie un message avec timeout. Aucun retry: l'échec est seulement loggé.

        Args:
            msg: Message à envoyer
        """
        text = truncate_message(msg.text)

        try:
            LOGGER.info(f"📤 Envoi à #{msg.channel}: {text[:80]}")
            await asyncio.wait_for(self._deliver(msg, text), timeout=self.send_timeout)
        except asyncio.TimeoutError:
            LOGGER.error(f"⏱️ Timeout envoi à #{msg.channel} après {self.send_timeout}s: {text[:50]}")
        except Exception as e:
            LOGGER.error(f"❌ Failed to send message to #{msg.channel}: {e}", exc_info=True)

    async def _deliver(self, msg: OutboundMessage, text: str) -> None:
        if msg.reply_to:
            interaction = self._pending_interactions.pop(msg.reply_to, None)
            if interaction is None:
                LOGGER.warning(f"⚠️ Interaction {msg.reply_to} inconnue, réponse ignorée")
                return
            if interaction.response.is_done():
                await interaction.edit_original_response(content=text)
            else:
                await interaction.response.send_message(text, ephemeral=msg.ephemeral)
            return

        channel = self.get_channel(int(msg.channel_id))
        if channel is None:
            channel = await self.fetch_channel(int(msg.channel_id))
        await channel.send(text)
