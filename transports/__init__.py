"""
Transports - Adaptateurs plateforme de chat ↔ MessageBus
"""

from transports.discord_client import DiscordClient

__all__ = ["DiscordClient"]
