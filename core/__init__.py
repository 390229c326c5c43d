"""
Core - Utilitaires transverses (bus, DTOs, dispatch)
"""

# Import explicites pour Pylance
from core.message_bus import MessageBus
from core.message_types import ChatMessage, CommandInvocation, OutboundMessage

__all__ = ["MessageBus", "ChatMessage", "CommandInvocation", "OutboundMessage"]
