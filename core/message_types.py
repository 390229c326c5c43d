"""
📦 Message Types - DTOs pour le système de messaging

Contrats de données entre le transport Discord et la logique métier.
"""
from dataclasses import dataclass, field
from typing import Optional, Dict, Any


@dataclass
class ChatMessage:
    """Message entrant (texte libre posté dans un channel)"""
    channel: str                    # Nom du channel
    channel_id: str                 # ID Discord du channel
    user_login: str                 # Nom de l'auteur
    user_id: str                    # ID Discord de l'auteur
    text: str                       # Contenu du message
    is_bot: bool = False            # Auteur = bot (ignoré)
    transport: str = "unknown"      # Source: "discord", "test", ...
    meta: Dict[str, Any] = field(default_factory=dict)    # Données supplémentaires


@dataclass
class CommandInvocation:
    """Slash command entrante (ex: /wiki page:<nom>)"""
    name: str                       # Nom de la commande (sans /)
    channel: str                    # Nom du channel
    channel_id: str                 # ID Discord du channel
    user_login: str                 # Nom de l'auteur
    user_id: str                    # ID Discord de l'auteur
    interaction_id: str             # ID de l'interaction (réponse différée)
    options: Dict[str, Any] = field(default_factory=dict)  # Arguments de la commande
    transport: str = "unknown"

    def get_string(self, option: str) -> str:
        """Retourne l'option en str ("" si absente)"""
        value = self.options.get(option)
        return value if isinstance(value, str) else ""


@dataclass
class OutboundMessage:
    """Message sortant (à envoyer dans le chat)"""
    channel: str                    # Nom du channel
    channel_id: str                 # ID Discord du channel
    text: str                       # Contenu du message
    reply_to: Optional[str] = None  # ID d'interaction à compléter (slash command)
    ephemeral: bool = False         # Visible uniquement par l'auteur
    meta: Dict[str, Any] = field(default_factory=dict)    # Données supplémentaires
