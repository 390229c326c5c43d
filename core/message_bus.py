"""
🚌 MessageBus - Système de pub/sub interne

Découple le transport (Discord) de la logique métier (commandes wiki).
Fire-and-forget pour éviter les blocages.

Topics utilisés:
- chat.inbound      → ChatMessage
- command.inbound   → CommandInvocation
- chat.outbound     → OutboundMessage
- command.executed  → dict (audit)
"""
import asyncio
import logging
from typing import Callable, Dict, List, Any

LOGGER = logging.getLogger(__name__)


class MessageBus:
    """Bus de messages asynchrone simple (pub/sub)"""

    def __init__(self):
        self._subscribers: Dict[str, List[Callable]] = {}
        self._task_group: List[asyncio.Task] = []

    def subscribe(self, topic: str, handler: Callable):
        """
        Abonne un handler à un topic.

        Args:
            topic: Nom du topic ("chat.inbound", "chat.outbound", etc.)
            handler: Fonction async qui traite les messages
        """
        self._subscribers.setdefault(topic, []).append(handler)
        LOGGER.info(f"📌 Subscriber ajouté: {topic} -> {handler.__name__}")

    async def publish(self, topic: str, data: Any):
        """
        Publie un message sur un topic (fire-and-forget).

        Args:
            topic: Nom du topic
            data: Données à publier (ChatMessage, OutboundMessage, etc.)
        """
        handlers = self._subscribers.get(topic, [])

        if not handlers:
            LOGGER.debug(f"⚠️ MessageBus: Aucun subscriber pour topic: {topic}")
            return

        LOGGER.debug(f"📤 MessageBus: Publish [{topic}] vers {len(handlers)} handlers")

        for handler in handlers:
            task = asyncio.create_task(self._safe_handle(handler, data, topic))
            self._task_group.append(task)
            task.add_done_callback(self._forget_task)

    def _forget_task(self, task: asyncio.Task) -> None:
        if task in self._task_group:
            self._task_group.remove(task)

    async def _safe_handle(self, handler: Callable, data: Any, topic: str):
        """Wrapper sécurisé pour exécuter les handlers"""
        try:
            await handler(data)
        except Exception as e:
            LOGGER.error(f"❌ Erreur handler {handler.__name__} sur topic {topic}: {e}", exc_info=True)

    async def wait_all(self):
        """
        Attend que toutes les tasks en cours se terminent,
        y compris celles publiées pendant l'attente.
        """
        while self._task_group:
            LOGGER.debug(f"⏳ Attente de {len(self._task_group)} tasks...")
            await asyncio.gather(*list(self._task_group), return_exceptions=True)

    def get_stats(self) -> Dict[str, int]:
        """Retourne les stats du bus"""
        return {
            "topics": len(self._subscribers),
            "subscribers": sum(len(h) for h in self._subscribers.values()),
            "active_tasks": len(self._task_group)
        }
