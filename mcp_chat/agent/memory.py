"""
Mémoire de conversation en processus.

Conserve l'historique pydantic-ai de chaque fil de discussion. Rien n'est
persisté : la mémoire disparaît avec le processus.
"""

import logging
from typing import Dict, List

from pydantic_ai.messages import ModelMessage

logger = logging.getLogger("mcp_chat.memory")


class InMemoryConversationStore:
    """Historique des messages indexé par identifiant de fil."""

    def __init__(self) -> None:
        self._threads: Dict[str, List[ModelMessage]] = {}

    def get(self, thread_id: str) -> List[ModelMessage]:
        """Retourne une copie de l'historique du fil (vide s'il est inconnu)."""
        return list(self._threads.get(thread_id, []))

    def put(self, thread_id: str, messages: List[ModelMessage]) -> None:
        self._threads[thread_id] = list(messages)
        logger.debug(
            "💾 Fil '%s' : %d message(s) en mémoire", thread_id, len(messages)
        )

    def clear(self, thread_id: str) -> None:
        self._threads.pop(thread_id, None)

    @property
    def thread_ids(self) -> List[str]:
        return list(self._threads)
