"""
Handle de l'agent conversationnel.

Ce module contient la factory qui instancie l'agent PydanticAI avec le modèle
et les toolsets MCP, ainsi que ``ChatAgent`` qui l'expose à la boucle de
conversation sous forme d'échange de ``ChatMessage``.
"""

import logging
from typing import List, Optional, Sequence

from pydantic_ai import Agent
from pydantic_ai.models import Model
from pydantic_ai.settings import ModelSettings
from pydantic_ai.toolsets import AbstractToolset

from mcp_chat.agent.memory import InMemoryConversationStore
from mcp_chat.agent.messages import ChatMessage, Roles, to_chat_messages
from mcp_chat.core.errors import InvocationError

logger = logging.getLogger("mcp_chat.agent")


class ChatAgent:
    """
    Capacité d'échange de messages liée à un agent PydanticAI.

    L'historique de chaque fil est conservé dans le ``store`` : un appel
    reçoit les nouveaux messages humains et retourne l'historique complet
    du fil, mis à jour.
    """

    def __init__(self, agent: Agent, store: InMemoryConversationStore) -> None:
        self.agent = agent
        self.store = store

    async def invoke(
        self, messages: List[ChatMessage], thread_id: str
    ) -> List[ChatMessage]:
        """
        Envoie les messages humains à l'agent dans le fil ``thread_id``.

        Args:
            messages: Nouveaux messages (seuls les messages ``human`` sont lus)
            thread_id: Identifiant du fil de conversation

        Returns:
            L'historique complet du fil après la réponse de l'agent

        Raises:
            ValueError: Si aucun message humain n'est fourni
            InvocationError: Si l'exécution de l'agent échoue
        """
        prompts = [m.content for m in messages if m.role == Roles.HUMAN]
        if not prompts:
            raise ValueError("At least one human message is required")

        history = self.store.get(thread_id)
        logger.debug(
            "📨 Fil '%s' : envoi d'une requête (%d message(s) d'historique)",
            thread_id,
            len(history),
        )

        try:
            result = await self.agent.run("\n\n".join(prompts), message_history=history)
        except Exception as e:
            logger.error("❌ Échec de l'appel à l'agent : %s", e)
            raise InvocationError(f"Agent invocation failed: {e}") from e

        all_messages = result.all_messages()
        self.store.put(thread_id, all_messages)
        return to_chat_messages(all_messages)


def create_chat_agent(
    model: Model,
    toolsets: Sequence[AbstractToolset],
    store: InMemoryConversationStore,
    system_prompt: Optional[str] = None,
    model_settings: Optional[ModelSettings] = None,
) -> ChatAgent:
    """
    Crée et configure l'agent IA lié au modèle et aux toolsets MCP.

    Args:
        model: Modèle pydantic-ai déjà construit
        toolsets: Toolsets MCP (serveurs déjà démarrés)
        store: Mémoire de conversation de la session
        system_prompt: Prompt système optionnel
        model_settings: Réglages du modèle (température, max_tokens)

    Returns:
        Un ``ChatAgent`` prêt à l'emploi.
    """
    agent = Agent(
        model=model,
        system_prompt=system_prompt or (),
        toolsets=list(toolsets),
        model_settings=model_settings,
        # Augmenter le nombre de tentatives de retry pour les outils et la validation de sortie
        retries=3,
    )
    return ChatAgent(agent, store)
