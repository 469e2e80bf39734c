"""
Cycle de vie de la session de chat.

Ce module contient l'initialisation de la session (modèle, serveurs MCP,
agent) et le gestionnaire de contexte qui garantit que les ressources
acquises sont libérées exactement une fois, quelle que soit l'issue.
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Awaitable, Callable

from mcp_chat.agent.agent import ChatAgent, create_chat_agent
from mcp_chat.agent.memory import InMemoryConversationStore
from mcp_chat.agent.model import build_model_settings, create_llm_model
from mcp_chat.cli.console import Console
from mcp_chat.core.config import AppConfig
from mcp_chat.core.errors import InitializationError
from mcp_chat.mcp.tools import DEFAULT_INIT_TIMEOUT, convert_mcp_to_toolsets

logger = logging.getLogger("mcp_chat.session")


class ReleaseOnce:
    """Enveloppe une action de libération asynchrone pour qu'elle ne s'exécute qu'une fois."""

    def __init__(self, release: Callable[[], Awaitable[None]]) -> None:
        self._release = release
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    async def __call__(self) -> None:
        if self._released:
            logger.debug("Ressources déjà libérées, appel ignoré")
            return
        self._released = True
        await self._release()


@dataclass
class Session:
    """Ressources d'une exécution du client."""

    agent: ChatAgent
    release: ReleaseOnce
    thread_id: str
    verbose: bool = False


async def initialize_session(
    config: AppConfig,
    console: Console,
    thread_id: str,
    verbose: bool = False,
    init_timeout: float = DEFAULT_INIT_TIMEOUT,
) -> Session:
    """
    Construit le modèle, démarre les serveurs MCP et crée l'agent.

    Args:
        config: Configuration chargée depuis le fichier JSON5
        console: Console pour les messages d'initialisation
        thread_id: Identifiant du fil de conversation de la session
        verbose: Affichage des sorties d'outils
        init_timeout: Délai d'initialisation de chaque serveur MCP

    Returns:
        La session prête à l'emploi.

    Raises:
        InitializationError: Si le modèle ou les toolsets ne peuvent être construits
    """
    console.write(
        f"Initializing model... {config.llm.model_dump(exclude_none=True, exclude={'api_key'})}\n"
    )
    try:
        model = create_llm_model(config.llm)
    except Exception as e:
        raise InitializationError(f"Failed to initialize model: {e}") from e

    console.write(f"Initializing {len(config.mcp_servers)} MCP server(s)...\n")
    # convert_mcp_to_toolsets arrête lui-même les serveurs déjà démarrés en cas d'échec
    toolsets, cleanup = await convert_mcp_to_toolsets(
        config.mcp_servers, log_level="info", timeout=init_timeout
    )

    try:
        agent = create_chat_agent(
            model,
            toolsets,
            InMemoryConversationStore(),
            system_prompt=config.llm.system_prompt,
            model_settings=build_model_settings(config.llm),
        )
    except Exception as e:
        await cleanup()
        raise InitializationError(f"Failed to create agent: {e}") from e

    logger.info("✅ Session initialisée (fil '%s')", thread_id)
    return Session(
        agent=agent, release=ReleaseOnce(cleanup), thread_id=thread_id, verbose=verbose
    )


@asynccontextmanager
async def session_scope(
    config: AppConfig,
    console: Console,
    thread_id: str,
    verbose: bool = False,
    init_timeout: float = DEFAULT_INIT_TIMEOUT,
) -> AsyncIterator[Session]:
    """
    Acquiert la session et garantit sa libération à la sortie du bloc.

    Si l'initialisation échoue, rien n'est à libérer et l'erreur se propage.
    Sinon, la libération s'exécute après le bloc, qu'il se termine normalement
    ou par une exception.
    """
    session = await initialize_session(
        config, console, thread_id, verbose=verbose, init_timeout=init_timeout
    )
    try:
        yield session
    finally:
        await session.release()
