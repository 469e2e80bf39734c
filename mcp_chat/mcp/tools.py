"""
Conversion des serveurs MCP configurés en toolsets pydantic-ai.

Chaque serveur est démarré (sous-processus stdio ou connexion HTTP) dans une
``AsyncExitStack``. La fonction de libération retournée ferme tous les
serveurs dans l'ordre inverse de leur démarrage.
"""

import logging
from contextlib import AsyncExitStack
from typing import Awaitable, Callable, List, Mapping, Tuple

from mcp.types import LoggingLevel
from pydantic_ai.mcp import (
    MCPServer,
    MCPServerSSE,
    MCPServerStdio,
    MCPServerStreamableHTTP,
)

from mcp_chat.core.config import MCPServerConfig, StdioServerConfig
from mcp_chat.core.errors import InitializationError

logger = logging.getLogger("mcp_chat.mcp")

McpServerCleanupFunction = Callable[[], Awaitable[None]]

DEFAULT_INIT_TIMEOUT = 10.0


def create_mcp_server(
    name: str,
    server_config: MCPServerConfig,
    log_level: LoggingLevel | None = None,
    timeout: float = DEFAULT_INIT_TIMEOUT,
) -> MCPServer:
    """
    Crée le serveur MCP pydantic-ai correspondant à une entrée de configuration.

    Args:
        name: Nom du serveur dans la configuration
        server_config: Entrée stdio ou distante
        log_level: Niveau de log demandé au serveur MCP
        timeout: Délai d'initialisation de la session MCP, en secondes

    Returns:
        Le serveur MCP, non démarré.
    """
    if isinstance(server_config, StdioServerConfig):
        logger.info(
            "   - '%s' : %s %s",
            name,
            server_config.command,
            " ".join(server_config.args),
        )
        return MCPServerStdio(
            server_config.command,
            args=server_config.args,
            env=server_config.env,
            cwd=server_config.cwd,
            log_level=log_level,
            timeout=timeout,
        )

    logger.info("   - '%s' : %s (%s)", name, server_config.url, server_config.transport)
    if server_config.transport == "sse":
        return MCPServerSSE(
            server_config.url,
            headers=server_config.headers,
            log_level=log_level,
            timeout=timeout,
        )
    return MCPServerStreamableHTTP(
        server_config.url,
        headers=server_config.headers,
        log_level=log_level,
        timeout=timeout,
    )


async def convert_mcp_to_toolsets(
    servers: Mapping[str, MCPServerConfig],
    log_level: LoggingLevel | None = "info",
    timeout: float = DEFAULT_INIT_TIMEOUT,
) -> Tuple[List[MCPServer], McpServerCleanupFunction]:
    """
    Démarre les serveurs MCP et retourne leurs toolsets avec la fonction de libération.

    Si un serveur échoue au démarrage, ceux déjà démarrés sont arrêtés avant
    de lever l'erreur : l'appelant ne reçoit aucune fonction de libération.

    Args:
        servers: Serveurs MCP indexés par nom
        log_level: Niveau de log demandé aux serveurs
        timeout: Délai d'initialisation de chaque serveur, en secondes

    Returns:
        Tuple (toolsets, cleanup)

    Raises:
        InitializationError: Si un serveur ne peut pas être créé ou démarré
    """
    stack = AsyncExitStack()
    toolsets: List[MCPServer] = []

    for name, server_config in servers.items():
        try:
            server = create_mcp_server(name, server_config, log_level, timeout)
            await stack.enter_async_context(server)
        except Exception as e:
            logger.error("❌ Échec du démarrage du serveur MCP '%s' : %s", name, e)
            await stack.aclose()
            raise InitializationError(
                f"Failed to start MCP server '{name}': {e}"
            ) from e
        logger.info("   ✓ Le serveur MCP '%s' est prêt.", name)
        toolsets.append(server)

    async def cleanup() -> None:
        logger.info("🛑 Arrêt de %d serveur(s) MCP...", len(toolsets))
        await stack.aclose()
        logger.info("✅ Nettoyage terminé")

    return toolsets, cleanup
