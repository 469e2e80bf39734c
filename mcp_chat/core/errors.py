"""
Erreurs applicatives du client de chat.

Chaque erreur correspond à une phase du cycle de vie :
- ConfigurationError : fichier de configuration absent ou invalide
- InitializationError : échec de construction du modèle ou des serveurs MCP
- InvocationError : échec d'un appel à l'agent en cours de conversation
"""


class McpChatError(Exception):
    """Erreur de base de l'application."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigurationError(McpChatError):
    """Raised when the configuration file is missing, unreadable or malformed."""


class InitializationError(McpChatError):
    """Raised when the model or the MCP toolsets cannot be built."""


class InvocationError(McpChatError):
    """Raised when the agent call fails mid-conversation."""
