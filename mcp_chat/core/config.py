"""
Gestion de la configuration du client de chat.

Deux sources de configuration coexistent :
- le fichier JSON5 (``llm-mcp-config.json5`` par défaut) qui décrit le modèle,
  les serveurs MCP et les requêtes d'exemple, validé avec Pydantic ;
- les variables d'environnement (et le fichier .env) chargées via
  Pydantic Settings pour les réglages d'exécution.

Utilisation :
    config = load_config("./llm-mcp-config.json5")
    settings = AppSettings()

Les valeurs ``${VAR}`` des chaînes du fichier JSON5 sont remplacées par la
variable d'environnement correspondante après l'analyse.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any, List, Literal, Optional, Union

import json5
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError

logger = logging.getLogger("mcp_chat.config")

DEFAULT_CONFIG_PATH = "./llm-mcp-config.json5"

# Requêtes proposées quand l'utilisateur valide une ligne vide
SAMPLE_QUERIES: tuple[str, ...] = (
    "Whats the weather like in SF tomorrow?",
    "Read and briefly summarize the file ./LICENSE",
    "Read the news headlines on cnn.com?",
)

_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


class LLMConfig(BaseModel):
    """
    Configuration du modèle de langage.

    ``model_provider`` accepte aussi les clés ``provider`` et ``modelProvider``.
    """

    model_config = ConfigDict(protected_namespaces=(), extra="ignore")

    model_provider: str = Field(
        validation_alias=AliasChoices("model_provider", "modelProvider", "provider")
    )
    model: str
    temperature: Optional[float] = None
    max_tokens: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("max_tokens", "maxTokens")
    )
    base_url: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("base_url", "baseUrl")
    )
    api_key: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("api_key", "apiKey")
    )
    system_prompt: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("system_prompt", "systemPrompt")
    )


class StdioServerConfig(BaseModel):
    """Serveur MCP lancé comme sous-processus local (transport stdio)."""

    model_config = ConfigDict(extra="forbid")

    command: str
    args: List[str] = Field(default_factory=list)
    env: Optional[dict[str, str]] = None
    cwd: Optional[str] = None
    transport: Literal["stdio"] = "stdio"


class RemoteServerConfig(BaseModel):
    """Serveur MCP distant joignable par URL."""

    model_config = ConfigDict(extra="forbid")

    url: str
    headers: Optional[dict[str, str]] = None
    transport: Literal["streamable_http", "http", "sse"] = "streamable_http"


MCPServerConfig = Union[StdioServerConfig, RemoteServerConfig]


class AppConfig(BaseModel):
    """Configuration complète chargée depuis le fichier JSON5."""

    model_config = ConfigDict(populate_by_name=True)

    llm: LLMConfig
    mcp_servers: dict[str, MCPServerConfig] = Field(
        default_factory=dict, alias="mcpServers"
    )
    sample_queries: List[str] = Field(
        default_factory=lambda: list(SAMPLE_QUERIES), alias="sampleQueries"
    )


class AppSettings(BaseSettings):
    """
    Réglages d'exécution basés sur Pydantic Settings.

    Les variables sont lues avec le préfixe ``MCP_CHAT_`` depuis
    l'environnement ou le fichier .env.
    """

    # Niveau de log par défaut (--verbose force DEBUG)
    LOG_LEVEL: str = "WARNING"

    # Identifiant du fil de conversation, constant pour toute la session
    THREAD_ID: str = "cli-thread"

    # Désactive les couleurs ANSI même sur un terminal
    NO_COLOR: bool = False

    # Délai maximal de démarrage d'un serveur MCP, en secondes
    MCP_INIT_TIMEOUT: float = 10.0

    model_config = SettingsConfigDict(
        env_prefix="MCP_CHAT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore les variables d'environnement non définies
    )


def _substitute_env_vars(value: Any, path: Path) -> Any:
    """
    Remplace chaque ``${VAR}`` par la valeur de la variable d'environnement.

    La substitution porte sur les chaînes de la configuration déjà analysée :
    les commentaires sont ignorés et les valeurs sont insérées telles quelles.
    """
    if isinstance(value, dict):
        return {key: _substitute_env_vars(item, path) for key, item in value.items()}
    if isinstance(value, list):
        return [_substitute_env_vars(item, path) for item in value]
    if not isinstance(value, str):
        return value

    def replace(match: re.Match) -> str:
        name = match.group(1)
        env_value = os.environ.get(name)
        if env_value is None:
            raise ConfigurationError(
                f"Environment variable '{name}' referenced in {path} is not set"
            )
        return env_value

    return _ENV_VAR_PATTERN.sub(replace, value)


def load_config(path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> AppConfig:
    """
    Charge et valide le fichier de configuration JSON5.

    Args:
        path: Chemin du fichier de configuration

    Returns:
        La configuration validée

    Raises:
        ConfigurationError: Si le fichier est absent, illisible ou invalide
    """
    config_path = Path(path)
    logger.debug("Chargement de la configuration depuis %s", config_path)

    try:
        raw_text = config_path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigurationError(f"Configuration file not found: {config_path}") from e
    except OSError as e:
        raise ConfigurationError(
            f"Could not read configuration file {config_path}: {e}"
        ) from e

    try:
        data = json5.loads(raw_text)
    except ValueError as e:
        raise ConfigurationError(f"Malformed JSON5 in {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Configuration in {config_path} must be an object at top level"
        )

    data = _substitute_env_vars(data, config_path)

    try:
        config = AppConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration in {config_path}: {e}") from e

    logger.info(
        "✅ Configuration chargée : %s:%s, %d serveur(s) MCP",
        config.llm.model_provider,
        config.llm.model,
        len(config.mcp_servers),
    )
    return config
