"""
Factory des modèles de langage.

Construit un modèle pydantic-ai à partir de la section ``llm`` du fichier
de configuration.
"""

import logging
from typing import Any, Dict, Optional

from pydantic_ai.models import Model, infer_model
from pydantic_ai.models.anthropic import AnthropicModel
from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.providers.anthropic import AnthropicProvider
from pydantic_ai.providers.openai import OpenAIProvider
from pydantic_ai.settings import ModelSettings

from mcp_chat.core.config import LLMConfig

logger = logging.getLogger("mcp_chat.model")


def _provider_args(llm: LLMConfig) -> Dict[str, Any]:
    provider_args: Dict[str, Any] = {}

    # Ajouter l'API key si elle est configurée, sinon le provider lit l'environnement
    if llm.api_key:
        provider_args["api_key"] = llm.api_key

    # Ajouter l'URL de base personnalisée si elle est configurée (Ollama, vLLM...)
    if llm.base_url:
        provider_args["base_url"] = llm.base_url

    return provider_args


def create_llm_model(llm: LLMConfig) -> Model:
    """
    Crée et configure un modèle LLM à partir de la configuration.

    Les providers ``openai`` et ``anthropic`` sont construits explicitement
    (clé d'API et URL de base optionnelles). Les autres providers sont résolus
    par pydantic-ai à partir de la chaîne ``<provider>:<model>``.

    Args:
        llm: Section ``llm`` de la configuration

    Returns:
        Un modèle pydantic-ai configuré.
    """
    provider_name = llm.model_provider.lower()
    provider_args = _provider_args(llm)

    if provider_name == "openai":
        provider = OpenAIProvider(**provider_args)
        model: Model = OpenAIChatModel(model_name=llm.model, provider=provider)
    elif provider_name == "anthropic":
        provider = AnthropicProvider(**provider_args)
        model = AnthropicModel(model_name=llm.model, provider=provider)
    else:
        if provider_args:
            logger.warning(
                "⚠️ api_key/base_url ignorés pour le provider '%s'", provider_name
            )
        model = infer_model(f"{provider_name}:{llm.model}")

    logger.info("🧠 Modèle initialisé : %s:%s", provider_name, llm.model)
    return model


def build_model_settings(llm: LLMConfig) -> Optional[ModelSettings]:
    """Traduit ``temperature`` et ``max_tokens`` en ``ModelSettings``."""
    settings = ModelSettings()
    if llm.temperature is not None:
        settings["temperature"] = llm.temperature
    if llm.max_tokens is not None:
        settings["max_tokens"] = llm.max_tokens
    return settings or None
