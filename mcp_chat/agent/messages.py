"""
Module de conversion des messages pydantic-ai en messages étiquetés.

La boucle de conversation ne manipule que des ``ChatMessage`` portant un rôle
explicite (``human``, ``agent`` ou ``tool``), indépendamment des classes de
messages internes de pydantic-ai.
"""

from typing import Final, List, Literal, Optional

from pydantic import BaseModel
from pydantic_ai.messages import (
    ModelMessage,
    ModelRequest,
    ModelResponse,
    RetryPromptPart,
    TextPart,
    ToolReturnPart,
    UserPromptPart,
)

Role = Literal["human", "agent", "tool"]


class Roles:
    """Valeurs de rôle des messages."""

    HUMAN: Final[str] = "human"
    AGENT: Final[str] = "agent"
    TOOL: Final[str] = "tool"


class ChatMessage(BaseModel):
    """Un message de la conversation, étiqueté par son origine."""

    role: Role
    content: str
    tool_name: Optional[str] = None

    @property
    def is_tool_output(self) -> bool:
        return self.role == Roles.TOOL


def human_message(content: str) -> ChatMessage:
    return ChatMessage(role=Roles.HUMAN, content=content)


def _user_prompt_text(part: UserPromptPart) -> str:
    if isinstance(part.content, str):
        return part.content
    # Contenu multimodal : ne garder que les morceaux textuels
    return "\n".join(item for item in part.content if isinstance(item, str))


def to_chat_messages(messages: List[ModelMessage]) -> List[ChatMessage]:
    """
    Aplatit l'historique pydantic-ai en une liste de ``ChatMessage``.

    - ``UserPromptPart`` devient un message ``human``
    - ``ToolReturnPart`` et les ``RetryPromptPart`` liés à un outil deviennent
      des messages ``tool``
    - chaque ``ModelResponse`` devient un seul message ``agent`` dont le
      contenu est la concaténation de ses parties texte

    Les prompts système sont ignorés.

    Args:
        messages: Historique au format pydantic-ai

    Returns:
        Liste ordonnée des messages étiquetés
    """
    chat_messages: List[ChatMessage] = []

    for message in messages:
        if isinstance(message, ModelRequest):
            for part in message.parts:
                if isinstance(part, UserPromptPart):
                    chat_messages.append(human_message(_user_prompt_text(part)))
                elif isinstance(part, ToolReturnPart):
                    chat_messages.append(
                        ChatMessage(
                            role=Roles.TOOL,
                            content=part.model_response_str(),
                            tool_name=part.tool_name,
                        )
                    )
                elif isinstance(part, RetryPromptPart) and part.tool_name:
                    chat_messages.append(
                        ChatMessage(
                            role=Roles.TOOL,
                            content=part.model_response(),
                            tool_name=part.tool_name,
                        )
                    )
        elif isinstance(message, ModelResponse):
            text = "".join(
                part.content for part in message.parts if isinstance(part, TextPart)
            )
            chat_messages.append(ChatMessage(role=Roles.AGENT, content=text))

    return chat_messages
