"""
Boucle de conversation interactive.

La boucle est une machine à états strictement séquentielle :
AWAITING_INPUT → INVOKING_AGENT → RENDERING_RESULT → AWAITING_INPUT, jusqu'à
ENDED. Une nouvelle requête n'est lue qu'après la fin complète de l'appel à
l'agent et de son rendu. Les erreurs de l'agent ne sont pas interceptées ici.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Protocol

from mcp_chat.agent.messages import ChatMessage, human_message
from mcp_chat.cli.console import Console, resolve_query

logger = logging.getLogger("mcp_chat.conversation")


class ConversationState(Enum):
    AWAITING_INPUT = "awaiting_input"
    INVOKING_AGENT = "invoking_agent"
    RENDERING_RESULT = "rendering_result"
    ENDED = "ended"


class AgentHandle(Protocol):
    async def invoke(
        self, messages: List[ChatMessage], thread_id: str
    ) -> List[ChatMessage]: ...


@dataclass
class ConversationTurn:
    """Un tour de conversation, le temps d'une itération de la boucle."""

    query: str
    result_text: str
    preceding_message_is_tool: bool
    tool_output: Optional[str] = None


def build_turn(query: str, messages: List[ChatMessage]) -> ConversationTurn:
    """
    Extrait le résultat d'un appel à l'agent.

    Le résultat est le contenu du dernier message. L'avant-dernier n'est
    examiné que s'il existe.
    """
    result_text = messages[-1].content if messages else ""

    if len(messages) >= 2 and messages[-2].is_tool_output:
        return ConversationTurn(
            query=query,
            result_text=result_text,
            preceding_message_is_tool=True,
            tool_output=messages[-2].content,
        )
    return ConversationTurn(
        query=query, result_text=result_text, preceding_message_is_tool=False
    )


def render_turn(console: Console, turn: ConversationTurn, verbose: bool) -> None:
    style = console.style
    if turn.preceding_message_is_tool:
        if verbose:
            console.print(turn.tool_output or "")
        console.print()  # espacement
    console.print(f"{style.agent}{turn.result_text}{style.reset}\n")


def _print_banner(console: Console, remaining_samples: List[str]) -> None:
    console.print(
        '\nConversation started. Type "quit" or "q" to end the conversation.\n'
    )
    console.print("Sample Queries (type just enter to supply them one by one):")
    for query in remaining_samples:
        console.print(f"- {query}")
    console.print()


async def handle_conversation(
    agent: AgentHandle,
    remaining_samples: List[str],
    console: Console,
    thread_id: str,
    verbose: bool = False,
) -> None:
    """
    Exécute la boucle de conversation jusqu'à ce que l'utilisateur quitte.

    Args:
        agent: Handle de l'agent
        remaining_samples: Requêtes d'exemple non utilisées (consommées sur place)
        console: Console de la session
        thread_id: Identifiant de fil, identique pour tous les appels
        verbose: Affiche les sorties d'outils avant la réponse finale
    """
    _print_banner(console, remaining_samples)

    state = ConversationState.AWAITING_INPUT
    query: Optional[str] = None
    turn: Optional[ConversationTurn] = None

    while state is not ConversationState.ENDED:
        logger.debug("État de la conversation : %s", state.value)

        if state is ConversationState.AWAITING_INPUT:
            query = await resolve_query(console, remaining_samples)
            console.print()
            state = (
                ConversationState.ENDED
                if query is None
                else ConversationState.INVOKING_AGENT
            )

        elif state is ConversationState.INVOKING_AGENT:
            messages = await agent.invoke([human_message(query)], thread_id)
            turn = build_turn(query, messages)
            state = ConversationState.RENDERING_RESULT

        elif state is ConversationState.RENDERING_RESULT:
            render_turn(console, turn, verbose)
            turn = None
            state = ConversationState.AWAITING_INPUT

    console.close()
    style = console.style
    console.print(f"{style.agent}Goodbye!{style.reset}\n")
