# tests/conftest.py

"""
Configuration file for pytest.
"""

import io
from typing import Callable, Iterable, List

import pytest

from mcp_chat.agent.messages import ChatMessage
from mcp_chat.cli.console import Console, ConsoleStyle


@pytest.fixture(autouse=True)
def mock_env_vars(monkeypatch):
    """
    Fixture pour simuler les variables d'environnement nécessaires pour les tests.
    Grâce à `autouse=True`, cette fixture est appliquée à chaque test.
    """
    monkeypatch.setenv("OPENAI_API_KEY", "dummy-openai-key-for-testing")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "dummy-anthropic-key-for-testing")


def scripted_input(lines: Iterable[str]) -> Callable[[str], str]:
    """Remplace `input` : retourne les lignes dans l'ordre puis lève EOFError."""
    iterator = iter(lines)

    def fake_input(prompt: str = "") -> str:
        try:
            return next(iterator)
        except StopIteration:
            raise EOFError

    return fake_input


@pytest.fixture
def make_console():
    """Fabrique une console sans couleurs dont la sortie est capturée."""

    def _make(lines: Iterable[str]) -> Console:
        return Console(
            input_fn=scripted_input(lines),
            output=io.StringIO(),
            style=ConsoleStyle.plain(),
        )

    return _make


class EchoAgent:
    """Agent factice qui répond "ECHO:<requête>" et enregistre ses appels."""

    def __init__(self) -> None:
        self.queries: List[str] = []
        self.thread_ids: List[str] = []

    async def invoke(self, messages: List[ChatMessage], thread_id: str) -> List[ChatMessage]:
        query = messages[-1].content
        self.queries.append(query)
        self.thread_ids.append(thread_id)
        return [
            ChatMessage(role="human", content=query),
            ChatMessage(role="agent", content=f"ECHO:{query}"),
        ]


@pytest.fixture
def echo_agent() -> EchoAgent:
    return EchoAgent()
