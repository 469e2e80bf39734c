"""
Console interactive : styles, lecture des lignes et résolution des requêtes.

Les codes couleur sont portés par un ``ConsoleStyle`` injecté dans la console,
ce qui permet de désactiver les couleurs (sortie redirigée, NO_COLOR) sans
toucher au code de rendu.
"""

import asyncio
import logging
import sys
from dataclasses import dataclass
from typing import Callable, List, Optional, TextIO

logger = logging.getLogger("mcp_chat.console")

QUIT_COMMANDS = frozenset({"quit", "q"})


@dataclass(frozen=True)
class ConsoleStyle:
    """Séquences ANSI utilisées pour le rendu."""

    prompt: str = "\x1b[33m"  # jaune : invite et écho de la saisie
    agent: str = "\x1b[36m"  # cyan : réponses de l'agent
    reset: str = "\x1b[0m"
    clear_line: str = "\x1b[1A\x1b[2K"  # remonte d'une ligne et l'efface

    @classmethod
    def plain(cls) -> "ConsoleStyle":
        return cls(prompt="", agent="", reset="", clear_line="")

    @classmethod
    def for_stream(cls, stream: TextIO, no_color: bool = False) -> "ConsoleStyle":
        """Style coloré uniquement pour un terminal interactif."""
        isatty = getattr(stream, "isatty", None)
        if no_color or not (isatty and isatty()):
            return cls.plain()
        return cls()


class Console:
    """
    Entrées/sorties de la session de chat.

    La lecture bloquante (``input_fn``) s'exécute dans un thread de travail
    pour ne pas bloquer la boucle asyncio.
    """

    def __init__(
        self,
        input_fn: Callable[[str], str] = input,
        output: Optional[TextIO] = None,
        style: Optional[ConsoleStyle] = None,
    ) -> None:
        self._input_fn = input_fn
        self.output = output or sys.stdout
        self.style = style or ConsoleStyle.for_stream(self.output)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        self._closed = True

    def write(self, text: str = "") -> None:
        self.output.write(text)
        self.output.flush()

    def print(self, text: str = "") -> None:
        self.write(f"{text}\n")

    async def read_line(self, prompt: str = "") -> Optional[str]:
        """
        Lit une ligne ; retourne None en fin d'entrée ou si la console est fermée.

        L'invite est écrite sur ``output`` : ``input_fn`` est appelée sans invite.
        """
        if self._closed:
            return None
        self.write(prompt)
        try:
            return await asyncio.to_thread(self._input_fn, "")
        except EOFError:
            logger.debug("Fin de l'entrée standard")
            self.close()
            return None


async def resolve_query(console: Console, remaining_samples: List[str]) -> Optional[str]:
    """
    Lit la prochaine requête de l'utilisateur.

    - ``quit`` ou ``q`` (insensible à la casse) ferme l'entrée et retourne None
    - une ligne vide consomme la prochaine requête d'exemple ; s'il n'en reste
      plus, un rappel est affiché et une nouvelle ligne est lue
    - sinon le texte saisi est retourné, sans espaces de début et de fin

    Args:
        console: Console de la session
        remaining_samples: Requêtes d'exemple non encore utilisées (modifiée sur place)

    Returns:
        La requête à envoyer, ou None pour terminer la conversation.
    """
    style = console.style

    while True:
        line = await console.read_line(f"{style.prompt}Query: ")
        console.write(style.reset)

        if line is None:
            return None

        query = line.strip()

        if query.lower() in QUIT_COMMANDS:
            console.close()
            return None

        if query:
            return query

        if remaining_samples:
            sample_query = remaining_samples.pop(0)
            console.write(style.clear_line)
            console.print(f"{style.prompt}Sample Query: {sample_query}{style.reset}")
            return sample_query

        console.print('\nPlease type a query, or "quit" or "q" to exit\n')
