"""
Point d'entrée du client de chat MCP en ligne de commande.

Ce module analyse les arguments, charge la configuration, ouvre la session
(modèle + serveurs MCP + agent) et lance la boucle de conversation. Toute
erreur non interceptée est affichée en entier sur stderr et produit le code
de sortie 1 ; les ressources de la session sont libérées dans tous les cas.
"""

import argparse
import asyncio
import logging
import sys
import traceback
from typing import List, Optional

from dotenv import find_dotenv, load_dotenv

from mcp_chat import __version__
from mcp_chat.agent.session import session_scope
from mcp_chat.cli.console import Console, ConsoleStyle
from mcp_chat.cli.conversation import handle_conversation
from mcp_chat.core.config import DEFAULT_CONFIG_PATH, AppSettings, load_config
from mcp_chat.core.logging import setup_logging

logger = logging.getLogger("mcp_chat.cli")


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="mcp-chat",
        description="Interactive chat with an LLM agent using MCP server tools",
    )
    parser.add_argument(
        "-c",
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to config file (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument(
        "-V",
        "--verbose",
        action="store_true",
        help="Run with verbose logging and show tool outputs",
    )
    parser.add_argument(
        "-v", "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser.parse_args(argv)


async def main(args: argparse.Namespace, console: Optional[Console] = None) -> None:
    """
    Exécute une session de chat complète.

    Cette fonction :
    1. Charge les variables d'environnement et les réglages
    2. Charge le fichier de configuration JSON5
    3. Ouvre la session (modèle, serveurs MCP, agent)
    4. Lance la boucle de conversation, puis libère la session
    """
    load_dotenv(find_dotenv(usecwd=True))
    settings = AppSettings()

    setup_logging("mcp_chat", "DEBUG" if args.verbose else settings.LOG_LEVEL)

    config = load_config(args.config)

    if console is None:
        console = Console(style=ConsoleStyle.for_stream(sys.stdout, settings.NO_COLOR))

    async with session_scope(
        config,
        console,
        settings.THREAD_ID,
        verbose=args.verbose,
        init_timeout=settings.MCP_INIT_TIMEOUT,
    ) as session:
        await handle_conversation(
            session.agent,
            list(config.sample_queries),
            console,
            session.thread_id,
            verbose=session.verbose,
        )


def run(argv: Optional[List[str]] = None, console: Optional[Console] = None) -> int:
    """Lance le client et retourne le code de sortie du processus."""
    args = parse_arguments(argv)

    try:
        asyncio.run(main(args, console))
    except KeyboardInterrupt:
        logger.info("👋 Arrêt demandé par l'utilisateur")
        print("\nGoodbye!")
    except Exception:
        traceback.print_exc(file=sys.stderr)
        return 1
    return 0


def cli() -> None:
    sys.exit(run())
