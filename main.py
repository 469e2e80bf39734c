#!/usr/bin/env python3
"""
Point d'entrée principal du client de chat MCP.

Ce script lance une session de chat interactive dans le terminal :
- Chargement de la configuration (llm-mcp-config.json5 par défaut)
- Démarrage des serveurs MCP configurés
- Boucle de conversation avec l'agent jusqu'à "quit" ou "q"

Exemple :
    python main.py --config ./llm-mcp-config.json5 --verbose
"""

from mcp_chat.cli.main import cli

if __name__ == "__main__":
    cli()
