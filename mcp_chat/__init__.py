"""
Package principal du client de chat MCP.

Ce package contient tous les modules de l'application :
- agent : Handle de l'agent, mémoire de conversation et cycle de vie de la session
- cli : Console interactive, boucle de conversation et point d'entrée
- core : Configuration, erreurs et journalisation
- mcp : Conversion des serveurs MCP en toolsets
"""

__version__ = "0.1.0"
