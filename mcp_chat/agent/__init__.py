"""Handle de l'agent, messages, mémoire et cycle de vie de la session."""
