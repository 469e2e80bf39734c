"""
Configuration du logging pour l'application.

Ce module configure un système de logging cohérent pour tous les composants
du client, avec des niveaux et formatages appropriés pour le debugging.
"""

import logging
import sys
from typing import TextIO


def setup_logging(
    name: str = "mcp_chat", level: str = "WARNING", stream: TextIO | None = None
) -> logging.Logger:
    """
    Configure le système de logging pour l'application.

    Args:
        name: Nom du logger racine de l'application
        level: Niveau de log (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        stream: Flux de sortie des logs (stdout par défaut)

    Returns:
        Logger configuré pour l'application
    """

    # Configuration des niveaux de log
    log_levels = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }

    log_level = log_levels.get(level.upper(), logging.WARNING)

    # Configuration du format de log
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    # Supprimer les handlers existants pour éviter les doublons
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(log_format))
    logger.addHandler(console_handler)

    # Éviter la propagation vers le logger racine
    logger.propagate = False

    return logger
