"""Interface en ligne de commande interactive."""
