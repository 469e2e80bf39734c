"""Configuration, erreurs et journalisation partagées."""
