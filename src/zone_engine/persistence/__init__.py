"""Persistence helpers for confirmed zone configurations."""
