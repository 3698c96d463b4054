"""Boundary adapters: database persistence and message broker."""
