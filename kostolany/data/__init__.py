"""Persistence and market-input collaborators."""
