"""Typed exceptions for the diagnosis engine."""

from __future__ import annotations


class KostolanyError(Exception):
    """Base class for errors raised by this package."""


class ValidationError(KostolanyError):
    """Diagnosis answers rejected before any computation."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(f"Invalid {field}: {message}")


class StorageError(KostolanyError):
    """Diagnosis store read/write failure."""

    def __init__(self, store: str, message: str) -> None:
        self.store = store
        super().__init__(f"[{store}] {message}")


class RegistryError(KostolanyError):
    """Phase metadata table is incomplete or inconsistent."""
