"""Exceptions raised by PurchaseQ.

The logging paths never raise to their callers; these surface only from
explicit configuration checks.
"""

from __future__ import annotations


class PurchaseQError(Exception):
    """Base class for PurchaseQ errors."""


class MissingDependencyError(PurchaseQError):
    """No event sink could be resolved for the transaction logger."""

    def __init__(self, dependency: str = "event_sink") -> None:
        self.dependency = dependency
        super().__init__(f"{dependency} is not configured")
