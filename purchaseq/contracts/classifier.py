"""
Event resolver protocol.

A resolver turns a raw storefront transaction into an IAPEvent, or None when
the transaction is not reportable. There is no error channel: None is the only
negative answer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from purchaseq.iap.types import IAPEvent


class EventResolver(Protocol):
    """Classifies raw transactions for the transaction logger."""

    async def resolve_new_event(self, transaction: Any) -> IAPEvent | None:
        """Classify a transaction delivered by the normal purchase stream.

        Side Effects:
            May suspend on metadata lookups (e.g. product catalog fetch)
        """
        ...

    async def resolve_restored_event(self, transaction: Any) -> IAPEvent | None:
        """Classify a transaction delivered by an explicit restore flow.

        Side Effects:
            May suspend on metadata lookups (e.g. product catalog fetch)
        """
        ...
