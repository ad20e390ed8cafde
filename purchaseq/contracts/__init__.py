"""
Type contracts for PurchaseQ collaborators.

The transaction logger depends on these protocols only; concrete resolvers and
sinks live outside the core (see purchaseq.iap.resolver and purchaseq.sinks).

Re-exports for convenience:
"""

from purchaseq.contracts.classifier import EventResolver
from purchaseq.contracts.sink import EventSink, FlushBehavior, FlushReason

__all__ = [
    "EventResolver",
    "EventSink",
    "FlushBehavior",
    "FlushReason",
]
