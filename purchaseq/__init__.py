"""PurchaseQ - report in-app purchase events to analytics exactly once"""

from __future__ import annotations

__version__ = "0.1.0"


# Lazy imports so `import purchaseq` does not load pydantic/cachetools
def __getattr__(name: str):
    if name in ("IAPTransactionLogger", "LoggerDependencies"):
        from purchaseq.iap import logger

        return getattr(logger, name)

    if name in ("TransactionCache", "get_transaction_cache"):
        from purchaseq.iap import cache

        return getattr(cache, name)

    if name in ("EventName", "IAPEvent", "SubscriptionPeriod", "SubscriptionPeriodUnit"):
        from purchaseq.iap import types

        return getattr(types, name)

    if name == "MappingEventResolver":
        from purchaseq.iap.resolver import MappingEventResolver

        return MappingEventResolver

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = [
    "IAPTransactionLogger",
    "LoggerDependencies",
    "TransactionCache",
    "get_transaction_cache",
    "EventName",
    "IAPEvent",
    "SubscriptionPeriod",
    "SubscriptionPeriodUnit",
    "MappingEventResolver",
]
