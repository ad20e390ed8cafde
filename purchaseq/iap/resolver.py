"""
Module: resolver
Purpose: EventResolver for transactions that arrive already decoded as dicts
(storefront webhook payloads, replay fixtures).
Dependencies: pydantic (IAPEvent validation)

Event naming:
    new stream:    subscription + trial start -> StartTrial
                   subscription               -> Subscribe
                   one-time purchase          -> fb_mobile_purchase
    restore flow:  subscription               -> SubscriptionRestore
                   one-time purchase          -> fb_mobile_purchase_restored

An explicit "event_name" in the payload wins over the derived one.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from pydantic import ValidationError

from purchaseq.iap.types import EventName, IAPEvent
from purchaseq.observability.logging import get_logger

logger = get_logger(__name__)

ProductLookup = Callable[[str], Awaitable[Mapping[str, Any] | None]]

# Catalog fields a lookup may fill in when the payload lacks them
_CATALOG_FIELDS = (
    "product_title",
    "product_description",
    "currency",
    "amount",
    "subscription_period",
    "introductory_offer_subscription_period",
    "introductory_offer_price",
)


def _new_event_name(event: IAPEvent) -> EventName:
    if event.is_subscription:
        if event.is_start_trial:
            return EventName.START_TRIAL
        return EventName.SUBSCRIBE
    return EventName.PURCHASED


def _restored_event_name(event: IAPEvent) -> EventName:
    if event.is_subscription:
        return EventName.SUBSCRIBE_RESTORE
    return EventName.PURCHASE_RESTORED


class MappingEventResolver:
    """Resolve dict transactions into IAPEvents.

    Transactions carrying a revocation_date (refunded or revoked) are not
    reportable. A failing product lookup is treated as "no metadata".
    """

    def __init__(self, product_lookup: ProductLookup | None = None) -> None:
        self.product_lookup = product_lookup

    async def resolve_new_event(self, transaction: Mapping[str, Any]) -> IAPEvent | None:
        return await self._resolve(transaction, _new_event_name)

    async def resolve_restored_event(self, transaction: Mapping[str, Any]) -> IAPEvent | None:
        return await self._resolve(transaction, _restored_event_name)

    async def _resolve(
        self,
        transaction: Mapping[str, Any],
        derive_name: Callable[[IAPEvent], EventName],
    ) -> IAPEvent | None:
        if not isinstance(transaction, Mapping):
            logger.debug("Ignoring non-mapping transaction of type %s", type(transaction).__name__)
            return None
        if transaction.get("revocation_date"):
            return None

        record = dict(transaction)
        record.pop("flow", None)
        record.pop("revocation_date", None)
        record.setdefault("original_transaction_id", record.get("transaction_id"))

        product_id = record.get("product_id")
        if self.product_lookup is not None and product_id:
            metadata = await self._lookup(str(product_id))
            for field in _CATALOG_FIELDS:
                if record.get(field) is None and metadata.get(field) is not None:
                    record[field] = metadata[field]

        # Name is derived after validation so flags like "false" are already coerced
        explicit_name = bool(record.get("event_name"))
        if not explicit_name:
            record["event_name"] = EventName.PURCHASED

        try:
            event = IAPEvent.model_validate(record)
        except ValidationError as e:
            logger.warning(
                "Unreportable transaction %s: %d validation error(s)",
                record.get("transaction_id"),
                e.error_count(),
            )
            return None

        if not explicit_name:
            event = event.model_copy(update={"event_name": derive_name(event)})
        return event

    async def _lookup(self, product_id: str) -> Mapping[str, Any]:
        assert self.product_lookup is not None
        try:
            metadata = await self.product_lookup(product_id)
        except Exception as e:
            logger.warning("Product lookup failed for %s: %s", product_id, e)
            return {}
        return metadata or {}
