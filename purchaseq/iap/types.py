"""
Module: types
Purpose: Domain types shared by the resolver, dedup cache, and transaction logger.
Dependencies: pydantic

Leaf module; nothing here imports from the rest of purchaseq.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EventName(str, Enum):
    """Analytics event names for purchase lifecycle occurrences.

    Extends str so the sink receives the raw event name.
    """

    PURCHASED = "fb_mobile_purchase"
    SUBSCRIBE = "Subscribe"
    START_TRIAL = "StartTrial"
    PURCHASE_RESTORED = "fb_mobile_purchase_restored"
    SUBSCRIBE_RESTORE = "SubscriptionRestore"


class ParameterName(str, Enum):
    """Keys of the parameter map sent to the sink."""

    CONTENT_ID = "fb_content_id"
    NUM_ITEMS = "fb_num_items"
    TRANSACTION_DATE = "fb_transaction_date"
    CURRENCY = "fb_currency"
    IMPLICITLY_LOGGED_PURCHASE = "_implicitlyLogged"
    PRODUCT_TITLE = "fb_content_title"
    DESCRIPTION = "fb_description"
    TRANSACTION_ID = "fb_transaction_id"
    IN_APP_PURCHASE_TYPE = "fb_iap_product_type"
    SUBSCRIPTION_PERIOD = "fb_iap_subs_period"
    IS_START_TRIAL = "fb_iap_is_start_trial"
    HAS_FREE_TRIAL = "fb_iap_has_free_trial"
    TRIAL_PERIOD = "fb_iap_trial_period"
    TRIAL_PRICE = "fb_iap_trial_price"


class IAPType(str, Enum):
    SUBSCRIPTION = "subs"
    PRODUCT = "inapp"


class SubscriptionPeriodUnit(str, Enum):
    """ISO-8601 duration designators."""

    DAY = "D"
    WEEK = "W"
    MONTH = "M"
    YEAR = "Y"


class SubscriptionPeriod(BaseModel):
    model_config = ConfigDict(frozen=True)

    unit: SubscriptionPeriodUnit
    num_units: int = Field(default=1, ge=1)


class IAPEvent(BaseModel):
    """A reportable purchase occurrence, as produced by an event resolver.

    ``original_transaction_id`` identifies the lineage (renewals and restores of
    one purchase share it); ``transaction_id`` identifies this one delivery.
    """

    model_config = ConfigDict(frozen=True)

    event_name: EventName
    transaction_id: str | None = None
    original_transaction_id: str
    amount: Decimal = Decimal("0")
    currency: str | None = None
    quantity: int = Field(default=1, ge=1)
    product_id: str
    product_title: str | None = None
    product_description: str | None = None
    transaction_date: datetime | None = None
    is_subscription: bool = False
    subscription_period: SubscriptionPeriod | None = None
    is_start_trial: bool = False
    has_introductory_offer: bool = False
    has_free_trial: bool = False
    introductory_offer_subscription_period: SubscriptionPeriod | None = None
    introductory_offer_price: Decimal | None = None

    @field_validator("original_transaction_id", "product_id")
    @classmethod
    def _require_non_empty(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must be a non-empty string")
        return value

    @field_validator("transaction_id")
    @classmethod
    def _blank_transaction_id_is_missing(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value
