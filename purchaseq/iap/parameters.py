"""
Builds the parameter map sent to the sink for a purchase event.

The key names and encodings are the sink's wire contract: flags are the strings
"1"/"0", text values are cut to MAX_PARAMETER_VALUE_LENGTH characters, and
durations are ISO-8601 style ("P1M").
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from purchaseq import config
from purchaseq.iap.types import IAPEvent, IAPType, ParameterName, SubscriptionPeriod


def _flag(value: bool) -> str:
    return "1" if value else "0"


def duration_of_subscription_period(period: SubscriptionPeriod | None) -> str:
    if period is None:
        return ""
    return f"P{period.num_units}{period.unit.value}"


def truncate(value: str, max_length: int = config.MAX_PARAMETER_VALUE_LENGTH) -> str:
    """Keep the first max_length characters."""
    if len(value) <= max_length:
        return value
    return value[:max_length]


def format_transaction_date(value: datetime | None) -> str:
    """Format as yyyy-MM-dd HH:mm:ssZ; naive datetimes are taken as UTC."""
    if value is None:
        return ""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.strftime(config.TRANSACTION_DATE_FORMAT)


def build_parameters(event: IAPEvent) -> dict[str, Any]:
    parameters: dict[str, Any] = {
        ParameterName.CONTENT_ID.value: event.product_id,
        ParameterName.NUM_ITEMS.value: event.quantity,
        ParameterName.TRANSACTION_DATE.value: format_transaction_date(event.transaction_date),
        ParameterName.CURRENCY.value: event.currency or "",
        ParameterName.IMPLICITLY_LOGGED_PURCHASE.value: "1",
    }
    if event.product_title is not None:
        parameters[ParameterName.PRODUCT_TITLE.value] = truncate(event.product_title)
    if event.product_description is not None:
        parameters[ParameterName.DESCRIPTION.value] = truncate(event.product_description)
    if event.transaction_id is not None:
        parameters[ParameterName.TRANSACTION_ID.value] = event.transaction_id

    if event.is_subscription:
        parameters[ParameterName.IN_APP_PURCHASE_TYPE.value] = IAPType.SUBSCRIPTION.value
        parameters[ParameterName.SUBSCRIPTION_PERIOD.value] = duration_of_subscription_period(
            event.subscription_period
        )
        parameters[ParameterName.IS_START_TRIAL.value] = _flag(event.is_start_trial)
        if event.has_introductory_offer:
            parameters[ParameterName.HAS_FREE_TRIAL.value] = _flag(event.has_free_trial)
            parameters[ParameterName.TRIAL_PERIOD.value] = duration_of_subscription_period(
                event.introductory_offer_subscription_period
            )
            # Absent price leaves the key out rather than sending a null
            if event.introductory_offer_price is not None:
                parameters[ParameterName.TRIAL_PRICE.value] = float(
                    event.introductory_offer_price
                )
    else:
        parameters[ParameterName.IN_APP_PURCHASE_TYPE.value] = IAPType.PRODUCT.value

    return parameters
