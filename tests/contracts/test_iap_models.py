from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest
from pydantic import ValidationError

from fixtures.iap import make_event
from purchaseq.iap.types import EventName, IAPEvent, SubscriptionPeriod


def test_event_names_match_sink_contract():
    assert EventName.PURCHASED.value == "fb_mobile_purchase"
    assert EventName.SUBSCRIBE.value == "Subscribe"
    assert EventName.START_TRIAL.value == "StartTrial"
    assert EventName.PURCHASE_RESTORED.value == "fb_mobile_purchase_restored"
    assert EventName.SUBSCRIBE_RESTORE.value == "SubscriptionRestore"


def test_event_is_immutable():
    event = make_event()
    with pytest.raises(ValidationError):
        event.product_id = "other"


def test_event_coerces_wire_types():
    event = IAPEvent.model_validate(
        {
            "event_name": "fb_mobile_purchase",
            "original_transaction_id": "1",
            "product_id": "p",
            "amount": "12.50",
            "transaction_date": "2024-01-02T03:04:05Z",
        }
    )

    assert event.event_name is EventName.PURCHASED
    assert event.amount == Decimal("12.50")
    assert isinstance(event.transaction_date, datetime)
    assert event.transaction_id is None
    assert event.quantity == 1


@pytest.mark.parametrize("field", ["original_transaction_id", "product_id"])
def test_identifiers_must_be_non_empty(field):
    with pytest.raises(ValidationError):
        make_event(**{field: "  "})


def test_blank_transaction_id_is_treated_as_missing():
    assert make_event(transaction_id="").transaction_id is None


def test_quantity_must_be_positive():
    with pytest.raises(ValidationError):
        make_event(quantity=0)


def test_subscription_period_requires_known_unit():
    with pytest.raises(ValidationError):
        SubscriptionPeriod.model_validate({"unit": "Q", "num_units": 1})
    with pytest.raises(ValidationError):
        SubscriptionPeriod.model_validate({"unit": "M", "num_units": 0})
