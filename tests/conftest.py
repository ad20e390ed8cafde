"""
Pytest configuration for PurchaseQ tests

Every test starts with no process-wide sink, an empty shared ledger, and zeroed
telemetry counters.
"""

import pytest

from purchaseq.iap.cache import reset_transaction_cache
from purchaseq.iap.logger import IAPTransactionLogger
from purchaseq.observability.telemetry import reset_counters, reset_latencies


@pytest.fixture(autouse=True)
def isolate_process_state():
    IAPTransactionLogger.reset_dependencies()
    reset_transaction_cache()
    reset_counters()
    reset_latencies()
    yield
    IAPTransactionLogger.reset_dependencies()
    reset_transaction_cache()


@pytest.fixture
def sink():
    from purchaseq.sinks import InMemorySink

    return InMemorySink()
