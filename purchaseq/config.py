"""Centralized configuration for PurchaseQ.

Typed constants with environment overrides. The .env file (if any) is loaded
before the overrides are read; defaults let the library run with no env
configuration at all.
"""

from __future__ import annotations

from purchaseq.infrastructure.env import ensure_env_loaded, get_env_bool, get_env_int

ensure_env_loaded()

# --- Dedup cache ---
# 0 keeps every recorded pair for the life of the process. When bounded, the
# per-transaction marks left by suppressed replays count against the bound
# just like lineage keys, so a replay burst evicts older lineages sooner.
CACHE_MAX_ENTRIES: int = max(get_env_int("PURCHASEQ_CACHE_MAX_ENTRIES", 0), 0)

# --- Dependencies ---
# When true, building a transaction logger without a sink fails at startup.
REQUIRE_SINK: bool = get_env_bool("PURCHASEQ_REQUIRE_SINK", False)

# --- Parameter shaping (wire contract with the sink, do not change) ---
MAX_PARAMETER_VALUE_LENGTH: int = 100
TRANSACTION_DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S%z"
