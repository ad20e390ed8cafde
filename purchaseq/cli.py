"""
Replay recorded transactions through the transaction logger.

Usage:
    purchaseq-replay transactions.json [--concurrent] [--explicit-flush]

The input is a JSON array (or JSON lines) of transaction dicts. Each dict may
carry "flow": "new" | "restored" (default "new"); the remaining keys are the
IAPEvent fields. Reported events are written through the telemetry logger.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from purchaseq.contracts.sink import FlushBehavior, FlushReason
from purchaseq.iap.cache import TransactionCache
from purchaseq.iap.logger import IAPTransactionLogger, LoggerDependencies
from purchaseq.iap.resolver import MappingEventResolver
from purchaseq.sinks import LoggingSink

FLOWS = ("new", "restored")


def load_transactions(path: Path) -> list[dict[str, Any]]:
    """Read a JSON array or JSON-lines file of transaction dicts."""
    text = path.read_text(encoding="utf-8").strip()
    if not text:
        return []
    if text.startswith("["):
        records = json.loads(text)
    else:
        records = [json.loads(line) for line in text.splitlines() if line.strip()]
    return [record for record in records if isinstance(record, dict)]


async def replay(
    transactions: Sequence[dict[str, Any]],
    transaction_logger: IAPTransactionLogger,
    concurrent: bool = False,
) -> None:
    calls = []
    for record in transactions:
        flow = record.get("flow", "new")
        if flow == "restored":
            calls.append(transaction_logger.log_restored_transaction(record))
        else:
            calls.append(transaction_logger.log_new_transaction(record))

    if concurrent:
        await asyncio.gather(*calls)
    else:
        for call in calls:
            await call


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Replay transactions through the IAP logger")
    parser.add_argument("path", type=Path, help="JSON array or JSON-lines file of transactions")
    parser.add_argument(
        "--concurrent",
        action="store_true",
        help="Run all log calls at once instead of in file order",
    )
    parser.add_argument(
        "--explicit-flush",
        action="store_true",
        help="Buffer events and flush once at the end",
    )
    args = parser.parse_args(argv)

    if not args.path.exists():
        print(f"File not found: {args.path}", file=sys.stderr)
        return 1

    try:
        transactions = load_transactions(args.path)
    except json.JSONDecodeError as e:
        print(f"Invalid JSON in {args.path}: {e}", file=sys.stderr)
        return 1

    behavior = FlushBehavior.EXPLICIT_ONLY if args.explicit_flush else FlushBehavior.AUTO
    sink = LoggingSink(flush_behavior=behavior)
    transaction_logger = IAPTransactionLogger(
        MappingEventResolver(),
        cache=TransactionCache(),
        dependencies=LoggerDependencies(event_sink=sink),
    )

    asyncio.run(replay(transactions, transaction_logger, concurrent=args.concurrent))
    if args.explicit_flush:
        sink.flush(FlushReason.EXPLICIT)

    reported = len(sink.events)
    skipped = len(transactions) - reported
    print(
        f"Processed {len(transactions)} transaction(s): {reported} reported, "
        f"{skipped} suppressed or unreportable"
    )
    for logged in sink.events:
        product_id = logged.parameters.get("fb_content_id")
        print(f"  {logged.event_name} value={logged.value_to_sum:g} product={product_id}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
