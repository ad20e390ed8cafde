"""
Reports purchase and subscription events to the analytics sink exactly once per
occurrence.

A raw transaction can reach us many times: the purchase stream replays
unfinished transactions on relaunch, restores re-surface old purchases under
new transaction ids, and subscriptions renew under the same original
transaction id. The logger resolves each delivery into an IAPEvent, checks the
shared TransactionCache, and only calls the sink for occurrences the cache has
not seen.

Usage:
    IAPTransactionLogger.configure_dependencies(event_sink=sink)
    logger = IAPTransactionLogger(resolver)
    await logger.log_new_transaction(transaction)

Side Effects:
    - Mutates the shared TransactionCache
    - Calls the configured EventSink (log_event, and flush unless explicit-only)
    - Increments iap.* telemetry counters
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, ClassVar

from purchaseq import config
from purchaseq.contracts.classifier import EventResolver
from purchaseq.contracts.sink import EventSink, FlushBehavior, FlushReason
from purchaseq.errors import MissingDependencyError
from purchaseq.iap.cache import TransactionCache, get_transaction_cache
from purchaseq.iap.parameters import build_parameters
from purchaseq.iap.types import EventName, IAPEvent
from purchaseq.observability.logging import get_logger
from purchaseq.observability.telemetry import counter, time_block

logger = get_logger(__name__)


@dataclass(frozen=True)
class LoggerDependencies:
    event_sink: EventSink


class IAPTransactionLogger:
    """Dedup-aware bridge between an EventResolver and an EventSink.

    Dependencies come from the constructor when given, otherwise from the
    process-wide configure_dependencies() slot. With neither, every log call is
    a silent no-op that leaves the cache untouched.
    """

    configured_dependencies: ClassVar[LoggerDependencies | None] = None
    default_dependencies: ClassVar[LoggerDependencies | None] = None

    def __init__(
        self,
        resolver: EventResolver,
        cache: TransactionCache | None = None,
        dependencies: LoggerDependencies | None = None,
        require_sink: bool | None = None,
    ) -> None:
        """
        Args:
            resolver: Classifies raw transactions
            cache: Ledger to dedup against (defaults to the process-wide one)
            dependencies: Explicit sink; overrides the process-wide slot
            require_sink: Fail at construction when no sink resolves
                (defaults to config.REQUIRE_SINK)

        Raises:
            MissingDependencyError: require_sink is set and no sink resolves
        """
        self.resolver = resolver
        self.cache = cache if cache is not None else get_transaction_cache()
        self._dependencies = dependencies

        if require_sink is None:
            require_sink = config.REQUIRE_SINK
        if require_sink and self.get_dependencies() is None:
            raise MissingDependencyError("event_sink")

    # ------------------------------------------------------------------
    # Dependency injection
    # ------------------------------------------------------------------

    @classmethod
    def configure_dependencies(cls, event_sink: EventSink) -> None:
        """
        Install the process-wide sink.

        Side Effects:
            - Replaces IAPTransactionLogger.configured_dependencies
        """
        cls.configured_dependencies = LoggerDependencies(event_sink=event_sink)

    @classmethod
    def reset_dependencies(cls) -> None:
        """
        Clear the process-wide sink (useful for tests).

        Side Effects:
            - Sets IAPTransactionLogger.configured_dependencies to None
        """
        cls.configured_dependencies = None

    def get_dependencies(self) -> LoggerDependencies | None:
        if self._dependencies is not None:
            return self._dependencies
        return type(self).configured_dependencies or type(self).default_dependencies

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def log_new_transaction(self, transaction: Any) -> None:
        """Report a transaction from the purchase stream unless its lineage was already reported."""
        event = await self._resolve(self.resolver.resolve_new_event, transaction, "new")
        if event is None:
            return

        dependencies = self._dependencies_or_skip(event, "new")
        if dependencies is None:
            return

        if not self._record_new_event(event):
            counter("iap.new.suppressed")
            return

        self._report(event, dependencies, "new")

    async def log_restored_transaction(self, transaction: Any) -> None:
        """Report a restored transaction unless this exact event was already reported for its lineage."""
        event = await self._resolve(self.resolver.resolve_restored_event, transaction, "restored")
        if event is None:
            return

        dependencies = self._dependencies_or_skip(event, "restored")
        if dependencies is None:
            return

        if not self._record_restored_event(event):
            counter("iap.restored.suppressed")
            return

        self._report(event, dependencies, "restored")

    # ------------------------------------------------------------------
    # Dedup policy
    # ------------------------------------------------------------------

    def _record_new_event(self, event: IAPEvent) -> bool:
        """
        Decide whether a new-stream event is reported and record the decision.

        Order matters:
        1. Subscription whose lineage already has this event or a subscription
           restore: suppress, mark the concrete transaction.
        2. One-time purchase whose lineage has any event: suppress, mark the
           concrete transaction.
        3. Otherwise record the lineage and report.

        Returns:
            True when the caller must report the event.
        """
        lineage = event.original_transaction_id
        with self.cache.locked() as cache:
            if event.is_subscription and (
                cache.contains(lineage, event.event_name)
                or cache.contains(lineage, EventName.SUBSCRIBE_RESTORE)
            ):
                self._mark_occurrence(cache, event)
                logger.debug(
                    "Suppressed %s for lineage %s: subscription already reported",
                    event.event_name.value,
                    lineage,
                )
                return False

            if event.event_name is EventName.PURCHASED and cache.contains(lineage):
                self._mark_occurrence(cache, event)
                logger.debug(
                    "Suppressed %s for lineage %s: purchase already reported",
                    event.event_name.value,
                    lineage,
                )
                return False

            cache.add(lineage, event.event_name)
            return True

    def _record_restored_event(self, event: IAPEvent) -> bool:
        lineage = event.original_transaction_id
        with self.cache.locked() as cache:
            if cache.contains(lineage, event.event_name):
                logger.debug(
                    "Suppressed restored %s for lineage %s", event.event_name.value, lineage
                )
                return False
            cache.add(lineage, event.event_name)
            return True

    @staticmethod
    def _mark_occurrence(cache: TransactionCache, event: IAPEvent) -> None:
        if event.transaction_id is not None:
            cache.add(event.transaction_id, event.event_name)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _resolve(
        self,
        resolve: Callable[[Any], Awaitable[IAPEvent | None]],
        transaction: Any,
        flow: str,
    ) -> IAPEvent | None:
        try:
            with time_block(f"iap.{flow}.resolve.latency"):
                event = await resolve(transaction)
        except Exception:
            logger.exception("Event resolver failed for %s transaction", flow)
            event = None

        if event is None:
            counter(f"iap.{flow}.unresolved")
        return event

    def _dependencies_or_skip(self, event: IAPEvent, flow: str) -> LoggerDependencies | None:
        dependencies = self.get_dependencies()
        if dependencies is None:
            counter(f"iap.{flow}.no_sink")
            logger.debug(
                "No event sink configured; dropping %s for lineage %s",
                event.event_name.value,
                event.original_transaction_id,
            )
        return dependencies

    def _report(self, event: IAPEvent, dependencies: LoggerDependencies, flow: str) -> None:
        sink = dependencies.event_sink
        try:
            parameters = build_parameters(event)
            sink.log_event(event.event_name.value, float(event.amount), parameters)
            if sink.flush_behavior != FlushBehavior.EXPLICIT_ONLY:
                sink.flush(FlushReason.EAGERLY_FLUSHING_EVENT)
        except Exception:
            counter("iap.sink_error")
            logger.exception("Failed to report %s", event.event_name.value)
            return

        counter(f"iap.{flow}.reported")
        logger.info(
            "Reported %s for lineage %s (transaction %s)",
            event.event_name.value,
            event.original_transaction_id,
            event.transaction_id,
        )
