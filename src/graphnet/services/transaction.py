"""TransactionCoordinator: single in-flight transaction with snapshot rollback.

The coordinator's state is an explicit field, either :class:`Idle` or an
:class:`ActiveTransaction`. ``start`` deep-snapshots the store; mutations
applied while active take effect immediately and are appended to the
operation log; ``commit`` simply drops the transaction, and ``rollback``
replaces the whole graph with the snapshot.

The operation log is an audit trail only. Rollback never replays it.
"""

from __future__ import annotations

import copy
import itertools
import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from graphnet.domain.errors import TransactionStateError
from graphnet.domain.models import TransactionStatus, TransactionSummary
from graphnet.services._helpers import elapsed_ms, now_iso

if TYPE_CHECKING:
    from graphnet.domain.types import OperationType
    from graphnet.infrastructure.store import GraphStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransactionOperation:
    """One audited mutation."""

    type: OperationType
    target_id: str
    timestamp: str
    before_state: Any = None
    after_state: Any = None


@dataclass(frozen=True)
class Idle:
    """No transaction in flight."""


@dataclass
class ActiveTransaction:
    """The single in-flight transaction."""

    id: str
    start_time: float
    snapshot: dict[str, list[dict[str, Any]]]
    operations: list[TransactionOperation] = field(default_factory=list)

    def summary(self) -> TransactionSummary:
        return TransactionSummary(
            id=self.id,
            operation_count=len(self.operations),
            duration_ms=elapsed_ms(self.start_time),
        )


type TransactionState = Idle | ActiveTransaction


class TransactionCoordinator:
    """Serializes a single transaction over a :class:`GraphStore`.

    INVARIANT: at most one ActiveTransaction exists; a second ``start``
    fails rather than queuing.
    """

    def __init__(self, store: GraphStore) -> None:
        self._store = store
        self._state: TransactionState = Idle()
        self._counter = itertools.count(1)

    @property
    def state(self) -> TransactionState:
        return self._state

    @property
    def is_active(self) -> bool:
        return isinstance(self._state, ActiveTransaction)

    def _require_active(self) -> ActiveTransaction:
        if not isinstance(self._state, ActiveTransaction):
            raise TransactionStateError("No transaction in progress")
        return self._state

    def start(self) -> str:
        """Begin a transaction. Returns its id."""
        if isinstance(self._state, ActiveTransaction):
            raise TransactionStateError(
                "Transaction already in progress. Commit or rollback current transaction first.",
                details={"transaction_id": self._state.id},
            )
        transaction_id = f"tx-{next(self._counter)}-{int(time.time() * 1000)}"
        self._state = ActiveTransaction(
            id=transaction_id,
            start_time=time.time(),
            snapshot=self._store.get_data(),
        )
        logger.debug("Started transaction %s", transaction_id)
        return transaction_id

    def record(
        self,
        op_type: OperationType,
        target_id: str,
        before_state: Any = None,
        after_state: Any = None,
    ) -> None:
        """Append an operation to the active log. No-op when idle."""
        if not isinstance(self._state, ActiveTransaction):
            return
        self._state.operations.append(
            TransactionOperation(
                type=op_type,
                target_id=target_id,
                timestamp=now_iso(),
                before_state=copy.deepcopy(before_state),
                after_state=copy.deepcopy(after_state),
            )
        )

    def commit(self) -> TransactionSummary:
        """Finish the transaction. Changes are already applied."""
        transaction = self._require_active()
        summary = transaction.summary()
        self._state = Idle()
        logger.debug(
            "Committed transaction %s with %d operations", summary.id, summary.operation_count
        )
        return summary

    def rollback(self) -> TransactionSummary:
        """Restore the start-of-transaction snapshot.

        The coordinator returns to Idle even if the restore fails; the
        failure still propagates to the caller.
        """
        transaction = self._require_active()
        summary = transaction.summary()
        try:
            self._store.replace_data(transaction.snapshot, skip_validation=True)
        finally:
            self._state = Idle()
        logger.debug(
            "Rolled back transaction %s (%d operations discarded)",
            summary.id,
            summary.operation_count,
        )
        return summary

    def get_status(self) -> TransactionStatus | None:
        if not isinstance(self._state, ActiveTransaction):
            return None
        return TransactionStatus(
            id=self._state.id,
            start_time=self._state.start_time,
            operation_count=len(self._state.operations),
            duration_ms=elapsed_ms(self._state.start_time),
        )

    @property
    def operations(self) -> list[TransactionOperation]:
        """Copy of the active transaction's log (empty when idle)."""
        if not isinstance(self._state, ActiveTransaction):
            return []
        return list(self._state.operations)
