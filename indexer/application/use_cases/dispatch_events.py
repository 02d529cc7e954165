from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from threading import Lock
from typing import Any

from indexer.application.dto.process_event import DispatchBatchOutput, ProcessEventOutput
from indexer.application.ports.entity_store_port import EntityStorePort
from indexer.application.ports.token_metadata_port import TokenMetadataPort
from indexer.application.use_cases.process_donate import ProcessDonateUseCase
from indexer.application.use_cases.process_initialize import ProcessInitializeUseCase
from indexer.application.use_cases.process_modify_liquidity import ProcessModifyLiquidityUseCase
from indexer.application.use_cases.process_swap import ProcessSwapUseCase
from indexer.application.use_cases.staged_entity_store import StagedEntityStore
from indexer.domain.entities.events import EventKind, LedgerEvent
from indexer.domain.exceptions import (
    BatchRejectedError,
    DomainError,
    MissingEntityError,
    PoolAlreadyInitializedError,
    UnsupportedEventError,
)


logger = logging.getLogger(__name__)

HandlerFactory = Callable[[EntityStorePort, TokenMetadataPort], Any]

EVENT_HANDLERS: dict[EventKind, HandlerFactory] = {
    EventKind.INITIALIZE: lambda store, metadata: ProcessInitializeUseCase(
        store=store,
        metadata_port=metadata,
    ),
    EventKind.MODIFY_LIQUIDITY: lambda store, metadata: ProcessModifyLiquidityUseCase(store=store),
    EventKind.SWAP: lambda store, metadata: ProcessSwapUseCase(store=store),
    EventKind.DONATE: lambda store, metadata: ProcessDonateUseCase(store=store),
}


class EventDispatcher:
    """Routes ledger events to their use case, one event at a time.

    Events referencing pools or tokens outside the indexed window, and
    repeated pool initializations, are dropped with a warning. Every other
    error propagates to the caller.

    dispatch_all stages the whole batch and commits it with one store write,
    so a batch rejected by a fatal error leaves the store untouched and can be
    retried as is.
    """

    def __init__(
        self,
        *,
        store: EntityStorePort,
        metadata_port: TokenMetadataPort,
        handlers: dict[EventKind, HandlerFactory] | None = None,
    ):
        self._store = store
        self._metadata_port = metadata_port
        self._table = EVENT_HANDLERS if handlers is None else handlers
        self._handlers = self._build_handlers(store)
        self._lock = Lock()

    def _build_handlers(self, store: EntityStorePort) -> dict[EventKind, Any]:
        return {kind: factory(store, self._metadata_port) for kind, factory in self._table.items()}

    def dispatch(self, event: LedgerEvent) -> ProcessEventOutput:
        with self._lock:
            return self._run(self._handlers, event)

    def dispatch_all(self, events: Iterable[LedgerEvent]) -> DispatchBatchOutput:
        ordered = sorted(events, key=lambda event: event.meta.ordering_key)
        staged = StagedEntityStore(self._store)
        handlers = self._build_handlers(staged)

        results: list[ProcessEventOutput] = []
        with self._lock:
            for index, event in enumerate(ordered):
                try:
                    results.append(self._run(handlers, event))
                except DomainError as exc:
                    logger.warning(
                        "dispatcher: batch_rejected events=%s index=%s kind=%s block=%s "
                        "log_index=%s discarded=%s reason=%s",
                        len(ordered),
                        index,
                        event.KIND.value,
                        event.meta.block_number,
                        event.meta.log_index,
                        staged.pending,
                        exc,
                    )
                    raise BatchRejectedError(
                        index=index,
                        kind=event.KIND.value,
                        block_number=event.meta.block_number,
                        log_index=event.meta.log_index,
                        reason=str(exc),
                    ) from exc
            written = staged.commit()

        output = DispatchBatchOutput(results=results)
        logger.info(
            "dispatcher: batch_done events=%s applied=%s skipped=%s records=%s",
            len(results),
            output.applied_count,
            output.skipped_count,
            written,
        )
        return output

    def _run(self, handlers: dict[EventKind, Any], event: LedgerEvent) -> ProcessEventOutput:
        handler = handlers.get(event.KIND)
        if handler is None:
            raise UnsupportedEventError(f"No handler registered for {event.KIND.value}.")

        meta = event.meta
        try:
            return handler.execute(event)
        except (MissingEntityError, PoolAlreadyInitializedError) as exc:
            logger.warning(
                "dispatcher: event_skipped kind=%s pool=%s block=%s log_index=%s reason=%s",
                event.KIND.value,
                meta.pool_key,
                meta.block_number,
                meta.log_index,
                exc,
            )
            return ProcessEventOutput(
                kind=event.KIND,
                pool_key=meta.pool_key,
                block_number=meta.block_number,
                log_index=meta.log_index,
                applied=False,
                reason=str(exc),
            )
