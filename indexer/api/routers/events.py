from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from indexer.api.deps import get_event_dispatcher
from indexer.api.schemas.events import (
    DonateEventRequest,
    EventBatchRequest,
    EventBatchResponse,
    EventMetaRequest,
    EventResultResponse,
    InitializeEventRequest,
    ModifyLiquidityEventRequest,
    SwapEventRequest,
)
from indexer.application.use_cases.dispatch_events import EventDispatcher
from indexer.domain.entities.events import (
    DonateEvent,
    EventMeta,
    InitializeEvent,
    LedgerEvent,
    ModifyLiquidityEvent,
    SwapEvent,
)
from indexer.domain.exceptions import BatchRejectedError, DomainError

router = APIRouter()
logger = logging.getLogger(__name__)


def _meta(meta: EventMetaRequest) -> EventMeta:
    return EventMeta(
        chain_id=meta.chain_id,
        block_number=meta.block_number,
        block_timestamp=meta.block_timestamp,
        transaction_hash=meta.transaction_hash,
        log_index=meta.log_index,
        pool_id=meta.pool_id,
        transaction_from=meta.transaction_from,
    )


def _to_event(payload) -> LedgerEvent:
    meta = _meta(payload.meta)
    if isinstance(payload, InitializeEventRequest):
        return InitializeEvent(
            meta=meta,
            token0=payload.token0,
            token1=payload.token1,
            fee=payload.fee,
            tick_spacing=payload.tick_spacing,
            hooks=payload.hooks,
            sqrt_price=payload.sqrt_price,
            tick=payload.tick,
        )
    if isinstance(payload, ModifyLiquidityEventRequest):
        return ModifyLiquidityEvent(
            meta=meta,
            sender=payload.sender,
            tick_lower=payload.tick_lower,
            tick_upper=payload.tick_upper,
            liquidity_delta=payload.liquidity_delta,
        )
    if isinstance(payload, SwapEventRequest):
        return SwapEvent(
            meta=meta,
            sender=payload.sender,
            amount0=payload.amount0,
            amount1=payload.amount1,
            sqrt_price=payload.sqrt_price,
            liquidity=payload.liquidity,
            tick=payload.tick,
        )
    if isinstance(payload, DonateEventRequest):
        return DonateEvent(meta=meta, amount0=payload.amount0, amount1=payload.amount1)
    raise HTTPException(status_code=400, detail="Unsupported event kind.")


@router.post("/v1/events", response_model=EventBatchResponse)
def ingest_events(
    payload: EventBatchRequest,
    dispatcher: EventDispatcher = Depends(get_event_dispatcher),
):
    events = [_to_event(item) for item in payload.events]
    try:
        result = dispatcher.dispatch_all(events)
    except BatchRejectedError as exc:
        raise HTTPException(
            status_code=422,
            detail={
                "message": "Batch rejected; no events were applied.",
                "index": exc.index,
                "kind": exc.kind,
                "block_number": exc.block_number,
                "log_index": exc.log_index,
                "reason": exc.reason,
            },
        ) from exc
    except DomainError as exc:
        logger.warning("events: batch_rejected events=%s error=%s", len(events), exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return EventBatchResponse(
        applied=result.applied_count,
        skipped=result.skipped_count,
        results=[
            EventResultResponse(
                kind=row.kind.value,
                pool_key=row.pool_key,
                block_number=row.block_number,
                log_index=row.log_index,
                applied=row.applied,
                records_written=row.records_written,
                reason=row.reason,
            )
            for row in result.results
        ],
    )
