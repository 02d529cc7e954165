from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class EventMetaRequest(BaseModel):
    chain_id: int
    block_number: int
    block_timestamp: int
    transaction_hash: str
    log_index: int
    pool_id: str = Field(..., description="Pool id as emitted by the pool manager.")
    transaction_from: str = ""


class InitializeEventRequest(BaseModel):
    kind: Literal["initialize"]
    meta: EventMetaRequest
    token0: str
    token1: str
    fee: int = Field(..., description="Fee tier in parts per million.")
    tick_spacing: int
    hooks: str
    sqrt_price: int = Field(..., description="Q64.96 sqrt price; numeric strings accepted.")
    tick: int


class ModifyLiquidityEventRequest(BaseModel):
    kind: Literal["modify_liquidity"]
    meta: EventMetaRequest
    sender: str
    tick_lower: int
    tick_upper: int
    liquidity_delta: int


class SwapEventRequest(BaseModel):
    kind: Literal["swap"]
    meta: EventMetaRequest
    sender: str
    amount0: int
    amount1: int
    sqrt_price: int
    liquidity: int
    tick: int


class DonateEventRequest(BaseModel):
    kind: Literal["donate"]
    meta: EventMetaRequest
    amount0: int
    amount1: int


EventRequest = Annotated[
    Union[
        InitializeEventRequest,
        ModifyLiquidityEventRequest,
        SwapEventRequest,
        DonateEventRequest,
    ],
    Field(discriminator="kind"),
]


class EventBatchRequest(BaseModel):
    events: list[EventRequest] = Field(..., min_length=1)


class EventResultResponse(BaseModel):
    kind: str
    pool_key: str
    block_number: int
    log_index: int
    applied: bool
    records_written: int
    reason: str | None = None


class EventBatchResponse(BaseModel):
    applied: int
    skipped: int
    results: list[EventResultResponse]
