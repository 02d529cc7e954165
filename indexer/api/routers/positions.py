from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from indexer.api.deps import get_position_use_case
from indexer.api.schemas.ledger import PositionResponse
from indexer.application.use_cases.get_position import GetPositionUseCase
from indexer.domain.exceptions import MissingEntityError

router = APIRouter()


@router.get("/v1/positions/{position_id}", response_model=PositionResponse)
def get_position(
    position_id: str,
    use_case: GetPositionUseCase = Depends(get_position_use_case),
):
    try:
        position = use_case.execute(position_id)
    except MissingEntityError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    return PositionResponse(
        id=position.id,
        pool_id=position.pool_id,
        owner=position.owner,
        liquidity_provider_id=position.liquidity_provider_id,
        tick_lower=position.tick_lower,
        tick_upper=position.tick_upper,
        liquidity=str(position.liquidity),
        fee_growth_inside0_last=str(position.fee_growth_inside0_last),
        fee_growth_inside1_last=str(position.fee_growth_inside1_last),
        fees0=str(position.fees0),
        fees1=str(position.fees1),
        deposited0=str(position.deposited0),
        deposited1=str(position.deposited1),
        withdrawn0=str(position.withdrawn0),
        withdrawn1=str(position.withdrawn1),
        modify_liquidity_count=position.modify_liquidity_count,
        transaction_id=position.transaction_id,
        created_at_timestamp=position.created_at_timestamp,
        created_at_block_number=position.created_at_block_number,
    )
