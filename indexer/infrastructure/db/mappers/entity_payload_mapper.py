from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import fields
from functools import lru_cache
from typing import Any, get_type_hints

from indexer.domain.entities.entity_type import EntityType
from indexer.domain.entities.interval import PoolIntervalBucket, TokenIntervalBucket
from indexer.domain.entities.pool import HookStats, Pool
from indexer.domain.entities.position import LiquidityProvider, Position
from indexer.domain.entities.records import ModifyLiquidityRecord, SwapRecord, TransactionRecord
from indexer.domain.entities.tick import Tick
from indexer.domain.entities.token import Token


ENTITY_CLASSES: dict[EntityType, type] = {
    EntityType.POOL: Pool,
    EntityType.TOKEN: Token,
    EntityType.TICK: Tick,
    EntityType.POSITION: Position,
    EntityType.LIQUIDITY_PROVIDER: LiquidityProvider,
    EntityType.HOOK_STATS: HookStats,
    EntityType.POOL_INTERVAL: PoolIntervalBucket,
    EntityType.TOKEN_INTERVAL: TokenIntervalBucket,
    EntityType.TRANSACTION: TransactionRecord,
    EntityType.SWAP: SwapRecord,
    EntityType.MODIFY_LIQUIDITY: ModifyLiquidityRecord,
}


@lru_cache(maxsize=None)
def _int_fields(cls: type) -> frozenset[str]:
    hints = get_type_hints(cls)
    return frozenset(name for name, hint in hints.items() if hint is int)


def map_record_to_payload(record: Any) -> str:
    # Integers go out as decimal strings so Q128 values survive JSON readers.
    int_fields = _int_fields(type(record))
    payload: dict[str, Any] = {}
    for item in fields(record):
        value = getattr(record, item.name)
        payload[item.name] = str(value) if item.name in int_fields else value
    return json.dumps(payload, sort_keys=True)


def map_payload_to_record(entity_type: EntityType | str, payload: str | Mapping[str, Any]) -> Any:
    cls = ENTITY_CLASSES[EntityType(entity_type)]
    data = json.loads(payload) if isinstance(payload, str) else dict(payload)
    int_fields = _int_fields(cls)
    values = {
        item.name: int(data[item.name]) if item.name in int_fields else data[item.name]
        for item in fields(cls)
        if item.name in data
    }
    return cls(**values)
