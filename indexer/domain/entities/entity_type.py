from __future__ import annotations

from enum import Enum


class EntityType(str, Enum):
    POOL = "pool"
    TOKEN = "token"
    TICK = "tick"
    POSITION = "position"
    LIQUIDITY_PROVIDER = "liquidity_provider"
    HOOK_STATS = "hook_stats"
    POOL_INTERVAL = "pool_interval"
    TOKEN_INTERVAL = "token_interval"
    TRANSACTION = "transaction"
    SWAP = "swap"
    MODIFY_LIQUIDITY = "modify_liquidity"
