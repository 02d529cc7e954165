from __future__ import annotations


def pool_id(chain_id: int, pool_address: str) -> str:
    return f"{chain_id}_{pool_address}"


def token_id(chain_id: int, address: str) -> str:
    return f"{chain_id}_{address.lower()}"


def hook_stats_id(chain_id: int, hooks: str) -> str:
    return f"{chain_id}_{hooks}"


def tick_id(pool_key: str, tick_idx: int) -> str:
    return f"{pool_key}#{tick_idx}"


def position_id(pool_key: str, owner: str, tick_lower: int, tick_upper: int) -> str:
    return f"{pool_key}#{owner}#{tick_lower}#{tick_upper}"


def liquidity_provider_id(pool_key: str, owner: str) -> str:
    return f"{pool_key}-{owner}"


def transaction_id(chain_id: int, transaction_hash: str) -> str:
    return f"{chain_id}_{transaction_hash}"


def swap_id(chain_id: int, transaction_hash: str, log_index: int) -> str:
    return f"{chain_id}_{transaction_hash}_{log_index}"


def modify_liquidity_id(transaction_key: str, log_index: int) -> str:
    return f"{transaction_key}-{log_index}"


def interval_bucket_id(entity_id: str, period: int, start_timestamp: int) -> str:
    return f"{entity_id}-{int(period)}-{start_timestamp}"
