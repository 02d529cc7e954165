from __future__ import annotations

import logging

from indexer.application.ports.entity_store_port import EntityStorePort
from indexer.application.ports.token_metadata_port import TokenMetadataPort
from indexer.domain.entities.entity_type import EntityType
from indexer.domain.entities.interval import INTERVAL_PERIODS
from indexer.domain.entities.pool import HookStats, Pool
from indexer.domain.entities.token import Token
from indexer.domain.exceptions import PoolNotFoundError, TokenNotFoundError
from indexer.domain.services import entity_ids
from indexer.domain.services.interval_bucketer import bucket_id
from indexer.domain.services.pool_ledger import IntervalSnapshot, has_hooks


logger = logging.getLogger(__name__)


def load_pool(*, store: EntityStorePort, pool_key: str) -> Pool:
    pool = store.get(EntityType.POOL, pool_key)
    if pool is None:
        raise PoolNotFoundError(f"Pool not found: {pool_key}.")
    return pool


def load_pool_tokens(*, store: EntityStorePort, pool: Pool) -> tuple[Token, Token]:
    tokens = store.get_many(EntityType.TOKEN, [pool.token0_id, pool.token1_id])
    token0 = tokens.get(pool.token0_id)
    token1 = tokens.get(pool.token1_id)
    if token0 is None or token1 is None:
        missing = pool.token0_id if token0 is None else pool.token1_id
        raise TokenNotFoundError(f"Token not found: {missing}.")
    return token0, token1


def load_hook_stats(*, store: EntityStorePort, chain_id: int, hooks: str) -> HookStats | None:
    if not has_hooks(hooks):
        return None
    return store.get(EntityType.HOOK_STATS, entity_ids.hook_stats_id(chain_id, hooks))


def load_intervals(
    *,
    store: EntityStorePort,
    pool_key: str,
    token0_id: str,
    token1_id: str,
    timestamp: int,
) -> IntervalSnapshot:
    pool_ids = {period: bucket_id(pool_key, timestamp, period) for period in INTERVAL_PERIODS}
    token0_ids = {period: bucket_id(token0_id, timestamp, period) for period in INTERVAL_PERIODS}
    token1_ids = {period: bucket_id(token1_id, timestamp, period) for period in INTERVAL_PERIODS}

    pool_buckets = store.get_many(EntityType.POOL_INTERVAL, pool_ids.values())
    token_buckets = store.get_many(
        EntityType.TOKEN_INTERVAL,
        [*token0_ids.values(), *token1_ids.values()],
    )
    return IntervalSnapshot(
        pool={p: pool_buckets[key] for p, key in pool_ids.items() if key in pool_buckets},
        token0={p: token_buckets[key] for p, key in token0_ids.items() if key in token_buckets},
        token1={p: token_buckets[key] for p, key in token1_ids.items() if key in token_buckets},
    )


def get_or_create_token(
    *,
    store: EntityStorePort,
    metadata_port: TokenMetadataPort,
    chain_id: int,
    address: str,
) -> Token:
    key = entity_ids.token_id(chain_id, address)
    token = store.get(EntityType.TOKEN, key)
    if token is not None:
        return token

    metadata = metadata_port.resolve(address, chain_id)
    logger.info(
        "ledger: token_created id=%s symbol=%s decimals=%s",
        key,
        metadata.symbol,
        metadata.decimals,
    )
    return Token(
        id=key,
        chain_id=chain_id,
        address=address.lower(),
        symbol=metadata.symbol,
        name=metadata.name,
        decimals=metadata.decimals,
    )
