from __future__ import annotations

from functools import lru_cache

from fastapi import HTTPException

from indexer.application.ports.entity_store_port import EntityStorePort
from indexer.application.ports.token_metadata_port import TokenMetadataPort
from indexer.application.use_cases.dispatch_events import EventDispatcher
from indexer.application.use_cases.get_pool import GetPoolUseCase
from indexer.application.use_cases.get_pool_interval import GetPoolIntervalUseCase
from indexer.application.use_cases.get_position import GetPositionUseCase
from indexer.application.use_cases.get_tick import GetTickUseCase
from indexer.infrastructure.clients.cached_token_metadata import CachedTokenMetadataResolver
from indexer.infrastructure.clients.token_metadata_client import (
    TokenMetadataClientSettings,
    Web3TokenMetadataClient,
)
from indexer.infrastructure.db.engine import ensure_schema, get_engine
from indexer.infrastructure.db.repositories.sql_entity_store import SqlEntityStore
from indexer.shared.config import get_settings


def _get_db_engine():
    settings = get_settings()
    if not settings.postgres_dsn:
        raise HTTPException(status_code=500, detail="POSTGRES_DSN is required.")
    engine = get_engine(settings.postgres_dsn)
    ensure_schema(engine)
    return engine


@lru_cache(maxsize=1)
def get_entity_store() -> EntityStorePort:
    return SqlEntityStore(_get_db_engine())


@lru_cache(maxsize=1)
def get_token_metadata_port() -> TokenMetadataPort:
    settings = get_settings()
    client = Web3TokenMetadataClient(
        TokenMetadataClientSettings(
            rpc_urls=settings.rpc_urls,
            timeout_seconds=settings.rpc_timeout_seconds,
        )
    )
    return CachedTokenMetadataResolver(client)


@lru_cache(maxsize=1)
def get_event_dispatcher() -> EventDispatcher:
    return EventDispatcher(
        store=get_entity_store(),
        metadata_port=get_token_metadata_port(),
    )


def get_pool_use_case() -> GetPoolUseCase:
    return GetPoolUseCase(store=get_entity_store())


def get_tick_use_case() -> GetTickUseCase:
    return GetTickUseCase(store=get_entity_store())


def get_pool_interval_use_case() -> GetPoolIntervalUseCase:
    return GetPoolIntervalUseCase(store=get_entity_store())


def get_position_use_case() -> GetPositionUseCase:
    return GetPositionUseCase(store=get_entity_store())
