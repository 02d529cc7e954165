from __future__ import annotations

from indexer.application.dto.entity_lookup import GetPoolIntervalInput
from indexer.application.ports.entity_store_port import EntityStorePort
from indexer.domain.entities.entity_type import EntityType
from indexer.domain.entities.interval import PoolIntervalBucket
from indexer.domain.exceptions import MissingEntityError
from indexer.domain.services.interval_bucketer import bucket_id


class GetPoolIntervalUseCase:
    def __init__(self, *, store: EntityStorePort):
        self._store = store

    def execute(self, command: GetPoolIntervalInput) -> PoolIntervalBucket:
        # Raises IntervalPeriodError for periods other than 5m, 1h and 1d.
        key = bucket_id(command.pool_key, command.timestamp, command.period)
        bucket = self._store.get(EntityType.POOL_INTERVAL, key)
        if bucket is None:
            raise MissingEntityError(f"No activity recorded for bucket {key}.")
        return bucket
