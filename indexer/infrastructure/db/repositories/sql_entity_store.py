from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from sqlalchemy import bindparam, text

from indexer.application.ports.entity_store_port import EntityStorePort
from indexer.domain.entities.entity_type import EntityType
from indexer.infrastructure.db.mappers.entity_payload_mapper import (
    map_payload_to_record,
    map_record_to_payload,
)


logger = logging.getLogger(__name__)

GET_MANY_CHUNK_SIZE = 500


class SqlEntityStore(EntityStorePort):
    def __init__(self, engine):
        self._engine = engine

    def get(self, entity_type: EntityType, entity_id: str) -> Any | None:
        sql = """
            SELECT payload
            FROM ledger_entities
            WHERE entity_type = :entity_type
              AND id = :id
        """
        params = {"entity_type": EntityType(entity_type).value, "id": entity_id}
        with self._engine.connect() as conn:
            row = conn.execute(text(sql), params).mappings().first()
        if row is None:
            return None
        return map_payload_to_record(entity_type, row["payload"])

    def get_many(self, entity_type: EntityType, entity_ids: Iterable[str]) -> dict[str, Any]:
        ids = list(dict.fromkeys(entity_ids))
        if not ids:
            return {}
        sql = text(
            """
            SELECT id, payload
            FROM ledger_entities
            WHERE entity_type = :entity_type
              AND id IN :ids
            """
        ).bindparams(bindparam("ids", expanding=True))

        result: dict[str, Any] = {}
        with self._engine.connect() as conn:
            for start in range(0, len(ids), GET_MANY_CHUNK_SIZE):
                chunk = ids[start : start + GET_MANY_CHUNK_SIZE]
                rows = conn.execute(
                    sql,
                    {"entity_type": EntityType(entity_type).value, "ids": chunk},
                ).mappings()
                for row in rows:
                    result[row["id"]] = map_payload_to_record(entity_type, row["payload"])
        return result

    def set(self, record: Any) -> None:
        self.set_many([record])

    def set_many(self, records: Iterable[Any]) -> None:
        # Later records for the same key win, matching sequential set() calls.
        rows: dict[tuple[str, str], dict[str, str]] = {}
        for record in records:
            entity_type = record.ENTITY_TYPE.value
            rows[(entity_type, record.id)] = {
                "entity_type": entity_type,
                "id": record.id,
                "payload": map_record_to_payload(record),
            }
        if not rows:
            return

        sql = """
            INSERT INTO ledger_entities (entity_type, id, payload, updated_at)
            VALUES (:entity_type, :id, :payload, CURRENT_TIMESTAMP)
            ON CONFLICT (entity_type, id) DO UPDATE
            SET payload = excluded.payload,
                updated_at = CURRENT_TIMESTAMP
        """
        with self._engine.begin() as conn:
            conn.execute(text(sql), list(rows.values()))
        logger.debug("sql_entity_store: upserted records=%s", len(rows))
