from __future__ import annotations

from urllib.parse import quote

import pytest
from fastapi.testclient import TestClient

from indexer.api.deps import (
    get_event_dispatcher,
    get_pool_interval_use_case,
    get_pool_use_case,
    get_position_use_case,
    get_tick_use_case,
)
from indexer.application.use_cases.dispatch_events import EventDispatcher
from indexer.application.use_cases.get_pool import GetPoolUseCase
from indexer.application.use_cases.get_pool_interval import GetPoolIntervalUseCase
from indexer.application.use_cases.get_position import GetPositionUseCase
from indexer.application.use_cases.get_tick import GetTickUseCase
from indexer.domain.entities.token import TokenMetadata
from indexer.domain.services.tick_math import Q96
from indexer.infrastructure.memory.in_memory_entity_store import InMemoryEntityStore
from indexer.main import app


TIMESTAMP = 1_700_000_000


class FakeTokenMetadataPort:
    def resolve(self, address: str, chain_id: int) -> TokenMetadata:
        return TokenMetadata(name="Token", symbol=address[2:5].upper(), decimals=18)


def _meta(log_index: int) -> dict:
    return {
        "chain_id": 1,
        "block_number": 100,
        "block_timestamp": TIMESTAMP,
        "transaction_hash": "0xtx",
        "log_index": log_index,
        "pool_id": "0xpool",
        "transaction_from": "0xEOA",
    }


def _events() -> list[dict]:
    return [
        {
            "kind": "modify_liquidity",
            "meta": _meta(1),
            "sender": "0xOwner",
            "tick_lower": -60,
            "tick_upper": 60,
            "liquidity_delta": "1000",
        },
        {
            "kind": "initialize",
            "meta": _meta(0),
            "token0": "0xaaa0000000000000000000000000000000000000",
            "token1": "0xbbb0000000000000000000000000000000000000",
            "fee": 3000,
            "tick_spacing": 60,
            "hooks": "0x0000000000000000000000000000000000000000",
            "sqrt_price": str(Q96),
            "tick": 0,
        },
    ]


@pytest.fixture
def client():
    store = InMemoryEntityStore()
    dispatcher = EventDispatcher(store=store, metadata_port=FakeTokenMetadataPort())
    app.dependency_overrides[get_event_dispatcher] = lambda: dispatcher
    app.dependency_overrides[get_pool_use_case] = lambda: GetPoolUseCase(store=store)
    app.dependency_overrides[get_tick_use_case] = lambda: GetTickUseCase(store=store)
    app.dependency_overrides[get_pool_interval_use_case] = lambda: GetPoolIntervalUseCase(store=store)
    app.dependency_overrides[get_position_use_case] = lambda: GetPositionUseCase(store=store)
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_ingest_events_applies_batch_in_order(client):
    response = client.post("/v1/events", json={"events": _events()})

    assert response.status_code == 200
    payload = response.json()
    assert payload["applied"] == 2
    assert payload["skipped"] == 0
    assert [row["kind"] for row in payload["results"]] == ["initialize", "modify_liquidity"]


def test_ingest_reports_skipped_events(client):
    response = client.post("/v1/events", json={"events": _events()[:1]})

    assert response.status_code == 200
    payload = response.json()
    assert payload["skipped"] == 1
    assert payload["results"][0]["applied"] is False


def test_ingest_rejects_unknown_kind(client):
    response = client.post("/v1/events", json={"events": [{"kind": "burn", "meta": _meta(0)}]})
    assert response.status_code == 422


def test_ingest_rejects_fatal_domain_error(client):
    events = _events()
    events[0]["liquidity_delta"] = "-5"
    response = client.post("/v1/events", json={"events": events})
    assert response.status_code == 422


def test_rejected_batch_can_be_retried_without_double_counting(client):
    events = _events()
    events.append(
        {
            "kind": "modify_liquidity",
            "meta": _meta(2),
            "sender": "0xStranger",
            "tick_lower": -60,
            "tick_upper": 60,
            "liquidity_delta": "-5",
        }
    )

    first = client.post("/v1/events", json={"events": events})
    assert first.status_code == 422
    detail = first.json()["detail"]
    assert detail["index"] == 2
    assert detail["kind"] == "modify_liquidity"
    assert detail["log_index"] == 2
    assert client.get("/v1/pools/1_0xpool").status_code == 404

    retry = client.post("/v1/events", json={"events": events})
    assert retry.status_code == 422
    assert client.get("/v1/pools/1_0xpool").status_code == 404

    accepted = client.post("/v1/events", json={"events": events[:2]})
    assert accepted.status_code == 200
    assert client.get("/v1/pools/1_0xpool").json()["liquidity"] == "1000"


def test_get_pool_serializes_big_integers_as_strings(client):
    client.post("/v1/events", json={"events": _events()})

    response = client.get("/v1/pools/1_0xpool")

    assert response.status_code == 200
    payload = response.json()
    assert payload["name"] == "AAA/BBB"
    assert payload["liquidity"] == "1000"
    assert payload["sqrt_price"] == str(Q96)
    assert payload["active_position_count"] == 1


def test_get_pool_returns_404_when_missing(client):
    response = client.get("/v1/pools/1_0xnone")
    assert response.status_code == 404


def test_get_tick_and_position(client):
    client.post("/v1/events", json={"events": _events()})

    tick = client.get("/v1/pools/1_0xpool/ticks/60")
    assert tick.status_code == 200
    assert tick.json()["liquidity_net"] == "-1000"
    assert client.get("/v1/pools/1_0xpool/ticks/120").status_code == 404

    position_id = quote("1_0xpool#0xowner#-60#60", safe="")
    position = client.get(f"/v1/positions/{position_id}")
    assert position.status_code == 200
    assert position.json()["liquidity"] == "1000"
    assert position.json()["deposited0"] == "2"


def test_get_pool_interval(client):
    client.post("/v1/events", json={"events": _events()})

    response = client.get("/v1/pools/1_0xpool/intervals/3600", params={"timestamp": TIMESTAMP + 10})
    assert response.status_code == 200
    payload = response.json()
    assert payload["start_timestamp"] == (TIMESTAMP // 3600) * 3600
    assert payload["tx_count"] == 2
    assert payload["modify_liquidity_count"] == 1

    assert client.get("/v1/pools/1_0xpool/intervals/60", params={"timestamp": TIMESTAMP}).status_code == 400
