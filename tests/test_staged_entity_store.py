from __future__ import annotations

from indexer.application.use_cases.staged_entity_store import StagedEntityStore
from indexer.domain.entities.entity_type import EntityType
from indexer.domain.entities.tick import Tick
from indexer.infrastructure.memory.in_memory_entity_store import InMemoryEntityStore


def _tick(idx: int, liquidity_gross: int = 0) -> Tick:
    return Tick(
        id=f"1_0xpool#{idx}",
        chain_id=1,
        pool_id="1_0xpool",
        tick_idx=idx,
        liquidity_gross=liquidity_gross,
    )


def test_reads_prefer_staged_records():
    backing = InMemoryEntityStore()
    backing.set_many([_tick(0, 1), _tick(60, 1)])
    staged = StagedEntityStore(backing)

    staged.set(_tick(0, 9))

    assert staged.get(EntityType.TICK, "1_0xpool#0").liquidity_gross == 9
    found = staged.get_many(EntityType.TICK, ["1_0xpool#0", "1_0xpool#60", "1_0xpool#120"])
    assert {key: tick.liquidity_gross for key, tick in found.items()} == {
        "1_0xpool#0": 9,
        "1_0xpool#60": 1,
    }
    assert backing.get(EntityType.TICK, "1_0xpool#0").liquidity_gross == 1


def test_commit_flushes_and_clears():
    backing = InMemoryEntityStore()
    staged = StagedEntityStore(backing)
    staged.set_many([_tick(0, 1), _tick(0, 2), _tick(60, 3)])

    assert staged.pending == 2
    assert staged.commit() == 2
    assert staged.pending == 0
    assert backing.get(EntityType.TICK, "1_0xpool#0").liquidity_gross == 2
