from __future__ import annotations

from collections.abc import Mapping

from indexer.domain.entities.tick import Tick
from indexer.domain.services.entity_ids import tick_id


def _align_up(tick: int, tick_spacing: int) -> int:
    return -(-tick // tick_spacing) * tick_spacing


def _align_down(tick: int, tick_spacing: int) -> int:
    return (tick // tick_spacing) * tick_spacing


def candidate_ticks(*, old_tick: int, new_tick: int, tick_spacing: int) -> list[int]:
    """Spacing-aligned tick indices a move from old_tick to new_tick passes.

    Moving up covers (old_tick, new_tick], moving down covers
    [new_tick, old_tick); results are ordered in the direction of travel.
    """
    if tick_spacing <= 0:
        raise ValueError("tick_spacing must be positive.")
    if old_tick == new_tick:
        return []

    if new_tick > old_tick:
        start = _align_up(old_tick + 1, tick_spacing)
        return list(range(start, new_tick + 1, tick_spacing))

    start = _align_down(old_tick - 1, tick_spacing)
    return list(range(start, new_tick - 1, -tick_spacing))


def crossed_ticks(
    *,
    pool_id: str,
    old_tick: int,
    new_tick: int,
    tick_spacing: int,
    ticks: Mapping[str, Tick],
) -> list[int]:
    return [
        idx
        for idx in candidate_ticks(
            old_tick=old_tick,
            new_tick=new_tick,
            tick_spacing=tick_spacing,
        )
        if tick_id(pool_id, idx) in ticks
    ]
