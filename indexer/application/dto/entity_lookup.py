from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GetTickInput:
    pool_key: str
    tick_idx: int


@dataclass(frozen=True)
class GetPoolIntervalInput:
    pool_key: str
    period: int
    timestamp: int
