from __future__ import annotations

from threading import Lock

from indexer.application.ports.token_metadata_port import TokenMetadataPort
from indexer.domain.entities.token import TokenMetadata


class CachedTokenMetadataResolver:
    """Indefinite per (chain, address) cache in front of a metadata resolver.

    Concurrent first lookups of one key wait on a per-key lock so the
    underlying resolver runs once.
    """

    def __init__(self, resolver: TokenMetadataPort):
        self._resolver = resolver
        self._cache: dict[tuple[int, str], TokenMetadata] = {}
        self._key_locks: dict[tuple[int, str], Lock] = {}
        self._lock = Lock()

    def _cache_get(self, key: tuple[int, str]) -> TokenMetadata | None:
        with self._lock:
            return self._cache.get(key)

    def resolve(self, address: str, chain_id: int) -> TokenMetadata:
        key = (chain_id, address.lower())
        cached = self._cache_get(key)
        if cached is not None:
            return cached

        with self._lock:
            key_lock = self._key_locks.setdefault(key, Lock())
        with key_lock:
            cached = self._cache_get(key)
            if cached is not None:
                return cached
            value = self._resolver.resolve(address, chain_id)
            with self._lock:
                self._cache[key] = value
                self._key_locks.pop(key, None)
            return value
