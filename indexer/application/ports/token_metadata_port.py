from __future__ import annotations

from typing import Protocol

from indexer.domain.entities.token import TokenMetadata


class TokenMetadataPort(Protocol):
    def resolve(self, address: str, chain_id: int) -> TokenMetadata:
        ...
