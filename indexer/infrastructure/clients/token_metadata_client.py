from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from web3 import HTTPProvider, Web3

from indexer.domain.entities.events import ADDRESS_ZERO
from indexer.domain.entities.token import TokenMetadata
from indexer.infrastructure.clients.chains import native_currency


logger = logging.getLogger(__name__)

ERC20_METADATA_ABI = [
    {
        "name": "name",
        "outputs": [{"type": "string"}],
        "inputs": [],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "name": "symbol",
        "outputs": [{"type": "string"}],
        "inputs": [],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "name": "decimals",
        "outputs": [{"type": "uint8"}],
        "inputs": [],
        "stateMutability": "view",
        "type": "function",
    },
]

UNKNOWN_NAME = "unknown"
UNKNOWN_SYMBOL = "UNKNOWN"
UNKNOWN_DECIMALS = 0


@dataclass(frozen=True)
class TokenMetadataClientSettings:
    rpc_urls: dict[int, str]
    timeout_seconds: float


def _unknown_metadata() -> TokenMetadata:
    return TokenMetadata(name=UNKNOWN_NAME, symbol=UNKNOWN_SYMBOL, decimals=UNKNOWN_DECIMALS)


def _http_web3(rpc_url: str, timeout_seconds: float) -> Web3:
    return Web3(HTTPProvider(rpc_url, request_kwargs={"timeout": timeout_seconds}))


class Web3TokenMetadataClient:
    """Reads ERC20 name, symbol and decimals over JSON-RPC.

    Each field degrades to its placeholder on failure so one broken getter
    never blocks token creation.
    """

    def __init__(
        self,
        settings: TokenMetadataClientSettings,
        *,
        web3_factory: Callable[[str, float], Any] = _http_web3,
    ):
        self._settings = settings
        self._web3_factory = web3_factory
        self._clients: dict[int, Any] = {}

    def _client(self, chain_id: int) -> Any | None:
        client = self._clients.get(chain_id)
        if client is not None:
            return client
        rpc_url = self._settings.rpc_urls.get(chain_id)
        if not rpc_url:
            return None
        logger.info("token_metadata: connecting chain_id=%s", chain_id)
        client = self._web3_factory(rpc_url, self._settings.timeout_seconds)
        self._clients[chain_id] = client
        return client

    def _read(self, contract: Any, field: str, fallback: Any, *, chain_id: int, address: str) -> Any:
        try:
            return getattr(contract.functions, field)().call()
        except Exception as exc:
            logger.warning(
                "token_metadata: field_fallback chain_id=%s address=%s field=%s error=%s",
                chain_id,
                address,
                field,
                exc,
            )
            return fallback

    def resolve(self, address: str, chain_id: int) -> TokenMetadata:
        if address.lower() == ADDRESS_ZERO:
            return native_currency(chain_id)

        client = self._client(chain_id)
        if client is None:
            logger.warning("token_metadata: missing_rpc_url chain_id=%s address=%s", chain_id, address)
            return _unknown_metadata()

        try:
            contract = client.eth.contract(
                address=Web3.to_checksum_address(address),
                abi=ERC20_METADATA_ABI,
            )
        except (TypeError, ValueError) as exc:
            logger.warning(
                "token_metadata: invalid_address chain_id=%s address=%s error=%s",
                chain_id,
                address,
                exc,
            )
            return _unknown_metadata()

        return TokenMetadata(
            name=str(self._read(contract, "name", UNKNOWN_NAME, chain_id=chain_id, address=address)),
            symbol=str(self._read(contract, "symbol", UNKNOWN_SYMBOL, chain_id=chain_id, address=address)),
            decimals=int(
                self._read(contract, "decimals", UNKNOWN_DECIMALS, chain_id=chain_id, address=address)
            ),
        )
