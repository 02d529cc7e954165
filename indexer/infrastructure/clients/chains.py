from __future__ import annotations

from indexer.domain.entities.token import TokenMetadata


DEFAULT_NATIVE_CURRENCY = TokenMetadata(name="Ether", symbol="ETH", decimals=18)

NATIVE_CURRENCIES: dict[int, TokenMetadata] = {
    1: DEFAULT_NATIVE_CURRENCY,
    10: DEFAULT_NATIVE_CURRENCY,
    56: TokenMetadata(name="BNB", symbol="BNB", decimals=18),
    130: DEFAULT_NATIVE_CURRENCY,
    137: TokenMetadata(name="POL", symbol="POL", decimals=18),
    324: DEFAULT_NATIVE_CURRENCY,
    480: DEFAULT_NATIVE_CURRENCY,
    1868: DEFAULT_NATIVE_CURRENCY,
    7777777: DEFAULT_NATIVE_CURRENCY,
    8453: DEFAULT_NATIVE_CURRENCY,
    42161: DEFAULT_NATIVE_CURRENCY,
    42220: TokenMetadata(name="CELO", symbol="CELO", decimals=18),
    43114: TokenMetadata(name="Avalanche", symbol="AVAX", decimals=18),
    57073: DEFAULT_NATIVE_CURRENCY,
    81457: DEFAULT_NATIVE_CURRENCY,
    11155111: TokenMetadata(name="Sepolia Ether", symbol="ETH", decimals=18),
}


def native_currency(chain_id: int) -> TokenMetadata:
    return NATIVE_CURRENCIES.get(chain_id, DEFAULT_NATIVE_CURRENCY)
