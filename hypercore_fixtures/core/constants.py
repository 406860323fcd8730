"""Process-wide reference constants: endpoints, token table, seed amounts."""

from __future__ import annotations

from types import MappingProxyType

from hypercore_fixtures.core.types import TestAccount, TokenInfo

# Public HyperEVM JSON-RPC endpoint used for fork mode
DEFAULT_RPC_URL = "https://rpc.hyperliquid.xyz/evm"

# Read precompiles queried when a fork falls back to real reads
SPOT_BALANCE_PRECOMPILE = "0x0000000000000000000000000000000000000801"
WITHDRAWABLE_PRECOMPILE = "0x0000000000000000000000000000000000000803"

USDC = TokenInfo(
    symbol="USDC",
    address="0x2000000000000000000000000000000000000000",
    index=0,
    wei_decimals=8,
)
HYPE = TokenInfo(
    symbol="HYPE",
    address="0x2222222222222222222222222222222222222222",
    index=150,
    wei_decimals=8,
)

TOKENS: MappingProxyType[str, TokenInfo] = MappingProxyType({t.symbol: t for t in (USDC, HYPE)})
_TOKENS_BY_INDEX: MappingProxyType[int, TokenInfo] = MappingProxyType(
    {t.index: t for t in TOKENS.values()}
)

# Seed amounts, in spot wei (8 decimals) and perp USD units (6 decimals)
SPOT_SEED_AMOUNT = 1000 * 10**8
MARGIN_SEED_AMOUNT = 1000 * 10**6

TEST_USER_ADDRESS = "0x00000000000000000000000000000000000a11ce"


def token(symbol: str) -> TokenInfo:
    """Look up a token by symbol (case-insensitive). Raises KeyError if unknown."""
    return TOKENS[symbol.upper()]


def token_by_index(index: int) -> TokenInfo:
    """Look up a token by its spot index. Raises KeyError if unknown."""
    return _TOKENS_BY_INDEX[index]


def is_known_token(index: int) -> bool:
    return index in _TOKENS_BY_INDEX


TEST_ACCOUNT = TestAccount(
    address=TEST_USER_ADDRESS,
    spot_token=USDC.index,
    spot_amount=SPOT_SEED_AMOUNT,
    margin_amount=MARGIN_SEED_AMOUNT,
)
