from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional


@dataclass(frozen=True)
class TokenMeta:
    symbol: str
    address: str
    decimals: int
    is_native: bool = False


TOKENS: Mapping[str, TokenMeta] = MappingProxyType(
    {
        "MNT": TokenMeta("MNT", "0x35578E7e8949B5a59d40704dCF6D6faEC2Fb1D17", 18, is_native=True),
        "WMNT": TokenMeta("WMNT", "0x78c1b0C915c4FAA5FffA6CAbf0219DA63d7f4cb8", 18),
        "USDC": TokenMeta("USDC", "0x09Bc4E0D864854c6aFB6eB9A9cdF58aC190D0dF9", 6),
        "USDT": TokenMeta("USDT", "0x201EBa5CC46D216Ce6DC03F6a759e8E766e956aE", 6),
        "WETH": TokenMeta("WETH", "0xdEAddEaDdeadDEadDEADDEAddEADDEAddead1111", 18),
        "METH": TokenMeta("METH", "0xcDA86A272531e8640cD7F1a92c01839911B90bb0", 18),
    }
)

TOKEN_ALIASES: Mapping[str, str] = MappingProxyType({"ETH": "WETH"})

NATIVE_SYMBOL = "MNT"
STAKING_SYMBOL = "MNT"
PRICE_FEED_SYMBOLS = ("MNT", "ETH", "USDC")

# Copilot contracts (Mantle Sepolia deployment) and well-known routers/feeds.
TRANSFER_EXECUTOR = "0x991a8F634ED1d64C13848F575867f3740806ae2D"
DEX_AGGREGATOR = "0x1b667C35aFbAD54E64520B9BEF8E68Da123c2a74"
YIELD_FARMER = "0xB0d09d7b72fdcF1ce30a8F7A0FA87aBbB9C44d6D"
PRICE_ANALYZER = "0x2b3AbFD1D90694e8eFeB0840e4ff1ce2bCf429d2"

# MNTTransferExecutor.maxSingleTransfer(), in MNT
MAX_SINGLE_TRANSFER_MNT = 1000

KNOWN_CONTRACTS: Mapping[str, str] = MappingProxyType(
    {
        "SimpleActionHub": "0xe9eC4BcB98f9240f6CfE37693A19b310F9A71E95",
        "MNTTransferExecutor": TRANSFER_EXECUTOR,
        "SimpleDEXAggregator": DEX_AGGREGATOR,
        "SimpleYieldFarmer": YIELD_FARMER,
        "SimpleChainlinkAnalyzer": PRICE_ANALYZER,
        "Agni Finance Router": "0x319B69888b0d11cEC22caA5034e25FfFBDc88421",
        "FusionX Router": "0x5989FB161568b9F133eDf5Cf6787f5597762797F",
        "Chainlink MNT/USD Feed": "0x4c8962833Db7206fd45671e9DC806e4FcC0dCB78",
        **{f"{meta.symbol} Token": meta.address for meta in TOKENS.values()},
    }
)


def resolve_token(symbol: str | None) -> Optional[TokenMeta]:
    if not symbol:
        return None
    key = symbol.strip().upper()
    key = TOKEN_ALIASES.get(key, key)
    return TOKENS.get(key)
