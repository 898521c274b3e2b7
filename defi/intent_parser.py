from __future__ import annotations

import re
from typing import Callable, Optional, Tuple

from defi.preview import preview_action
from defi.tokens import (
    DEX_AGGREGATOR,
    PRICE_ANALYZER,
    PRICE_FEED_SYMBOLS,
    STAKING_SYMBOL,
    TRANSFER_EXECUTOR,
    YIELD_FARMER,
    resolve_token,
)
from defi.types import ActionKind, ContractAction, is_hex_address


class MalformedAddressError(ValueError):
    def __init__(self, address: str) -> None:
        super().__init__(f"Not a valid 20-byte hex address: {address}")
        self.address = address

_AMOUNT = r"(\d+(?:\.\d+)?)"

_TRANSFER = re.compile(rf"\bsend\s+{_AMOUNT}\s*mnt\s+to\s+(\S+)", re.IGNORECASE)
_SWAP = re.compile(rf"\bswap\s+{_AMOUNT}\s*([a-z0-9]+)\s+(?:for|to|into)\s+([a-z0-9]+)\b", re.IGNORECASE)
_PRICE = re.compile(r"\b(?:price|market|feed)s?\b", re.IGNORECASE)
_STAKE = re.compile(r"\bstake\b", re.IGNORECASE)
_STAKE_DETAILS = re.compile(rf"\bstake\s+(?:{_AMOUNT}\s*)?([a-z]+)?", re.IGNORECASE)
_CLAIM = re.compile(r"\bclaim", re.IGNORECASE)
_REWARD_OR_STAKING = re.compile(r"\b(?:reward|staking)", re.IGNORECASE)
_UNSTAKE = re.compile(r"\bunstak(?:e|ing)\b", re.IGNORECASE)
_WITHDRAW = re.compile(r"\bwithdraw", re.IGNORECASE)
_STAKING = re.compile(r"\bstaking\b", re.IGNORECASE)
_UNSTAKE_AMOUNT = re.compile(rf"\b(?:unstake|unstaking|withdraw)\s+{_AMOUNT}", re.IGNORECASE)

DEFAULT_STAKE_AMOUNT = "1"

# words that may follow "stake" without being a token hint
_STAKE_FILLER = frozenset({"my", "some", "all", "on", "with", "via", "in", "into", "to", "for", "now", "please", "tokens"})

GAS_UNITS = {
    ActionKind.TRANSFER: 65_000,
    ActionKind.SWAP: 180_000,
    ActionKind.STAKE: 120_000,
    ActionKind.CLAIM_REWARDS: 90_000,
    ActionKind.UNSTAKE: 110_000,
    ActionKind.PRICE_QUERY: 0,
}

Rule = Callable[[str, Optional[str]], Optional[ContractAction]]

def normalize(query: str | None) -> str:
    return " ".join((query or "").split())

def _transfer(text: str, user_address: Optional[str]) -> Optional[ContractAction]:
    match = _TRANSFER.search(text)
    if not match:
        return None
    amount, recipient = match.group(1), match.group(2).rstrip(".,;!?")
    if not is_hex_address(recipient):
        raise MalformedAddressError(recipient)
    return ContractAction(
        kind=ActionKind.TRANSFER,
        target_address=TRANSFER_EXECUTOR,
        function_name="executeTransfer",
        parameters={"recipient": recipient, "amount": amount, "from": user_address},
        estimated_gas_units=GAS_UNITS[ActionKind.TRANSFER],
    )

def _swap(text: str, user_address: Optional[str]) -> Optional[ContractAction]:
    match = _SWAP.search(text)
    if not match:
        return None
    amount, symbol_in, symbol_out = match.groups()
    token_in = resolve_token(symbol_in)
    token_out = resolve_token(symbol_out)
    if token_in is None or token_out is None:
        return None
    return ContractAction(
        kind=ActionKind.SWAP,
        target_address=DEX_AGGREGATOR,
        function_name="executeSwap",
        parameters={
            "token_in": token_in.symbol,
            "token_out": token_out.symbol,
            "token_in_address": token_in.address,
            "token_out_address": token_out.address,
            "amount": amount,
            "from": user_address,
        },
        estimated_gas_units=GAS_UNITS[ActionKind.SWAP],
    )

def _price_query(text: str, user_address: Optional[str]) -> Optional[ContractAction]:
    if not _PRICE.search(text):
        return None
    return ContractAction(
        kind=ActionKind.PRICE_QUERY,
        target_address=PRICE_ANALYZER,
        function_name="getLatestPrice",
        parameters={"tokens": list(PRICE_FEED_SYMBOLS)},
        estimated_gas_units=GAS_UNITS[ActionKind.PRICE_QUERY],
    )

def _stake_hint(amount: Optional[str], word: Optional[str]) -> Optional[str]:
    if not word or word.lower() in _STAKE_FILLER:
        return None
    if amount is not None or resolve_token(word) is not None:
        return word.upper()
    return None

def _stake(text: str, user_address: Optional[str]) -> Optional[ContractAction]:
    if not _STAKE.search(text):
        return None
    details = _STAKE_DETAILS.search(text)
    amount = details.group(1) if details else None
    hint = _stake_hint(amount, details.group(2) if details else None)

    notices = []
    if hint and hint != STAKING_SYMBOL:
        notices.append(
            f"You asked to stake {hint}, but only {STAKING_SYMBOL} staking is supported. "
            f"This proposal stakes {STAKING_SYMBOL} instead."
        )
    if amount is None:
        amount = DEFAULT_STAKE_AMOUNT
        notices.append(f"No amount given; using a default of {DEFAULT_STAKE_AMOUNT} {STAKING_SYMBOL}.")

    return ContractAction(
        kind=ActionKind.STAKE,
        target_address=YIELD_FARMER,
        function_name="stake",
        parameters={
            "amount": amount,
            "token": STAKING_SYMBOL,
            "requested_token": hint or STAKING_SYMBOL,
            "from": user_address,
        },
        estimated_gas_units=GAS_UNITS[ActionKind.STAKE],
        notices=notices,
    )

def _claim_rewards(text: str, user_address: Optional[str]) -> Optional[ContractAction]:
    if not (_CLAIM.search(text) and _REWARD_OR_STAKING.search(text)):
        return None
    return ContractAction(
        kind=ActionKind.CLAIM_REWARDS,
        target_address=YIELD_FARMER,
        function_name="claimRewards",
        parameters={"from": user_address},
        estimated_gas_units=GAS_UNITS[ActionKind.CLAIM_REWARDS],
    )

def _unstake(text: str, user_address: Optional[str]) -> Optional[ContractAction]:
    if not (_UNSTAKE.search(text) or (_WITHDRAW.search(text) and _STAKING.search(text))):
        return None
    amount_match = _UNSTAKE_AMOUNT.search(text)
    parameters = {"token": STAKING_SYMBOL, "from": user_address}
    if amount_match:
        parameters["amount"] = amount_match.group(1)
    return ContractAction(
        kind=ActionKind.UNSTAKE,
        target_address=YIELD_FARMER,
        function_name="unstake",
        parameters=parameters,
        estimated_gas_units=GAS_UNITS[ActionKind.UNSTAKE],
    )

RULES: Tuple[Tuple[str, Rule], ...] = (
    ("transfer", _transfer),
    ("swap", _swap),
    ("price_query", _price_query),
    ("stake", _stake),
    ("claim_rewards", _claim_rewards),
    ("unstake", _unstake),
)

def match_intent(query: str | None, user_address: str | None = None) -> Optional[ContractAction]:
    """
    First rule that matches wins; later rules are not tried.

    Returns None when nothing matches. Raises MalformedAddressError when a
    transfer names a recipient that is not a hex address.
    """
    text = normalize(query)
    if not text:
        return None
    for _name, rule in RULES:
        action = rule(text, user_address)
        if action is not None:
            return action
    return None

def parse(query: str | None, user_address: str | None = None) -> Optional[ContractAction]:
    action = match_intent(query, user_address)
    if action is None:
        return None
    return preview_action(action)
