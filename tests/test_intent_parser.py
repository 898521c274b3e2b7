from __future__ import annotations

import pytest

from defi.intent_parser import DEFAULT_STAKE_AMOUNT, MalformedAddressError, match_intent, parse
from defi.tokens import DEX_AGGREGATOR, PRICE_ANALYZER, TRANSFER_EXECUTOR, YIELD_FARMER
from defi.types import ActionKind, ContractAction

RECIPIENT = "0x1234567890123456789012345678901234567890"
USER = "0x1111111111111111111111111111111111111111"


def test_transfer_parses_recipient_and_amount():
    action = match_intent(f"send 5 MNT to {RECIPIENT}", USER)
    assert action is not None
    assert action.kind == ActionKind.TRANSFER
    assert action.target_address == TRANSFER_EXECUTOR
    assert action.function_name == "executeTransfer"
    assert action.parameters["recipient"] == RECIPIENT
    assert action.parameters["amount"] == "5"
    assert action.parameters["from"] == USER


def test_transfer_with_malformed_recipient_raises():
    with pytest.raises(MalformedAddressError) as exc_info:
        match_intent("send 5 MNT to 0x1234")
    assert exc_info.value.address == "0x1234"
    assert isinstance(exc_info.value, ValueError)


def test_swap_resolves_both_tokens():
    action = match_intent("Swap 10.5 mnt for usdc")
    assert action is not None
    assert action.kind == ActionKind.SWAP
    assert action.target_address == DEX_AGGREGATOR
    assert action.parameters["token_in"] == "MNT"
    assert action.parameters["token_out"] == "USDC"
    assert action.parameters["amount"] == "10.5"


def test_swap_eth_alias_resolves_to_weth():
    action = match_intent("swap 1 eth to usdt")
    assert action is not None
    assert action.parameters["token_in"] == "WETH"


def test_unsupported_token_pair_is_no_match():
    assert match_intent("swap 10 MNT for DOGE") is None


def test_price_query_is_read_only():
    action = match_intent("what's the MNT price today?")
    assert action is not None
    assert action.kind == ActionKind.PRICE_QUERY
    assert action.target_address == PRICE_ANALYZER
    assert action.parameters["tokens"] == ["MNT", "ETH", "USDC"]
    assert action.estimated_gas_units == 0


def test_stake_with_amount():
    action = match_intent("stake 10 MNT")
    assert action is not None
    assert action.kind == ActionKind.STAKE
    assert action.target_address == YIELD_FARMER
    assert action.parameters["amount"] == "10"
    assert action.parameters["token"] == "MNT"
    assert action.notices == []


def test_stake_without_amount_uses_default_with_notice():
    action = match_intent("I want to stake my tokens")
    assert action is not None
    assert action.parameters["amount"] == DEFAULT_STAKE_AMOUNT
    assert any("default" in notice for notice in action.notices)


def test_stake_other_token_is_substituted_with_notice():
    action = match_intent("stake 2 ETH")
    assert action is not None
    assert action.parameters["token"] == "MNT"
    assert action.parameters["requested_token"] == "ETH"
    assert any("only MNT staking is supported" in notice for notice in action.notices)


def test_claim_rewards():
    action = match_intent("claim my staking rewards")
    assert action is not None
    assert action.kind == ActionKind.CLAIM_REWARDS
    assert action.function_name == "claimRewards"


def test_unstake_with_and_without_amount():
    with_amount = match_intent("unstake 3 MNT")
    assert with_amount is not None
    assert with_amount.kind == ActionKind.UNSTAKE
    assert with_amount.parameters["amount"] == "3"

    withdraw = match_intent("withdraw from staking")
    assert withdraw is not None
    assert withdraw.kind == ActionKind.UNSTAKE
    assert "amount" not in withdraw.parameters


def test_no_match_returns_none():
    assert match_intent("tell me a joke about validators") is None
    assert match_intent("") is None
    assert parse(None) is None


def test_parse_is_idempotent_and_attaches_preview():
    first = parse("stake 10 MNT", USER)
    second = parse("stake 10 MNT", USER)
    assert first == second
    assert first is not None and first.preview is not None


def test_action_requires_hex_target_unless_unknown():
    with pytest.raises(ValueError):
        ContractAction(kind=ActionKind.SWAP, target_address="not-an-address")
    unknown = ContractAction(kind=ActionKind.UNKNOWN)
    assert unknown.target_address is None


def test_recipient_without_0x_prefix_is_malformed():
    with pytest.raises(MalformedAddressError):
        match_intent("send 5 MNT to " + "0" * 40)
    with pytest.raises(MalformedAddressError):
        match_intent("send 5 MNT to 1234567890123456789012345678901234567890")


@pytest.mark.parametrize(
    "query",
    [
        "can I give you some feedback on this app?",
        "tell me about the Mantle marketing team",
        "is there an NFT marketplace on Mantle",
        "this view is priceless",
    ],
)
def test_price_words_must_be_whole_words(query):
    assert match_intent(query) is None


def test_plural_price_words_still_match():
    action = match_intent("show me the latest prices")
    assert action is not None
    assert action.kind == ActionKind.PRICE_QUERY


def test_unresolved_swap_falls_through_to_price_query():
    action = match_intent("swap 10 MNT for FAKE at market price")
    assert action is not None
    assert action.kind == ActionKind.PRICE_QUERY


def test_price_rule_is_tried_before_stake():
    action = match_intent("stake 10 MNT at market price")
    assert action is not None
    assert action.kind == ActionKind.PRICE_QUERY


def test_stake_rule_is_tried_before_claim():
    action = match_intent("claim rewards from my stake")
    assert action is not None
    assert action.kind == ActionKind.STAKE
    assert action.parameters["amount"] == DEFAULT_STAKE_AMOUNT


def test_unstaking_wording_matches_unstake():
    action = match_intent("unstaking 4 MNT today")
    assert action is not None
    assert action.kind == ActionKind.UNSTAKE
    assert action.parameters["amount"] == "4"
