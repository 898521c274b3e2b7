from __future__ import annotations

import pytest

from defi.tokens import TRANSFER_EXECUTOR, YIELD_FARMER
from defi.types import ActionKind, ContractAction
from risk.types import AddressRisk, AddressRiskAssessment
from safety.engine import level_for_score, score, score_breakdown
from safety.rules import UNKNOWN_KIND_WARNING
from safety.types import SafetyLevel


def _risk(level: AddressRisk) -> AddressRiskAssessment:
    return AddressRiskAssessment(address=YIELD_FARMER, risk=level)


def _action(kind: ActionKind) -> ContractAction:
    if kind == ActionKind.UNKNOWN:
        return ContractAction(kind=kind)
    return ContractAction(kind=kind, target_address=YIELD_FARMER)


def test_safe_stake_scores_high():
    result = score(_action(ActionKind.STAKE), _risk(AddressRisk.SAFE), 10)
    assert result.score == 90
    assert result.level == SafetyLevel.HIGH
    assert result.warnings == []


def test_dangerous_transfer_scores_danger():
    action = ContractAction(kind=ActionKind.TRANSFER, target_address=TRANSFER_EXECUTOR)
    result = score(action, _risk(AddressRisk.DANGEROUS), 5000)
    # 100 - 70 - 30 - 10, clamped
    assert result.score == 0
    assert result.level == SafetyLevel.DANGER


def test_amount_bounds_are_exclusive():
    safe = _risk(AddressRisk.SAFE)
    swap = _action(ActionKind.SWAP)
    assert score(swap, safe, 10).score == 75
    assert score(swap, safe, 10.01).score == 70
    assert score(swap, safe, 100).score == 70
    assert score(swap, safe, 101).score == 60
    assert score(swap, safe, 1001).score == 45


def test_claim_bonus_is_clamped_at_100():
    result = score(_action(ActionKind.CLAIM_REWARDS), _risk(AddressRisk.SAFE))
    assert result.score == 100


def test_unknown_kind_penalized_with_warning():
    result = score(_action(ActionKind.UNKNOWN), _risk(AddressRisk.SAFE))
    assert result.score == 50
    assert result.level == SafetyLevel.LOW
    assert UNKNOWN_KIND_WARNING in result.warnings


def test_breakdown_lists_each_rule():
    ids = [a.id for a in score_breakdown(_action(ActionKind.SWAP), _risk(AddressRisk.UNKNOWN), 50)]
    assert ids == ["address_risk", "amount_size", "action_kind"]


@pytest.mark.parametrize(
    "value, level",
    [(100, SafetyLevel.HIGH), (80, SafetyLevel.HIGH), (79, SafetyLevel.MEDIUM), (60, SafetyLevel.MEDIUM),
     (59, SafetyLevel.LOW), (30, SafetyLevel.LOW), (29, SafetyLevel.DANGER), (0, SafetyLevel.DANGER)],
)
def test_level_thresholds(value, level):
    assert level_for_score(value) == level


def test_score_always_within_bounds():
    order = [SafetyLevel.DANGER, SafetyLevel.LOW, SafetyLevel.MEDIUM, SafetyLevel.HIGH]
    for kind in ActionKind:
        for risk in AddressRisk:
            for amount in (None, 0, 50, 500, 50000):
                result = score(_action(kind), _risk(risk), amount)
                assert 0 <= result.score <= 100
                assert result.level == level_for_score(result.score)
    levels = [level_for_score(v) for v in range(0, 101)]
    assert [order.index(lv) for lv in levels] == sorted(order.index(lv) for lv in levels)
