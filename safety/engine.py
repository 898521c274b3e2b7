# safety/engine.py
from __future__ import annotations

from typing import List, Optional, Tuple

from defi.types import ContractAction
from risk.types import AddressRiskAssessment
from safety.rules import (
    UNKNOWN_KIND_WARNING,
    rule_action_kind,
    rule_address_risk,
    rule_amount_size,
)
from safety.types import SafetyAssessment, SafetyLevel, ScoreAdjustment

BASE_SCORE = 100


def level_for_score(score: int) -> SafetyLevel:
    if score >= 80:
        return SafetyLevel.HIGH
    if score >= 60:
        return SafetyLevel.MEDIUM
    if score >= 30:
        return SafetyLevel.LOW
    return SafetyLevel.DANGER


def score_breakdown(
    action: ContractAction,
    address_risk: AddressRiskAssessment,
    amount: Optional[float] = None,
) -> List[ScoreAdjustment]:
    return [
        rule_address_risk(address_risk),
        rule_amount_size(amount),
        rule_action_kind(action.kind),
    ]


def _sum_and_clamp(adjustments: List[ScoreAdjustment]) -> Tuple[int, List[str]]:
    total = BASE_SCORE + sum(a.delta for a in adjustments)
    warnings = [UNKNOWN_KIND_WARNING for a in adjustments if a.id == "unknown_kind"]
    return max(0, min(100, total)), warnings


def score(
    action: ContractAction,
    address_risk: AddressRiskAssessment,
    amount: Optional[float] = None,
) -> SafetyAssessment:
    value, warnings = _sum_and_clamp(score_breakdown(action, address_risk, amount))
    return SafetyAssessment(score=value, level=level_for_score(value), warnings=warnings)
