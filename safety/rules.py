# safety/rules.py
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

from defi.types import ActionKind
from risk.types import AddressRisk, AddressRiskAssessment
from safety.types import ScoreAdjustment

ADDRESS_RISK_PENALTIES: Mapping[AddressRisk, int] = MappingProxyType(
    {
        AddressRisk.DANGEROUS: -70,
        AddressRisk.SUSPICIOUS: -40,
        AddressRisk.UNKNOWN: -20,
        AddressRisk.SAFE: 0,
    }
)

# (exclusive lower bound, penalty), largest first
AMOUNT_PENALTIES = ((1000, -30), (100, -15), (10, -5))

KIND_ADJUSTMENTS: Mapping[ActionKind, int] = MappingProxyType(
    {
        ActionKind.PRICE_QUERY: 0,
        ActionKind.TRANSFER: -10,
        ActionKind.SWAP: -25,
        ActionKind.STAKE: -10,
        ActionKind.CLAIM_REWARDS: 5,
        ActionKind.UNSTAKE: -5,
    }
)

UNKNOWN_KIND_PENALTY = -50
UNKNOWN_KIND_WARNING = "Unrecognized action kind; treat this proposal with extra care."


def rule_address_risk(address_risk: AddressRiskAssessment) -> ScoreAdjustment:
    return ScoreAdjustment(
        id="address_risk",
        title="Destination address risk",
        delta=ADDRESS_RISK_PENALTIES.get(address_risk.risk, ADDRESS_RISK_PENALTIES[AddressRisk.UNKNOWN]),
        reason=f"address is {address_risk.risk.value}",
    )


def rule_amount_size(amount: Optional[float]) -> ScoreAdjustment:
    if amount is None:
        return ScoreAdjustment(
            id="amount_size",
            title="Amount magnitude",
            delta=0,
            reason="no amount",
        )
    for bound, penalty in AMOUNT_PENALTIES:
        if amount > bound:
            return ScoreAdjustment(
                id="amount_size",
                title="Amount magnitude",
                delta=penalty,
                reason=f"amount above {bound}",
            )
    return ScoreAdjustment(id="amount_size", title="Amount magnitude", delta=0, reason="small amount")


def rule_action_kind(kind: ActionKind) -> ScoreAdjustment:
    delta = KIND_ADJUSTMENTS.get(kind)
    if delta is None:
        return ScoreAdjustment(
            id="unknown_kind",
            title="Action kind",
            delta=UNKNOWN_KIND_PENALTY,
            reason=UNKNOWN_KIND_WARNING,
        )
    return ScoreAdjustment(
        id="action_kind",
        title="Action kind",
        delta=delta,
        reason=f"{kind.value} base risk",
    )
