from __future__ import annotations

from defi.intent_parser import match_intent, parse
from defi.preview import synthesize
from defi.types import ActionKind, ContractAction
from risk.address_risk import assess
from risk.types import AddressRisk, AddressRiskAssessment
from safety.engine import score
from safety.rules import UNKNOWN_KIND_WARNING
from safety.types import SafetyLevel

ZERO = "0x0000000000000000000000000000000000000000"
STRANGER = "0x1234567890123456789012345678901234567890"


def test_stake_preview_has_reward_accrual_warning():
    action = parse("stake 10 MNT")
    preview = action.preview
    assert preview is not None
    assert preview.safety_score == 90
    assert preview.safety_level == SafetyLevel.HIGH
    assert preview.success_probability == 97
    assert preview.contract_verified is True
    assert preview.address_risk == AddressRisk.SAFE
    assert any("rewards accrue" in w for w in preview.warnings)
    assert any("Projected reward accrual" in w for w in preview.warnings)
    assert "$6.50" in preview.net_change


def test_transfer_to_zero_address_is_dangerous():
    action = parse(f"send 5 MNT to {ZERO}")
    preview = action.preview
    assert preview.address_risk == AddressRisk.DANGEROUS
    assert preview.safety_score == 20
    assert preview.safety_level == SafetyLevel.DANGER
    assert preview.success_probability == 25
    assert preview.warnings[0].startswith("Zero address")


def test_transfer_scores_the_recipient():
    preview = parse(f"send 5 MNT to {STRANGER}").preview
    assert preview.address_risk == AddressRisk.UNKNOWN
    assert preview.safety_score == 70
    assert preview.safety_level == SafetyLevel.MEDIUM
    # the executor itself is allow-listed
    assert preview.contract_verified is True


def test_large_transfer_warns_about_limit():
    preview = parse(f"send 2000 MNT to {STRANGER}").preview
    assert any("single-transfer limit" in w for w in preview.warnings)
    assert preview.safety_score == 40


def test_swap_preview_estimates_output():
    preview = parse("swap 10 MNT for USDC").preview
    assert "~6.5 USDC" in preview.net_change
    assert preview.success_probability == 95
    assert preview.safety_score == 75


def test_price_query_has_no_balance_change():
    preview = parse("show me the ETH price").preview
    assert preview.before_balance == "No balance change"
    assert preview.after_balance == "No balance change"
    assert preview.success_probability == 99
    assert preview.gas_cost.startswith("0 MNT")


def test_stake_substitution_notice_reaches_preview():
    preview = parse("stake 2 ETH").preview
    assert any("only MNT staking is supported" in w for w in preview.warnings)


def test_rates_are_injectable():
    action = match_intent("stake 10 MNT")
    risk = AddressRiskAssessment(address=action.target_address, risk=AddressRisk.SAFE)
    safety = score(action, risk, action.amount)
    preview = synthesize(action, safety, risk, rates=lambda symbol: None)
    assert "$" not in preview.net_change


def test_warnings_are_deduplicated():
    action = match_intent("stake 10 MNT")
    risk = AddressRiskAssessment(
        address=action.target_address,
        risk=AddressRisk.UNKNOWN,
        warnings=["Check twice.", "Check twice."],
    )
    preview = synthesize(action, score(action, risk, action.amount), risk)
    assert preview.warnings.count("Check twice.") == 1


def test_unknown_kind_preview():
    action = ContractAction(kind=ActionKind.UNKNOWN)
    risk = assess(action.risk_subject)
    preview = synthesize(action, score(action, risk, action.amount), risk)
    assert preview.description == "Unrecognized action"
    assert preview.success_probability == 50
    assert preview.gas_cost == "unknown"
    assert preview.contract_verified is False
    assert preview.safety_score == 30
    assert preview.safety_level == SafetyLevel.LOW
    assert UNKNOWN_KIND_WARNING in preview.warnings
