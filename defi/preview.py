from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from types import MappingProxyType
from typing import Callable, List, Mapping, Optional

from defi.rates import ILLUSTRATIVE_STAKING_APY, RateLookup, illustrative_usd_rate
from defi.tokens import MAX_SINGLE_TRANSFER_MNT, NATIVE_SYMBOL, PRICE_FEED_SYMBOLS
from defi.types import ActionKind, ContractAction, TransactionPreview
from risk.address_risk import assess, is_known_contract
from risk.types import AddressRisk, AddressRiskAssessment
from safety.engine import score
from safety.types import SafetyAssessment

DANGEROUS_SUCCESS_PROBABILITY = 25
READ_ONLY_SUCCESS_PROBABILITY = 99

SUCCESS_PROBABILITY: Mapping[ActionKind, int] = MappingProxyType(
    {
        ActionKind.TRANSFER: 98,
        ActionKind.SWAP: 95,
        ActionKind.STAKE: 97,
        ActionKind.CLAIM_REWARDS: 96,
        ActionKind.UNSTAKE: 96,
        ActionKind.PRICE_QUERY: READ_ONLY_SUCCESS_PROBABILITY,
        ActionKind.UNKNOWN: 50,
    }
)

GAS_COST: Mapping[ActionKind, str] = MappingProxyType(
    {
        ActionKind.TRANSFER: "~0.001 MNT",
        ActionKind.SWAP: "~0.003 MNT",
        ActionKind.STAKE: "~0.002 MNT",
        ActionKind.CLAIM_REWARDS: "~0.0015 MNT",
        ActionKind.UNSTAKE: "~0.002 MNT",
        ActionKind.PRICE_QUERY: "0 MNT (read-only call)",
        ActionKind.UNKNOWN: "unknown",
    }
)

TIME_ESTIMATE: Mapping[ActionKind, str] = MappingProxyType(
    {
        ActionKind.TRANSFER: "~2-5 seconds",
        ActionKind.SWAP: "~5-10 seconds",
        ActionKind.STAKE: "~5 seconds",
        ActionKind.CLAIM_REWARDS: "~5 seconds",
        ActionKind.UNSTAKE: "~5 seconds (unbonding may delay access)",
        ActionKind.PRICE_QUERY: "instant (read-only)",
        ActionKind.UNKNOWN: "unknown",
    }
)


@dataclass(frozen=True)
class _Narrative:
    description: str
    before_balance: str
    after_balance: str
    net_change: str
    risks: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def _short_address(value: str | None) -> str:
    if not value or not isinstance(value, str):
        return "unknown"
    if len(value) <= 12:
        return value
    return f"{value[:6]}...{value[-4:]}"


def _decimal(value) -> Optional[Decimal]:
    if value is None:
        return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None


def _fmt(amount: Decimal) -> str:
    text = f"{amount:.6f}".rstrip("0").rstrip(".")
    return text or "0"


def _usd(amount: Optional[Decimal], symbol: str, rates: RateLookup) -> str:
    rate = rates(symbol)
    if amount is None or rate is None:
        return ""
    value = float(amount) * rate
    sign = "-" if value < 0 else ""
    return f" (≈ {sign}${abs(value):,.2f})"


def _transfer(action: ContractAction, rates: RateLookup) -> _Narrative:
    params = action.parameters
    amount = _decimal(params.get("amount"))
    shown = params.get("amount") or "?"
    recipient = params.get("recipient")
    warnings = ["Double-check the recipient address before confirming."]
    if amount is not None and amount > MAX_SINGLE_TRANSFER_MNT:
        warnings.append(
            f"Amount exceeds the transfer executor's single-transfer limit of "
            f"{MAX_SINGLE_TRANSFER_MNT} MNT; the transaction is expected to revert."
        )
    return _Narrative(
        description=f"Send {shown} MNT to {_short_address(recipient)} via the MNT transfer executor",
        before_balance="Current MNT balance",
        after_balance=f"Current MNT balance - {shown} MNT (plus gas)",
        net_change=f"-{shown} MNT" + _usd(-amount if amount is not None else None, NATIVE_SYMBOL, rates),
        risks=[
            "Irreversible transfer: funds cannot be recalled once confirmed",
            "Funds sent to a wrong address are lost",
        ],
        warnings=warnings,
    )


def _swap(action: ContractAction, rates: RateLookup) -> _Narrative:
    params = action.parameters
    token_in = params.get("token_in") or "?"
    token_out = params.get("token_out") or "?"
    shown = params.get("amount") or "?"
    amount = _decimal(params.get("amount"))

    rate_in = rates(token_in)
    rate_out = rates(token_out)
    estimated_out: Optional[Decimal] = None
    if amount is not None and rate_in is not None and rate_out:
        estimated_out = amount * Decimal(str(rate_in)) / Decimal(str(rate_out))
    out_text = f"~{_fmt(estimated_out)}" if estimated_out is not None else "market amount of"

    return _Narrative(
        description=f"Swap {shown} {token_in} for {token_out} through the DEX aggregator (Agni Finance / FusionX)",
        before_balance=f"Current {token_in} and {token_out} balances",
        after_balance=f"{token_in}: -{shown} | {token_out}: +{out_text}",
        net_change=f"-{shown} {token_in} / +{out_text} {token_out}"
        + _usd(amount, token_in, rates),
        risks=[
            "Price slippage may reduce the received amount",
            "Token approval lets the aggregator spend the input token",
            "Smart contract risk in the routing DEX",
        ],
        warnings=["Quoted output is an estimate; the final amount depends on pool liquidity."],
    )


def _stake(action: ContractAction, rates: RateLookup) -> _Narrative:
    params = action.parameters
    token = params.get("token") or NATIVE_SYMBOL
    shown = params.get("amount") or "?"
    amount = _decimal(params.get("amount"))
    warnings = ["Staking rewards accrue over time at a variable rate and are not guaranteed."]
    if amount is not None:
        yearly = amount * Decimal(str(ILLUSTRATIVE_STAKING_APY))
        warnings.append(
            f"Projected reward accrual: ~{_fmt(yearly)} {token} per year "
            f"at an illustrative {ILLUSTRATIVE_STAKING_APY * 100:.1f}% APY."
        )
    return _Narrative(
        description=f"Stake {shown} {token} in the Mantle yield farmer",
        before_balance=f"Liquid {token}: current | Staked {token}: current",
        after_balance=f"Liquid {token}: -{shown} | Staked {token}: +{shown}",
        net_change=f"-{shown} {token} liquid, +{shown} {token} staked" + _usd(amount, token, rates),
        risks=[
            "Staked funds may be subject to an unbonding period",
            "Smart contract risk in the staking contract",
        ],
        warnings=warnings,
    )


def _claim(action: ContractAction, rates: RateLookup) -> _Narrative:
    return _Narrative(
        description="Claim accumulated staking rewards from the Mantle yield farmer",
        before_balance="Pending rewards: accrued amount",
        after_balance="Pending rewards: 0 | Wallet: + claimed rewards",
        net_change="+ accrued rewards (amount determined on-chain)",
        risks=["Claiming costs gas even when rewards are small"],
        warnings=["The reward amount is determined on-chain at execution time."],
    )


def _unstake(action: ContractAction, rates: RateLookup) -> _Narrative:
    params = action.parameters
    token = params.get("token") or NATIVE_SYMBOL
    shown = params.get("amount")
    amount = _decimal(shown)
    if shown:
        description = f"Unstake {shown} {token} from the Mantle yield farmer"
        after = f"Staked {token}: -{shown} | Liquid {token}: +{shown}"
        net = f"+{shown} {token} liquid" + _usd(amount, token, rates)
    else:
        description = f"Unstake your staked {token} from the Mantle yield farmer"
        after = f"Staked {token}: 0 | Liquid {token}: + staked amount"
        net = f"+ staked {token} returned to wallet"
    return _Narrative(
        description=description,
        before_balance=f"Staked {token}: current",
        after_balance=after,
        net_change=net,
        risks=[
            "Unstaking may forfeit pending rewards",
            "An unbonding period may delay access to funds",
        ],
        warnings=["Rewards stop accruing on unstaked funds."],
    )


def _price_query(action: ContractAction, rates: RateLookup) -> _Narrative:
    tokens = action.parameters.get("tokens") or list(PRICE_FEED_SYMBOLS)
    return _Narrative(
        description=f"Read the latest {', '.join(tokens)} prices from the on-chain price feed",
        before_balance="No balance change",
        after_balance="No balance change",
        net_change="0 (read-only)",
        risks=["Oracle prices can lag fast-moving markets"],
    )


def _unknown(action: ContractAction, rates: RateLookup) -> _Narrative:
    return _Narrative(
        description="Unrecognized action",
        before_balance="Unknown",
        after_balance="Unknown",
        net_change="Unknown",
        risks=["The requested action could not be recognized"],
    )


_TEMPLATES: Mapping[ActionKind, Callable[[ContractAction, RateLookup], _Narrative]] = MappingProxyType(
    {
        ActionKind.TRANSFER: _transfer,
        ActionKind.SWAP: _swap,
        ActionKind.STAKE: _stake,
        ActionKind.CLAIM_REWARDS: _claim,
        ActionKind.UNSTAKE: _unstake,
        ActionKind.PRICE_QUERY: _price_query,
        ActionKind.UNKNOWN: _unknown,
    }
)


def success_probability(kind: ActionKind, address_risk: AddressRiskAssessment) -> int:
    if kind == ActionKind.PRICE_QUERY:
        return READ_ONLY_SUCCESS_PROBABILITY
    if address_risk.risk == AddressRisk.DANGEROUS:
        return DANGEROUS_SUCCESS_PROBABILITY
    return SUCCESS_PROBABILITY.get(kind, SUCCESS_PROBABILITY[ActionKind.UNKNOWN])


def synthesize(
    action: ContractAction,
    safety: SafetyAssessment,
    address_risk: AddressRiskAssessment,
    *,
    rates: RateLookup = illustrative_usd_rate,
) -> TransactionPreview:
    template = _TEMPLATES.get(action.kind, _unknown)
    narrative = template(action, rates)

    warnings = list(
        dict.fromkeys(
            [
                *address_risk.warnings,
                *safety.warnings,
                *action.notices,
                *narrative.warnings,
            ]
        )
    )

    return TransactionPreview(
        description=narrative.description,
        before_balance=narrative.before_balance,
        after_balance=narrative.after_balance,
        net_change=narrative.net_change,
        gas_cost=GAS_COST.get(action.kind, GAS_COST[ActionKind.UNKNOWN]),
        risks=list(narrative.risks),
        warnings=warnings,
        time_estimate=TIME_ESTIMATE.get(action.kind, TIME_ESTIMATE[ActionKind.UNKNOWN]),
        safety_score=safety.score,
        safety_level=safety.level,
        success_probability=success_probability(action.kind, address_risk),
        contract_verified=is_known_contract(action.target_address),
        address_risk=address_risk.risk,
    )


def preview_action(
    action: ContractAction,
    *,
    rates: RateLookup = illustrative_usd_rate,
) -> ContractAction:
    """Run risk analysis, scoring and synthesis; return the action with its preview attached."""
    address_risk = assess(action.risk_subject)
    safety = score(action, address_risk, action.amount)
    preview = synthesize(action, safety, address_risk, rates=rates)
    return action.model_copy(update={"preview": preview})
