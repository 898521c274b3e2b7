from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from web3 import Web3

from risk.types import AddressRisk
from safety.types import SafetyLevel


def is_hex_address(value: str | None) -> bool:
    """0x-prefixed 20-byte address, checksum casing not enforced."""
    if not isinstance(value, str) or not value.startswith(("0x", "0X")):
        return False
    return Web3.is_address(value.lower())


class ActionKind(str, Enum):
    TRANSFER = "transfer"
    SWAP = "swap"
    STAKE = "stake"
    CLAIM_REWARDS = "claimRewards"
    UNSTAKE = "unstake"
    PRICE_QUERY = "priceQuery"
    UNKNOWN = "unknown"


class TransactionPreview(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    description: str
    before_balance: str
    after_balance: str
    net_change: str
    gas_cost: str
    risks: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    time_estimate: str
    safety_score: int = Field(ge=0, le=100)
    safety_level: SafetyLevel
    success_probability: int = Field(ge=0, le=100)
    contract_verified: bool
    address_risk: AddressRisk


class ContractAction(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: ActionKind
    target_address: Optional[str] = None
    function_name: Optional[str] = None
    parameters: Dict[str, Any] = Field(default_factory=dict)
    estimated_gas_units: int = 0
    notices: List[str] = Field(default_factory=list)
    preview: Optional[TransactionPreview] = None

    @model_validator(mode="after")
    def _target_is_hex_address(self) -> "ContractAction":
        if self.kind != ActionKind.UNKNOWN and not is_hex_address(self.target_address or ""):
            raise ValueError(f"{self.kind.value} action needs a 20-byte hex target_address")
        return self

    @property
    def amount(self) -> Optional[float]:
        raw = self.parameters.get("amount")
        if raw is None:
            return None
        try:
            return float(raw)
        except (TypeError, ValueError):
            return None

    @property
    def risk_subject(self) -> Optional[str]:
        """Address whose risk matters: the recipient for transfers, else the target contract."""
        if self.kind == ActionKind.TRANSFER:
            return self.parameters.get("recipient") or self.target_address
        return self.target_address
