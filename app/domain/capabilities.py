from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping

from pydantic import BaseModel, ConfigDict


class ActionCategory(str, Enum):
    CONVERSATIONAL = "conversational"
    ANALYSIS = "analysis"
    EXECUTION = "execution"


class UnknownHandlerError(KeyError):
    pass


class ActionCapability(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    requires_wallet: bool
    requires_transaction: bool
    category: ActionCategory
    description: str = ""


def _cap(
    id: str,
    category: ActionCategory,
    *,
    wallet: bool,
    transaction: bool,
    description: str,
) -> ActionCapability:
    return ActionCapability(
        id=id,
        requires_wallet=wallet,
        requires_transaction=transaction,
        category=category,
        description=description,
    )


_C = ActionCategory

ACTION_REGISTRY: Mapping[str, ActionCapability] = MappingProxyType(
    {
        cap.id: cap
        for cap in (
            # conversational: no wallet, education and general info
            _cap("mantle-info", _C.CONVERSATIONAL, wallet=False, transaction=False,
                 description="General Mantle Network information and DeFi education"),
            _cap("mantle-protocol", _C.CONVERSATIONAL, wallet=False, transaction=False,
                 description="Explains Mantle protocols (Agni, FusionX, Lendle, etc.)"),
            _cap("mantle-guide", _C.CONVERSATIONAL, wallet=False, transaction=False,
                 description="How-to guides and tutorials for Mantle DeFi"),
            # analysis: wallet needed to read data, no transactions
            _cap("mantle-portfolio", _C.ANALYSIS, wallet=True, transaction=False,
                 description="Analyzes wallet balances, holdings, and portfolio composition"),
            _cap("mantle-risk", _C.ANALYSIS, wallet=True, transaction=False,
                 description="Assesses portfolio risks and provides risk analysis"),
            _cap("mantle-strategy", _C.ANALYSIS, wallet=True, transaction=False,
                 description="Suggests DeFi strategies based on portfolio analysis"),
            # execution: wallet + transaction approval
            _cap("mantle-transfer", _C.EXECUTION, wallet=True, transaction=True,
                 description="Sends native MNT through the transfer executor"),
            _cap("mantle-swap", _C.EXECUTION, wallet=True, transaction=True,
                 description="Executes token swaps on Mantle DEXs (Agni, FusionX)"),
            _cap("mantle-staking", _C.EXECUTION, wallet=True, transaction=True,
                 description="Handles MNT staking and unstaking operations"),
            _cap("mantle-liquidity", _C.EXECUTION, wallet=True, transaction=True,
                 description="Manages liquidity provision and LP token operations"),
            _cap("mantle-yield", _C.EXECUTION, wallet=True, transaction=True,
                 description="Executes yield farming strategies and reward claiming"),
            # read-only contract view, answered without a wallet
            _cap("mantle-price-feed", _C.EXECUTION, wallet=False, transaction=False,
                 description="Reads on-chain price feeds for supported tokens"),
        )
    }
)

DEFAULT_HANDLER: Mapping[ActionCategory, str] = MappingProxyType(
    {
        ActionCategory.CONVERSATIONAL: "mantle-info",
        ActionCategory.ANALYSIS: "mantle-portfolio",
        ActionCategory.EXECUTION: "mantle-swap",
    }
)


def get_capability(handler_id: str) -> ActionCapability:
    cap = ACTION_REGISTRY.get(handler_id)
    if cap is None:
        raise UnknownHandlerError(handler_id)
    return cap


def handlers_for_category(category: ActionCategory) -> list[str]:
    return [cap.id for cap in ACTION_REGISTRY.values() if cap.category == category]


def requirements_for(handler_ids: Iterable[str]) -> tuple[bool, bool]:
    """
    Wallet / transaction requirements of a candidate set.

    A route needs a wallet (or a signature) as soon as any of its
    candidate handlers does.
    """
    requires_wallet = False
    requires_transaction = False
    for handler_id in handler_ids:
        cap = get_capability(handler_id)
        requires_wallet = requires_wallet or cap.requires_wallet
        requires_transaction = requires_transaction or cap.requires_transaction
    return requires_wallet, requires_transaction


def validate_route(category: ActionCategory, handler_ids: Iterable[str]) -> None:
    for handler_id in handler_ids:
        cap = get_capability(handler_id)
        if cap.category != category:
            raise ValueError(
                f"handler {handler_id} belongs to {cap.category.value}, not {category.value}"
            )
