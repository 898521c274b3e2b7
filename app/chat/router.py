from __future__ import annotations

import logging
from typing import Any

from web3 import Web3

from app.chat.classifier import classify
from app.chat.contracts import (
    CopilotRequest,
    CopilotResponse,
    QueryClassification,
    ResultKind,
)
from app.chat.llm import complete_chat
from app.chat.prompts import build_conversation_messages
from app.config import get_settings
from app.domain.capabilities import ActionCategory, get_capability
from chain.chains import UnsupportedChainError, chain_name, list_supported_chains
from defi.intent_parser import MalformedAddressError, parse
from defi.types import ActionKind, ContractAction
from llm.client import CompletionError

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = (
    "I'm having trouble reaching my language service right now. "
    "You can still ask me to swap, send, or stake tokens on Mantle, "
    "or try your question again in a moment."
)

_HELP_SUGGESTIONS = [
    "Send 5 MNT to 0x...",
    "Swap 10 MNT for USDC",
    "Stake 10 MNT",
    "Claim my staking rewards",
    "What is the price of MNT?",
]

_WALLET_SUGGESTIONS = {
    ActionCategory.ANALYSIS: [
        "Connect your wallet to analyze your portfolio",
        "What is Mantle Network?",
        "How do I use Agni Finance?",
    ],
    ActionCategory.EXECUTION: [
        "Connect your wallet to prepare this transaction",
        "What is the price of MNT?",
        "How does staking on Mantle work?",
    ],
}

_READ_ONLY_KINDS = {ActionKind.PRICE_QUERY}


def _short_address(value: str | None) -> str:
    if not value:
        return "unknown"
    if len(value) <= 12:
        return value
    return f"{value[:6]}...{value[-4:]}"


def _has_valid_wallet(wallet_address: str | None) -> bool:
    if not wallet_address or not wallet_address.startswith(("0x", "0X")):
        return False
    return Web3.is_address(wallet_address)


def _handler_hints(classification: QueryClassification) -> list[str]:
    return [get_capability(handler).description for handler in classification.candidate_handlers]


def _answer_with_completion(
    req: CopilotRequest,
    classification: QueryClassification,
    *,
    wallet_address: str | None,
) -> CopilotResponse:
    context: dict[str, Any] = {}
    if wallet_address:
        context = {"wallet_address": wallet_address, "chain_id": req.chain_id}
    messages = build_conversation_messages(req.message, req.history, context)

    try:
        text = complete_chat(messages)
        data: dict[str, Any] = {}
    except CompletionError as exc:
        logger.warning("completion failed kind=%s error=%s", exc.kind, exc)
        text = FALLBACK_MESSAGE
        data = {"fallback": True, "error_kind": exc.kind}
    except Exception as exc:
        logger.exception("completion failed unexpectedly: %s", exc)
        text = FALLBACK_MESSAGE
        data = {"fallback": True, "error_kind": "unexpected"}

    return CopilotResponse(
        kind=ResultKind.ANSWER,
        assistant_message=text,
        classification=classification,
        requires_wallet=classification.requires_wallet,
        requires_transaction=classification.requires_transaction,
        data=data,
    )


def _wallet_required(classification: QueryClassification) -> CopilotResponse:
    hints = _handler_hints(classification)
    if classification.category == ActionCategory.ANALYSIS:
        intro = "I need access to your wallet to analyze your holdings."
    else:
        intro = "To prepare this transaction I need your wallet connected."
    message = intro + " Please connect your wallet and ask again."
    return CopilotResponse(
        kind=ResultKind.WALLET_REQUIRED,
        assistant_message=message,
        classification=classification,
        requires_wallet=True,
        requires_transaction=classification.requires_transaction,
        suggestions=list(_WALLET_SUGGESTIONS.get(classification.category, [])),
        data={"capabilities": hints},
    )


def _unsupported_chain(classification: QueryClassification, chain_id: int) -> CopilotResponse:
    supported = ", ".join(f"{chain_name(cid)} ({cid})" for cid in list_supported_chains())
    return CopilotResponse(
        kind=ResultKind.CLARIFY,
        assistant_message=(
            f"Chain {chain_id} is not supported. Please switch your wallet to one of: {supported}."
        ),
        classification=classification,
        requires_wallet=classification.requires_wallet,
        requires_transaction=classification.requires_transaction,
        data={"supported_chains": list_supported_chains()},
    )


def _proposal_message(action: ContractAction) -> str:
    preview = action.preview
    if preview is None:
        return "Here is the proposed action."
    if action.kind in _READ_ONLY_KINDS:
        return f"{preview.description}. This is a read-only call; nothing needs to be signed."
    return (
        f"{preview.description}. Safety score {preview.safety_score}/100 "
        f"({preview.safety_level.value}). Review the preview and sign in your wallet to proceed."
    )


def _propose(
    req: CopilotRequest,
    classification: QueryClassification,
    *,
    wallet_address: str | None,
) -> CopilotResponse:
    try:
        action = parse(req.message, wallet_address)
    except MalformedAddressError as exc:
        logger.info("malformed address in request address=%s", _short_address(exc.address))
        return CopilotResponse(
            kind=ResultKind.VALIDATION,
            assistant_message=(
                f"{exc.address} is not a valid address. "
                "Please provide a 0x-prefixed address with 40 hex characters."
            ),
            classification=classification,
            requires_wallet=classification.requires_wallet,
            requires_transaction=classification.requires_transaction,
            data={"invalid_address": exc.address},
        )

    if action is None:
        return CopilotResponse(
            kind=ResultKind.CLARIFY,
            assistant_message=(
                "I couldn't turn that into a transaction. Try one of the supported "
                "forms below, with an amount and token."
            ),
            classification=classification,
            requires_wallet=classification.requires_wallet,
            requires_transaction=classification.requires_transaction,
            suggestions=list(_HELP_SUGGESTIONS),
        )

    read_only = action.kind in _READ_ONLY_KINDS
    logger.info(
        "proposal built kind=%s target=%s score=%s",
        action.kind.value,
        _short_address(action.target_address),
        action.preview.safety_score if action.preview else None,
    )
    return CopilotResponse(
        kind=ResultKind.ANSWER if read_only else ResultKind.TRANSACTION_REQUIRED,
        assistant_message=_proposal_message(action),
        classification=classification,
        action=action,
        preview=action.preview,
        requires_wallet=classification.requires_wallet,
        requires_transaction=False if read_only else True,
    )


def route_message(req: CopilotRequest) -> CopilotResponse:
    settings = get_settings()
    has_wallet = _has_valid_wallet(req.wallet_address)
    wallet_address = req.wallet_address if has_wallet else None

    classification = classify(req.message, has_wallet)
    logger.info(
        "query classified category=%s handlers=%s reason=%s",
        classification.category.value,
        classification.candidate_handlers,
        classification.reason,
    )

    if classification.reason == "smalltalk":
        return _answer_with_completion(req, classification, wallet_address=wallet_address)

    if classification.requires_wallet and not has_wallet:
        return _wallet_required(classification)

    if classification.category == ActionCategory.EXECUTION:
        chain_id = req.chain_id if req.chain_id is not None else settings.default_chain_id
        try:
            chain_name(chain_id)
        except UnsupportedChainError:
            return _unsupported_chain(classification, chain_id)
        return _propose(req, classification, wallet_address=wallet_address)

    return _answer_with_completion(req, classification, wallet_address=wallet_address)
