from __future__ import annotations

import re
from typing import Tuple

from app.chat.contracts import QueryClassification
from app.domain.capabilities import (
    DEFAULT_HANDLER,
    ActionCategory,
    requirements_for,
    validate_route,
)

MIN_QUERY_LEN = 8
GREETINGS: frozenset[str] = frozenset(
    {"hi", "hello", "hey", "thanks", "thank you", "ok", "okay"}
)

# Tier phrases. Execution is checked before analysis, so an execution
# phrase always wins when both appear.
EXECUTION_PHRASES: Tuple[str, ...] = (
    "swap", "trade", "buy", "sell",
    "send", "transfer",
    "stake", "unstake", "unstaking", "withdraw",
    "provide liquidity", "remove liquidity",
    "claim", "harvest",
    "execute", "do it", "make the", "perform",
    "price", "market", "feed",
)

WHOLE_WORD_PHRASES: frozenset[str] = frozenset({"price", "market", "feed"})

ANALYSIS_PHRASES: Tuple[str, ...] = (
    "analyze", "check", "show", "what is", "how much",
    "portfolio", "balance", "holdings", "risk", "recommend",
)

# (handler, sub-keywords) in the order candidates are reported.
EXECUTION_HANDLERS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("mantle-transfer", ("send", "transfer")),
    ("mantle-swap", ("swap", "trade", "buy", "sell", "exchange")),
    ("mantle-staking", ("stake", "unstake", "staking", "unstaking", "withdraw")),
    ("mantle-liquidity", ("liquidity", "lp")),
    ("mantle-yield", ("yield", "farm", "claim", "harvest", "reward")),
    ("mantle-price-feed", ("price", "market", "feed")),
)

ANALYSIS_HANDLERS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("mantle-portfolio", ("portfolio", "balance", "holding")),
    ("mantle-risk", ("risk", "safe", "danger")),
    ("mantle-strategy", ("strategy", "recommend", "suggest")),
)

CONVERSATIONAL_HANDLERS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("mantle-protocol", ("protocol", "agni", "fusionx", "lendle")),
    ("mantle-guide", ("how to", "guide", "tutorial")),
)


def normalize_query(query: str | None) -> str:
    return " ".join((query or "").lower().split())


def has_phrase(text: str, phrase: str) -> bool:
    """
    Phrase match anchored at a word start ("stake" hits "staked", not "mistake").

    Phrases in WHOLE_WORD_PHRASES only match as a word or its plural, so
    "feedback" and "marketing" are not price questions.
    """
    if phrase in WHOLE_WORD_PHRASES:
        return re.search(rf"\b{re.escape(phrase)}s?\b", text) is not None
    return re.search(rf"\b{re.escape(phrase)}", text) is not None


def _any_phrase(text: str, phrases: Tuple[str, ...]) -> bool:
    return any(has_phrase(text, phrase) for phrase in phrases)


def is_smalltalk(query: str | None) -> bool:
    text = normalize_query(query)
    return len(text) < MIN_QUERY_LEN or text in GREETINGS


def _handlers(
    text: str,
    rules: Tuple[Tuple[str, Tuple[str, ...]], ...],
    category: ActionCategory,
) -> list[str]:
    handlers = [handler for handler, keywords in rules if _any_phrase(text, keywords)]
    if not handlers:
        handlers = [DEFAULT_HANDLER[category]]
    # conversational tier only ever picks one handler
    if category == ActionCategory.CONVERSATIONAL:
        handlers = handlers[:1]
    return handlers


def _classification(
    category: ActionCategory,
    handlers: list[str],
    reason: str,
) -> QueryClassification:
    validate_route(category, handlers)
    requires_wallet, requires_transaction = requirements_for(handlers)
    return QueryClassification(
        category=category,
        candidate_handlers=handlers,
        requires_wallet=requires_wallet,
        requires_transaction=requires_transaction,
        reason=reason,
    )


def classify(query: str | None, has_wallet: bool) -> QueryClassification:
    if is_smalltalk(query):
        return QueryClassification(
            category=ActionCategory.CONVERSATIONAL,
            candidate_handlers=[],
            requires_wallet=False,
            requires_transaction=False,
            reason="smalltalk",
        )

    text = normalize_query(query)

    if _any_phrase(text, EXECUTION_PHRASES):
        return _classification(
            ActionCategory.EXECUTION,
            _handlers(text, EXECUTION_HANDLERS, ActionCategory.EXECUTION),
            "execution_keyword",
        )

    if has_wallet and _any_phrase(text, ANALYSIS_PHRASES):
        return _classification(
            ActionCategory.ANALYSIS,
            _handlers(text, ANALYSIS_HANDLERS, ActionCategory.ANALYSIS),
            "analysis_keyword",
        )

    return _classification(
        ActionCategory.CONVERSATIONAL,
        _handlers(text, CONVERSATIONAL_HANDLERS, ActionCategory.CONVERSATIONAL),
        "default_conversational",
    )
