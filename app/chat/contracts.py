from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from app.domain.capabilities import ActionCategory
from defi.types import ContractAction, TransactionPreview


class ResultKind(str, Enum):
    ANSWER = "ANSWER"
    WALLET_REQUIRED = "WALLET_REQUIRED"
    TRANSACTION_REQUIRED = "TRANSACTION_REQUIRED"
    CLARIFY = "CLARIFY"
    VALIDATION = "VALIDATION"


class ChatMessage(BaseModel):
    model_config = ConfigDict(extra="forbid")

    role: Literal["system", "user", "assistant"]
    content: str


class CopilotRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    message: str
    wallet_address: str | None = None
    chain_id: int | None = None
    history: list[ChatMessage] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)


class QueryClassification(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    category: ActionCategory
    candidate_handlers: list[str] = Field(default_factory=list)
    requires_wallet: bool = False
    requires_transaction: bool = False
    reason: str | None = None


class CopilotResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: ResultKind
    assistant_message: str
    classification: QueryClassification | None = None
    action: ContractAction | None = None
    preview: TransactionPreview | None = None
    requires_wallet: bool = False
    requires_transaction: bool = False
    suggestions: list[str] = Field(default_factory=list)
    data: dict[str, Any] = Field(default_factory=dict)
