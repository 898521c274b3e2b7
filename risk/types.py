"""Data types for address risk analysis."""
from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class AddressRisk(str, Enum):
    SAFE = "safe"
    UNKNOWN = "unknown"
    SUSPICIOUS = "suspicious"
    DANGEROUS = "dangerous"


class AddressRiskAssessment(BaseModel):
    """Outcome of checking one destination address."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    address: str
    risk: AddressRisk
    warnings: List[str] = Field(default_factory=list)
    resembles: Optional[str] = None  # known contract name for suspicious look-alikes
