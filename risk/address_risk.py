from __future__ import annotations

import re
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from defi.tokens import KNOWN_CONTRACTS
from risk.types import AddressRisk, AddressRiskAssessment

ZERO_ADDRESS = "0x" + "0" * 40
SIMILARITY_THRESHOLD = 0.8
_BARE_HEX = re.compile(r"[0-9a-f]{40}")


def normalize_address(address: str | None) -> str:
    """Lowercase, with the 0x prefix restored on bare 40-hex input."""
    lowered = (address or "").strip().lower()
    if _BARE_HEX.fullmatch(lowered):
        return "0x" + lowered
    return lowered


class AddressRiskAnalyzer:
    """
    Conservative look-up heuristic for destination addresses.

    Not a verification service: an address outside the allow-list is only
    ever "unknown", never vouched for.
    """

    def __init__(self, known_contracts: Mapping[str, str] | None = None) -> None:
        contracts = KNOWN_CONTRACTS if known_contracts is None else known_contracts
        self._known: Mapping[str, str] = MappingProxyType(
            {address.lower(): name for name, address in contracts.items()}
        )

    def is_known_contract(self, address: str | None) -> bool:
        return normalize_address(address) in self._known

    def assess(self, address: str | None) -> AddressRiskAssessment:
        value = (address or "").strip()
        lowered = normalize_address(value)

        if lowered == ZERO_ADDRESS:
            return AddressRiskAssessment(
                address=value,
                risk=AddressRisk.DANGEROUS,
                warnings=["Zero address: funds will be lost permanently."],
            )

        if lowered in self._known:
            return AddressRiskAssessment(address=value, risk=AddressRisk.SAFE)

        match = _closest_known(lowered, self._known)
        if match is not None:
            name, _similarity = match
            return AddressRiskAssessment(
                address=value,
                risk=AddressRisk.SUSPICIOUS,
                warnings=[
                    f"Address closely resembles the known {name} contract but does not match it. "
                    "This may be an address-poisoning attempt."
                ],
                resembles=name,
            )

        return AddressRiskAssessment(
            address=value,
            risk=AddressRisk.UNKNOWN,
            warnings=["Address is not a known contract; exercise caution."],
        )


def address_similarity(a: str, b: str) -> float:
    """Share of identical characters at identical positions, over the longer length."""
    a = (a or "").lower()
    b = (b or "").lower()
    longest = max(len(a), len(b))
    if longest == 0:
        return 0.0
    same = sum(1 for x, y in zip(a, b) if x == y)
    return same / longest


def _closest_known(address: str, known: Mapping[str, str]) -> Optional[Tuple[str, float]]:
    best: Optional[Tuple[str, float]] = None
    for known_address, name in known.items():
        if known_address == address:
            continue
        similarity = address_similarity(address, known_address)
        if similarity > SIMILARITY_THRESHOLD and (best is None or similarity > best[1]):
            best = (name, similarity)
    return best


_DEFAULT_ANALYZER = AddressRiskAnalyzer()


def assess(address: str | None) -> AddressRiskAssessment:
    return _DEFAULT_ANALYZER.assess(address)


def is_known_contract(address: str | None) -> bool:
    return _DEFAULT_ANALYZER.is_known_contract(address)
