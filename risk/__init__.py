"""Address risk heuristics for transaction targets."""
from risk.address_risk import address_similarity, assess, is_known_contract
from risk.types import AddressRisk, AddressRiskAssessment

__all__ = [
    "AddressRisk",
    "AddressRiskAssessment",
    "address_similarity",
    "assess",
    "is_known_contract",
]
