"""Viability tier for a 0-100 risk score."""

PROMISING = "Venture Looks Promising"
CAUTION = "Proceed with Caution"
HIGH_RISK = "High Risk Detected"


def viability_tier(score: int) -> str:
    if score > 80:
        return PROMISING
    if score > 50:
        return CAUTION
    return HIGH_RISK
