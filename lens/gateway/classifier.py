"""Backend failure classification.

Provides:
- FailureKind enum: AUTHORIZATION (entitlement / billing) vs GENERIC
- classify_failure(): deterministic mapping from status code + message text
- classify_exception(): the same, reading code/status attributes off an SDK exception

An entitlement failure is how the backend reports a key whose project lacks
billing or model access: HTTP 403, or 404 "Requested entity was not found".
The shell reacts by forcing key re-selection; every other failure gets a
generic try-again message.
"""

import re
from enum import StrEnum


class FailureKind(StrEnum):
    AUTHORIZATION = "authorization"
    GENERIC = "generic"


_AUTHORIZATION_STATUS_CODES: frozenset[int] = frozenset({403, 404})

# Searched case-insensitively in the failure message; status codes only as whole numbers.
_AUTHORIZATION_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"requested entity was not found",
        r"permission_denied",
        r"permission denied",
        r"access denied",
        r"\b40[34]\b",
    )
)


def classify_failure(error_message: str, status_code: int | None = None) -> FailureKind:
    """Classify a backend failure.

    Args:
        error_message: Full failure message
        status_code: HTTP status if the SDK exposed one

    Returns:
        FailureKind.AUTHORIZATION for entitlement signals, FailureKind.GENERIC otherwise
    """
    if status_code in _AUTHORIZATION_STATUS_CODES:
        return FailureKind.AUTHORIZATION

    if any(pattern.search(error_message) for pattern in _AUTHORIZATION_PATTERNS):
        return FailureKind.AUTHORIZATION

    return FailureKind.GENERIC


def classify_exception(exc: BaseException) -> FailureKind:
    code = getattr(exc, "code", None)
    if not isinstance(code, int):
        code = getattr(exc, "status_code", None)
    return classify_failure(str(exc), code if isinstance(code, int) else None)
