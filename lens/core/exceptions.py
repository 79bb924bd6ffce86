class LensError(Exception):
    """Base exception for SoloPreneur Lens."""

    pass


class GenerationError(LensError):
    """Raised when a generative call or its decoding fails."""

    pass


class AuthorizationFailure(GenerationError):
    """Raised when the key lacks entitlement to the model (billing / access).

    The shell must force key re-selection and block generation until resolved.
    """

    pass


class BackendFailure(GenerationError):
    """Raised for any other backend failure (network, rate limit, server error)."""

    pass


class MalformedResponse(GenerationError):
    """Raised when a structured reply is not JSON or cannot be decoded into its record."""

    def __init__(self, feature: str, reason: str):
        self.feature = feature
        self.reason = reason
        super().__init__(f"Malformed {feature} response: {reason}")


class EmptyPayload(GenerationError):
    """Raised when an image/audio reply carries no inline bytes."""

    def __init__(self, capability: str):
        self.capability = capability
        super().__init__(f"Failed to generate {capability}: response contained no inline data")
