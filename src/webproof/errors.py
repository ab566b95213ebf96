class WebProofError(Exception):
    """Base class for all web proof failures."""


class KeyDerivationError(WebProofError):
    """Raised when no usable session binding is available to derive a signing key."""


class ContentExtractionError(WebProofError):
    """Raised when the injected content source fails or returns unusable content."""


class MalformedProofError(WebProofError):
    """Raised when a proof record cannot be structurally decoded."""


__all__ = [
    "WebProofError",
    "KeyDerivationError",
    "ContentExtractionError",
    "MalformedProofError",
]
