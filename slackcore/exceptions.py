"""Slack key management exceptions hierarchy."""

from typing import Any, Optional

__all__ = [
    "SlackError",
    "ValidationError",
    "CryptoError",
    "SerializationError",
    "InvalidPrivateKeyError",
    "InvalidPointError",
    "UnexpectedPublicKeyError",
    "InvalidNetworkVersionError",
    "UnknownNetworkVersionError",
    "InvalidSeedLengthError",
    "InvalidLengthError",
    "InvalidSignatureParameterError",
    "InvalidHashTypeError",
    "MissingPrivateKeyError",
    "CannotDeriveHardenedFromPublicError",
    "NotMasterNodeError",
    "InvalidMasterNodeError",
    "DerivationError",
]


class SlackError(Exception):
    """Base exception for all Slack key management errors."""

    def __init__(
        self,
        message: str,
        code: Optional[int] = None,
        data: Optional[Any] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.data = data

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message


class ValidationError(SlackError):
    """Raised when validation fails."""
    pass


class CryptoError(SlackError):
    """Raised when cryptographic operation fails."""
    pass


class SerializationError(SlackError):
    """Raised when serialization/deserialization fails."""
    pass


class InvalidPrivateKeyError(CryptoError):
    """Raised when a private scalar is outside (0, n)."""
    pass


class InvalidPointError(CryptoError):
    """Raised when public key material is malformed or off the curve."""
    pass


class UnexpectedPublicKeyError(ValidationError):
    """Raised when a private scalar and a public point are both supplied."""
    pass


class InvalidNetworkVersionError(ValidationError):
    """Raised when a version does not match the supplied network."""

    def __init__(self, version: int, message: Optional[str] = None) -> None:
        if message is None:
            message = f"Invalid network version: {version:#x}"
        super().__init__(message)
        self.version = version


class UnknownNetworkVersionError(ValidationError):
    """Raised when a version matches none of the candidate networks."""

    def __init__(self, version: int, message: Optional[str] = None) -> None:
        if message is None:
            message = f"Unknown network version: {version:#x}"
        super().__init__(message)
        self.version = version


class InvalidSeedLengthError(ValidationError):
    """Raised when an HD seed is not between 16 and 64 bytes."""
    pass


class InvalidLengthError(ValidationError):
    """Raised when a buffer has the wrong byte length."""
    pass


class InvalidSignatureParameterError(ValidationError):
    """Raised when a compact signature header or recovery id is out of range."""
    pass


class InvalidHashTypeError(ValidationError):
    """Raised when a signature hash type is not one of the allowed values."""

    def __init__(self, hash_type: int, message: Optional[str] = None) -> None:
        if message is None:
            message = f"Invalid hashType {hash_type}"
        super().__init__(message)
        self.hash_type = hash_type


class MissingPrivateKeyError(CryptoError):
    """Raised when an operation needs a private key that is not held."""
    pass


class CannotDeriveHardenedFromPublicError(CryptoError):
    """Raised when hardened derivation is attempted on a neutered node."""
    pass


class NotMasterNodeError(ValidationError):
    """Raised when an ``m/`` path is applied to a non-master node."""
    pass


class InvalidMasterNodeError(ValidationError):
    """Raised when a depth-0 node has a parent fingerprint or index."""
    pass


class DerivationError(CryptoError):
    """Raised when child key derivation cannot produce a valid node."""
    pass
