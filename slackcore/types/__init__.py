"""Type definitions for Slack key management."""

# Common types
from ..types.common import (
    HexStr,
    Address,
    WIF,
    ExtendedKey,
    PrivateKeyBytes,
    PublicKeyBytes,
    ChainCode,
    RandomSource,
    NetworkSpec,
    SigHashType,
)

__all__ = [
    # Common
    "HexStr",
    "Address",
    "WIF",
    "ExtendedKey",
    "PrivateKeyBytes",
    "PublicKeyBytes",
    "ChainCode",
    "RandomSource",
    "NetworkSpec",
    "SigHashType",
]
