"""Common type definitions for Slack key management."""

from enum import IntEnum
from typing import Callable, NewType, Sequence, Union

from ..constants import Network

__all__ = [
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

# Basic types
HexStr = NewType("HexStr", str)
"""Hexadecimal string representation."""

# Encoded strings
Address = NewType("Address", str)
"""Base58Check pay-to-pubkey-hash address."""

WIF = NewType("WIF", str)
"""Wallet Import Format private key."""

ExtendedKey = NewType("ExtendedKey", str)
"""Base58Check BIP32 extended key."""

# Crypto types
PrivateKeyBytes = NewType("PrivateKeyBytes", bytes)
"""32-byte private key."""

PublicKeyBytes = NewType("PublicKeyBytes", bytes)
"""33 or 65 byte public key."""

ChainCode = NewType("ChainCode", bytes)
"""32-byte BIP32 chain code."""

# Type aliases
RandomSource = Callable[[int], bytes]
"""Callable returning the requested number of random bytes."""

NetworkSpec = Union[Network, Sequence[Network]]
"""A single network, or an ordered list of candidate networks."""


class SigHashType(IntEnum):
    """Signature hash types."""
    ALL = 0x01
    NONE = 0x02
    SINGLE = 0x03
    ANYONECANPAY = 0x80
    ALL_ANYONECANPAY = 0x81
    NONE_ANYONECANPAY = 0x82
    SINGLE_ANYONECANPAY = 0x83
