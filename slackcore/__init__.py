"""
Slack Python Key Library

Elliptic-curve key management for the Slack client: secp256k1 key pairs,
ECDSA signature encodings and BIP32 hierarchical deterministic derivation.
"""

from .constants import (
    NETWORKS,
    SLACK,
    BITCOIN,
    BITCOIN_TESTNET,
    Network,
    get_network,
)
from .exceptions import (
    SlackError,
    ValidationError,
    CryptoError,
    SerializationError,
)
from .crypto import HDNode, KeyPair, Signature

__version__ = "1.0.0"

__all__ = [
    # Networks
    "Network",
    "NETWORKS",
    "SLACK",
    "BITCOIN",
    "BITCOIN_TESTNET",
    "get_network",

    # Exceptions
    "SlackError",
    "ValidationError",
    "CryptoError",
    "SerializationError",

    # Crypto
    "KeyPair",
    "Signature",
    "HDNode",
]
