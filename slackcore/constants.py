"""Curve, BIP32 and network constants for Slack key management."""

from dataclasses import dataclass
from typing import Tuple

from .exceptions import ValidationError

__all__ = [
    "CURVE_ORDER",
    "FIELD_PRIME",
    "HIGHEST_BIT",
    "MASTER_SECRET",
    "EXTENDED_KEY_LENGTH",
    "MAX_DEPTH",
    "MAX_DERIVATION_ATTEMPTS",
    "MIN_SEED_LENGTH",
    "MAX_SEED_LENGTH",
    "Bip32Versions",
    "Network",
    "SLACK",
    "BITCOIN",
    "BITCOIN_TESTNET",
    "NETWORKS",
    "get_network",
]

# secp256k1
CURVE_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
FIELD_PRIME = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F

# BIP32
HIGHEST_BIT = 0x80000000
MASTER_SECRET = b"Bitcoin seed"
EXTENDED_KEY_LENGTH = 78
MAX_DEPTH = 0xFF
MAX_DERIVATION_ATTEMPTS = 16
MIN_SEED_LENGTH = 16
MAX_SEED_LENGTH = 64


@dataclass(frozen=True)
class Bip32Versions:
    """Version words prefixed to serialized extended keys."""

    public: int
    private: int


@dataclass(frozen=True)
class Network:
    """
    Network parameter set.

    Descriptors are shared and compared by value; key pairs and HD nodes
    only ever hold a reference to one.
    """

    name: str
    pub_key_hash: int
    wif: int
    bip32: Bip32Versions


SLACK = Network(
    name="slack",
    pub_key_hash=0x17,
    wif=0xAA,
    bip32=Bip32Versions(public=0x02BF4968, private=0x02BF4530),
)

BITCOIN = Network(
    name="bitcoin",
    pub_key_hash=0x00,
    wif=0x80,
    bip32=Bip32Versions(public=0x0488B21E, private=0x0488ADE4),
)

BITCOIN_TESTNET = Network(
    name="testnet",
    pub_key_hash=0x6F,
    wif=0xEF,
    bip32=Bip32Versions(public=0x043587CF, private=0x04358394),
)

NETWORKS: Tuple[Network, ...] = (SLACK, BITCOIN, BITCOIN_TESTNET)


def get_network(name: str) -> Network:
    """
    Look up a built-in network by name.

    Args:
        name: Network name (``slack``, ``bitcoin``, ``testnet``)

    Returns:
        Matching network descriptor

    Raises:
        ValidationError: If no built-in network has that name
    """
    for network in NETWORKS:
        if network.name == name:
            return network
    raise ValidationError(f"Unknown network: {name}")
