"""Validation utilities for Slack key management."""

import re
from typing import Callable, List, Tuple

from ..constants import (
    CURVE_ORDER,
    HIGHEST_BIT,
    MAX_SEED_LENGTH,
    MIN_SEED_LENGTH,
    Network,
)
from ..exceptions import (
    InvalidHashTypeError,
    InvalidLengthError,
    InvalidNetworkVersionError,
    InvalidPrivateKeyError,
    InvalidSeedLengthError,
    UnknownNetworkVersionError,
    ValidationError,
)
from ..types.common import NetworkSpec, SigHashType

__all__ = [
    "is_valid_private_key",
    "validate_private_key",
    "validate_message_hash",
    "validate_seed",
    "is_valid_hash_type",
    "validate_hash_type",
    "validate_uint32",
    "resolve_network",
    "parse_path",
]

# Regex patterns
PATH_PATTERN = re.compile(r"m(/[0-9]+'?)*|[0-9]+'?(/[0-9]+'?)*")

UINT32_MAX = 0xFFFFFFFF


def is_valid_private_key(d: int) -> bool:
    """Check that a scalar lies in (0, n)."""
    return 0 < d < CURVE_ORDER


def validate_private_key(d: int) -> int:
    """
    Validate private scalar range.

    Args:
        d: Candidate private scalar

    Returns:
        The scalar unchanged

    Raises:
        InvalidPrivateKeyError: If the scalar is not in (0, n)
    """
    if d <= 0:
        raise InvalidPrivateKeyError("Private key must be greater than 0")
    if d >= CURVE_ORDER:
        raise InvalidPrivateKeyError("Private key must be less than the curve order")
    return d


def validate_message_hash(message_hash: bytes) -> bytes:
    """Require a 32-byte digest."""
    if len(message_hash) != 32:
        raise InvalidLengthError(
            f"Message hash must be 32 bytes, got {len(message_hash)}"
        )
    return message_hash


def validate_seed(seed: bytes) -> bytes:
    """
    Validate BIP32 seed length.

    Raises:
        InvalidSeedLengthError: If seed is not 16 to 64 bytes long
    """
    if len(seed) < MIN_SEED_LENGTH:
        raise InvalidSeedLengthError("Seed should be at least 128 bits")
    if len(seed) > MAX_SEED_LENGTH:
        raise InvalidSeedLengthError("Seed should be at most 512 bits")
    return seed


def is_valid_hash_type(hash_type: int) -> bool:
    """Check hash type against BIP62 (0x01-0x03, optionally with 0x80)."""
    hash_type_mod = hash_type & ~SigHashType.ANYONECANPAY
    return 0 < hash_type_mod < 4


def validate_hash_type(hash_type: int) -> int:
    """
    Validate signature hash type.

    Raises:
        InvalidHashTypeError: If the type is not one of the six allowed values
    """
    if not 0 <= hash_type <= 0xFF or not is_valid_hash_type(hash_type):
        raise InvalidHashTypeError(hash_type)
    return hash_type


def validate_uint32(value: int, name: str = "index") -> int:
    """Require an unsigned 32-bit integer."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer")
    if not 0 <= value <= UINT32_MAX:
        raise ValidationError(f"{name} must be a 32-bit unsigned integer: {value}")
    return value


def resolve_network(
    version: int,
    networks: NetworkSpec,
    matches: Callable[[Network, int], bool]
) -> Network:
    """
    Select the network a decoded version belongs to.

    With a list of candidates, the first matching network wins. With a
    single network, the version must match it exactly.

    Args:
        version: Version byte or word read from the encoding
        networks: A network, or an ordered list of candidate networks
        matches: Predicate telling whether a network accepts the version

    Returns:
        Matching network

    Raises:
        UnknownNetworkVersionError: If no candidate in the list matches
        InvalidNetworkVersionError: If the single network does not match
    """
    if isinstance(networks, Network):
        if not matches(networks, version):
            raise InvalidNetworkVersionError(version)
        return networks

    for network in networks:
        if matches(network, version):
            return network

    raise UnknownNetworkVersionError(version)


def parse_path(path: str) -> Tuple[bool, List[Tuple[int, bool]]]:
    """
    Parse a BIP32 derivation path.

    Grammar: ``"m"? ("/" index "'"?)*``. A path without the leading ``m``
    is relative and starts with an index.

    Args:
        path: Path such as ``m/44'/0'/0'/0/1``

    Returns:
        Tuple of (starts_at_master, [(index, hardened), ...])

    Raises:
        ValidationError: If the path is malformed or an index is out of range
    """
    if not isinstance(path, str) or not PATH_PATTERN.fullmatch(path):
        raise ValidationError(f"Invalid BIP32 path: {path!r}")

    segments = path.split("/")
    from_master = segments[0] == "m"
    if from_master:
        segments = segments[1:]

    steps = []
    for segment in segments:
        hardened = segment.endswith("'")
        index = int(segment[:-1] if hardened else segment)
        limit = HIGHEST_BIT if hardened else UINT32_MAX + 1
        if index >= limit:
            raise ValidationError(f"Path index out of range: {segment}")
        steps.append((index, hardened))

    return from_master, steps
