"""Hierarchical Deterministic key derivation (BIP32) for Slack."""

import logging
import struct
from typing import Optional

from coincurve import PublicKey as SecpPublicKey

from ..constants import (
    CURVE_ORDER,
    EXTENDED_KEY_LENGTH,
    HIGHEST_BIT,
    MASTER_SECRET,
    MAX_DEPTH,
    MAX_DERIVATION_ATTEMPTS,
    Network,
)
from ..exceptions import (
    CannotDeriveHardenedFromPublicError,
    DerivationError,
    InvalidLengthError,
    InvalidMasterNodeError,
    InvalidPointError,
    InvalidPrivateKeyError,
    MissingPrivateKeyError,
    NotMasterNodeError,
    ValidationError,
)
from ..types.common import Address, ChainCode, ExtendedKey, NetworkSpec, PublicKeyBytes
from ..utils.encoding import (
    bytes_to_int,
    decode_base58_check,
    encode_base58_check,
    hash160,
    hex_to_bytes,
    hmac_sha512,
)
from ..utils.validation import (
    UINT32_MAX,
    parse_path,
    resolve_network,
    validate_seed,
    validate_uint32,
)
from .keys import KeyPair
from .signature import Signature

__all__ = ["HDNode"]

logger = logging.getLogger(__name__)

# version(4) || depth(1) || parent fingerprint(4) || index(4)
_HEADER = struct.Struct(">IBII")


class HDNode:
    """
    HD wallet node (BIP32).

    Wraps a compressed key pair with a chain code and its position in the
    tree. Derivation always returns a new node; the parent is untouched.
    """

    HIGHEST_BIT = HIGHEST_BIT
    LENGTH = EXTENDED_KEY_LENGTH
    MASTER_SECRET = MASTER_SECRET

    def __init__(
        self,
        key_pair: KeyPair,
        chain_code: bytes,
        depth: int = 0,
        index: int = 0,
        parent_fingerprint: int = 0
    ) -> None:
        if not isinstance(key_pair, KeyPair):
            raise ValidationError("Expected a KeyPair")
        if not key_pair.compressed:
            raise ValidationError("BIP32 only allows compressed keyPairs")
        if len(chain_code) != 32:
            raise InvalidLengthError(f"Chain code must be 32 bytes, got {len(chain_code)}")
        if not 0 <= depth <= MAX_DEPTH:
            raise ValidationError(f"Depth must be 0-{MAX_DEPTH}, got {depth}")

        self.key_pair = key_pair
        self.chain_code = ChainCode(bytes(chain_code))
        self.depth = depth
        self.index = validate_uint32(index)
        self.parent_fingerprint = validate_uint32(parent_fingerprint, "parent fingerprint")

    @classmethod
    def from_seed(cls, seed: bytes, network: Network) -> "HDNode":
        """
        Create master node from seed.

        Args:
            seed: 16 to 64 bytes of entropy
            network: Target network

        Returns:
            Master HDNode

        Raises:
            InvalidSeedLengthError: If seed length is out of range
            InvalidPrivateKeyError: If the derived master key is invalid
        """
        validate_seed(seed)

        I = hmac_sha512(MASTER_SECRET, seed)
        IL, IR = I[:32], I[32:]

        # IL of 0 or >= n is rejected by the KeyPair constructor
        key_pair = KeyPair(bytes_to_int(IL), network=network)

        logger.debug(f"Created master node on {network.name}")
        return cls(key_pair, IR)

    @classmethod
    def from_seed_hex(cls, seed_hex: str, network: Network) -> "HDNode":
        """Create master node from a hex encoded seed."""
        return cls.from_seed(hex_to_bytes(seed_hex), network)

    @classmethod
    def from_extended_key(cls, extended_key: str, network: NetworkSpec) -> "HDNode":
        """
        Parse a Base58Check extended key (xprv/xpub style).

        Args:
            extended_key: Serialized extended key
            network: Expected network, or ordered list of candidate networks

        Returns:
            Parsed HDNode (neutered when the key is public)

        Raises:
            SerializationError: If the Base58Check envelope is invalid
            InvalidLengthError: If the payload is not 78 bytes
            InvalidNetworkVersionError: If version does not match the network
            UnknownNetworkVersionError: If version matches no candidate
            InvalidMasterNodeError: If a depth-0 node has parent data
            InvalidPrivateKeyError: If private key data is malformed
            InvalidPointError: If public key data is not on the curve
        """
        buffer = decode_base58_check(extended_key)
        if len(buffer) != EXTENDED_KEY_LENGTH:
            raise InvalidLengthError(f"Invalid buffer length: {len(buffer)}")

        version, depth, parent_fingerprint, index = _HEADER.unpack_from(buffer, 0)
        matched = resolve_network(
            version,
            network,
            lambda n, v: v in (n.bip32.private, n.bip32.public),
        )

        if depth == 0:
            if parent_fingerprint != 0:
                raise InvalidMasterNodeError("Invalid parent fingerprint")
            if index != 0:
                raise InvalidMasterNodeError("Invalid index")

        chain_code = buffer[13:45]
        key_data = buffer[45:78]

        if version == matched.bip32.private:
            if key_data[0] != 0x00:
                raise InvalidPrivateKeyError("Invalid private key")
            key_pair = KeyPair(bytes_to_int(key_data[1:]), network=matched)
        else:
            # Parsing checks the X coordinate lies on the curve
            try:
                point = SecpPublicKey(key_data)
            except ValueError as e:
                raise InvalidPointError(f"Invalid public key: {e}") from e
            key_pair = KeyPair(None, point, network=matched)

        logger.debug(f"Parsed extended key on {matched.name} at depth {depth}")
        return cls(key_pair, chain_code, depth, index, parent_fingerprint)

    def to_extended_key(self) -> ExtendedKey:
        """
        Serialize as a Base58Check extended key.

        The private version and key are used unless the node is neutered.
        """
        network = self.key_pair.network
        neutered = self.is_neutered()
        version = network.bip32.public if neutered else network.bip32.private

        header = _HEADER.pack(version, self.depth, self.parent_fingerprint, self.index)
        if neutered:
            key_data = self.get_public_key()
        else:
            key_data = b"\x00" + self.key_pair.secret

        return ExtendedKey(encode_base58_check(header + self.chain_code + key_data))

    def get_identifier(self) -> bytes:
        """HASH160 of the public key."""
        return hash160(self.get_public_key())

    def get_fingerprint(self) -> bytes:
        """First 4 bytes of the identifier."""
        return self.get_identifier()[:4]

    def get_address(self) -> Address:
        return self.key_pair.get_address()

    def get_network(self) -> Network:
        return self.key_pair.get_network()

    def get_public_key(self) -> PublicKeyBytes:
        return self.key_pair.get_public_key()

    def is_neutered(self) -> bool:
        """True when the node holds no private key."""
        return not self.key_pair.has_private_key

    def neutered(self) -> "HDNode":
        """Return a public-only copy of this node."""
        key_pair = KeyPair(None, self.key_pair.point, network=self.key_pair.network)
        return HDNode(
            key_pair,
            self.chain_code,
            self.depth,
            self.index,
            self.parent_fingerprint,
        )

    def sign(self, message_hash: bytes) -> Signature:
        return self.key_pair.sign(message_hash)

    def verify(self, message_hash: bytes, signature: Signature) -> bool:
        return self.key_pair.verify(message_hash, signature)

    def derive(self, index: int) -> "HDNode":
        """
        Derive child node (CKDpriv or CKDpub).

        Indexes at or above 2^31 are hardened and need the private key.
        When an index yields an invalid key, the next index is used, so
        the returned node may carry a higher index than requested.

        Args:
            index: Child index (unsigned 32-bit)

        Returns:
            Child HDNode

        Raises:
            CannotDeriveHardenedFromPublicError: If hardened on a neutered node
            DerivationError: If the tree is too deep or no valid child is found
        """
        validate_uint32(index)
        if self.depth >= MAX_DEPTH:
            raise DerivationError(f"Cannot derive below depth {MAX_DEPTH}")

        for _ in range(MAX_DERIVATION_ATTEMPTS):
            child = self._derive_child(index)
            if child is not None:
                return child

            logger.warning(f"Invalid child key at index {index}, trying next index")
            index += 1
            if index > UINT32_MAX:
                raise DerivationError("Child index overflow")

        raise DerivationError(
            f"No valid child key after {MAX_DERIVATION_ATTEMPTS} attempts"
        )

    def _derive_child(self, index: int) -> Optional["HDNode"]:
        """Single CKD step; None when this index yields an invalid key."""
        key_pair = self.key_pair

        if index >= HIGHEST_BIT:
            if self.is_neutered():
                raise CannotDeriveHardenedFromPublicError(
                    "Could not derive hardened child key"
                )
            # data = 0x00 || ser256(kpar) || ser32(i)
            data = b"\x00" + key_pair.secret + struct.pack(">I", index)
        else:
            # data = serP(Kpar) || ser32(i)
            data = self.get_public_key() + struct.pack(">I", index)

        I = hmac_sha512(self.chain_code, data)
        IL, IR = I[:32], I[32:]

        pIL = bytes_to_int(IL)
        if pIL >= CURVE_ORDER:
            return None

        if not self.is_neutered():
            # ki = parse256(IL) + kpar (mod n)
            ki = (pIL + key_pair.d) % CURVE_ORDER
            if ki == 0:
                return None
            derived = KeyPair(ki, network=key_pair.network)
        else:
            # Ki = point(parse256(IL)) + Kpar
            try:
                Ki = key_pair.point.add(IL)
            except ValueError:
                # point at infinity
                return None
            derived = KeyPair(None, Ki, network=key_pair.network)

        return HDNode(
            derived,
            IR,
            self.depth + 1,
            index,
            bytes_to_int(self.get_fingerprint()),
        )

    def derive_hardened(self, index: int) -> "HDNode":
        """
        Derive hardened child ``index + 2^31``.

        Raises:
            ValidationError: If index is not below 2^31
        """
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < HIGHEST_BIT:
            raise ValidationError(f"Hardened index must be 0 to 2^31-1, got {index}")

        return self.derive(index + HIGHEST_BIT)

    def derive_path(self, path: str) -> "HDNode":
        """
        Derive using BIP32 path like m/44'/0'/0'/0/0.

        Raises:
            ValidationError: If the path is malformed
            NotMasterNodeError: If the path starts at ``m`` but this node is not a master
        """
        from_master, steps = parse_path(path)
        if from_master and self.parent_fingerprint:
            raise NotMasterNodeError("Not a master node")

        node = self
        for index, hardened in steps:
            node = node.derive_hardened(index) if hardened else node.derive(index)

        return node

    def __eq__(self, other: object) -> bool:
        """Check equality."""
        if not isinstance(other, HDNode):
            return NotImplemented
        return (
            self.key_pair == other.key_pair
            and self.chain_code == other.chain_code
            and self.depth == other.depth
            and self.index == other.index
            and self.parent_fingerprint == other.parent_fingerprint
        )

    def __hash__(self) -> int:
        return hash((self.key_pair, self.chain_code, self.depth, self.index))

    def __repr__(self) -> str:
        """String representation."""
        kind = "public" if self.is_neutered() else "private"
        return (
            f"HDNode({self.get_address()}, {kind}, depth={self.depth}, "
            f"index={self.index:#x})"
        )
