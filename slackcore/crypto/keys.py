"""Key pair management for Slack."""

import logging
import secrets
from functools import cached_property
from typing import Optional, Tuple, Union

from coincurve import PrivateKey as SecpPrivateKey, PublicKey as SecpPublicKey
from coincurve.ecdsa import cdata_to_der, deserialize_compact

from ..constants import Network
from ..exceptions import (
    CryptoError,
    InvalidLengthError,
    InvalidPointError,
    MissingPrivateKeyError,
    UnexpectedPublicKeyError,
    ValidationError,
)
from ..types.common import (
    WIF,
    Address,
    NetworkSpec,
    PrivateKeyBytes,
    PublicKeyBytes,
    RandomSource,
)
from ..utils.encoding import (
    bytes_to_int,
    decode_wif,
    encode_base58_check,
    encode_wif,
    hash160,
    int_to_bytes,
    sha256,
)
from ..utils.validation import (
    is_valid_private_key,
    resolve_network,
    validate_message_hash,
    validate_private_key,
)
from .signature import Signature

__all__ = ["KeyPair"]

logger = logging.getLogger(__name__)


class KeyPair:
    """
    secp256k1 key pair bound to a network.

    Holds a private scalar, a public point, or a scalar whose point is
    computed on first use and then kept. Supply one of the two, not both.
    """

    def __init__(
        self,
        d: Optional[int] = None,
        point: Optional[SecpPublicKey] = None,
        *,
        network: Network,
        compressed: bool = True
    ) -> None:
        """
        Initialize key pair.

        Args:
            d: Private scalar, 0 < d < n
            point: Public point (only when ``d`` is not given)
            network: Network parameters used for addresses and WIF
            compressed: Use compressed public key encoding

        Raises:
            InvalidPrivateKeyError: If d is out of range
            UnexpectedPublicKeyError: If both d and point are supplied
            InvalidPointError: If neither is supplied
            ValidationError: If network is not a Network
        """
        if not isinstance(network, Network):
            raise ValidationError(f"Expected a Network, got {type(network).__name__}")

        if d is not None:
            validate_private_key(d)
            if point is not None:
                raise UnexpectedPublicKeyError("Unexpected publicKey parameter")
        elif not isinstance(point, SecpPublicKey):
            raise InvalidPointError("Expected a private key or a public point")

        self._d = d
        self._point = point
        self.compressed = bool(compressed)
        self.network = network

    @classmethod
    def from_seed(
        cls,
        seed: Union[str, bytes],
        network: Network,
        compressed: bool = True
    ) -> "KeyPair":
        """
        Create key pair from a passphrase.

        The private scalar is SHA256 of the UTF-8 encoded passphrase.

        Args:
            seed: Passphrase text (or raw bytes)
            network: Target network
            compressed: Use compressed public key encoding

        Returns:
            New KeyPair instance

        Raises:
            InvalidPrivateKeyError: If the hash is not a valid scalar
        """
        if isinstance(seed, str):
            seed = seed.encode("utf-8")

        d = bytes_to_int(sha256(seed))
        return cls(d, network=network, compressed=compressed)

    @classmethod
    def from_wif(cls, wif: str, network: NetworkSpec) -> "KeyPair":
        """
        Import key pair from WIF.

        Args:
            wif: Wallet Import Format string
            network: Expected network, or ordered list of candidate networks

        Returns:
            New KeyPair carrying the WIF compression flag and matched network

        Raises:
            SerializationError: If the Base58Check envelope is invalid
            InvalidNetworkVersionError: If version does not match the network
            UnknownNetworkVersionError: If version matches no candidate
            InvalidPrivateKeyError: If the key is out of range
        """
        version, secret, compressed = decode_wif(wif)
        matched = resolve_network(version, network, lambda n, v: n.wif == v)

        return cls(bytes_to_int(secret), network=matched, compressed=compressed)

    @classmethod
    def from_public_key(cls, data: bytes, network: Network) -> "KeyPair":
        """
        Create public-only key pair from an encoded point.

        Compression follows the encoding: 33 bytes is compressed, 65 is not.

        Raises:
            InvalidPointError: If data is not a valid curve point
        """
        try:
            point = SecpPublicKey(bytes(data))
        except (ValueError, TypeError) as e:
            raise InvalidPointError(f"Invalid public key: {e}") from e

        return cls(None, point, network=network, compressed=len(data) == 33)

    @classmethod
    def make_random(
        cls,
        network: Network,
        rng: Optional[RandomSource] = None,
        compressed: bool = True
    ) -> "KeyPair":
        """
        Create new random key pair.

        Draws 32 bytes until they form a valid scalar.

        Args:
            network: Target network
            rng: Random byte source, defaults to ``secrets.token_bytes``
            compressed: Use compressed public key encoding

        Returns:
            New KeyPair instance
        """
        rng = rng or secrets.token_bytes

        while True:
            buffer = rng(32)
            if len(buffer) != 32:
                raise InvalidLengthError(
                    f"Random source returned {len(buffer)} bytes, expected 32"
                )
            d = bytes_to_int(buffer)
            if is_valid_private_key(d):
                return cls(d, network=network, compressed=compressed)

    @property
    def d(self) -> Optional[int]:
        """Private scalar, or None for public-only key pairs."""
        return self._d

    @property
    def has_private_key(self) -> bool:
        """Whether the private scalar is held."""
        return self._d is not None

    @property
    def secret(self) -> Optional[PrivateKeyBytes]:
        """Private scalar as 32 bytes, or None."""
        if self._d is None:
            return None
        return PrivateKeyBytes(int_to_bytes(self._d, 32))

    @cached_property
    def point(self) -> SecpPublicKey:
        """Public point, computed from the private scalar on first access."""
        if self._point is not None:
            return self._point
        return SecpPublicKey.from_valid_secret(self.secret)

    def get_public_key(self) -> PublicKeyBytes:
        """Encoded public key, honouring the compression flag."""
        return PublicKeyBytes(self.point.format(compressed=self.compressed))

    def get_network(self) -> Network:
        """Network this key pair belongs to."""
        return self.network

    def get_address(self) -> Address:
        """
        Get pay-to-pubkey-hash address.

        Returns:
            Base58Check of network version byte || HASH160(public key)
        """
        payload = bytes([self.network.pub_key_hash]) + hash160(self.get_public_key())
        return Address(encode_base58_check(payload))

    def to_wif(self) -> WIF:
        """
        Export private key in Wallet Import Format.

        Raises:
            MissingPrivateKeyError: If no private key is held
        """
        if self._d is None:
            raise MissingPrivateKeyError("Missing private key")

        return WIF(encode_wif(self.network.wif, self.secret, self.compressed))

    def sign(self, message_hash: bytes) -> Signature:
        """
        Sign 32-byte message hash with a deterministic (RFC 6979) nonce.

        Raises:
            MissingPrivateKeyError: If no private key is held
            InvalidLengthError: If the hash is not 32 bytes
        """
        signature, _ = self.sign_recoverable(message_hash)
        return signature

    def sign_recoverable(self, message_hash: bytes) -> Tuple[Signature, int]:
        """
        Sign 32-byte message hash, keeping the public key recovery id.

        Returns:
            Tuple of (signature, recovery_id)

        Raises:
            MissingPrivateKeyError: If no private key is held
            InvalidLengthError: If the hash is not 32 bytes
            CryptoError: If signing fails
        """
        if self._d is None:
            raise MissingPrivateKeyError("Missing private key")
        validate_message_hash(message_hash)

        try:
            native = SecpPrivateKey(self.secret).sign_recoverable(
                message_hash, hasher=None
            )
        except ValueError as e:
            raise CryptoError(f"Signing failed: {e}") from e

        parsed = Signature.from_recoverable(native[:64], native[64])
        return parsed.signature, parsed.recovery_id

    def verify(self, message_hash: bytes, signature: Signature) -> bool:
        """
        Verify signature over a 32-byte message hash.

        Returns:
            True if signature is valid, False otherwise
        """
        if len(message_hash) != 32:
            return False

        try:
            der = cdata_to_der(deserialize_compact(signature.to_recoverable()))
            return self.point.verify(der, message_hash, hasher=None)
        except ValueError:
            logger.debug("Signature could not be parsed for verification")
            return False

    def __eq__(self, other: object) -> bool:
        """Check equality."""
        if not isinstance(other, KeyPair):
            return NotImplemented
        return (
            self._d == other._d
            and self.compressed == other.compressed
            and self.network == other.network
            and self.get_public_key() == other.get_public_key()
        )

    def __hash__(self) -> int:
        return hash((self.get_public_key(), self.network))

    def __repr__(self) -> str:
        """String representation."""
        kind = "private" if self.has_private_key else "public"
        return f"KeyPair({self.get_address()}, {kind}, network={self.network.name})"
