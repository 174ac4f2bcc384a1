"""ECDSA signature container and wire encodings for Slack."""

import logging
from dataclasses import dataclass
from typing import NamedTuple

from ..exceptions import (
    InvalidLengthError,
    InvalidSignatureParameterError,
    ValidationError,
)
from ..utils.der import (
    decode_der_integer,
    decode_der_signature,
    encode_der_integer,
    encode_der_signature,
)
from ..utils.encoding import bytes_to_int
from ..utils.validation import validate_hash_type

__all__ = [
    "Signature",
    "ParsedSignature",
    "ScriptSignature",
]

logger = logging.getLogger(__name__)

COMPACT_LENGTH = 65
RECOVERABLE_LENGTH = 64
COMPACT_HEADER_BASE = 27
COMPACT_COMPRESSED_FLAG = 4


class ParsedSignature(NamedTuple):
    """Signature decoded together with its recovery metadata."""

    signature: "Signature"
    recovery_id: int
    compressed: bool


class ScriptSignature(NamedTuple):
    """Signature decoded from a script, with its trailing hash type."""

    signature: "Signature"
    hash_type: int


def _int_to_32(value: int, name: str) -> bytes:
    if value.bit_length() > 256:
        raise InvalidLengthError(f"Signature {name} does not fit in 32 bytes")
    return value.to_bytes(32, "big")


@dataclass(frozen=True)
class Signature:
    """
    ECDSA signature as an (r, s) pair.

    Instances are immutable and carry no network or compression state;
    that context travels with the encodings that need it.
    """

    r: int
    s: int

    def __post_init__(self) -> None:
        for name in ("r", "s"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValidationError(f"Signature {name} must be an integer")
            if value < 0:
                raise ValidationError(f"Signature {name} must be non-negative")

    @classmethod
    def from_compact(cls, data: bytes) -> ParsedSignature:
        """
        Parse a 65-byte compact signature.

        Layout: header(1) || r(32) || s(32), where
        ``header = 27 + recovery_id + (4 if compressed)``.

        Args:
            data: Compact signature bytes

        Returns:
            ParsedSignature with recovery id and compression flag

        Raises:
            InvalidLengthError: If data is not 65 bytes
            InvalidSignatureParameterError: If the header is out of range
        """
        if len(data) != COMPACT_LENGTH:
            raise InvalidLengthError(f"Invalid signature length: {len(data)}")

        flag = data[0] - COMPACT_HEADER_BASE
        if flag != flag & 7:
            raise InvalidSignatureParameterError(
                f"Invalid signature parameter: header {data[0]}"
            )

        signature = cls(bytes_to_int(data[1:33]), bytes_to_int(data[33:65]))
        return ParsedSignature(
            signature=signature,
            recovery_id=flag & 3,
            compressed=bool(flag & COMPACT_COMPRESSED_FLAG),
        )

    def to_compact(self, recovery_id: int, compressed: bool = False) -> bytes:
        """
        Serialize as a 65-byte compact signature.

        Args:
            recovery_id: Public key recovery id (0-3)
            compressed: Whether the signing key is compressed

        Returns:
            Compact signature bytes

        Raises:
            InvalidSignatureParameterError: If recovery_id is not 0-3
            InvalidLengthError: If r or s does not fit in 32 bytes
        """
        if recovery_id not in (0, 1, 2, 3):
            raise InvalidSignatureParameterError(
                f"Invalid recovery id: {recovery_id}"
            )

        header = COMPACT_HEADER_BASE + recovery_id
        if compressed:
            header += COMPACT_COMPRESSED_FLAG

        return bytes([header]) + _int_to_32(self.r, "r") + _int_to_32(self.s, "s")

    @classmethod
    def from_recoverable(cls, data: bytes, recovery_id: int) -> ParsedSignature:
        """
        Parse a 64-byte r || s signature whose recovery id travels separately.

        Raises:
            InvalidLengthError: If data is not 64 bytes
            InvalidSignatureParameterError: If recovery_id is not 0-3
        """
        if len(data) != RECOVERABLE_LENGTH:
            raise InvalidLengthError(f"Invalid signature length: {len(data)}")
        if recovery_id not in (0, 1, 2, 3):
            raise InvalidSignatureParameterError(
                f"Invalid recovery id: {recovery_id}"
            )

        signature = cls(bytes_to_int(data[:32]), bytes_to_int(data[32:]))
        return ParsedSignature(
            signature=signature,
            recovery_id=recovery_id,
            compressed=False,
        )

    def to_recoverable(self) -> bytes:
        """
        Serialize as 64 bytes r || s.

        An r or s wider than 32 bytes yields 64 zero bytes, which no
        verifier accepts.
        """
        if self.r.bit_length() > 256 or self.s.bit_length() > 256:
            logger.warning("Signature component exceeds 32 bytes; emitting zero signature")
            return bytes(RECOVERABLE_LENGTH)

        return self.r.to_bytes(32, "big") + self.s.to_bytes(32, "big")

    @classmethod
    def from_der(cls, data: bytes) -> "Signature":
        """
        Parse a strict (BIP66) DER signature.

        Raises:
            SerializationError: If the encoding is not strict DER
        """
        r, s = decode_der_signature(data)
        return cls(decode_der_integer(r), decode_der_integer(s))

    def to_der(self) -> bytes:
        """Serialize as a strict (BIP66) DER signature."""
        return encode_der_signature(
            encode_der_integer(self.r),
            encode_der_integer(self.s),
        )

    @classmethod
    def from_script_signature(cls, data: bytes) -> ScriptSignature:
        """
        Parse a script signature: DER signature followed by a hash type byte.

        BIP62: only hash types 0x01, 0x02, 0x03, 0x81, 0x82 and 0x83 are
        allowed.

        Raises:
            InvalidLengthError: If data is empty
            InvalidHashTypeError: If the hash type is not allowed
            SerializationError: If the DER part is malformed
        """
        if not data:
            raise InvalidLengthError("Empty script signature")

        hash_type = validate_hash_type(data[-1])
        return ScriptSignature(
            signature=cls.from_der(data[:-1]),
            hash_type=hash_type,
        )

    def to_script_signature(self, hash_type: int) -> bytes:
        """
        Serialize as DER signature followed by the hash type byte.

        Raises:
            InvalidHashTypeError: If the hash type is not allowed
        """
        validate_hash_type(hash_type)
        return self.to_der() + bytes([hash_type])

    def __repr__(self) -> str:
        """String representation."""
        return f"Signature(r={self.r:#x}, s={self.s:#x})"
