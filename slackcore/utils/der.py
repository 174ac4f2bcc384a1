"""Strict DER signature codec (BIP66)."""

from typing import Tuple

from ..exceptions import SerializationError

__all__ = [
    "encode_der_integer",
    "decode_der_integer",
    "encode_der_signature",
    "decode_der_signature",
]

SEQUENCE_TAG = 0x30
INTEGER_TAG = 0x02
MIN_SIGNATURE_LENGTH = 8
MAX_SIGNATURE_LENGTH = 72


def encode_der_integer(value: int) -> bytes:
    """
    Encode a non-negative integer as DER integer content bytes.

    The result is minimal: no redundant leading zero, and a single zero
    byte is prepended when the high bit would otherwise read as a sign.
    """
    if value < 0:
        raise SerializationError("DER integers must be non-negative")

    data = value.to_bytes(max(1, (value.bit_length() + 7) // 8), "big")
    if data[0] & 0x80:
        data = b"\x00" + data
    return data


def decode_der_integer(data: bytes) -> int:
    """Decode DER integer content bytes already checked by the signature parser."""
    return int.from_bytes(data, "big")


def _check_integer(data: bytes, name: str) -> None:
    if len(data) == 0:
        raise SerializationError(f"{name} length is zero")
    if len(data) > 33:
        raise SerializationError(f"{name} length is too long")
    if data[0] & 0x80:
        raise SerializationError(f"{name} value is negative")
    if len(data) > 1 and data[0] == 0x00 and not data[1] & 0x80:
        raise SerializationError(f"{name} value excessively padded")


def decode_der_signature(signature: bytes) -> Tuple[bytes, bytes]:
    """
    Parse a strict DER signature into its two integer fields.

    Layout: 0x30 [total-length] 0x02 [R-length] [R] 0x02 [S-length] [S]

    Args:
        signature: DER-encoded signature (no hash type byte)

    Returns:
        Tuple of (r, s) integer content bytes

    Raises:
        SerializationError: If the encoding is not strict DER
    """
    length = len(signature)
    if length < MIN_SIGNATURE_LENGTH:
        raise SerializationError("DER sequence length is too short")
    if length > MAX_SIGNATURE_LENGTH:
        raise SerializationError("DER sequence length is too long")
    if signature[0] != SEQUENCE_TAG:
        raise SerializationError("Expected DER sequence")
    if signature[1] != length - 2:
        raise SerializationError("DER sequence length is invalid")
    if signature[2] != INTEGER_TAG:
        raise SerializationError("Expected DER integer")

    len_r = signature[3]
    if len_r == 0:
        raise SerializationError("R length is zero")
    if 5 + len_r >= length:
        raise SerializationError("R length is too long")
    if signature[4 + len_r] != INTEGER_TAG:
        raise SerializationError("Expected DER integer (2)")

    len_s = signature[5 + len_r]
    if len_s == 0:
        raise SerializationError("S length is zero")
    if 6 + len_r + len_s != length:
        raise SerializationError("S length is invalid")

    r = signature[4:4 + len_r]
    s = signature[6 + len_r:]

    _check_integer(r, "R")
    _check_integer(s, "S")

    return r, s


def encode_der_signature(r: bytes, s: bytes) -> bytes:
    """
    Build a strict DER signature from two integer content byte strings.

    Args:
        r: DER integer content bytes of r
        s: DER integer content bytes of s

    Returns:
        DER-encoded signature

    Raises:
        SerializationError: If either integer is not minimally encoded
    """
    _check_integer(r, "R")
    _check_integer(s, "S")

    sequence = (
        bytes([INTEGER_TAG, len(r)]) + r
        + bytes([INTEGER_TAG, len(s)]) + s
    )
    return bytes([SEQUENCE_TAG, len(sequence)]) + sequence
