"""Encoding, hashing and decoding utilities for Slack key management."""

import hashlib
import hmac
from typing import Tuple, Union

from ..exceptions import InvalidLengthError, SerializationError, ValidationError
from ..types.common import HexStr

__all__ = [
    "hex_to_bytes",
    "bytes_to_hex",
    "int_to_bytes",
    "bytes_to_int",
    "sha256",
    "ripemd160",
    "hash160",
    "double_sha256",
    "hash256",
    "hmac_sha512",
    "encode_base58",
    "decode_base58",
    "encode_base58_check",
    "decode_base58_check",
    "encode_wif",
    "decode_wif",
]

# Constants
BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
CHECKSUM_LENGTH = 4
WIF_COMPRESSED_FLAG = 0x01


def hex_to_bytes(hex_str: Union[HexStr, str]) -> bytes:
    """
    Convert hex string to bytes.

    Args:
        hex_str: Hex string with or without 0x prefix

    Returns:
        Decoded bytes

    Raises:
        ValidationError: If hex string is invalid
    """
    try:
        if isinstance(hex_str, str) and hex_str.startswith("0x"):
            hex_str = hex_str[2:]
        return bytes.fromhex(hex_str)
    except ValueError as e:
        raise ValidationError(f"Invalid hex string: {hex_str}") from e


def bytes_to_hex(data: bytes, prefix: bool = False) -> HexStr:
    """Convert bytes to hex string, optionally 0x-prefixed."""
    hex_str = data.hex()
    if prefix:
        hex_str = f"0x{hex_str}"
    return HexStr(hex_str)


def int_to_bytes(value: int, length: int) -> bytes:
    """
    Convert unsigned integer to big-endian bytes of fixed length.

    Args:
        value: Non-negative integer
        length: Number of bytes

    Returns:
        Encoded bytes, zero-padded on the left

    Raises:
        InvalidLengthError: If value does not fit in ``length`` bytes
    """
    try:
        return value.to_bytes(length, byteorder="big")
    except OverflowError as e:
        raise InvalidLengthError(
            f"Integer does not fit in {length} bytes"
        ) from e


def bytes_to_int(data: bytes) -> int:
    """Convert big-endian bytes to an unsigned integer."""
    return int.from_bytes(data, byteorder="big")


def sha256(data: bytes) -> bytes:
    """Perform SHA256 hash."""
    return hashlib.sha256(data).digest()


def ripemd160(data: bytes) -> bytes:
    """Perform RIPEMD160 hash."""
    return hashlib.new("ripemd160", data).digest()


def hash160(data: bytes) -> bytes:
    """Perform RIPEMD160(SHA256(data))."""
    return ripemd160(sha256(data))


def double_sha256(data: bytes) -> bytes:
    """Perform double SHA256 hash."""
    return sha256(sha256(data))


def hash256(data: bytes) -> bytes:
    """Alias for double SHA256."""
    return double_sha256(data)


def hmac_sha512(key: bytes, data: bytes) -> bytes:
    """Compute HMAC-SHA512 of ``data`` under ``key``."""
    return hmac.new(key, data, hashlib.sha512).digest()


def encode_base58(data: bytes) -> str:
    """
    Encode bytes as Base58 string.

    Args:
        data: Bytes to encode

    Returns:
        Base58 encoded string
    """
    n = bytes_to_int(data)

    encoded = ""
    while n:
        n, remainder = divmod(n, 58)
        encoded = BASE58_ALPHABET[remainder] + encoded

    # Leading zero bytes map to leading '1' characters
    for byte in data:
        if byte == 0:
            encoded = "1" + encoded
        else:
            break

    return encoded


def decode_base58(string: str) -> bytes:
    """
    Decode Base58 string to bytes.

    Args:
        string: Base58 string

    Returns:
        Decoded bytes

    Raises:
        SerializationError: If string contains invalid characters
    """
    n = 0
    for char in string:
        index = BASE58_ALPHABET.find(char)
        if index < 0:
            raise SerializationError(f"Invalid Base58 character: {char!r}")
        n = n * 58 + index

    body = n.to_bytes((n.bit_length() + 7) // 8, byteorder="big")

    leading_zeros = len(string) - len(string.lstrip("1"))
    return b"\x00" * leading_zeros + body


def encode_base58_check(data: bytes) -> str:
    """
    Encode bytes as Base58Check (with checksum).

    Args:
        data: Bytes to encode

    Returns:
        Base58Check encoded string
    """
    checksum = double_sha256(data)[:CHECKSUM_LENGTH]
    return encode_base58(data + checksum)


def decode_base58_check(string: str) -> bytes:
    """
    Decode Base58Check string.

    Args:
        string: Base58Check string

    Returns:
        Decoded data (without checksum)

    Raises:
        SerializationError: If the string is malformed or checksum is invalid
    """
    data = decode_base58(string)
    if len(data) < CHECKSUM_LENGTH:
        raise SerializationError("Invalid Base58Check string: too short")

    payload, checksum = data[:-CHECKSUM_LENGTH], data[-CHECKSUM_LENGTH:]
    expected_checksum = double_sha256(payload)[:CHECKSUM_LENGTH]

    if not hmac.compare_digest(checksum, expected_checksum):
        raise SerializationError("Invalid Base58Check checksum")

    return payload


def encode_wif(version: int, secret: bytes, compressed: bool) -> str:
    """
    Export a raw private key in Wallet Import Format.

    Args:
        version: Network WIF version byte
        secret: 32-byte private key
        compressed: Append the compressed-public-key flag

    Returns:
        WIF encoded private key

    Raises:
        InvalidLengthError: If the secret is not 32 bytes
    """
    if len(secret) != 32:
        raise InvalidLengthError(f"Invalid private key length: {len(secret)}")

    data = bytes([version]) + secret
    if compressed:
        data += bytes([WIF_COMPRESSED_FLAG])

    return encode_base58_check(data)


def decode_wif(wif: str) -> Tuple[int, bytes, bool]:
    """
    Decode a Wallet Import Format string.

    Args:
        wif: WIF encoded private key

    Returns:
        Tuple of (version, 32-byte secret, is_compressed)

    Raises:
        SerializationError: If the Base58Check envelope is invalid
        InvalidLengthError: If the payload is neither 33 nor 34 bytes
        ValidationError: If the compression flag is not 0x01
    """
    data = decode_base58_check(wif)

    if len(data) == 33:
        return data[0], data[1:33], False

    if len(data) == 34:
        if data[33] != WIF_COMPRESSED_FLAG:
            raise ValidationError(f"Invalid compression flag: {data[33]:#x}")
        return data[0], data[1:33], True

    raise InvalidLengthError(f"Invalid WIF length: {len(data)}")
