"""Cryptographic primitives for Slack: key pairs, signatures, HD nodes."""

from ..crypto.signature import Signature, ParsedSignature, ScriptSignature
from ..crypto.keys import KeyPair
from ..crypto.hd import HDNode

__all__ = [
    # Signatures
    "Signature",
    "ParsedSignature",
    "ScriptSignature",

    # Keys
    "KeyPair",

    # HD
    "HDNode",
]
