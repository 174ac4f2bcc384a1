"""Encoding, DER and validation helpers."""
