"""
Slack Key Library Usage Examples

This file demonstrates key features of the Slack key library.
"""

import logging

from slackcore import SLACK, BITCOIN, HDNode, KeyPair, Signature
from slackcore.utils.encoding import sha256

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


def key_pair_example():
    """Example 1: Key pairs from a passphrase and from WIF."""
    print("\n=== Key Pair Example ===")

    key = KeyPair.from_seed("slack", SLACK)
    print(f"Address: {key.get_address()}")
    print(f"Public key: {key.get_public_key().hex()}")
    print(f"WIF: {key.to_wif()}")

    imported = KeyPair.from_wif(key.to_wif(), [BITCOIN, SLACK])
    print(f"Imported on network: {imported.get_network().name}")

    random_key = KeyPair.make_random(SLACK)
    print(f"Random address: {random_key.get_address()}")


def signature_example():
    """Example 2: Signing and signature encodings."""
    print("\n=== Signature Example ===")

    key = KeyPair.from_seed("slack", SLACK)
    message_hash = sha256(b"hello slack")

    signature, recovery_id = key.sign_recoverable(message_hash)
    print(f"Valid: {key.verify(message_hash, signature)}")
    print(f"DER: {signature.to_der().hex()}")
    print(f"Compact: {signature.to_compact(recovery_id, key.compressed).hex()}")
    print(f"Script: {signature.to_script_signature(0x01).hex()}")

    parsed = Signature.from_der(signature.to_der())
    print(f"DER roundtrip: {parsed == signature}")


def hd_example():
    """Example 3: BIP32 derivation."""
    print("\n=== HD Derivation Example ===")

    master = HDNode.from_seed_hex("000102030405060708090a0b0c0d0e0f", SLACK)
    print(f"Master: {master.to_extended_key()}")

    account = master.derive_path("m/44'/0'/0'")
    print(f"Account xpub: {account.neutered().to_extended_key()}")

    watch_only = HDNode.from_extended_key(account.neutered().to_extended_key(), SLACK)
    for index in range(3):
        child = watch_only.derive(0).derive(index)
        print(f"  m/44'/0'/0'/0/{index}: {child.get_address()}")


def main():
    """Run all examples."""
    print("Slack Key Library Examples")
    print("=" * 50)

    key_pair_example()
    signature_example()
    hd_example()

    print("\n" + "=" * 50)
    print("Examples completed!")


if __name__ == "__main__":
    main()
