import pytest

from slackcore.constants import BITCOIN, BITCOIN_TESTNET, FIELD_PRIME, SLACK
from slackcore.crypto import hd
from slackcore.crypto.hd import HDNode
from slackcore.crypto.keys import KeyPair
from slackcore.exceptions import (
    CannotDeriveHardenedFromPublicError,
    DerivationError,
    InvalidLengthError,
    InvalidMasterNodeError,
    InvalidNetworkVersionError,
    InvalidPointError,
    InvalidPrivateKeyError,
    InvalidSeedLengthError,
    NotMasterNodeError,
    UnknownNetworkVersionError,
    ValidationError,
)
from slackcore.utils.encoding import decode_base58_check, encode_base58_check, sha256

# BIP32 test vector 1
SEED_1 = bytes.fromhex("000102030405060708090a0b0c0d0e0f")
VECTOR_1 = [
    (
        "m",
        "xprv9s21ZrQH143K3QTDL4LXw2F7HEK3wJUD2nW2nRk4stbPy6cq3jPPqjiChkVvvNKmPGJxWUtg6LnF5kejMRNNU3TGtRBeJgk33yuGBxrMPHi",
        "xpub661MyMwAqRbcFtXgS5sYJABqqG9YLmC4Q1Rdap9gSE8NqtwybGhePY2gZ29ESFjqJoCu1Rupje8YtGqsefD265TMg7usUDFdp6W1EGMcet8",
    ),
    (
        "m/0'",
        "xprv9uHRZZhk6KAJC1avXpDAp4MDc3sQKNxDiPvvkX8Br5ngLNv1TxvUxt4cV1rGL5hj6KCesnDYUhd7oWgT11eZG7XnxHrnYeSvkzY7d2bhkJ7",
        "xpub68Gmy5EdvgibQVfPdqkBBCHxA5htiqg55crXYuXoQRKfDBFA1WEjWgP6LHhwBZeNK1VTsfTFUHCdrfp1bgwQ9xv5ski8PX9rL2dZXvgGDnw",
    ),
    (
        "m/0'/1",
        "xprv9wTYmMFdV23N2TdNG573QoEsfRrWKQgWeibmLntzniatZvR9BmLnvSxqu53Kw1UmYPxLgboyZQaXwTCg8MSY3H2EU4pWcQDnRnrVA1xe8fs",
        "xpub6ASuArnXKPbfEwhqN6e3mwBcDTgzisQN1wXN9BJcM47sSikHjJf3UFHKkNAWbWMiGj7Wf5uMash7SyYq527Hqck2AxYysAA7xmALppuCkwQ",
    ),
    (
        "m/0'/1/2'",
        "xprv9z4pot5VBttmtdRTWfWQmoH1taj2axGVzFqSb8C9xaxKymcFzXBDptWmT7FwuEzG3ryjH4ktypQSAewRiNMjANTtpgP4mLTj34bhnZX7UiM",
        "xpub6D4BDPcP2GT577Vvch3R8wDkScZWzQzMMUm3PWbmWvVJrZwQY4VUNgqFJPMM3No2dFDFGTsxxpG5uJh7n7epu4trkrX7x7DogT5Uv6fcLW5",
    ),
]

# BIP32 test vector 3 (leading zeros in the private key)
SEED_3 = bytes.fromhex(
    "4b381541583be4423346c643850da4b320e46a87ae3d2a4e6da11eba819cd4ac"
    "ba45d239319ac14f863b8d5ab5a0d0c64d2e8a1e7d1457df2e5a3c51c73235be"
)
VECTOR_3 = [
    (
        "m",
        "xprv9s21ZrQH143K25QhxbucbDDuQ4naNntJRi4KUfWT7xo4EKsHt2QJDu7KXp1A3u7Bi1j8ph3EGsZ9Xvz9dGuVrtHHs7pXeTzjuxBrCmmhgC6",
        "xpub661MyMwAqRbcEZVB4dScxMAdx6d4nFc9nvyvH3v4gJL378CSRZiYmhRoP7mBy6gSPSCYk6SzXPTf3ND1cZAceL7SfJ1Z3GC8vBgp2epUt13",
    ),
    (
        "m/0'",
        "xprv9uPDJpEQgRQfDcW7BkF7eTya6RPxXeJCqCJGHuCJ4GiRVLzkTXBAJMu2qaMWPrS7AANYqdq6vcBcBUdJCVVFceUvJFjaPdGZ2y9WACViL4L",
        "xpub68NZiKmJWnxxS6aaHmn81bvJeTESw724CRDs6HbuccFQN9Ku14VQrADWgqbhhTHBaohPX4CjNLf9fq9MYo6oDaPPLPxSb7gwQN3ih19Zm4Y",
    ),
]

SLACK_MASTER_PRIVATE = "aprvbwWwpofWx4cF2p3v8fZ9WB1ZZupzF8XTidjuWGbKyVMgdeQHpfnNh8ShYf5Z2vDC73jkTwNoUmy8YkwncgHFEPAqvmzKXLU3mTu2tY4UFKr"
SLACK_MASTER_PUBLIC = "apubFZ6vkWBiARunuLDjfSpynmXY5xJb8rKCfhK9LPjZoxMqb4tCCW5wyYAQkCtbWYVRBedRjvbjNapwtdFCNd7JheoXeZeYeX7HBrooJFbR2km"
SLACK_CHILD_PRIVATE = "aprvc1xV2JWsS2cJ1sE54gKeyx1Kx7NSdEjmLZqe4dkFtKMBEUCbxhjmmqhLjycx3ZNCGBP8e4J6wqmRQTVjPcMQocjoWRdBq3wo9GrFrbQxcwA"
SLACK_CHILD_PUBLIC = "apubFdYTx134ePuqtPPtbTbVGYXJU9r3WxXWHdQstktVinMLBtgWLY3M4FR3wYusfo7J9aY3PabGDpPWTKx9nz1aTC6C9QHf3U1mLXU8toKk16b"


def _with_payload_bytes(extended_key, offset, replacement):
    buffer = bytearray(decode_base58_check(extended_key))
    buffer[offset:offset + len(replacement)] = replacement
    return encode_base58_check(bytes(buffer))


@pytest.mark.parametrize("seed,vector", [(SEED_1, VECTOR_1), (SEED_3, VECTOR_3)])
def test_bip32_vectors(seed, vector):
    master = HDNode.from_seed(seed, BITCOIN)
    for path, xprv, xpub in vector:
        node = master.derive_path(path)
        assert node.to_extended_key() == xprv
        assert node.neutered().to_extended_key() == xpub


@pytest.mark.parametrize("seed,vector", [(SEED_1, VECTOR_1), (SEED_3, VECTOR_3)])
def test_extended_key_roundtrip(seed, vector):
    for _, xprv, xpub in vector:
        assert HDNode.from_extended_key(xprv, BITCOIN).to_extended_key() == xprv
        assert HDNode.from_extended_key(xpub, BITCOIN).to_extended_key() == xpub


def test_vector_metadata():
    master = HDNode.from_seed(SEED_1, BITCOIN)
    assert master.depth == 0
    assert master.index == 0
    assert master.parent_fingerprint == 0
    assert master.get_fingerprint().hex() == "3442193e"
    assert master.get_identifier()[:4] == master.get_fingerprint()
    assert master.get_address() == "15mKKb2eos1hWa6tisdPwwDC1a5J1y9nma"

    child = master.derive_hardened(0)
    assert child.depth == 1
    assert child.index == 0x80000000
    assert child.parent_fingerprint == 0x3442193E


def test_slack_network_keys():
    master = HDNode.from_seed(SEED_1, SLACK)
    assert master.to_extended_key() == SLACK_MASTER_PRIVATE
    assert master.neutered().to_extended_key() == SLACK_MASTER_PUBLIC
    assert master.get_address() == "ALYBy5tH91frKYJtHXHj6pUHVAzzSiUwh5"
    assert master.get_network() == SLACK

    child = master.derive_path("m/0'/1")
    assert child.to_extended_key() == SLACK_CHILD_PRIVATE
    assert child.neutered().to_extended_key() == SLACK_CHILD_PUBLIC
    assert child.get_address() == "AZBaJ5Txin1EnQQkRDQpEyX7eR6DxQWYWz"


def test_derive_path_matches_manual_derivation():
    master = HDNode.from_seed(SEED_1, SLACK)
    assert master.derive_path("m/0'/1") == master.derive_hardened(0).derive(1)
    assert master.derive_path("0'/1") == master.derive_hardened(0).derive(1)
    assert master.derive_path("m") is master


def test_derivation_is_deterministic():
    master = HDNode.from_seed(SEED_1, SLACK)
    a = master.derive(7)
    b = master.derive(7)
    assert a == b
    assert a is not b
    assert a.to_extended_key() == b.to_extended_key()
    assert master.to_extended_key() == SLACK_MASTER_PRIVATE


def test_public_derivation_matches_private():
    master = HDNode.from_seed(SEED_1, BITCOIN)
    hardened = master.derive_hardened(0)

    from_public = hardened.neutered().derive(1)
    from_private = hardened.derive(1)

    assert from_public.is_neutered()
    assert from_public.get_public_key() == from_private.get_public_key()
    assert from_public.to_extended_key() == VECTOR_1[2][2]


def test_neutered():
    master = HDNode.from_seed(SEED_1, SLACK)
    neutered = master.neutered()

    assert not master.is_neutered()
    assert neutered.is_neutered()
    assert neutered.get_public_key() == master.get_public_key()
    assert neutered.get_address() == master.get_address()
    assert neutered.chain_code == master.chain_code
    assert neutered.key_pair.secret is None


def test_hardened_from_public_fails():
    neutered = HDNode.from_seed(SEED_1, SLACK).neutered()
    with pytest.raises(CannotDeriveHardenedFromPublicError):
        neutered.derive_hardened(0)
    with pytest.raises(CannotDeriveHardenedFromPublicError):
        neutered.derive_path("m/0'")


def test_seed_length_boundaries():
    with pytest.raises(InvalidSeedLengthError):
        HDNode.from_seed(b"\x01" * 15, SLACK)
    with pytest.raises(InvalidSeedLengthError):
        HDNode.from_seed(b"\x01" * 65, SLACK)

    assert HDNode.from_seed(b"\x01" * 16, SLACK).to_extended_key() == (
        "aprvbwWwpofWx4cF2BWW1MdScH5CA3aKa2sBSavz4LSAhgNy6LXxaBHrrzwev5KNN15NP9N6pJR9grhTD7qpBVK61nKp3YAz2dqDHsecSRE9dBa"
    )
    assert HDNode.from_seed(b"\x01" * 64, SLACK).to_extended_key() == (
        "aprvbwWwpofWx4cF3VkN3b3gv4VLvXRfmK1sRjmvet6dUvCENmL9Ri64znSTE6SJJ9vHsiCvw7u8vkumdymHngNbZCTZ1K5kkHm956n4nSce9hw"
    )


def test_from_seed_hex():
    assert HDNode.from_seed_hex(SEED_1.hex(), BITCOIN) == HDNode.from_seed(SEED_1, BITCOIN)


def test_from_extended_key_network_list():
    xprv = VECTOR_1[0][1]

    node = HDNode.from_extended_key(xprv, [SLACK, BITCOIN, BITCOIN_TESTNET])
    assert node.get_network() == BITCOIN

    with pytest.raises(UnknownNetworkVersionError):
        HDNode.from_extended_key(xprv, [SLACK, BITCOIN_TESTNET])
    with pytest.raises(InvalidNetworkVersionError):
        HDNode.from_extended_key(xprv, SLACK)


def test_from_extended_key_length():
    payload = decode_base58_check(VECTOR_1[0][1])
    with pytest.raises(InvalidLengthError):
        HDNode.from_extended_key(encode_base58_check(payload[:-1]), BITCOIN)
    with pytest.raises(InvalidLengthError):
        HDNode.from_extended_key(encode_base58_check(payload + b"\x00"), BITCOIN)


def test_from_extended_key_master_invariants():
    xpub = VECTOR_1[0][2]
    with pytest.raises(InvalidMasterNodeError):
        HDNode.from_extended_key(_with_payload_bytes(xpub, 5, b"\x00\x00\x00\x01"), BITCOIN)
    with pytest.raises(InvalidMasterNodeError):
        HDNode.from_extended_key(_with_payload_bytes(xpub, 9, b"\x00\x00\x00\x01"), BITCOIN)


def test_from_extended_key_bad_key_data():
    xprv = VECTOR_1[0][1]
    xpub = VECTOR_1[0][2]

    with pytest.raises(InvalidPrivateKeyError):
        HDNode.from_extended_key(_with_payload_bytes(xprv, 45, b"\x01"), BITCOIN)
    with pytest.raises(InvalidPrivateKeyError):
        HDNode.from_extended_key(_with_payload_bytes(xprv, 46, bytes(32)), BITCOIN)

    off_curve = b"\x02" + FIELD_PRIME.to_bytes(32, "big")
    with pytest.raises(InvalidPointError):
        HDNode.from_extended_key(_with_payload_bytes(xpub, 45, off_curve), BITCOIN)
    with pytest.raises(InvalidPointError):
        HDNode.from_extended_key(_with_payload_bytes(xpub, 45, b"\x04"), BITCOIN)


def test_derive_path_requires_master():
    child = HDNode.from_seed(SEED_1, SLACK).derive(0)
    with pytest.raises(NotMasterNodeError):
        child.derive_path("m/0")
    assert child.derive_path("1") == child.derive(1)


@pytest.mark.parametrize("path", ["", "m/", "/0", "m/a", "m/0''", "M/0", "m/-1", "m/0/", "m/2147483648'"])
def test_derive_path_rejects_malformed(path):
    master = HDNode.from_seed(SEED_1, SLACK)
    with pytest.raises(ValidationError):
        master.derive_path(path)


def test_index_preconditions():
    master = HDNode.from_seed(SEED_1, SLACK)
    with pytest.raises(ValidationError):
        master.derive_hardened(0x80000000)
    with pytest.raises(ValidationError):
        master.derive_hardened(-1)
    with pytest.raises(ValidationError):
        master.derive(0x100000000)
    assert master.derive(0x80000000) == master.derive_hardened(0)


def test_depth_overflow():
    master = HDNode.from_seed(SEED_1, SLACK)
    deep = HDNode(master.key_pair, master.chain_code, depth=255, index=1, parent_fingerprint=1)
    with pytest.raises(DerivationError):
        deep.derive(0)
    assert HDNode(master.key_pair, master.chain_code, depth=254).derive(0).depth == 255


def test_derive_skips_invalid_index(monkeypatch):
    real_hmac = hd.hmac_sha512
    calls = []

    def fake_hmac(key, data):
        calls.append(data[-4:])
        if len(calls) == 1:
            return b"\xff" * 64
        return real_hmac(key, data)

    master = HDNode.from_seed(SEED_1, SLACK)
    expected = master.derive(5)

    monkeypatch.setattr(hd, "hmac_sha512", fake_hmac)
    child = master.derive(4)

    assert calls == [b"\x00\x00\x00\x04", b"\x00\x00\x00\x05"]
    assert child.index == 5
    assert child == expected


def test_derive_retry_is_bounded(monkeypatch):
    master = HDNode.from_seed(SEED_1, SLACK)
    monkeypatch.setattr(hd, "hmac_sha512", lambda key, data: b"\xff" * 64)

    with pytest.raises(DerivationError):
        master.derive(0)
    with pytest.raises(DerivationError):
        master.derive(0xFFFFFFFF)


def test_constructor_validation():
    master = HDNode.from_seed(SEED_1, SLACK)
    uncompressed = KeyPair(1, network=SLACK, compressed=False)

    with pytest.raises(ValidationError):
        HDNode(uncompressed, master.chain_code)
    with pytest.raises(InvalidLengthError):
        HDNode(master.key_pair, master.chain_code[:31])
    with pytest.raises(ValidationError):
        HDNode(master.key_pair, master.chain_code, depth=256)


def test_sign_and_verify():
    node = HDNode.from_seed(SEED_1, SLACK).derive_path("m/44'/0'/0'/0/0")
    message_hash = sha256(b"hd message")
    signature = node.sign(message_hash)
    assert node.verify(message_hash, signature)
    assert node.neutered().verify(message_hash, signature)
