"""Tests for uwallet.key_pair — derivation, signing and decryption per key type."""

import coincurve
import pytest

from uwallet.encodings import PublicKeyEncoding
from uwallet.errors import (
    CryptoError,
    UnsupportedKeyTypeError,
    WrongKeyLengthError,
    WrongKeyTypeError,
)
from uwallet.key_pair import KeyPair
from uwallet.key_types import KeyType
from uwallet.public_key_info import PublicKeyInfo
from uwallet.recoverable import keccak256
from uwallet.schemes import Scheme

# RFC 8032 §7.1, TEST 1.
ED25519_SEED = bytes.fromhex("9d61b19deffd5a60ba844af492ec2cc44449c5697b326919703bac031cae7f60")
ED25519_PUBLIC = bytes.fromhex("d75a980182b10ab7d54bfed3c964073a0ee172f3daa62325af021a68f707511a")
ED25519_EMPTY_SIG = bytes.fromhex(
    "e5564300c360ac729086e2cc806e828a84877f1eb8e5d974d873e065224901555f"
    "b8821590a33bacc61e39701cf9b46bd25bf5f0595bbe24655141438e7a100b"
)

# RFC 7748 §6.1, Alice.
X25519_SECRET = bytes.fromhex("77076d0a7318a57d3c16c17251b26645df4c2f87ebc0992ab177fba51db92c2a")
X25519_PUBLIC = bytes.fromhex("8520f0098930a754748b7ddcb43ef75a0dbf3a0d26381af4eba4a98eaa9b4e6a")

SECP256K1_SECRET = bytes.fromhex("e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855")
SECP256K1_PUBLIC = bytes.fromhex(
    "03a34b99f22c790c4e36b2b3c2c35a36db06226e41c692fc82b8b56ac1c540c5bd"
)
# Secret scalar 1 maps to the generator point.
SECP256K1_ONE = (1).to_bytes(32, "big")
SECP256K1_G_COMPRESSED = bytes.fromhex(
    "0279be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"
)
SECP256K1_G_UNCOMPRESSED = bytes.fromhex(
    "0479be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"
    "483ada7726a3c4655da4fbfc0e1108a8fd17b448a68554199c47d08ffb10d4b8"
)

# Published Ethereum personal_sign vector (web3.js accounts docs): "Some data"
# with the EIP-191 prefix, signed by the key below. v is 0x1c on the wire.
ETH_SECRET = bytes.fromhex("4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318")
ETH_MESSAGE = b"\x19Ethereum Signed Message:\n9Some data"
ETH_SIGNATURE = bytes.fromhex(
    "b91467e570a6466aa9e9876cbcd013baba02900b8979d43fe208a4a4f339f5fd"
    "6007e74cd82e037b800186422fc2da167c747ef045e5d18a5f5d4300f8e1a029"
    "01"
)
ETH_ADDRESS = "0x2c7536E3605D9C16a7a3D7b1898e529396a65c23"

# Compressed BLS12-381 G1 generator, the public key for secret scalar 1.
BLS_G1_GENERATOR = bytes.fromhex(
    "97f1d3a73197d7942695638c4fa9ac0fc3688c4f9774b905a14e3a3f171bac58"
    "6c55e83ff97a1aeffb3af00adb22c6bb"
)

SIGNING_TYPES = [
    KeyType.ED25519,
    KeyType.SECP256K1,
    KeyType.SECP256K1_RECOVERY,
    KeyType.BLS12381_G1,
]
SIGNATURE_LENGTHS = {
    KeyType.ED25519: 64,
    KeyType.SECP256K1: 64,
    KeyType.SECP256K1_RECOVERY: 65,
    KeyType.BLS12381_G1: 96,
}
UNIMPLEMENTED_TYPES = [
    KeyType.BLS12381_G2,
    KeyType.JWS,
    KeyType.GPG,
    KeyType.RSA,
    KeyType.SCHNORR_SECP256K1,
]


class TestNew:
    def test_ed25519_vector(self):
        key = KeyPair.new(KeyType.ED25519, ED25519_SEED)
        assert key.public_key.key_type == KeyType.ED25519
        assert key.public_key.controller == []
        assert key.public_key.public_key == ED25519_PUBLIC
        assert key.private_key == ED25519_SEED + ED25519_PUBLIC

    def test_ed25519_signature_vector(self):
        key = KeyPair.new(KeyType.ED25519, ED25519_SEED)
        assert key.sign(b"") == ED25519_EMPTY_SIG

    def test_secp256k1_vector(self):
        key = KeyPair.new(KeyType.SECP256K1, SECP256K1_SECRET)
        assert key.private_key == SECP256K1_SECRET
        assert key.public_key.public_key == SECP256K1_PUBLIC

    def test_secp256k1_generator(self):
        key = KeyPair.new(KeyType.SECP256K1_RECOVERY, SECP256K1_ONE)
        assert key.public_key.public_key == SECP256K1_G_COMPRESSED

    def test_secp256k1_uncompressed_setting(self, monkeypatch):
        monkeypatch.setenv("UWALLET_SECP256K1_COMPRESSED", "false")
        key = KeyPair.new(KeyType.SECP256K1, SECP256K1_ONE)
        assert key.public_key.public_key == SECP256K1_G_UNCOMPRESSED

    def test_x25519_vector(self):
        key = KeyPair.new(KeyType.X25519, X25519_SECRET)
        assert key.private_key == X25519_SECRET
        assert key.public_key.public_key == X25519_PUBLIC

    def test_bls_g1_generator(self):
        key = KeyPair.new(KeyType.BLS12381_G1, (1).to_bytes(32, "big"))
        assert key.public_key.public_key == BLS_G1_GENERATOR

    @pytest.mark.parametrize(
        "key_type, secret",
        [
            (KeyType.ED25519, ED25519_SEED),
            (KeyType.SECP256K1, SECP256K1_SECRET),
            (KeyType.SECP256K1_RECOVERY, SECP256K1_SECRET),
            (KeyType.X25519, X25519_SECRET),
        ],
    )
    def test_derivation_is_deterministic(self, key_type, secret):
        assert KeyPair.new(key_type, secret) == KeyPair.new(key_type, secret)

    @pytest.mark.parametrize("key_type", [KeyType.ED25519, KeyType.SECP256K1, KeyType.X25519])
    def test_wrong_secret_length(self, key_type):
        with pytest.raises(WrongKeyLengthError):
            KeyPair.new(key_type, b"\x01" * 31)

    def test_secp256k1_zero_scalar_rejected(self):
        with pytest.raises(CryptoError):
            KeyPair.new(KeyType.SECP256K1, b"\x00" * 32)

    def test_secp256k1_scalar_above_order_rejected(self):
        with pytest.raises(CryptoError):
            KeyPair.new(KeyType.SECP256K1, b"\xff" * 32)

    @pytest.mark.parametrize("key_type", UNIMPLEMENTED_TYPES)
    def test_unimplemented_types(self, key_type):
        with pytest.raises(UnsupportedKeyTypeError):
            KeyPair.new(key_type, b"\x01" * 32)


class TestRandomPair:
    @pytest.mark.parametrize("key_type", SIGNING_TYPES + [KeyType.X25519])
    def test_pairs_are_unique(self, key_type):
        assert KeyPair.random_pair(key_type) != KeyPair.random_pair(key_type)

    @pytest.mark.parametrize("key_type", SIGNING_TYPES + [KeyType.X25519])
    def test_random_pair_rederives(self, key_type):
        key = KeyPair.random_pair(key_type)
        secret = key.private_key[:32]
        assert KeyPair.new(key_type, secret).public_key == key.public_key

    def test_unimplemented_type(self):
        with pytest.raises(UnsupportedKeyTypeError):
            KeyPair.random_pair(KeyType.RSA)


class TestSignVerify:
    @pytest.mark.parametrize("key_type", SIGNING_TYPES)
    def test_roundtrip(self, key_type):
        key = KeyPair.random_pair(key_type)
        signature = key.sign(b"hello world")
        assert len(signature) == SIGNATURE_LENGTHS[key_type]
        assert key.verify(b"hello world", signature) is True

    @pytest.mark.parametrize("key_type", SIGNING_TYPES)
    def test_different_data_is_false(self, key_type):
        key = KeyPair.random_pair(key_type)
        signature = key.sign(b"original")
        assert key.verify(b"tampered", signature) is False

    @pytest.mark.parametrize("key_type", SIGNING_TYPES)
    def test_different_key_is_false(self, key_type):
        signer = KeyPair.random_pair(key_type)
        other = KeyPair.random_pair(key_type)
        assert other.verify(b"data", signer.sign(b"data")) is False

    @pytest.mark.parametrize("key_type", SIGNING_TYPES)
    def test_wrong_signature_length_raises(self, key_type):
        key = KeyPair.random_pair(key_type)
        signature = key.sign(b"data")
        with pytest.raises(WrongKeyLengthError):
            key.verify(b"data", signature[:-1])
        with pytest.raises(WrongKeyLengthError):
            key.verify(b"data", signature + b"\x00")

    def test_public_view_verifies(self):
        key = KeyPair.random_pair(KeyType.ED25519)
        public = PublicKeyInfo.new(KeyType.ED25519, key.public_key.public_key)
        assert public.verify(b"data", key.sign(b"data")) is True

    def test_secp256k1_signature_is_low_s(self):
        order = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
        key = KeyPair.new(KeyType.SECP256K1, SECP256K1_SECRET)
        for i in range(8):
            signature = key.sign(f"message {i}".encode())
            assert int.from_bytes(signature[32:], "big") <= order // 2

    def test_secp256k1_verifies_uncompressed_key(self):
        key = KeyPair.new(KeyType.SECP256K1, SECP256K1_ONE)
        public = PublicKeyInfo.new(KeyType.SECP256K1, SECP256K1_G_UNCOMPRESSED)
        assert public.verify(b"data", key.sign(b"data")) is True


class TestRecoverySignature:
    def test_signature_vector(self):
        key = KeyPair.new(KeyType.SECP256K1_RECOVERY, ETH_SECRET)
        assert keccak256(ETH_MESSAGE).hex() == (
            "1da44b586eb0729ff70a73c326926f6ed5a25f5b056e7f47fbc6e58d86871655"
        )
        assert key.sign(ETH_MESSAGE) == ETH_SIGNATURE
        assert key.verify(ETH_MESSAGE, ETH_SIGNATURE[:64] + b"\x1c") is True
        assert key.public_info().encode(PublicKeyEncoding.ETHEREUM_ADDRESS) == ETH_ADDRESS

    def test_recovers_expected_public_key(self):
        key = KeyPair.new(KeyType.SECP256K1_RECOVERY, SECP256K1_SECRET)
        message = b"The quick brown fox jumps over the lazy dog"
        signature = key.sign(message)

        assert len(signature) == 65
        assert signature[64] in (0, 1)
        recovered = coincurve.PublicKey.from_signature_and_message(
            signature, keccak256(message), hasher=None
        )
        assert recovered.format(compressed=True) == SECP256K1_PUBLIC

    def test_signature_is_deterministic(self):
        key = KeyPair.new(KeyType.SECP256K1_RECOVERY, SECP256K1_SECRET)
        assert key.sign(b"fixed message") == key.sign(b"fixed message")

    def test_accepts_ethereum_style_v(self):
        key = KeyPair.new(KeyType.SECP256K1_RECOVERY, SECP256K1_SECRET)
        signature = key.sign(b"data")
        ethereum_style = signature[:64] + bytes([signature[64] + 27])
        assert key.verify(b"data", ethereum_style) is True

    def test_unrecoverable_signature_raises(self):
        key = KeyPair.new(KeyType.SECP256K1_RECOVERY, SECP256K1_SECRET)
        with pytest.raises(CryptoError):
            key.verify(b"data", b"\xff" * 64 + b"\x00")

    def test_plain_and_recovery_signatures_differ(self):
        plain = KeyPair.new(KeyType.SECP256K1, SECP256K1_SECRET)
        recovery = KeyPair.new(KeyType.SECP256K1_RECOVERY, SECP256K1_SECRET)
        recoverable = recovery.sign(b"data")
        assert plain.verify(b"data", recoverable[:64]) is False


class TestBls:
    def test_roundtrip(self):
        key = KeyPair.new(KeyType.BLS12381_G1, (42).to_bytes(32, "big"))
        signature = key.sign(b"bls message")
        assert len(signature) == 96
        assert key.verify(b"bls message", signature) is True
        assert key.verify(b"other message", signature) is False

    def test_signature_length_checked_before_pairing(self):
        key = KeyPair.new(KeyType.BLS12381_G1, (42).to_bytes(32, "big"))
        with pytest.raises(WrongKeyLengthError):
            key.verify(b"bls message", b"\x00" * 48)

    def test_public_key_length_checked(self):
        public = PublicKeyInfo.new(KeyType.BLS12381_G1, b"\x00" * 96)
        with pytest.raises(WrongKeyLengthError):
            public.verify(b"bls message", b"\x00" * 96)

    def test_zero_scalar_rejected(self):
        with pytest.raises(CryptoError):
            KeyPair.new(KeyType.BLS12381_G1, b"\x00" * 32)


class TestWrongKeyType:
    def test_x25519_cannot_sign(self):
        key = KeyPair.random_pair(KeyType.X25519)
        with pytest.raises(WrongKeyTypeError):
            key.sign(b"data")

    def test_x25519_cannot_verify(self):
        key = KeyPair.random_pair(KeyType.X25519)
        with pytest.raises(WrongKeyTypeError):
            key.verify(b"data", b"\x00" * 64)

    @pytest.mark.parametrize("key_type", SIGNING_TYPES)
    def test_signing_keys_cannot_decrypt(self, key_type):
        key = KeyPair.random_pair(key_type)
        with pytest.raises(WrongKeyTypeError):
            key.decrypt(b"\x00" * 100)

    @pytest.mark.parametrize("key_type", SIGNING_TYPES)
    def test_signing_keys_cannot_encrypt(self, key_type):
        key = KeyPair.random_pair(key_type)
        with pytest.raises(WrongKeyTypeError):
            key.public_info().encrypt(b"data")

    def test_rsa_operations_unsupported(self):
        public = PublicKeyInfo.new(KeyType.RSA, b"\x01" * 256)
        with pytest.raises(UnsupportedKeyTypeError):
            public.verify(b"data", b"\x00" * 256)
        with pytest.raises(UnsupportedKeyTypeError):
            public.encrypt(b"data")
        key = KeyPair(public_key=public, private_key=b"\x02" * 32)
        with pytest.raises(UnsupportedKeyTypeError):
            key.sign(b"data")
        with pytest.raises(UnsupportedKeyTypeError):
            key.decrypt(b"data")


class TestEncryptDecrypt:
    def test_roundtrip(self):
        key = KeyPair.random_pair(KeyType.X25519)
        sealed = key.public_info().encrypt(b"for your eyes only")
        assert key.decrypt(sealed) == b"for your eyes only"

    def test_third_party_sender(self):
        recipient = KeyPair.new(KeyType.X25519, X25519_SECRET)
        sender_view = PublicKeyInfo.new(KeyType.X25519, X25519_PUBLIC)
        assert recipient.decrypt(sender_view.encrypt(b"hi")) == b"hi"

    def test_other_recipient_fails(self):
        from uwallet.errors import DecryptionError

        key = KeyPair.random_pair(KeyType.X25519)
        other = KeyPair.random_pair(KeyType.X25519)
        sealed = key.public_info().encrypt(b"data")
        with pytest.raises(DecryptionError):
            other.decrypt(sealed)


class TestSecretHandling:
    def test_repr_hides_private_key(self):
        key = KeyPair.new(KeyType.ED25519, ED25519_SEED)
        assert ED25519_SEED.hex() not in repr(key)
        assert "private_key" not in repr(key)

    def test_with_controller_returns_new_value(self):
        key = KeyPair.new(KeyType.ED25519, ED25519_SEED)
        controller = ["did:example:alice"]
        updated = key.with_controller(controller)
        controller.append("did:example:mallory")

        assert key.public_key.controller == []
        assert updated.public_key.controller == ["did:example:alice"]
        assert updated.private_key == key.private_key


class TestScheme:
    def test_base_is_abstract(self):
        with pytest.raises(TypeError):
            Scheme()

    def test_subclass_must_derive_and_generate(self):
        class SignOnly(Scheme):
            def sign(self, private_key, data):
                return b""

        with pytest.raises(TypeError):
            SignOnly()
