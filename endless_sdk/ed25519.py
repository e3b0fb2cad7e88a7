# Copyright © Endless
# Parts of the project are originally copyright © Aptos Foundation
# SPDX-License-Identifier: Apache-2.0

"""Ed25519 keys and signatures, the default scheme of Endless accounts.

Keys and signatures travel as length prefixed raw bytes: 32 for either key and 64 for a signature. Verification runs
through libsodium, which already refuses non canonical signatures and small order keys.
"""

from __future__ import annotations

from nacl.exceptions import BadSignatureError, ValueError as NaclValueError
from nacl.signing import SigningKey, VerifyKey

from endless_sdk import asymmetric_crypto
from endless_sdk.asymmetric_crypto import bytes_from_hex, read_sized_bytes
from endless_sdk.bcs import Deserializer, Serializer
from endless_sdk.errors import CryptoError


def _verify_key(raw: bytes) -> VerifyKey:
    try:
        return VerifyKey(raw)
    except NaclValueError as e:
        raise CryptoError(f"Invalid ed25519 public key: {e}") from e


class PrivateKey(asymmetric_crypto.PrivateKey):
    LENGTH: int = 32

    key: SigningKey

    def __init__(self, key: SigningKey):
        self.key = key

    def __eq__(self, other: object):
        if not isinstance(other, PrivateKey):
            return NotImplemented
        return bytes(self.key) == bytes(other.key)

    def __str__(self):
        return self.hex()

    @staticmethod
    def from_str(value: str) -> PrivateKey:
        return PrivateKey(
            SigningKey(bytes_from_hex("ed25519 private key", value, PrivateKey.LENGTH))
        )

    @staticmethod
    def random() -> PrivateKey:
        return PrivateKey(SigningKey.generate())

    def hex(self) -> str:
        return "0x" + bytes(self.key).hex()

    def public_key(self) -> PublicKey:
        return PublicKey(self.key.verify_key)

    def sign(self, data: bytes) -> Signature:
        # Detached: the signed message itself is never part of the signature bytes
        return Signature(self.key.sign(data).signature)

    @staticmethod
    def deserialize(deserializer: Deserializer) -> PrivateKey:
        seed = read_sized_bytes("ed25519 private key", deserializer, PrivateKey.LENGTH)
        return PrivateKey(SigningKey(seed))

    def serialize(self, serializer: Serializer):
        serializer.to_bytes(bytes(self.key))


class PublicKey(asymmetric_crypto.PublicKey):
    LENGTH: int = 32

    key: VerifyKey

    def __init__(self, key: VerifyKey):
        self.key = key

    def __eq__(self, other: object):
        if not isinstance(other, PublicKey):
            return NotImplemented
        return bytes(self.key) == bytes(other.key)

    def __str__(self) -> str:
        return "0x" + self.to_crypto_bytes().hex()

    @staticmethod
    def from_str(value: str) -> PublicKey:
        return PublicKey(
            _verify_key(bytes_from_hex("ed25519 public key", value, PublicKey.LENGTH))
        )

    def verify(self, data: bytes, signature: asymmetric_crypto.Signature) -> bool:
        if not isinstance(signature, Signature):
            return False
        try:
            self.key.verify(data, signature.data())
        except (BadSignatureError, NaclValueError):
            return False
        return True

    def to_crypto_bytes(self) -> bytes:
        return bytes(self.key)

    @staticmethod
    def deserialize(deserializer: Deserializer) -> PublicKey:
        return PublicKey(
            _verify_key(
                read_sized_bytes("ed25519 public key", deserializer, PublicKey.LENGTH)
            )
        )

    def serialize(self, serializer: Serializer):
        serializer.to_bytes(self.to_crypto_bytes())


class Signature(asymmetric_crypto.Signature):
    LENGTH: int = 64

    signature: bytes

    def __init__(self, signature: bytes):
        self.signature = signature

    def __eq__(self, other: object):
        if not isinstance(other, Signature):
            return NotImplemented
        return self.signature == other.signature

    def __str__(self) -> str:
        return "0x" + self.signature.hex()

    @staticmethod
    def from_str(value: str) -> Signature:
        return Signature(bytes_from_hex("ed25519 signature", value, Signature.LENGTH))

    @staticmethod
    def get_null_signature() -> Signature:
        """All zero bytes, what simulations carry in place of a real signature."""
        return Signature(bytes(Signature.LENGTH))

    def data(self) -> bytes:
        return self.signature

    @staticmethod
    def deserialize(deserializer: Deserializer) -> Signature:
        return Signature(
            read_sized_bytes("ed25519 signature", deserializer, Signature.LENGTH)
        )

    def serialize(self, serializer: Serializer):
        serializer.to_bytes(self.signature)
