# Copyright © Endless
# Parts of the project are originally copyright © Aptos Foundation
# SPDX-License-Identifier: Apache-2.0

"""Secp256k1 ECDSA over SHA3-256, usable only through the single key wrapper.

Public keys are sent uncompressed with their 0x04 prefix (65 bytes), and the bare 64 byte point is accepted when
decoding. Signatures are the 64 byte r || s concatenation in low s form.
"""

from __future__ import annotations

import hashlib

from ecdsa import (
    SECP256k1,
    BadSignatureError,
    MalformedPointError,
    SigningKey,
    VerifyingKey,
    util,
)

from endless_sdk import asymmetric_crypto
from endless_sdk.asymmetric_crypto import bytes_from_hex, read_sized_bytes
from endless_sdk.bcs import Deserializer, Serializer
from endless_sdk.errors import CryptoError


ORDER = SECP256k1.generator.order()
UNCOMPRESSED_PREFIX = b"\x04"


def _low_s(signature: bytes) -> bytes:
    """Maps a signature to the twin with s <= n // 2, the only form the chain accepts."""
    r, s = util.sigdecode_string(signature, ORDER)
    if s > ORDER // 2:
        return util.sigencode_string(r, ORDER - s, ORDER)
    return signature


def _signing_key(secret: bytes) -> SigningKey:
    try:
        return SigningKey.from_string(secret, SECP256k1, hashlib.sha3_256)
    except MalformedPointError as e:
        raise CryptoError(f"Invalid secp256k1 private key: {e}") from e


def _verifying_key(point: bytes) -> VerifyingKey:
    if len(point) == PublicKey.LENGTH_WITH_PREFIX_LENGTH:
        if point[:1] != UNCOMPRESSED_PREFIX:
            raise CryptoError("secp256k1 public key must be uncompressed")
        point = point[1:]
    try:
        return VerifyingKey.from_string(point, SECP256k1, hashlib.sha3_256)
    except MalformedPointError as e:
        raise CryptoError(f"Invalid secp256k1 public key: {e}") from e


class PrivateKey(asymmetric_crypto.PrivateKey):
    LENGTH: int = 32

    key: SigningKey

    def __init__(self, key: SigningKey):
        self.key = key

    def __eq__(self, other: object):
        if not isinstance(other, PrivateKey):
            return NotImplemented
        return self.key.to_string() == other.key.to_string()

    def __str__(self):
        return self.hex()

    @staticmethod
    def from_str(value: str) -> PrivateKey:
        return PrivateKey(
            _signing_key(bytes_from_hex("secp256k1 private key", value, PrivateKey.LENGTH))
        )

    @staticmethod
    def random() -> PrivateKey:
        return PrivateKey(SigningKey.generate(curve=SECP256k1, hashfunc=hashlib.sha3_256))

    def hex(self) -> str:
        return "0x" + self.key.to_string().hex()

    def public_key(self) -> PublicKey:
        return PublicKey(self.key.verifying_key)

    def sign(self, data: bytes) -> Signature:
        # RFC 6979 nonces, so the same key and message always give the same signature
        signature = self.key.sign_deterministic(data, hashfunc=hashlib.sha3_256)
        return Signature(_low_s(signature))

    @staticmethod
    def deserialize(deserializer: Deserializer) -> PrivateKey:
        return PrivateKey(
            _signing_key(
                read_sized_bytes("secp256k1 private key", deserializer, PrivateKey.LENGTH)
            )
        )

    def serialize(self, serializer: Serializer):
        serializer.to_bytes(self.key.to_string())


class PublicKey(asymmetric_crypto.PublicKey):
    LENGTH: int = 64
    LENGTH_WITH_PREFIX_LENGTH: int = 65

    key: VerifyingKey

    def __init__(self, key: VerifyingKey):
        self.key = key

    def __eq__(self, other: object):
        if not isinstance(other, PublicKey):
            return NotImplemented
        return self.key.to_string() == other.key.to_string()

    def __str__(self) -> str:
        return self.hex()

    @staticmethod
    def from_str(value: str) -> PublicKey:
        point = bytes_from_hex(
            "secp256k1 public key",
            value,
            PublicKey.LENGTH,
            PublicKey.LENGTH_WITH_PREFIX_LENGTH,
        )
        return PublicKey(_verifying_key(point))

    def hex(self) -> str:
        return "0x" + self.to_crypto_bytes().hex()

    def verify(self, data: bytes, signature: asymmetric_crypto.Signature) -> bool:
        if not isinstance(signature, Signature):
            return False
        try:
            # (r, n - s) verifies as well, only the low s twin is accepted
            if _low_s(signature.data()) != signature.data():
                return False
            self.key.verify(signature.data(), data)
        except (BadSignatureError, util.MalformedSignature):
            return False
        return True

    def to_crypto_bytes(self) -> bytes:
        return UNCOMPRESSED_PREFIX + self.key.to_string()

    @staticmethod
    def deserialize(deserializer: Deserializer) -> PublicKey:
        point = read_sized_bytes(
            "secp256k1 public key",
            deserializer,
            PublicKey.LENGTH,
            PublicKey.LENGTH_WITH_PREFIX_LENGTH,
        )
        return PublicKey(_verifying_key(point))

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
        return self.hex()

    def hex(self) -> str:
        return "0x" + self.signature.hex()

    @staticmethod
    def from_str(value: str) -> Signature:
        return Signature(bytes_from_hex("secp256k1 signature", value, Signature.LENGTH))

    @staticmethod
    def get_null_signature() -> Signature:
        return Signature(bytes(Signature.LENGTH))

    def data(self) -> bytes:
        return self.signature

    @staticmethod
    def deserialize(deserializer: Deserializer) -> Signature:
        return Signature(
            read_sized_bytes("secp256k1 signature", deserializer, Signature.LENGTH)
        )

    def serialize(self, serializer: Serializer):
        serializer.to_bytes(self.signature)
