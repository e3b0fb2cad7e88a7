# Copyright © Endless
# Parts of the project are originally copyright © Aptos Foundation
# SPDX-License-Identifier: Apache-2.0

"""Scheme-tagged keys and signatures, and the k-of-n MultiKey built on top of them."""

from __future__ import annotations

from endless_sdk import asymmetric_crypto, ed25519, secp256k1_ecdsa
from endless_sdk.bcs import Deserializer, Serializer
from endless_sdk.errors import CryptoError, EncodingError


class PublicKey(asymmetric_crypto.PublicKey):
    ED25519: int = 0
    SECP256K1_ECDSA: int = 1

    variant: int
    public_key: asymmetric_crypto.PublicKey

    def __init__(self, public_key: asymmetric_crypto.PublicKey):
        if isinstance(public_key, ed25519.PublicKey):
            self.variant = PublicKey.ED25519
        elif isinstance(public_key, secp256k1_ecdsa.PublicKey):
            self.variant = PublicKey.SECP256K1_ECDSA
        else:
            raise CryptoError(f"Unsupported public key type: {type(public_key)}")
        self.public_key = public_key

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PublicKey):
            return NotImplemented
        return self.variant == other.variant and self.public_key == other.public_key

    def __str__(self) -> str:
        return self.public_key.__str__()

    def to_crypto_bytes(self) -> bytes:
        ser = Serializer()
        self.serialize(ser)
        return ser.output()

    def verify(self, data: bytes, signature: asymmetric_crypto.Signature) -> bool:
        if isinstance(signature, Signature):
            signature = signature.signature
        return self.public_key.verify(data, signature)

    def null_signature(self) -> Signature:
        if self.variant == PublicKey.ED25519:
            return Signature(ed25519.Signature.get_null_signature())
        return Signature(secp256k1_ecdsa.Signature.get_null_signature())

    @staticmethod
    def deserialize(deserializer: Deserializer) -> PublicKey:
        variant = deserializer.variant_index(2)

        if variant == PublicKey.ED25519:
            public_key: asymmetric_crypto.PublicKey = ed25519.PublicKey.deserialize(
                deserializer
            )
        else:
            public_key = secp256k1_ecdsa.PublicKey.deserialize(deserializer)

        return PublicKey(public_key)

    def serialize(self, serializer: Serializer):
        serializer.uleb128(self.variant)
        serializer.struct(self.public_key)


class Signature(asymmetric_crypto.Signature):
    ED25519: int = 0
    SECP256K1_ECDSA: int = 1

    variant: int
    signature: asymmetric_crypto.Signature

    def __init__(self, signature: asymmetric_crypto.Signature):
        if isinstance(signature, ed25519.Signature):
            self.variant = Signature.ED25519
        elif isinstance(signature, secp256k1_ecdsa.Signature):
            self.variant = Signature.SECP256K1_ECDSA
        else:
            raise CryptoError(f"Unsupported signature type: {type(signature)}")
        self.signature = signature

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Signature):
            return NotImplemented
        return self.variant == other.variant and self.signature == other.signature

    def __str__(self) -> str:
        return self.signature.__str__()

    def __repr__(self) -> str:
        return self.__str__()

    def unset(self) -> Signature:
        """A zeroed signature of the same scheme, as used for simulation."""
        if self.variant == Signature.ED25519:
            return Signature(ed25519.Signature.get_null_signature())
        return Signature(secp256k1_ecdsa.Signature.get_null_signature())

    @staticmethod
    def deserialize(deserializer: Deserializer) -> Signature:
        variant = deserializer.variant_index(2)

        if variant == Signature.ED25519:
            signature: asymmetric_crypto.Signature = ed25519.Signature.deserialize(
                deserializer
            )
        else:
            signature = secp256k1_ecdsa.Signature.deserialize(deserializer)

        return Signature(signature)

    def serialize(self, serializer: Serializer):
        serializer.uleb128(self.variant)
        serializer.struct(self.signature)


class MultiPublicKey(asymmetric_crypto.PublicKey):
    """A k-of-n public key over keys of possibly different schemes."""

    keys: list[PublicKey]
    threshold: int

    MIN_KEYS = 1
    MAX_KEYS = 32
    MIN_THRESHOLD = 1

    def __init__(self, keys: list[asymmetric_crypto.PublicKey], threshold: int):
        if not self.MIN_KEYS <= len(keys) <= self.MAX_KEYS:
            raise CryptoError(
                f"Must have between {self.MIN_KEYS} and {self.MAX_KEYS} keys."
            )
        if not self.MIN_THRESHOLD <= threshold <= len(keys):
            raise CryptoError(
                f"Threshold must be between {self.MIN_THRESHOLD} and {len(keys)}."
            )

        self.keys = [
            key if isinstance(key, PublicKey) else PublicKey(key) for key in keys
        ]
        self.threshold = threshold

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MultiPublicKey):
            return NotImplemented
        return self.keys == other.keys and self.threshold == other.threshold

    def __str__(self) -> str:
        return f"{self.threshold}-of-{len(self.keys)} MultiKey public key"

    def index_of(self, key: asymmetric_crypto.PublicKey) -> int:
        """Position of `key` in the key set, raises `CryptoError` when it is not part of it."""
        wrapped = key if isinstance(key, PublicKey) else PublicKey(key)
        for idx, candidate in enumerate(self.keys):
            if candidate == wrapped:
                return idx
        raise CryptoError(f"Public key {key} is not part of {self}")

    def verify(self, data: bytes, signature: asymmetric_crypto.Signature) -> bool:
        if not isinstance(signature, MultiSignature):
            return False
        if not signature.is_well_formed():
            return False
        if len(signature.signatures) < self.threshold:
            return False
        for idx, sig in signature.signatures:
            if idx >= len(self.keys):
                return False
            if not self.keys[idx].verify(data, sig):
                return False
        return True

    def to_crypto_bytes(self) -> bytes:
        ser = Serializer()
        self.serialize(ser)
        return ser.output()

    @staticmethod
    def deserialize(deserializer: Deserializer) -> MultiPublicKey:
        keys = deserializer.sequence(PublicKey.deserialize)
        threshold = deserializer.u8()
        try:
            return MultiPublicKey(keys, threshold)
        except CryptoError as e:
            raise EncodingError(str(e)) from e

    def serialize(self, serializer: Serializer):
        serializer.sequence(self.keys, Serializer.struct)
        serializer.u8(self.threshold)


class MultiSignature(asymmetric_crypto.Signature):
    """Signatures of a subset of a `MultiPublicKey`'s keys, tagged with the signer indexes.

    On the wire the indexes become a bitmap, most significant bit first: signer `i` sets `0x80 >> (i % 8)` in byte
    `i // 8`. The bitmap only uses as many bytes as the highest index needs.
    """

    signatures: list[tuple[int, Signature]]
    bitmap: bytes
    MAX_SIGNATURES: int = 32
    BITMAP_NUM_OF_BYTES: int = 4

    def __init__(
        self,
        signatures: list[tuple[int, asymmetric_crypto.Signature]],
        bitmap: bytes | None = None,
    ):
        indexes = [idx for idx, _ in signatures]
        if len(set(indexes)) != len(indexes):
            raise CryptoError("Duplicate signer index")
        for idx in indexes:
            if not 0 <= idx < self.MAX_SIGNATURES:
                raise CryptoError(f"Signer index {idx} exceeds maximum value")

        self.signatures = sorted(
            (
                (idx, sig if isinstance(sig, Signature) else Signature(sig))
                for idx, sig in signatures
            ),
            key=lambda entry: entry[0],
        )
        self.bitmap = (
            MultiSignature.bitmap_from_indexes(indexes) if bitmap is None else bitmap
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MultiSignature):
            return NotImplemented
        return self.signatures == other.signatures and self.bitmap == other.bitmap

    def __str__(self) -> str:
        return f"{self.signatures}"

    @staticmethod
    def bitmap_from_indexes(indexes: list[int]) -> bytes:
        if not indexes:
            return b""
        bitmap = bytearray(max(indexes) // 8 + 1)
        for idx in indexes:
            bitmap[idx // 8] |= 0x80 >> (idx % 8)
        return bytes(bitmap)

    @staticmethod
    def indexes_from_bitmap(bitmap: bytes) -> list[int]:
        return [
            idx for idx in range(len(bitmap) * 8) if bitmap[idx // 8] & (0x80 >> (idx % 8))
        ]

    def is_well_formed(self) -> bool:
        """Whether every signature sits at a position set in the bitmap and vice versa."""
        return [idx for idx, _ in self.signatures] == MultiSignature.indexes_from_bitmap(
            self.bitmap
        )

    @staticmethod
    def from_key_map(
        public_key: MultiPublicKey,
        signatures_map: list[tuple[asymmetric_crypto.PublicKey, asymmetric_crypto.Signature]],
    ) -> MultiSignature:
        return MultiSignature(
            [(public_key.index_of(key), signature) for key, signature in signatures_map]
        )

    def unset_signatures(self):
        self.signatures = [(idx, sig.unset()) for idx, sig in self.signatures]

    @staticmethod
    def deserialize(deserializer: Deserializer) -> MultiSignature:
        signatures = deserializer.sequence(Signature.deserialize)
        bitmap = deserializer.to_bytes()
        if len(bitmap) > MultiSignature.BITMAP_NUM_OF_BYTES:
            raise EncodingError(f"MultiKey bitmap is too long: {len(bitmap)} bytes")

        indexes = MultiSignature.indexes_from_bitmap(bitmap)
        if len(indexes) != len(signatures):
            raise EncodingError(
                f"MultiKey bitmap marks {len(indexes)} signers but {len(signatures)} signatures are present"
            )
        return MultiSignature(list(zip(indexes, signatures)), bitmap)

    def serialize(self, serializer: Serializer):
        serializer.sequence([sig for _, sig in self.signatures], Serializer.struct)
        serializer.to_bytes(self.bitmap)
