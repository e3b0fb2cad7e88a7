# Copyright © Endless
# Parts of the project are originally copyright © Aptos Foundation
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import Protocol

from endless_sdk.bcs import Deserializable, Deserializer, Serializable
from endless_sdk.errors import EncodingError


class PrivateKey(Deserializable, Serializable, Protocol):
    def hex(self) -> str: ...

    def public_key(self) -> PublicKey: ...

    def sign(self, data: bytes) -> Signature: ...


class PublicKey(Deserializable, Serializable, Protocol):
    def to_crypto_bytes(self) -> bytes:
        """
        The bytes hashed into the authentication key. For most keys this is the BCS encoding,
        key types that need a different preimage override it.
        """
        ...

    def verify(self, data: bytes, signature: Signature) -> bool: ...


class Signature(Deserializable, Serializable, Protocol): ...


def _check_length(kind: str, value: bytes, lengths: tuple[int, ...]) -> bytes:
    if len(value) not in lengths:
        expected = " or ".join(str(length) for length in lengths)
        raise EncodingError(f"{kind} must be {expected} bytes, found {len(value)}")
    return value


def bytes_from_hex(kind: str, value: str, *lengths: int) -> bytes:
    """Decodes an optionally 0x prefixed hex string that must hold one of `lengths` bytes."""
    if value[0:2] == "0x":
        value = value[2:]
    try:
        decoded = bytes.fromhex(value)
    except ValueError as e:
        raise EncodingError(f"{kind} is not valid hex: {value}") from e
    return _check_length(kind, decoded, lengths)


def read_sized_bytes(kind: str, deserializer: Deserializer, *lengths: int) -> bytes:
    """Reads length prefixed bytes, rejecting any length other than `lengths`."""
    return _check_length(kind, deserializer.to_bytes(), lengths)
