# Copyright © Endless
# Parts of the project are originally copyright © Aptos Foundation
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import Any

from endless_sdk.account_address import AccountAddress
from endless_sdk.bcs import Deserializable, Deserializer, Serializable, Serializer
from endless_sdk.errors import EncodingError


class TypeTag(Deserializable, Serializable):
    """TypeTag represents a primitive in Move."""

    BOOL: int = 0
    U8: int = 1
    U64: int = 2
    U128: int = 3
    ACCOUNT_ADDRESS: int = 4
    SIGNER: int = 5
    VECTOR: int = 6
    STRUCT: int = 7
    U16: int = 8
    U32: int = 9
    U256: int = 10

    value: Any

    def __init__(self, value: Any):
        self.value = value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TypeTag):
            return NotImplemented
        return (
            self.value.variant() == other.value.variant() and self.value == other.value
        )

    def __str__(self):
        return self.value.__str__()

    def __repr__(self):
        return self.__str__()

    @staticmethod
    def from_str(type_tag: str) -> TypeTag:
        """Parses the Move text form of a type, e.g. `u64`, `vector<address>` or `0x1::object::Object<0x1::m::S>`."""
        type_tag = type_tag.strip()
        primitive = _PRIMITIVES.get(type_tag)
        if primitive is not None:
            return TypeTag(PrimitiveTag(primitive))
        if type_tag.startswith("vector<") and type_tag.endswith(">"):
            return TypeTag(VectorTag(TypeTag.from_str(type_tag[len("vector<") : -1])))
        if "::" in type_tag:
            return TypeTag(StructTag.from_str(type_tag))
        raise EncodingError(f"Unable to parse type tag: {type_tag}")

    @staticmethod
    def deserialize(deserializer: Deserializer) -> TypeTag:
        variant = deserializer.variant_index(TypeTag.U256 + 1)
        if variant == TypeTag.VECTOR:
            return TypeTag(VectorTag.deserialize(deserializer))
        elif variant == TypeTag.STRUCT:
            return TypeTag(StructTag.deserialize(deserializer))
        return TypeTag(PrimitiveTag(variant))

    def serialize(self, serializer: Serializer):
        serializer.uleb128(self.value.variant())
        serializer.struct(self.value)


_PRIMITIVES: dict[str, int] = {
    "bool": TypeTag.BOOL,
    "u8": TypeTag.U8,
    "u16": TypeTag.U16,
    "u32": TypeTag.U32,
    "u64": TypeTag.U64,
    "u128": TypeTag.U128,
    "u256": TypeTag.U256,
    "address": TypeTag.ACCOUNT_ADDRESS,
    "signer": TypeTag.SIGNER,
}

_PRIMITIVE_NAMES: dict[int, str] = {value: key for key, value in _PRIMITIVES.items()}


class PrimitiveTag:
    """A type without parameters; only its variant index is written."""

    _variant: int

    def __init__(self, variant: int):
        if variant not in _PRIMITIVE_NAMES:
            raise EncodingError(f"{variant} is not a primitive type tag")
        self._variant = variant

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PrimitiveTag):
            return NotImplemented
        return self._variant == other._variant

    def __str__(self):
        return _PRIMITIVE_NAMES[self._variant]

    def variant(self):
        return self._variant

    def serialize(self, serializer: Serializer):
        pass


class VectorTag:
    inner: TypeTag

    def __init__(self, inner: TypeTag):
        self.inner = inner

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VectorTag):
            return NotImplemented
        return self.inner == other.inner

    def __str__(self):
        return f"vector<{self.inner}>"

    def variant(self):
        return TypeTag.VECTOR

    @staticmethod
    def deserialize(deserializer: Deserializer) -> VectorTag:
        return VectorTag(TypeTag.deserialize(deserializer))

    def serialize(self, serializer: Serializer):
        serializer.struct(self.inner)


class StructTag(Deserializable, Serializable):
    address: AccountAddress
    module: str
    name: str
    type_args: list[TypeTag]

    def __init__(
        self,
        address: AccountAddress,
        module: str,
        name: str,
        type_args: list[TypeTag],
    ):
        self.address = address
        self.module = module
        self.name = name
        self.type_args = type_args

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StructTag):
            return NotImplemented
        return (
            self.address == other.address
            and self.module == other.module
            and self.name == other.name
            and self.type_args == other.type_args
        )

    def __str__(self) -> str:
        value = f"{self.address}::{self.module}::{self.name}"
        if len(self.type_args) > 0:
            value += f"<{', '.join(str(arg) for arg in self.type_args)}>"
        return value

    @staticmethod
    def from_str(type_tag: str) -> StructTag:
        type_tag = type_tag.strip()
        type_args: list[TypeTag] = []
        head = type_tag
        if "<" in type_tag:
            if not type_tag.endswith(">"):
                raise EncodingError(f"Unbalanced type arguments in {type_tag}")
            start = type_tag.index("<")
            head = type_tag[:start]
            type_args = [
                TypeTag.from_str(arg)
                for arg in split_type_args(type_tag[start + 1 : -1])
            ]

        split = head.split("::")
        if len(split) != 3 or not all(split):
            raise EncodingError(f"Invalid struct tag: {type_tag}")
        return StructTag(
            AccountAddress.from_str_relaxed(split[0]), split[1], split[2], type_args
        )

    def variant(self):
        return TypeTag.STRUCT

    @staticmethod
    def deserialize(deserializer: Deserializer) -> StructTag:
        address = deserializer.struct(AccountAddress)
        module = deserializer.str()
        name = deserializer.str()
        type_args = deserializer.sequence(TypeTag.deserialize)
        return StructTag(address, module, name, type_args)

    def serialize(self, serializer: Serializer):
        self.address.serialize(serializer)
        serializer.str(self.module)
        serializer.str(self.name)
        serializer.sequence(self.type_args, Serializer.struct)


def split_type_args(type_args: str) -> list[str]:
    """Splits a comma separated list of types on its top level commas only."""
    args: list[str] = []
    depth = 0
    current = ""
    for letter in type_args:
        if letter == "<":
            depth += 1
        elif letter == ">":
            depth -= 1
            if depth < 0:
                raise EncodingError(f"Unbalanced type arguments in {type_args}")
        if letter == "," and depth == 0:
            args.append(current.strip())
            current = ""
        else:
            current += letter
    if depth != 0:
        raise EncodingError(f"Unbalanced type arguments in {type_args}")
    if current.strip():
        args.append(current.strip())
    return args
