# Copyright © Endless
# Parts of the project are originally copyright © Aptos Foundation
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import unittest

from endless_sdk.account_address import AccountAddress
from endless_sdk.bcs import Deserializer
from endless_sdk.errors import EncodingError
from endless_sdk.type_tag import (
    PrimitiveTag,
    StructTag,
    TypeTag,
    VectorTag,
    split_type_args,
)


class Test(unittest.TestCase):
    def test_nested_structs(self):
        l0 = "0x0::l0::L0"
        l10 = "0x1::l10::L10"
        l20 = "0x2::l20::L20"
        l11 = "0x1::l11::L11"
        composite = f"{l0}<{l10}<{l20}>, {l11}>"
        derived = StructTag.from_str(composite)
        self.assertEqual(composite, f"{derived}")
        in_bytes = derived.to_bytes()
        from_bytes = StructTag.from_bytes(in_bytes)
        self.assertEqual(derived, from_bytes)

    def test_primitives(self):
        for name, variant in [
            ("bool", TypeTag.BOOL),
            ("u8", TypeTag.U8),
            ("u16", TypeTag.U16),
            ("u32", TypeTag.U32),
            ("u64", TypeTag.U64),
            ("u128", TypeTag.U128),
            ("u256", TypeTag.U256),
            ("address", TypeTag.ACCOUNT_ADDRESS),
            ("signer", TypeTag.SIGNER),
        ]:
            tag = TypeTag.from_str(name)
            self.assertEqual(tag, TypeTag(PrimitiveTag(variant)))
            self.assertEqual(str(tag), name)
            self.assertEqual(tag.to_bytes(), bytes([variant]))

        with self.assertRaises(EncodingError):
            PrimitiveTag(TypeTag.VECTOR)

    def test_vector(self):
        tag = TypeTag.from_str("vector<vector<u8>>")
        self.assertEqual(
            tag,
            TypeTag(VectorTag(TypeTag(VectorTag(TypeTag(PrimitiveTag(TypeTag.U8)))))),
        )
        self.assertEqual(tag.to_bytes(), b"\x06\x06\x01")
        self.assertEqual(TypeTag.from_bytes(tag.to_bytes()), tag)
        self.assertEqual(str(tag), "vector<vector<u8>>")

    def test_struct_with_type_args(self):
        tag = TypeTag.from_str("0x1::object::Object<0x1::fungible_asset::Metadata>")
        self.assertEqual(tag.value.variant(), TypeTag.STRUCT)
        self.assertEqual(tag.value.address, AccountAddress.from_str("0x1"))
        self.assertEqual(tag.value.module, "object")
        self.assertEqual(tag.value.name, "Object")
        self.assertEqual(
            tag.value.type_args,
            [TypeTag(StructTag.from_str("0x1::fungible_asset::Metadata"))],
        )
        self.assertEqual(TypeTag.from_bytes(tag.to_bytes()), tag)

    def test_mixed_type_args(self):
        tag = StructTag.from_str("0x1::table::Table<address, vector<0x1::string::String>>")
        self.assertEqual(
            tag.type_args,
            [
                TypeTag.from_str("address"),
                TypeTag(VectorTag(TypeTag.from_str("0x1::string::String"))),
            ],
        )

    def test_split_type_args(self):
        self.assertEqual(
            split_type_args("u8, 0x1::a::B<u8, u16>, vector<u64>"),
            ["u8", "0x1::a::B<u8, u16>", "vector<u64>"],
        )
        self.assertEqual(split_type_args(""), [])

    def test_invalid(self):
        for invalid in ["u512", "0x1::module", "0x1::a::B<u8", "0x1::a::B<u8>>", "vector<>"]:
            with self.assertRaises(EncodingError, msg=invalid):
                TypeTag.from_str(invalid)

        with self.assertRaises(EncodingError):
            TypeTag.deserialize(Deserializer(b"\x0b"))


if __name__ == "__main__":
    unittest.main()
