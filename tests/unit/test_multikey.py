# Copyright © Endless
# Parts of the project are originally copyright © Aptos Foundation
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import unittest

from endless_sdk import ed25519, secp256k1_ecdsa
from endless_sdk.account import Account, MultiKeyAccount
from endless_sdk.asymmetric_crypto_wrapper import (
    MultiPublicKey,
    MultiSignature,
    PublicKey,
    Signature,
)
from endless_sdk.authenticator import (
    AccountAuthenticator,
    Authenticator,
    MultiKeyAuthenticator,
    SingleSenderAuthenticator,
)
from endless_sdk.bcs import Deserializer, Serializer
from endless_sdk.errors import CryptoError, EncodingError

AUTHENTICATOR_HEX = (
    "040303002020fdbac9b10b7587bba7b5bc163bce69e796d71e4ed44c10fcb4488689f7a144"
    "0141049b8327d929a0e45285c04d19c9fffbee065c266b701972922d807228120e43f34ad6"
    "8ac77f6ec0205fe39f7c5b6055dad973a03464a3a743302de0feaf6ec6d90141049b8327d9"
    "29a0e45285c04d19c9fffbee065c266b701972922d807228120e43f34ad68ac77f6ec0205f"
    "e39f7c5b6055dad973a03464a3a743302de0feaf6ec6d902020040a9839b56be99b48c285e"
    "c252cf9bf779e42d3b62eb8664c31b18c1fdb29b574b1bfde0b89aedddb9fb8304ca5913c9"
    "feefea75d332d8f72ac3ab4598a884ea0801402bd50683abe6332a496121f8ec7db7be351f"
    "49b0087fa0dfb258c469822bd52e59fc9344944a1f338b0f0a61c7173453e0cd09cf961e45"
    "cb9396808fa67eeef301c0"
)


class Test(unittest.TestCase):
    def setUp(self):
        self.private_keys = [
            ed25519.PrivateKey.random(),
            secp256k1_ecdsa.PrivateKey.random(),
            ed25519.PrivateKey.random(),
        ]
        self.multi_public_key = MultiPublicKey(
            [key.public_key() for key in self.private_keys], 2
        )
        self.message = b"multikey"

    def sign(self, indexes: list[int]) -> MultiSignature:
        return MultiSignature(
            [(idx, self.private_keys[idx].sign(self.message)) for idx in indexes]
        )

    def test_authenticator_vector(self):
        authenticator = Deserializer(bytes.fromhex(AUTHENTICATOR_HEX)).struct(
            Authenticator
        )
        self.assertEqual(authenticator.variant, Authenticator.SINGLE_SENDER)
        account_authenticator = authenticator.authenticator.sender
        self.assertEqual(account_authenticator.variant, AccountAuthenticator.MULTI_KEY)

        multi_key = account_authenticator.authenticator
        self.assertEqual(len(multi_key.public_key.keys), 3)
        self.assertEqual(multi_key.public_key.threshold, 2)
        self.assertEqual(multi_key.signature.bitmap, b"\xc0")
        self.assertEqual([idx for idx, _ in multi_key.signature.signatures], [0, 1])

        ser = Serializer()
        authenticator.serialize(ser)
        self.assertEqual(ser.output().hex(), AUTHENTICATOR_HEX)

        rebuilt = Authenticator(
            SingleSenderAuthenticator(
                AccountAuthenticator(
                    MultiKeyAuthenticator(multi_key.public_key, multi_key.signature)
                )
            )
        )
        self.assertEqual(rebuilt, authenticator)

    def test_bitmap(self):
        self.assertEqual(MultiSignature.bitmap_from_indexes([0, 1]), b"\xc0")
        self.assertEqual(MultiSignature.bitmap_from_indexes([0]), b"\x80")
        self.assertEqual(MultiSignature.bitmap_from_indexes([9]), b"\x00\x40")
        self.assertEqual(MultiSignature.bitmap_from_indexes([31]), b"\x00\x00\x00\x01")
        self.assertEqual(MultiSignature.indexes_from_bitmap(b"\x00\x40"), [9])

    def test_two_of_three(self):
        self.assertTrue(self.multi_public_key.verify(self.message, self.sign([0, 1])))
        self.assertTrue(self.multi_public_key.verify(self.message, self.sign([0, 2])))
        self.assertTrue(
            self.multi_public_key.verify(self.message, self.sign([0, 1, 2]))
        )
        self.assertFalse(self.multi_public_key.verify(self.message, self.sign([1])))
        self.assertFalse(self.multi_public_key.verify(b"other", self.sign([0, 1])))

    def test_wrong_position(self):
        signature = MultiSignature(
            [
                (0, self.private_keys[0].sign(self.message)),
                (1, self.private_keys[2].sign(self.message)),
            ]
        )
        self.assertFalse(self.multi_public_key.verify(self.message, signature))

    def test_forged_signature_outside_bitmap(self):
        signatures = self.sign([0, 1, 2]).signatures
        forged = MultiSignature(signatures, MultiSignature.bitmap_from_indexes([0, 1]))
        self.assertFalse(forged.is_well_formed())
        self.assertFalse(self.multi_public_key.verify(self.message, forged))

    def test_index_beyond_key_count(self):
        signature = MultiSignature(
            [
                (0, self.private_keys[0].sign(self.message)),
                (5, self.private_keys[1].sign(self.message)),
            ]
        )
        self.assertFalse(self.multi_public_key.verify(self.message, signature))

    def test_key_range_checks(self):
        keys = [
            ed25519.PrivateKey.random().public_key()
            for _ in range(MultiPublicKey.MAX_KEYS + 1)
        ]
        with self.assertRaises(CryptoError):
            MultiPublicKey([], 1)
        with self.assertRaises(CryptoError):
            MultiPublicKey(keys, 1)
        with self.assertRaises(CryptoError):
            MultiPublicKey(keys[0:4], 0)
        with self.assertRaises(CryptoError):
            MultiPublicKey(keys[0:4], 5)

    def test_public_key_serialization(self):
        ser = Serializer()
        self.multi_public_key.serialize(ser)
        self.assertEqual(ser.output()[0], 3)
        self.assertEqual(ser.output()[-1], 2)
        self.assertEqual(MultiPublicKey.from_bytes(ser.output()), self.multi_public_key)

    def test_signature_count_mismatch(self):
        signature = self.sign([0, 1])
        ser = Serializer()
        ser.sequence([sig for _, sig in signature.signatures], Serializer.struct)
        ser.to_bytes(MultiSignature.bitmap_from_indexes([0, 1, 2]))
        with self.assertRaises(EncodingError):
            MultiSignature.deserialize(Deserializer(ser.output()))

    def test_signature_serialization(self):
        signature = self.sign([0, 2])
        ser = Serializer()
        signature.serialize(ser)
        self.assertEqual(ser.output()[-2:], b"\x01\xa0")
        self.assertEqual(MultiSignature.deserialize(Deserializer(ser.output())), signature)

    def test_unset_signatures(self):
        signature = self.sign([0, 1])
        signature.unset_signatures()
        self.assertEqual(
            signature.signatures,
            [
                (0, Signature(ed25519.Signature.get_null_signature())),
                (1, Signature(secp256k1_ecdsa.Signature.get_null_signature())),
            ],
        )
        self.assertEqual(signature.bitmap, b"\xc0")

    def test_from_key_map(self):
        signature = MultiSignature.from_key_map(
            self.multi_public_key,
            [
                (self.private_keys[2].public_key(), self.private_keys[2].sign(self.message)),
                (self.private_keys[0].public_key(), self.private_keys[0].sign(self.message)),
            ],
        )
        self.assertEqual([idx for idx, _ in signature.signatures], [0, 2])
        self.assertTrue(self.multi_public_key.verify(self.message, signature))

    def test_wrapped_key(self):
        wrapped = PublicKey(self.private_keys[1].public_key())
        self.assertEqual(self.multi_public_key.index_of(wrapped), 1)
        with self.assertRaises(CryptoError):
            self.multi_public_key.index_of(ed25519.PrivateKey.random().public_key())


class MultiKeyAccountTest(unittest.TestCase):
    def setUp(self):
        self.accounts = [
            Account.generate(),
            Account.generate_secp256k1_ecdsa(),
            Account.generate(),
        ]
        self.multi_public_key = MultiPublicKey(
            [account.public_key() for account in self.accounts], 2
        )

    def test_signers_sorted_by_index(self):
        multi_key_account = MultiKeyAccount(
            self.multi_public_key, [self.accounts[2], self.accounts[0]]
        )
        self.assertEqual([idx for idx, _ in multi_key_account.signers], [0, 2])

        signature = multi_key_account.sign(b"payload")
        self.assertEqual(signature.bitmap, b"\xa0")
        self.assertTrue(self.multi_public_key.verify(b"payload", signature))

    def test_address_from_auth_key(self):
        multi_key_account = MultiKeyAccount(self.multi_public_key, self.accounts[0:2])
        self.assertEqual(
            multi_key_account.address(),
            multi_key_account.auth_key().account_address(),
        )

    def test_below_threshold(self):
        with self.assertRaises(CryptoError):
            MultiKeyAccount(self.multi_public_key, [self.accounts[0]])

    def test_unknown_signer(self):
        with self.assertRaises(CryptoError):
            MultiKeyAccount(self.multi_public_key, [self.accounts[0], Account.generate()])

    def test_duplicate_signer(self):
        with self.assertRaises(CryptoError):
            MultiKeyAccount(self.multi_public_key, [self.accounts[0], self.accounts[0]])
        with self.assertRaises(CryptoError):
            MultiKeyAccount(
                self.multi_public_key,
                [self.accounts[1], self.accounts[0], self.accounts[1]],
            )


if __name__ == "__main__":
    unittest.main()
