# Copyright © Endless
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import copy
import unittest

from endless_sdk import bcs, ed25519, secp256k1_ecdsa
from endless_sdk.account_address import AccountAddress, AuthenticationKey
from endless_sdk.authenticator import (
    AccountAuthenticator,
    Authenticator,
    Ed25519Authenticator,
    FeePayerAuthenticator,
    MultiAgentAuthenticator,
    MultiAuthKeyAuthenticator,
    SingleKeyAuthenticator,
    SingleSenderAuthenticator,
)
from endless_sdk.bcs import Deserializer, Serializer
from endless_sdk.errors import CryptoError, EncodingError

MESSAGE = b"endless authenticator"


def ed25519_auth(data: bytes = MESSAGE) -> AccountAuthenticator:
    key = ed25519.PrivateKey.random()
    return AccountAuthenticator(Ed25519Authenticator(key.public_key(), key.sign(data)))


def secp256k1_auth(data: bytes = MESSAGE) -> AccountAuthenticator:
    key = secp256k1_ecdsa.PrivateKey.random()
    return AccountAuthenticator(SingleKeyAuthenticator(key.public_key(), key.sign(data)))


def round_trip(value, decoder):
    return bcs.decode(bcs.encoder(value, Serializer.struct), decoder)


class AccountAuthenticatorTest(unittest.TestCase):
    def test_variants(self):
        self.assertEqual(ed25519_auth().variant, AccountAuthenticator.ED25519)
        self.assertEqual(secp256k1_auth().variant, AccountAuthenticator.SINGLE_KEY)
        multi_auth_key = AccountAuthenticator(
            MultiAuthKeyAuthenticator.from_authenticators([ed25519_auth()])
        )
        self.assertEqual(multi_auth_key.variant, AccountAuthenticator.MULTI_AUTH_KEY)

        with self.assertRaises(CryptoError):
            AccountAuthenticator("not an authenticator")

    def test_serialization(self):
        for authenticator in [ed25519_auth(), secp256k1_auth()]:
            encoded = bcs.encoder(authenticator, Serializer.struct)
            self.assertEqual(encoded[0], authenticator.variant)
            self.assertEqual(round_trip(authenticator, AccountAuthenticator.deserialize), authenticator)
            self.assertTrue(
                round_trip(authenticator, AccountAuthenticator.deserialize).verify(MESSAGE)
            )

    def test_verify(self):
        authenticator = secp256k1_auth()
        self.assertTrue(authenticator.verify(MESSAGE))
        self.assertFalse(authenticator.verify(b"another message"))

    def test_authentication_key(self):
        for authenticator in [ed25519_auth(), secp256k1_auth()]:
            self.assertEqual(
                authenticator.authentication_key(),
                AuthenticationKey.from_public_key(authenticator.authenticator.public_key),
            )
        multi_auth_key = AccountAuthenticator(
            MultiAuthKeyAuthenticator.from_authenticators([ed25519_auth(), secp256k1_auth()])
        )
        self.assertIsNone(multi_auth_key.authentication_key())

    def test_multi_ed25519_rejected(self):
        with self.assertRaises(EncodingError):
            AccountAuthenticator.deserialize(Deserializer(b"\x01"))
        with self.assertRaises(EncodingError):
            AccountAuthenticator.deserialize(Deserializer(b"\x05"))

    def test_unset_signature(self):
        for authenticator in [ed25519_auth(), secp256k1_auth()]:
            authenticator.unset_signature()
            self.assertFalse(authenticator.verify(MESSAGE))
            self.assertEqual(round_trip(authenticator, AccountAuthenticator.deserialize), authenticator)


class MultiAuthKeyAuthenticatorTest(unittest.TestCase):
    def test_all_must_verify(self):
        authenticator = MultiAuthKeyAuthenticator.from_authenticators(
            [ed25519_auth(), secp256k1_auth()]
        )
        self.assertTrue(authenticator.verify(MESSAGE))

        forged = MultiAuthKeyAuthenticator.from_authenticators(
            [ed25519_auth(), secp256k1_auth(b"something else")]
        )
        self.assertFalse(forged.verify(MESSAGE))

    def test_invalid(self):
        with self.assertRaises(CryptoError):
            MultiAuthKeyAuthenticator.from_authenticators([])

        nested = AccountAuthenticator(
            MultiAuthKeyAuthenticator.from_authenticators([ed25519_auth()])
        )
        with self.assertRaises(CryptoError):
            MultiAuthKeyAuthenticator.from_authenticators([ed25519_auth(), nested])

        self.assertFalse(MultiAuthKeyAuthenticator([]).verify(MESSAGE))

    def test_serialization(self):
        authenticator = AccountAuthenticator(
            MultiAuthKeyAuthenticator.from_authenticators([ed25519_auth(), secp256k1_auth()])
        )
        encoded = bcs.encoder(authenticator, Serializer.struct)
        # Variant followed by the number of authenticators
        self.assertEqual(encoded[:2], b"\x04\x02")
        decoded = round_trip(authenticator, AccountAuthenticator.deserialize)
        self.assertEqual(decoded, authenticator)
        self.assertTrue(decoded.verify(MESSAGE))

    def test_unset_signature(self):
        authenticator = MultiAuthKeyAuthenticator.from_authenticators(
            [ed25519_auth(), secp256k1_auth()]
        )
        authenticator.unset_signature()
        self.assertFalse(authenticator.verify(MESSAGE))


class AuthenticatorTest(unittest.TestCase):
    def test_variants(self):
        sender = ed25519_auth()
        secondary = AccountAddress.from_str("0x2")
        fee_payer = AccountAddress.from_str("0x3")

        self.assertEqual(Authenticator(sender.authenticator).variant, Authenticator.ED25519)
        self.assertEqual(
            Authenticator(MultiAgentAuthenticator(sender, [(secondary, ed25519_auth())])).variant,
            Authenticator.MULTI_AGENT,
        )
        self.assertEqual(
            Authenticator(FeePayerAuthenticator(sender, [], (fee_payer, ed25519_auth()))).variant,
            Authenticator.FEE_PAYER,
        )
        self.assertEqual(
            Authenticator(SingleSenderAuthenticator(secp256k1_auth())).variant,
            Authenticator.SINGLE_SENDER,
        )

        with self.assertRaises(CryptoError):
            Authenticator(sender)

    def test_multi_agent(self):
        authenticator = Authenticator(
            MultiAgentAuthenticator(
                ed25519_auth(),
                [
                    (AccountAddress.from_str("0x2"), secp256k1_auth()),
                    (AccountAddress.from_str("0x3"), ed25519_auth()),
                ],
            )
        )
        self.assertTrue(authenticator.verify(MESSAGE))
        self.assertEqual(
            authenticator.authenticator.secondary_addresses(),
            [AccountAddress.from_str("0x2"), AccountAddress.from_str("0x3")],
        )
        self.assertEqual(round_trip(authenticator, Authenticator.deserialize), authenticator)

        forged = Authenticator(
            MultiAgentAuthenticator(
                ed25519_auth(),
                [(AccountAddress.from_str("0x2"), ed25519_auth(b"other"))],
            )
        )
        self.assertFalse(forged.verify(MESSAGE))

    def test_fee_payer(self):
        authenticator = Authenticator(
            FeePayerAuthenticator(
                ed25519_auth(),
                [(AccountAddress.from_str("0x2"), ed25519_auth())],
                (AccountAddress.from_str("0x3"), secp256k1_auth()),
            )
        )
        self.assertTrue(authenticator.verify(MESSAGE))
        self.assertEqual(
            authenticator.authenticator.fee_payer_address(), AccountAddress.from_str("0x3")
        )
        self.assertEqual(round_trip(authenticator, Authenticator.deserialize), authenticator)

        unsigned = copy.deepcopy(authenticator)
        unsigned.unset_signature()
        self.assertFalse(unsigned.verify(MESSAGE))
        self.assertTrue(authenticator.verify(MESSAGE))

    def test_multi_ed25519_rejected(self):
        with self.assertRaises(EncodingError):
            Authenticator.deserialize(Deserializer(b"\x01"))
        with self.assertRaises(EncodingError):
            Authenticator.deserialize(Deserializer(b"\x05"))

    def test_secondary_length_mismatch(self):
        ser = Serializer()
        ser.uleb128(Authenticator.MULTI_AGENT)
        ser.struct(ed25519_auth())
        ser.sequence([AccountAddress.from_str("0x2")], Serializer.struct)
        ser.sequence([], Serializer.struct)
        with self.assertRaises(EncodingError):
            Authenticator.deserialize(Deserializer(ser.output()))


if __name__ == "__main__":
    unittest.main()
