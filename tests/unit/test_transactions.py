# Copyright © Endless
# Parts of the project are originally copyright © Aptos Foundation
# SPDX-License-Identifier: Apache-2.0

"""This translates Endless transactions to and from BCS for signing and submitting to the REST API."""

from __future__ import annotations

import hashlib
import unittest

from endless_sdk import bcs, ed25519
from endless_sdk.account import Account
from endless_sdk.account_address import AccountAddress
from endless_sdk.authenticator import (
    AccountAuthenticator,
    Authenticator,
    FeePayerAuthenticator,
    MultiAgentAuthenticator,
    MultiAuthKeyAuthenticator,
)
from endless_sdk.bcs import Deserializer, Serializer
from endless_sdk.errors import CryptoError, EncodingError
from endless_sdk.transactions import (
    EntryFunction,
    FeePayerRawTransaction,
    ModuleId,
    MultiAgentRawTransaction,
    Multisig,
    MultisigTransactionPayload,
    RawTransaction,
    SafeEntryFunction,
    Script,
    ScriptArgument,
    SignedTransaction,
    TransactionArgument,
    TransactionPayload,
)
from endless_sdk.type_tag import StructTag, TypeTag

SENDER_KEY = "9bf49a6a0755f953811fce125f2683d50429c3bb49e074147e0089a52eae155f"
RECEIVER_KEY = "0564f879d27ae3c02ce82834acfa8c793a629f2ca0de6919610be82f411326be"


def transfer_payload(recipient: AccountAddress, amount: int) -> TransactionPayload:
    return TransactionPayload(
        EntryFunction.natural(
            "0x1::endless_account",
            "transfer",
            [],
            [
                TransactionArgument(recipient, Serializer.struct),
                TransactionArgument(amount, Serializer.u128),
            ],
        )
    )


def payload_round_trip(payload: TransactionPayload) -> TransactionPayload:
    return bcs.decode(bcs.encoder(payload, Serializer.struct), TransactionPayload.deserialize)


def raw_transaction(sender: AccountAddress, payload: TransactionPayload) -> RawTransaction:
    return RawTransaction(sender, 1, payload, 200000, 100, 1697670723, 221)


class Test(unittest.TestCase):
    def test_entry_function(self):
        private_key = ed25519.PrivateKey.random()
        account_address = AccountAddress.from_key(private_key.public_key())
        recipient_address = AccountAddress.from_key(
            ed25519.PrivateKey.random().public_key()
        )

        transaction_arguments = [
            TransactionArgument(recipient_address, Serializer.struct),
            TransactionArgument(5000, Serializer.u128),
        ]

        payload = EntryFunction.natural(
            "0x1::endless_account",
            "transfer_coins",
            [TypeTag(StructTag.from_str("0x1::fungible_asset::Metadata"))],
            transaction_arguments,
        )

        raw_transaction = RawTransaction(
            account_address,
            0,
            TransactionPayload(payload),
            2000,
            0,
            18446744073709551615,
            4,
        )

        authenticator = raw_transaction.sign_with_key(private_key)
        signed_transaction = SignedTransaction(raw_transaction, authenticator)
        self.assertEqual(signed_transaction.authenticator.variant, Authenticator.ED25519)
        self.verify_transaction_serialization_and_deserialization(signed_transaction)

    def test_entry_function_with_corpus(self):
        sender_private_key = ed25519.PrivateKey.from_str(SENDER_KEY)
        sender_account_address = AccountAddress.from_key(sender_private_key.public_key())
        receiver_account_address = AccountAddress.from_key(
            ed25519.PrivateKey.from_str(RECEIVER_KEY).public_key()
        )

        payload = EntryFunction.natural(
            "0x1::coin",
            "transfer",
            [TypeTag(StructTag.from_str("0x1::endless_coin::EndlessCoin"))],
            [
                TransactionArgument(receiver_account_address, Serializer.struct),
                TransactionArgument(5000, Serializer.u64),
            ],
        )

        raw_transaction_generated = RawTransaction(
            sender_account_address,
            11,
            TransactionPayload(payload),
            2000,
            1,
            1234567890,
            4,
        )

        # Expected encoding
        raw_transaction_input = "7deeccb1080854f499ec8b4c1b213b82c5e34b925cf6875fec02d4b77adbd2d60b0000000000000002000000000000000000000000000000000000000000000000000000000000000104636f696e087472616e73666572010700000000000000000000000000000000000000000000000000000000000000010c656e646c6573735f636f696e0b456e646c657373436f696e0002202d133ddd281bb6205558357cc6ac75661817e9aaeac3afebc32842759cbf7fa9088813000000000000d0070000000000000100000000000000d20296490000000004"

        self.assertEqual(raw_transaction_generated.to_bytes().hex(), raw_transaction_input)
        self.assertEqual(
            RawTransaction.from_bytes(bytes.fromhex(raw_transaction_input)),
            raw_transaction_generated,
        )

        signed_transaction = SignedTransaction(
            raw_transaction_generated,
            raw_transaction_generated.sign_with_key(sender_private_key),
        )
        # Ed25519 variant, public key and signature follow the raw transaction
        expected_prefix = (
            raw_transaction_input
            + "0020"
            + sender_private_key.public_key().to_crypto_bytes().hex()
            + "40"
        )
        self.assertTrue(signed_transaction.bytes().hex().startswith(expected_prefix))
        self.verify_transaction_serialization_and_deserialization(signed_transaction)

    def test_entry_function_multi_agent_with_corpus(self):
        sender_private_key = ed25519.PrivateKey.from_str(SENDER_KEY)
        sender_account_address = AccountAddress.from_key(sender_private_key.public_key())
        receiver_private_key = ed25519.PrivateKey.from_str(RECEIVER_KEY)
        receiver_account_address = AccountAddress.from_key(
            receiver_private_key.public_key()
        )

        payload = EntryFunction.natural(
            "0x3::token",
            "direct_transfer_script",
            [],
            [
                TransactionArgument(receiver_account_address, Serializer.struct),
                TransactionArgument("collection_name", Serializer.str),
                TransactionArgument("token_name", Serializer.str),
                TransactionArgument(1, Serializer.u64),
            ],
        )

        raw_transaction_generated = MultiAgentRawTransaction(
            RawTransaction(
                sender_account_address,
                11,
                TransactionPayload(payload),
                2000,
                1,
                1234567890,
                4,
            ),
            [receiver_account_address],
        )

        raw_transaction_input = "7deeccb1080854f499ec8b4c1b213b82c5e34b925cf6875fec02d4b77adbd2d60b0000000000000002000000000000000000000000000000000000000000000000000000000000000305746f6b656e166469726563745f7472616e736665725f7363726970740004202d133ddd281bb6205558357cc6ac75661817e9aaeac3afebc32842759cbf7fa9100f636f6c6c656374696f6e5f6e616d650b0a746f6b656e5f6e616d65080100000000000000d0070000000000000100000000000000d20296490000000004"
        self.assertEqual(
            raw_transaction_generated.inner().to_bytes().hex(), raw_transaction_input
        )

        sender_authenticator = raw_transaction_generated.sign_with_key(sender_private_key)
        receiver_authenticator = raw_transaction_generated.sign_with_key(
            receiver_private_key
        )
        signed_transaction = raw_transaction_generated.to_multi_agent_signed_transaction(
            sender_authenticator, [receiver_authenticator]
        )
        self.assertEqual(
            signed_transaction.authenticator,
            Authenticator(
                MultiAgentAuthenticator(
                    sender_authenticator,
                    [(receiver_account_address, receiver_authenticator)],
                )
            ),
        )
        self.verify_transaction_serialization_and_deserialization(signed_transaction)

        # A plain signature over the inner transaction does not authorize a multi agent one
        plain = SignedTransaction(
            raw_transaction_generated.inner(),
            Authenticator(
                MultiAgentAuthenticator(
                    raw_transaction_generated.inner().sign_with_key(sender_private_key),
                    [(receiver_account_address, receiver_authenticator)],
                )
            ),
        )
        self.assertFalse(plain.verify())

    def test_multi_agent_authenticator_count(self):
        sender = Account.generate()
        multi_agent = MultiAgentRawTransaction(
            raw_transaction(sender.address(), transfer_payload(sender.address(), 1)),
            [Account.generate().address(), Account.generate().address()],
        )
        with self.assertRaises(CryptoError):
            multi_agent.to_multi_agent_signed_transaction(
                sender.sign_transaction(multi_agent), []
            )

    def test_signing_message_domain_separation(self):
        sender = Account.generate()
        raw = raw_transaction(sender.address(), transfer_payload(sender.address(), 1))
        multi_agent = MultiAgentRawTransaction(raw, [])

        self.assertNotEqual(raw.signing_message(), multi_agent.signing_message())
        self.assertTrue(
            raw.signing_message().startswith(
                hashlib.sha3_256(b"ENDLESS::RawTransaction").digest()
            )
        )
        self.assertTrue(
            multi_agent.signing_message().startswith(
                hashlib.sha3_256(b"ENDLESS::RawTransactionWithData").digest()
            )
        )
        self.assertEqual(raw.signing_message()[32:], raw.to_bytes())

    def test_fee_payer(self):
        sender = Account.generate()
        fee_payer = Account.generate()

        fee_payer_raw_txn = FeePayerRawTransaction(
            raw_transaction(sender.address(), transfer_payload(AccountAddress.from_str("0x1"), 100)),
            [],
            fee_payer.address(),
        )

        sender_account_auth = fee_payer_raw_txn.sign(sender)
        fee_payer_account_auth = fee_payer_raw_txn.sign(fee_payer)

        signed_transaction = fee_payer_raw_txn.to_fee_payer_signed_transaction(
            sender_account_auth, fee_payer_account_auth, []
        )
        self.assertEqual(
            signed_transaction.authenticator,
            Authenticator(
                FeePayerAuthenticator(
                    sender_account_auth, [], (fee_payer.address(), fee_payer_account_auth)
                )
            ),
        )
        self.verify_transaction_serialization_and_deserialization(signed_transaction)

    def test_fee_payer_unknown_at_signing(self):
        sender = Account.generate()
        fee_payer = Account.generate()
        fee_payer_raw_txn = FeePayerRawTransaction(
            raw_transaction(sender.address(), transfer_payload(fee_payer.address(), 5)),
            [],
            None,
        )
        sender_account_auth = fee_payer_raw_txn.sign(sender)

        with self.assertRaises(CryptoError):
            fee_payer_raw_txn.to_fee_payer_signed_transaction(
                sender_account_auth, sender_account_auth, []
            )

        # Setting the fee payer changes the signing message, the earlier signature no longer holds
        fee_payer_raw_txn.set_fee_payer(fee_payer.address())
        signed_transaction = fee_payer_raw_txn.to_fee_payer_signed_transaction(
            sender_account_auth, fee_payer_raw_txn.sign(fee_payer), []
        )
        self.assertFalse(signed_transaction.verify())
        with self.assertRaises(CryptoError):
            signed_transaction.verify_or_raise()

    def test_single_key_sender(self):
        sender = Account.generate_secp256k1_ecdsa()
        raw = raw_transaction(sender.address(), transfer_payload(sender.address(), 1))
        signed_transaction = raw.to_signed_transaction(sender.sign_transaction(raw))

        self.assertEqual(
            signed_transaction.authenticator.variant, Authenticator.SINGLE_SENDER
        )
        self.assertEqual(
            signed_transaction.authenticator.authenticator.sender.variant,
            AccountAuthenticator.SINGLE_KEY,
        )
        self.verify_transaction_serialization_and_deserialization(signed_transaction)

    def test_simulated_signature(self):
        for sender in [Account.generate(), Account.generate_secp256k1_ecdsa()]:
            raw = raw_transaction(sender.address(), transfer_payload(sender.address(), 1))
            signed_transaction = SignedTransaction(
                raw, sender.sign_simulated_transaction(raw)
            )
            self.assertFalse(signed_transaction.verify())
            self.assertEqual(
                bcs.decode(signed_transaction.bytes(), SignedTransaction.deserialize),
                signed_transaction,
            )

    def test_unset_signature(self):
        sender = Account.generate()
        raw = raw_transaction(sender.address(), transfer_payload(sender.address(), 1))
        signed_transaction = raw.to_signed_transaction(sender.sign_transaction(raw))
        self.assertTrue(signed_transaction.verify())

        signed_transaction.authenticator.unset_signature()
        self.assertFalse(signed_transaction.verify())
        self.assertEqual(
            signed_transaction,
            SignedTransaction(raw, sender.sign_simulated_transaction(raw)),
        )

    def test_hash(self):
        sender = Account.load_key(SENDER_KEY)
        raw = raw_transaction(sender.address(), transfer_payload(sender.address(), 1))
        signed_transaction = raw.to_signed_transaction(sender.sign_transaction(raw))

        expected = hashlib.sha3_256(
            hashlib.sha3_256(b"ENDLESS::Transaction").digest()
            + b"\x00"
            + signed_transaction.bytes()
        ).hexdigest()
        self.assertEqual(signed_transaction.hash(), f"0x{expected}")

    def test_safe_entry_function(self):
        sender = Account.generate()
        entry_function = transfer_payload(sender.address(), 10).value
        payload = TransactionPayload(SafeEntryFunction(entry_function, bytes(range(32))))
        self.assertEqual(payload.variant, TransactionPayload.SAFE_ENTRY_FUNCTION)

        ser = Serializer()
        payload.serialize(ser)
        self.assertEqual(ser.output()[0], 4)
        self.assertEqual(ser.output()[-32:], bytes(range(32)))
        self.assertEqual(TransactionPayload.deserialize(Deserializer(ser.output())), payload)

        with self.assertRaises(EncodingError):
            SafeEntryFunction(entry_function, b"\x01")

    def test_module_bundle_rejected(self):
        with self.assertRaises(EncodingError):
            TransactionPayload.deserialize(Deserializer(b"\x01\x00"))
        with self.assertRaises(EncodingError):
            TransactionPayload.deserialize(Deserializer(b"\x05"))

    def test_script(self):
        script = Script(
            b"\xa1\x1c\xeb\x0b",
            [TypeTag(StructTag.from_str("0x1::fungible_asset::Metadata"))],
            [
                ScriptArgument(ScriptArgument.U8, 1),
                ScriptArgument(ScriptArgument.U16, 2),
                ScriptArgument(ScriptArgument.U32, 3),
                ScriptArgument(ScriptArgument.U64, 4),
                ScriptArgument(ScriptArgument.U128, 5),
                ScriptArgument(ScriptArgument.U256, 6),
                ScriptArgument(ScriptArgument.ADDRESS, AccountAddress.from_str("0x1")),
                ScriptArgument(ScriptArgument.U8_VECTOR, b"\x01\x02"),
                ScriptArgument(ScriptArgument.BOOL, True),
            ],
        )
        payload = TransactionPayload(script)
        self.assertEqual(payload_round_trip(payload), payload)

        with self.assertRaises(EncodingError):
            ScriptArgument(9, 0)
        with self.assertRaises(EncodingError):
            ScriptArgument.deserialize(Deserializer(b"\x09\x00"))

    def test_multisig(self):
        entry_function = transfer_payload(AccountAddress.from_str("0x1"), 10).value
        payload = TransactionPayload(
            Multisig(
                AccountAddress.from_str("0x5"),
                MultisigTransactionPayload(entry_function),
            )
        )
        self.assertEqual(payload.variant, TransactionPayload.MULTISIG)
        self.assertEqual(payload_round_trip(payload), payload)

        hash_only = TransactionPayload(Multisig(AccountAddress.from_str("0x5")))
        self.assertEqual(payload_round_trip(hash_only), hash_only)

    def test_module_id(self):
        module_id = ModuleId.from_str("0x1::endless_account")
        self.assertEqual(str(module_id), "0x1::endless_account")
        with self.assertRaises(EncodingError):
            ModuleId.from_str("endless_account")

    def test_signer_must_own_sender_address(self):
        victim = Account.generate()
        attacker = Account.generate()
        raw = raw_transaction(victim.address(), transfer_payload(attacker.address(), 1))

        for signer in [attacker, Account.generate_secp256k1_ecdsa()]:
            signed_transaction = raw.to_signed_transaction(signer.sign_transaction(raw))
            self.assertTrue(signed_transaction.authenticator.verify(raw.keyed()))
            self.assertFalse(signed_transaction.verify())
            self.assertTrue(signed_transaction.verify(check_addresses=False))
            with self.assertRaises(CryptoError):
                signed_transaction.verify_or_raise()

    def test_secondary_and_fee_payer_addresses(self):
        sender = Account.generate()
        secondary = Account.generate()
        fee_payer = Account.generate()
        impostor = Account.generate()
        payload = transfer_payload(sender.address(), 1)

        multi_agent = MultiAgentRawTransaction(
            raw_transaction(sender.address(), payload), [secondary.address()]
        )
        signed_transaction = multi_agent.to_multi_agent_signed_transaction(
            multi_agent.sign(sender), [multi_agent.sign(impostor)]
        )
        self.assertFalse(signed_transaction.verify())
        self.assertTrue(signed_transaction.verify(check_addresses=False))

        fee_payer_txn = FeePayerRawTransaction(
            raw_transaction(sender.address(), payload), [], fee_payer.address()
        )
        signed_transaction = fee_payer_txn.to_fee_payer_signed_transaction(
            fee_payer_txn.sign(sender), fee_payer_txn.sign(impostor), []
        )
        self.assertEqual(
            [address for address, _ in signed_transaction.signers()],
            [sender.address(), fee_payer.address()],
        )
        self.assertFalse(signed_transaction.verify())
        self.assertTrue(signed_transaction.verify(check_addresses=False))

    def test_rotated_and_multi_auth_key_senders(self):
        rotated = Account.from_private_key(
            ed25519.PrivateKey.random(),
            account_address=AccountAddress.from_str("0x" + "ab" * 32),
        )
        raw = raw_transaction(rotated.address(), transfer_payload(rotated.address(), 1))
        signed_transaction = raw.to_signed_transaction(rotated.sign_transaction(raw))
        self.assertFalse(signed_transaction.verify())
        self.assertTrue(signed_transaction.verify(check_addresses=False))

        owners = [Account.generate(), Account.generate_secp256k1_ecdsa()]
        raw = raw_transaction(
            AccountAddress.from_str("0x" + "cd" * 32), transfer_payload(rotated.address(), 1)
        )
        authenticator = AccountAuthenticator(
            MultiAuthKeyAuthenticator.from_authenticators(
                [owner.sign_transaction(raw) for owner in owners]
            )
        )
        signed_transaction = raw.to_signed_transaction(authenticator)
        self.assertIsNone(authenticator.authentication_key())
        self.assertFalse(signed_transaction.verify())
        self.assertTrue(signed_transaction.verify(check_addresses=False))

    def verify_transaction_serialization_and_deserialization(
        self, signed_transaction: SignedTransaction
    ):
        self.assertTrue(signed_transaction.verify())

        # Here we are verifying serialization and deserialization process.
        serializer = Serializer()
        signed_transaction.serialize(serializer)
        serialized_signed_transaction = serializer.output()

        deserializer = Deserializer(serialized_signed_transaction)
        deserialized_signed_txn = deserializer.struct(SignedTransaction)
        self.assertEqual(deserialized_signed_txn, signed_transaction)
        self.assertTrue(deserialized_signed_txn.verify())

        serializer = Serializer()
        deserialized_signed_txn.serialize(serializer)
        self.assertEqual(serialized_signed_transaction, serializer.output())


if __name__ == "__main__":
    unittest.main()
