# Copyright © Endless
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import hashlib
import unittest

from endless_sdk import bcs
from endless_sdk.account_address import AccountAddress
from endless_sdk.bcs import Serializer
from endless_sdk.coin_payloads import (
    ENDLESS_COIN,
    METADATA_TYPE_TAG,
    WITHDRAW_EVENT,
    batch_transfer_payload,
    safe_transfer_payload,
    transfer_entry_function,
    transfer_payload,
    withdraw_digest,
)
from endless_sdk.errors import EncodingError, RejectionError
from endless_sdk.transactions import TransactionPayload

ALICE = AccountAddress.from_str("0x" + "a1" * 32)
BOB = AccountAddress.from_str("0x" + "b0" * 32)
STORE = AccountAddress.from_str("0x" + "5e" * 32)


def withdraw_event(owner: AccountAddress, store: AccountAddress, amount: int) -> dict:
    return {
        "type": WITHDRAW_EVENT,
        "data": {"owner": str(owner), "store": str(store), "amount": str(amount)},
    }


class TransferPayloadTest(unittest.TestCase):
    def test_native_transfer(self):
        entry_function = transfer_entry_function(BOB, 1000)
        self.assertEqual(str(entry_function.module), "0x1::endless_account")
        self.assertEqual(entry_function.function, "transfer")
        self.assertEqual(entry_function.ty_args, [])
        self.assertEqual(
            entry_function.args,
            [bcs.encoder(BOB, Serializer.struct), bcs.encoder(1000, Serializer.u128)],
        )

    def test_coin_transfer(self):
        coin = ENDLESS_COIN
        entry_function = transfer_entry_function(BOB, 1000, coin)
        self.assertEqual(entry_function.function, "transfer_coins")
        self.assertEqual(entry_function.ty_args, [METADATA_TYPE_TAG])
        self.assertEqual(len(entry_function.args), 3)
        self.assertEqual(
            entry_function.args[2],
            bcs.encoder(AccountAddress.from_base58(coin), Serializer.struct),
        )

    def test_invalid_coin(self):
        with self.assertRaises(EncodingError):
            transfer_entry_function(BOB, 1, "not-base58-0OIl")

    def test_batch_transfer(self):
        payload = batch_transfer_payload([ALICE, BOB], [1, 2])
        self.assertEqual(payload.variant, TransactionPayload.ENTRY_FUNCTION)
        self.assertEqual(payload.value.function, "batch_transfer")
        self.assertEqual(
            payload.value.args[1],
            bcs.encoder([1, 2], Serializer.sequence_serializer(Serializer.u128)),
        )
        self.assertEqual(
            batch_transfer_payload([ALICE], [1], ENDLESS_COIN).value.function,
            "batch_transfer_coins",
        )

        with self.assertRaises(EncodingError):
            batch_transfer_payload([ALICE, BOB], [1])

    def test_safe_transfer(self):
        digest = bytes(32)
        payload = safe_transfer_payload(BOB, 5, digest)
        self.assertEqual(payload.variant, TransactionPayload.SAFE_ENTRY_FUNCTION)
        self.assertEqual(payload.value.entry_function, transfer_payload(BOB, 5).value)
        self.assertEqual(payload.value.digest, digest)


class WithdrawDigestTest(unittest.TestCase):
    def test_sender_withdrawals(self):
        results = [
            {
                "success": True,
                "events": [
                    withdraw_event(ALICE, STORE, 1000),
                    withdraw_event(BOB, STORE, 7),
                    {"type": "0x1::fungible_asset::Deposit", "data": {}},
                ],
            }
        ]

        ser = Serializer()
        ser.uleb128(1)
        ser.struct(STORE)
        ser.u128(1000)
        expected = hashlib.sha3_256(ser.output()).digest()

        self.assertEqual(withdraw_digest(results, ALICE), expected)

    def test_no_withdrawals(self):
        self.assertEqual(
            withdraw_digest([{"success": True, "events": []}], ALICE),
            hashlib.sha3_256(b"\x00").digest(),
        )

    def test_failed_simulation(self):
        with self.assertRaises(RejectionError):
            withdraw_digest(
                [{"success": False, "vm_status": "EINSUFFICIENT_BALANCE"}], ALICE
            )


if __name__ == "__main__":
    unittest.main()
