# Copyright © Endless
# SPDX-License-Identifier: Apache-2.0

"""Entry function payloads for moving fungible assets through `0x1::endless_account`."""

from __future__ import annotations

import hashlib
from typing import Any

from endless_sdk.account_address import ACCOUNT_ONE, AccountAddress
from endless_sdk.bcs import Serializer
from endless_sdk.errors import EncodingError, RejectionError
from endless_sdk.transactions import (
    EntryFunction,
    ModuleId,
    SafeEntryFunction,
    TransactionArgument,
    TransactionPayload,
)
from endless_sdk.type_tag import StructTag, TypeTag

ENDLESS_COIN = "ENDLESSsssssssssssssssssssssssssssssssssssss"
ENDLESS_ACCOUNT_MODULE = ModuleId(ACCOUNT_ONE, "endless_account")
METADATA_TYPE_TAG = TypeTag(
    StructTag(ACCOUNT_ONE, "fungible_asset", "Metadata", [])
)
WITHDRAW_EVENT = "0x1::fungible_asset::Withdraw"


def _coin_argument(coin: str) -> TransactionArgument:
    return TransactionArgument(AccountAddress.from_base58(coin), Serializer.struct)


def _entry_function(
    function: str, args: list[TransactionArgument], coin: str | None
) -> EntryFunction:
    ty_args: list[TypeTag] = []
    if coin is not None:
        function = f"{function}_coins"
        ty_args = [METADATA_TYPE_TAG]
        args = args + [_coin_argument(coin)]
    return EntryFunction(
        ENDLESS_ACCOUNT_MODULE, function, ty_args, [arg.encode() for arg in args]
    )


def transfer_entry_function(
    recipient: AccountAddress, amount: int, coin: str | None = None
) -> EntryFunction:
    """`transfer` for the native coin, `transfer_coins<Metadata>` when a base58 coin address is given."""
    return _entry_function(
        "transfer",
        [
            TransactionArgument(recipient, Serializer.struct),
            TransactionArgument(amount, Serializer.u128),
        ],
        coin,
    )


def batch_transfer_entry_function(
    recipients: list[AccountAddress], amounts: list[int], coin: str | None = None
) -> EntryFunction:
    if len(recipients) != len(amounts):
        raise EncodingError(
            f"Got {len(recipients)} recipients but {len(amounts)} amounts"
        )
    return _entry_function(
        "batch_transfer",
        [
            TransactionArgument(
                recipients, Serializer.sequence_serializer(Serializer.struct)
            ),
            TransactionArgument(amounts, Serializer.sequence_serializer(Serializer.u128)),
        ],
        coin,
    )


def transfer_payload(
    recipient: AccountAddress, amount: int, coin: str | None = None
) -> TransactionPayload:
    return TransactionPayload(transfer_entry_function(recipient, amount, coin))


def batch_transfer_payload(
    recipients: list[AccountAddress], amounts: list[int], coin: str | None = None
) -> TransactionPayload:
    return TransactionPayload(batch_transfer_entry_function(recipients, amounts, coin))


def safe_transfer_payload(
    recipient: AccountAddress, amount: int, digest: bytes, coin: str | None = None
) -> TransactionPayload:
    return TransactionPayload(
        SafeEntryFunction(transfer_entry_function(recipient, amount, coin), digest)
    )


def safe_batch_transfer_payload(
    recipients: list[AccountAddress],
    amounts: list[int],
    digest: bytes,
    coin: str | None = None,
) -> TransactionPayload:
    return TransactionPayload(
        SafeEntryFunction(
            batch_transfer_entry_function(recipients, amounts, coin), digest
        )
    )


def withdraw_digest(
    simulation_results: list[dict[str, Any]], sender: AccountAddress
) -> bytes:
    """
    Digest over the sender's withdrawals in a simulated run, used to pin a SafeEntryFunction to the exact amounts it
    may take from the sender's stores.

    Each `0x1::fungible_asset::Withdraw` event owned by the sender contributes its store address followed by the
    amount as u128. The chunks are written as a BCS vector of fixed 48-byte entries and hashed with sha3-256.
    """
    chunks: list[bytes] = []
    for result in simulation_results:
        if not result.get("success", False):
            raise RejectionError(
                f"Simulation failed: {result.get('vm_status', 'unknown status')}", 400
            )
        for event in result.get("events", []):
            if event.get("type") != WITHDRAW_EVENT:
                continue
            data = event.get("data", {})
            if AccountAddress.from_str_any(data["owner"]) != sender:
                continue
            ser = Serializer()
            ser.struct(AccountAddress.from_str_any(data["store"]))
            ser.u128(int(data["amount"]))
            chunks.append(ser.output())

    ser = Serializer()
    ser.uleb128(len(chunks))
    for chunk in chunks:
        ser.fixed_bytes(chunk)
    return hashlib.sha3_256(ser.output()).digest()
