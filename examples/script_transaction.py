# Copyright © Endless
# Parts of the project are originally copyright © Supra
# SPDX-License-Identifier: Apache-2.0

"""
Runs a compiled two by two transfer script: Alice and Bob both pay, Carol and David both receive.

Usage: python -m examples.script_transaction path/to/two_by_two_transfer.mv
"""

import asyncio
import sys

import aiofiles

from endless_sdk.account import Account
from endless_sdk.clients.rest import EndlessClient
from endless_sdk.transactions import Script, ScriptArgument, TransactionPayload

from examples.common import NETWORK


async def main(filepath: str):
    endless_client = EndlessClient(NETWORK)

    alice = Account.generate()
    bob = Account.generate()
    carol = Account.generate()
    david = Account.generate()

    print(f"Alice account address: {alice.address()}")
    print(f"Bob account address: {bob.address()}")
    print(f"Carol account address: {carol.address()}")
    print(f"David account address: {david.address()}")

    await endless_client.faucet(alice)
    await endless_client.faucet(bob)

    async with aiofiles.open(filepath, mode="rb") as file:
        code = await file.read()

    script_arguments = [
        ScriptArgument(ScriptArgument.U128, 100),
        ScriptArgument(ScriptArgument.U128, 200),
        ScriptArgument(ScriptArgument.ADDRESS, carol.address()),
        ScriptArgument(ScriptArgument.ADDRESS, david.address()),
        ScriptArgument(ScriptArgument.U128, 50),
    ]

    transaction_payload = TransactionPayload(Script(code, [], script_arguments))
    signed_transaction = await endless_client.create_multi_agent_transaction(
        alice, [bob], transaction_payload
    )
    tx_hash = await endless_client.submit_transaction(signed_transaction, wait=True)
    print(f"\nScript transaction: {tx_hash}")

    print("\n=== Final Balances ===")
    for name, account in [("Alice", alice), ("Bob", bob), ("Carol", carol), ("David", david)]:
        print(f"{name}: {await endless_client.account_balance(account.address())}")

    await endless_client.close()


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1]))
