# Copyright © Endless
# Parts of the project are originally copyright © Aptos Foundation
# SPDX-License-Identifier: Apache-2.0

import asyncio

from endless_sdk.account import Account
from endless_sdk.clients.rest import EndlessClient

from examples.common import NETWORK


async def main():
    endless_client = EndlessClient(NETWORK)
    alice = Account.generate()
    bob = Account.generate()

    print("\n=== Addresses ===")
    print(f"Alice: {alice.address()}")
    print(f"Bob: {bob.address()}")

    await endless_client.faucet(alice)
    await endless_client.faucet(bob)

    print("\n=== Initial Balances ===")
    print(f"Alice: {await endless_client.account_balance(alice.address())}")
    print(f"Bob: {await endless_client.account_balance(bob.address())}")

    # Have Alice give Bob 1_000 coins
    tx_hash = await endless_client.transfer_coins(alice, bob.address(), 1_000)
    transaction = await endless_client.wait_for_transaction(tx_hash)
    print(f"\nTransfer {tx_hash} success: {transaction['success']}")

    print("\n=== Intermediate Balances ===")
    print(f"Alice: {await endless_client.account_balance(alice.address())}")
    print(f"Bob: {await endless_client.account_balance(bob.address())}")

    # Same again, but the transaction can not withdraw more than its simulation did
    tx_hash = await endless_client.safe_transfer_coins(alice, bob.address(), 1_000)
    await endless_client.wait_for_transaction(tx_hash)

    print("\n=== Final Balances ===")
    print(f"Alice: {await endless_client.account_balance(alice.address())}")
    print(f"Bob: {await endless_client.account_balance(bob.address())}")

    await endless_client.close()


if __name__ == "__main__":
    asyncio.run(main())
