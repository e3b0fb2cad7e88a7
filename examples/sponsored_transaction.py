# Copyright © Endless
# Parts of the project are originally copyright © Supra
# SPDX-License-Identifier: Apache-2.0

import asyncio

from endless_sdk.account import Account
from endless_sdk.clients.rest import EndlessClient
from endless_sdk.coin_payloads import transfer_payload

from examples.common import NETWORK


async def print_balances(endless_client: EndlessClient, accounts: dict[str, Account]):
    for name, account in accounts.items():
        balance = await endless_client.account_balance(account.address())
        print(f"{name}: {balance}")


async def main():
    endless_client = EndlessClient(NETWORK)
    alice = Account.generate()
    bob = Account.generate()
    sponsor = Account.generate()
    accounts = {"Alice": alice, "Bob": bob, "Sponsor": sponsor}

    print(f"Alice account address: {alice.address()}")
    print(f"Bob account address: {bob.address()}")
    print(f"Sponsor account address: {sponsor.address()}")

    await endless_client.faucet(sponsor)
    await endless_client.faucet(alice)

    print("\n=== Balances before the sponsored transfer ===")
    await print_balances(endless_client, accounts)

    signed_transaction = await endless_client.create_fee_payer_transaction(
        alice, sponsor, [], transfer_payload(bob.address(), 1_000)
    )
    simulation = await endless_client.simulate_transaction(signed_transaction)
    if not simulation[0]["success"]:
        raise Exception(f"Transaction may fail, simulation result: {simulation}")
    print(f"Transaction succeeded in simulation, gas used: {simulation[0]['gas_used']}")

    tx_hash = await endless_client.submit_transaction(signed_transaction)
    print(f"Transaction successfully executed, tx_hash: {tx_hash}")

    print("\n=== Balances after the sponsored transfer ===")
    await print_balances(endless_client, accounts)

    await endless_client.close()


if __name__ == "__main__":
    asyncio.run(main())
