# Copyright © Endless
# Parts of the project are originally copyright © Supra
# SPDX-License-Identifier: Apache-2.0

import asyncio

from endless_sdk import asymmetric_crypto_wrapper
from endless_sdk.account import Account, MultiKeyAccount
from endless_sdk.clients.rest import EndlessClient
from endless_sdk.coin_payloads import transfer_payload

from examples.common import NETWORK


async def main():
    endless_client = EndlessClient(NETWORK)

    key1 = Account.generate_secp256k1_ecdsa()
    key2 = Account.generate(single_key=True)
    key3 = Account.generate_secp256k1_ecdsa()

    # 2-of-3, signed locally by the first two keys
    alice_pubkey = asymmetric_crypto_wrapper.MultiPublicKey(
        [key1.public_key(), key2.public_key(), key3.public_key()], 2
    )
    alice = MultiKeyAccount(alice_pubkey, [key1, key2])
    bob = Account.generate()

    print("\n=== Addresses ===")
    print(f"Multikey Alice: {alice.address()}")
    print(f"Bob: {bob.address()}")

    await endless_client.faucet(alice)

    print("\n=== Initial Balances ===")
    print(f"Alice: {await endless_client.account_balance(alice.address())}")
    print(f"Bob: {await endless_client.account_balance(bob.address())}")

    raw_transaction = await endless_client.build_transaction(
        alice, transfer_payload(bob.address(), 1_000)
    )
    authenticator = alice.sign_transaction(raw_transaction)
    assert authenticator.verify(raw_transaction.keyed())

    signed_transaction = raw_transaction.to_signed_transaction(authenticator)
    tx_hash = await endless_client.submit_transaction(signed_transaction, wait=True)
    print(f"\nTransfer submitted: {tx_hash}")

    print("\n=== Final Balances ===")
    print(f"Alice: {await endless_client.account_balance(alice.address())}")
    print(f"Bob: {await endless_client.account_balance(bob.address())}")

    await endless_client.close()


if __name__ == "__main__":
    asyncio.run(main())
