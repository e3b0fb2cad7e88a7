# Copyright © Endless
# SPDX-License-Identifier: Apache-2.0

"""
Signs a transfer for an account that lists several authentication keys on chain.

Each owner signs the raw transaction on its own machine, the collected authenticators are then bundled into a single
MultiAuthKey authenticator. Set ENDLESS_MULTISIG_ADDRESS to the account and ENDLESS_OWNER_KEYS to a comma separated
list of the owners' private keys.
"""

import asyncio
import os

from endless_sdk.account import Account
from endless_sdk.account_address import AccountAddress
from endless_sdk.authenticator import AccountAuthenticator, MultiAuthKeyAuthenticator
from endless_sdk.clients.rest import EndlessClient
from endless_sdk.coin_payloads import transfer_payload

from examples.common import NETWORK


async def main():
    endless_client = EndlessClient(NETWORK)
    multisig_address = AccountAddress.from_str(os.environ["ENDLESS_MULTISIG_ADDRESS"])
    owners = [
        Account.load_key(key.strip())
        for key in os.environ["ENDLESS_OWNER_KEYS"].split(",")
    ]
    recipient = Account.generate()

    print(f"Multisig account: {multisig_address}")
    for owner in owners:
        print(f"Owner: {owner.public_key()}")

    raw_transaction = await endless_client.build_transaction(
        multisig_address, transfer_payload(recipient.address(), 100)
    )
    signing_message = raw_transaction.keyed()

    # Owners sign independently, with whatever scheme their key uses
    authenticators = [owner.sign_transaction(raw_transaction) for owner in owners]
    authenticator = AccountAuthenticator(
        MultiAuthKeyAuthenticator.from_authenticators(authenticators)
    )
    assert authenticator.verify(signing_message)

    signed_transaction = raw_transaction.to_signed_transaction(authenticator)
    tx_hash = await endless_client.submit_transaction(signed_transaction)
    transaction = await endless_client.wait_for_transaction(tx_hash)
    print(f"Transfer {tx_hash} success: {transaction['success']}")
    print(f"Recipient: {await endless_client.account_balance(recipient.address())}")

    await endless_client.close()


if __name__ == "__main__":
    asyncio.run(main())
