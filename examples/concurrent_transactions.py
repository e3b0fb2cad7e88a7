# Copyright © Endless
# Parts of the project are originally copyright © Aptos Foundation
# SPDX-License-Identifier: Apache-2.0

import asyncio
import time

from endless_sdk.account import Account
from endless_sdk.clients.rest import EndlessClient, EndlessClientConfig
from endless_sdk.coin_payloads import transfer_payload
from endless_sdk.transaction_worker import build_sign_and_submit_transactions

from examples.common import NETWORK

NUM_TRANSACTIONS = 50


async def main():
    endless_client = EndlessClient(
        NETWORK, EndlessClientConfig(wait_for_transaction=False)
    )
    sender = Account.generate()
    recipients = [Account.generate() for _ in range(5)]

    print(f"Sender: {sender.address()}")
    await endless_client.faucet(sender)

    payloads = [
        transfer_payload(recipients[idx % len(recipients)].address(), idx + 1)
        for idx in range(NUM_TRANSACTIONS)
    ]

    start = time.time()
    submitted, confirmed = await build_sign_and_submit_transactions(
        endless_client, sender, payloads, waiters=8
    )
    elapsed = time.time() - start

    failed_submissions = [x for x in submitted if x.error is not None]
    failed_transactions = [
        x for x in confirmed if x.error is not None or not x.result["success"]
    ]
    print(f"Submitted {len(submitted)} transactions in {elapsed:.2f}s")
    print(f"Rejected at submission: {len(failed_submissions)}")
    print(f"Failed or timed out: {len(failed_transactions)}")
    print(
        f"Sequence numbers used: {submitted[0].sequence_number}..{submitted[-1].sequence_number}"
    )

    for recipient in recipients:
        balance = await endless_client.account_balance(recipient.address())
        print(f"{recipient.address()}: {balance}")

    await endless_client.close()


if __name__ == "__main__":
    asyncio.run(main())
