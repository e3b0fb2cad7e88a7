# Copyright © Endless
# Parts of the project are originally copyright © Aptos Foundation
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, ClassVar

from endless_sdk.account import Signer
from endless_sdk.account_address import AccountAddress
from endless_sdk.account_sequence_number import AccountSequenceNumber
from endless_sdk.clients.rest.endless_client import BuildOptions, EndlessClient
from endless_sdk.transactions import SignedTransaction, TransactionPayload


@dataclass
class TransactionBuildPayload:
    """A request to build, sign and submit one transaction."""

    ENTRY_FUNCTION: ClassVar[int] = 0
    MULTI_AGENT: ClassVar[int] = 1

    id: int
    type: int
    inner: TransactionPayload


@dataclass
class TransactionSubmissionResponse:
    """The outcome of a submission: the transaction hash in `response`, or the `error` that prevented it."""

    id: int
    response: str | None = None
    error: BaseException | None = None
    sequence_number: int | None = None


@dataclass
class ConcResponse:
    """A waiter's result. Both fields None is the sentinel a waiter emits right before it exits."""

    id: int | None = None
    result: dict[str, Any] | None = None
    error: BaseException | None = None

    def is_sentinel(self) -> bool:
        return self.result is None and self.error is None


class TransactionWorker:
    """
    The TransactionWorker is the only place that hands out sequence numbers for its account. It drains the input
    queue in arrival order, builds, signs and submits each payload with the next sequence number, and reports each
    submission on the output queue. Confirmation is left to `TransactionWaiter`.

    A `None` put on the input queue closes the worker: it finishes the payloads in front of it, puts a single `None`
    on the output queue and returns.

    Note: a failed submission still consumes its sequence number, so later transactions from the same account will
    not execute until the gap is filled. Detecting and resolving such gaps is the responsibility of the caller.

    `MULTI_AGENT` payloads are co-signed by `secondary_signers` and, when given, sponsored by `fee_payer`.
    """

    _client: EndlessClient
    _signer: Signer
    _secondary_signers: list[Signer]
    _fee_payer: Signer | None
    _options: BuildOptions
    _account_sequence_number: AccountSequenceNumber
    input: asyncio.Queue
    output: asyncio.Queue

    def __init__(
        self,
        client: EndlessClient,
        signer: Signer,
        secondary_signers: list[Signer] | None = None,
        fee_payer: Signer | None = None,
        start_sequence_number: int | None = None,
        options: BuildOptions | None = None,
        maxsize: int = 100,
    ):
        self._client = client
        self._signer = signer
        self._secondary_signers = secondary_signers or []
        self._fee_payer = fee_payer
        self._options = options or BuildOptions()
        self._account_sequence_number = AccountSequenceNumber(
            client, signer.address(), start_sequence_number
        )
        self.input = asyncio.Queue(maxsize=maxsize)
        self.output = asyncio.Queue(maxsize=maxsize)

    def address(self) -> AccountAddress:
        return self._signer.address()

    async def run(self):
        while True:
            payload = await self.input.get()
            if payload is None:
                break
            await self.output.put(await self._process(payload))
        await self.output.put(None)

    async def _process(
        self, payload: TransactionBuildPayload
    ) -> TransactionSubmissionResponse:
        sequence_number = None
        try:
            sequence_number = await self._account_sequence_number.next_sequence_number()
            signed_transaction = await self._build_and_sign(payload, sequence_number)
            tx_hash = await self._client.submit_transaction(signed_transaction, wait=False)
        except Exception as e:
            logging.error(e, exc_info=True)
            return TransactionSubmissionResponse(
                payload.id, error=e, sequence_number=sequence_number
            )
        return TransactionSubmissionResponse(
            payload.id, response=tx_hash, sequence_number=sequence_number
        )

    async def _build_and_sign(
        self, payload: TransactionBuildPayload, sequence_number: int
    ) -> SignedTransaction:
        options = BuildOptions(
            max_gas_amount=self._options.max_gas_amount,
            gas_unit_price=self._options.gas_unit_price,
            expiration_seconds=self._options.expiration_seconds,
            chain_id=self._options.chain_id,
            sequence_number=sequence_number,
        )
        if payload.type == TransactionBuildPayload.ENTRY_FUNCTION:
            raw_transaction = await self._client.build_transaction(
                self._signer, payload.inner, options
            )
            return await self._client.sign_transaction(self._signer, raw_transaction)
        if payload.type == TransactionBuildPayload.MULTI_AGENT:
            if self._fee_payer is not None:
                return await self._client.create_fee_payer_transaction(
                    self._signer,
                    self._fee_payer,
                    self._secondary_signers,
                    payload.inner,
                    options,
                )
            return await self._client.create_multi_agent_transaction(
                self._signer, self._secondary_signers, payload.inner, options
            )
        raise ValueError(f"Invalid transaction build payload type: {payload.type}")


class TransactionWaiter:
    """
    Waits for the transactions reported on a submission queue and publishes a `ConcResponse` for each of them.

    Several waiters may share one submission queue and one result queue. A waiter that takes the `None` close
    marker puts it back for its siblings, emits the sentinel and returns; no waiter ever closes the result queue.
    """

    _client: EndlessClient
    _submissions: asyncio.Queue
    _results: asyncio.Queue

    def __init__(
        self,
        client: EndlessClient,
        submissions: asyncio.Queue,
        results: asyncio.Queue,
    ):
        self._client = client
        self._submissions = submissions
        self._results = results

    async def run(self):
        while True:
            submission = await self._submissions.get()
            if submission is None:
                await self._submissions.put(None)
                await self._results.put(ConcResponse())
                return
            await self._results.put(await self._wait(submission))

    async def _wait(self, submission: TransactionSubmissionResponse) -> ConcResponse:
        if submission.error is not None:
            return ConcResponse(submission.id, error=submission.error)
        try:
            result = await self._client.wait_for_transaction(submission.response)
        except Exception as e:
            logging.error(e, exc_info=True)
            return ConcResponse(submission.id, error=e)
        return ConcResponse(submission.id, result=result)


async def build_sign_and_submit_transactions(
    client: EndlessClient,
    signer: Signer,
    payloads: list[TransactionPayload | TransactionBuildPayload],
    waiters: int = 4,
    **worker_kwargs: Any,
) -> tuple[list[TransactionSubmissionResponse], list[ConcResponse]]:
    """
    Sends every payload from `signer` through a `TransactionWorker` and `waiters` `TransactionWaiter`s.

    Plain payloads get their position in `payloads` as id. Both returned lists are ordered by id, whatever order
    the transactions were confirmed in.
    """
    if waiters < 1:
        raise ValueError(f"waiters must be at least 1, got {waiters}")

    worker = TransactionWorker(client, signer, **worker_kwargs)
    results: asyncio.Queue = asyncio.Queue()
    submissions: asyncio.Queue = asyncio.Queue()

    async def feed():
        for idx, payload in enumerate(payloads):
            if not isinstance(payload, TransactionBuildPayload):
                payload = TransactionBuildPayload(
                    idx, TransactionBuildPayload.ENTRY_FUNCTION, payload
                )
            await worker.input.put(payload)
        await worker.input.put(None)

    async def fan_out():
        while True:
            submission = await worker.output.get()
            if submission is not None:
                submitted.append(submission)
            await submissions.put(submission)
            if submission is None:
                return

    submitted: list[TransactionSubmissionResponse] = []
    tasks = [
        asyncio.create_task(feed()),
        asyncio.create_task(worker.run()),
        asyncio.create_task(fan_out()),
    ]
    tasks.extend(
        asyncio.create_task(TransactionWaiter(client, submissions, results).run())
        for _ in range(waiters)
    )

    confirmed: dict[int, ConcResponse] = {}
    running = waiters
    try:
        while running > 0:
            response = await results.get()
            if response.is_sentinel():
                running -= 1
            else:
                confirmed[response.id] = response
        await asyncio.gather(*tasks)
    finally:
        for task in tasks:
            task.cancel()

    return (
        sorted(submitted, key=lambda x: x.id),
        [confirmed[key] for key in sorted(confirmed)],
    )
