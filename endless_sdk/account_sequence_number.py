# Copyright © Endless
# Parts of the project are originally copyright © Aptos Foundation
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from endless_sdk.account_address import AccountAddress

if TYPE_CHECKING:
    from endless_sdk.clients.rest.endless_client import EndlessClient


@dataclass
class AccountSequenceNumberConfig:
    """Common configuration for account number generation"""

    maximum_wait_time: float = 30
    sleep_time: float = 0.5


class AccountSequenceNumber:
    """
    A managed wrapper around the sequence numbers of one account.

    * Numbers are handed out in first-in, first-out order, each exactly once, starting from the on-chain value or
      from an explicit start value.
    * A number that was handed out stays consumed even when the transaction using it fails. Call `synchronize`
      to fall back to the on-chain state after failures.

    Notes:
    * This is co-routine safe, that is many async tasks can be reading from this concurrently.
    * The account must not be used for transactions outside of this manager while it is alive.
    """

    _client: EndlessClient
    _account: AccountAddress
    _lock: asyncio.Lock
    _current_number: int | None
    _maximum_wait_time: float
    _sleep_time: float

    def __init__(
        self,
        client: EndlessClient,
        account: AccountAddress,
        start: int | None = None,
        config: AccountSequenceNumberConfig | None = None,
    ):
        config = config or AccountSequenceNumberConfig()
        self._client = client
        self._account = account
        self._lock = asyncio.Lock()
        self._current_number = start
        self._maximum_wait_time = config.maximum_wait_time
        self._sleep_time = config.sleep_time

    async def next_sequence_number(self) -> int:
        """Returns the next sequence number available on this account."""
        async with self._lock:
            if self._current_number is None:
                await self._initialize()
            next_number = self._current_number
            self._current_number += 1
        return next_number

    async def current(self) -> int | None:
        """The number the next call to `next_sequence_number` returns, None before initialization."""
        async with self._lock:
            return self._current_number

    async def _initialize(self):
        self._current_number = await self._client.account_sequence_number(self._account)

    async def synchronize(self):
        """
        Poll the network until every handed out number has been committed or until the maximum wait time has
        elapsed. In the latter case the counter restarts from the on-chain state. This will prevent any calls to
        next_sequence_number until it has returned.
        """
        async with self._lock:
            if self._current_number is None:
                await self._initialize()
                return
            start_time = time.monotonic()
            on_chain = await self._client.account_sequence_number(self._account)
            while on_chain < self._current_number:
                if time.monotonic() - start_time > self._maximum_wait_time:
                    logging.warning(
                        f"Waited over {self._maximum_wait_time} seconds for {self._account} to reach sequence "
                        f"number {self._current_number}, resyncing at {on_chain}"
                    )
                    self._current_number = on_chain
                    return
                await asyncio.sleep(self._sleep_time)
                on_chain = await self._client.account_sequence_number(self._account)
            self._current_number = on_chain
