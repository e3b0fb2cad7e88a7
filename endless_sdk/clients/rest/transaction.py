# Copyright © Endless
# Parts of the project are originally copyright © Supra
# SPDX-License-Identifier: Apache-2.0

from http import HTTPStatus
from typing import Any

import httpx

from endless_sdk.clients.rest.rest_client import RestClient
from endless_sdk.clients.rest.rest_types import (
    SIGNED_TRANSACTION_CONTENT_TYPE,
    TRANSACTION_BY_HASH_ENDPOINT,
    TRANSACTION_ESTIMATE_GAS_PRICE_ENDPOINT,
    TRANSACTION_SIMULATE_ENDPOINT,
    TRANSACTION_SUBMIT_ENDPOINT,
)
from endless_sdk.errors import ApiError, RejectionError


def _raise_for_status(response: httpx.Response, accepted: tuple[int, ...]):
    if response.status_code in accepted:
        return
    if HTTPStatus.BAD_REQUEST <= response.status_code < HTTPStatus.INTERNAL_SERVER_ERROR:
        raise RejectionError(response.text, response.status_code)
    raise ApiError(response.text, response.status_code)


class TransactionRestClient(RestClient):
    """A class that provides methods to invoke `Transaction` REST endpoints from an Endless node.

    Attributes:
        api_client (ApiClient): Inherited from `RestClient`. Used to send HTTP requests to the Endless node.

    """

    async def transaction_by_hash(self, tx_hash: str) -> dict[str, Any] | None:
        """Retrieves detail of a transaction by given transaction hash.

        Args:
            tx_hash (str): The hash of the transaction.

        Returns:
           dict[str, Any] | None: Detail of the transaction, None while the node does not know the hash yet.

        """
        endpoint = TRANSACTION_BY_HASH_ENDPOINT.format(hash=tx_hash)
        response = await self.api_client.get(endpoint=endpoint, strict_mode=False)
        if response.status_code == HTTPStatus.NOT_FOUND:
            return None
        if response.status_code != HTTPStatus.OK:
            raise ApiError(response.text, response.status_code)
        return response.json()

    async def estimate_gas_price(self) -> dict[str, Any]:
        """Provides gas unit price estimates derived from recently executed transactions.

        Returns:
            dict[str, Any]: `deprioritized_gas_estimate`, `gas_estimate` and `prioritized_gas_estimate`.

        """
        return (
            await self.api_client.get(endpoint=TRANSACTION_ESTIMATE_GAS_PRICE_ENDPOINT)
        ).json()

    async def submit(self, transaction: bytes) -> str:
        """Submits a BCS encoded signed transaction to the Endless network.

        Args:
            transaction (bytes): BCS bytes of the signed transaction.

        Returns:
            str: Transaction hash of the submitted transaction.

        Raises:
            RejectionError: If the node refused the transaction.

        """
        response = await self.api_client.post(
            endpoint=TRANSACTION_SUBMIT_ENDPOINT,
            data=transaction,
            headers={"Content-Type": SIGNED_TRANSACTION_CONTENT_TYPE},
            strict_mode=False,
        )
        _raise_for_status(response, (HTTPStatus.OK, HTTPStatus.ACCEPTED))
        return response.json()["hash"]

    async def simulate(
        self,
        transaction: bytes,
        estimate_gas_unit_price: bool = False,
        estimate_max_gas_amount: bool = False,
        estimate_prioritized_gas_unit_price: bool = False,
    ) -> list[dict[str, Any]]:
        """Simulates a BCS encoded signed transaction carrying zeroed signatures.

        Args:
            transaction (bytes): BCS bytes of the signed transaction.
            estimate_gas_unit_price (bool): Let the node pick the gas unit price. Default to False.
            estimate_max_gas_amount (bool): Let the node pick the max gas amount. Default to False.
            estimate_prioritized_gas_unit_price (bool): Use the prioritized gas estimate, needs
                `estimate_gas_unit_price`. Default to False.

        Returns:
            list[dict[str, Any]]: Simulated user transactions, including `success`, `vm_status`, `gas_used` and
                `events`.

        """
        params = {
            "estimate_gas_unit_price": "true" if estimate_gas_unit_price else None,
            "estimate_max_gas_amount": "true" if estimate_max_gas_amount else None,
            "estimate_prioritized_gas_unit_price": (
                "true" if estimate_prioritized_gas_unit_price else None
            ),
        }
        response = await self.api_client.post(
            endpoint=TRANSACTION_SIMULATE_ENDPOINT,
            params=params,
            data=transaction,
            headers={"Content-Type": SIGNED_TRANSACTION_CONTENT_TYPE},
            strict_mode=False,
        )
        _raise_for_status(response, (HTTPStatus.OK,))
        return response.json()
