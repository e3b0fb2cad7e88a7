# Copyright © Endless
# Parts of the project are originally copyright © Supra
# SPDX-License-Identifier: Apache-2.0

from typing import Any

from endless_sdk.account_address import AccountAddress
from endless_sdk.clients.rest.rest_client import RestClient
from endless_sdk.clients.rest.rest_types import (
    ACCOUNT_ENDPOINT,
    ACCOUNT_MODULE_ENDPOINT,
    ACCOUNT_RESOURCE_ENDPOINT,
)


class AccountRestClient(RestClient):
    """A class that provides methods to invoke `Account` REST endpoints from an Endless node.

    Attributes:
        api_client (ApiClient): Inherited from `RestClient`. Used to send HTTP requests to the Endless node.

    """

    async def account(
        self,
        account_address: AccountAddress,
    ) -> dict[str, Any]:
        """Provides the authentication keys and the sequence number of the given account.

        Args:
            account_address (AccountAddress): Address of the account.

        Returns:
            dict[str, Any]: `sequence_number` as a decimal string and `authentication_key` as a list of hex keys.

        """
        endpoint = ACCOUNT_ENDPOINT.format(account_address=account_address)
        return (await self.api_client.get(endpoint=endpoint)).json()

    async def account_resource(
        self,
        account_address: AccountAddress,
        resource_type: str,
    ) -> dict[str, Any]:
        """Retrieves an individual resource from a given account.

        Args:
            account_address (AccountAddress): Address of the account.
            resource_type (str): Type of the resource e.g. '0x1::account::Account'.

        Returns:
            dict[str, Any]: An individual resource from a given account.

        """
        endpoint = ACCOUNT_RESOURCE_ENDPOINT.format(
            account_address=account_address, resource_type=resource_type
        )
        return (await self.api_client.get(endpoint=endpoint)).json()

    async def account_module(
        self,
        account_address: AccountAddress,
        module_name: str,
    ) -> dict[str, Any]:
        """Retrieves an individual module, bytecode and ABI, from a given account.

        Args:
            account_address (AccountAddress): Address of the account.
            module_name (str): Name of the module to retrieve e.g. 'endless_account'

        Returns:
            dict[str, Any]: An individual module from a given account.

        """
        endpoint = ACCOUNT_MODULE_ENDPOINT.format(
            account_address=account_address, module_name=module_name
        )
        return (await self.api_client.get(endpoint=endpoint)).json()
