# Copyright © Endless
# Parts of the project are originally copyright © Supra
# SPDX-License-Identifier: Apache-2.0

from typing import Any

from endless_sdk.clients.rest.rest_client import RestClient
from endless_sdk.clients.rest.rest_types import (
    LEDGER_INFO_ENDPOINT,
    VIEW_FUNCTION_ENDPOINT,
)


class GeneralRestClient(RestClient):
    """A class that provides convenient methods to interact with general REST endpoints like the ledger info and `View`
    from an Endless node.

    Attributes:
        api_client (ApiClient): Inherited from `RestClient`. Used to send HTTP requests to the Endless node.

    """

    async def ledger_info(self) -> dict[str, Any]:
        """Provides the latest ledger information, including the chain id, epoch and ledger version.

        Returns:
            dict[str, Any]: Ledger information.

        """
        return (await self.api_client.get(endpoint=LEDGER_INFO_ENDPOINT)).json()

    async def network_chain_id(self) -> int:
        """Provides the network Chain-ID.

        Returns:
            int: Network Chain-ID.

        """
        return int((await self.ledger_info())["chain_id"])

    async def view(
        self,
        function: str,
        type_arguments: list[str],
        arguments: list[Any],
    ) -> list[Any]:
        """Execute a view Move function with the given parameters and return its execution result.

        Args:
            function (str): Function id, e.g. `0x1::primary_fungible_store::balance`.
            type_arguments (list[str]): Type arguments of the function.
            arguments (list[Any]): Arguments of the function in their JSON form.

        Returns:
            list[Any]: Execution results of the view function.

        """
        data = {
            "function": function,
            "type_arguments": type_arguments,
            "arguments": arguments,
        }
        return (
            await self.api_client.post(endpoint=VIEW_FUNCTION_ENDPOINT, data=data)
        ).json()
