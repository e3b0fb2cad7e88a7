# Copyright © Endless
# Parts of the project are originally copyright © Supra
# SPDX-License-Identifier: Apache-2.0

import asyncio
import copy
import logging
import time
from dataclasses import dataclass, field
from typing import Any

from endless_sdk.abi import entry_function_from_abi
from endless_sdk.account import Signer
from endless_sdk.account_address import ACCOUNT_ONE, ACCOUNT_ZERO, AccountAddress
from endless_sdk.bcs import Serializer
from endless_sdk.clients import ApiClient, ApiClientConfig
from endless_sdk.clients.rest.account import AccountRestClient
from endless_sdk.clients.rest.general import GeneralRestClient
from endless_sdk.clients.rest.transaction import TransactionRestClient
from endless_sdk.coin_payloads import (
    ENDLESS_COIN,
    METADATA_TYPE_TAG,
    batch_transfer_payload,
    safe_transfer_payload,
    transfer_payload,
    withdraw_digest,
)
from endless_sdk.errors import (
    ApiError,
    EncodingError,
    FaucetRequestNotAcceptedError,
    TransactionWaitTimeoutReachedError,
)
from endless_sdk.network import NetworkConfig
from endless_sdk.transactions import (
    EntryFunction,
    FeePayerRawTransaction,
    ModuleId,
    MultiAgentRawTransaction,
    RawTransaction,
    SignedTransaction,
    TransactionArgument,
    TransactionPayload,
)
from endless_sdk.type_tag import TypeTag

PENDING_TRANSACTION = "pending_transaction"


@dataclass
class TransactionConfig:
    """Configuration options for transaction payload generation and polling.

    This dataclass defines default parameters that are used in transaction payload generation and polling operation.
    It is intended to be passed into functions of the `EndlessClient` that involves transaction payload generation and
    submission.

    Attributes:
        expiration_ttl (int): Time-to-live, in seconds, before a transaction expires and is rejected by the network.
            Defaults to 600.
        gas_unit_price (int): Price per unit of gas used to execute the transaction. Defaults to 100.
        max_gas_amount (int): Maximum number of gas units allowed per transaction. Defaults to 500,000.
        transaction_wait_time_in_seconds (int): Number of seconds to wait for a transaction to be executed before timing
            out. Defaults to 20.
        polling_wait_time_in_seconds (float): Delay, in seconds, between successive polling attempts when waiting for
            transaction confirmation. Defaults to 1.
        wait_for_transaction (bool): Whether to wait for the transaction to be confirmed after submission.
            Defaults to True.

    """

    expiration_ttl: int = 600
    gas_unit_price: int = 100
    max_gas_amount: int = 500_000
    transaction_wait_time_in_seconds: int = 20
    polling_wait_time_in_seconds: float = 1
    wait_for_transaction: bool = True


@dataclass
class EndlessClientConfig(TransactionConfig, ApiClientConfig):
    """Configuration for the Endless client.

    This dataclass inherits from both `TransactionConfig` and `ApiClientConfig`, allowing a single object to hold both
    transaction-related parameters and API client connection settings.
    """


@dataclass
class BuildOptions:
    """Per transaction overrides used while building a raw transaction.

    Every field left as None falls back to the client's `TransactionConfig` or to a lookup on the node.

    Attributes:
        sequence_number (int | None): Sequence number to use instead of the account's on-chain one.
        max_gas_amount (int | None): Maximum gas units the transaction may spend.
        gas_unit_price (int | None): Price per gas unit. Can not be combined with `estimate_gas_unit_price`.
        expiration_seconds (int | None): Seconds from now until the transaction expires.
        chain_id (int | None): Chain id to use instead of the network's.
        fee_payer (AccountAddress | None): Sponsor of a fee payer transaction. `0x0` marks a sponsor that is not known
            yet.
        additional_signers (list[AccountAddress]): Secondary signers of a multi agent or fee payer transaction.
        estimate_gas_unit_price (bool): Ask the node for the current gas unit price.
        estimate_max_gas_amount (bool): Simulate the transaction to size the max gas amount, needs a signer.
        estimate_prioritized_gas_unit_price (bool): Use the prioritized estimate, needs `estimate_gas_unit_price`.

    """

    sequence_number: int | None = None
    max_gas_amount: int | None = None
    gas_unit_price: int | None = None
    expiration_seconds: int | None = None
    chain_id: int | None = None
    fee_payer: AccountAddress | None = None
    additional_signers: list[AccountAddress] = field(default_factory=list)
    estimate_gas_unit_price: bool = False
    estimate_max_gas_amount: bool = False
    estimate_prioritized_gas_unit_price: bool = False

    def __post_init__(self):
        for name in (
            "sequence_number",
            "max_gas_amount",
            "gas_unit_price",
            "expiration_seconds",
            "chain_id",
        ):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ValueError(f"{name} must not be negative, got {value}")
        if self.gas_unit_price is not None and self.estimate_gas_unit_price:
            raise ValueError(
                "gas_unit_price and estimate_gas_unit_price can not be used together"
            )
        if self.estimate_prioritized_gas_unit_price and not self.estimate_gas_unit_price:
            raise ValueError(
                "estimate_prioritized_gas_unit_price requires estimate_gas_unit_price"
            )


class EndlessClient(
    AccountRestClient,
    TransactionRestClient,
    GeneralRestClient,
):
    """Unified client for interacting with an Endless node, as well as building, signing and submitting transactions.

    This class acts as a single entry point for developers, combining the specialized REST clients into one unified
    interface. On top of the REST API it resolves everything a raw transaction needs (sequence number, gas, expiration
    and chain id), signs with any `Signer` and tracks the submitted transaction until it leaves the pending state.

    Attributes:
        _chain_id (int | None): The chain-id of the network, cached after the first lookup.
        api_client (ApiClient): Inherited from `RestClient`. Used to send HTTP requests to the Endless node.
        transaction_config (TransactionConfig): Defaults for transaction building and polling.

    """

    _chain_id: int | None
    transaction_config: TransactionConfig

    def __init__(
        self,
        network: NetworkConfig | str,
        endless_client_config: EndlessClientConfig | None = None,
    ):
        """Initializes the REST client.

        Args:
            network (NetworkConfig | str): The network to talk to, or the base URL of a node.
            endless_client_config (EndlessClientConfig): Configuration options for requests.

        """
        if isinstance(network, NetworkConfig):
            base_url = network.node_url
            self._chain_id = network.chain_id
        else:
            base_url = network
            self._chain_id = None
        endless_client_config = endless_client_config or EndlessClientConfig()

        self.transaction_config = TransactionConfig(
            expiration_ttl=endless_client_config.expiration_ttl,
            gas_unit_price=endless_client_config.gas_unit_price,
            max_gas_amount=endless_client_config.max_gas_amount,
            transaction_wait_time_in_seconds=endless_client_config.transaction_wait_time_in_seconds,
            polling_wait_time_in_seconds=endless_client_config.polling_wait_time_in_seconds,
            wait_for_transaction=endless_client_config.wait_for_transaction,
        )

        api_client_config = ApiClientConfig(
            http2=endless_client_config.http2,
            access_token=endless_client_config.access_token,
        )
        super().__init__(ApiClient(base_url, api_client_config))

    async def close(self):
        """Closes the HTTP client session."""
        await self.api_client.close()

    async def chain_id(self) -> int:
        """Provides the network Chain-ID.

        Returns:
            int: Network Chain-ID.

        """
        if self._chain_id is None:
            self._chain_id = await self.network_chain_id()
        return self._chain_id

    async def account_sequence_number(
        self,
        account_address: AccountAddress,
    ) -> int:
        """Provides the current sequence number of the given account.

        Args:
            account_address (AccountAddress): Address of the account.

        Returns:
            int: The current sequence number for the given account, 0 for an account that does not exist yet.

        """
        try:
            response = await self.account(account_address)
        except ApiError as e:
            if e.status_code == 404:
                return 0
            raise
        return int(response["sequence_number"])

    async def account_balance(
        self, account_address: AccountAddress, coin: str | None = None
    ) -> int:
        """Provides the fungible asset balance of the given account.

        Args:
            account_address (AccountAddress): Address of the account.
            coin (str | None): Base58 address of the asset's metadata object. Default to the native EndlessCoin.

        Returns:
            int: The balance held in the account's primary store.

        """
        coin_address = AccountAddress.from_base58(coin or ENDLESS_COIN)
        response = await self.view(
            "0x1::primary_fungible_store::balance",
            [str(METADATA_TYPE_TAG)],
            [str(account_address), str(coin_address)],
        )
        return int(response[0])

    async def entry_function_from_remote_abi(
        self,
        module_address: AccountAddress,
        module_name: str,
        function_name: str,
        type_args: list[TypeTag | str],
        args: list[Any],
    ) -> EntryFunction:
        """Fetches the module ABI from the node and encodes `args` against the named function.

        Args:
            module_address (AccountAddress): Address the module is published under.
            module_name (str): Name of the module.
            function_name (str): Name of the entry function.
            type_args (list[TypeTag | str]): Type arguments, parsed when given as strings.
            args (list[Any]): Plain Python values, one per non signer parameter.

        Returns:
            EntryFunction: The encoded entry function.

        Raises:
            EncodingError: If the function is unknown or an argument does not fit its parameter type.

        """
        module = await self.account_module(module_address, module_name)
        for function_abi in module.get("abi", {}).get("exposed_functions", []):
            if function_abi["name"] == function_name:
                return entry_function_from_abi(
                    function_abi,
                    module_address,
                    module_name,
                    function_name,
                    type_args,
                    args,
                )
        raise EncodingError(
            f"{module_address}::{module_name} has no function named {function_name}"
        )

    async def build_transaction(
        self,
        sender: Signer | AccountAddress,
        payload: TransactionPayload,
        options: BuildOptions | None = None,
    ) -> RawTransaction:
        """Builds a single signer raw transaction.

        Args:
            sender (Signer | AccountAddress): The sender, a signer is only needed to estimate the max gas amount.
            payload (TransactionPayload): The transaction payload.
            options (BuildOptions | None): Overrides of the client defaults. Default to None.

        Returns:
            RawTransaction: The constructed raw transaction object.

        """
        options = options or BuildOptions()
        if options.fee_payer is not None or options.additional_signers:
            raise ValueError(
                "fee_payer and additional_signers need build_transaction_multi_agent"
            )
        raw_transaction = await self._build_raw_transaction(sender, payload, options)
        if options.estimate_max_gas_amount and options.max_gas_amount is None:
            if isinstance(sender, AccountAddress):
                raise ValueError("estimate_max_gas_amount needs a signer to simulate with")
            raw_transaction.max_gas_amount = await self._estimate_max_gas_amount(
                SignedTransaction(
                    raw_transaction, sender.sign_simulated_transaction(raw_transaction)
                )
            )
        return raw_transaction

    async def build_transaction_multi_agent(
        self,
        sender: Signer | AccountAddress,
        payload: TransactionPayload,
        options: BuildOptions | None = None,
    ) -> MultiAgentRawTransaction | FeePayerRawTransaction:
        """Builds a raw transaction signed by more than the sender.

        A fee payer transaction is built whenever `options.fee_payer` is set, `0x0` included; the actual sponsor can
        then be filled in with `FeePayerRawTransaction.set_fee_payer`. Otherwise a multi agent transaction is built.

        Args:
            sender (Signer | AccountAddress): The sender.
            payload (TransactionPayload): The transaction payload.
            options (BuildOptions | None): Overrides of the client defaults. Default to None.

        Returns:
            MultiAgentRawTransaction | FeePayerRawTransaction: The raw transaction together with its signer set.

        Raises:
            ValueError: If `options.estimate_max_gas_amount` is set. Simulating needs every participant's key, which
                `create_multi_agent_transaction` and `create_fee_payer_transaction` have.

        """
        options = options or BuildOptions()
        if options.estimate_max_gas_amount and options.max_gas_amount is None:
            raise ValueError(
                "estimate_max_gas_amount needs every signer, use create_multi_agent_transaction "
                "or create_fee_payer_transaction"
            )
        raw_transaction = await self._build_raw_transaction(sender, payload, options)
        secondary_signers = list(options.additional_signers)
        if options.fee_payer is None:
            return MultiAgentRawTransaction(raw_transaction, secondary_signers)
        fee_payer = None if options.fee_payer == ACCOUNT_ZERO else options.fee_payer
        return FeePayerRawTransaction(raw_transaction, secondary_signers, fee_payer)

    async def _build_raw_transaction(
        self,
        sender: Signer | AccountAddress,
        payload: TransactionPayload,
        options: BuildOptions,
    ) -> RawTransaction:
        sender_address = sender if isinstance(sender, AccountAddress) else sender.address()

        if options.sequence_number is not None:
            sequence_number = options.sequence_number
        else:
            sequence_number = await self.account_sequence_number(sender_address)

        if options.gas_unit_price is not None:
            gas_unit_price = options.gas_unit_price
        elif options.estimate_gas_unit_price:
            estimate = await self.estimate_gas_price()
            key = (
                "prioritized_gas_estimate"
                if options.estimate_prioritized_gas_unit_price
                else "gas_estimate"
            )
            gas_unit_price = int(estimate[key])
        else:
            gas_unit_price = self.transaction_config.gas_unit_price

        expiration_seconds = (
            options.expiration_seconds
            if options.expiration_seconds is not None
            else self.transaction_config.expiration_ttl
        )
        chain_id = options.chain_id if options.chain_id is not None else await self.chain_id()
        max_gas_amount = (
            options.max_gas_amount
            if options.max_gas_amount is not None
            else self.transaction_config.max_gas_amount
        )

        return RawTransaction(
            sender_address,
            sequence_number,
            payload,
            max_gas_amount,
            gas_unit_price,
            int(time.time()) + expiration_seconds,
            chain_id,
        )

    async def _estimate_max_gas_amount(self, signed_transaction: SignedTransaction) -> int:
        results = await self.simulate(
            signed_transaction.bytes(), estimate_max_gas_amount=True
        )
        return int(results[0]["max_gas_amount"])

    @staticmethod
    def _take_max_gas_estimate(options: BuildOptions) -> bool:
        # The with-data builders can not simulate, the caller does it once every signer is known
        estimate = options.estimate_max_gas_amount and options.max_gas_amount is None
        options.estimate_max_gas_amount = False
        return estimate

    async def sign_transaction(
        self, signer: Signer, raw_transaction: RawTransaction
    ) -> SignedTransaction:
        return raw_transaction.to_signed_transaction(signer.sign_transaction(raw_transaction))

    async def build_sign_and_submit_transaction(
        self,
        signer: Signer,
        payload: TransactionPayload,
        options: BuildOptions | None = None,
    ) -> str:
        """Builds a transaction for `signer`, signs it and submits it.

        Args:
            signer (Signer): The sender.
            payload (TransactionPayload): The transaction payload.
            options (BuildOptions | None): Overrides of the client defaults. Default to None.

        Returns:
            str: Transaction hash.

        """
        raw_transaction = await self.build_transaction(signer, payload, options)
        signed_transaction = await self.sign_transaction(signer, raw_transaction)
        return await self.submit_transaction(signed_transaction)

    async def submit_transaction(
        self,
        signed_transaction: SignedTransaction,
        wait: bool | None = None,
    ) -> str:
        """Submits a given signed transaction to the Endless network.

        Args:
            signed_transaction (SignedTransaction): Signed transaction object to submit.
            wait (bool | None): Whether to wait until the transaction leaves the pending state. Default to the
                client's `wait_for_transaction` setting.

        Returns:
            str: Transaction hash of the submitted transaction.

        """
        transaction_hash = await self.submit(signed_transaction.bytes())
        logging.debug(
            f"Submitted {transaction_hash} from {signed_transaction.transaction.sender} "
            f"with sequence number {signed_transaction.transaction.sequence_number}"
        )
        if self.transaction_config.wait_for_transaction if wait is None else wait:
            await self.wait_for_transaction(transaction_hash)
        return transaction_hash

    async def wait_for_transaction(
        self,
        tx_hash: str,
        polling_wait_time_in_seconds: float | None = None,
        transaction_wait_time_in_seconds: float | None = None,
    ) -> dict[str, Any]:
        """Wait for a transaction till it's in a pending state and transaction wait timeout is not reached.

        This method repeatedly checks the transaction status until it is no longer pending or until the timeout is
        reached. Returns the transaction data regardless of success or failure status. The transaction is never
        resubmitted.

        Args:
            tx_hash (str): The hash of the transaction to wait for.
            polling_wait_time_in_seconds (float | None): Delay between two polls. Default to the client config.
            transaction_wait_time_in_seconds (float | None): How long to wait overall. Default to the client config.

        Returns:
            dict[str, Any]: The final transaction data once the transaction is no longer pending.

        Raises:
            TransactionWaitTimeoutReachedError: If the transaction is still pending once the wait time is over.

        """
        poll_period = (
            polling_wait_time_in_seconds
            if polling_wait_time_in_seconds is not None
            else self.transaction_config.polling_wait_time_in_seconds
        )
        timeout = (
            transaction_wait_time_in_seconds
            if transaction_wait_time_in_seconds is not None
            else self.transaction_config.transaction_wait_time_in_seconds
        )
        start_time = time.monotonic()
        while time.monotonic() - start_time <= timeout:
            await asyncio.sleep(poll_period)
            transaction_data = await self.transaction_by_hash(tx_hash)
            if (
                transaction_data is not None
                and transaction_data.get("type") != PENDING_TRANSACTION
            ):
                return transaction_data

        raise TransactionWaitTimeoutReachedError(tx_hash, timeout)

    async def simulate_transaction(
        self,
        transaction: SignedTransaction | RawTransaction,
        signer: Signer | None = None,
        estimate_gas_unit_price: bool = False,
        estimate_max_gas_amount: bool = False,
        estimate_prioritized_gas_unit_price: bool = False,
    ) -> list[dict[str, Any]]:
        """Simulates a transaction without committing it.

        A signed transaction has its signatures replaced with null signatures for the duration of the call, and they
        are put back once simulation is completed. A raw transaction is signed with null signatures by `signer`.

        Args:
            transaction (SignedTransaction | RawTransaction): The transaction to simulate.
            signer (Signer | None): Needed when `transaction` is a raw transaction. Default to None.
            estimate_gas_unit_price (bool): Let the node pick the gas unit price. Default to False.
            estimate_max_gas_amount (bool): Let the node pick the max gas amount. Default to False.
            estimate_prioritized_gas_unit_price (bool): Use the prioritized gas estimate. Default to False.

        Returns:
            list[dict[str, Any]]: Transaction simulation results.

        """
        if isinstance(transaction, RawTransaction):
            if signer is None:
                raise ValueError("A signer is needed to simulate a raw transaction")
            signed_transaction = SignedTransaction(
                transaction, signer.sign_simulated_transaction(transaction)
            )
        else:
            signed_transaction = copy.copy(transaction)
            signed_transaction.authenticator = copy.deepcopy(transaction.authenticator)
            signed_transaction.authenticator.unset_signature()

        return await self.simulate(
            signed_transaction.bytes(),
            estimate_gas_unit_price=estimate_gas_unit_price,
            estimate_max_gas_amount=estimate_max_gas_amount,
            estimate_prioritized_gas_unit_price=estimate_prioritized_gas_unit_price,
        )

    async def create_fee_payer_transaction(
        self,
        sender: Signer,
        fee_payer: Signer,
        secondary_accounts: list[Signer],
        transaction_payload: TransactionPayload,
        options: BuildOptions | None = None,
    ) -> SignedTransaction:
        """Creates a fee-payer authenticator type signed transaction.

        This method builds and signs a fee-payer authenticator type transaction, where the main sender, fee payer and
        zero or more secondary accounts sign the same raw transaction.

        Args:
            sender (Signer): The primary account sending the transaction.
            fee_payer (Signer): The fee payer account to pay transaction fee.
            secondary_accounts (list[Signer]): The secondary accounts that also authorize the transaction.
            transaction_payload (TransactionPayload): The transaction payload.
            options (BuildOptions | None): Overrides of the client defaults. Default to None.

        Returns:
            SignedTransaction: The constructed fee-payer authenticator type signed transaction.

        """
        options = copy.copy(options or BuildOptions())
        options.fee_payer = fee_payer.address()
        options.additional_signers = [x.address() for x in secondary_accounts]
        estimate_max_gas_amount = self._take_max_gas_estimate(options)
        fee_payer_raw_transaction = await self.build_transaction_multi_agent(
            sender, transaction_payload, options
        )
        if estimate_max_gas_amount:
            simulated = fee_payer_raw_transaction.to_fee_payer_signed_transaction(
                sender.sign_simulated_transaction(fee_payer_raw_transaction),
                fee_payer.sign_simulated_transaction(fee_payer_raw_transaction),
                [x.sign_simulated_transaction(fee_payer_raw_transaction) for x in secondary_accounts],
            )
            fee_payer_raw_transaction.inner().max_gas_amount = (
                await self._estimate_max_gas_amount(simulated)
            )
        return fee_payer_raw_transaction.to_fee_payer_signed_transaction(
            sender.sign_transaction(fee_payer_raw_transaction),
            fee_payer.sign_transaction(fee_payer_raw_transaction),
            [x.sign_transaction(fee_payer_raw_transaction) for x in secondary_accounts],
        )

    async def create_multi_agent_transaction(
        self,
        sender: Signer,
        secondary_accounts: list[Signer],
        transaction_payload: TransactionPayload,
        options: BuildOptions | None = None,
    ) -> SignedTransaction:
        """Creates a multi-agent authenticator type signed transaction.

        This method builds and signs a multi-agent authenticator type transaction, where the main sender and one or
        more secondary accounts sign the same raw transaction.

        Args:
            sender (Signer): The primary account sending the transaction.
            secondary_accounts (list[Signer]): The secondary accounts that also authorize the transaction.
            transaction_payload (TransactionPayload): The transaction payload.
            options (BuildOptions | None): Overrides of the client defaults. Default to None.

        Returns:
            SignedTransaction: The constructed multi-agent authenticator type signed transaction.

        """
        options = copy.copy(options or BuildOptions())
        options.fee_payer = None
        options.additional_signers = [x.address() for x in secondary_accounts]
        estimate_max_gas_amount = self._take_max_gas_estimate(options)
        multi_agent_raw_transaction = await self.build_transaction_multi_agent(
            sender, transaction_payload, options
        )
        if estimate_max_gas_amount:
            simulated = multi_agent_raw_transaction.to_multi_agent_signed_transaction(
                sender.sign_simulated_transaction(multi_agent_raw_transaction),
                [x.sign_simulated_transaction(multi_agent_raw_transaction) for x in secondary_accounts],
            )
            multi_agent_raw_transaction.inner().max_gas_amount = (
                await self._estimate_max_gas_amount(simulated)
            )
        return multi_agent_raw_transaction.to_multi_agent_signed_transaction(
            sender.sign_transaction(multi_agent_raw_transaction),
            [x.sign_transaction(multi_agent_raw_transaction) for x in secondary_accounts],
        )

    async def transfer_coins(
        self,
        sender: Signer,
        recipient: AccountAddress,
        amount: int,
        coin: str | None = None,
        options: BuildOptions | None = None,
    ) -> str:
        """Transfers `amount` of a fungible asset to a recipient.

        Args:
            sender (Signer): Sender account.
            recipient (AccountAddress): Recipient account address.
            amount (int): The amount to transfer, in the asset's smallest unit.
            coin (str | None): Base58 address of the asset's metadata. Default to the native EndlessCoin.
            options (BuildOptions | None): Overrides of the client defaults. Default to None.

        Returns:
            str: Transaction hash.

        """
        return await self.build_sign_and_submit_transaction(
            sender, transfer_payload(recipient, amount, coin), options
        )

    async def batch_transfer_coins(
        self,
        sender: Signer,
        recipients: list[AccountAddress],
        amounts: list[int],
        coin: str | None = None,
        options: BuildOptions | None = None,
    ) -> str:
        """Transfers `amounts[i]` to `recipients[i]` in a single transaction.

        Args:
            sender (Signer): Sender account.
            recipients (list[AccountAddress]): Recipient account addresses.
            amounts (list[int]): Amount per recipient.
            coin (str | None): Base58 address of the asset's metadata. Default to the native EndlessCoin.
            options (BuildOptions | None): Overrides of the client defaults. Default to None.

        Returns:
            str: Transaction hash.

        """
        return await self.build_sign_and_submit_transaction(
            sender, batch_transfer_payload(recipients, amounts, coin), options
        )

    async def safe_transfer_coins(
        self,
        sender: Signer,
        recipient: AccountAddress,
        amount: int,
        coin: str | None = None,
        options: BuildOptions | None = None,
    ) -> str:
        """Transfers a fungible asset with a transaction that can not withdraw more than the simulation did.

        The plain transfer is simulated first. The digest of the sender's withdrawals in that run is attached to a
        SafeEntryFunction, which is signed with the same sequence number and submitted.

        Args:
            sender (Signer): Sender account.
            recipient (AccountAddress): Recipient account address.
            amount (int): The amount to transfer.
            coin (str | None): Base58 address of the asset's metadata. Default to the native EndlessCoin.
            options (BuildOptions | None): Overrides of the client defaults. Default to None.

        Returns:
            str: Transaction hash.

        Raises:
            RejectionError: If the simulation failed.

        """
        simulated = await self.build_transaction(
            sender, transfer_payload(recipient, amount, coin), options
        )
        results = await self.simulate_transaction(simulated, sender)
        digest = withdraw_digest(results, sender.address())

        safe_options = copy.copy(options or BuildOptions())
        safe_options.sequence_number = simulated.sequence_number
        raw_transaction = await self.build_transaction(
            sender, safe_transfer_payload(recipient, amount, digest, coin), safe_options
        )
        signed_transaction = await self.sign_transaction(sender, raw_transaction)
        return await self.submit_transaction(signed_transaction)

    async def faucet(self, signer: Signer, options: BuildOptions | None = None) -> str:
        """Funds `signer`'s account from the test network faucet.

        The faucet is an on-chain module: the account asks for funds with a transaction of its own, which also creates
        the account on first use.

        Args:
            signer (Signer): The account to fund.
            options (BuildOptions | None): Overrides of the client defaults. Default to None.

        Returns:
            str: Transaction hash of the faucet transaction.

        Raises:
            FaucetRequestNotAcceptedError: If the node rejected the request or the transaction failed.

        """
        payload = TransactionPayload(
            EntryFunction(
                ModuleId(ACCOUNT_ONE, "faucet"),
                "fund",
                [],
                [TransactionArgument(signer.address(), Serializer.struct).encode()],
            )
        )
        try:
            raw_transaction = await self.build_transaction(signer, payload, options)
            signed_transaction = await self.sign_transaction(signer, raw_transaction)
            tx_hash = await self.submit_transaction(signed_transaction, wait=False)
            result = await self.wait_for_transaction(tx_hash)
        except (ApiError, TransactionWaitTimeoutReachedError) as e:
            raise FaucetRequestNotAcceptedError(str(e)) from e
        if not result.get("success", False):
            raise FaucetRequestNotAcceptedError(
                f"Faucet transaction {tx_hash} failed: {result.get('vm_status')}"
            )
        return tx_hash
