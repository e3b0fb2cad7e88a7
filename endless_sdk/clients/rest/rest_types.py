# Copyright © Endless
# SPDX-License-Identifier: Apache-2.0

"""Node REST endpoints, relative to the versioned base URL."""

LEDGER_INFO_ENDPOINT = ""

ACCOUNT_ENDPOINT = "accounts/{account_address}"
ACCOUNT_RESOURCE_ENDPOINT = "accounts/{account_address}/resource/{resource_type}"
ACCOUNT_MODULE_ENDPOINT = "accounts/{account_address}/module/{module_name}"

TRANSACTION_SUBMIT_ENDPOINT = "transactions"
TRANSACTION_SIMULATE_ENDPOINT = "transactions/simulate"
TRANSACTION_BY_HASH_ENDPOINT = "transactions/by_hash/{hash}"
TRANSACTION_ESTIMATE_GAS_PRICE_ENDPOINT = "estimate_gas_price"

VIEW_FUNCTION_ENDPOINT = "view"

SIGNED_TRANSACTION_CONTENT_TYPE = "application/x.endless.signed_transaction+bcs"
