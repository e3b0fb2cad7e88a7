# Copyright © Endless
# SPDX-License-Identifier: Apache-2.0

from endless_sdk.clients.rest.endless_client import (
    BuildOptions,
    EndlessClient,
    EndlessClientConfig,
    TransactionConfig,
)

__all__ = ["BuildOptions", "EndlessClient", "EndlessClientConfig", "TransactionConfig"]
