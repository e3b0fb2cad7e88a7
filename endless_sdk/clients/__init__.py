# Copyright © Endless
# SPDX-License-Identifier: Apache-2.0

from endless_sdk.clients.api_client import ApiClient, ApiClientConfig

__all__ = ["ApiClient", "ApiClientConfig"]
