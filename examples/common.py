# Copyright © Endless
# Parts of the project are originally copyright © Aptos Foundation
# SPDX-License-Identifier: Apache-2.0

import os

from endless_sdk.network import TESTNET, NetworkConfig

NODE_URL = os.getenv("ENDLESS_NODE_URL", TESTNET.node_url)
CHAIN_ID = os.getenv("ENDLESS_CHAIN_ID")

NETWORK = NetworkConfig(
    name=os.getenv("ENDLESS_NETWORK", TESTNET.name),
    chain_id=int(CHAIN_ID) if CHAIN_ID is not None else TESTNET.chain_id,
    node_url=NODE_URL,
)
