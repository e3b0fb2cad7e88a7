# Copyright © Endless
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class NetworkConfig:
    """Where a network's node lives and which chain it serves.

    Attributes:
        name (str): Short name used to look the network up, e.g. `testnet`.
        chain_id (int | None): Chain id expected in transactions. When None the client asks the node.
        node_url (str): Base URL of the node REST API, including the version path.

    """

    name: str
    chain_id: int | None
    node_url: str


TESTNET = NetworkConfig(
    name="testnet", chain_id=221, node_url="https://rpc-test.endless.link/v1"
)
MAINNET = NetworkConfig(
    name="mainnet", chain_id=220, node_url="https://rpc.endless.link/v1"
)


@dataclass
class NetworkRegistry:
    """A name to `NetworkConfig` map owned by whoever builds it, there is no process wide registry."""

    networks: dict[str, NetworkConfig] = field(default_factory=dict)

    @staticmethod
    def with_defaults() -> NetworkRegistry:
        registry = NetworkRegistry()
        registry.register(TESTNET)
        registry.register(MAINNET)
        return registry

    def register(self, config: NetworkConfig):
        self.networks[config.name] = config

    def get(self, name: str) -> NetworkConfig:
        try:
            return self.networks[name]
        except KeyError:
            raise KeyError(
                f"Unknown network {name}, known networks: {sorted(self.networks)}"
            ) from None

    def __contains__(self, name: str) -> bool:
        return name in self.networks
