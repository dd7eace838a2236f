"""Chain registry for contract naming.

Single source of truth for chain ids, display names, network families,
ENSIP-11 coin types, default RPC endpoints and default contract addresses.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum

ETHEREUM_COIN_TYPE = 60
ENSIP11_EVM_BIT = 0x80000000


class NetworkFamily(Enum):
    ETHEREUM = "ethereum"
    BASE = "base"
    L2 = "l2"


class ChainId:
    MAINNET = 1
    SEPOLIA = 11155111
    OPTIMISM = 10
    OPTIMISM_SEPOLIA = 11155420
    ARBITRUM = 42161
    ARBITRUM_SEPOLIA = 421614
    SCROLL = 534352
    SCROLL_SEPOLIA = 534351
    BASE = 8453
    BASE_SEPOLIA = 84532
    LINEA = 59144
    LINEA_SEPOLIA = 59141


@dataclass(frozen=True)
class ContractAddresses:
    ens_registry: str | None = None
    name_wrapper: str | None = None
    public_resolver: str | None = None
    reverse_registrar: str | None = None
    naming_contract: str | None = None
    l2_reverse_registrar: str | None = None

    def merged(self, overrides: dict[str, str]) -> "ContractAddresses":
        known = {k: v for k, v in overrides.items() if k in self.__dataclass_fields__}
        return replace(self, **known)


@dataclass(frozen=True)
class Chain:
    chain_id: int
    name: str
    family: NetworkFamily
    is_testnet: bool
    rpc_url: str
    contracts: ContractAddresses = field(default_factory=ContractAddresses)

    @property
    def coin_type(self) -> int:
        if self.chain_id in (ChainId.MAINNET, ChainId.SEPOLIA):
            return ETHEREUM_COIN_TYPE
        return coin_type_for_chain(self.chain_id)


def coin_type_for_chain(chain_id: int) -> int:
    return (ENSIP11_EVM_BIT | chain_id) & 0xFFFFFFFF


ENS_REGISTRY = "0x00000000000C2E074eC69A0dFb2997BA6C7d2e1e"

CHAINS: dict[int, Chain] = {
    ChainId.MAINNET: Chain(
        ChainId.MAINNET,
        "Ethereum",
        NetworkFamily.ETHEREUM,
        False,
        "https://ethereum-rpc.publicnode.com",
        ContractAddresses(
            ens_registry=ENS_REGISTRY,
            name_wrapper="0xD4416b13d2b3a9aBae7AcD5D6C2BbDBE25686401",
            public_resolver="0x231b0Ee14048e9dCcD1d247744d114a4EB5E8E63",
            reverse_registrar="0xa58E81fe9b61B5c3fE2AFD33CF304c454AbFc7Cb",
        ),
    ),
    ChainId.SEPOLIA: Chain(
        ChainId.SEPOLIA,
        "Sepolia",
        NetworkFamily.ETHEREUM,
        True,
        "https://ethereum-sepolia-rpc.publicnode.com",
        ContractAddresses(
            ens_registry=ENS_REGISTRY,
            name_wrapper="0x0635513f179D50A207757E05759CbD106d7dFcE8",
            public_resolver="0x8FADE66B79cC9f707aB26799354482EB93a5B7dD",
            reverse_registrar="0xA0a1AbcDAe1a2a4A2EF8e9113Ff0e02DD81DC0C6",
        ),
    ),
    ChainId.OPTIMISM: Chain(
        ChainId.OPTIMISM, "Optimism", NetworkFamily.L2, False, "https://mainnet.optimism.io"
    ),
    ChainId.OPTIMISM_SEPOLIA: Chain(
        ChainId.OPTIMISM_SEPOLIA,
        "Optimism Sepolia",
        NetworkFamily.L2,
        True,
        "https://sepolia.optimism.io",
    ),
    ChainId.ARBITRUM: Chain(
        ChainId.ARBITRUM, "Arbitrum", NetworkFamily.L2, False, "https://arb1.arbitrum.io/rpc"
    ),
    ChainId.ARBITRUM_SEPOLIA: Chain(
        ChainId.ARBITRUM_SEPOLIA,
        "Arbitrum Sepolia",
        NetworkFamily.L2,
        True,
        "https://sepolia-rollup.arbitrum.io/rpc",
    ),
    ChainId.SCROLL: Chain(
        ChainId.SCROLL, "Scroll", NetworkFamily.L2, False, "https://rpc.scroll.io"
    ),
    ChainId.SCROLL_SEPOLIA: Chain(
        ChainId.SCROLL_SEPOLIA,
        "Scroll Sepolia",
        NetworkFamily.L2,
        True,
        "https://sepolia-rpc.scroll.io",
    ),
    ChainId.BASE: Chain(
        ChainId.BASE, "Base", NetworkFamily.BASE, False, "https://mainnet.base.org"
    ),
    ChainId.BASE_SEPOLIA: Chain(
        ChainId.BASE_SEPOLIA,
        "Base Sepolia",
        NetworkFamily.BASE,
        True,
        "https://sepolia.base.org",
    ),
    ChainId.LINEA: Chain(
        ChainId.LINEA, "Linea", NetworkFamily.L2, False, "https://rpc.linea.build"
    ),
    ChainId.LINEA_SEPOLIA: Chain(
        ChainId.LINEA_SEPOLIA,
        "Linea Sepolia",
        NetworkFamily.L2,
        True,
        "https://rpc.sepolia.linea.build",
    ),
}

# Selectable secondary networks by name: (mainnet chain, testnet chain).
SECONDARY_NETWORKS: dict[str, tuple[int, int]] = {
    "Optimism": (ChainId.OPTIMISM, ChainId.OPTIMISM_SEPOLIA),
    "Arbitrum": (ChainId.ARBITRUM, ChainId.ARBITRUM_SEPOLIA),
    "Scroll": (ChainId.SCROLL, ChainId.SCROLL_SEPOLIA),
    "Base": (ChainId.BASE, ChainId.BASE_SEPOLIA),
    "Linea": (ChainId.LINEA, ChainId.LINEA_SEPOLIA),
}

PRIMARY_CHAIN_IDS = frozenset({ChainId.MAINNET, ChainId.SEPOLIA})


def get_chain(chain_id: int) -> Chain:
    try:
        return CHAINS[chain_id]
    except KeyError:
        raise ValueError(f"Unsupported chain id: {chain_id}") from None


def get_chain_name(chain_id: int) -> str:
    chain = CHAINS.get(chain_id)
    return chain.name if chain else f"chain {chain_id}"


def secondary_chain_id(name: str, primary_chain_id: int) -> int:
    """Resolve a secondary network name against the primary network.

    Mainnet primaries pair with mainnet L2s, every other primary with the
    Sepolia deployments.
    """
    pair = SECONDARY_NETWORKS.get(name)
    if pair is None:
        raise ValueError(f"Unknown secondary network: {name}")
    mainnet_id, testnet_id = pair
    return mainnet_id if primary_chain_id == ChainId.MAINNET else testnet_id


def is_primary_naming_chain(chain_id: int) -> bool:
    return chain_id in PRIMARY_CHAIN_IDS or (
        chain_id in CHAINS and CHAINS[chain_id].family == NetworkFamily.BASE
    )
