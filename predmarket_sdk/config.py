"""
Network configuration.

Networks are described in the bundled ``networks.json``. Every setting can be
overridden per network through environment variables named after the network
(``SEPOLIA_RPC_URL``, ``SEPOLIA_MARKET_FACTORY``, ``SEPOLIA_LMSR_MARKET_MAKER``),
and explicit arguments take precedence over both.
"""
import importlib.resources
import json
import logging
import os
from typing import Any, Dict, Optional

from .exceptions import NetworkConfigError

logger = logging.getLogger(__name__)


class NetworkConfig:
    """Lookup of per-network RPC endpoints, chain ids and contract addresses"""

    _networks_cache: Optional[Dict[str, Dict[str, Any]]] = None

    @classmethod
    def load_networks(cls) -> Dict[str, Dict[str, Any]]:
        """Load the bundled network definitions, caching them after first use"""
        if cls._networks_cache is None:
            resource = importlib.resources.files("predmarket_sdk").joinpath("networks.json")
            with resource.open("r", encoding="utf-8") as f:
                cls._networks_cache = json.load(f)
            logger.debug(f"Loaded {len(cls._networks_cache)} network definitions")
        return cls._networks_cache

    @classmethod
    def get_network(cls, network: str) -> Dict[str, Any]:
        """
        Get a network definition

        Raises:
            NetworkConfigError: If the network is unknown
        """
        networks = cls.load_networks()
        if network not in networks:
            available = ", ".join(sorted(networks))
            raise NetworkConfigError(f"Unknown network '{network}'. Available networks: {available}")
        return networks[network]

    @staticmethod
    def _env_name(network: str, suffix: str) -> str:
        return f"{network.upper().replace('-', '_')}_{suffix}"

    @classmethod
    def _lookup(cls, network: str, key: str, env_suffix: str, override: Optional[str]) -> Optional[str]:
        if override:
            return override
        env_value = os.environ.get(cls._env_name(network, env_suffix))
        if env_value:
            return env_value
        return cls.get_network(network).get(key)

    @classmethod
    def get_rpc_url(cls, network: str, override: Optional[str] = None) -> str:
        """RPC endpoint: override, then ``<NETWORK>_RPC_URL``, then the bundled value"""
        rpc_url = cls._lookup(network, "rpc", "RPC_URL", override)
        if not rpc_url:
            raise NetworkConfigError(f"No RPC URL configured for network '{network}'")
        return rpc_url

    @classmethod
    def get_chain_id(cls, network: str) -> int:
        return int(cls.get_network(network)["chainId"])

    @classmethod
    def get_market_factory_address(cls, network: str, override: Optional[str] = None) -> Optional[str]:
        return cls._lookup(network, "marketFactory", "MARKET_FACTORY", override)

    @classmethod
    def get_lmsr_market_maker_address(cls, network: str, override: Optional[str] = None) -> Optional[str]:
        return cls._lookup(network, "lmsrMarketMaker", "LMSR_MARKET_MAKER", override)

    @classmethod
    def get_explorer_url(cls, network: str) -> Optional[str]:
        return cls.get_network(network).get("explorer")
