"""
Contract handle factories.
"""
from typing import Any, Dict, List

from web3 import AsyncWeb3

from .abi import EVENT_ABI, LMSR_MARKET_MAKER_ABI, MARKET_ABI, MARKET_FACTORY_ABI, TOKEN_ABI
from .normalize import to_address


class ContractFactory:
    """Creates handles for deployed contracts sharing one ABI"""

    def __init__(self, w3: AsyncWeb3, name: str, abi: List[Dict[str, Any]]):
        self.w3 = w3
        self.name = name
        self.abi = abi

    def at(self, address: Any) -> Any:
        """
        Get a handle to the contract deployed at ``address``

        Args:
            address: Hex address, raw bytes, or an object exposing ``.address``

        Raises:
            ArgumentError: If the address is invalid
        """
        checksum = to_address(address, method_name=f"{self.name}.at", field="address")
        return self.w3.eth.contract(address=checksum, abi=self.abi)

    def __repr__(self) -> str:
        return f"ContractFactory({self.name!r})"


class Contracts:
    """The contract types the SDK talks to"""

    def __init__(self, w3: AsyncWeb3):
        self.market_factory = ContractFactory(w3, "MarketFactory", MARKET_FACTORY_ABI)
        self.market = ContractFactory(w3, "Market", MARKET_ABI)
        self.event = ContractFactory(w3, "Event", EVENT_ABI)
        self.token = ContractFactory(w3, "Token", TOKEN_ABI)
        self.lmsr_market_maker = ContractFactory(w3, "LMSRMarketMaker", LMSR_MARKET_MAKER_ABI)
