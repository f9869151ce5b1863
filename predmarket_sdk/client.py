"""
PredictionMarketClient - Main client for the prediction market contracts.
"""
import logging
import urllib.parse
from typing import Any, Optional, Union

import aiohttp
from web3 import AsyncWeb3

from .config import NetworkConfig
from .contracts import Contracts
from .dispatch import TransactionDispatcher
from .exceptions import NetworkConfigError
from .markets import BuyApprovalAmount, MarketOperations
from .signer import LocalSigner, Signer


class PredictionMarketClient(MarketOperations):
    """
    Client for creating and trading on prediction markets.

    To use this client, you'll need:
    - An Ethereum RPC endpoint
    - Either a private key or a custom signer
    - The market factory address, to create markets
    - The LMSR market maker address, to buy and sell

    All contract interaction is asynchronous::

        client = PredictionMarketClient(rpc_url, signer=LocalSigner(key), ...)
        cost = await client.buy_outcome_tokens(market, 0, 10)
    """

    def __init__(
        self,
        rpc_url: str,
        signer: Optional[Signer] = None,
        priv_key: Optional[str] = None,
        market_factory_address: Optional[str] = None,
        lmsr_market_maker_address: Optional[str] = None,
        expected_chain_id: Optional[int] = None,
        explorer_url: Optional[str] = None,
        buy_approval: Union[BuyApprovalAmount, str] = BuyApprovalAmount.COST,
        receipt_timeout: float = TransactionDispatcher.DEFAULT_RECEIPT_TIMEOUT,
        poll_latency: float = TransactionDispatcher.DEFAULT_POLL_LATENCY,
        timeout: int = 30,
        w3: Optional[AsyncWeb3] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the PredictionMarketClient

        Args:
            rpc_url: Ethereum RPC endpoint URL
            signer: Signer for transactions (optional if priv_key provided)
            priv_key: Ethereum private key (optional if signer provided)
            market_factory_address: MarketFactory contract address
            lmsr_market_maker_address: LMSRMarketMaker contract address
            expected_chain_id: Chain id checked by ``assert_chain_id``
            explorer_url: Block explorer base URL used by ``tx_url``
            buy_approval: Collateral amount approved before a purchase
            receipt_timeout: Seconds to wait for a transaction to be mined
            poll_latency: Seconds between receipt polls
            timeout: Timeout for RPC requests in seconds
            w3: Preconfigured AsyncWeb3 instance to use instead of rpc_url
            logger: Optional logger instance to use for debug/info logging

        Raises:
            ValueError: If neither priv_key nor signer is provided
            ValueError: If the RPC URL doesn't use https (unless it's localhost/127.0.0.1)
        """
        if not priv_key and not signer:
            raise ValueError("Either priv_key or signer must be provided")

        # Validate URL for security
        parsed = urllib.parse.urlparse(rpc_url)
        host = parsed.hostname or ''
        is_local = host in ('localhost', '127.0.0.1')
        if parsed.scheme != 'https' and not is_local:
            raise ValueError(f"rpc_url must use https:// for security (got: {parsed.scheme}://)")

        self.rpc_url = rpc_url
        self.expected_chain_id = expected_chain_id
        self.explorer_url = explorer_url.rstrip('/') if explorer_url else None
        self.buy_approval = BuyApprovalAmount(buy_approval)
        self.logger = logger or logging.getLogger(__name__)

        self.signer: Signer = signer or LocalSigner(priv_key)

        self.w3 = w3 or AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(
            rpc_url,
            request_kwargs={"timeout": aiohttp.ClientTimeout(total=timeout)}
        ))
        self.contracts = Contracts(self.w3)
        self.dispatcher = TransactionDispatcher(
            self.w3,
            signer=self.signer,
            receipt_timeout=receipt_timeout,
            poll_latency=poll_latency,
            logger=self.logger
        )

        self.market_factory = None
        if market_factory_address:
            self.market_factory = self.contracts.market_factory.at(market_factory_address)

        self.lmsr_market_maker = None
        if lmsr_market_maker_address:
            self.lmsr_market_maker = self.contracts.lmsr_market_maker.at(lmsr_market_maker_address)

    @classmethod
    def from_network(
        cls,
        network: str,
        signer: Optional[Signer] = None,
        rpc_url: Optional[str] = None,
        market_factory_address: Optional[str] = None,
        lmsr_market_maker_address: Optional[str] = None,
        **kwargs: Any
    ) -> "PredictionMarketClient":
        """
        Create a client from a named network configuration

        Args:
            network: Network name from networks.json
            signer: Signer for transactions
            rpc_url: Override for the configured RPC endpoint
            market_factory_address: Override for the configured factory
            lmsr_market_maker_address: Override for the configured market maker
            **kwargs: Passed through to the constructor

        Raises:
            NetworkConfigError: If the network is unknown
        """
        return cls(
            rpc_url=NetworkConfig.get_rpc_url(network, override=rpc_url),
            signer=signer,
            market_factory_address=NetworkConfig.get_market_factory_address(network, market_factory_address),
            lmsr_market_maker_address=NetworkConfig.get_lmsr_market_maker_address(network, lmsr_market_maker_address),
            expected_chain_id=NetworkConfig.get_chain_id(network),
            explorer_url=NetworkConfig.get_explorer_url(network),
            **kwargs
        )

    @property
    def address(self) -> str:
        """Get the signer address"""
        return self.signer.address

    async def assert_chain_id(self) -> int:
        """
        Check that the RPC endpoint serves the expected chain

        Returns:
            The chain id reported by the endpoint

        Raises:
            NetworkConfigError: If it differs from ``expected_chain_id``
        """
        chain_id = await self.w3.eth.chain_id
        if self.expected_chain_id is not None and chain_id != self.expected_chain_id:
            raise NetworkConfigError(
                f"Chain id mismatch: expected {self.expected_chain_id}, RPC reports {chain_id}"
            )
        return chain_id

    def tx_url(self, tx_hash: str) -> Optional[str]:
        """Block explorer link for a transaction, if an explorer is configured"""
        if not self.explorer_url:
            return None
        if not tx_hash.startswith("0x"):
            tx_hash = "0x" + tx_hash
        return f"{self.explorer_url}/tx/{tx_hash}"
