"""
Market operations: create markets and trade outcome tokens.

Every operation runs the same short pipeline: normalize the arguments, read
whatever prices the trade needs, approve token transfers when the market has
to pull tokens from the caller, then send the trade and read its result from
the emitted event. A failure at any step stops the pipeline; nothing is
retried.
"""
import logging
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .contracts import Contracts
from .dispatch import TransactionDispatcher, require_event
from .exceptions import AmountError, ArgumentError, NetworkConfigError
from .models import CallDescriptor, FunctionInput
from .normalize import normalize_call_args
from .signer import Signer

UINT256_MAX = 2 ** 256 - 1

CREATE_MARKET_INPUTS = (
    FunctionInput(name="eventContract", type="address"),
    FunctionInput(name="marketMaker", type="address"),
    FunctionInput(name="fee", type="uint24"),
)
CREATE_MARKET_ALIASES = {"event": "eventContract"}

TRADE_INPUTS = (
    FunctionInput(name="market", type="address"),
    FunctionInput(name="outcomeTokenIndex", type="uint8"),
    FunctionInput(name="outcomeTokenCount", type="uint256"),
)

# Keys naming the factory in a createMarket options mapping
_MARKET_FACTORY_KEYS = ("marketFactory", "market_factory")

# Transaction options that also apply to the approval sent before a trade
_FEE_PARAM_KEYS = ("gasPrice", "maxFeePerGas", "maxPriorityFeePerGas")


class BuyApprovalAmount(str, Enum):
    """How much collateral ``buy_outcome_tokens`` approves the market to pull"""
    COST = "cost"
    OUTCOME_TOKEN_COUNT = "outcomeTokenCount"


def add_amounts(a: int, b: int) -> int:
    """Exact uint256 addition; fails instead of wrapping"""
    total = a + b
    if total > UINT256_MAX:
        raise AmountError(f"{a} + {b} overflows uint256")
    return total


def subtract_amounts(a: int, b: int) -> int:
    """Exact uint256 subtraction; fails instead of going negative"""
    if b > a:
        raise AmountError(f"{a} - {b} would be negative")
    return a - b


def _split_market_factory(
    args: Tuple[Any, ...],
    kwargs: Dict[str, Any]
) -> Tuple[Tuple[Any, ...], Dict[str, Any], List[Any]]:
    """Take any factory given as an option out of the createMarket arguments"""
    found = []
    if len(args) == 1 and isinstance(args[0], Mapping):
        options = dict(args[0])
        for key in _MARKET_FACTORY_KEYS:
            if key in options:
                found.append(options.pop(key))
        args = (options,)
    kwargs = dict(kwargs)
    if "marketFactory" in kwargs:
        found.append(kwargs.pop("marketFactory"))
    return args, kwargs, [factory for factory in found if factory is not None]


class MarketOperations:
    """
    Market creation and trading.

    Expects ``contracts``, ``dispatcher``, ``market_factory``,
    ``lmsr_market_maker``, ``buy_approval`` and ``logger`` to be set by the
    class mixing it in.
    """

    contracts: Contracts
    dispatcher: TransactionDispatcher
    market_factory: Optional[Any]
    lmsr_market_maker: Optional[Any]
    buy_approval: BuyApprovalAmount
    logger: logging.Logger

    def _require_market_factory(self, override: Any = None) -> Any:
        if override is not None:
            return self.contracts.market_factory.at(override)
        if self.market_factory is None:
            raise NetworkConfigError("No market factory address configured")
        return self.market_factory

    def _require_market_maker(self) -> Any:
        if self.lmsr_market_maker is None:
            raise NetworkConfigError("No LMSR market maker address configured")
        return self.lmsr_market_maker

    async def _approve(self, token: Any, spender: str, amount: int, tx_params, signer, timeout) -> None:
        fee_params = {key: tx_params[key] for key in _FEE_PARAM_KEYS if key in tx_params}
        self.logger.debug(f"Approving {spender} to transfer {amount} of token {token.address}")
        receipt = await self.dispatcher.send_transaction(
            token, "approve", (spender, amount),
            tx_params=fee_params, signer=signer, timeout=timeout
        )
        require_event(receipt, "Approval")

    async def _quote_buy(self, market: Any, index: int, count: int) -> int:
        base_cost = await self._require_market_maker().functions.calcCost(market.address, index, count).call()
        fee = await market.functions.calcMarketFee(base_cost).call()
        cost = add_amounts(base_cost, fee)
        self.logger.debug(f"Buying {count} of outcome {index}: base cost {base_cost}, fee {fee}, cost {cost}")
        return cost

    async def _quote_sell(self, market: Any, index: int, count: int) -> int:
        base_profit = await self._require_market_maker().functions.calcProfit(market.address, index, count).call()
        fee = await market.functions.calcMarketFee(base_profit).call()
        min_profit = subtract_amounts(base_profit, fee)
        self.logger.debug(f"Selling {count} of outcome {index}: base profit {base_profit}, fee {fee}, min profit {min_profit}")
        return min_profit

    def _normalize_trade(self, method_name: str, args, kwargs) -> Tuple[Any, int, int, dict]:
        call = normalize_call_args(args, kwargs, method_name=method_name, function_inputs=TRADE_INPUTS)
        market_address, index, count = call.args
        return self.contracts.market.at(market_address), index, count, call.tx_params

    def _normalize_quote(self, method_name: str, args, kwargs) -> Tuple[Any, int, int]:
        market, index, count, tx_params = self._normalize_trade(method_name, args, kwargs)
        if tx_params:
            unused = sorted(tx_params)
            raise ArgumentError(
                f"transaction options are not accepted by a price query: {', '.join(unused)}",
                method_name=method_name, field=unused[0]
            )
        return market, index, count

    async def create_market(
        self,
        *args,
        market_factory: Any = None,
        signer: Optional[Signer] = None,
        timeout: Optional[float] = None,
        **kwargs
    ) -> Any:
        """
        Create a market on an event.

        Args:
            event: The event contract or its address
            market_maker: The market maker contract or its address
            fee: Fee factor where 1,000,000 is 100% and 50,000 is 5%
            market_factory: Factory to use instead of the configured one; may
                also be given as ``marketFactory`` in an options mapping
            signer: Identity for this call only
            timeout: Receipt wait in seconds

        Returns:
            Contract handle for the created market

        Raises:
            ArgumentError: If arguments are missing or malformed, or the
                factory is given more than once
            MissingEventError: If no MarketCreation event was emitted
            TransactionError: If the transaction failed
        """
        args, kwargs, factories = _split_market_factory(args, kwargs)
        if market_factory is not None:
            factories.append(market_factory)
        if len(factories) > 1:
            raise ArgumentError(
                "parameter 'marketFactory' given more than once",
                method_name="createMarket", field="marketFactory"
            )

        call = normalize_call_args(
            args, kwargs,
            method_name="createMarket",
            function_inputs=CREATE_MARKET_INPUTS,
            arg_aliases=CREATE_MARKET_ALIASES
        )
        factory = self._require_market_factory(factories[0] if factories else None)
        market_address = await self.dispatcher.send_transaction_and_get_result(
            CallDescriptor(
                contract=factory,
                method_name="createMarket",
                args=call.args,
                event_name="MarketCreation",
                event_arg_name="market",
                tx_params=call.tx_params,
            ),
            signer=signer,
            timeout=timeout
        )
        self.logger.info(f"Created market {market_address}")
        return self.contracts.market.at(market_address)

    async def calc_buy_cost(self, *args, **kwargs) -> int:
        """
        Collateral a purchase would cost, market fee included.

        Takes the same arguments as ``buy_outcome_tokens`` and sends nothing.
        Transaction options are rejected with ``ArgumentError``.
        """
        market, index, count = self._normalize_quote("calcBuyCost", args, kwargs)
        return await self._quote_buy(market, index, count)

    async def calc_sell_profit(self, *args, **kwargs) -> int:
        """
        Collateral a sale would return, market fee deducted.

        Takes the same arguments as ``sell_outcome_tokens`` and sends nothing.
        Transaction options are rejected with ``ArgumentError``.
        """
        market, index, count = self._normalize_quote("calcSellProfit", args, kwargs)
        return await self._quote_sell(market, index, count)

    async def buy_outcome_tokens(
        self,
        *args,
        signer: Optional[Signer] = None,
        timeout: Optional[float] = None,
        **kwargs
    ) -> int:
        """
        Buy outcome tokens with the event's collateral token.

        Markets on an EtherToken event need the ether deposited into the
        EtherToken contract first; other ERC20 collateral has to be acquired
        however that token's contract prescribes.

        Args:
            market: The market contract or its address
            outcome_token_index: Index of the outcome
            outcome_token_count: Number of outcome tokens to buy

        Returns:
            Collateral paid, as reported by the OutcomeTokenPurchase event
        """
        market, index, count, tx_params = self._normalize_trade("buyOutcomeTokens", args, kwargs)

        event_address = await market.functions.eventContract().call()
        collateral_address = await self.contracts.event.at(event_address).functions.collateralToken().call()
        collateral_token = self.contracts.token.at(collateral_address)

        cost = await self._quote_buy(market, index, count)
        if self.buy_approval == BuyApprovalAmount.COST:
            approval = cost
        else:
            approval = count
        await self._approve(collateral_token, market.address, approval, tx_params, signer, timeout)

        return await self.dispatcher.send_transaction_and_get_result(
            CallDescriptor(
                contract=market,
                method_name="buy",
                args=(index, count, cost),
                event_name="OutcomeTokenPurchase",
                event_arg_name="cost",
                tx_params=tx_params,
            ),
            signer=signer,
            timeout=timeout
        )

    async def sell_outcome_tokens(
        self,
        *args,
        signer: Optional[Signer] = None,
        timeout: Optional[float] = None,
        **kwargs
    ) -> int:
        """
        Sell outcome tokens back to the market.

        For EtherToken markets, withdraw the proceeds from the EtherToken
        contract afterwards if raw ether is wanted.

        Args:
            market: The market contract or its address
            outcome_token_index: Index of the outcome
            outcome_token_count: Number of outcome tokens to sell

        Returns:
            Collateral received, as reported by the OutcomeTokenSale event

        Raises:
            AmountError: If the market fee exceeds the sale profit
        """
        market, index, count, tx_params = self._normalize_trade("sellOutcomeTokens", args, kwargs)

        event_address = await market.functions.eventContract().call()
        outcome_token_address = await self.contracts.event.at(event_address).functions.outcomeTokens(index).call()
        outcome_token = self.contracts.token.at(outcome_token_address)

        min_profit = await self._quote_sell(market, index, count)
        await self._approve(outcome_token, market.address, count, tx_params, signer, timeout)

        return await self.dispatcher.send_transaction_and_get_result(
            CallDescriptor(
                contract=market,
                method_name="sell",
                args=(index, count, min_profit),
                event_name="OutcomeTokenSale",
                event_arg_name="profit",
                tx_params=tx_params,
            ),
            signer=signer,
            timeout=timeout
        )

    async def short_sell_outcome_tokens(
        self,
        *args,
        signer: Optional[Signer] = None,
        timeout: Optional[float] = None,
        **kwargs
    ) -> int:
        """
        Short sell outcome tokens, accepting whatever the short sale costs.

        Args:
            market: The market contract or its address
            outcome_token_index: Index of the outcome to short sell
            outcome_token_count: Number of outcome tokens to short sell

        Returns:
            Collateral paid, as reported by the OutcomeTokenShortSale event
        """
        market, index, count, tx_params = self._normalize_trade("shortSellOutcomeTokens", args, kwargs)

        return await self.dispatcher.send_transaction_and_get_result(
            CallDescriptor(
                contract=market,
                method_name="shortSell",
                args=(index, count, 0),
                event_name="OutcomeTokenShortSale",
                event_arg_name="cost",
                tx_params=tx_params,
            ),
            signer=signer,
            timeout=timeout
        )
