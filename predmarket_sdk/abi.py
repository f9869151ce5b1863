"""
ABIs for the prediction market contracts.

Only the functions and events the SDK touches are included.
"""


def _fn(name, inputs, outputs=(), mutability="nonpayable"):
    return {
        "type": "function",
        "name": name,
        "inputs": [{"name": n, "type": t} for n, t in inputs],
        "outputs": [{"name": n, "type": t} for n, t in outputs],
        "stateMutability": mutability,
    }


def _event(name, inputs):
    return {
        "type": "event",
        "name": name,
        "anonymous": False,
        "inputs": [{"name": n, "type": t, "indexed": indexed} for n, t, indexed in inputs],
    }


MARKET_FACTORY_ABI = [
    _fn(
        "createMarket",
        [("eventContract", "address"), ("marketMaker", "address"), ("fee", "uint24")],
        [("market", "address")],
    ),
    _event("MarketCreation", [
        ("creator", "address", True),
        ("market", "address", False),
        ("eventContract", "address", False),
        ("marketMaker", "address", False),
        ("fee", "uint24", False),
    ]),
]

MARKET_ABI = [
    _fn("eventContract", [], [("", "address")], "view"),
    _fn("marketMaker", [], [("", "address")], "view"),
    _fn("fee", [], [("", "uint24")], "view"),
    _fn("calcMarketFee", [("outcomeTokenCost", "uint256")], [("", "uint256")], "view"),
    _fn(
        "buy",
        [("outcomeTokenIndex", "uint8"), ("outcomeTokenCount", "uint256"), ("maxCost", "uint256")],
        [("cost", "uint256")],
    ),
    _fn(
        "sell",
        [("outcomeTokenIndex", "uint8"), ("outcomeTokenCount", "uint256"), ("minProfit", "uint256")],
        [("profit", "uint256")],
    ),
    _fn(
        "shortSell",
        [("outcomeTokenIndex", "uint8"), ("outcomeTokenCount", "uint256"), ("minProfit", "uint256")],
        [("cost", "uint256")],
    ),
    _event("OutcomeTokenPurchase", [
        ("buyer", "address", True),
        ("outcomeTokenIndex", "uint8", False),
        ("outcomeTokenCount", "uint256", False),
        ("cost", "uint256", False),
    ]),
    _event("OutcomeTokenSale", [
        ("seller", "address", True),
        ("outcomeTokenIndex", "uint8", False),
        ("outcomeTokenCount", "uint256", False),
        ("profit", "uint256", False),
    ]),
    _event("OutcomeTokenShortSale", [
        ("buyer", "address", True),
        ("outcomeTokenIndex", "uint8", False),
        ("outcomeTokenCount", "uint256", False),
        ("cost", "uint256", False),
    ]),
]

EVENT_ABI = [
    _fn("collateralToken", [], [("", "address")], "view"),
    _fn("outcomeTokens", [("", "uint256")], [("", "address")], "view"),
    _fn("getOutcomeCount", [], [("", "uint8")], "view"),
]

TOKEN_ABI = [
    _fn("approve", [("spender", "address"), ("value", "uint256")], [("", "bool")]),
    _fn("allowance", [("owner", "address"), ("spender", "address")], [("", "uint256")], "view"),
    _fn("balanceOf", [("owner", "address")], [("", "uint256")], "view"),
    _event("Approval", [
        ("owner", "address", True),
        ("spender", "address", True),
        ("value", "uint256", False),
    ]),
    _event("Transfer", [
        ("from", "address", True),
        ("to", "address", True),
        ("value", "uint256", False),
    ]),
]

LMSR_MARKET_MAKER_ABI = [
    _fn(
        "calcCost",
        [("market", "address"), ("outcomeTokenIndex", "uint8"), ("outcomeTokenCount", "uint256")],
        [("cost", "uint256")],
        "view",
    ),
    _fn(
        "calcProfit",
        [("market", "address"), ("outcomeTokenIndex", "uint8"), ("outcomeTokenCount", "uint256")],
        [("profit", "uint256")],
        "view",
    ),
]
