"""
Python SDK for prediction market contracts: create markets and trade outcome tokens.
"""
from .client import PredictionMarketClient
from .config import NetworkConfig
from .contracts import ContractFactory, Contracts
from .dispatch import TransactionDispatcher, decode_events, get_event_field, require_event
from .exceptions import (
    PredictionMarketError, ArgumentError, MissingEventError, DuplicateEventError,
    TransactionError, TransactionTimeoutError, AmountError, NetworkConfigError
)
from .markets import BuyApprovalAmount, MarketOperations
from .models import CallDescriptor, EventLog, FunctionInput, NormalizedCall, TxReceipt
from .normalize import normalize_call_args
from .signer import LocalSigner, Signer
from .version import __version__

__all__ = [
    "PredictionMarketClient",
    "MarketOperations",
    "BuyApprovalAmount",
    "NetworkConfig",
    "Contracts",
    "ContractFactory",
    "TransactionDispatcher",
    "decode_events",
    "require_event",
    "get_event_field",
    "normalize_call_args",
    "CallDescriptor",
    "EventLog",
    "FunctionInput",
    "NormalizedCall",
    "TxReceipt",
    "Signer",
    "LocalSigner",
    "PredictionMarketError",
    "ArgumentError",
    "MissingEventError",
    "DuplicateEventError",
    "TransactionError",
    "TransactionTimeoutError",
    "AmountError",
    "NetworkConfigError",
    "__version__",
]
