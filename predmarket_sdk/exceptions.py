"""
Exceptions for the prediction market SDK.
"""
from typing import Optional


class PredictionMarketError(Exception):
    """Base exception for all SDK errors."""
    pass


class ArgumentError(PredictionMarketError, ValueError):
    """Raised when call arguments are missing, unknown or cannot be coerced."""

    def __init__(self, message: str, method_name: Optional[str] = None, field: Optional[str] = None):
        self.method_name = method_name
        self.field = field
        if method_name:
            message = f"{method_name}: {message}"
        super().__init__(message)


class MissingEventError(PredictionMarketError):
    """Raised when a confirmed transaction did not emit the expected event."""

    def __init__(self, event_name: str, field: Optional[str] = None, tx_hash: Optional[str] = None):
        self.event_name = event_name
        self.field = field
        self.tx_hash = tx_hash
        if field:
            message = f"Event {event_name} has no field '{field}'"
        else:
            message = f"Could not find event {event_name} in transaction logs"
        if tx_hash:
            message = f"{message} (tx {tx_hash})"
        super().__init__(message)


class DuplicateEventError(PredictionMarketError):
    """Raised when the expected event was emitted more than once."""

    def __init__(self, event_name: str, count: int, tx_hash: Optional[str] = None):
        self.event_name = event_name
        self.count = count
        self.tx_hash = tx_hash
        super().__init__(f"Expected exactly one {event_name} event, found {count}")


class TransactionError(PredictionMarketError):
    """Raised when a transaction could not be signed, sent or mined, or reverted."""

    def __init__(self, message: str, method_name: Optional[str] = None, tx_hash: Optional[str] = None):
        self.method_name = method_name
        self.tx_hash = tx_hash
        super().__init__(message)


class TransactionTimeoutError(TransactionError):
    """Raised when no receipt arrived within the configured timeout."""
    pass


class AmountError(PredictionMarketError, ArithmeticError):
    """Raised when an amount computation would go negative or overflow uint256."""
    pass


class NetworkConfigError(PredictionMarketError, ValueError):
    """Raised when a network or one of its settings cannot be resolved."""
    pass
