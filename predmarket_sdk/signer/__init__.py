"""
Transaction signers.

Any object with an ``address`` attribute and a ``sign_transaction`` method can
sign for the SDK; ``LocalSigner`` is the stock implementation backed by a
private key held in memory.
"""
from typing import Any, Dict, Protocol, runtime_checkable

from .local import LocalSigner


@runtime_checkable
class Signer(Protocol):
    """Protocol for transaction signers"""
    address: str

    def sign_transaction(self, transaction_dict: Dict[str, Any]) -> Any:
        """Sign transaction and return signed tx object"""
        ...


__all__ = ["Signer", "LocalSigner"]
