"""
Signer backed by a local private key.
"""
from typing import Any, Dict

from eth_account import Account
from eth_account.signers.local import LocalAccount


class LocalSigner:
    """Signs transactions with an in-memory ``eth_account`` key"""

    def __init__(self, private_key: str):
        """
        Args:
            private_key: Hex encoded private key, with or without 0x prefix

        Raises:
            ValueError: If the key is not a valid secp256k1 private key
        """
        self._account: LocalAccount = Account.from_key(private_key)

    @property
    def address(self) -> str:
        return self._account.address

    def sign_transaction(self, transaction_dict: Dict[str, Any]) -> Any:
        return self._account.sign_transaction(transaction_dict)

    def __repr__(self) -> str:
        # Never include key material
        return f"LocalSigner(address={self.address!r})"
