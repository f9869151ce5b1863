"""
Transaction dispatch: build, sign, submit, confirm, and read results from events.
"""
import asyncio
import logging
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from web3 import AsyncWeb3, Web3
from web3.exceptions import ContractLogicError, TimeExhausted, Web3Exception
from web3.logs import DISCARD

from .exceptions import (
    ArgumentError, DuplicateEventError, MissingEventError,
    TransactionError, TransactionTimeoutError
)
from .models import CallDescriptor, EventLog, TxReceipt
from .normalize import to_address
from .signer import Signer


def decode_events(contract: Any, raw_receipt: Mapping[str, Any]) -> Tuple[EventLog, ...]:
    """
    Decode every log in a receipt that matches an event of ``contract``.

    Only logs emitted by the contract's own address are kept, so the same
    event signature emitted by another contract in the transaction (a token
    ``Transfer``, say) never matches. Results are ordered by log index.
    """
    own_address = Web3.to_checksum_address(contract.address)
    events = []
    for entry in contract.abi:
        if entry.get("type") != "event":
            continue
        event = getattr(contract.events, entry["name"])()
        for decoded in event.process_receipt(raw_receipt, errors=DISCARD):
            if Web3.to_checksum_address(decoded["address"]) != own_address:
                continue
            events.append(EventLog(
                event=decoded["event"],
                args=dict(decoded["args"]),
                address=own_address,
                log_index=decoded["logIndex"],
            ))
    return tuple(sorted(events, key=lambda e: e.log_index))


def require_event(receipt: TxReceipt, event_name: str) -> EventLog:
    """
    Return the single ``event_name`` event of a receipt.

    Raises:
        MissingEventError: If the event was not emitted
        DuplicateEventError: If it was emitted more than once
    """
    matches = receipt.events_named(event_name)
    if not matches:
        raise MissingEventError(event_name, tx_hash=receipt.tx_hash)
    if len(matches) > 1:
        raise DuplicateEventError(event_name, len(matches), tx_hash=receipt.tx_hash)
    return matches[0]


def get_event_field(receipt: TxReceipt, event_name: str, field: str) -> Any:
    """Return ``field`` of the single ``event_name`` event of a receipt"""
    event = require_event(receipt, event_name)
    if field not in event.args:
        raise MissingEventError(event_name, field=field, tx_hash=receipt.tx_hash)
    return event.args[field]


class TransactionDispatcher:
    """
    Sends contract calls as signed transactions and waits for their receipts.

    Nonce lookup, signing and submission happen under one lock so concurrent
    operations sharing a dispatcher never reuse a nonce.
    """

    DEFAULT_GAS = 500000
    DEFAULT_RECEIPT_TIMEOUT = 120.0
    DEFAULT_POLL_LATENCY = 0.1

    def __init__(
        self,
        w3: AsyncWeb3,
        signer: Optional[Signer] = None,
        receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT,
        poll_latency: float = DEFAULT_POLL_LATENCY,
        default_gas: int = DEFAULT_GAS,
        logger: Optional[logging.Logger] = None
    ):
        """
        Args:
            w3: Connected AsyncWeb3 instance
            signer: Identity that signs transactions unless a call overrides it
            receipt_timeout: Seconds to wait for inclusion before giving up
            poll_latency: Seconds between receipt polls
            default_gas: Gas limit used when estimation fails for reasons
                other than a revert
            logger: Optional logger instance
        """
        self.w3 = w3
        self.signer = signer
        self.receipt_timeout = receipt_timeout
        self.poll_latency = poll_latency
        self.default_gas = default_gas
        self.logger = logger or logging.getLogger(__name__)
        self._nonce_lock = asyncio.Lock()

    async def _estimate_gas(self, fn: Any, from_address: str, method_name: str, value: Optional[int]) -> int:
        params: Dict[str, Any] = {"from": from_address}
        if value is not None:
            params["value"] = value
        try:
            gas = await fn.estimate_gas(params)
        except ContractLogicError as e:
            self.logger.error(f"{method_name} would revert: {e}")
            raise TransactionError(f"{method_name} would revert: {e}", method_name=method_name) from e
        except Exception as e:
            self.logger.warning(f"Gas estimation for {method_name} failed, using default: {self.default_gas}. Error: {e}")
            return self.default_gas
        # Add 10% buffer to gas estimate
        gas = gas + gas // 10
        self.logger.debug(f"Estimated gas for {method_name}: {gas}")
        return gas

    async def send_transaction(
        self,
        contract: Any,
        method_name: str,
        args: Sequence[Any] = (),
        tx_params: Optional[Mapping[str, Any]] = None,
        signer: Optional[Signer] = None,
        timeout: Optional[float] = None
    ) -> TxReceipt:
        """
        Submit ``contract.method_name(*args)`` and wait for it to be mined.

        Args:
            contract: Web3 contract handle
            method_name: Contract function to call
            args: Normalized positional arguments
            tx_params: Transaction overrides (gas, nonce, fee fields, value)
            signer: Identity for this call only
            timeout: Receipt wait for this call only, in seconds

        Returns:
            TxReceipt with the events of ``contract`` decoded

        Raises:
            TransactionError: If signing or submission fails, the call would
                revert, or the mined transaction reverted
            TransactionTimeoutError: If no receipt arrives in time
        """
        signer = signer or self.signer
        if signer is None:
            raise TransactionError("No signer available", method_name=method_name)

        params = dict(tx_params or {})
        from_address = to_address(signer.address, method_name=method_name, field="from")
        sender = params.pop("from", None)
        if sender is not None:
            try:
                sender = to_address(sender, method_name=method_name, field="from")
            except ArgumentError as e:
                raise TransactionError(str(e), method_name=method_name) from e
            if sender != from_address:
                raise TransactionError(
                    f"'from' {sender} does not match signer {from_address}",
                    method_name=method_name
                )

        fn = getattr(contract.functions, method_name)(*args)
        if "gas" not in params:
            params["gas"] = await self._estimate_gas(fn, from_address, method_name, params.get("value"))
        params["from"] = from_address

        async with self._nonce_lock:
            if "nonce" not in params:
                params["nonce"] = await self.w3.eth.get_transaction_count(from_address, "pending")
            tx = await fn.build_transaction(params)

            try:
                signed_tx = signer.sign_transaction(tx)
            except Exception as e:
                self.logger.error(f"Transaction signing failed: {e}")
                raise TransactionError(f"Failed to sign transaction: {e}", method_name=method_name) from e

            try:
                tx_hash = await self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)
            except Web3Exception as e:
                # Re-raise Web3 exceptions directly
                self.logger.error(f"Failed to send {method_name}: {e}")
                raise
            except Exception as e:
                self.logger.error(f"Failed to send {method_name}: {e}")
                raise TransactionError(f"Failed to send transaction: {e}", method_name=method_name) from e

        tx_hash_hex = Web3.to_hex(tx_hash)
        self.logger.info(f"Transaction sent: {method_name} {tx_hash_hex}")

        wait = self.receipt_timeout if timeout is None else timeout
        try:
            raw_receipt = await self.w3.eth.wait_for_transaction_receipt(
                tx_hash,
                timeout=wait,
                poll_latency=self.poll_latency
            )
        except TimeExhausted as e:
            self.logger.error(f"No receipt for {tx_hash_hex} after {wait}s")
            raise TransactionTimeoutError(
                f"Transaction {tx_hash_hex} not mined within {wait}s",
                method_name=method_name, tx_hash=tx_hash_hex
            ) from e

        receipt = self._convert_receipt(contract, raw_receipt)
        if receipt.status != 1:
            self.logger.error(f"Transaction reverted: {method_name} {tx_hash_hex}")
            raise TransactionError(
                f"{method_name} transaction {tx_hash_hex} reverted",
                method_name=method_name, tx_hash=tx_hash_hex
            )
        self.logger.info(f"Transaction mined: {method_name} {tx_hash_hex} in block {receipt.block_number}")
        return receipt

    async def send_transaction_and_get_result(
        self,
        descriptor: CallDescriptor,
        signer: Optional[Signer] = None,
        timeout: Optional[float] = None
    ) -> Any:
        """
        Run a call descriptor and return the requested event field.

        When the descriptor names no field, the matched event itself is
        returned; when it names no event, the receipt is returned.
        """
        receipt = await self.send_transaction(
            descriptor.contract,
            descriptor.method_name,
            descriptor.args,
            tx_params=descriptor.tx_params,
            signer=signer,
            timeout=timeout
        )
        if descriptor.event_name is None:
            return receipt
        if descriptor.event_arg_name is None:
            return require_event(receipt, descriptor.event_name)
        return get_event_field(receipt, descriptor.event_name, descriptor.event_arg_name)

    def _convert_receipt(self, contract: Any, web3_receipt: Mapping[str, Any]) -> TxReceipt:
        """
        Convert a Web3 receipt to our TxReceipt model

        Args:
            contract: Contract whose events should be decoded
            web3_receipt: The Web3 transaction receipt

        Returns:
            Our TxReceipt model
        """
        receipt_dict = {
            key: value for key, value in dict(web3_receipt).items()
            if key in ("transactionHash", "blockNumber", "blockHash", "status", "gasUsed", "from", "to")
        }

        # Convert bytes to hex strings
        for key, value in list(receipt_dict.items()):
            if isinstance(value, (bytes, bytearray)):
                receipt_dict[key] = Web3.to_hex(bytes(value))

        receipt_dict["events"] = decode_events(contract, web3_receipt)
        return TxReceipt.model_validate(receipt_dict)
