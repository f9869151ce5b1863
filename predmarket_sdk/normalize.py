"""
Argument normalization for contract calls.

SDK methods accept their arguments the loose way callers like to pass them:
positionally, as keywords, or as a single options mapping, with addresses
given as strings, raw bytes or contract handles, and amounts given as ints,
numeric strings or Decimals. This module turns any of those shapes into the
ordered, strictly typed argument tuple a contract function expects.
"""
import operator
import re
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from web3 import Web3

from .exceptions import ArgumentError
from .models import FunctionInput, NormalizedCall

# Keys that configure the transaction rather than the contract call
TX_PARAM_KEYS = frozenset({
    "from",
    "gas",
    "gasPrice",
    "maxFeePerGas",
    "maxPriorityFeePerGas",
    "nonce",
    "value",
})

# Largest integer a float represents without loss
MAX_SAFE_FLOAT_INT = 2 ** 53

_INT_TYPE_RE = re.compile(r"(u?)int(\d*)")

InputParam = Union[FunctionInput, Mapping[str, str]]


def snake_to_camel(name: str) -> str:
    """Convert ``outcome_token_index`` to ``outcomeTokenIndex``"""
    head, *rest = name.rstrip("_").split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def to_address(value: Any, method_name: Optional[str] = None, field: Optional[str] = None) -> str:
    """
    Resolve an address-like value to an EIP-55 checksum address.

    Accepts a hex string, 20 raw bytes, or any object exposing ``.address``
    (web3 contracts, accounts, signers).
    """
    if not isinstance(value, (str, bytes, bytearray)) and hasattr(value, "address"):
        value = value.address

    if isinstance(value, (bytes, bytearray)):
        if len(value) != 20:
            raise ArgumentError(
                f"expected 20 address bytes for '{field}', got {len(value)}",
                method_name=method_name, field=field
            )
        return Web3.to_checksum_address(bytes(value))

    if isinstance(value, str) and Web3.is_address(value):
        digits = value[2:] if value[:2].lower() == "0x" else value
        # Mixed case means the caller supplied an EIP-55 checksum
        if digits != digits.lower() and digits != digits.upper() and not Web3.is_checksum_address(value):
            raise ArgumentError(
                f"bad checksum for '{field}': {value!r}",
                method_name=method_name, field=field
            )
        return Web3.to_checksum_address(value)

    raise ArgumentError(
        f"invalid address for '{field}': {value!r}",
        method_name=method_name, field=field
    )


def to_integer(
    value: Any,
    bits: int = 256,
    signed: bool = False,
    method_name: Optional[str] = None,
    field: Optional[str] = None
) -> int:
    """
    Coerce a numeric value to a Python int and range check it.

    Floats are only accepted when they are integral and exactly representable.
    """
    def fail(reason: str) -> ArgumentError:
        return ArgumentError(f"{reason} for '{field}': {value!r}", method_name=method_name, field=field)

    if isinstance(value, bool):
        raise fail("booleans are not integers")

    if isinstance(value, int):
        number = value
    elif isinstance(value, str):
        text = value.strip()
        try:
            if text.lower().lstrip("-").startswith("0x"):
                number = int(text, 16)
            else:
                number = int(text, 10)
        except ValueError:
            raise fail("not a numeric string")
    elif isinstance(value, Decimal):
        if not value.is_finite() or value != value.to_integral_value():
            raise fail("not an integral Decimal")
        number = int(value)
    elif isinstance(value, float):
        if not value.is_integer() or abs(value) > MAX_SAFE_FLOAT_INT:
            raise fail("float is not an exact integer")
        number = int(value)
    else:
        try:
            number = operator.index(value)
        except TypeError:
            raise fail("cannot convert to integer")

    if signed:
        low, high = -(2 ** (bits - 1)), 2 ** (bits - 1) - 1
    else:
        low, high = 0, 2 ** bits - 1
    if not low <= number <= high:
        kind = "int" if signed else "uint"
        raise fail(f"out of range for {kind}{bits}")
    return number


def coerce_value(value: Any, abi_type: str, method_name: Optional[str] = None, field: Optional[str] = None) -> Any:
    """Coerce a single value to its declared ABI type"""
    if abi_type == "address":
        return to_address(value, method_name=method_name, field=field)

    if abi_type == "bool":
        if not isinstance(value, bool):
            raise ArgumentError(f"expected a bool for '{field}': {value!r}", method_name=method_name, field=field)
        return value

    match = _INT_TYPE_RE.fullmatch(abi_type)
    if match:
        bits = int(match.group(2) or 256)
        if bits % 8 != 0 or not 8 <= bits <= 256:
            raise ArgumentError(
                f"invalid integer type '{abi_type}' for '{field}'",
                method_name=method_name, field=field
            )
        return to_integer(value, bits=bits, signed=not match.group(1), method_name=method_name, field=field)

    # Other ABI types are handed to web3 unchanged
    return value


def _as_inputs(function_inputs: Iterable[InputParam]) -> List[FunctionInput]:
    return [
        param if isinstance(param, FunctionInput) else FunctionInput(**param)
        for param in function_inputs
    ]


def _resolve_name(key: str, names: Sequence[str], aliases: Mapping[str, str]) -> Optional[str]:
    for candidate in (key, snake_to_camel(key)):
        candidate = aliases.get(candidate, candidate)
        if candidate in names:
            return candidate
    return None


def normalize_call_args(
    args: Sequence[Any],
    kwargs: Optional[Mapping[str, Any]] = None,
    *,
    method_name: str,
    function_inputs: Iterable[InputParam],
    arg_aliases: Optional[Mapping[str, str]] = None
) -> NormalizedCall:
    """
    Normalize loosely typed call arguments against a function signature.

    Args:
        args: Positional values. A single mapping is treated as named options,
            and a mapping following a complete positional list is treated as
            transaction options.
        kwargs: Named values
        method_name: Name used in error messages
        function_inputs: Ordered signature entries with ``name`` and ``type``
        arg_aliases: Maps external parameter names to signature names

    Returns:
        NormalizedCall holding the ordered typed arguments and any
        transaction options that were passed alongside them

    Raises:
        ArgumentError: On missing, duplicate, unknown or uncoercible arguments
    """
    inputs = _as_inputs(function_inputs)
    names = [param.name for param in inputs]
    aliases = dict(arg_aliases or {})

    positional = list(args)
    named: Dict[str, Any] = {}
    tx_params: Dict[str, Any] = {}
    options: List[Mapping[str, Any]] = []

    if len(positional) == 1 and isinstance(positional[0], Mapping):
        options.append(positional.pop())
    elif len(positional) == len(inputs) + 1 and isinstance(positional[-1], Mapping):
        trailing = positional.pop()
        unknown = [key for key in trailing if snake_to_camel(key) not in TX_PARAM_KEYS]
        if unknown:
            raise ArgumentError(
                f"unknown transaction option(s): {', '.join(sorted(unknown))}",
                method_name=method_name, field=unknown[0]
            )
        options.append(trailing)
    if kwargs:
        options.append(kwargs)

    if not options and len(positional) != len(inputs):
        raise ArgumentError(
            f"expected {len(inputs)} arguments, got {len(positional)}",
            method_name=method_name
        )
    if len(positional) > len(inputs):
        raise ArgumentError(
            f"expected at most {len(inputs)} positional arguments, got {len(positional)}",
            method_name=method_name
        )

    for param, value in zip(inputs, positional):
        named[param.name] = value

    for mapping in options:
        for key, value in mapping.items():
            name = _resolve_name(key, names, aliases)
            if name is None:
                tx_key = snake_to_camel(key)
                if tx_key in TX_PARAM_KEYS:
                    tx_params[tx_key] = value
                    continue
                raise ArgumentError(f"unknown parameter '{key}'", method_name=method_name, field=key)
            if name in named:
                raise ArgumentError(f"parameter '{name}' given more than once", method_name=method_name, field=name)
            named[name] = value

    normalized = []
    for param in inputs:
        if param.name not in named or named[param.name] is None:
            raise ArgumentError(f"missing required parameter '{param.name}'", method_name=method_name, field=param.name)
        normalized.append(coerce_value(named[param.name], param.type, method_name=method_name, field=param.name))

    return NormalizedCall(args=tuple(normalized), tx_params=tx_params)
