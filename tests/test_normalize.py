"""
Tests for argument normalization.
"""
from decimal import Decimal
from types import SimpleNamespace

import pytest
from hypothesis import given, settings, strategies as st
from web3 import Web3

from predmarket_sdk.exceptions import ArgumentError
from predmarket_sdk.markets import CREATE_MARKET_ALIASES, CREATE_MARKET_INPUTS, TRADE_INPUTS
from predmarket_sdk.models import FunctionInput
from predmarket_sdk.normalize import coerce_value, normalize_call_args, snake_to_camel, to_address, to_integer

MARKET = "0x4567890123456789012345678901234567890123"
MIXED_CASE = "0xaBcDeF0123456789aBcDeF0123456789aBcDeF01"


def trade(*args, **kwargs):
    return normalize_call_args(args, kwargs, method_name="buyOutcomeTokens", function_inputs=TRADE_INPUTS)


def test_positional_arguments():
    call = trade(MARKET, 1, 10)
    assert call.args == (MARKET, 1, 10)
    assert call.tx_params == {}


def test_options_mapping_matches_positional():
    positional = trade(MARKET, 1, 10)
    named = trade({"market": MARKET, "outcomeTokenIndex": 1, "outcomeTokenCount": 10})
    assert named.args == positional.args


def test_keywords_match_positional():
    positional = trade(MARKET, 1, 10)
    keywords = trade(market=MARKET, outcome_token_index=1, outcome_token_count=10)
    assert keywords.args == positional.args


def test_positional_and_keywords_mixed():
    call = trade(MARKET, outcome_token_index=1, outcome_token_count=10)
    assert call.args == (MARKET, 1, 10)


def test_alias_maps_external_name():
    call = normalize_call_args(
        (),
        {"event": MARKET, "market_maker": MIXED_CASE.lower(), "fee": 50000},
        method_name="createMarket",
        function_inputs=CREATE_MARKET_INPUTS,
        arg_aliases=CREATE_MARKET_ALIASES
    )
    assert call.args == (MARKET, Web3.to_checksum_address(MIXED_CASE), 50000)


def test_internal_name_still_accepted_with_alias():
    call = normalize_call_args(
        ({"eventContract": MARKET, "marketMaker": MARKET, "fee": 1},),
        method_name="createMarket",
        function_inputs=CREATE_MARKET_INPUTS,
        arg_aliases=CREATE_MARKET_ALIASES
    )
    assert call.args[0] == MARKET


def test_signature_entries_may_be_plain_dicts():
    call = normalize_call_args(
        (5,), method_name="f", function_inputs=[{"name": "amount", "type": "uint256"}]
    )
    assert call.args == (5,)


@pytest.mark.parametrize("handle", [
    SimpleNamespace(address=MARKET),
    SimpleNamespace(address=MARKET.lower()),
    bytes.fromhex(MARKET[2:]),
    MARKET.lower(),
])
def test_address_handles_normalize_to_same_value(handle):
    assert trade(handle, 0, 1).args[0] == MARKET


def test_address_is_checksummed():
    assert to_address(MIXED_CASE.lower()) == Web3.to_checksum_address(MIXED_CASE)


@pytest.mark.parametrize("bad", [
    "0x1234",
    "not an address",
    b"\x01" * 19,
    12345,
    SimpleNamespace(address="0xzz"),
])
def test_invalid_address_raises(bad):
    with pytest.raises(ArgumentError) as exc_info:
        trade(bad, 0, 1)
    assert exc_info.value.field == "market"
    assert exc_info.value.method_name == "buyOutcomeTokens"


def test_bad_checksum_rejected():
    checksummed = Web3.to_checksum_address(MIXED_CASE)
    # Flip the case of one letter to break the checksum
    index = next(i for i, c in enumerate(checksummed) if c.isalpha() and i > 1)
    broken = checksummed[:index] + checksummed[index].swapcase() + checksummed[index + 1:]
    with pytest.raises(ArgumentError):
        to_address(broken)


def test_mixed_case_without_valid_checksum_rejected():
    mistyped = "0xAbCDeF0123456789AbcdEf0123456789aBCDEF01"
    assert not Web3.is_checksum_address(mistyped)
    with pytest.raises(ArgumentError, match="bad checksum for 'market'") as exc_info:
        trade(mistyped, 0, 1)
    assert exc_info.value.field == "market"


def test_single_case_addresses_accepted():
    checksummed = Web3.to_checksum_address(MIXED_CASE)
    assert to_address(MIXED_CASE.lower()) == checksummed
    assert to_address("0x" + MIXED_CASE[2:].upper()) == checksummed


@pytest.mark.parametrize("value, expected", [
    (10, 10),
    ("10", 10),
    (" 10 ", 10),
    ("0x0a", 10),
    (Decimal("10"), 10),
    (10.0, 10),
    (2 ** 255, 2 ** 255),
    (str(2 ** 256 - 1), 2 ** 256 - 1),
])
def test_uint_coercion(value, expected):
    assert to_integer(value) == expected


@pytest.mark.parametrize("value", [
    1.5,
    float("nan"),
    float(2 ** 60),
    Decimal("1.5"),
    Decimal("Infinity"),
    True,
    "ten",
    "",
    -1,
    2 ** 256,
    None,
    [1],
])
def test_uint_coercion_rejects(value):
    with pytest.raises(ArgumentError):
        to_integer(value, method_name="m", field="amount")


def test_uint8_range():
    assert to_integer(255, bits=8) == 255
    with pytest.raises(ArgumentError, match="out of range for uint8"):
        trade(MARKET, 256, 1)


def test_signed_int_range():
    assert coerce_value("-128", "int8") == -128
    with pytest.raises(ArgumentError, match="out of range for int8"):
        coerce_value(128, "int8")


@pytest.mark.parametrize("abi_type", ["uint7", "uint300", "int3", "uint0"])
def test_malformed_integer_type_rejected(abi_type):
    with pytest.raises(ArgumentError, match=f"invalid integer type '{abi_type}'"):
        coerce_value("abc", abi_type, field="amount")


def test_bool_and_passthrough_types():
    assert coerce_value(True, "bool") is True
    with pytest.raises(ArgumentError):
        coerce_value(1, "bool")
    assert coerce_value(b"\x00" * 32, "bytes32") == b"\x00" * 32


def test_missing_required_parameter():
    with pytest.raises(ArgumentError, match="missing required parameter 'outcomeTokenCount'") as exc_info:
        trade({"market": MARKET, "outcomeTokenIndex": 1})
    assert exc_info.value.field == "outcomeTokenCount"


def test_none_counts_as_missing():
    with pytest.raises(ArgumentError, match="missing required parameter 'market'"):
        trade(market=None, outcome_token_index=1, outcome_token_count=1)


@pytest.mark.parametrize("args", [(MARKET, 1), (MARKET, 1, 2, 3, 4), ()])
def test_positional_length_mismatch(args):
    with pytest.raises(ArgumentError, match="expected 3 arguments"):
        trade(*args)


def test_unknown_named_parameter():
    with pytest.raises(ArgumentError, match="unknown parameter 'price'") as exc_info:
        trade({"market": MARKET, "outcomeTokenIndex": 1, "outcomeTokenCount": 2, "price": 3})
    assert exc_info.value.field == "price"


def test_parameter_given_twice():
    with pytest.raises(ArgumentError, match="given more than once"):
        trade(MARKET, 1, 2, market=MARKET)


def test_transaction_options_split_from_mapping():
    call = trade({"market": MARKET, "outcomeTokenIndex": 1, "outcomeTokenCount": 2, "gas": 90000, "gas_price": 7})
    assert call.args == (MARKET, 1, 2)
    assert call.tx_params == {"gas": 90000, "gasPrice": 7}


def test_trailing_transaction_options():
    call = trade(MARKET, 1, 2, {"gas": 90000, "from": MARKET})
    assert call.args == (MARKET, 1, 2)
    assert call.tx_params == {"gas": 90000, "from": MARKET}


def test_trailing_mapping_with_unknown_option():
    with pytest.raises(ArgumentError, match="unknown transaction option"):
        trade(MARKET, 1, 2, {"price": 1})


def test_snake_to_camel():
    assert snake_to_camel("outcome_token_index") == "outcomeTokenIndex"
    assert snake_to_camel("from_") == "from"
    assert snake_to_camel("fee") == "fee"


def test_error_message_names_method():
    with pytest.raises(ArgumentError, match="^sellOutcomeTokens: "):
        normalize_call_args(
            (), {}, method_name="sellOutcomeTokens",
            function_inputs=[FunctionInput(name="market", type="address")]
        )


addresses = st.binary(min_size=20, max_size=20).map(lambda b: Web3.to_checksum_address(b))


@settings(max_examples=50)
@given(
    market=addresses,
    index=st.integers(min_value=0, max_value=255),
    count=st.integers(min_value=0, max_value=2 ** 256 - 1),
)
def test_positional_named_equivalence(market, index, count):
    """Every valid call shape normalizes to the same ordered tuple"""
    expected = (market, index, count)
    assert trade(market, index, count).args == expected
    assert trade(market.lower(), str(index), hex(count)).args == expected
    assert trade({"market": SimpleNamespace(address=market), "outcomeTokenIndex": index,
                  "outcomeTokenCount": str(count)}).args == expected
    assert trade(outcome_token_count=count, market=market, outcome_token_index=index).args == expected
