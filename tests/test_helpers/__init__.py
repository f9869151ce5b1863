from .client_creator import (
    create_test_client, deploy_market,
    TEST_RPC_URL, TEST_PRIV_KEY, TEST_SENDER, TEST_MARKET_FACTORY, TEST_MARKET_MAKER,
    TEST_MARKET, TEST_EVENT, TEST_COLLATERAL, TEST_OUTCOME_TOKEN
)
from .fake_chain import FakeChain, FakeContract, FakeSigner
