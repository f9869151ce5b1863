"""
Pytest fixtures for the prediction market SDK tests.
"""
import pytest

from predmarket_sdk.config import NetworkConfig

from tests.test_helpers import FakeChain, FakeSigner, TEST_SENDER, create_test_client, deploy_market

# Sample network configuration
MOCK_NETWORKS = {
    "test-network": {
        "chainId": 123,
        "rpc": "https://test.example.com",
        "explorer": "https://explorer.example.com/",
        "marketFactory": "0x1234567890123456789012345678901234567890",
        "lmsrMarketMaker": "0x0987654321098765432109876543210987654321"
    }
}


@pytest.fixture(autouse=True)
def _reset_network_cache():
    """Keep NetworkConfig's class-level cache from leaking between tests."""
    NetworkConfig._networks_cache = None
    yield
    NetworkConfig._networks_cache = None


@pytest.fixture
def mock_networks():
    """Serve MOCK_NETWORKS from the NetworkConfig cache"""
    NetworkConfig._networks_cache = MOCK_NETWORKS
    return MOCK_NETWORKS


@pytest.fixture
def chain():
    """A fresh fake chain"""
    return FakeChain()


@pytest.fixture
def signer():
    """Pass-through signer for TEST_SENDER"""
    return FakeSigner(TEST_SENDER)


@pytest.fixture
def market_chain(chain):
    """Fake chain with a market deployed: base cost 100, base profit 100, fee 5"""
    deploy_market(chain)
    return chain


@pytest.fixture
def client(market_chain, signer):
    """Client wired to ``market_chain``"""
    return create_test_client(chain=market_chain, signer=signer)
