#!/usr/bin/env python3
"""
Example of creating a market and trading outcome tokens on it.
"""
import asyncio
import os

from predmarket_sdk import LocalSigner, NetworkConfig, PredictionMarketClient, PredictionMarketError


async def run(client: PredictionMarketClient, event_address: str) -> None:
    chain_id = await client.assert_chain_id()
    print(f"Connected to chain {chain_id}")

    # 5% fee; 1,000,000 is 100%
    market = await client.create_market(
        event=event_address,
        market_maker=client.lmsr_market_maker,
        fee=50000
    )
    print(f"Created market: {market.address}")

    quote = await client.calc_buy_cost(market, 0, 10 ** 18)
    print(f"Buying 1e18 of outcome 0 will cost {quote}")

    cost = await client.buy_outcome_tokens(market, 0, 10 ** 18)
    print(f"Paid {cost}")

    profit = await client.sell_outcome_tokens(
        market=market,
        outcome_token_index=0,
        outcome_token_count=10 ** 18 // 2
    )
    print(f"Sold half for {profit}")


def main():
    """
    Demonstrate market creation and trading against a configured network.

    Requires PRIVATE_KEY and EVENT_ADDRESS; NETWORK defaults to "local".
    Contract addresses come from networks.json or <NETWORK>_MARKET_FACTORY
    and <NETWORK>_LMSR_MARKET_MAKER.
    """
    private_key = os.environ.get("PRIVATE_KEY")
    event_address = os.environ.get("EVENT_ADDRESS")
    network = os.environ.get("NETWORK", "local")

    if not private_key or not event_address:
        print("ERROR: PRIVATE_KEY and EVENT_ADDRESS environment variables are required")
        return

    print("Available networks:")
    for network_name in NetworkConfig.load_networks().keys():
        print(f"  - {network_name}")
    print()

    signer = LocalSigner(private_key)
    print(f"Signer address: {signer.address}")

    client = PredictionMarketClient.from_network(network, signer=signer)
    try:
        asyncio.run(run(client, event_address))
    except PredictionMarketError as e:
        print(f"Error: {str(e)}")


if __name__ == "__main__":
    main()
