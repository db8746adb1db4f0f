"""
Chain - on-chain interaction layer for the Formicarium client.

Provides the JSON-RPC client, bundled ABIs, and transaction utilities
for talking to the marketplace and ERC-20 contracts on each network.

Uses httpx + eth-account + eth-abi instead of the heavyweight web3.py.
"""
