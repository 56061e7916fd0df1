"""
eth - MeerEVM interaction layer.

Provides the JSON-RPC node client, packaged ABIs, transaction building, and
the UserOperation fee / gas / lookup helpers the capability providers use.

Uses httpx + eth-account + eth-abi instead of the heavyweight web3.py.
"""
