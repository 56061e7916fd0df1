"""
Bridge - Cross-chain submission from qng onto MeerEVM via MeerChange.
"""
