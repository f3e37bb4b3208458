"""
Pneuma - remote interaction layer for ocsctl.

Query execution, transaction building and signing, submission and
confirmation tracking against an ocs01-style HTTP endpoint.

Uses httpx + eth-account + eth-abi instead of the heavyweight web3.py.
"""
