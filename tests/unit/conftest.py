"""
Unit Test Configuration
=======================
Fixtures for pure logic tests - NO I/O ALLOWED.

Unit tests run against MockLedgerGateway; any real HTTP call fails loudly.
"""

import pytest


@pytest.fixture(autouse=True)
def isolate_unit_tests(monkeypatch):
    """
    Automatically disable network I/O for unit tests.
    Any test that accidentally tries to reach an RPC node will fail.
    """
    def block_network(*args, **kwargs):
        raise RuntimeError(
            "Network I/O detected in unit test! "
            "Use MockLedgerGateway instead of a live RPC endpoint."
        )

    monkeypatch.setattr("httpx.AsyncClient.send", block_network)
    monkeypatch.setattr("httpx.Client.send", block_network)
