"""
Rent Reclaim Test Configuration
===============================
Shared fixtures and pytest markers for the test suite.
"""

import os
import sys

import pytest
from solders.keypair import Keypair
from solders.pubkey import Pubkey

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from rent_reclaim.config.settings import ReclaimConfig
from rent_reclaim.reclaimer.core import RentReclaimer
from rent_reclaim.shared.system.logging import Logger
from tests.mocks.mock_ledger import NOW, MockLedgerGateway


# ============================================================================
# PYTEST MARKERS
# ============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "network: marks tests that require network access"
    )
    config.addinivalue_line(
        "markers", "integration: marks integration tests"
    )


# ============================================================================
# SHARED FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def isolated_logs(tmp_path):
    """Send every log stream to a per-test directory, console off."""
    log_dir = Logger.configure(str(tmp_path / "logs"))
    Logger.set_silent(True)
    yield log_dir
    Logger.set_silent(False)


@pytest.fixture
def signer():
    return Keypair()


@pytest.fixture
def treasury():
    return str(Pubkey.new_unique())


@pytest.fixture
def config(signer, treasury, tmp_path):
    return ReclaimConfig(
        rpc_url="http://localhost:8899",
        fee_payer_private_key=str(signer),
        treasury_wallet=treasury,
        min_rent_threshold=1_000_000,
        account_age_threshold=7,
        batch_delay_seconds=1.0,
        log_dir=str(tmp_path / "logs"),
    )


@pytest.fixture
def ledger():
    return MockLedgerGateway()


@pytest.fixture
def sleeps():
    """Records every pause the reclaimer asks for."""
    return []


@pytest.fixture
def reclaimer(config, ledger, sleeps):
    async def fake_sleep(seconds):
        sleeps.append(seconds)

    return RentReclaimer(config, gateway=ledger, sleep=fake_sleep, clock=lambda: float(NOW))
