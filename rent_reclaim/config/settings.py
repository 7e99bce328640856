import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# Load Environment Variables from the working directory .env
load_dotenv()


class ConfigError(Exception):
    """Raised when required configuration is missing or malformed."""


@dataclass(frozen=True)
class ReclaimConfig:
    """Immutable runtime configuration for one RentReclaimer."""

    rpc_url: str
    fee_payer_private_key: str  # base58 secret key (64 bytes)
    treasury_wallet: str
    min_rent_threshold: int = 1_000_000  # lamports
    account_age_threshold: int = 7  # days
    batch_delay_seconds: float = 1.0
    scan_interval_minutes: int = 60
    log_dir: str = "logs"
    log_level: str = "INFO"

    def __repr__(self) -> str:
        # Never echo key material
        return (
            f"ReclaimConfig(rpc_url={self.rpc_url!r}, treasury_wallet={self.treasury_wallet!r}, "
            f"min_rent_threshold={self.min_rent_threshold}, "
            f"account_age_threshold={self.account_age_threshold})"
        )


class Settings:
    # ═══════════════════════════════════════════════════════════════════
    # RENT RECLAIM CONFIGURATION (env-backed)
    # ═══════════════════════════════════════════════════════════════════

    # Identity
    FEE_PAYER_ENV = "KORA_FEEPAYER_PRIVATE_KEY"
    TREASURY_ENV = "TREASURY_WALLET"

    # RPC
    DEFAULT_RPC_URL = "https://api.devnet.solana.com"

    # Safety thresholds
    DEFAULT_MIN_RENT_THRESHOLD = 1_000_000  # ~0.001 SOL
    DEFAULT_ACCOUNT_AGE_THRESHOLD = 7  # days without a transaction

    # Rate limiting
    DEFAULT_BATCH_DELAY_SECONDS = 1.0

    # Scheduler
    DEFAULT_SCAN_INTERVAL_MINUTES = 60

    # Logs
    DEFAULT_LOG_DIR = os.path.abspath("logs")

    @staticmethod
    def _int(name: str, default: int) -> int:
        raw = os.getenv(name)
        if raw is None or raw.strip() == "":
            return default
        try:
            return int(raw)
        except ValueError:
            raise ConfigError(f"{name} must be an integer, got {raw!r}")

    @staticmethod
    def _float(name: str, default: float) -> float:
        raw = os.getenv(name)
        if raw is None or raw.strip() == "":
            return default
        try:
            return float(raw)
        except ValueError:
            raise ConfigError(f"{name} must be a number, got {raw!r}")

    @classmethod
    def load(cls, require_key: bool = True) -> ReclaimConfig:
        """
        Build a ReclaimConfig from the environment.

        Raises:
            ConfigError: signing key or treasury missing, or a numeric
                setting that does not parse.
        """
        key = os.getenv(cls.FEE_PAYER_ENV, "")
        treasury = os.getenv(cls.TREASURY_ENV, "")

        if require_key and not key:
            raise ConfigError(f"{cls.FEE_PAYER_ENV} is not set in .env")
        if not treasury:
            raise ConfigError(f"{cls.TREASURY_ENV} is not set in .env")

        min_rent = cls._int("MIN_RENT_THRESHOLD", cls.DEFAULT_MIN_RENT_THRESHOLD)
        age_days = cls._int("ACCOUNT_AGE_THRESHOLD", cls.DEFAULT_ACCOUNT_AGE_THRESHOLD)
        batch_delay = cls._float("BATCH_DELAY_SECONDS", cls.DEFAULT_BATCH_DELAY_SECONDS)
        interval = cls._int("SCAN_INTERVAL_MINUTES", cls.DEFAULT_SCAN_INTERVAL_MINUTES)
        if min_rent < 0:
            raise ConfigError("MIN_RENT_THRESHOLD cannot be negative")
        if age_days < 0:
            raise ConfigError("ACCOUNT_AGE_THRESHOLD cannot be negative")
        if batch_delay < 0:
            raise ConfigError("BATCH_DELAY_SECONDS cannot be negative")
        if interval <= 0:
            raise ConfigError("SCAN_INTERVAL_MINUTES must be at least 1")

        return ReclaimConfig(
            rpc_url=os.getenv("SOLANA_RPC_URL") or cls.DEFAULT_RPC_URL,
            fee_payer_private_key=key,
            treasury_wallet=treasury,
            min_rent_threshold=min_rent,
            account_age_threshold=age_days,
            batch_delay_seconds=batch_delay,
            scan_interval_minutes=interval,
            log_dir=os.getenv("LOG_DIR") or cls.DEFAULT_LOG_DIR,
            log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        )

    @staticmethod
    def log_dir(default: Optional[str] = None) -> str:
        return os.getenv("LOG_DIR") or default or Settings.DEFAULT_LOG_DIR
