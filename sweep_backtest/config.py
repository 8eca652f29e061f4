# sweep_backtest/config.py

import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


@dataclass
class Config:
    """Configuration container for the sweep backtest engine"""

    # ===== Polygon API =====
    POLYGON_API_KEY: str = os.getenv("POLYGON_API_KEY", "")
    POLYGON_BASE_URL: str = os.getenv("POLYGON_BASE_URL", "https://api.polygon.io")
    REQUEST_TIMEOUT_SECONDS: float = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "10"))
    MAX_REQUEST_RETRIES: int = int(os.getenv("MAX_REQUEST_RETRIES", "3"))

    # Free tier allows 5 calls per minute
    RATE_LIMIT_MAX_CALLS: int = int(os.getenv("RATE_LIMIT_MAX_CALLS", "5"))
    RATE_LIMIT_WINDOW_SECONDS: float = float(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "60"))

    # ===== Sweep Detection =====
    MIN_SWEEP_SIZE: int = int(os.getenv("MIN_SWEEP_SIZE", "100"))  # contracts
    QUOTE_TOLERANCE: float = float(os.getenv("QUOTE_TOLERANCE", "0.01"))  # dollars
    MAX_TRADES_PER_REQUEST: int = int(os.getenv("MAX_TRADES_PER_REQUEST", "1000"))
    MAX_TRADE_PAGES: int = int(os.getenv("MAX_TRADE_PAGES", "3"))
    # Quote lookups per run; the client lowers this further when the rate
    # limit cannot fit it inside DATA_FETCH_TIMEOUT
    MAX_QUOTE_LOOKUPS: int = int(os.getenv("MAX_QUOTE_LOOKUPS", "20"))

    # ===== Backtest Engine =====
    # When false, a failed data fetch is reported to the caller instead of
    # being replaced with synthetic data.
    ALLOW_SYNTHETIC_FALLBACK: bool = os.getenv("ALLOW_SYNTHETIC_FALLBACK", "false").lower() == "true"
    DATA_FETCH_TIMEOUT: float = float(os.getenv("DATA_FETCH_TIMEOUT", "300"))  # seconds

    # ===== Output =====
    RESULTS_DIR: str = os.getenv("RESULTS_DIR", "data/backtest_results")

    # ===== Operational =====
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE: str = os.getenv("LOG_FILE", "logs/sweep_backtest.log")
