"""Configuration for the risk engine loaded from environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Risk engine configuration.

    All fields are loaded from ``RISK_``-prefixed environment variables
    (``RISK_PERIODS_PER_YEAR``, ``RISK_STRICT_INPUTS`` ...).  Defaults match
    monthly return data with a zero risk-free rate.
    """

    PERIODS_PER_YEAR: int = 12
    ROLLING_WINDOW: int = 12
    RISK_FREE_RATE: float = 0.0  # Annual, decimal
    DEFAULT_PORTFOLIO_VOLATILITY: float = 0.15  # Annualized, decimal
    HISTOGRAM_BINS: int = 20
    STRICT_INPUTS: bool = False  # Raise on mismatched paired series
    LOG_LEVEL: str = "INFO"

    model_config = {
        "env_prefix": "RISK_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


def get_settings() -> Settings:
    """Return a Settings instance built from the current environment."""
    return Settings()
