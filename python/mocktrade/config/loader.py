"""
Configuration loader for the mock trading engine.

Loads configuration from YAML files and environment variables.
"""

import os
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field, field_validator


class MarketConfig(BaseModel):
    """Synthetic price process configuration."""

    symbol: str = Field(default="EUR/USD", description="Display symbol of the simulated market")
    seed_count: int = Field(default=80, ge=1, description="Warm-up history length")
    base_price: Decimal = Field(default=Decimal("1.08"), gt=0, description="Warm-up centre price")
    wave_amplitude: Decimal = Field(default=Decimal("0.01"), ge=0, description="Warm-up sinusoid amplitude")
    wave_period: float = Field(default=10.0, gt=0, description="Warm-up sinusoid period (in samples)")
    jitter: Decimal = Field(default=Decimal("0.002"), ge=0, description="Warm-up uniform jitter")
    max_delta: Decimal = Field(default=Decimal("0.00075"), gt=0, description="Per-tick perturbation bound")
    precision: int = Field(default=5, ge=0, le=12, description="Price decimal places")
    min_price: Decimal = Field(default=Decimal("0.00001"), gt=0, description="Strictly positive price floor")
    history_size: int = Field(default=200, ge=1, description="Rolling price window size")
    tick_interval: float = Field(default=0.95, gt=0, description="Seconds between price ticks")


class SettlementConfig(BaseModel):
    """Settlement sweep configuration."""

    interval: float = Field(default=3.5, gt=0, description="Seconds between settlement sweeps")
    fill_probability: float = Field(default=0.5, ge=0, le=1, description="Per-order fill chance per sweep")
    contract_multiplier: Decimal = Field(default=Decimal("100"), gt=0, description="P/L multiplier per unit size")


class AccountConfig(BaseModel):
    """Demo account configuration."""

    initial_balance: Decimal = Field(default=Decimal("1000.00"), description="Balance at start-up")
    reset_balance: Decimal = Field(default=Decimal("1000.00"), description="Balance after an account reset")
    deposit_amount: Decimal = Field(default=Decimal("100"), gt=0, description="Default quick-deposit amount")
    max_deposit: Decimal = Field(default=Decimal("1000000"), gt=0, description="Largest accepted single deposit")
    max_order_size: Decimal = Field(default=Decimal("1000000"), gt=0, description="Largest accepted order size")
    order_capacity: int = Field(default=50, ge=1, description="Maximum retained orders")
    require_connection: bool = Field(default=False, description="Reject orders while disconnected")
    credential: Optional[str] = Field(default=None, description="Pre-configured API token")


class FeedConfig(BaseModel):
    """Event feed configuration."""

    capacity: int = Field(default=50, ge=1, description="Maximum retained feed events")


class LogConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level name")
    file: Optional[str] = Field(default=None, description="Optional log file path")

    @field_validator("level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()


class SimulationConfig(BaseModel):
    """Main configuration model."""

    market: MarketConfig = Field(default_factory=MarketConfig)
    settlement: SettlementConfig = Field(default_factory=SettlementConfig)
    account: AccountConfig = Field(default_factory=AccountConfig)
    feed: FeedConfig = Field(default_factory=FeedConfig)
    log: LogConfig = Field(default_factory=LogConfig)
    seed: Optional[int] = Field(default=None, description="Random seed; None draws from OS entropy")


def load_config(config_path: Optional[str] = None) -> SimulationConfig:
    """
    Load configuration from YAML file and environment variables.

    Args:
        config_path: Path to configuration file. If None, searches for
                     mocktrade.yaml in the project root and config directory,
                     falling back to defaults when none exists.

    Returns:
        SimulationConfig object with loaded configuration.

    Raises:
        FileNotFoundError: If an explicit configuration file is not found.
        ValueError: If configuration is invalid.
    """
    config_data: Dict[str, Any] = {}

    if config_path is None:
        project_root = Path(__file__).parent.parent.parent.parent
        possible_paths = [
            project_root / "config" / "mocktrade.yaml",
            project_root / "mocktrade.yaml",
            Path("mocktrade.yaml"),
        ]
        for path in possible_paths:
            if path.exists():
                config_path = str(path)
                break
    elif not Path(config_path).exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    if config_path is not None:
        with open(config_path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f) or {}

    config_data = _override_with_env(config_data)

    try:
        return SimulationConfig(**config_data)
    except Exception as e:
        raise ValueError(f"Invalid configuration: {e}") from e


def _override_with_env(config_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Override configuration with environment variables.

    Environment variables format:
    - MOCKTRADE_SYMBOL
    - MOCKTRADE_TICK_INTERVAL
    - MOCKTRADE_SETTLEMENT_INTERVAL
    - MOCKTRADE_FILL_PROBABILITY
    - MOCKTRADE_INITIAL_BALANCE
    - MOCKTRADE_REQUIRE_CONNECTION
    - MOCKTRADE_API_TOKEN
    - MOCKTRADE_LOG_LEVEL
    - MOCKTRADE_SEED

    Args:
        config_data: Configuration dictionary.

    Returns:
        Updated configuration dictionary.
    """
    env_mappings = {
        "MOCKTRADE_SYMBOL": ("market", "symbol"),
        "MOCKTRADE_TICK_INTERVAL": ("market", "tick_interval"),
        "MOCKTRADE_SETTLEMENT_INTERVAL": ("settlement", "interval"),
        "MOCKTRADE_FILL_PROBABILITY": ("settlement", "fill_probability"),
        "MOCKTRADE_INITIAL_BALANCE": ("account", "initial_balance"),
        "MOCKTRADE_REQUIRE_CONNECTION": ("account", "require_connection"),
        "MOCKTRADE_API_TOKEN": ("account", "credential"),
        "MOCKTRADE_LOG_LEVEL": ("log", "level"),
    }

    for env_var, (section, key) in env_mappings.items():
        value = os.getenv(env_var)
        if value is not None:
            if not isinstance(config_data.get(section), dict):
                config_data[section] = {}
            config_data[section][key] = value

    seed = os.getenv("MOCKTRADE_SEED")
    if seed is not None:
        config_data["seed"] = int(seed)

    return config_data
