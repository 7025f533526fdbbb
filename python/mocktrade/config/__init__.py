"""Configuration module for the mock trading engine."""

from mocktrade.config.loader import (
    AccountConfig,
    FeedConfig,
    LogConfig,
    MarketConfig,
    SettlementConfig,
    SimulationConfig,
    load_config,
)

__all__ = [
    "AccountConfig",
    "FeedConfig",
    "LogConfig",
    "MarketConfig",
    "SettlementConfig",
    "SimulationConfig",
    "load_config",
]
