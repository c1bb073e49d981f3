"""Engine configuration via environment variables using pydantic-settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings


class EngineConfig(BaseSettings):
    """Pricing and strategy defaults, loaded from env vars with OPTIONSDESK_ prefix."""

    model_config = {"env_prefix": "OPTIONSDESK_", "extra": "ignore", "env_file": ".env"}

    # --- Market defaults ---
    risk_free_rate: float = 0.05
    default_volatility: float = 0.25
    default_days_to_expiry: int = 30
    default_expiry_label: str = "30-45 DTE"
    contract_multiplier: int = 100

    # --- Implied volatility solver ---
    iv_max_iterations: int = 100
    iv_tolerance: float = 1e-6
    iv_floor: float = 0.01
    iv_cap: float = 5.0

    # --- Scenario sweep ---
    scenario_expected_moves: float = 3.0
    scenario_grid_points: int = 61

    # --- Entry price estimation ---
    bid_ask_adjustment: float = 0.05
    min_entry_price: float = 0.05


@lru_cache(maxsize=1)
def get_config() -> EngineConfig:
    return EngineConfig()
