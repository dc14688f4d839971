# trading/config/trading_config.py
import copy
import logging
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    "risk": {
        # Minimum unrealised profit (%) before a deteriorating position is released
        "profit_thresholds": {"low": 5.0, "medium": 10.0, "high": 13.0},
        # Stored score a rank-1 rotation target must exceed
        "attractiveness_gates": {"low": 0.8, "medium": 0.7, "high": 0.5},
    },
    "execution": {
        "drift_limit": 0.01,
        "wallet_type": "spot",
        "quote_asset": "USDT",
    },
    "market_data": {
        "window_days": 15,
        "window_limit": 1000,
        "freshness_minutes": 2,
        "adx_smoothed": False,
    },
    "paper_exchange": {
        "fee_type": "rate",
        "fee_rate": 0.001,
        "fixed_fee": 0.0,
        "slippage": 0.0005,
        "quote_valid_seconds": 10,
    },
    # trading preference algorithm -> strategy class name
    "strategies": {
        "swing_trading": "PullBackStrategy",
        "scalping": "PullBackStrategy",
        "day_trading": "PullBackStrategy",
    },
}


def load_trading_config(path: str = None):
    """
    Load trading configuration from YAML file.
    If file not found, fallback to default config.
    """
    config_path = Path(path or Path(__file__).parent / "trading_config.yaml")

    if not config_path.exists():
        logger.info("Config file not found at %s, using defaults.", config_path)
        return copy.deepcopy(DEFAULT_CONFIG)

    with open(config_path, "r") as f:
        user_cfg = yaml.safe_load(f) or {}

    cfg = copy.deepcopy(DEFAULT_CONFIG)

    # Merge user config into default, one level deep
    for section, params in user_cfg.items():
        if section in cfg and isinstance(cfg[section], dict) and isinstance(params, dict):
            cfg[section].update(params)
        else:
            cfg[section] = params

    return cfg
