"""
Feature Utilities
-----------------
Helper functions for indicator computation.
Includes:
- get_max_window(): detect the largest window needed across indicator families
- sort_chronologically(): order a batch of candle points oldest-first
- points_to_frame(): convert candle points to an OHLCV DataFrame
"""

import pandas as pd


def get_max_window(config: dict) -> int:
    """
    Inspect an indicator configuration (IndicatorConfig.to_dict())
    and return the largest lookback window required across all families.

    Parameters
    ----------
    config : dict
        Dictionary containing indicator parameters by family.

    Returns
    -------
    int
        Maximum window/span/min_points value detected.
    """
    max_w = 0

    for name, params in config.items():
        if not isinstance(params, dict):
            continue
        for key, val in params.items():
            # Case 1: list of windows (e.g. {"windows": [20, 50, 200]})
            if isinstance(val, list) and val:
                max_w = max(max_w, max(val))
            # Case 2: scalar parameters (e.g. {"long": 26, "min_points": 26})
            elif isinstance(val, (int, float)) and not isinstance(val, bool) \
                    and key.lower() in ["window", "span", "short", "long", "signal", "min_points"]:
                max_w = max(max_w, int(val))

    # Default fallback
    return max_w or 50


def sort_chronologically(points: list) -> list:
    """
    Sort by creation time descending, then reverse to oldest-first.
    Ties on created_at fall back to the candle timestamp.
    """
    newest_first = sorted(points, key=lambda p: (p.created_at, p.timestamp), reverse=True)
    newest_first.reverse()
    return newest_first


def points_to_frame(points: list) -> pd.DataFrame:
    """OHLCV DataFrame of already ordered candle points, indexed by position."""
    return pd.DataFrame(
        [
            {
                "timestamp": p.timestamp,
                "open": p.open,
                "high": p.high,
                "low": p.low,
                "close": p.close,
                "volume": p.volume,
            }
            for p in points
        ],
        columns=["timestamp", "open", "high", "low", "close", "volume"],
    ).astype({"open": float, "high": float, "low": float, "close": float, "volume": float})
