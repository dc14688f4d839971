"""
Indicator Engine
----------------
Computes indicator families over a window of candle points of one symbol
and writes the readings onto the chronologically latest point.

• Every family enforces a minimum window size (InsufficientDataError)
• Points are ordered oldest-first before any computation
• Only non-zero readings are written; a zero reading leaves the field as is
• compute_general_indicators() runs the families in a fixed order and
  stops at the first unmet precondition
"""

import logging
import math

from features.feature_utils import sort_chronologically, points_to_frame
from features.indicator_config import IndicatorConfig
from features.indicators import macd, rsi, sma, atr, bollinger_bands, obv, adx
from models.errors import InsufficientDataError

logger = logging.getLogger(__name__)

FAMILY_ORDER = ("MACD", "RSI", "SMA", "ATR", "Bollinger", "OBV", "ADX")


def _write(point, field: str, value) -> None:
    if value is None:
        return
    value = float(value)
    if math.isnan(value) or value == 0.0:
        return
    setattr(point, field, value)


class IndicatorEngine:
    """Per-family indicator computation on CandlePoint windows."""

    def __init__(self, config: IndicatorConfig = None):
        self.config = config or IndicatorConfig()

    # --------------------------
    # Window preparation
    # --------------------------
    def _prepare(self, points: list, family: str):
        required = self.config.min_points(family)
        if len(points) < required:
            raise InsufficientDataError(family, required, len(points))
        ordered = sort_chronologically(points)
        return ordered[-1], points_to_frame(ordered)

    # --------------------------
    # Families
    # --------------------------
    def calculate_macd(self, points: list):
        latest, df = self._prepare(points, "MACD")
        p = self.config.macd
        last = macd(df, short_span=p["short"], long_span=p["long"], signal_span=p["signal"]).iloc[-1]
        _write(latest, "macd", last["MACD"])
        _write(latest, "macd_signal", last["Signal"])
        _write(latest, "macd_hist", last["Histogram"])
        return latest

    def calculate_rsi(self, points: list):
        latest, df = self._prepare(points, "RSI")
        for window in self.config.rsi["windows"]:
            _write(latest, f"rsi{window}", rsi(df, window=window).iloc[-1])
        return latest

    def calculate_sma(self, points: list):
        latest, df = self._prepare(points, "SMA")
        for window in self.config.sma["windows"]:
            _write(latest, f"sma{window}", sma(df, window=window).iloc[-1])
        return latest

    def calculate_atr(self, points: list):
        latest, df = self._prepare(points, "ATR")
        _write(latest, "atr", atr(df, window=self.config.atr["window"]).iloc[-1])
        return latest

    def calculate_bollinger_bands(self, points: list):
        latest, df = self._prepare(points, "Bollinger")
        p = self.config.bollinger
        last = bollinger_bands(df, window=p["window"], num_std=p["num_std"]).iloc[-1]
        _write(latest, "bollinger_bands", last["Middle"])
        _write(latest, "bollinger_bands_upper", last["Upper"])
        _write(latest, "bollinger_bands_lower", last["Lower"])
        _write(latest, "bollinger_bands_width", last["Width"])
        return latest

    def calculate_obv(self, points: list):
        latest, df = self._prepare(points, "OBV")
        _write(latest, "obv", obv(df).iloc[-1])
        return latest

    def calculate_adx(self, points: list):
        latest, df = self._prepare(points, "ADX")
        p = self.config.adx
        last = adx(df, window=p["window"], smoothed=p.get("smoothed", False)).iloc[-1]
        _write(latest, "adx", last["ADX"])
        _write(latest, "adx_index", last["ADX"])
        _write(latest, "adx_positive", last["+DI"])
        _write(latest, "adx_negative", last["-DI"])
        return latest

    # --------------------------
    # All families
    # --------------------------
    def compute_general_indicators(self, points: list):
        """
        Run MACD → RSI → SMA → ATR → Bollinger → OBV → ADX over ``points``.
        Returns the chronologically latest point (same object) with every
        family applied. Fails fast with the first family lacking data.
        """
        steps = {
            "MACD": self.calculate_macd,
            "RSI": self.calculate_rsi,
            "SMA": self.calculate_sma,
            "ATR": self.calculate_atr,
            "Bollinger": self.calculate_bollinger_bands,
            "OBV": self.calculate_obv,
            "ADX": self.calculate_adx,
        }
        latest = None
        for family in FAMILY_ORDER:
            latest = steps[family](points)
        logger.debug("Indicators computed for %s at %s over %d points",
                     latest.symbol, latest.timestamp, len(points))
        return latest
