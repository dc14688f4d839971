class IndicatorConfig:
    """
    IndicatorConfig defines all adjustable parameters of the indicator engine.
    Each indicator family also carries the minimum number of candles the
    engine requires before it will compute that family.

    Usage Example:
        # 1. Default configuration (standard opportunity-score parameters)
        cfg = IndicatorConfig()

        # 2. Report Wilder-style smoothed ADX instead of the raw DX reading
        cfg = IndicatorConfig(adx={"window": 14, "smoothed": True, "min_points": 14})

        # 3. Convert to dictionary
        config_dict = cfg.to_dict()
    """

    def __init__(
        self,
        macd=None,
        rsi=None,
        sma=None,
        atr=None,
        bollinger=None,
        obv=None,
        adx=None,
        version="v1.0"
    ):
        # --- Trend ---
        self.macd = macd or {"short": 12, "long": 26, "signal": 9, "min_points": 26}
        self.sma = sma or {"windows": [20, 50, 200], "min_points": 200}
        self.adx = adx or {"window": 14, "smoothed": False, "min_points": 14}

        # --- Momentum ---
        self.rsi = rsi or {"windows": [6, 12, 24], "min_points": 24}

        # --- Volatility ---
        self.atr = atr or {"window": 14, "min_points": 14}
        self.bollinger = bollinger or {"window": 20, "num_std": 2.0, "min_points": 20}

        # --- Volume ---
        self.obv = obv or {"min_points": 14}

        # Version tag for tracking configuration changes.
        self.version = version

    def min_points(self, family: str) -> int:
        return int(getattr(self, family.lower())["min_points"])

    def to_dict(self):
        """
        Convert the configuration to a unified dictionary format keyed by family.
        """
        return {
            "macd": self.macd,
            "rsi": self.rsi,
            "sma": self.sma,
            "atr": self.atr,
            "bollinger": self.bollinger,
            "obv": self.obv,
            "adx": self.adx,
            "version": self.version,
        }
