"""
Sub-scores of the opportunity score.

Each function awards points by tier and returns points / 100, so every
sub-score lies in [0, 1]. Higher means a more attractive entry.
"""


def macd_score(macd: float, signal: float, histogram: float) -> float:
    score = 0.0

    # Crossover
    score += 30 if macd > signal else 10

    # Histogram momentum; weak readings earn nothing
    if histogram > 0 and histogram >= 0.1:
        score += 20

    # Strength
    strength = abs(macd)
    if strength > 0.5:
        score += 25
    elif strength > 0.2:
        score += 15

    return score / 100.0


def rsi_score(rsi6: float, rsi12: float, rsi24: float) -> float:
    score = 0.0

    # Oversold / overbought bands
    if rsi6 < 30 and rsi12 < 35 and rsi24 < 40:
        score += 50  # strong oversold
    elif rsi6 > 70 and rsi12 > 65 and rsi24 > 60:
        score += 0   # strong overbought
    elif rsi6 < 40 and rsi12 < 45:
        score += 25
    elif rsi6 > 60 and rsi12 > 55:
        score += 10
    else:
        score += 20

    # Alignment of short vs long periods
    if rsi6 > rsi12 > rsi24:
        score += 30
    elif rsi6 < rsi12 < rsi24:
        score += 10
    else:
        score += 20

    return score / 100.0


def sma_score(close: float, sma20: float, sma50: float, sma200: float) -> float:
    score = 0.0

    # Price vs moving averages
    if close > sma20 and close > sma50 and close > sma200:
        score += 40
    elif close > sma20 and close > sma50:
        score += 30
    elif close > sma20:
        score += 20
    elif close < sma20 and close < sma50 and close < sma200:
        score += 5
    else:
        score += 15

    # Golden / death cross ordering
    if sma20 > sma50 > sma200:
        score += 30
    elif sma20 < sma50 < sma200:
        score += 10
    else:
        score += 20

    # Mean-reversion distance
    avg_distance = (abs(close - sma20) + abs(close - sma50) + abs(close - sma200)) / 3
    normalized = avg_distance / close if close else 0.0
    if normalized > 0.05:
        score += 20
    elif normalized > 0.02:
        score += 10
    else:
        score += 5

    return score / 100.0


def bollinger_score(close: float, upper: float, lower: float, width: float) -> float:
    score = 0.0

    band_range = upper - lower
    if band_range > 0:
        position = (close - lower) / band_range
        if position < 0.2:
            score += 40  # near lower band
        elif position > 0.8:
            score += 10  # near upper band
        elif 0.4 < position < 0.6:
            score += 25
        else:
            score += 15

    normalized_width = width / close if close else 0.0
    if normalized_width > 0.05:
        score += 30
    elif normalized_width > 0.03:
        score += 20
    else:
        score += 10

    # Squeeze
    if normalized_width < 0.02:
        score += 20

    return score / 100.0


def volume_score(obv: float, volume: float) -> float:
    score = 30.0 if obv > 0 else 10.0

    if volume > 1000:
        score += 25
    elif volume > 500:
        score += 15
    else:
        score += 5

    # Volume-price relationship is not modelled: neutral
    score += 20

    return score / 100.0


def trend_score(adx: float, plus_di: float, minus_di: float) -> float:
    score = 0.0

    if adx > 25:
        score += 40
    elif adx > 20:
        score += 25
    else:
        score += 10

    score += 30 if plus_di > minus_di else 10

    spread = abs(plus_di - minus_di)
    if spread > 10:
        score += 20
    elif spread > 5:
        score += 15
    else:
        score += 10

    return score / 100.0


def volatility_score(atr: float, close: float) -> float:
    normalized_atr = atr / close if close else 0.0
    score = 0.0

    if normalized_atr > 0.03:
        score += 35
    elif normalized_atr > 0.02:
        score += 25
    elif normalized_atr > 0.01:
        score += 15
    else:
        score += 5

    if normalized_atr > 0.04:
        score += 25
    elif normalized_atr > 0.025:
        score += 20
    else:
        score += 15

    # Volatility stability is not modelled: neutral
    score += 20

    return score / 100.0
