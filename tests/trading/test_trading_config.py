from trading.config.trading_config import load_trading_config, DEFAULT_CONFIG


def test_defaults_when_file_missing(tmp_path):
    cfg = load_trading_config(tmp_path / "missing.yaml")
    assert cfg == DEFAULT_CONFIG
    cfg["risk"]["profit_thresholds"]["low"] = 99.0
    assert DEFAULT_CONFIG["risk"]["profit_thresholds"]["low"] == 5.0


def test_yaml_overrides_merge_one_level(tmp_path):
    path = tmp_path / "trading.yaml"
    path.write_text(
        "execution:\n"
        "  drift_limit: 0.02\n"
        "market_data:\n"
        "  freshness_minutes: 5\n"
    )
    cfg = load_trading_config(path)
    assert cfg["execution"]["drift_limit"] == 0.02
    assert cfg["execution"]["wallet_type"] == "spot"
    assert cfg["market_data"]["freshness_minutes"] == 5
    assert cfg["market_data"]["window_days"] == 15
