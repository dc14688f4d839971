"""Operator-facing messages for executed rotations and stop-losses."""


def trade_message(origin_symbol: str, new_symbol: str, exit_price: float,
                  profit: float, profit_percentage: float) -> str:
    return (
        "❗ Trade operation executed.\n\n"
        f"💰 {origin_symbol} >> {new_symbol}\n"
        f"- Exit price: {exit_price:f}\n"
        f"- Profit: {profit:f} USDT\n"
        f"- Profit percentage: {profit_percentage:.2f}%\n"
    )


def stop_loss_message(origin_symbol: str, stop_loss_price: float,
                      loss: float, loss_percentage: float) -> str:
    return (
        "❗ Stop loss triggered.\n\n"
        f"💰 {origin_symbol} >> USDT\n"
        f"- Stop loss price: {stop_loss_price:f}\n"
        f"- Loss: {loss:f} USDT\n"
        f"- Loss percentage: {loss_percentage:.2f}%\n"
    )
