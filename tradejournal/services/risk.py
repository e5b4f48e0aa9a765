"""Stateless position-sizing and portfolio risk formulas."""

from decimal import Decimal

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")


def calculate_position_size(
    account_size: Decimal,
    risk_percent: Decimal,
    entry_price: Decimal,
    stop_loss: Decimal,
) -> Decimal:
    """Units to buy so that hitting the stop loses ``risk_percent`` of the account.

    Example: 10 000 account, 1% risk, entry 100, stop 98 -> 50 units.
    """
    risk_per_unit = abs(entry_price - stop_loss)
    if risk_per_unit == 0:
        return ZERO
    return account_size * (risk_percent / HUNDRED) / risk_per_unit


def calculate_risk_reward_ratio(
    entry_price: Decimal,
    stop_loss: Decimal,
    target_price: Decimal,
) -> Decimal | None:
    risk = abs(entry_price - stop_loss)
    if risk == 0:
        return None
    return abs(target_price - entry_price) / risk


def calculate_kelly_criterion(win_rate: Decimal, avg_win: Decimal, avg_loss: Decimal) -> Decimal:
    """Kelly fraction for ``win_rate`` in [0, 1], clamped into [0, 100].

    ``avg_loss`` is the magnitude of the average loss.
    """
    if avg_loss == 0:
        return ZERO
    payoff = avg_win / avg_loss
    if payoff == 0:
        return ZERO
    kelly = (win_rate * payoff - (ONE - win_rate)) / payoff
    return min(max(kelly, ZERO), HUNDRED)


def calculate_portfolio_heat(position_risks: list[Decimal], account_size: Decimal) -> Decimal:
    if account_size == 0:
        return ZERO
    return sum(position_risks, ZERO) / account_size * HUNDRED


def calculate_max_position_size(account_size: Decimal, max_risk_percent: Decimal) -> Decimal:
    return account_size * (max_risk_percent / HUNDRED)


def calculate_breakeven_price(entry_price: Decimal, quantity: Decimal, commissions: Decimal) -> Decimal:
    # Long-side breakeven: entry plus per-unit commission drag
    if quantity == 0:
        return entry_price
    return entry_price + commissions / quantity
