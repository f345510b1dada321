"""Realized gains from investment buy/sell records"""

from decimal import Decimal
from typing import Iterable

from taxmate_gateway.domain.models import (
    CapitalGainsResult,
    InvestmentSide,
    TransactionRecord,
    TransactionType,
)
from taxmate_gateway.domain.validation import normalize_records

CGT_RATE = Decimal("0.15")


def match_capital_gains(records: Iterable[TransactionRecord]) -> CapitalGainsResult:
    """
    Pair the i-th buy with the i-th sell in collection order.

    Pairing is positional over the filtered lists; records are not re-sorted
    by date or amount. Surplus buys or sells are counted but contribute
    nothing to realized_gains.

    Example:
        buys [100, 200, 300], sells [150, 500]
        -> (150 - 100) + (500 - 200) = 350, one unmatched buy
    """
    normalized = normalize_records(records)
    investments = [r for r in normalized if r.type == TransactionType.INVESTMENT]
    buys = [r for r in investments if r.sub_type == InvestmentSide.BUY]
    sells = [r for r in investments if r.sub_type == InvestmentSide.SELL]

    matched = min(len(buys), len(sells))
    realized_gains = sum(
        (sell.total_amount - buy.total_amount for buy, sell in zip(buys, sells)),
        Decimal("0"),
    )

    return CapitalGainsResult(
        realized_gains=realized_gains,
        estimated_cgt=max(Decimal("0"), realized_gains * CGT_RATE),
        matched_pairs=matched,
        unmatched_buys=len(buys) - matched,
        unmatched_sells=len(sells) - matched,
    )
