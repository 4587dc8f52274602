from __future__ import annotations

from collections.abc import Mapping, Sequence

import pandas as pd

from core.domain.market_data import PricePoint
from core.domain.portfolio import Holding

HOLDING_COLUMNS = [
    "symbol",
    "shares",
    "average_price",
    "price",
    "market_value",
    "cost_basis",
    "gain",
    "gain_percent",
    "change_percent",
    "sector",
]


def holdings_to_frame(holdings: Sequence[Holding]) -> pd.DataFrame:
    records: list[dict[str, object]] = []
    for holding in holdings:
        market_value = holding.market_value
        cost_basis = holding.cost_basis
        records.append(
            {
                "symbol": holding.symbol,
                "shares": float(holding.shares),
                "average_price": float(holding.average_price),
                "price": holding.stats.price,
                "market_value": market_value,
                "cost_basis": cost_basis,
                "gain": market_value - cost_basis,
                "gain_percent": (market_value - cost_basis) / cost_basis if cost_basis else 0.0,
                "change_percent": holding.stats.change_percent,
                "sector": holding.stats.sector or "Unknown",
            }
        )

    return pd.DataFrame.from_records(records, columns=HOLDING_COLUMNS)


def allocation_to_frame(allocation: Mapping[str, float]) -> pd.DataFrame:
    df = pd.DataFrame({"sector": list(allocation.keys()), "percent": list(allocation.values())})
    if df.empty:
        return df
    df.sort_values("percent", ascending=False, inplace=True, kind="stable")
    df.reset_index(drop=True, inplace=True)
    return df


def history_to_frame(history: Sequence[PricePoint]) -> pd.DataFrame:
    df = pd.DataFrame({"date": [point.date for point in history], "close": [point.close for point in history]})
    if df.empty:
        return df
    df["date"] = pd.to_datetime(df["date"])
    df.sort_values("date", inplace=True)
    df.reset_index(drop=True, inplace=True)
    return df
