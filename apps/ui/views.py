from __future__ import annotations

import logging

import altair as alt
import pandas as pd
import streamlit as st

from core.domain.portfolio import StockRecommendation, StockSnapshot

logger = logging.getLogger(__name__)

RANGES = ["1W", "1M", "3M", "6M", "1Y", "5Y", "ALL"]


def _money(value: float | None) -> str:
    return "N/A" if value is None else f"${value:,.2f}"


def _market_cap(value: float | None) -> str:
    if value is None:
        return "N/A"
    for threshold, suffix in ((1e12, "T"), (1e9, "B"), (1e6, "M")):
        if value >= threshold:
            return f"${value / threshold:,.2f}{suffix}"
    return _money(value)


def render_holdings(df: pd.DataFrame) -> None:
    if df.empty:
        st.info("No holdings yet. Add a stock to get started.")
        return

    total_value = df["market_value"].sum()
    total_gain = df["gain"].sum()
    col1, col2 = st.columns(2)
    col1.metric("Portfolio Value", f"${total_value:,.2f}")
    col2.metric("Total Gain/Loss", f"${total_gain:,.2f}")

    st.subheader("Holdings")
    styled = df.style.format(
        {
            "shares": "{:,.2f}",
            "average_price": "${:,.2f}",
            "price": "${:,.2f}",
            "market_value": "${:,.2f}",
            "cost_basis": "${:,.2f}",
            "gain": "${:,.2f}",
            "gain_percent": "{:.2%}",
            "change_percent": "{:+.2f}%",
        }
    )
    st.dataframe(styled, use_container_width=True)


def render_allocation(df: pd.DataFrame) -> None:
    st.subheader("Sector Allocation")
    if df.empty or df["percent"].sum() <= 0:
        st.info("No allocation data available.")
        return

    chart = (
        alt.Chart(df)
        .mark_arc()
        .encode(
            theta=alt.Theta(field="percent", type="quantitative"),
            color=alt.Color(field="sector", type="nominal"),
            tooltip=[
                alt.Tooltip(field="sector", type="nominal"),
                alt.Tooltip(field="percent", type="quantitative", format=".1f"),
            ],
        )
    )
    st.altair_chart(chart, use_container_width=True)


def render_price_chart(df: pd.DataFrame, symbol: str) -> None:
    if df.empty:
        st.info(f"No price history for {symbol} in this range.")
        return

    chart = (
        alt.Chart(df)
        .mark_line()
        .encode(
            x=alt.X(field="date", type="temporal", title="Date"),
            y=alt.Y(field="close", type="quantitative", title="Close", scale=alt.Scale(zero=False)),
            tooltip=[
                alt.Tooltip(field="date", type="temporal"),
                alt.Tooltip(field="close", type="quantitative", format=",.2f"),
            ],
        )
    )
    st.altair_chart(chart, use_container_width=True)


def render_stock_stats(stats: StockSnapshot) -> None:
    col1, col2, col3 = st.columns(3)
    col1.metric("Price", _money(stats.price), f"{stats.change:+.2f} ({stats.change_percent:+.2f}%)")
    col2.metric("52W High", _money(stats.high_52_week))
    col3.metric("52W Low", _money(stats.low_52_week))

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Market Cap", _market_cap(stats.market_cap))
    col2.metric("P/E", "N/A" if stats.pe_ratio is None else f"{stats.pe_ratio:.2f}")
    col3.metric("Dividend Yield", "N/A" if stats.dividend_yield is None else f"{stats.dividend_yield:.2f}%")
    col4.metric("Beta", "N/A" if stats.beta is None else f"{stats.beta:.2f}")
    st.caption(f"{stats.sector or 'Unknown'} / {stats.industry or 'Unknown'} | Volume {stats.volume:,}")


def render_recommendations(recommendations: list[StockRecommendation]) -> None:
    st.subheader("Recommended Stocks")
    if not recommendations:
        st.info("Your portfolio is well diversified. No recommendations right now.")
        return

    for column, rec in zip(st.columns(len(recommendations)), recommendations):
        analytics = rec.analytics
        with column.container(border=True):
            st.markdown(f"**{rec.symbol}** {_money(rec.stats.price)}")
            st.caption(rec.reason)
            st.write(
                f"Trend: {analytics.technical_signals.trend.value} "
                f"({analytics.technical_signals.strength:.0f}/100)"
            )
            st.progress(int(analytics.technical_signals.strength))
            st.write(f"Value: {analytics.fundamentals.value_metric:.0f}/100")
            st.caption(analytics.fundamentals.description)
            st.write(f"Risk: {analytics.risk_metrics.risk_level.value}")
            st.caption(analytics.risk_metrics.description)
