from __future__ import annotations

import logging
import re

import streamlit as st
from pydantic import ValidationError

from apps.ui import api_client
from apps.ui.api_client import ApiError
from apps.ui.settings import UiSettings
from apps.ui.transformers import allocation_to_frame, history_to_frame, holdings_to_frame
from apps.ui.views import (
    RANGES,
    render_allocation,
    render_holdings,
    render_price_chart,
    render_recommendations,
    render_stock_stats,
)

logger = logging.getLogger(__name__)

_USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_]{3,20}$")
_EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


def _configure_logging() -> None:
    root_logger = logging.getLogger()
    if root_logger.handlers:
        return
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def _load_settings() -> UiSettings:
    try:
        return UiSettings()
    except ValidationError as exc:
        logger.exception("Failed to load UI settings")
        st.error("Missing UI settings. Check .env or environment variables.")
        st.code(str(exc))
        st.stop()


def validate_signup(username: str, email: str, password: str, confirm: str) -> str | None:
    """Returns the first problem with a signup form, or None when it can be submitted."""
    if not _USERNAME_PATTERN.match(username):
        return "Username must be 3-20 characters long and contain only letters, numbers, and underscores"
    if not _EMAIL_PATTERN.match(email):
        return "Please enter a valid email address"
    if len(password) < 6:
        return "Password must be at least 6 characters long"
    if password != confirm:
        return "Passwords do not match"
    return None


def _render_auth(api_base_url: str) -> None:
    st.title("Portfolio Dashboard")
    login_tab, signup_tab = st.tabs(["Log in", "Sign up"])

    with login_tab, st.form("login"):
        username = st.text_input("Username")
        password = st.text_input("Password", type="password")
        if st.form_submit_button("Log in"):
            try:
                ok = api_client.login(api_base_url, username, password)
            except ApiError as exc:
                st.error(str(exc))
                return
            if ok:
                st.session_state["username"] = username
                st.rerun()
            st.error("Invalid username or password")

    with signup_tab, st.form("signup"):
        username = st.text_input("Username", key="signup_username")
        email = st.text_input("Email")
        password = st.text_input("Password", type="password", key="signup_password")
        confirm = st.text_input("Confirm password", type="password")
        if st.form_submit_button("Sign up"):
            problem = validate_signup(username, email, password, confirm)
            if problem:
                st.error(problem)
                return
            try:
                api_client.signup(api_base_url, username, email, password)
            except ApiError as exc:
                st.error(str(exc))
                return
            st.session_state["username"] = username
            st.rerun()


def _render_add_stock(api_base_url: str, username: str) -> None:
    with st.sidebar.form("add_stock", clear_on_submit=True):
        st.subheader("Add Stock")
        symbol = st.text_input("Symbol", placeholder="AAPL").strip().upper()
        shares = st.number_input("Shares", min_value=0.0, step=1.0)
        average_price = st.number_input("Average price", min_value=0.0, step=0.01)
        if st.form_submit_button("Add"):
            if not symbol or shares <= 0 or average_price <= 0:
                st.error("Enter a symbol, share count and average price.")
                return
            try:
                api_client.add_holding(api_base_url, username, symbol, shares, average_price)
            except ApiError as exc:
                st.error(str(exc))
                return
            st.success(f"Added {symbol}")


def _render_remove_stock(api_base_url: str, username: str, symbols: list[str]) -> None:
    if not symbols:
        return
    symbol = st.sidebar.selectbox("Remove holding", symbols)
    if st.sidebar.button("Remove"):
        try:
            api_client.remove_holding(api_base_url, username, symbol)
        except ApiError as exc:
            st.sidebar.error(str(exc))
            return
        st.rerun()


def _render_stock_detail(api_base_url: str) -> None:
    st.subheader("Stock Lookup")
    query = st.text_input("Search by symbol or name")
    symbol = ""
    if query:
        try:
            matches = api_client.search_stocks(api_base_url, query)
        except ApiError as exc:
            st.error(str(exc))
            return
        if not matches:
            st.info("No matching symbols.")
            return
        symbol = st.selectbox("Matches", [match.symbol for match in matches])
    if not symbol:
        return

    history_range = st.radio("Range", RANGES, horizontal=True)
    try:
        stats, history = api_client.fetch_stock_detail(api_base_url, symbol, history_range)
    except ApiError as exc:
        st.error(str(exc))
        return
    render_stock_stats(stats)
    render_price_chart(history_to_frame(history), symbol)


def main() -> None:
    _configure_logging()
    st.set_page_config(page_title="Portfolio Dashboard", layout="wide")
    settings = _load_settings()

    username = st.session_state.get("username")
    if not username:
        _render_auth(settings.api_base_url)
        return

    st.sidebar.text(f"Signed in as {username}")
    if st.sidebar.button("Log out"):
        st.session_state.pop("username", None)
        st.rerun()
    _render_add_stock(settings.api_base_url, username)

    st.title("Portfolio Dashboard")
    try:
        holdings = api_client.fetch_holdings(settings.api_base_url, username)
        analysis = api_client.fetch_analysis(settings.api_base_url, username)
    except ApiError as exc:
        st.error(str(exc))
        st.stop()

    _render_remove_stock(settings.api_base_url, username, sorted({holding.symbol for holding in holdings}))
    render_holdings(holdings_to_frame(holdings))

    col1, col2 = st.columns(2)
    with col1:
        render_allocation(allocation_to_frame(analysis.sector_allocation))
    with col2:
        st.subheader("Diversification")
        if analysis.top_sectors:
            st.write("Top sectors: " + ", ".join(analysis.top_sectors))
        st.write("Underrepresented: " + (", ".join(analysis.underrepresented_sectors) or "none"))

    render_recommendations(analysis.recommendations)

    st.divider()
    _render_stock_detail(settings.api_base_url)


if __name__ == "__main__":
    main()
