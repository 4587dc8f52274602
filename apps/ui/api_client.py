from __future__ import annotations

import logging
from typing import Any

import httpx

from core.domain.market_data import PricePoint, SearchResult
from core.domain.portfolio import Holding, PortfolioAnalysis, StockSnapshot

logger = logging.getLogger(__name__)

FETCH_FAILED = "Failed to fetch stock data. Please try again."


class ApiError(RuntimeError):
    """Raised when the dashboard cannot complete a call to the portfolio API."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _detail(response: httpx.Response) -> str:
    try:
        detail = response.json().get("detail")
    except ValueError:
        return response.text or FETCH_FAILED
    if isinstance(detail, list):
        # FastAPI validation errors
        return "; ".join(str(item.get("msg", item)) for item in detail)
    return str(detail or FETCH_FAILED)


def _request_json(
    method: str,
    url: str,
    *,
    params: dict[str, str] | None = None,
    payload: dict[str, Any] | None = None,
    timeout_seconds: float = 10,
) -> Any:
    try:
        response = httpx.request(method, url, params=params, json=payload, timeout=timeout_seconds)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        logger.warning("API request rejected: %s %s (%s)", method, url, exc.response.status_code)
        raise ApiError(_detail(exc.response), exc.response.status_code) from exc
    except httpx.HTTPError as exc:
        logger.exception("API request failed: %s %s", method, url)
        raise ApiError(f"Failed to call API: {exc}") from exc
    return response.json()


def login(api_base_url: str, username: str, password: str) -> bool:
    try:
        _request_json("POST", f"{api_base_url}/auth/login", payload={"username": username, "password": password})
    except ApiError as exc:
        if exc.status_code == 401:
            return False
        raise
    return True


def signup(api_base_url: str, username: str, email: str, password: str) -> bool:
    _request_json(
        "POST",
        f"{api_base_url}/auth/signup",
        payload={"username": username, "email": email, "password": password},
    )
    return True


def fetch_holdings(api_base_url: str, username: str) -> list[Holding]:
    payload = _request_json("GET", f"{api_base_url}/portfolio", params={"username": username})
    return [Holding.model_validate(item) for item in payload]


def add_holding(api_base_url: str, username: str, symbol: str, shares: float, average_price: float) -> Holding:
    payload = _request_json(
        "POST",
        f"{api_base_url}/portfolio/holdings",
        payload={"username": username, "symbol": symbol, "shares": shares, "average_price": average_price},
    )
    return Holding.model_validate(payload)


def remove_holding(api_base_url: str, username: str, symbol: str) -> int:
    payload = _request_json("DELETE", f"{api_base_url}/portfolio/holdings/{symbol}", params={"username": username})
    return int(payload.get("removed", 0))


def fetch_analysis(api_base_url: str, username: str) -> PortfolioAnalysis:
    payload = _request_json("GET", f"{api_base_url}/portfolio/analysis", params={"username": username})
    return PortfolioAnalysis.model_validate(payload)


def search_stocks(api_base_url: str, query: str) -> list[SearchResult]:
    payload = _request_json("GET", f"{api_base_url}/stocks/search", params={"query": query})
    return [SearchResult.model_validate(item) for item in payload]


def fetch_stock_detail(api_base_url: str, symbol: str, history_range: str) -> tuple[StockSnapshot, list[PricePoint]]:
    payload = _request_json("GET", f"{api_base_url}/stocks/{symbol}/detail", params={"range": history_range})
    stats = StockSnapshot.model_validate(payload["stats"])
    history = [PricePoint.model_validate(item) for item in payload.get("history", [])]
    return stats, history
