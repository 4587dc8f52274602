from __future__ import annotations


class MarketDataError(RuntimeError):
    """Base error raised by market data providers."""


class SymbolNotFound(MarketDataError):
    def __init__(self, symbol: str) -> None:
        super().__init__(f"No data found for symbol {symbol}")
        self.symbol = symbol


class RateLimited(MarketDataError):
    def __init__(self, message: str = "API rate limit reached. Please try again in a minute.") -> None:
        super().__init__(message)


class MarketDataUnavailable(MarketDataError):
    """Transport-level failure talking to the provider."""


class InvalidSymbol(ValueError):
    def __init__(self, symbol: str) -> None:
        super().__init__(f"Invalid stock symbol {symbol!r}. Please use letters only.")
        self.symbol = symbol


class AlreadyTaken(ValueError):
    """Raised on signup when the username or email is already registered."""


__all__ = [
    "AlreadyTaken",
    "InvalidSymbol",
    "MarketDataError",
    "MarketDataUnavailable",
    "RateLimited",
    "SymbolNotFound",
]
