from __future__ import annotations

import asyncio
import logging
import random
import re
from contextlib import asynccontextmanager
from decimal import Decimal
from typing import Annotated, Any

from fastapi import Depends, FastAPI, HTTPException, Query, status
from pydantic import BaseModel, Field, field_validator

from adapters.market_data.alpha_vantage import AlphaVantageMarketData
from adapters.market_data.catalog import MarketDataCatalog, StaticStockCatalog
from adapters.market_data.static_provider import StaticMarketData
from adapters.storage.sqlite_store import SqliteStateStore
from core.auth import AuthService
from core.domain.errors import (
    AlreadyTaken,
    InvalidSymbol,
    MarketDataError,
    RateLimited,
    SymbolNotFound,
)
from core.domain.market_data import HistoryRange, PricePoint, SearchResult
from core.domain.portfolio import Holding, PortfolioAnalysis, StockSnapshot
from core.portfolio import AnalyticsGenerator, PortfolioAnalyzer, PortfolioStore, RandomizedFundamentals
from core.ports.catalog import StockCatalog
from core.ports.market_data import MarketDataPort
from core.settings import CatalogSource, MarketDataProvider, Settings

logger = logging.getLogger(__name__)

FETCH_FAILED = "Failed to fetch stock data. Please try again."
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


class SignupRequest(BaseModel):
    username: str
    email: str
    password: str = Field(min_length=6)

    @field_validator("username")
    @classmethod
    def _validate_username(cls, value: str) -> str:
        if not _USERNAME_PATTERN.match(value):
            raise ValueError(
                "Username must be 3-20 characters long and contain only letters, numbers, and underscores"
            )
        return value

    @field_validator("email")
    @classmethod
    def _validate_email(cls, value: str) -> str:
        if not _EMAIL_PATTERN.match(value):
            raise ValueError("Please enter a valid email address")
        return value


class LoginRequest(BaseModel):
    username: str
    password: str


class AddHoldingRequest(BaseModel):
    username: str
    symbol: str
    shares: Decimal = Field(gt=0)
    average_price: Decimal = Field(gt=0)


def build_market_data(settings: Settings) -> MarketDataPort:
    if settings.market_data_provider is MarketDataProvider.ALPHA_VANTAGE:
        return AlphaVantageMarketData(
            settings.alpha_vantage_api_key,
            base_url=settings.alpha_vantage_base_url,
            timeout_seconds=settings.http_timeout_seconds,
        )
    return StaticMarketData()


def build_analyzer(settings: Settings, market_data: MarketDataPort) -> PortfolioAnalyzer:
    catalog: StockCatalog
    if settings.recommendation_catalog is CatalogSource.LIVE:
        catalog = MarketDataCatalog.from_reference(market_data)
    else:
        catalog = StaticStockCatalog()

    fallback = None
    if settings.analytics_random_fallback:
        fallback = RandomizedFundamentals(random.Random(settings.analytics_seed))
    return PortfolioAnalyzer(
        catalog,
        AnalyticsGenerator(fallback),
        threshold=settings.underrepresented_threshold,
        limit=settings.recommendation_limit,
        backfill=settings.recommendation_backfill,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    _configure_logging()
    settings = Settings()
    state_store = SqliteStateStore(settings.database_url)
    market_data = build_market_data(settings)

    app.state.settings = settings
    app.state.state_store = state_store
    app.state.market_data = market_data
    app.state.analyzer = build_analyzer(settings, market_data)
    app.state.auth = AuthService(state_store)
    logger.info("Portfolio API started (market data: %s)", settings.market_data_provider.value)

    try:
        yield
    finally:
        state_store.close()


app = FastAPI(title="Portfolio Dashboard API", version="0.1.0", lifespan=lifespan)


def get_state_store() -> SqliteStateStore:
    return app.state.state_store


def get_market_data() -> MarketDataPort:
    return app.state.market_data


def get_analyzer() -> PortfolioAnalyzer:
    return app.state.analyzer


def get_auth() -> AuthService:
    return app.state.auth


StateStoreDep = Annotated[SqliteStateStore, Depends(get_state_store)]
MarketDataDep = Annotated[MarketDataPort, Depends(get_market_data)]
AnalyzerDep = Annotated[PortfolioAnalyzer, Depends(get_analyzer)]
AuthDep = Annotated[AuthService, Depends(get_auth)]


def _market_data_error(exc: Exception) -> HTTPException:
    if isinstance(exc, InvalidSymbol):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, SymbolNotFound):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, RateLimited):
        return HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=str(exc))
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=FETCH_FAILED)


def _portfolio_for(username: str, store: SqliteStateStore) -> PortfolioStore:
    if store.get_user(username) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return PortfolioStore(username, store)


@app.get("/health", summary="Health check", status_code=status.HTTP_200_OK)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/auth/signup", summary="Register a user", status_code=status.HTTP_201_CREATED)
async def signup(request: SignupRequest, auth: AuthDep) -> dict[str, Any]:
    try:
        auth.signup(request.username, request.email, request.password)
    except AlreadyTaken as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return {"username": request.username, "authenticated": True}


@app.post("/auth/login", summary="Log in", status_code=status.HTTP_200_OK)
async def login(request: LoginRequest, auth: AuthDep) -> dict[str, Any]:
    if not auth.login(request.username, request.password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid username or password")
    return {"username": request.username, "authenticated": True}


@app.get("/portfolio", summary="Current holdings", status_code=status.HTTP_200_OK)
async def read_holdings(store: StateStoreDep, username: str) -> list[Holding]:
    return list(_portfolio_for(username, store).holdings)


@app.post("/portfolio/holdings", summary="Add a holding", status_code=status.HTTP_201_CREATED)
async def add_holding(request: AddHoldingRequest, store: StateStoreDep, market_data: MarketDataDep) -> Holding:
    portfolio = _portfolio_for(request.username, store)
    try:
        stats = await asyncio.to_thread(market_data.fetch_snapshot, request.symbol)
    except (InvalidSymbol, MarketDataError) as exc:
        logger.warning("Could not add %s for %s: %s", request.symbol, request.username, exc)
        raise _market_data_error(exc) from exc

    holding = Holding(
        symbol=stats.symbol,
        shares=request.shares,
        average_price=request.average_price,
        stats=stats,
    )
    portfolio.add(holding)
    return holding


@app.delete("/portfolio/holdings/{symbol}", summary="Remove a holding", status_code=status.HTTP_200_OK)
async def remove_holding(symbol: str, store: StateStoreDep, username: str) -> dict[str, int]:
    removed = _portfolio_for(username, store).remove(symbol)
    return {"removed": removed}


@app.get("/portfolio/analysis", summary="Sector allocation and recommendations", status_code=status.HTTP_200_OK)
async def read_analysis(store: StateStoreDep, analyzer: AnalyzerDep, username: str) -> PortfolioAnalysis:
    holdings = _portfolio_for(username, store).holdings
    try:
        return await asyncio.to_thread(analyzer.analyze, holdings)
    except MarketDataError as exc:
        raise _market_data_error(exc) from exc


@app.get("/stocks/search", summary="Symbol search", status_code=status.HTTP_200_OK)
async def search_stocks(
    market_data: MarketDataDep,
    query: Annotated[str, Query(min_length=1, description="Symbol or company name fragment")],
) -> list[SearchResult]:
    try:
        return await asyncio.to_thread(market_data.search, query)
    except MarketDataError as exc:
        raise _market_data_error(exc) from exc


@app.get("/stocks/{symbol}", summary="Latest snapshot", status_code=status.HTTP_200_OK)
async def read_stock(symbol: str, market_data: MarketDataDep) -> StockSnapshot:
    try:
        return await asyncio.to_thread(market_data.fetch_snapshot, symbol)
    except (InvalidSymbol, MarketDataError) as exc:
        raise _market_data_error(exc) from exc


@app.get("/stocks/{symbol}/history", summary="Closing prices", status_code=status.HTTP_200_OK)
async def read_history(
    symbol: str,
    market_data: MarketDataDep,
    history_range: Annotated[HistoryRange, Query(alias="range")] = HistoryRange.ONE_WEEK,
) -> list[PricePoint]:
    try:
        return await asyncio.to_thread(market_data.fetch_history, symbol, history_range)
    except (InvalidSymbol, MarketDataError) as exc:
        raise _market_data_error(exc) from exc


@app.get("/stocks/{symbol}/detail", summary="Snapshot and history together", status_code=status.HTTP_200_OK)
async def read_stock_detail(
    symbol: str,
    market_data: MarketDataDep,
    history_range: Annotated[HistoryRange, Query(alias="range")] = HistoryRange.ONE_WEEK,
) -> dict[str, Any]:
    try:
        stats, history = await asyncio.gather(
            asyncio.to_thread(market_data.fetch_snapshot, symbol),
            asyncio.to_thread(market_data.fetch_history, symbol, history_range),
        )
    except (InvalidSymbol, MarketDataError) as exc:
        raise _market_data_error(exc) from exc
    return {"stats": stats, "history": history}
