"""
Polygon.io market data client.

Reconstructs options sweeps from the options trade tape:
- /v3/trades/options              large option prints for the underlying
- /v3/quotes/{optionsTicker}      NBBO at the time of each print
- /v2/aggs/ticker/{ticker}/range  daily closes for entry and exit prices

Every call counts against the rate limit, so quote lookups are capped to
what fits inside DATA_FETCH_TIMEOUT and spent on the largest prints first.
"""

import asyncio
import bisect
import logging
import re
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

import aiohttp

from sweep_backtest.config import Config
from sweep_backtest.errors import DataAcquisitionError
from sweep_backtest.logger import redact_api_key
from sweep_backtest.models.sweep import (
    OptionType,
    PricedSweep,
    SweepObservation,
    TradeLocation,
)
from sweep_backtest.backtesting.classifier import locate_trade
from sweep_backtest.clients.base_client import MarketDataProvider
from sweep_backtest.utils.decorators import async_retry
from sweep_backtest.utils.rate_limiter import RateLimiter

# e.g. O:SPY240216C00420000
OPTION_SYMBOL_RE = re.compile(r"^O:([A-Z.]+)(\d{6})([CP])(\d{8})$")

# Extra calendar days of closes so an exit landing on a weekend or holiday
# can roll forward to the next session
EXIT_LOOKAHEAD_DAYS = 7

RETRYABLE_STATUSES = {429, 500, 502, 503, 504}

NS_PER_MINUTE = 60 * 1_000_000_000


def parse_option_symbol(symbol: str) -> Optional[Dict[str, Any]]:
    """
    Split an OCC option symbol into its parts.

    Returns:
        Dict with underlying, expiration_date, option_type and strike_price,
        or None if the symbol is not a valid option symbol.
    """
    match = OPTION_SYMBOL_RE.match(symbol or "")
    if not match:
        return None

    underlying, expiry, call_put, strike = match.groups()
    try:
        expiration = date(2000 + int(expiry[:2]), int(expiry[2:4]), int(expiry[4:6]))
    except ValueError:
        return None

    return {
        "underlying": underlying,
        "expiration_date": expiration,
        "option_type": OptionType.CALL if call_put == "C" else OptionType.PUT,
        "strike_price": int(strike) / 1000,
    }


def option_ticker_range(ticker: str) -> Tuple[str, str]:
    """
    Bounds selecting only the given underlying's option symbols.

    Symbols continue with expiry digits, which sort below ':', so
    O:SPY240216C... falls inside [O:SPY, O:SPY:) while O:SPYD... does not.
    """
    return f"O:{ticker}", f"O:{ticker}:"


def _ns_to_date(ns: int) -> date:
    return datetime.fromtimestamp(ns / 1e9, tz=timezone.utc).date()


def _ms_to_date(ms: int) -> date:
    return datetime.fromtimestamp(ms / 1e3, tz=timezone.utc).date()


class DailyCloses:
    """Sorted daily closes with 'on or after' lookup."""

    def __init__(self, closes: Dict[date, float]):
        self._dates = sorted(closes)
        self._closes = closes

    def __len__(self):
        return len(self._dates)

    def on(self, day: date) -> Optional[float]:
        return self._closes.get(day)

    def on_or_after(self, day: date) -> Optional[float]:
        idx = bisect.bisect_left(self._dates, day)
        if idx >= len(self._dates):
            return None
        return self._closes[self._dates[idx]]


class PolygonClient(MarketDataProvider):
    """
    Async Polygon.io client that produces priced sweeps for backtesting.

    Example:
        async with PolygonClient(config) as client:
            sweeps = await client.fetch_sweeps_and_prices(
                "SPY", date(2024, 1, 2), date(2024, 1, 31), 10,
                [TradeLocation.AT_ASK],
            )
    """

    def __init__(self, config: Config, session: Optional[aiohttp.ClientSession] = None):
        self.config = config
        self.api_key = config.POLYGON_API_KEY
        self.base_url = config.POLYGON_BASE_URL.rstrip("/")
        self.logger = logging.getLogger(__name__)

        self._session = session
        self._owns_session = session is None
        self.rate_limiter = RateLimiter(
            max_calls=config.RATE_LIMIT_MAX_CALLS,
            window_seconds=config.RATE_LIMIT_WINDOW_SECONDS,
        )
        self._request = async_retry(
            max_attempts=config.MAX_REQUEST_RETRIES,
            delay_seconds=1.0,
            exceptions=(aiohttp.ClientError, asyncio.TimeoutError),
        )(self._request_once)

        planned = config.MAX_TRADE_PAGES + config.MAX_QUOTE_LOOKUPS + 1
        capacity = self.request_capacity()
        if planned > capacity:
            self.logger.warning(
                f"{planned} requests planned per run but the rate limit allows {capacity} "
                f"within {config.DATA_FETCH_TIMEOUT:.0f}s; quote lookups will be reduced"
            )

    def request_capacity(self) -> int:
        """Requests the rate limit allows within one data fetch."""
        return self.rate_limiter.capacity_within(self.config.DATA_FETCH_TIMEOUT)

    def quote_budget(self, pages_used: int) -> int:
        """
        Quote lookups left after fetching `pages_used` trade pages, keeping
        one request for the daily closes.
        """
        affordable = self.request_capacity() - pages_used - 1
        return max(0, min(self.config.MAX_QUOTE_LOOKUPS, affordable))

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.config.REQUEST_TIMEOUT_SECONDS)
            self._session = aiohttp.ClientSession(timeout=timeout)
            self._owns_session = True
        return self._session

    async def _request_once(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        GET a Polygon endpoint and return the decoded JSON body.

        `path` may also be an absolute `next_url` from a previous page.
        """
        if not self.api_key:
            raise DataAcquisitionError("POLYGON_API_KEY is not configured")

        query = dict(params or {})
        query["apiKey"] = self.api_key
        url = path if path.startswith("http") else f"{self.base_url}{path}"

        await self.rate_limiter.acquire()
        session = await self._get_session()

        self.logger.debug(f"GET {path} {({k: v for k, v in query.items() if k != 'apiKey'})}")
        async with session.get(url, params=query) as response:
            if response.status in RETRYABLE_STATUSES:
                # Raised as a ClientError so the retry decorator picks it up
                response.raise_for_status()
            if response.status != 200:
                body = await response.text()
                raise DataAcquisitionError(
                    f"Polygon API error {response.status} for {path}: {body[:200]}"
                )
            return await response.json()

    async def _fetch_trade_pages(
        self, ticker: str, start_date: date, end_date: date
    ) -> Tuple[List[Dict[str, Any]], int]:
        """Option trades oldest first, following next_url up to MAX_TRADE_PAGES."""
        lower, upper = option_ticker_range(ticker)
        payload = await self._request("/v3/trades/options", {
            "ticker.gte": lower,
            "ticker.lt": upper,
            "timestamp.gte": start_date.isoformat(),
            "timestamp.lte": f"{end_date.isoformat()}T23:59:59Z",
            "limit": self.config.MAX_TRADES_PER_REQUEST,
            "order": "asc",
            "sort": "timestamp",
        })
        trades = list(payload.get("results") or [])
        pages = 1

        next_url = payload.get("next_url")
        while next_url and pages < self.config.MAX_TRADE_PAGES:
            payload = await self._request(next_url)
            trades.extend(payload.get("results") or [])
            pages += 1
            next_url = payload.get("next_url")

        if next_url:
            last_ns = trades[-1].get("sip_timestamp") if trades else None
            through = _ns_to_date(last_ns) if last_ns else start_date
            self.logger.warning(
                f"Option trades for {ticker} truncated at {pages} pages ({len(trades)} trades); "
                f"prints after {through} up to {end_date} are not scored"
            )

        self.logger.info(f"Found {len(trades)} option trades for {ticker} in {pages} page(s)")
        return trades, pages

    async def fetch_option_trades(
        self, ticker: str, start_date: date, end_date: date
    ) -> List[Dict[str, Any]]:
        """Raw option trades for the underlying in the date range."""
        trades, _ = await self._fetch_trade_pages(ticker, start_date, end_date)
        return trades

    async def fetch_quote(self, option_symbol: str, timestamp_ns: int) -> Optional[Dict[str, float]]:
        """Latest quote at or before the given SIP timestamp."""
        payload = await self._request(f"/v3/quotes/{option_symbol}", {
            "timestamp.lte": timestamp_ns,
            "order": "desc",
            "sort": "timestamp",
            "limit": 1,
        })
        results = payload.get("results") or []
        if not results:
            return None

        bid = results[0].get("bid_price")
        ask = results[0].get("ask_price")
        if not bid or not ask or bid <= 0 or ask <= 0 or bid > ask:
            return None
        return {"bid": float(bid), "ask": float(ask)}

    async def fetch_daily_closes(self, ticker: str, start_date: date, end_date: date) -> DailyCloses:
        """Daily closes for the underlying between two dates inclusive."""
        payload = await self._request(
            f"/v2/aggs/ticker/{ticker}/range/1/day/{start_date.isoformat()}/{end_date.isoformat()}",
            {"adjusted": "true", "sort": "asc", "limit": 50000},
        )
        closes = {}
        for bar in payload.get("results") or []:
            if "t" in bar and "c" in bar:
                closes[_ms_to_date(bar["t"])] = float(bar["c"])

        self.logger.info(f"Loaded {len(closes)} daily closes for {ticker}")
        return DailyCloses(closes)

    def _qualify(self, ticker: str, trade: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Contract details for a print large enough to be a sweep, else None."""
        contract = parse_option_symbol(trade.get("ticker", ""))
        if contract is None or contract["underlying"] != ticker:
            return None

        if int(trade.get("size") or 0) < self.config.MIN_SWEEP_SIZE:
            return None

        timestamp_ns = trade.get("sip_timestamp") or trade.get("participant_timestamp")
        if not timestamp_ns or not trade.get("price"):
            return None

        return dict(contract, timestamp_ns=timestamp_ns)

    async def _locate_sweeps(
        self,
        ticker: str,
        trades: Sequence[Dict[str, Any]],
        trade_locations: Sequence[TradeLocation],
        budget: int,
    ) -> List[SweepObservation]:
        """
        Quote qualifying prints, largest first, and keep those in the
        requested locations. Quotes are shared by prints of the same contract
        within the same minute.
        """
        candidates = []
        for trade in trades:
            contract = self._qualify(ticker, trade)
            if contract is not None:
                candidates.append((trade, contract))
        candidates.sort(key=lambda c: int(c[0]["size"]), reverse=True)

        quotes: Dict[Tuple[str, int], Optional[Dict[str, float]]] = {}
        unquoted = 0
        located = []

        for trade, contract in candidates:
            symbol = trade["ticker"]
            timestamp_ns = contract["timestamp_ns"]
            key = (symbol, timestamp_ns // NS_PER_MINUTE)

            if key not in quotes:
                if len(quotes) >= budget:
                    unquoted += 1
                    continue
                quotes[key] = await self.fetch_quote(symbol, timestamp_ns)

            quote = quotes[key]
            if quote is None:
                continue

            price = float(trade["price"])
            location = locate_trade(price, quote["bid"], quote["ask"], self.config.QUOTE_TOLERANCE)
            if location not in trade_locations:
                continue

            located.append((timestamp_ns, SweepObservation(
                ticker=ticker,
                trade_date=_ns_to_date(timestamp_ns),
                option_type=contract["option_type"],
                volume=int(trade["size"]),
                price=price,
                bid=quote["bid"],
                ask=quote["ask"],
                trade_location=location,
                option_symbol=symbol,
                strike_price=contract["strike_price"],
                expiration_date=contract["expiration_date"],
            )))

        if unquoted:
            self.logger.warning(
                f"Quote budget of {budget} lookups spent; skipped {unquoted} smaller "
                f"prints for {ticker} (of {len(candidates)} qualifying)"
            )

        located.sort(key=lambda item: item[0])
        return [sweep for _, sweep in located]

    async def fetch_sweeps_and_prices(
        self,
        ticker: str,
        start_date: date,
        end_date: date,
        hold_period: int,
        trade_locations: Sequence[TradeLocation],
    ) -> List[PricedSweep]:
        ticker = ticker.upper()
        self.logger.info(
            f"Fetching sweeps for {ticker} from {start_date} to {end_date} "
            f"(hold {hold_period}d)"
        )

        try:
            trades, pages = await self._fetch_trade_pages(ticker, start_date, end_date)
            sweeps = await self._locate_sweeps(
                ticker, trades, trade_locations, self.quote_budget(pages)
            )
            self.logger.info(f"Found {len(sweeps)} qualifying sweeps for {ticker}")

            if not sweeps:
                return []

            closes = await self.fetch_daily_closes(
                ticker,
                start_date,
                end_date + timedelta(days=hold_period + EXIT_LOOKAHEAD_DAYS),
            )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise DataAcquisitionError(
                f"Polygon request failed for {ticker}: {redact_api_key(str(e))}"
            ) from e

        priced = []
        for sweep in sweeps:
            entry_price = closes.on(sweep.trade_date)
            exit_price = closes.on_or_after(sweep.trade_date + timedelta(days=hold_period))
            if entry_price is None or exit_price is None:
                self.logger.warning(
                    f"Missing price data for {ticker} on {sweep.trade_date}: "
                    f"entry={entry_price}, exit={exit_price}"
                )
                continue
            priced.append(PricedSweep(sweep=sweep, entry_price=entry_price, exit_price=exit_price))

        return priced

    async def close(self):
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        self._session = None
