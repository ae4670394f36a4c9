"""Market data provider interface, throttling and an in-memory provider."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Protocol

from portfolio_tracker.config import MarketDataConfig
from portfolio_tracker.types import FundamentalMetrics, PriceBar, Quote

logger = logging.getLogger(__name__)


class MarketDataProvider(Protocol):
    def get_quote(self, ticker: str) -> Quote | None:
        ...

    def get_overview(self, ticker: str) -> FundamentalMetrics | None:
        ...

    def get_history(self, ticker: str) -> list[PriceBar]:
        ...


@dataclass(slots=True)
class RateLimiter:
    """
    Enforce a minimum spacing between outbound calls.

    State lives on the instance so independent clients never throttle each
    other. clock and sleep are injectable for tests.
    """

    min_interval_seconds: float
    clock: Callable[[], float] = time.monotonic
    sleep: Callable[[float], None] = time.sleep
    _last_call: float | None = None

    def wait(self) -> float:
        """Block until the next call is allowed; return the time slept."""
        now = self.clock()
        slept = 0.0
        if self._last_call is not None:
            remaining = self.min_interval_seconds - (now - self._last_call)
            if remaining > 0:
                logger.debug("rate limiter sleeping %.3fs", remaining)
                self.sleep(remaining)
                slept = remaining
                now = self.clock()
        self._last_call = now
        return slept


@dataclass(slots=True)
class ThrottledMarketData:
    """Wrap any provider so each lookup first passes through a RateLimiter."""

    provider: MarketDataProvider
    limiter: RateLimiter

    @classmethod
    def from_config(cls, provider: MarketDataProvider, config: MarketDataConfig) -> "ThrottledMarketData":
        return cls(provider=provider, limiter=RateLimiter(config.min_call_interval_seconds))

    def get_quote(self, ticker: str) -> Quote | None:
        self.limiter.wait()
        return self.provider.get_quote(ticker)

    def get_overview(self, ticker: str) -> FundamentalMetrics | None:
        self.limiter.wait()
        return self.provider.get_overview(ticker)

    def get_history(self, ticker: str) -> list[PriceBar]:
        self.limiter.wait()
        return self.provider.get_history(ticker)


@dataclass(slots=True)
class StaticMarketData:
    """Provider backed by preloaded quotes, overviews and price history."""

    quotes: dict[str, Quote] = field(default_factory=dict)
    history: dict[str, list[PriceBar]] = field(default_factory=dict)
    overviews: dict[str, FundamentalMetrics] = field(default_factory=dict)

    @classmethod
    def from_prices(cls, prices: Mapping[str, float]) -> "StaticMarketData":
        return cls(quotes={sym.upper(): Quote(symbol=sym.upper(), price=float(px)) for sym, px in prices.items()})

    def add_history(self, ticker: str, bars: Iterable[PriceBar]) -> None:
        self.history[ticker.upper()] = sorted(bars, key=lambda bar: bar.date)

    def get_quote(self, ticker: str) -> Quote | None:
        return self.quotes.get(ticker.upper())

    def get_overview(self, ticker: str) -> FundamentalMetrics | None:
        return self.overviews.get(ticker.upper())

    def get_history(self, ticker: str) -> list[PriceBar]:
        return list(self.history.get(ticker.upper(), []))
