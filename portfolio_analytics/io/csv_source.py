"""CSV-backed market data collaborator.

Directory layout::

    <data_dir>/
        prices/<TICKER>.csv       date, open, high, low, close, volume
        prices/<TICKER>.parquet   same columns (read in preference to CSV)
        portfolios/<id>.csv       ticker, quantity, purchase_price, purchase_date,
                                  currency, sector, asset_class, name
        quotes.csv                ticker, price              (optional)
        fx.csv                    base, quote, rate          (optional)

Only ``date`` and ``close`` are required in a price file and only
``ticker`` and ``quantity`` in a portfolio file.
"""

import logging
import threading
from datetime import date
from pathlib import Path

import pandas as pd
import polars as pl

from portfolio_analytics.models.core import HoldingSnapshot, PriceSeries
from portfolio_analytics.models.enums import AssetClass
from portfolio_analytics.models.exceptions import DataIntegrityError
from portfolio_analytics.io.memory import InMemoryMarketData


logger = logging.getLogger(__name__)

REQUIRED_HOLDING_COLUMNS = ("ticker", "quantity")
PRICE_COLUMNS = ("date", "open", "high", "low", "close", "volume")


class CsvMarketData:
    """Read holdings, prices, quotes and FX rates from a CSV directory.

    Price files are parsed once and cached for the lifetime of the instance;
    the cache is guarded so one instance can serve concurrent requests.

    Args:
        data_dir: Root of the CSV directory layout.

    Raises:
        FileNotFoundError: If ``data_dir`` does not exist.
    """

    def __init__(self, data_dir: str | Path):
        self.data_dir = Path(data_dir)
        if not self.data_dir.is_dir():
            raise FileNotFoundError(f"Data directory not found: {self.data_dir}")
        self._series_cache: dict[str, PriceSeries] = {}
        self._lock = threading.Lock()
        self._lookup = InMemoryMarketData(
            quotes=self._load_quotes(),
            fx_rates=self._load_fx_rates(),
        )

    def get_holdings(self, portfolio_id: str) -> list[HoldingSnapshot]:
        path = self.data_dir / "portfolios" / f"{portfolio_id}.csv"
        if not path.exists():
            logger.warning("Portfolio file not found: %s", path)
            return []

        df = pd.read_csv(path)
        missing = [col for col in REQUIRED_HOLDING_COLUMNS if col not in df.columns]
        if missing:
            raise DataIntegrityError(
                "Portfolio file is missing required columns",
                context={"path": str(path), "missing": missing},
            )

        holdings = [_holding_from_row(row, path) for row in df.to_dict(orient="records")]
        logger.debug("Loaded %d holdings for portfolio %s", len(holdings), portfolio_id)
        return holdings

    def get_closing_prices(self, ticker: str, start: date, end: date) -> PriceSeries:
        return self._series(ticker.upper()).between(start, end)

    def get_current_price(self, ticker: str) -> float | None:
        return self._lookup.get_current_price(ticker)

    def get_exchange_rate(self, base: str, quote: str) -> float | None:
        return self._lookup.get_exchange_rate(base, quote)

    def _series(self, ticker: str) -> PriceSeries:
        with self._lock:
            cached = self._series_cache.get(ticker)
            if cached is not None:
                return cached

            frame = self._read_price_frame(ticker)
            if frame is not None:
                series = PriceSeries.from_frame(ticker, frame)
                logger.debug("Loaded %d bars for %s", len(series), ticker)
            else:
                logger.debug("No price file for %s", ticker)
                series = PriceSeries(ticker=ticker)
            self._series_cache[ticker] = series
            return series

    def _read_price_frame(self, ticker: str) -> pd.DataFrame | None:
        prices_dir = self.data_dir / "prices"
        parquet_path = prices_dir / f"{ticker}.parquet"
        if parquet_path.exists():
            return load_price_parquet(parquet_path)
        csv_path = prices_dir / f"{ticker}.csv"
        if csv_path.exists():
            return pd.read_csv(csv_path)
        return None

    def _load_quotes(self) -> dict[str, float]:
        path = self.data_dir / "quotes.csv"
        if not path.exists():
            return {}
        df = pd.read_csv(path)
        return {
            str(ticker).upper(): float(price)
            for ticker, price in zip(df["ticker"], df["price"])
            if pd.notna(price)
        }

    def _load_fx_rates(self) -> dict[tuple[str, str], float]:
        path = self.data_dir / "fx.csv"
        if not path.exists():
            return {}
        df = pd.read_csv(path)
        return {
            (str(base).upper(), str(quote).upper()): float(rate)
            for base, quote, rate in zip(df["base"], df["quote"], df["rate"])
        }


def load_price_parquet(path: Path) -> pd.DataFrame:
    """Load the OHLCV columns of a Parquet price file with a Polars LazyFrame.

    Only the known price columns present in the file are read (projection
    pushdown); the result is handed to pandas like a CSV frame.

    Raises:
        DataIntegrityError: If the file has no ``date`` or ``close`` column.
    """
    lf = pl.scan_parquet(path)
    available = lf.collect_schema().names()
    columns = [column for column in PRICE_COLUMNS if column in available]
    if "date" not in columns or "close" not in columns:
        raise DataIntegrityError(
            "Price file is missing required columns",
            context={"path": str(path), "columns": available},
        )
    df = lf.select(columns).collect()
    logger.debug("Loaded Parquet price file %s: %d rows", path, df.height)
    return pd.DataFrame(df.to_dict(as_series=False))


def _optional(row: dict, key: str):
    value = row.get(key)
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return None
    return value


def _asset_class(value, path: Path) -> AssetClass:
    if not value:
        return AssetClass.STOCK
    try:
        return AssetClass(str(value).strip().upper())
    except ValueError as exc:
        raise DataIntegrityError(
            "Unknown asset class in holdings file",
            context={"path": str(path), "asset_class": value},
        ) from exc


def _holding_from_row(row: dict, path: Path) -> HoldingSnapshot:
    purchase_price = _optional(row, "purchase_price")
    purchase_date = _optional(row, "purchase_date")
    return HoldingSnapshot(
        ticker=str(row["ticker"]).strip().upper(),
        quantity=float(row["quantity"]),
        purchase_price=float(purchase_price) if purchase_price is not None else None,
        purchase_date=pd.Timestamp(purchase_date).date() if purchase_date is not None else None,
        currency=str(_optional(row, "currency") or "USD").upper(),
        sector=_optional(row, "sector"),
        asset_class=_asset_class(_optional(row, "asset_class"), path),
        name=_optional(row, "name"),
    )
