"""Price feed providers for the simulator.

Provides recorded price observations as a PriceTick stream, either from a
CSV file or from an in-memory list.
"""

import csv
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union


@dataclass(frozen=True)
class PriceTick:
    """Single price observation."""

    price: float
    timestamp: Optional[datetime] = None


@dataclass
class DataRangeInfo:
    """Information about available data range."""

    start_ts: Optional[datetime]
    end_ts: Optional[datetime]
    total_records: int


class CsvPriceProvider:
    """Reads price observations from a CSV file with a header row.

    The price column is required. The timestamp column is optional: when the
    file has no such column, ticks carry no timestamp. Blank lines are skipped.
    """

    def __init__(
        self,
        path: Union[str, Path],
        price_column: str = "price",
        timestamp_column: Optional[str] = "timestamp",
    ):
        """Initialize provider.

        Args:
            path: CSV file path.
            price_column: Header of the price column.
            timestamp_column: Header of the ISO-8601 timestamp column.
        """
        self._path = Path(path)
        self._price_column = price_column
        self._timestamp_column = timestamp_column

    @property
    def path(self) -> Path:
        return self._path

    def __iter__(self) -> Iterator[PriceTick]:
        """Iterate over ticks in file order.

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the price column is missing or a row cannot be parsed
        """
        with open(self._path, newline="") as f:
            reader = csv.DictReader(f)
            fieldnames = reader.fieldnames or []
            if self._price_column not in fieldnames:
                raise ValueError(
                    f"{self._path}: missing price column '{self._price_column}' (found {fieldnames})"
                )
            has_timestamp = bool(self._timestamp_column) and self._timestamp_column in fieldnames

            for row in reader:
                raw_price = (row.get(self._price_column) or "").strip()
                if not raw_price:
                    continue
                yield self._parse_row(row, raw_price, has_timestamp, reader.line_num)

    def _parse_row(self, row: dict, raw_price: str, has_timestamp: bool, line_num: int) -> PriceTick:
        try:
            price = float(raw_price)
        except ValueError:
            raise ValueError(f"{self._path}:{line_num}: invalid price '{raw_price}'") from None

        timestamp = None
        if has_timestamp:
            raw_ts = (row.get(self._timestamp_column) or "").strip()
            if raw_ts:
                try:
                    timestamp = datetime.fromisoformat(raw_ts)
                except ValueError:
                    raise ValueError(f"{self._path}:{line_num}: invalid timestamp '{raw_ts}'") from None

        return PriceTick(price=price, timestamp=timestamp)

    def get_data_range_info(self) -> DataRangeInfo:
        """Scan the file for record count and timestamp range."""
        return _range_info(list(self))


class InMemoryPriceProvider:
    """In-memory price provider for testing and scripted runs.

    Accepts PriceTicks or bare prices.
    """

    def __init__(self, ticks: Iterable[Union[PriceTick, float]]):
        """Initialize with ticks in chronological order."""
        self._ticks = [
            tick if isinstance(tick, PriceTick) else PriceTick(price=float(tick))
            for tick in ticks
        ]

    def __iter__(self) -> Iterator[PriceTick]:
        yield from self._ticks

    def get_data_range_info(self) -> DataRangeInfo:
        return _range_info(self._ticks)


def _range_info(ticks: list[PriceTick]) -> DataRangeInfo:
    timestamps = [t.timestamp for t in ticks if t.timestamp is not None]
    return DataRangeInfo(
        start_ts=min(timestamps) if timestamps else None,
        end_ts=max(timestamps) if timestamps else None,
        total_records=len(ticks),
    )
