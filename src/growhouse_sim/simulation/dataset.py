"""Daily climate reference data for greenhouse simulation.

The engine reads one EnvironmentRecord per simulated day from an
EnvironmentDataset. Records come from:
- CSV: The yearly station export (``date;tavg;tmin;tmax;prcp;snow;pres;tsun``)
- Synthetic: A smooth annual temperature cycle for demos and tests
"""

from __future__ import annotations

import csv
import logging
import math
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import date, timedelta
from pathlib import Path

from growhouse_sim.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Allowed file extensions for CSV climate files
_ALLOWED_CSV_EXTENSIONS: frozenset[str] = frozenset({".csv", ".CSV"})

# Numeric columns following the date column, in file order
_NUMERIC_COLUMNS: tuple[str, ...] = ("tavg", "tmin", "tmax", "prcp", "snow", "pres", "tsun")


@dataclass(frozen=True)
class EnvironmentRecord:
    """Outside climate for one calendar day.

    Attributes:
        date: Calendar date of the observation.
        tavg: Average air temperature in °C.
        tmin: Minimum air temperature in °C.
        tmax: Maximum air temperature in °C.
        prcp: Precipitation in mm.
        snow: Snow depth in mm.
        pres: Air pressure in hPa.
        tsun: Sunshine duration in minutes.
    """

    date: date
    tavg: float
    tmin: float
    tmax: float
    prcp: float = 0.0
    snow: float = 0.0
    pres: float = 1013.25
    tsun: float = 0.0

    def to_dict(self) -> dict[str, float | str]:
        """Convert record to dictionary for serialization."""
        return {
            "date": self.date.isoformat(),
            "tavg": self.tavg,
            "tmin": self.tmin,
            "tmax": self.tmax,
            "prcp": self.prcp,
            "snow": self.snow,
            "pres": self.pres,
            "tsun": self.tsun,
        }


class EnvironmentDataset:
    """Fixed, ordered sequence of daily climate records.

    Records are indexed by simulated day with wraparound, so a one-year
    dataset drives a simulation of any length.
    """

    def __init__(self, records: Iterable[EnvironmentRecord]) -> None:
        """Initialize dataset.

        Args:
            records: Daily records in calendar order.

        Raises:
            ConfigurationError: If there are no records.
        """
        self._records: tuple[EnvironmentRecord, ...] = tuple(records)
        if not self._records:
            msg = "Environment dataset is empty; the simulation cannot run"
            raise ConfigurationError(msg)

    def __len__(self) -> int:
        return len(self._records)

    def __getitem__(self, index: int) -> EnvironmentRecord:
        return self._records[index]

    def __iter__(self) -> Iterator[EnvironmentRecord]:
        return iter(self._records)

    def record_for_day(self, day: int) -> EnvironmentRecord:
        """Get the record driving a simulated day (``day mod len``)."""
        return self._records[day % len(self._records)]


def _parse_number(raw: str) -> float:
    """Parse a number written with either decimal comma or point."""
    text = raw.strip().replace(",", ".")
    if not text:
        return 0.0
    return float(text)


def _parse_date(raw: str) -> date:
    """Parse the ``MM.DD.YYYY`` date prefix of a row."""
    month, day, year = raw.strip()[:10].split(".")
    return date(int(year), int(month), int(day))


def _validate_csv_path(file_path: Path) -> Path:
    resolved = file_path.resolve()
    if resolved.suffix not in _ALLOWED_CSV_EXTENSIONS:
        msg = f"Invalid file extension '{resolved.suffix}', expected .csv"
        raise ConfigurationError(msg)
    if not resolved.is_file():
        msg = f"Climate file not found: {file_path}"
        raise ConfigurationError(msg)
    return resolved


def load_environment_csv(
    file_path: Path | str, *, delimiter: str = ";"
) -> EnvironmentDataset:
    """Load daily climate records from a station CSV export.

    Rows have no header: ``date;tavg;tmin;tmax;prcp;snow;pres;tsun`` with the
    date as ``MM.DD.YYYY`` and decimal commas. Rows that cannot be parsed
    are skipped with a warning.

    Args:
        file_path: Path to the CSV file.
        delimiter: Field separator.

    Returns:
        Dataset of parsed records in file order.

    Raises:
        ConfigurationError: If the path is invalid or no row could be parsed.
    """
    path = _validate_csv_path(Path(file_path))
    records: list[EnvironmentRecord] = []
    skipped = 0

    with path.open(newline="", encoding="utf-8") as f:
        reader = csv.reader(f, delimiter=delimiter)
        for row_num, row in enumerate(reader, start=1):
            if not row or not "".join(row).strip():
                continue
            try:
                if len(row) < 1 + len(_NUMERIC_COLUMNS):
                    msg = f"expected {1 + len(_NUMERIC_COLUMNS)} fields, got {len(row)}"
                    raise ValueError(msg)
                values = dict(
                    zip(_NUMERIC_COLUMNS, (_parse_number(v) for v in row[1:]), strict=False)
                )
                records.append(EnvironmentRecord(date=_parse_date(row[0]), **values))
            except ValueError as e:
                skipped += 1
                logger.warning("Skipping row %d in %s: %s", row_num, path, e)

    if not records:
        msg = f"No climate records could be read from {path}"
        raise ConfigurationError(msg)

    logger.info(
        "Loaded %d environment records from %s (%d rows skipped)",
        len(records),
        path,
        skipped,
    )
    return EnvironmentDataset(records)


def synthetic_dataset(
    *,
    year: int = 2024,
    mean_temperature: float = 10.0,
    annual_amplitude: float = 9.0,
    daily_range: float = 8.0,
) -> EnvironmentDataset:
    """Generate one year of smooth synthetic climate records.

    The average temperature follows a cosine with its minimum in mid
    January; sunshine follows day length.

    Args:
        year: Calendar year for the record dates.
        mean_temperature: Annual mean temperature in °C.
        annual_amplitude: Half the summer/winter difference in °C.
        daily_range: Difference between daily max and min in °C.

    Returns:
        Dataset with one record per day of the year.
    """
    start = date(year, 1, 1)
    days = (date(year + 1, 1, 1) - start).days
    records = []
    for offset in range(days):
        phase = 2 * math.pi * (offset - 15) / days
        tavg = mean_temperature - annual_amplitude * math.cos(phase)
        sunshine = 60.0 * (12.0 - 4.0 * math.cos(phase)) * 0.5
        records.append(
            EnvironmentRecord(
                date=start + timedelta(days=offset),
                tavg=round(tavg, 1),
                tmin=round(tavg - daily_range / 2, 1),
                tmax=round(tavg + daily_range / 2, 1),
                tsun=round(sunshine, 0),
            )
        )
    return EnvironmentDataset(records)
