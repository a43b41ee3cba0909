"""Overtime dataset helpers shared by the API and the client.

A dataset maps a month key (``"2024-3"``) to a mapping of day numbers,
serialized as strings, to a status of ``"half"`` or ``"full"``.  A day that
is missing from its month is a normal working day, and a month never stays
in the dataset once its last day has been cleared.
"""
from __future__ import annotations

import calendar
import copy
import enum
import re
from dataclasses import dataclass
from typing import Any, Dict, Mapping

MonthData = Dict[str, str]
Dataset = Dict[str, MonthData]

_MONTH_KEY = re.compile(r"^([1-9]\d{3})-([1-9]|1[0-2])$")


class DayStatus(str, enum.Enum):
    NORMAL = "normal"
    HALF = "half"
    FULL = "full"

    def next(self) -> "DayStatus":
        """Advance one step along normal -> half -> full -> normal."""

        return _CYCLE[self]


_CYCLE = {
    DayStatus.NORMAL: DayStatus.HALF,
    DayStatus.HALF: DayStatus.FULL,
    DayStatus.FULL: DayStatus.NORMAL,
}

STORED_STATUSES = frozenset({DayStatus.HALF.value, DayStatus.FULL.value})


@dataclass(slots=True, frozen=True)
class MonthStats:
    full_days: int
    half_days: int

    @property
    def total_days(self) -> float:
        return self.full_days + self.half_days / 2


def month_key(year: int, month: int) -> str:
    if not 1000 <= year <= 9999:
        raise ValueError(f"Invalid year {year}")
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month {month}")
    return f"{year}-{month}"


def check_day(year: int, month: int, day: int) -> str:
    """Return the month key for a real calendar day or raise ``ValueError``."""

    key = month_key(year, month)
    if not 1 <= day <= calendar.monthrange(year, month)[1]:
        raise ValueError(f"Invalid day {day} for {key}")
    return key


def merge_datasets(local: Mapping[str, MonthData], remote: Mapping[str, MonthData]) -> Dataset:
    """Combine a cached dataset with the server's copy.

    Every month the remote side knows about is taken from ``remote`` as is;
    months only present in ``local`` are carried over.  There is no day-level
    merge.  Neither argument is mutated.
    """

    merged: Dataset = copy.deepcopy(dict(remote))
    for key, days in local.items():
        if key not in merged:
            merged[key] = copy.deepcopy(days)
    return merged


def get_day_status(dataset: Mapping[str, MonthData], key: str, day: int) -> DayStatus:
    value = dataset.get(key, {}).get(str(day))
    return DayStatus(value) if value in STORED_STATUSES else DayStatus.NORMAL


def set_day_status(dataset: Dataset, key: str, day: int, status: DayStatus | str) -> None:
    """Write a day in place, dropping the month once it has no days left."""

    status = DayStatus(status)
    if status is DayStatus.NORMAL:
        days = dataset.get(key)
        if days is None:
            return
        days.pop(str(day), None)
        if not days:
            del dataset[key]
        return
    dataset.setdefault(key, {})[str(day)] = status.value


def month_stats(dataset: Mapping[str, MonthData], key: str) -> MonthStats:
    days = dataset.get(key, {})
    full = sum(1 for value in days.values() if value == DayStatus.FULL.value)
    half = sum(1 for value in days.values() if value == DayStatus.HALF.value)
    return MonthStats(full_days=full, half_days=half)


def is_valid_month(key: Any, days: Any) -> bool:
    """Return True for one well-formed month entry.

    The key must look like ``YYYY-M``, day keys must be canonical day numbers
    that exist in that month (``"5"``, never ``"05"``) and every status must be
    ``half`` or ``full``.  An empty month is tolerated.
    """

    if not isinstance(key, str):
        return False
    match = _MONTH_KEY.match(key)
    if match is None or not isinstance(days, dict):
        return False
    last_day = calendar.monthrange(int(match.group(1)), int(match.group(2)))[1]
    for day, value in days.items():
        if not isinstance(day, str) or not (day.isascii() and day.isdigit()):
            return False
        if day != str(int(day)) or not 1 <= int(day) <= last_day:
            return False
        if value not in STORED_STATUSES:
            return False
    return True


def is_valid_dataset(payload: Any) -> bool:
    """Return True when ``payload`` has the shape of a dataset."""

    if not isinstance(payload, dict):
        return False
    return all(is_valid_month(key, days) for key, days in payload.items())


def valid_months(payload: Any) -> Dataset:
    """Keep the well-formed, non-empty months of ``payload`` and drop the rest."""

    if not isinstance(payload, dict):
        return {}
    return {key: days for key, days in payload.items() if days and is_valid_month(key, days)}


def drop_empty_months(dataset: Dataset) -> Dataset:
    """Remove months without any day, in place, and return the dataset."""

    for key in [key for key, days in dataset.items() if not days]:
        del dataset[key]
    return dataset
