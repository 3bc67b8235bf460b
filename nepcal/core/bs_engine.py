"""Thin adapter over nepali_datetime; months are 0-indexed everywhere in nepcal."""
from __future__ import annotations
import typing

import nepali_datetime


class DateEngine(typing.Protocol):
    def today(self) -> tuple[int, int, int]:
        """Return (year, month, day) of the current date"""

    def weekday(self, year: int, month: int, day: int) -> int:
        """Return the weekday, Sunday = 0 .. Saturday = 6"""

    def days_in_month(self, year: int, month: int) -> int: ...


class NepaliDateEngine:
    @staticmethod
    def _date(year: int, month: int, day: int) -> nepali_datetime.date:
        return nepali_datetime.date(year, month + 1, day)

    def today(self) -> tuple[int, int, int]:
        today = nepali_datetime.date.today()
        return today.year, today.month - 1, today.day

    def weekday(self, year: int, month: int, day: int) -> int:
        # datetime.date.weekday() has Monday = 0
        return (self._date(year, month, day).to_datetime_date().weekday() + 1) % 7

    def days_in_month(self, year: int, month: int) -> int:
        next_year, next_month = divmod(year * 12 + month + 1, 12)
        if next_year > nepali_datetime.MAXYEAR:
            return self._last_day(year, month)
        first = self._date(year, month, 1).to_datetime_date()
        following = self._date(next_year, next_month, 1).to_datetime_date()
        return (following - first).days

    def _last_day(self, year: int, month: int) -> int:
        """Month length without looking at the following month, for the last month in the table"""
        self._date(year, month, 1)  # raises for years outside the table
        for day in (32, 31, 30):
            try:
                self._date(year, month, day)
            except ValueError:
                continue
            return day
        return 29


default_engine: NepaliDateEngine = NepaliDateEngine()
