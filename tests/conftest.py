import typing

import pytest

from nepcal.core.base import Config, ConfigLoader, LogMessages


class FakeEngine:
    """Every year has the same month lengths; Baisakh 1, 2082 is a Monday.

    Years after `last_year` behave like years missing from the real engine's table.
    """
    MONTH_LENGTHS: tuple[int, ...] = (31, 31, 32, 31, 31, 31, 30, 29, 30, 29, 30, 30)

    def __init__(self, today: tuple[int, int, int] = (2082, 0, 15), last_year: int = 2090) -> None:
        self.today_value = today
        self.last_year = last_year
        self.calls: int = 0

    def _check(self, year: int) -> None:
        self.calls += 1
        if year > self.last_year:
            raise ValueError(f'year {year} is out of range')

    def today(self) -> tuple[int, int, int]:
        return self.today_value

    def days_in_month(self, year: int, month: int) -> int:
        self._check(year)
        return self.MONTH_LENGTHS[month]

    def weekday(self, year: int, month: int, day: int) -> int:
        self._check(year)
        elapsed = (year - 2082) * sum(self.MONTH_LENGTHS) + sum(self.MONTH_LENGTHS[:month]) + day - 1
        return (1 + elapsed) % 7


class FakeWindow:
    def __init__(self, height: int, width: int) -> None:
        self.height = height
        self.width = width
        self.written: list[tuple[int, int, str]] = []

    def getmaxyx(self) -> tuple[int, int]:
        return self.height, self.width

    def addstr(self, y: int, x: int, text: str, _attr: int = 0) -> None:
        self.written.append((y, x, text))

    def erase(self) -> None:
        self.written.clear()

    def border(self) -> None:
        pass

    def noutrefresh(self) -> None:
        pass


class FakeScreen:
    def subwin(self, height: int, width: int, _y: int, _x: int) -> FakeWindow:
        return FakeWindow(height, width)


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def stdscr() -> FakeScreen:
    return FakeScreen()


@pytest.fixture
def config_loader(tmp_path, monkeypatch) -> ConfigLoader:
    monkeypatch.delenv('NEPCAL_LANGUAGE', raising=False)
    monkeypatch.delenv('NEPCAL_WEEK_START', raising=False)
    return ConfigLoader(tmp_path)


def make_widget_config(log_messages: LogMessages | None = None, **overrides: typing.Any) -> Config:
    values: dict[str, typing.Any] = {
        'name': 'calendar',
        'title': 'Calendar',
        'enabled': True,
        'height': 11,
        'width': 38,
        'y': 0,
        'x': 0,
        'language': 'en',
        'week_start': 0,
    }
    values.update(overrides)
    return Config(file_name='calendar', log_messages=log_messages or LogMessages(), **values)
