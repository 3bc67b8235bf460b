from __future__ import annotations
import typing

from nepcal.core.bs_engine import DateEngine, default_engine
from nepcal.core.grid import MonthView, generate
from nepcal.core.localization import Locale, WeekStart


class DisplayedMonth(typing.NamedTuple):
    year: int
    month: int  # 0 = Baisakh .. 11 = Chaitra

    def shifted(self, months: int) -> DisplayedMonth:
        year, month = divmod(self.year * 12 + self.month + months, 12)
        return DisplayedMonth(year, month)


class NavigationController:
    """Owns the displayed month; every transition swaps month and view together."""

    def __init__(
            self,
            locale: Locale | str,
            week_start: WeekStart | int,
            engine: DateEngine = default_engine
    ) -> None:
        self.locale: Locale = Locale.coerce(locale)
        self.week_start: WeekStart = WeekStart.coerce(week_start)
        self._engine = engine
        today = engine.today()
        self._displayed: DisplayedMonth = DisplayedMonth(today[0], today[1])
        self._view: MonthView = self._generate(self._displayed, today)

    @property
    def displayed(self) -> DisplayedMonth:
        return self._displayed

    @property
    def view(self) -> MonthView:
        return self._view

    def _generate(self, displayed: DisplayedMonth, today: tuple[int, int, int]) -> MonthView:
        return generate(
            displayed.year, displayed.month, self.locale, self.week_start,
            *today,
            engine=self._engine
        )

    def _transition(self, displayed: DisplayedMonth, today: tuple[int, int, int] | None = None) -> MonthView:
        view = self._generate(displayed, today or self._engine.today())  # raises before any state changes
        self._displayed, self._view = displayed, view
        return view

    def step_month(self, delta: int) -> MonthView:
        return self._transition(self._displayed.shifted(delta))

    def step_year(self, delta: int) -> MonthView:
        return self._transition(DisplayedMonth(self._displayed.year + delta, self._displayed.month))

    def go_to_today(self) -> MonthView:
        # One reading of the clock picks the month and the highlighted day
        today = self._engine.today()
        return self._transition(DisplayedMonth(today[0], today[1]), today)

    def render(self) -> MonthView:
        """Regenerate the current month against the engine's current date (e.g. after midnight)"""
        return self._transition(self._displayed)
