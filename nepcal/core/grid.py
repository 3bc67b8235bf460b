"""Month grid generation and rendering.

`generate` is a pure function of its arguments: the reference "today" is passed in
by the caller instead of being read from the clock, so the same inputs always give
the same grid.
"""
from __future__ import annotations
import typing

from wcwidth import wcswidth

from nepcal.core.base import InvalidCalendarInput
from nepcal.core.bs_engine import DateEngine, default_engine
from nepcal.core.localization import Locale, WeekStart, lookup, to_localized_digits

DAY_WIDTH: int = 2
CELL_WIDTH: int = 5  # day number plus spacing in text output


class CalendarCell:
    __slots__ = ('day', 'is_today')

    def __init__(self, day: int | None = None, is_today: bool = False) -> None:
        self.day: int | None = day
        self.is_today: bool = is_today

    @property
    def is_empty(self) -> bool:
        return self.day is None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CalendarCell):
            return NotImplemented
        return (self.day, self.is_today) == (other.day, other.is_today)

    def __repr__(self) -> str:
        if self.day is None:
            return 'CalendarCell()'
        return f'CalendarCell({self.day}, is_today={self.is_today})'


class MonthView:
    def __init__(
            self,
            year: int,
            month: int,
            locale: Locale,
            week_start: WeekStart,
            header: str,
            weekday_labels: list[str],
            weeks: list[list[CalendarCell]],
            offset: int
    ) -> None:
        self.year = year
        self.month = month
        self.locale = locale
        self.week_start = week_start
        self.header = header
        self.weekday_labels = weekday_labels
        self.weeks = weeks
        self.offset = offset

    def days(self) -> list[int]:
        return [cell.day for week in self.weeks for cell in week if cell.day is not None]

    def today_cell(self) -> CalendarCell | None:
        return next((cell for week in self.weeks for cell in week if cell.is_today), None)

    def format_cell(self, cell: CalendarCell) -> str:
        """Day number in the view's numerals, right-aligned to DAY_WIDTH; padding for empty cells"""
        if cell.day is None:
            return ' ' * DAY_WIDTH
        return to_localized_digits(self.locale, cell.day).rjust(DAY_WIDTH)


def first_day_offset(first_weekday: int, week_start: WeekStart) -> int:
    if week_start == WeekStart.SUNDAY:
        return first_weekday
    return 6 if first_weekday == 0 else first_weekday - 1


def rotate_weekday_labels(labels: typing.Sequence[str], week_start: WeekStart) -> list[str]:
    if week_start == WeekStart.SUNDAY:
        return list(labels)
    return list(labels[1:]) + [labels[0]]


def generate(
        year: int,
        month: int,
        locale: Locale | str,
        week_start: WeekStart | int,
        today_year: int,
        today_month: int,
        today_day: int,
        engine: DateEngine = default_engine
) -> MonthView:
    if not isinstance(month, int) or not 0 <= month <= 11:
        raise InvalidCalendarInput(f'Month {month!r} out of range (expected 0-11)')
    locale = Locale.coerce(locale)
    week_start = WeekStart.coerce(week_start)
    entry = lookup(locale)

    days_in_month: int = engine.days_in_month(year, month)
    offset: int = first_day_offset(engine.weekday(year, month, 1), week_start)
    is_current_month: bool = (year, month) == (today_year, today_month)

    cells: list[CalendarCell] = [CalendarCell() for _ in range(offset)]
    for day in range(1, days_in_month + 1):
        cells.append(CalendarCell(day, is_today=is_current_month and day == today_day))

    weeks: list[list[CalendarCell]] = []
    for start in range(0, len(cells), 7):
        week = cells[start:start + 7]
        week.extend(CalendarCell() for _ in range(7 - len(week)))
        weeks.append(week)

    return MonthView(
        year=year,
        month=month,
        locale=locale,
        week_start=week_start,
        header=f'{entry.month_name(month)} {to_localized_digits(locale, year)}',
        weekday_labels=rotate_weekday_labels(entry.weekday_short_names, week_start),
        weeks=weeks,
        offset=offset,
    )


def render_markdown(view: MonthView) -> str:
    """Markdown table of the month, used for clipboard export"""
    lines: list[str] = [
        f'| {" | ".join(view.weekday_labels)} |',
        '|' + ' :---: |' * 7,
    ]
    for week in view.weeks:
        row = '|'
        for cell in week:
            if cell.is_empty:
                row += '    |'
            elif cell.is_today:
                row += f' **{view.format_cell(cell).strip()}** |'  # no padding inside the emphasis
            else:
                row += f' {view.format_cell(cell)} |'
        lines.append(row)
    return f'## {view.header}\n\n' + '\n'.join(lines) + '\n'


def render_text(view: MonthView) -> list[str]:
    """Plain fixed-width lines: header, weekday labels, then one line per week"""
    # Pad by terminal columns so each label starts over its day column
    labels = ''.join(label + ' ' * max(1, CELL_WIDTH - wcswidth(label)) for label in view.weekday_labels)
    lines: list[str] = [view.header, labels.rstrip()]
    for week in view.weeks:
        row = ''
        for cell in week:
            text = view.format_cell(cell)
            if cell.is_today:
                text = f'[{text}]'
            else:
                text = f' {text} '
            row += text.ljust(CELL_WIDTH)
        lines.append(row.rstrip())
    return lines
