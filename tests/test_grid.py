import math

import pytest
from wcwidth import wcswidth

from nepcal.core.base import InvalidCalendarInput
from nepcal.core.grid import CELL_WIDTH, CalendarCell, first_day_offset, generate, render_markdown, render_text
from nepcal.core.localization import Locale, WeekStart, lookup


def month_view(engine, year=2082, month=0, locale=Locale.EN, week_start=WeekStart.SUNDAY, today=(2082, 0, 15)):
    return generate(year, month, locale, week_start, *today, engine=engine)


def test_english_header(engine):
    assert month_view(engine).header == 'Baisakh 2082'


def test_nepali_header(engine):
    assert month_view(engine, month=2, locale=Locale.NP).header == 'असार २०८२'


@pytest.mark.parametrize('week_start', list(WeekStart))
@pytest.mark.parametrize('month', range(12))
def test_days_appear_once_in_order(engine, month, week_start):
    view = month_view(engine, month=month, week_start=week_start)
    days_in_month = engine.days_in_month(2082, month)

    assert view.days() == list(range(1, days_in_month + 1))
    assert all(len(week) == 7 for week in view.weeks)
    assert len(view.weeks) == math.ceil((view.offset + days_in_month) / 7)


def test_offset_rotates_with_week_start():
    assert [first_day_offset(weekday, WeekStart.SUNDAY) for weekday in range(7)] == [0, 1, 2, 3, 4, 5, 6]
    assert [first_day_offset(weekday, WeekStart.MONDAY) for weekday in range(7)] == [6, 0, 1, 2, 3, 4, 5]


def test_month_starting_on_sunday_needs_six_rows_from_monday(engine):
    # Asar 2082 starts on a Sunday in the fake engine
    assert engine.weekday(2082, 2, 1) == 0
    assert len(month_view(engine, month=2).weeks) == 5
    monday_view = month_view(engine, month=2, week_start=WeekStart.MONDAY)
    assert monday_view.offset == 6
    assert len(monday_view.weeks) == 6


@pytest.mark.parametrize('week_start', list(WeekStart))
@pytest.mark.parametrize('month', range(12))
def test_every_day_sits_under_its_weekday_label(engine, month, week_start):
    view = month_view(engine, month=month, week_start=week_start)
    weekday_names = lookup(Locale.EN).weekday_short_names

    for week in view.weeks:
        for column, cell in enumerate(week):
            if cell.day is not None:
                assert view.weekday_labels[column] == weekday_names[engine.weekday(2082, month, cell.day)]


def test_monday_start_rotates_labels(engine):
    sunday = month_view(engine, week_start=WeekStart.SUNDAY)
    monday = month_view(engine, week_start=WeekStart.MONDAY)
    assert sunday.weekday_labels == ['Sun', 'Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat']
    assert monday.weekday_labels == ['Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun']
    assert monday.offset == (sunday.offset - 1) % 7


def test_today_is_marked_once(engine):
    view = month_view(engine)
    today_cells = [cell for week in view.weeks for cell in week if cell.is_today]
    assert today_cells == [CalendarCell(15, is_today=True)]
    assert view.today_cell() == CalendarCell(15, is_today=True)


@pytest.mark.parametrize('year, month', [(2082, 1), (2081, 0), (2083, 0)])
def test_today_is_not_marked_in_other_months(engine, year, month):
    view = month_view(engine, year=year, month=month)
    assert view.today_cell() is None


@pytest.mark.parametrize('month', [-1, 12, 1.5, None])
def test_invalid_month_fails_before_engine_is_queried(engine, month):
    with pytest.raises(InvalidCalendarInput):
        month_view(engine, month=month)
    assert engine.calls == 0


def test_invalid_week_start_and_locale(engine):
    with pytest.raises(InvalidCalendarInput):
        month_view(engine, week_start=3)
    with pytest.raises(InvalidCalendarInput):
        month_view(engine, locale='xx')


def test_engine_errors_propagate(engine):
    with pytest.raises(ValueError, match='out of range'):
        month_view(engine, year=2100)


def test_generate_is_deterministic(engine):
    first = month_view(engine, month=4, week_start=WeekStart.MONDAY)
    second = month_view(engine, month=4, week_start=WeekStart.MONDAY)
    assert first.weeks == second.weeks
    assert first.header == second.header


def test_cells_are_padded_to_two_characters(engine):
    view = month_view(engine, locale=Locale.NP)
    assert view.format_cell(CalendarCell(5)) == ' ५'
    assert view.format_cell(CalendarCell(31)) == '३१'
    assert view.format_cell(CalendarCell()) == '  '


def test_render_markdown(engine):
    lines = render_markdown(month_view(engine)).splitlines()

    assert lines[0] == '## Baisakh 2082'
    assert lines[1] == ''
    assert lines[2] == '| Sun | Mon | Tue | Wed | Thu | Fri | Sat |'
    assert lines[3] == '| :---: | :---: | :---: | :---: | :---: | :---: | :---: |'
    assert lines[4] == '|    |  1 |  2 |  3 |  4 |  5 |  6 |'
    assert lines[6] == '| 14 | **15** | 16 | 17 | 18 | 19 | 20 |'
    assert lines[8] == '| 28 | 29 | 30 | 31 |    |    |    |'
    assert len(lines) == 9


def test_render_markdown_nepali(engine):
    markdown = render_markdown(month_view(engine, locale=Locale.NP))
    assert markdown.startswith('## बैशाख २०८२\n\n| आइत | सोम |')
    assert '| **१५** |' in markdown


def test_render_text(engine):
    lines = render_text(month_view(engine))

    assert lines[0] == 'Baisakh 2082'
    assert lines[1].split() == ['Sun', 'Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat']
    assert lines[2].split() == ['1', '2', '3', '4', '5', '6']
    assert '[15]' in lines[4]
    assert len(lines) == 2 + 5


def test_render_markdown_single_digit_today(engine):
    markdown = render_markdown(month_view(engine, today=(2082, 0, 5)))
    assert '|  4 | **5** |  6 |' in markdown


def column_starts(line, words):
    """Terminal column where each word starts, searching left to right"""
    starts, position = [], 0
    for word in words:
        position = line.index(word, position)
        starts.append(wcswidth(line[:position]))
        position += len(word)
    return starts


@pytest.mark.parametrize('locale', list(Locale))
def test_render_text_labels_line_up_with_day_columns(engine, locale):
    view = month_view(engine, locale=locale)
    lines = render_text(view)

    assert column_starts(lines[1], view.weekday_labels) == [column * CELL_WIDTH for column in range(7)]
    # Last week of Baisakh 2082 fills Sunday to Wednesday; day digits sit one column in
    last_week = [view.format_cell(cell) for cell in view.weeks[-1] if not cell.is_empty]
    assert column_starts(lines[-1], last_week) == [column * CELL_WIDTH + 1 for column in range(len(last_week))]
