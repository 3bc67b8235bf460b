import nepali_datetime
import pytest

from nepcal.core.bs_engine import NepaliDateEngine
from nepcal.core.grid import generate


@pytest.fixture(scope='module')
def engine():
    return NepaliDateEngine()


def test_new_year_2082_is_a_monday(engine):
    # Baisakh 1, 2082 = 14 April 2025
    assert engine.weekday(2082, 0, 1) == 1


@pytest.mark.parametrize('year', [2080, 2081, 2082])
def test_month_lengths_are_plausible(engine, year):
    lengths = [engine.days_in_month(year, month) for month in range(12)]
    assert all(29 <= length <= 32 for length in lengths)
    assert sum(lengths) in (365, 366)


@pytest.mark.parametrize('month', range(12))
def test_weekdays_continue_across_months(engine, month):
    year = 2081
    following_year, following_month = divmod(year * 12 + month + 1, 12)
    first = engine.weekday(year, month, 1)
    assert engine.weekday(following_year, following_month, 1) == (first + engine.days_in_month(year, month)) % 7


def test_today_is_a_valid_date(engine):
    year, month, day = engine.today()
    assert 0 <= month <= 11
    assert 1 <= day <= engine.days_in_month(year, month)


def test_current_month_grid_marks_today(engine):
    year, month, day = engine.today()
    view = generate(year, month, 'en', 0, year, month, day, engine=engine)
    assert view.today_cell().day == day


@pytest.mark.parametrize('month', range(12))
def test_last_day_agrees_with_following_month(engine, month):
    assert engine._last_day(2081, month) == engine.days_in_month(2081, month)


def test_last_month_in_the_table(engine):
    days_in_month = engine.days_in_month(nepali_datetime.MAXYEAR, 11)
    assert 29 <= days_in_month <= 32

    view = generate(nepali_datetime.MAXYEAR, 11, 'en', 0, 2082, 0, 1, engine=engine)
    assert view.days() == list(range(1, days_in_month + 1))


def test_first_month_in_the_table(engine):
    view = generate(nepali_datetime.MINYEAR, 0, 'en', 0, 2082, 0, 1, engine=engine)
    assert 29 <= len(view.days()) <= 32


def test_years_outside_the_table_raise(engine):
    with pytest.raises(ValueError):
        engine.days_in_month(nepali_datetime.MAXYEAR + 1, 0)
