import pytest

from nepcal.core.localization import Locale, WeekStart
from nepcal.core.navigation import DisplayedMonth, NavigationController


@pytest.fixture
def controller(engine):
    return NavigationController(Locale.EN, WeekStart.SUNDAY, engine)


def test_starts_on_today(controller):
    assert controller.displayed == DisplayedMonth(2082, 0)
    assert controller.view.header == 'Baisakh 2082'
    assert controller.view.today_cell().day == 15


def test_previous_month_wraps_into_previous_year(controller):
    view = controller.step_month(-1)
    assert controller.displayed == DisplayedMonth(2081, 11)
    assert view is controller.view
    assert view.header == 'Chaitra 2081'


def test_next_month_wraps_into_next_year(controller):
    for _ in range(11):
        controller.step_month(1)
    assert controller.displayed == DisplayedMonth(2082, 11)
    controller.step_month(1)
    assert controller.displayed == DisplayedMonth(2083, 0)


@pytest.mark.parametrize('delta, expected', [
    (25, DisplayedMonth(2084, 1)),
    (-13, DisplayedMonth(2080, 11)),
    (-24, DisplayedMonth(2080, 0)),
    (0, DisplayedMonth(2082, 0)),
])
def test_multi_month_steps_carry_into_year(controller, delta, expected):
    controller.step_month(delta)
    assert controller.displayed == expected


def test_step_year_keeps_month(controller):
    controller.step_month(4)
    controller.step_year(-3)
    assert controller.displayed == DisplayedMonth(2079, 4)
    assert controller.view.year == 2079
    assert controller.view.month == 4


def test_go_to_today_after_navigation(controller):
    controller.step_year(5)
    controller.step_month(-7)
    controller.go_to_today()
    assert controller.displayed == DisplayedMonth(2082, 0)
    assert controller.view.today_cell() is not None


def test_go_to_today_queries_the_engine_each_time(controller, engine):
    engine.today_value = (2082, 3, 2)
    controller.go_to_today()
    assert controller.displayed == DisplayedMonth(2082, 3)
    assert controller.view.today_cell().day == 2


def test_render_picks_up_a_new_today(controller, engine):
    engine.today_value = (2082, 0, 16)
    view = controller.render()
    assert controller.displayed == DisplayedMonth(2082, 0)
    assert view.today_cell().day == 16


def test_failed_transition_keeps_state(controller):
    old_view = controller.view
    with pytest.raises(ValueError):
        controller.step_year(20)
    assert controller.displayed == DisplayedMonth(2082, 0)
    assert controller.view is old_view


def test_accepts_config_values(engine):
    controller = NavigationController('np', 1, engine)
    assert controller.locale is Locale.NP
    assert controller.week_start is WeekStart.MONDAY
    assert controller.view.weekday_labels[0] == 'सोम'


def test_displayed_month_shifted():
    assert DisplayedMonth(2082, 0).shifted(-1) == DisplayedMonth(2081, 11)
    assert DisplayedMonth(2082, 11).shifted(1) == DisplayedMonth(2083, 0)
    assert DisplayedMonth(2082, 5).shifted(-30) == DisplayedMonth(2079, 11)


class MidnightEngine:
    """Wraps an engine whose clock moves to the next month after the first reading."""

    def __init__(self, engine, readings):
        self._engine = engine
        self._readings = iter(readings)
        self.days_in_month = engine.days_in_month
        self.weekday = engine.weekday

    def today(self):
        return next(self._readings)


def test_go_to_today_reads_the_clock_once(engine):
    readings = [(2082, 0, 15), (2082, 0, 15), (2082, 0, 31), (2082, 1, 1)]
    controller = NavigationController(Locale.EN, WeekStart.SUNDAY, MidnightEngine(engine, readings))
    controller.step_month(3)

    view = controller.go_to_today()
    assert controller.displayed == DisplayedMonth(2082, 0)
    assert view.today_cell().day == 31
