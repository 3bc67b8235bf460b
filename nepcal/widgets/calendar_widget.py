from nepcal.core.base import (
    Widget,
    Config,
    ConfigLoader,
    ConfigSpecificException,
    ClipboardError,
    CursesWindowType,
    CursesBold,
    CursesKeys,
    LogMessages,
    PreferencesRequested,
    UIState,
    BaseConfig,
    draw_widget,
    safe_addstr,
    convert_color_number_to_curses_pair
)
from nepcal.core.bs_engine import DateEngine, default_engine
from nepcal.core.clipboard import copy_to_clipboard
from nepcal.core.grid import CELL_WIDTH, MonthView, render_markdown
from nepcal.core.localization import lookup
from nepcal.core.navigation import NavigationController
from nepcal.core.preferences import Preferences

KEY_BINDINGS: dict[str, tuple[int, ...]] = {
    'go_to_today': (ord('t'),),
    'copy_calendar': (ord('c'),),
    'prev_month': (CursesKeys.LEFT,),
    'next_month': (CursesKeys.RIGHT,),
    'prev_year': (CursesKeys.SHIFT_LEFT, CursesKeys.DOWN),
    'next_year': (CursesKeys.SHIFT_RIGHT, CursesKeys.UP),
    'open_preferences': (ord(','),),
}

KEY_HINTS: dict[str, str] = {
    'go_to_today': 't',
    'copy_calendar': 'c',
    'prev_month': '←',
    'next_month': '→',
    'prev_year': '⇧← / ↓',
    'next_year': '⇧→ / ↑',
    'open_preferences': ',',
}


def controller_of(widget: Widget) -> NavigationController:
    return widget.internal_data['controller']


def action_for_key(key: int) -> str | None:
    for action_id, keys in KEY_BINDINGS.items():
        if key in keys:
            return action_id
    return None


def copy_calendar(widget: Widget) -> None:
    controller = controller_of(widget)
    label = lookup(controller.locale).action_labels['copy_calendar']
    try:
        copy_to_clipboard(render_markdown(controller.view))
        widget.draw_data['status'] = f'✓ {label}'
    except ClipboardError as e:
        widget.draw_data['status'] = f'✗ {e}'
        widget.draw_data['error'] = True


def run_action(widget: Widget, action_id: str) -> None:
    controller = controller_of(widget)
    widget.draw_data['status'] = ''
    widget.draw_data['error'] = False

    if action_id == 'go_to_today':
        controller.go_to_today()
    elif action_id == 'prev_month':
        controller.step_month(-1)
    elif action_id == 'next_month':
        controller.step_month(1)
    elif action_id == 'prev_year':
        controller.step_year(-1)
    elif action_id == 'next_year':
        controller.step_year(1)
    elif action_id == 'copy_calendar':
        copy_calendar(widget)
    elif action_id == 'open_preferences':
        config_loader: ConfigLoader = widget.internal_data['config_loader']
        raise PreferencesRequested(config_loader.widget_config_path(widget.config.file_name))


def keyboard_press_action(widget: Widget, key: int, _ui_state: UIState, _base_config: BaseConfig) -> None:
    action_id = action_for_key(key)
    if action_id is None:
        return
    try:
        run_action(widget, action_id)
    except (ValueError, OverflowError) as e:  # Date engine has no table for the requested year
        widget.draw_data['status'] = f'✗ {e}'
        widget.draw_data['error'] = True


def refresh_today(widget: Widget) -> MonthView:
    """Regenerate the view when the date changed since the last frame"""
    controller = controller_of(widget)
    engine: DateEngine = widget.internal_data['engine']
    today = engine.today()
    if widget.internal_data.get('today') != today:
        widget.internal_data['today'] = today
        return controller.render()
    return controller.view


def draw(widget: Widget, ui_state: UIState, base_config: BaseConfig) -> None:
    view = refresh_today(widget)
    draw_widget(widget, ui_state, base_config, view.header, error=widget.draw_data.get('error', False))

    secondary = convert_color_number_to_curses_pair(base_config.SECONDARY_PAIR_NUMBER)
    today_color = CursesBold | convert_color_number_to_curses_pair(base_config.PRIMARY_PAIR_NUMBER)

    for column, label in enumerate(view.weekday_labels):
        safe_addstr(widget, 1, 2 + column * CELL_WIDTH, label, secondary)

    for row, week in enumerate(view.weeks, start=2):
        for column, cell in enumerate(week):
            if cell.is_empty:
                continue
            safe_addstr(
                widget, row, 2 + column * CELL_WIDTH, view.format_cell(cell),
                today_color if cell.is_today else 0
            )

    if status := widget.draw_data.get('status'):
        safe_addstr(widget, widget.dimensions.height - 2, 2, status[:widget.dimensions.width - 4])


def build(
        stdscr: CursesWindowType,
        config: Config,
        config_loader: ConfigLoader,
        log_messages: LogMessages,
        engine: DateEngine = default_engine
) -> Widget:
    preferences_log: LogMessages = LogMessages()
    preferences = Preferences.from_config(config, preferences_log, config_loader)
    for message in preferences_log.log_messages:
        log_messages.add_log_message(message)
    if preferences_log.contains_error():
        raise ConfigSpecificException(preferences_log)

    widget = Widget(
        config.name, config.title, config, draw, config.dimensions, stdscr,
        mouse_click_func=None,
        keyboard_func=keyboard_press_action
    )
    widget.internal_data = {
        'controller': NavigationController(preferences.locale, preferences.week_start, engine),
        'config_loader': config_loader,
        'engine': engine,
        'today': engine.today(),
    }
    return widget
