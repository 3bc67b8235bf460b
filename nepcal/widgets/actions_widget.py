from nepcal.core.base import (
    Widget,
    Config,
    ConfigLoader,
    CursesWindowType,
    LogMessages,
    UIState,
    BaseConfig,
    draw_widget,
    safe_addstr,
    convert_color_number_to_curses_pair
)
from nepcal.core.localization import LocalizationEntry, lookup
from nepcal.core.preferences import Preferences
from nepcal.widgets.calendar_widget import KEY_HINTS

# Same grouping as the action panel: header actions, navigation, preferences
SECTIONS: tuple[tuple[str | None, tuple[str, ...]], ...] = (
    (None, ('go_to_today', 'copy_calendar')),
    ('navigate', ('prev_month', 'next_month', 'prev_year', 'next_year')),
    (None, ('open_preferences',)),
)

HINT_WIDTH: int = 8


def action_lines(entry: LocalizationEntry) -> list[tuple[str, bool]]:
    """(text, is_section_title) pairs for every action, in panel order"""
    lines: list[tuple[str, bool]] = []
    for section_title, action_ids in SECTIONS:
        if section_title is not None:
            lines.append((entry.action_labels[section_title], True))
        for action_id in action_ids:
            lines.append((f'{KEY_HINTS[action_id].ljust(HINT_WIDTH)}{entry.action_labels[action_id]}', False))
    return lines


def draw(widget: Widget, ui_state: UIState, base_config: BaseConfig) -> None:
    draw_widget(widget, ui_state, base_config)
    secondary = convert_color_number_to_curses_pair(base_config.SECONDARY_PAIR_NUMBER)

    for i, (text, is_section_title) in enumerate(widget.draw_data['lines']):
        if i >= widget.dimensions.height - 2:  # Keep inside border
            break
        safe_addstr(widget, 1 + i, 2, text[:widget.dimensions.width - 4], secondary if is_section_title else 0)


def build(
        stdscr: CursesWindowType,
        config: Config,
        config_loader: ConfigLoader,
        _log_messages: LogMessages
) -> Widget:
    # Labels follow the calendar's language; its config problems are reported by the calendar widget
    calendar_config = config_loader.load_widget_config(LogMessages(), 'calendar')
    preferences = Preferences.from_config(calendar_config, LogMessages(), config_loader)

    widget = Widget(
        config.name, config.title, config, draw, config.dimensions, stdscr,
        mouse_click_func=None,
        keyboard_func=None
    )
    widget.draw_data = {'lines': action_lines(lookup(preferences.locale))}
    return widget
