from __future__ import annotations  # allows forward references in type hints
from enum import Enum, IntEnum
from pathlib import Path
import yaml
import yaml.parser
from dotenv import dotenv_values, load_dotenv
import os
import curses
import _curses
import typing
import pkgutil
import types
import importlib


class Dimensions:
    def __init__(self, height: int, width: int, y: int, x: int) -> None:
        self.height: int = height
        self.width: int = width
        self.y: int = y
        self.x: int = x

    def formatted(self) -> list[int]:
        return [self.height, self.width, self.y, self.x]


class Widget:
    DrawFunction = typing.Callable[['Widget', 'UIState', 'BaseConfig'], None]
    MouseClickFunction = typing.Callable[['Widget', int, int, int, 'UIState'], None]
    KeyBoardFunction = typing.Callable[['Widget', int, 'UIState', 'BaseConfig'], None]

    def __init__(
            self,
            name: str | None,
            title: str,
            config: Config,
            draw_func: DrawFunction,
            dimensions: Dimensions,
            stdscr: CursesWindowType,
            mouse_click_func: MouseClickFunction | None,
            keyboard_func: KeyBoardFunction | None
    ) -> None:
        self.name = name
        self.title = title
        self.config = config
        self._mouse_click_func = mouse_click_func
        self._keyboard_func = keyboard_func
        self._draw_func = draw_func
        self.dimensions = dimensions
        try:
            self.win: typing.Any = stdscr.subwin(*self.dimensions.formatted())
        except curses.error:
            self.win = None
        self.draw_data: dict[str, typing.Any] = {}  # data used for drawing
        self.internal_data: dict[str, typing.Any] = {}  # internal data stored by widgets

    def noutrefresh(self) -> None:
        self.win.noutrefresh()

    def draw(self, ui_state: UIState, base_config: BaseConfig) -> None:
        if self.config.enabled:
            self._draw_func(self, ui_state, base_config)

    def mouse_action(self, *args: typing.Any, **kwargs: typing.Any) -> None:
        if self._mouse_click_func:
            self._mouse_click_func(*args, **kwargs)

    def keyboard_action(self, *args: typing.Any, **kwargs: typing.Any) -> None:
        if self._keyboard_func:
            self._keyboard_func(*args, **kwargs)


class UIState:
    def __init__(self) -> None:
        self.previously_highlighted: Widget | None = None
        self.highlighted: Widget | None = None


class RestartException(Exception):
    """Raised to signal that the curses UI should restart"""


class StopException(Exception):
    """Raised to signal that the curses UI should stop"""
    def __init__(self, log_messages: LogMessages) -> None:
        self.log_messages: LogMessages = log_messages


class PreferencesRequested(Exception):
    """Raised to leave curses and open a preferences file in the user's editor"""
    def __init__(self, path: Path) -> None:
        self.path: Path = path
        super().__init__(path)


class YAMLParseException(Exception):
    """Raised to signal that there was an error parsing a YAML file"""


class InvalidCalendarInput(ValueError):
    """Raised when a calendar operation is called with an out-of-range month, locale or week start"""


class ClipboardError(Exception):
    """Raised when the clipboard tool exists but failed"""


class ClipboardUnavailableError(ClipboardError):
    """Raised when no clipboard tool could be found on this system"""


class TerminalTooSmall(Exception):
    def __init__(self, height: int, width: int, min_height: int, min_width: int) -> None:
        """Raised to signal that the terminal is too small"""
        self.height = height
        self.width = width
        self.min_height = min_height
        self.min_width = min_width
        super().__init__(height, width)

    def __repr__(self) -> str:
        return self.__str__()

    def __str__(self) -> str:
        return \
            f'\n' \
            f'⚠️ Terminal too small. Minimum size: {self.min_width}x{self.min_height}\n' \
            f'(Width x Height)\n' \
            f'Current size: {self.width}x{self.height}\n' \
            f'Either decrease your font size, increase the size of the terminal, or disable widgets.\n'


class ConfigScanFoundError(Exception):
    def __init__(self, log_messages: LogMessages) -> None:
        self.log_messages: LogMessages = log_messages
        super().__init__(log_messages)


class ConfigFileNotFoundError(Exception):
    def __init__(self, error_details: str) -> None:
        self.error_details: str = error_details
        super().__init__(error_details)


class ConfigSpecificException(Exception):
    def __init__(self, log_messages: LogMessages) -> None:
        self.log_messages: LogMessages = log_messages
        super().__init__(log_messages)


class WidgetSourceFileException(Exception):
    def __init__(self, log_messages: LogMessages) -> None:
        self.log_messages: LogMessages = log_messages
        super().__init__(log_messages)


class UnknownException(Exception):
    def __init__(self, log_messages: LogMessages, error_message: str) -> None:
        self.log_messages: LogMessages = log_messages
        self.error_message = error_message
        super().__init__(log_messages, error_message)


class LogLevels(Enum):
    UNKNOWN = (0, '? Unknown')
    INFO = (1, 'ℹ️ Info')
    DEBUG = (2, '🐞 Debug')
    WARNING = (3, '⚠️ Warnings')
    ERROR = (4, '⚠️ Errors')

    @property
    def key(self) -> int:
        return self.value[0]

    @property
    def label(self) -> str:
        return self.value[1]

    @classmethod
    def from_key(cls, key: int) -> LogLevels:
        """Return the LogLevels member that matches the key"""
        for level in cls:
            if level.key == key:
                return level
        return LogLevels.UNKNOWN


class LogMessage:
    def __init__(self, message: str, level: int) -> None:
        self.message: str = message
        self.level: int = level

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return self.message

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LogMessage):
            return NotImplemented
        return (self.message, self.level) == (other.message, other.level)

    def is_error(self) -> bool:
        return self.level == LogLevels.ERROR.key


class LogMessages:
    def __init__(self, log_messages: list[LogMessage] | None = None) -> None:
        if log_messages is None:
            self.log_messages: list[LogMessage] = []
        else:
            self.log_messages = log_messages

    def __add__(self, other: LogMessages) -> LogMessages:
        return LogMessages(self.log_messages + other.log_messages)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LogMessages):
            return NotImplemented
        return self.log_messages == other.log_messages

    def __len__(self) -> int:
        return len(self.log_messages)

    def add_log_message(self, message: LogMessage) -> None:
        self.log_messages.append(message)

    def warning(self, message: str) -> None:
        self.add_log_message(LogMessage(message, LogLevels.WARNING.key))

    def error(self, message: str) -> None:
        self.add_log_message(LogMessage(message, LogLevels.ERROR.key))

    def print_log_messages(self, heading: str) -> None:
        if not self.log_messages:
            return

        print(heading, end='')
        log_messages_by_level: dict[int, list[LogMessage]] = {}
        for message in self.log_messages:
            log_messages_by_level.setdefault(message.level, []).append(message)

        for level in sorted(log_messages_by_level.keys()):
            print(f'\n{LogLevels.from_key(level).label}:')
            for message in log_messages_by_level[level]:
                print(message)

    def contains_error(self) -> bool:
        return any(message.is_error() for message in self.log_messages)

    def is_empty(self) -> bool:
        return not self.log_messages


class Config:
    def __init__(
            self,
            file_name: str,
            log_messages: LogMessages,
            name: str | None = None,
            title: str | None = None,
            enabled: bool | None = None,
            height: int | None = None,
            width: int | None = None,
            y: int | None = None,
            x: int | None = None,
            **kwargs: typing.Any
    ) -> None:
        fields: list[tuple[str, typing.Any, type]] = [
            ('name', name, str),
            ('title', title, str),
            ('enabled', enabled, bool),
            ('height', height, int),
            ('width', width, int),
            ('y', y, int),
            ('x', x, int),
        ]

        for field_name, value, expected_type in fields:
            if value is None or not isinstance(value, expected_type):
                log_messages.error(f'Configuration for {field_name} is missing / incorrect ("{file_name}" widget)')

        self.file_name: str = file_name
        self.name: str = typing.cast(str, name)
        self.title: str = typing.cast(str, title)
        self.enabled: bool = typing.cast(bool, enabled)
        self.dimensions: Dimensions = Dimensions(height=height, width=width, y=y, x=x)  # type: ignore[arg-type]

        for key, value in kwargs.items():
            setattr(self, key, value)

    def __getattr__(self, name: str) -> typing.Any:  # only gets called if key is not found
        return None  # signal to code editor that any key may exist


class RGBColor:
    def __init__(self, r: int, g: int, b: int) -> None:
        self.r = r
        self.g = g
        self.b = b

    def rgb_to_0_1000(self) -> tuple[int, int, int]:
        return (
            round(self.r * 1000 / 255),
            round(self.g * 1000 / 255),
            round(self.b * 1000 / 255),
        )

    @staticmethod
    def add_rgb_color_from_dict(color: dict[str, typing.Any]) -> RGBColor:
        # Make sure every value is an int (else raise an error)
        return RGBColor(r=int(color['r']), g=int(color['g']), b=int(color['b']))


class BaseStandardFallBackConfig:
    def __init__(self) -> None:
        # Colors borrowed from the Nepali flag: crimson and its deep blue border
        self.background_color: RGBColor = RGBColor(r=0, g=24, b=72)
        self.foreground_color: RGBColor = RGBColor(r=236, g=236, b=240)
        self.primary_color: RGBColor = RGBColor(r=220, g=20, b=60)
        self.secondary_color: RGBColor = RGBColor(r=100, g=149, b=237)
        self.error_color: RGBColor = RGBColor(r=255, g=0, b=0)

        self.use_standard_terminal_background: bool = True

        self.quit_key: str = 'q'
        self.reload_key: str = 'r'
        self.focus_widget: str | None = 'calendar'


class BaseConfig:
    COLOR_FIELDS: tuple[str, ...] = (
        'background_color', 'foreground_color', 'primary_color', 'secondary_color', 'error_color'
    )

    def __init__(
            self,
            log_messages: LogMessages,
            use_standard_terminal_background: bool | None = None,
            quit_key: str | None = None,
            reload_key: str | None = None,
            focus_widget: str | None = None,
            **kwargs: typing.Any
    ) -> None:
        fallback: BaseStandardFallBackConfig = BaseStandardFallBackConfig()

        self.background_color: RGBColor = fallback.background_color
        self.foreground_color: RGBColor = fallback.foreground_color
        self.primary_color: RGBColor = fallback.primary_color
        self.secondary_color: RGBColor = fallback.secondary_color
        self.error_color: RGBColor = fallback.error_color
        self.use_standard_terminal_background: bool = fallback.use_standard_terminal_background
        self.quit_key: str = fallback.quit_key
        self.reload_key: str = fallback.reload_key
        self.focus_widget: str | None = fallback.focus_widget

        for color_name in self.COLOR_FIELDS:
            color = kwargs.pop(color_name, None)
            if color is None:
                log_messages.warning(
                    f'Configuration for {color_name} is missing (base.yaml, falling back to standard config)'
                )
                continue
            try:
                setattr(self, color_name, RGBColor.add_rgb_color_from_dict(color))
            except KeyError as e:
                log_messages.error(f'Configuration for {color_name} is missing for {e}')
            except (TypeError, ValueError) as e:
                log_messages.error(f'Configuration for {color_name} is invalid ({e})')

        if use_standard_terminal_background is not None:
            if not isinstance(use_standard_terminal_background, bool):
                log_messages.error('Configuration for use_standard_terminal_background is invalid (not True / False)')
            self.use_standard_terminal_background = bool(use_standard_terminal_background)
        else:
            log_messages.warning(
                'Configuration for use_standard_terminal_background is missing (base.yaml,'
                ' falling back to standard config)'
            )

        if self.use_standard_terminal_background:
            self.BACKGROUND_NUMBER: int = -1
        else:
            self.BACKGROUND_NUMBER = 1

        # curses color number -> (pair number, color)
        self.base_colors: dict[int, tuple[int, RGBColor | int]] = {
            2: (1, self.foreground_color),
            15: (2, self.primary_color),
            13: (3, self.secondary_color),
            10: (4, self.error_color),
        }

        self.BACKGROUND_FOREGROUND_PAIR_NUMBER: int = 1
        self.PRIMARY_PAIR_NUMBER: int = 2
        self.SECONDARY_PAIR_NUMBER: int = 3
        self.ERROR_PAIR_NUMBER: int = 4

        self.quit_key = self._validate_key(log_messages, 'quit_key', quit_key, self.quit_key)
        self.reload_key = self._validate_key(log_messages, 'reload_key', reload_key, self.reload_key)

        if focus_widget is not None:
            if not isinstance(focus_widget, str):
                log_messages.error('Configuration for focus_widget is invalid (not a widget name)')
            else:
                self.focus_widget = focus_widget

        for key in kwargs:
            log_messages.warning(f'Configuration for key "{key}" is not expected (base.yaml)')

    @staticmethod
    def _validate_key(log_messages: LogMessages, field_name: str, value: typing.Any, fallback: str) -> str:
        if value is None:
            log_messages.warning(f'Configuration for {field_name} is missing (base.yaml, falling back to standard config)')
            return fallback
        value = str(value)
        if len(value) != 1:
            log_messages.error(f'Configuration for {field_name} value wrong length (not 1)')
            return fallback
        if not (value.isalpha() or value.isdigit()):
            log_messages.error(f'Configuration for {field_name} value not alphabetic or numeric')
            return fallback
        return value


def draw_colored_border(win: typing.Any, color_pair: int) -> None:
    win.attron(curses.color_pair(color_pair))
    win.border()
    win.attroff(curses.color_pair(color_pair))


def draw_widget(
        widget: Widget,
        ui_state: UIState,
        base_config: BaseConfig,
        title: str | None = None,
        error: bool = False
) -> None:
    if not title:
        title = widget.title
    title = title[:widget.dimensions.width - 4]
    widget.win.erase()  # Instead of clear(), prevents flickering
    if widget == ui_state.highlighted:
        draw_colored_border(widget.win, base_config.PRIMARY_PAIR_NUMBER)
    elif error:
        draw_colored_border(widget.win, base_config.ERROR_PAIR_NUMBER)
    else:
        widget.win.border()
    safe_addstr(widget, 0, 2, f' {title} ')


def convert_color_number_to_curses_pair(color_number: int) -> int:
    return curses.color_pair(color_number)


def safe_addstr(widget: Widget, y: int, x: int, text: str, color: int = 0) -> None:
    max_y, max_x = widget.win.getmaxyx()
    if y < 0 or y >= max_y:
        return
    safe_text = text[:max_x - x - 1]
    try:
        widget.win.addstr(y, x, safe_text, color)
    except curses.error:
        pass  # Writing into the bottom-right cell raises even though the text is drawn


def init_colors(base_config: BaseConfig) -> None:
    curses.start_color()
    if base_config.use_standard_terminal_background:
        curses.use_default_colors()
    if curses.can_change_color():
        if not base_config.use_standard_terminal_background:
            curses.init_color(
                base_config.BACKGROUND_NUMBER,  # type: ignore[call-arg, unused-ignore]
                *base_config.background_color.rgb_to_0_1000()  # type: ignore[call-arg, unused-ignore]
            )

        for color_number, color in base_config.base_colors.items():
            curses.init_color(
                color_number,  # type: ignore[call-arg, unused-ignore]
                *color[1].rgb_to_0_1000()  # type: ignore[union-attr]
            )
    else:
        base_config.base_colors = {
            2: (1, curses.COLOR_WHITE),
            15: (2, curses.COLOR_RED),
            13: (3, curses.COLOR_CYAN),
            10: (4, curses.COLOR_RED)
        }

    for color_number, color in base_config.base_colors.items():
        curses.init_pair(
            color[0],
            color_number,
            base_config.BACKGROUND_NUMBER
        )


def init_curses_setup(stdscr: CursesWindowType, base_config: BaseConfig) -> None:
    curses.mousemask(curses.ALL_MOUSE_EVENTS)
    curses.curs_set(0)
    curses.mouseinterval(0)
    stdscr.keypad(True)  # Shift + arrow keys
    stdscr.move(0, 0)
    curses.set_escdelay(25)
    init_colors(base_config)
    stdscr.bkgd(' ', curses.color_pair(1))  # Activate standard color
    stdscr.clear()
    stdscr.refresh()
    stdscr.timeout(100)


def cleanup_curses_setup() -> None:
    try:
        curses.endwin()
    except CursesError:
        pass  # Ignore; Doesn't happen on Py3.13, but does on Py3.12


def validate_terminal_size(stdscr: typing.Any, min_height: int, min_width: int) -> None:
    height, width = stdscr.getmaxyx()

    if height < min_height or width < min_width:
        raise TerminalTooSmall(height, width, min_height, min_width)


class WidgetLoader:
    @staticmethod
    def discover_builtin_widgets(widgets_pkg: types.ModuleType) -> list[str]:
        """Discover built-in widgets in nepcal/widgets/*_widget.py"""
        widget_names: list[str] = []

        for module in pkgutil.iter_modules(widgets_pkg.__path__):
            # Only care about modules ending in `_widget`
            if module.name.endswith('_widget'):
                widget_names.append(module.name.replace('_widget', ''))

        return sorted(widget_names)

    @staticmethod
    def load_builtin_widget_modules(widget_names: list[str]) -> dict[str, types.ModuleType]:
        modules: dict[str, types.ModuleType] = {}

        for name in widget_names:
            modules[name] = importlib.import_module(f'nepcal.widgets.{name}_widget')

        return modules

    @staticmethod
    def build_widgets(
            stdscr: CursesWindowType,
            config_loader: ConfigLoader,
            log_messages: LogMessages,
            modules: dict[str, types.ModuleType]
    ) -> dict[str, Widget]:
        widgets: dict[str, Widget] = {}

        for name, module in modules.items():
            widget_config = config_loader.load_widget_config(log_messages, name)
            try:
                widgets[name] = module.build(stdscr, widget_config, config_loader, log_messages)
            except (ConfigSpecificException, InvalidCalendarInput):
                raise
            except Exception as e:
                raise WidgetSourceFileException(LogMessages([LogMessage(str(e), LogLevels.ERROR.key)]))

        return widgets


class ConfigLoader:
    ENV_FILE_NAME: str = 'preferences.env'

    def __init__(self, config_dir: Path | None = None) -> None:
        self.CONFIG_DIR = config_dir if config_dir is not None else Path.home() / '.config' / 'nepcal'
        self.PER_WIDGET_CONFIG_DIR = self.CONFIG_DIR / 'widgets'
        # Environment values from before preferences.env was applied; None = unset
        self._environment_before_env_file: dict[str, str | None] = {}
        self._remember_environment()
        load_dotenv(self.env_file_path())

    def env_file_path(self) -> Path:
        return self.CONFIG_DIR / self.ENV_FILE_NAME

    def _remember_environment(self) -> None:
        for key in dotenv_values(self.env_file_path()):
            self._environment_before_env_file.setdefault(key, os.environ.get(key))

    def reload_env(self) -> None:
        """Apply the current preferences.env; keys removed from it get their earlier values back"""
        for key, value in self._environment_before_env_file.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
        self._remember_environment()
        load_dotenv(self.env_file_path(), override=True)

    @staticmethod
    def get_env(name: str, default: typing.Any | None = None) -> str | None:
        return os.getenv(name, default)

    @staticmethod
    def load_yaml(path: Path) -> dict[str, typing.Any]:
        with open(path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f) or {}

    def widget_config_path(self, widget_name: str) -> Path:
        return self.PER_WIDGET_CONFIG_DIR / f'{widget_name}.yaml'

    def load_base_config(self, log_messages: LogMessages) -> BaseConfig:
        base_path = self.CONFIG_DIR / 'base.yaml'
        if not base_path.exists():
            raise ConfigFileNotFoundError(f'Base config "{base_path}" not found')
        try:
            pure_yaml: dict[str, typing.Any] = self.load_yaml(base_path)
        except yaml.YAMLError:
            raise YAMLParseException(f'Base config "{base_path}" not valid YAML')

        return BaseConfig(log_messages=log_messages, **pure_yaml)

    def load_widget_config(self, log_messages: LogMessages, widget_name: str) -> Config:
        path = self.widget_config_path(widget_name)
        if not path.exists():
            raise ConfigFileNotFoundError(f'Config for widget "{widget_name}" not found')
        try:
            pure_yaml: dict[str, typing.Any] = self.load_yaml(path)
        except yaml.YAMLError:
            raise YAMLParseException(f'Config for widget "{widget_name}" not valid YAML')

        return Config(file_name=widget_name, log_messages=log_messages, **pure_yaml)


class ConfigScanner:
    def __init__(self, config_loader: ConfigLoader) -> None:
        self.config_loader = config_loader

    def scan_config(self, widget_names: list[str]) -> LogMessages | typing.Literal[True]:
        """Scan config, either returns log messages or 'True' representing that no errors were found"""
        final_log: LogMessages = LogMessages()

        current_log: LogMessages = LogMessages()
        try:
            self.config_loader.load_base_config(current_log)
            if current_log.contains_error():
                final_log += current_log
        except YAMLParseException as e:
            final_log += LogMessages([LogMessage(str(e), LogLevels.ERROR.key)])

        for widget_name in widget_names:
            current_log = LogMessages()
            try:
                self.config_loader.load_widget_config(current_log, widget_name)
                if current_log.contains_error():
                    final_log += current_log
            except YAMLParseException as e:
                final_log += LogMessages([LogMessage(str(e), LogLevels.ERROR.key)])

        if final_log.contains_error():
            return final_log
        return True


def switch_windows(
        ui_state: UIState,
        mx: int,
        my: int,
        widgets: dict[str, Widget]
) -> None:
    # Find which widget was clicked
    ui_state.previously_highlighted = ui_state.highlighted
    ui_state.highlighted = None
    for widget in widgets.values():
        if not widget.config.enabled:
            continue
        y1 = widget.dimensions.y
        y2 = y1 + widget.dimensions.height
        x1 = widget.dimensions.x
        x2 = x1 + widget.dimensions.width

        if y1 <= my <= y2 and x1 <= mx <= x2:
            ui_state.highlighted = widget
            break


def handle_mouse_input(
        ui_state: UIState,
        key: int,
        widgets: dict[str, Widget]
) -> None:
    if key == CursesKeys.MOUSE:
        try:
            _, mx, my, _, b_state = curses.getmouse()
            if b_state & CursesKeys.BUTTON1_PRESSED:
                switch_windows(ui_state, mx, my, widgets)
                if (highlighted_widget := ui_state.highlighted) is not None:
                    highlighted_widget.mouse_action(highlighted_widget, mx, my, b_state, ui_state)
        except curses.error:
            # Ignore invalid mouse events (like scroll in some terminals)
            return


def handle_key_input(
        ui_state: UIState,
        base_config: BaseConfig,
        key: int,
        log_messages: LogMessages
) -> None:
    if key == -1:  # stdscr.timeout() expired
        return

    if key == CursesKeys.ESCAPE:
        ui_state.previously_highlighted = ui_state.highlighted
        ui_state.highlighted = None
        return

    if key == ord(base_config.quit_key):
        raise StopException(log_messages)
    if key == ord(base_config.reload_key):  # Reload widgets & config
        raise RestartException

    if (highlighted_widget := ui_state.highlighted) is not None:
        highlighted_widget.keyboard_action(highlighted_widget, key, ui_state, base_config)


def update_screen() -> None:
    curses.doupdate()


def curses_wrapper(func: typing.Callable[[CursesWindowType], None]) -> None:
    curses.wrapper(func)


# Constants

CursesWindowType = _curses.window  # Type of stdscr

CursesBold = curses.A_BOLD
CursesError = _curses.error


class CursesKeys(IntEnum):
    UP = curses.KEY_UP
    DOWN = curses.KEY_DOWN
    LEFT = curses.KEY_LEFT
    RIGHT = curses.KEY_RIGHT
    SHIFT_LEFT = curses.KEY_SLEFT
    SHIFT_RIGHT = curses.KEY_SRIGHT
    ESCAPE = 27
    MOUSE = curses.KEY_MOUSE
    BUTTON1_PRESSED = curses.BUTTON1_PRESSED
