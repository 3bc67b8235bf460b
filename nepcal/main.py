import locale
import os
import platform
import shutil
import subprocess
from pathlib import Path

import nepcal.core.base as base
import nepcal.widgets as widgets_pkg


def main_curses(stdscr: base.CursesWindowType, config_loader: base.ConfigLoader) -> None:
    # Logs (e.g. Warnings)
    log_messages: base.LogMessages = base.LogMessages()

    config_loader.reload_env()  # picks up preferences.env changes after a restart

    widget_loader: base.WidgetLoader = base.WidgetLoader()
    widget_names: list[str] = widget_loader.discover_builtin_widgets(widgets_pkg)

    # Scan configs
    config_scanner: base.ConfigScanner = base.ConfigScanner(config_loader)
    config_scan_results: base.LogMessages | bool = config_scanner.scan_config(widget_names)

    if config_scan_results is not True:
        raise base.ConfigScanFoundError(config_scan_results)  # type: ignore[arg-type]

    base_config: base.BaseConfig = config_loader.load_base_config(log_messages)
    ui_state: base.UIState = base.UIState()

    base.init_curses_setup(stdscr, base_config)

    widget_dict = widget_loader.build_widgets(
        stdscr, config_loader, log_messages,
        widget_loader.load_builtin_widget_modules(widget_names)
    )
    widget_list = [widget for widget in widget_dict.values() if widget.config.enabled]
    if not widget_list:
        log_messages.error('No widget is enabled')
        raise base.ConfigSpecificException(log_messages)

    # Keys go to the configured widget without a click first
    if base_config.focus_widget is not None:
        ui_state.highlighted = widget_dict.get(base_config.focus_widget)

    while True:
        try:
            min_height = max(widget.dimensions.height + widget.dimensions.y for widget in widget_list)
            min_width = max(widget.dimensions.width + widget.dimensions.x for widget in widget_list)
            base.validate_terminal_size(stdscr, min_height, min_width)

            key: int = stdscr.getch()  # Keypresses

            base.handle_mouse_input(ui_state, key, widget_dict)

            base.handle_key_input(ui_state, base_config, key, log_messages)

            for widget in widget_list:
                widget.draw(ui_state, base_config)
                widget.noutrefresh()
            base.update_screen()
        except (
                base.RestartException,
                base.PreferencesRequested,
                base.ConfigSpecificException,
                base.StopException,
                base.TerminalTooSmall
        ):
            base.cleanup_curses_setup()
            raise  # re-raise so wrapper(main_curses) exits and outer loop stops
        except Exception as e:
            base.cleanup_curses_setup()
            raise base.UnknownException(log_messages, str(e)) from e


def open_in_editor(path: Path) -> None:
    editor = os.environ.get('VISUAL') or os.environ.get('EDITOR')
    if not editor:
        editor = 'notepad' if platform.system() == 'Windows' else 'vi'
    if shutil.which(editor.split()[0]) is None:
        print(f'⚠️ Editor "{editor}" not found. Edit the preferences manually: {path}')
        input('Press Enter to continue...')
        return
    subprocess.call([*editor.split(), str(path)])


def main_entry_point(config_dir: Path | None = None) -> None:
    locale.setlocale(locale.LC_ALL, '')  # curses needs it for Devanagari output

    # One loader for every restart; it remembers the environment from before preferences.env
    config_loader: base.ConfigLoader = base.ConfigLoader(config_dir)

    while True:
        try:
            base.curses_wrapper(lambda stdscr: main_curses(stdscr, config_loader))
        except base.RestartException:
            # wrapper() has already cleaned up curses at this point
            continue  # Restart main
        except base.PreferencesRequested as e:
            open_in_editor(e.path)
            continue  # Restart with the edited preferences
        except base.ConfigScanFoundError as e:
            e.log_messages.print_log_messages(heading='Config errors & warnings (found by ConfigScanner):\n')
            break
        except base.ConfigFileNotFoundError as e:
            print(f'⚠️ Config File Not Found Error: {e}')
            print(f'\nPerhaps you haven\'t initialized the configuration. Please run: nepcal init')
            break
        except base.ConfigSpecificException as e:
            e.log_messages.print_log_messages(heading='Config errors & warnings (found at runtime):\n')
            break
        except base.StopException as e:
            e.log_messages.print_log_messages(heading='Config warnings:\n')
            break
        except KeyboardInterrupt:
            break
        except base.TerminalTooSmall as e:
            print(e)
        except base.WidgetSourceFileException as e:
            e.log_messages.print_log_messages(heading='Widget errors (found at runtime):\n')
        except base.CursesError:
            break  # Ignore; Doesn't happen on Py3.13, but does on Py3.12
        except base.UnknownException as e:
            if not e.log_messages.is_empty():
                e.log_messages.print_log_messages(heading='Config errors & warnings:\n')
                print('-> which results in:\n')
            print(
                f'⚠️ Unknown errors:\n'
                f'{e.error_message}\n'
            )
            raise
        break  # Exit if the end of the loop is reached (User exit)


if __name__ == '__main__':
    main_entry_point()
