import argparse
import sys
import shutil
from pathlib import Path
from . import main as app_main

from importlib.resources import files, as_file

from nepcal.core.base import ConfigFileNotFoundError, ConfigLoader, LogMessages, YAMLParseException
from nepcal.core.bs_engine import default_engine
from nepcal.core.grid import generate, render_markdown, render_text
from nepcal.core.localization import Locale, WeekStart
from nepcal.core.preferences import Preferences


def init_command(args: argparse.Namespace) -> None:
    """
    Handles the 'nepcal init' subcommand.
    """
    try:
        # 'nepcal.config' maps to the 'nepcal/config/' directory
        source_config_dir_traversable = files('nepcal.config')
    except ModuleNotFoundError:
        print('Error: Could not find the package config files. Is \'nepcal\' installed correctly?', file=sys.stderr)
        sys.exit(1)

    dest_config_dir: Path = args.config_dir

    try:
        dest_config_dir.mkdir(parents=True, exist_ok=True)
        print(f'Created config directory: {dest_config_dir}')
    except OSError as e:
        print(f'Error: Could not create directory {dest_config_dir}. {e}', file=sys.stderr)
        sys.exit(1)

    # 'as_file' gives a concrete Path on the filesystem
    with as_file(source_config_dir_traversable) as source_config_path:
        print(f'Copying YAML & ENV files from package config to {dest_config_dir}...')

        source_files = sorted(source_config_path.rglob('*.yaml')) + sorted(source_config_path.rglob('*.env'))
        if not source_files:
            print('Warning: No YAML & ENV files found in the package config.', file=sys.stderr)
            return

        for source_file in source_files:
            relative_path = source_file.relative_to(source_config_path)
            dest_file = dest_config_dir / relative_path
            dest_file.parent.mkdir(parents=True, exist_ok=True)

            if not dest_file.exists() or args.force:
                try:
                    shutil.copy2(source_file, dest_file)
                    print(f'  Copied: {relative_path}')
                except OSError as e:
                    print(f'  Error copying {relative_path}: {e}', file=sys.stderr)
            else:
                print(f'  Skipped (exists): {relative_path}')

    print('\nInitialization complete.')
    print(f'Your configuration files are in: {dest_config_dir}')


def load_saved_preferences(config_dir: Path) -> Preferences:
    """Preferences from the installed calendar config, or the defaults when there is none"""
    config_loader = ConfigLoader(config_dir)
    log_messages = LogMessages()
    try:
        config = config_loader.load_widget_config(log_messages, 'calendar')
    except (ConfigFileNotFoundError, YAMLParseException):
        return Preferences()
    return Preferences.from_config(config, log_messages, config_loader)


def month_argument(value: str) -> int:
    try:
        month = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f'invalid month: {value!r}') from None
    if not 1 <= month <= 12:
        raise argparse.ArgumentTypeError(f'month must be between 1 (Baisakh) and 12 (Chaitra), got {month}')
    return month


def show_command(args: argparse.Namespace) -> None:
    """
    Handles the 'nepcal show' subcommand: print one month to stdout.
    """
    preferences = load_saved_preferences(args.config_dir)
    locale = Locale(args.language) if args.language else preferences.locale
    week_start = WeekStart(args.week_start) if args.week_start is not None else preferences.week_start

    today_year, today_month, today_day = default_engine.today()
    year = args.year if args.year is not None else today_year
    month = args.month - 1 if args.month is not None else today_month

    try:
        view = generate(year, month, locale, week_start, today_year, today_month, today_day, engine=default_engine)
    except (ValueError, OverflowError) as e:
        print(f'Error: {e}', file=sys.stderr)
        sys.exit(1)

    if args.format == 'markdown':
        print(render_markdown(view), end='')
    else:
        print('\n'.join(render_text(view)))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Bikram Sambat (Nepali) calendar for the terminal.')
    parser.add_argument(
        '--config-dir',
        type=Path,
        default=Path.home() / '.config' / 'nepcal',
        help='Configuration directory (default: ~/.config/nepcal).'
    )
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    init_parser = subparsers.add_parser('init', help='Initialize user configuration files.')
    init_parser.add_argument(
        '-f', '--force',
        action='store_true',
        help='Overwrite existing configuration files.'
    )
    init_parser.set_defaults(func=init_command)

    show_parser = subparsers.add_parser('show', help='Print a month and exit.')
    show_parser.add_argument('--year', type=int, help='Bikram Sambat year (default: current year).')
    show_parser.add_argument('--month', type=month_argument, help='Month 1-12, 1 = Baisakh (default: current month).')
    show_parser.add_argument('--language', choices=[locale.value for locale in Locale], help='Labels and numerals.')
    show_parser.add_argument('--week-start', type=int, choices=[0, 1], help='0 = Sunday, 1 = Monday.')
    show_parser.add_argument('--format', choices=['text', 'markdown'], default='text', help='Output format.')
    show_parser.set_defaults(func=show_command)

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    Main entry point for the 'nepcal' command.
    """
    args = build_parser().parse_args(argv)

    if hasattr(args, 'func'):
        args.func(args)
    else:
        try:
            app_main.main_entry_point(args.config_dir)
        except KeyboardInterrupt:
            print('\nExiting.')
            sys.exit(0)


if __name__ == '__main__':
    main()
