from __future__ import annotations
import typing

from nepcal.core.base import Config, ConfigLoader, InvalidCalendarInput, LogMessages
from nepcal.core.localization import Locale, WeekStart

LANGUAGE_ENV: str = 'NEPCAL_LANGUAGE'
WEEK_START_ENV: str = 'NEPCAL_WEEK_START'


class Preferences:
    def __init__(self, locale: Locale = Locale.EN, week_start: WeekStart = WeekStart.SUNDAY) -> None:
        self.locale: Locale = locale
        self.week_start: WeekStart = week_start

    def __repr__(self) -> str:
        return f'Preferences(locale={self.locale.value!r}, week_start={self.week_start.value})'

    @classmethod
    def from_config(
            cls,
            config: Config,
            log_messages: LogMessages,
            config_loader: ConfigLoader | None = None
    ) -> Preferences:
        """Read language / week_start from a widget config; preferences.env overrides win"""
        language: typing.Any = config.language
        week_start: typing.Any = config.week_start
        if config_loader is not None:
            language = config_loader.get_env(LANGUAGE_ENV, language)
            week_start = config_loader.get_env(WEEK_START_ENV, week_start)

        preferences = cls()

        if language is None:
            log_messages.warning(
                f'Configuration for language is missing ("{config.file_name}" widget, falling back to "en")'
            )
        else:
            try:
                preferences.locale = Locale.coerce(str(language).strip().lower())
            except InvalidCalendarInput as e:
                log_messages.error(f'{e} ("{config.file_name}" widget)')

        if week_start is None:
            log_messages.warning(
                f'Configuration for week_start is missing ("{config.file_name}" widget, falling back to 0 / Sunday)'
            )
        elif isinstance(week_start, bool):
            log_messages.error(f'Configuration for week_start is invalid (not 0 / 1, "{config.file_name}" widget)')
        else:
            try:
                preferences.week_start = WeekStart.coerce(week_start)
            except InvalidCalendarInput as e:
                log_messages.error(f'{e} ("{config.file_name}" widget)')

        return preferences
