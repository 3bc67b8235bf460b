"""Month names, weekday names, action labels and numerals for each supported language."""
from __future__ import annotations
from enum import Enum, IntEnum
import types
import typing

from nepcal.core.base import InvalidCalendarInput


class Locale(Enum):
    EN = 'en'
    NP = 'np'

    @classmethod
    def coerce(cls, value: Locale | str) -> Locale:
        """Accept either a member or its config string ("en" / "np")"""
        if isinstance(value, Locale):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidCalendarInput(f'Unsupported language {value!r} (expected "en" or "np")') from None


class WeekStart(IntEnum):
    SUNDAY = 0
    MONDAY = 1

    @classmethod
    def coerce(cls, value: WeekStart | int | str) -> WeekStart:
        if isinstance(value, WeekStart):
            return value
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            raise InvalidCalendarInput(f'Unsupported week start {value!r} (expected 0 or 1)') from None


# Action ids, in the order the action panel lists them
ACTION_IDS: tuple[str, ...] = (
    'go_to_today',
    'copy_calendar',
    'navigate',
    'prev_month',
    'next_month',
    'prev_year',
    'next_year',
    'open_preferences',
)


class LocalizationEntry:
    def __init__(
            self,
            month_names: tuple[str, ...],
            weekday_short_names: tuple[str, ...],
            action_labels: dict[str, str],
            digit_map: dict[str, str] | None = None
    ) -> None:
        if len(month_names) != 12 or len(weekday_short_names) != 7:
            raise ValueError('A localization needs 12 month names and 7 weekday names')
        self.month_names: tuple[str, ...] = month_names
        self.weekday_short_names: tuple[str, ...] = weekday_short_names  # Sunday = 0
        self.action_labels: typing.Mapping[str, str] = types.MappingProxyType(dict(action_labels))
        self.digit_map: typing.Mapping[str, str] | None = (
            types.MappingProxyType(dict(digit_map)) if digit_map is not None else None
        )

    def month_name(self, month: int) -> str:
        return self.month_names[month]


_ENGLISH: LocalizationEntry = LocalizationEntry(
    month_names=(
        'Baisakh', 'Jestha', 'Ashadh', 'Shrawan', 'Bhadra', 'Ashwin',
        'Kartik', 'Mangsir', 'Poush', 'Magh', 'Falgun', 'Chaitra',
    ),
    weekday_short_names=('Sun', 'Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat'),
    action_labels={
        'go_to_today': 'Go to Today',
        'copy_calendar': 'Copy Calendar to Clipboard',
        'navigate': 'Navigate',
        'prev_month': 'Previous Month',
        'next_month': 'Next Month',
        'prev_year': 'Previous Year',
        'next_year': 'Next Year',
        'open_preferences': 'Open Preferences',
    },
)

_NEPALI: LocalizationEntry = LocalizationEntry(
    month_names=(
        'बैशाख', 'जेठ', 'असार', 'श्रावण', 'भदौ', 'आश्विन',
        'कार्तिक', 'मंसिर', 'पौष', 'माघ', 'फाल्गुन', 'चैत्र',
    ),
    weekday_short_names=('आइत', 'सोम', 'मंगल', 'बुध', 'बिहि', 'शुक्र', 'शनि'),
    action_labels={
        'go_to_today': 'आज जानुहोस्',
        'copy_calendar': 'क्यालेन्डर प्रतिलिपि गर्नुहोस्',
        'navigate': 'नेभिगेट गर्नुहोस्',
        'prev_month': 'अघिल्लो महिना',
        'next_month': 'अर्को महिना',
        'prev_year': 'अघिल्लो वर्ष',
        'next_year': 'अर्को वर्ष',
        'open_preferences': 'प्राथमिकताहरू खोल्नुहोस्',
    },
    digit_map={str(i): glyph for i, glyph in enumerate('०१२३४५६७८९')},
)

_TABLE: typing.Mapping[Locale, LocalizationEntry] = types.MappingProxyType({
    Locale.EN: _ENGLISH,
    Locale.NP: _NEPALI,
})


def lookup(locale: Locale | str) -> LocalizationEntry:
    return _TABLE[Locale.coerce(locale)]


def to_localized_digits(locale: Locale | str, n: int | str) -> str:
    """Replace every ASCII digit with the locale's numeral glyph; other characters are kept as-is"""
    digit_map = lookup(locale).digit_map
    text = str(n)
    if digit_map is None:
        return text
    return ''.join(digit_map.get(char, char) for char in text)
