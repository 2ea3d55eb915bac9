"""
Holiday Calendars for Fibre Tracker.

Answers one question for the deadline engine: is this calendar day a
business day? A calendar is a pluggable rule set:
- Fixed (month, day) holidays
- Holidays at a fixed offset from Easter Sunday (Gregorian)
- Sunday observance: a holiday on Sunday also makes the following Monday a holiday

Saturday holidays are NOT moved. This matches South African practice,
which is the default calendar.

All comparisons are by calendar day in settings.calendar_timezone.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Iterable, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil.easter import EASTER_WESTERN, easter

from fibretrack.core.config import settings
from fibretrack.core.exceptions import ConfigurationError, UnknownCalendarError, ValidationError


logger = logging.getLogger(__name__)


# ==========================================
# LOCAL CALENDAR DAY
# ==========================================

def get_calendar_timezone() -> ZoneInfo:
    """Time zone in which deadlines are calendar days."""
    try:
        return ZoneInfo(settings.calendar_timezone)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigurationError(
            "Invalid calendar time zone",
            config_key="calendar_timezone",
            actual_value=settings.calendar_timezone
        ) from exc


def to_local_date(value: Any) -> date:
    """
    Normalize a date-like value to a calendar day (start of day).

    - date: returned as-is
    - timezone-aware datetime: converted to the calendar time zone first
    - naive datetime: assumed to already be local
    - ISO string: parsed, then treated as above
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None and value.tzinfo.utcoffset(value) is not None:
            value = value.astimezone(get_calendar_timezone())
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            if "T" in text or " " in text:
                return to_local_date(datetime.fromisoformat(text.replace("Z", "+00:00")))
            return date.fromisoformat(text)
        except ValueError:
            raise ValidationError("Malformed date", field="date", value=value)
    raise ValidationError(
        f"Expected a date, got {type(value).__name__}",
        field="date",
        value=value
    )


def local_today() -> date:
    """Today's calendar day in the calendar time zone."""
    return datetime.now(get_calendar_timezone()).date()


# ==========================================
# HOLIDAY RULES
# ==========================================

@dataclass(frozen=True)
class FixedHoliday:
    """Holiday on the same month/day every year."""
    month: int
    day: int
    name: str


@dataclass(frozen=True)
class EasterHoliday:
    """Holiday at a fixed offset (in days) from Easter Sunday."""
    offset_days: int
    name: str


@dataclass(frozen=True)
class HolidayEntry:
    """A dated holiday. is_observed marks a Monday added for a Sunday holiday."""
    holiday_date: date
    name: str
    is_observed: bool = False


class HolidayCalendar:
    """
    Holiday rule set for one country.

    holidays_for_year() is cached per year; rules are immutable after
    construction so the cache never goes stale.
    """

    def __init__(
        self,
        country_code: str,
        name: str,
        fixed_holidays: Iterable[FixedHoliday] = (),
        easter_holidays: Iterable[EasterHoliday] = (),
        observe_sunday_on_monday: bool = True
    ):
        self.country_code = country_code.upper()
        self.name = name
        self.fixed_holidays = tuple(fixed_holidays)
        self.easter_holidays = tuple(easter_holidays)
        self.observe_sunday_on_monday = observe_sunday_on_monday
        self._entry_cache: dict[int, tuple[HolidayEntry, ...]] = {}
        self._date_cache: dict[int, frozenset[date]] = {}

    def __repr__(self) -> str:
        return f"HolidayCalendar({self.country_code!r}, {self.name!r})"

    def _rule_entries(self, year: int) -> list[HolidayEntry]:
        """All entries generated by this year's rules (may spill into next year)."""
        entries = [
            HolidayEntry(date(year, rule.month, rule.day), rule.name)
            for rule in self.fixed_holidays
        ]

        if self.easter_holidays:
            easter_sunday = easter(year, EASTER_WESTERN)
            entries.extend(
                HolidayEntry(easter_sunday + timedelta(days=rule.offset_days), rule.name)
                for rule in self.easter_holidays
            )

        if self.observe_sunday_on_monday:
            # Sunday stays in the set; the Monday is the operative addition
            entries.extend(
                HolidayEntry(entry.holiday_date + timedelta(days=1), f"{entry.name} (observed)", True)
                for entry in list(entries)
                if entry.holiday_date.weekday() == 6
            )

        return entries

    def holiday_entries(self, year: int) -> tuple[HolidayEntry, ...]:
        """Named holidays falling in the given year, sorted by date."""
        if year not in self._entry_cache:
            # Previous year's rules can observe into January (e.g. a Sunday Dec 31)
            candidates = self._rule_entries(year - 1) + self._rule_entries(year)
            self._entry_cache[year] = tuple(sorted(
                (entry for entry in candidates if entry.holiday_date.year == year),
                key=lambda entry: (entry.holiday_date, entry.is_observed, entry.name)
            ))
        return self._entry_cache[year]

    def holidays_for_year(self, year: int) -> frozenset[date]:
        """All non-working holiday dates in the given year."""
        if year not in self._date_cache:
            self._date_cache[year] = frozenset(
                entry.holiday_date for entry in self.holiday_entries(year)
            )
            logger.debug(
                f"Built {self.country_code} holiday set for {year}: "
                f"{len(self._date_cache[year])} dates"
            )
        return self._date_cache[year]

    def holiday_name(self, check_date: Any) -> Optional[str]:
        """Name of the holiday on this day, or None."""
        day = to_local_date(check_date)
        names = [entry.name for entry in self.holiday_entries(day.year) if entry.holiday_date == day]
        return " / ".join(names) if names else None

    def is_holiday(self, check_date: Any) -> bool:
        day = to_local_date(check_date)
        return day in self.holidays_for_year(day.year)

    def is_business_day(self, check_date: Any) -> bool:
        """
        Check if a date is a business day.

        Business day = Not weekend AND not holiday
        """
        day = to_local_date(check_date)
        if is_weekend(day):
            return False
        if self.is_holiday(day):
            return False
        return True


# ==========================================
# BUILT-IN CALENDARS
# ==========================================

SOUTH_AFRICA = HolidayCalendar(
    country_code="ZA",
    name="South Africa",
    fixed_holidays=(
        FixedHoliday(1, 1, "New Year's Day"),
        FixedHoliday(3, 21, "Human Rights Day"),
        FixedHoliday(4, 27, "Freedom Day"),
        FixedHoliday(5, 1, "Workers' Day"),
        FixedHoliday(6, 16, "Youth Day"),
        FixedHoliday(8, 9, "National Women's Day"),
        FixedHoliday(9, 24, "Heritage Day"),
        FixedHoliday(12, 16, "Day of Reconciliation"),
        FixedHoliday(12, 25, "Christmas Day"),
        FixedHoliday(12, 26, "Day of Goodwill"),
    ),
    easter_holidays=(
        EasterHoliday(-2, "Good Friday"),
        EasterHoliday(-1, "Family Day"),
    ),
)


_calendars: dict[str, HolidayCalendar] = {}


def register_calendar(calendar: HolidayCalendar) -> HolidayCalendar:
    """Make a calendar available by its country code (replaces any existing one)."""
    _calendars[calendar.country_code] = calendar
    logger.info(f"Registered holiday calendar {calendar.country_code} ({calendar.name})")
    return calendar


def get_calendar(country_code: Optional[str] = None) -> HolidayCalendar:
    """Look up a calendar; defaults to settings.holiday_country_code."""
    code = (country_code or settings.holiday_country_code).upper()
    calendar = _calendars.get(code)
    if calendar is None:
        raise UnknownCalendarError(code)
    return calendar


def available_calendars() -> list[str]:
    return sorted(_calendars)


register_calendar(SOUTH_AFRICA)


# ==========================================
# MODULE-LEVEL HELPERS
# ==========================================

def is_weekend(check_date: Any) -> bool:
    """Check if date is a weekend (Saturday=5, Sunday=6)."""
    return to_local_date(check_date).weekday() >= 5


def holidays_for_year(year: int, country_code: Optional[str] = None) -> frozenset[date]:
    """All holidays in a year for the given (or default) country."""
    return get_calendar(country_code).holidays_for_year(year)


def is_holiday(check_date: Any, country_code: Optional[str] = None) -> bool:
    """Check if date is a holiday."""
    return get_calendar(country_code).is_holiday(check_date)


def is_business_day(check_date: Any, country_code: Optional[str] = None) -> bool:
    """Check if a date is a business day (not weekend, not holiday)."""
    return get_calendar(country_code).is_business_day(check_date)
