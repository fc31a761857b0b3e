import logging
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Protocol

import holidays as public_holidays
import pytz

from minitokyo.loaders.types import TimetableSelector

logger = logging.getLogger(__name__)

TOKYO = pytz.timezone("Asia/Tokyo")

WEEKDAY = "Weekday"
SATURDAY = "Saturday"
HOLIDAY = "Holiday"

KNOWN_CALENDARS = (WEEKDAY, SATURDAY, HOLIDAY)

TIMETABLE_WEEKDAY = "timetable-weekday.json.gz"
TIMETABLE_HOLIDAY = "timetable-holiday.json.gz"

EXTRA_TIMETABLES = {
    SATURDAY: ("timetable-saturday.json.gz",),
    HOLIDAY: ("timetable-sunday-holiday.json.gz",),
}


class CalendarSource(Protocol):
    def get_calendar(self) -> str: ...


class Clock:
    """
    Tokyo wall clock that knows which service calendar is running.

    The service day starts at 03:00 local time: trains running after midnight
    still belong to the previous day's timetable. Japanese national holidays
    are always known; ``holidays`` adds extra dates (e.g. year-end closures).
    """

    def __init__(
        self,
        holidays: Iterable[date] = (),
        *,
        now: Optional[datetime] = None,
        day_start_hour: int = 3,
    ):
        self.holidays = frozenset(holidays)
        self.national_holidays = public_holidays.country_holidays("JP")
        self.day_start_hour = day_start_hour
        self._now = now

    def now(self) -> datetime:
        if self._now is None:
            return datetime.now(TOKYO)
        if self._now.tzinfo is None:
            return TOKYO.localize(self._now)
        return self._now.astimezone(TOKYO)

    def service_date(self) -> date:
        return (self.now() - timedelta(hours=self.day_start_hour)).date()

    def get_calendar(self) -> str:
        d = self.service_date()
        # Python weekday: Mon=0..Sun=6
        if d.weekday() == 6 or d in self.national_holidays or d in self.holidays:
            return HOLIDAY
        if d.weekday() == 5:
            return SATURDAY
        return WEEKDAY


def resolve_timetable_files(clock: CalendarSource) -> TimetableSelector:
    calendar = clock.get_calendar()
    if calendar not in KNOWN_CALENDARS:
        logger.warning("Unknown calendar %r, using %s without overlay", calendar, TIMETABLE_HOLIDAY)

    base = TIMETABLE_WEEKDAY if calendar == WEEKDAY else TIMETABLE_HOLIDAY
    return TimetableSelector(base=base, overlays=EXTRA_TIMETABLES.get(calendar, ()))
