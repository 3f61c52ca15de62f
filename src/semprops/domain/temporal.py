"""Time point parsing and rendering.

Time values are stored in the raw ``calendar/year/month/day/hour/minute/second``
form used by Semantic MediaWiki (calendar ``1`` is Gregorian, ``2`` Julian).
Only the components that were given are kept, so the length of the raw form
encodes the precision.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from semprops.domain.errors import ValueParseError

GREGORIAN = 1
JULIAN = 2

_MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

_ISO_PATTERN = re.compile(
    r"^(?P<sign>-)?(?P<year>\d{1,4})"
    r"(?:-(?P<month>\d{1,2})"
    r"(?:-(?P<day>\d{1,2})"
    r"(?:[T ](?P<hour>\d{1,2}):(?P<minute>\d{2})(?::(?P<second>\d{2}))?Z?)?)?)?$"
)
_NAMED_FORMATS = ("%d %B %Y", "%B %d, %Y", "%B %Y")


class DatePrecision(StrEnum):
    YEAR = "year"
    MONTH = "month"
    DAY = "day"
    TIME = "time"


@dataclass(frozen=True, slots=True)
class TimeParts:
    year: int
    month: int | None = None
    day: int | None = None
    hour: int | None = None
    minute: int | None = None
    second: int | None = None
    calendar: int = GREGORIAN

    def __post_init__(self) -> None:
        _check_components(self)

    @property
    def precision(self) -> DatePrecision:
        if self.hour is not None:
            return DatePrecision.TIME
        if self.day is not None:
            return DatePrecision.DAY
        if self.month is not None:
            return DatePrecision.MONTH
        return DatePrecision.YEAR

    def raw(self) -> str:
        components = [self.calendar, self.year, self.month, self.day, self.hour, self.minute]
        if self.second is not None:
            components.append(self.second)
        while components[-1] is None:
            components.pop()
        return "/".join(str(component) for component in components)

    def iso(self) -> str:
        sign = "-" if self.year < 0 else ""
        text = f"{sign}{abs(self.year):04d}"
        if self.month is not None:
            text += f"-{self.month:02d}"
        if self.day is not None:
            text += f"-{self.day:02d}"
        if self.hour is not None:
            text += f"T{self._clock()}"
        return text

    def formatted(self) -> str:
        year = f"{-self.year} BC" if self.year < 0 else str(self.year)
        if self.month is None:
            return year
        month = _MONTH_NAMES[self.month - 1]
        if self.day is None:
            return f"{month} {year}"
        text = f"{self.day} {month} {year}"
        if self.hour is not None:
            text += f" {self._clock()}"
        return text

    def _clock(self) -> str:
        clock = f"{self.hour or 0:02d}:{self.minute or 0:02d}"
        return clock if self.second is None else f"{clock}:{self.second:02d}"


def _check_components(parts: TimeParts) -> None:
    if parts.calendar not in (GREGORIAN, JULIAN):
        raise ValueParseError(f"Unknown calendar model {parts.calendar}")
    if parts.year == 0:
        raise ValueParseError("Year 0 does not exist")
    if parts.month is not None and not 1 <= parts.month <= 12:
        raise ValueParseError(f"Month {parts.month} is out of range")
    if parts.day is not None:
        if parts.month is None:
            raise ValueParseError("A day requires a month")
        if 1 <= parts.year <= 9999:
            try:
                datetime(parts.year, parts.month, parts.day)  # noqa: DTZ001
            except ValueError as exc:
                raise ValueParseError(str(exc)) from exc
        elif not 1 <= parts.day <= 31:
            raise ValueParseError(f"Day {parts.day} is out of range")
    if parts.hour is not None and not 0 <= parts.hour <= 23:
        raise ValueParseError(f"Hour {parts.hour} is out of range")
    if parts.minute is not None and not 0 <= parts.minute <= 59:
        raise ValueParseError(f"Minute {parts.minute} is out of range")
    if parts.second is not None and not 0 <= parts.second <= 59:
        raise ValueParseError(f"Second {parts.second} is out of range")


def parse_raw_time(raw: str) -> TimeParts | None:
    """Parse the raw stored form; return ``None`` when it is not one."""

    pieces = raw.strip().split("/")
    if len(pieces) < 2 or len(pieces) > 8:  # noqa: PLR2004
        return None
    try:
        numbers = [int(float(piece)) for piece in pieces[:7]]
    except ValueError:
        return None
    calendar, year = numbers[0], numbers[1]
    rest: list[int | None] = [*numbers[2:], None, None, None, None, None]
    month, day, hour, minute, second = rest[:5]
    try:
        return TimeParts(
            year=year,
            month=month,
            day=day,
            hour=hour,
            minute=minute,
            second=second,
            calendar=calendar,
        )
    except ValueParseError:
        return None


def parse_time_text(text: str) -> TimeParts:
    """Parse user-supplied date text (ISO 8601, English month names or raw form)."""

    cleaned = text.strip()
    match = _ISO_PATTERN.match(cleaned)
    if match:
        year = int(match["year"]) * (-1 if match["sign"] else 1)
        return TimeParts(
            year=year,
            month=_optional_int(match["month"]),
            day=_optional_int(match["day"]),
            hour=_optional_int(match["hour"]),
            minute=_optional_int(match["minute"]),
            second=_optional_int(match["second"]),
        )
    if "/" in cleaned:
        parts = parse_raw_time(cleaned)
        if parts is not None:
            return parts
    for fmt in _NAMED_FORMATS:
        try:
            parsed = datetime.strptime(cleaned, fmt)  # noqa: DTZ007
        except ValueError:
            continue
        day = parsed.day if "%d" in fmt else None
        return TimeParts(year=parsed.year, month=parsed.month, day=day)
    raise ValueParseError(f"Unrecognized date: {text!r}")


def _optional_int(value: str | None) -> int | None:
    return int(value) if value is not None else None
