r"""
argbind timestamps: multi-layout parsing of command-line dates and times.

Layouts (tried in order, first full match wins)
- ISO-8601 'T' date-time with a zone:  2019-10-30T19:25:36Z, ...T19:25:36-0700, ...T19:25:36-07:00
- space date-time with a glued zone:   2019-10-30 19:25:36Z, ... 19:25:36.765-07:00
- space date-time, spaced zone:        2019-10-30 19:25:36 -0700 / -07:00 / PDT
- space date-time, no zone (local):    2019-10-30 19:25:36
- plain date (local midnight):         2019-10-30
- unix date:                           Wed Oct 30 19:25:36 PDT 2019
- RFC 1123 / RFC 1123Z:                Wed, 30 Oct 2019 19:25:36 PDT / ... -0700
- slash date-time with a zone:         10/30/2019 19:25:36 -0700 / -07:00 / PDT
- slash date-time, 12-hour (local):    10/30/2019 7:25:36 PM
- slash date (local midnight):         10/30/2019, 10/30/19

Details
- a fraction ('.' or ',' followed by digits) is accepted after any seconds field;
  digits beyond microseconds are truncated.
- a 'T' date-time without a zone is not a layout and is rejected.
- two-digit years: 69..99 → 19xx, 00..68 → 20xx.
- weekday and month names match in any case; the 12-hour clock takes hours 0..12
  (0 PM and 12 PM are noon, 0 AM and 12 AM are midnight).
- zone abbreviations: UTC/GMT → UTC; one used by the local zone (at that date,
  or in its other season) → that offset; anything else → zero offset under a
  fixed zone named after the abbreviation.
- values without a zone are interpreted in the local zone (see localzone()).
"""
import datetime
import logging
import os
import re
from datetime import timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .faults import FaultCode, TimestampFormatError
from .utils import Unset

logger = logging.getLogger(__name__)

_MONTHS = {
    "Jan": 1, "Feb": 2, "Mar": 3, "Apr": 4, "May": 5, "Jun": 6,
    "Jul": 7, "Aug": 8, "Sep": 9, "Oct": 10, "Nov": 11, "Dec": 12,
}

# building blocks
_WEEKDAY = r"(?i:Mon|Tue|Wed|Thu|Fri|Sat|Sun)"
_MONTHNAME = r"(?P<monthname>(?i:" + "|".join(_MONTHS) + r"))"
_FRACTION = r"(?:[.,](?P<fraction>\d+))?"
_CLOCK = r"(?P<hour>\d{1,2}):(?P<minute>\d{2}):(?P<second>\d{2})" + _FRACTION
_ISODATE = r"(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
_SLASHDATE = r"(?P<month>\d{1,2})/(?P<day>\d{1,2})/(?P<year>\d{4})"
_ZULU = r"(?P<offset>Z|[+-]\d{4})"
_ZULU_COLON = r"(?P<offset>Z|[+-]\d{2}:\d{2})"
_NUMERIC = r"(?P<offset>[+-]\d{4})"
_NUMERIC_COLON = r"(?P<offset>[+-]\d{2}:\d{2})"
_ABBREVIATION = r"(?P<abbreviation>[A-Z][A-Za-z]{2,4})"

LAYOUTS = tuple(map(re.compile, (
    _ISODATE + "T" + _CLOCK + _ZULU,
    _ISODATE + "T" + _CLOCK + _ZULU_COLON,
    _ISODATE + " " + _CLOCK + _ZULU,
    _ISODATE + " " + _CLOCK + _ZULU_COLON,
    _ISODATE + " " + _CLOCK + " " + _NUMERIC,
    _ISODATE + " " + _CLOCK + " " + _NUMERIC_COLON,
    _ISODATE + " " + _CLOCK + " " + _ABBREVIATION,
    _ISODATE + " " + _CLOCK,
    _ISODATE,
    _WEEKDAY + " " + _MONTHNAME + r" {1,2}(?P<day>\d{1,2}) " + _CLOCK + " " + _ABBREVIATION + r" (?P<year>\d{4})",
    _WEEKDAY + r", (?P<day>\d{2}) " + _MONTHNAME + r" (?P<year>\d{4}) " + _CLOCK + " " + _ABBREVIATION,
    _WEEKDAY + r", (?P<day>\d{2}) " + _MONTHNAME + r" (?P<year>\d{4}) " + _CLOCK + " " + _NUMERIC,
    _SLASHDATE + " " + _CLOCK + " " + _NUMERIC,
    _SLASHDATE + " " + _CLOCK + " " + _NUMERIC_COLON,
    _SLASHDATE + " " + _CLOCK + " " + _ABBREVIATION,
    _SLASHDATE + " " + _CLOCK + r" (?P<meridiem>AM|PM)",
    _SLASHDATE,
    r"(?P<month>\d{1,2})/(?P<day>\d{1,2})/(?P<shortyear>\d{2})",
)))


def localzone():
    """
    resolve the zone used for timestamps that carry no zone of their own.

    lookup (first hit wins)
    - __zone__ on __main__: a tzinfo, or an IANA key such as "Europe/Paris".
    - the TZ environment variable, as an IANA key (a leading ':' is ignored).
    - /etc/localtime.
    - the fixed offset currently in effect (no DST transitions).
    """
    zone = getattr(__import__("__main__"), "__zone__", Unset)
    if zone is not Unset:
        return zone if isinstance(zone, tzinfo) else ZoneInfo(zone)

    if key := os.environ.get("TZ", "").removeprefix(":"):
        try:
            return ZoneInfo(key)
        except (ZoneInfoNotFoundError, ValueError):
            logger.debug("ignoring unknown TZ %r", key)

    try:
        with open("/etc/localtime", "rb") as file:
            return ZoneInfo.from_file(file, key="localtime")
    except (OSError, ValueError):
        logger.debug("no usable /etc/localtime, falling back to the current offset")

    return datetime.datetime.now().astimezone().tzinfo


def _offset(text):
    if text == "Z":
        return timezone.utc
    sign = -1 if text[0] == "-" else 1
    digits = text[1:].replace(":", "")
    return timezone(sign * timedelta(hours=int(digits[:2]), minutes=int(digits[2:])))


def _abbreviated(naive, abbreviation, zone):
    if abbreviation in ("UTC", "GMT"):
        return naive.replace(tzinfo=timezone.utc)

    # the zone in effect at that wall time takes precedence
    for fold in (0, 1):
        aware = naive.replace(tzinfo=zone, fold=fold)
        if aware.tzname() == abbreviation:
            return aware

    # then the zone's other season (e.g. PDT given for a winter date)
    for probe in (naive.replace(month=1, day=1), naive.replace(month=7, day=1)):
        aware = probe.replace(tzinfo=zone)
        if aware.tzname() == abbreviation:
            return naive.replace(tzinfo=timezone(aware.utcoffset(), abbreviation))

    return naive.replace(tzinfo=timezone(timedelta(0), abbreviation))


def _assemble(match, zone):
    parts = match.groupdict()

    if parts.get("shortyear"):
        year = int(parts["shortyear"])
        year += 1900 if year >= 69 else 2000
    else:
        year = int(parts["year"])

    month = _MONTHS[parts["monthname"].title()] if parts.get("monthname") else int(parts["month"])

    hour = int(parts.get("hour") or 0)
    if meridiem := parts.get("meridiem"):
        if not 0 <= hour <= 12:
            raise ValueError("hour must be in 0..12 with %s" % meridiem)
        hour = hour % 12 + (12 if meridiem == "PM" else 0)

    naive = datetime.datetime(
        year,
        month,
        int(parts["day"]),
        hour,
        int(parts.get("minute") or 0),
        int(parts.get("second") or 0),
        int((parts.get("fraction") or "0")[:6].ljust(6, "0")),
    )

    if offset := parts.get("offset"):
        return naive.replace(tzinfo=_offset(offset))
    if abbreviation := parts.get("abbreviation"):
        return _abbreviated(naive, abbreviation, zone)
    return naive.replace(tzinfo=zone)


def parse(text, /, *, zone=Unset):
    """
    parse `text` against LAYOUTS and return an aware datetime.

    parameters
    - text: str
      the raw command-line value.
    - zone: tzinfo (keyword-only)
      zone for values without one; defaults to localzone().

    errors
    - TimestampFormatError naming the original text when no layout matches
      (a layout whose fields are out of range, e.g. month 13, counts as no match).
    """
    if zone is Unset:
        zone = localzone()

    for layout in LAYOUTS:
        if not (match := layout.fullmatch(text)):
            continue
        try:
            return _assemble(match, zone)
        except ValueError as error:
            logger.debug("layout %r matched %r but %s", layout.pattern, text, error)

    raise TimestampFormatError(
        "cannot parse %r as a timestamp" % text,
        title="unrecognized timestamp",
        code=FaultCode.TIMESTAMP_FORMAT,
        hint="use a layout like 2006-01-02 15:04:05 -07:00, 2006-01-02 or 1/2/2006",
        input=text,
    )


__all__ = (
    "LAYOUTS",
    "localzone",
    "parse",
)
