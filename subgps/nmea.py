"""Finds and decodes NMEA RMC sentences carried in subtitle payloads."""

import logging
import re
from typing import Optional

from .models import GeoFix

logger = logging.getLogger(__name__)

KNOTS_TO_KMH = 1.852
EPOCH_DATE = "1970-01-01"
CENTURY_PIVOT = 80 # two-digit years below this are 20xx
MIN_RMC_FIELDS = 9


class SentenceExtractor:
    """Locates a GPS or GNSS RMC sentence inside a subtitle payload."""

    # $GPRMC / $GNRMC up to the checksum marker
    PATTERN = re.compile(rb'\$G[NP]RMC,([^;*]+)')

    def extract(self, payload: bytes) -> Optional[str]:
        """
        Returns the comma separated field body of the first RMC sentence.

        Args:
            payload: One subtitle packet payload.

        Returns:
            The field body (without the "$GxRMC," prefix), or None when the
            payload carries no RMC sentence, as plain caption text does.
        """
        match = self.PATTERN.search(payload)
        if match is None:
            return None
        return match.group(1).decode('ascii', errors='replace')


def parse_number(raw: str) -> float:
    """Parses a numeric field, returning 0.0 when it is empty or malformed."""
    try:
        return float(raw)
    except ValueError:
        return 0.0


def parse_coordinate(raw: str, hemisphere: str) -> float:
    """
    Converts an NMEA DDDMM.MMMM coordinate to signed decimal degrees.

    The minutes always occupy the two digits in front of the decimal point.
    Anything shorter than that cannot be split and decodes as 0.

    Args:
        raw: Coordinate field, e.g. "4807.038" or "01131.000".
        hemisphere: "N", "S", "E" or "W".

    Returns:
        Decimal degrees, negative in the southern and western hemispheres.
    """
    if not raw:
        return 0.0
    dot = raw.find('.')
    if dot < 2:
        return 0.0
    degrees = parse_number(raw[:dot - 2])
    minutes = parse_number(raw[dot - 2:])
    result = degrees + minutes / 60.0
    if hemisphere in ("S", "W"):
        result = -result
    return result


def parse_date(raw: str) -> str:
    """Converts an NMEA DDMMYY date to YYYY-MM-DD, falling back to the epoch when too short."""
    if len(raw) < 6:
        return EPOCH_DATE
    day, month = raw[0:2], raw[2:4]
    try:
        yy = int(raw[4:6])
    except ValueError:
        yy = 0
    year = 2000 + yy if yy < CENTURY_PIVOT else 1900 + yy
    return f"{year}-{month}-{day}"


def decode_fix(body: str) -> Optional[GeoFix]:
    """
    Decodes the field body of an RMC sentence.

    Field order: 0=time, 1=status, 2=lat, 3=N/S, 4=lon, 5=E/W, 6=knots,
    7=course, 8=date. Extra fields are ignored.

    Args:
        body: Field body as returned by SentenceExtractor.extract.

    Returns:
        A GeoFix, or None if the sentence has too few fields. Void fixes
        (status other than "A") are returned with is_valid False.
    """
    fields = body.split(',')
    if len(fields) < MIN_RMC_FIELDS:
        logger.debug(f"Ignoring RMC sentence with {len(fields)} fields: '{body[:40]}'")
        return None

    return GeoFix(
        time=fields[0],
        status=fields[1],
        latitude=parse_coordinate(fields[2], fields[3]),
        longitude=parse_coordinate(fields[4], fields[5]),
        speed=parse_number(fields[6]) * KNOTS_TO_KMH,
        course=parse_number(fields[7]),
        date=parse_date(fields[8]),
    )
