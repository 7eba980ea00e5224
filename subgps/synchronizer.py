"""Pairs decoded fixes with packet timestamps and drops redundant ones."""

import logging
import math
from typing import Dict, Iterable, List, Optional

from .framing import PacketFramer
from .models import GeoFix, Trackpoint, TrackResult
from .nmea import SentenceExtractor, decode_fix

logger = logging.getLogger(__name__)


class TrackSynchronizer:
    """
    Walks subtitle packets in order and builds the deduplicated trackpoint list.

    All scan state lives on the instance: the packet cursor into the
    timestamp list, the last accepted NMEA second, the last rendered value
    key and the first-fix timestamp. The cursor moves exactly once per
    packet, whatever happens to the packet, so packet N always pairs with
    timestamp N.
    """

    def __init__(self, timestamps: List[float], speed_factor: float = 1.0,
                 extractor: Optional[SentenceExtractor] = None):
        """
        Args:
            timestamps: Presentation time in seconds of every subtitle packet, in order.
            speed_factor: Timelapse factor applied to every timestamp (1.0 = real time).
            extractor: Sentence extractor to use; a new one is created if omitted.

        Raises:
            ValueError: If speed_factor is not positive.
        """
        if speed_factor <= 0:
            raise ValueError(f"Speed factor must be positive, got {speed_factor}.")
        self.timestamps = timestamps
        self.speed_factor = speed_factor
        self.extractor = extractor or SentenceExtractor()

        self.cursor = 0
        self.last_nmea_time: Optional[str] = None
        self.last_key: Optional[str] = None
        self.first_fix_pts: Optional[float] = None
        self.points: List[Trackpoint] = []
        self.stats: Dict[str, int] = {
            'no_fix': 0,
            'no_timestamp': 0,
            'duplicate_time': 0,
            'duplicate_value': 0,
            'accepted': 0,
        }

    def process_packet(self, payload: bytes) -> Optional[Trackpoint]:
        """
        Handles one framed packet and advances the cursor.

        Returns:
            The new Trackpoint, or None if the packet added nothing to the track.
        """
        try:
            return self._accept(payload)
        finally:
            self.cursor += 1

    def _accept(self, payload: bytes) -> Optional[Trackpoint]:
        body = self.extractor.extract(payload)
        fix: Optional[GeoFix] = decode_fix(body) if body is not None else None
        if fix is None or not fix.is_valid:
            self.stats['no_fix'] += 1
            return None

        if self.cursor >= len(self.timestamps):
            self.stats['no_timestamp'] += 1
            return None

        # Sub-second repeats of the same receiver update
        nmea_time = fix.time.split('.', 1)[0]
        if nmea_time == self.last_nmea_time:
            self.stats['duplicate_time'] += 1
            return None
        self.last_nmea_time = nmea_time

        pts = self.timestamps[self.cursor]
        if self.first_fix_pts is None:
            self.first_fix_pts = pts

        point = Trackpoint(
            latitude=fix.latitude,
            longitude=fix.longitude,
            speed=fix.speed,
            course=fix.course,
            date=fix.date,
            sec=math.floor(pts / self.speed_factor),
        )

        key = point.dedup_key()
        if key == self.last_key:
            self.stats['duplicate_value'] += 1
            return None
        self.last_key = key

        self.points.append(point)
        self.stats['accepted'] += 1
        return point

    def result(self) -> TrackResult:
        """Returns the accumulated track."""
        return TrackResult(
            speed_factor=self.speed_factor,
            points=list(self.points),
            first_fix_pts=self.first_fix_pts,
            packet_count=self.cursor,
        )


def synchronize(timestamps: List[float], raw_stream: bytes, speed_factor: float = 1.0,
                extractor: Optional[SentenceExtractor] = None) -> TrackResult:
    """
    Runs the whole decode/synchronize/dedupe pass over a raw subtitle dump.

    Args:
        timestamps: Presentation timestamps, one per subtitle packet.
        raw_stream: Raw mov_text packet stream.
        speed_factor: Timelapse factor.
        extractor: Optional sentence extractor shared across runs.

    Returns:
        A TrackResult with the ordered, deduplicated trackpoints.
    """
    synchronizer = TrackSynchronizer(timestamps, speed_factor, extractor)
    packets: Iterable[bytes] = PacketFramer(raw_stream)
    for payload in packets:
        synchronizer.process_packet(payload)

    result = synchronizer.result()
    if result.packet_count != len(timestamps):
        logger.warning(f"Framed {result.packet_count} subtitle packets but got {len(timestamps)} timestamps.")
    logger.info(f"Processed {result.packet_count} packets: {synchronizer.stats['accepted']} trackpoints kept.")
    logger.debug(f"Synchronizer stats: {synchronizer.stats}")
    return result
