"""Handles rendering trackpoints into track log files (GPX) and the GPS offset."""

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from typing import List
from xml.sax.saxutils import escape

from .models import Trackpoint, TrackResult
from .exceptions import TrackWriteError
from .utils import format_time_gpx

logger = logging.getLogger(__name__)

GPX_HEADER = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<gpx version="1.1" xmlns="http://www.topografix.com/GPX/1/1">\n'
)

class TrackFormatter(ABC):
    """Abstract base class for track log formatters."""

    extension = ""

    @abstractmethod
    def render(self, points: List[Trackpoint], name: str) -> str:
        """
        Renders the trackpoints as a complete document.

        Args:
            points: Ordered, deduplicated trackpoints.
            name: Display name of the track.

        Returns:
            The document text.
        """
        pass

    def format_track(self, points: List[Trackpoint], name: str, output_path: str) -> None:
        """
        Renders the trackpoints and writes them to output_path.

        The document goes to a temporary file in the destination directory
        first and is moved over output_path only once fully written, so a
        failed run never leaves a half-written track log behind.

        Args:
            points: Ordered, deduplicated trackpoints.
            name: Display name of the track.
            output_path: Destination file.

        Raises:
            TrackWriteError: If the file cannot be written.
        """
        logger.info(f"Writing {len(points)} trackpoints to {output_path}")
        document = self.render(points, name)

        out_dir = os.path.dirname(os.path.abspath(output_path))
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(prefix=".subgps_", suffix=f".{self.extension}.tmp", dir=out_dir)
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(document)
            os.chmod(tmp_path, 0o644)
            os.replace(tmp_path, output_path)
            tmp_path = None
            logger.info(f"Successfully wrote track log to {output_path}")
        except OSError as e:
            logger.error(f"Failed to write track log to {output_path}: {e}", exc_info=True)
            raise TrackWriteError(f"Could not write track log {output_path}: {e}") from e
        finally:
            if tmp_path and os.path.exists(tmp_path):
                try:
                    os.remove(tmp_path)
                except OSError:
                    logger.warning(f"Could not clean up temporary track file: {tmp_path}")


class GPXFormatter(TrackFormatter):
    """Formats trackpoints as a single-track, single-segment GPX 1.1 document."""

    extension = "gpx"

    def render(self, points: List[Trackpoint], name: str) -> str:
        lines = [
            GPX_HEADER,
            "  <trk>\n",
            f"    <name>{escape(name)}</name>\n",
            "    <trkseg>\n",
        ]
        for p in points:
            lines.append(
                f'      <trkpt lat="{p.latitude:.7f}" lon="{p.longitude:.7f}">'
                f"<time>{format_time_gpx(p.date, p.sec)}</time>"
                f"<speed>{p.speed:.1f}</speed><course>{p.course:.1f}</course></trkpt>\n"
            )
        lines.append("    </trkseg>\n")
        lines.append("  </trk>\n")
        lines.append("</gpx>\n")
        return "".join(lines)


FORMATTERS = {
    'gpx': GPXFormatter,
}


def compute_gps_offset(result: TrackResult) -> float:
    """Video-relative time of the first accepted fix, or 0.0 when there was none."""
    if result.first_fix_pts is None:
        return 0.0
    return result.first_fix_pts / result.speed_factor


def format_gps_offset(result: TrackResult) -> str:
    """The offset line printed for downstream tools: one decimal, or a bare "0" without a fix."""
    if result.first_fix_pts is None:
        return "0"
    return f"{compute_gps_offset(result):.1f}"
