"""Reads subtitle packet timestamps and the raw subtitle stream from video files using ffmpeg."""

import ffmpeg
import os
import logging
from typing import Iterable, List, Optional

from .exceptions import StreamExtractionError, TimestampError

logger = logging.getLogger(__name__)

class StreamExtractor:
    """Pulls the subtitle track's packet timing and payload bytes out of a video."""

    def __init__(self, ffmpeg_path: Optional[str] = None, ffprobe_path: Optional[str] = None,
                 subtitle_stream: str = "s:0"):
        """
        Initializes the StreamExtractor.

        Args:
            ffmpeg_path: Optional path to the ffmpeg executable.
                         If None, assumes ffmpeg is in the system PATH.
            ffprobe_path: Optional path to the ffprobe executable.
            subtitle_stream: Stream specifier of the subtitle track carrying the NMEA data.
        """
        self.ffmpeg_cmd = ffmpeg_path or 'ffmpeg'
        self.ffprobe_cmd = ffprobe_path or 'ffprobe'
        self.subtitle_stream = subtitle_stream
        logger.info(f"Using ffmpeg command: {self.ffmpeg_cmd}, ffprobe command: {self.ffprobe_cmd}")

    @staticmethod
    def parse_timestamps(values: Iterable[Optional[str]]) -> List[float]:
        """
        Converts ffprobe pts_time values to seconds.

        Blank values are skipped. Anything else that is not a number aborts,
        since a single bad timestamp would misalign every later packet.

        Raises:
            TimestampError: On a malformed value.
        """
        timestamps = []
        for raw in values:
            value = (raw or "").strip()
            if not value:
                continue
            try:
                timestamps.append(float(value))
            except ValueError as e:
                raise TimestampError(f"Bad PTS value {value!r}: {e}") from e
        return timestamps

    def get_packet_timestamps(self, video_filepath: str) -> List[float]:
        """
        Lists the presentation timestamp of every packet in the subtitle track.

        Args:
            video_filepath: Path to the input video file.

        Returns:
            Seconds, one entry per subtitle packet in stream order.

        Raises:
            FileNotFoundError: If the input video file does not exist.
            StreamExtractionError: If ffprobe fails.
            TimestampError: If a packet carries a malformed timestamp.
        """
        logger.info(f"Probing subtitle packet timestamps for: {video_filepath}")
        if not os.path.exists(video_filepath):
            raise FileNotFoundError(f"Input video file not found: {video_filepath}")

        try:
            probe = ffmpeg.probe(
                video_filepath,
                cmd=self.ffprobe_cmd,
                v='error',
                select_streams=self.subtitle_stream,
                show_entries='packet=pts_time',
            )
        except ffmpeg.Error as e:
            stderr_output = e.stderr.decode('utf-8', errors='replace') if e.stderr else "No stderr output"
            logger.error(f"ffprobe stderr: {stderr_output}")
            raise StreamExtractionError(f"ffprobe failed: {stderr_output}") from e
        except OSError as e:
            logger.error(f"Could not run ffprobe ({self.ffprobe_cmd}): {e}", exc_info=True)
            raise StreamExtractionError(f"Could not run ffprobe: {e}") from e

        packets = probe.get('packets', [])
        # A packet without pts_time has no usable timestamp; keep it in place so it is rejected
        timestamps = self.parse_timestamps(p.get('pts_time', 'N/A') for p in packets)
        logger.info(f"Found {len(timestamps)} subtitle packets.")
        return timestamps

    def dump_subtitle_stream(self, video_filepath: str) -> bytes:
        """
        Copies the subtitle track out of the container as raw packet bytes.

        Args:
            video_filepath: Path to the input video file.

        Returns:
            The concatenated length-prefixed packets.

        Raises:
            FileNotFoundError: If the input video file does not exist.
            StreamExtractionError: If ffmpeg fails.
        """
        logger.info(f"Dumping raw subtitle stream {self.subtitle_stream} from: {video_filepath}")
        if not os.path.exists(video_filepath):
            raise FileNotFoundError(f"Input video file not found: {video_filepath}")

        try:
            out, _ = (
                ffmpeg
                .input(video_filepath)[self.subtitle_stream]
                .output('pipe:', c='copy', f='rawvideo')
                .global_args('-v', 'error')
                .run(cmd=self.ffmpeg_cmd, capture_stdout=True, capture_stderr=True)
            )
        except ffmpeg.Error as e:
            stderr_output = e.stderr.decode('utf-8', errors='replace') if e.stderr else "No stderr output"
            logger.error(f"ffmpeg stderr: {stderr_output}")
            raise StreamExtractionError(f"ffmpeg failed: {stderr_output}") from e
        except OSError as e:
            logger.error(f"Could not run ffmpeg ({self.ffmpeg_cmd}): {e}", exc_info=True)
            raise StreamExtractionError(f"Could not run ffmpeg: {e}") from e

        logger.info(f"Read {len(out)} bytes of subtitle data.")
        return out
