"""Orchestrates the GPS track extraction pipeline."""

import logging
import time
from typing import Optional

from .stream_extractor import StreamExtractor
from .synchronizer import synchronize
from .nmea import SentenceExtractor
from .track_formatter import TrackFormatter, FORMATTERS
from .models import TrackResult
from .exceptions import SubGpsError, ConfigurationError, FileSystemError
from .config_loader import ConfigLoader
from .utils import derive_output_path, track_name_for

logger = logging.getLogger(__name__)

class TrackGenerator:
    """
    Manages the end-to-end process of turning a video's NMEA subtitle track into a track log.
    """

    def __init__(
        self,
        config: dict,
        stream_extractor: StreamExtractor,
        track_formatter: Optional[TrackFormatter] = None,
    ):
        """
        Initializes the TrackGenerator.

        Args:
            config: A dictionary containing configuration settings.
            stream_extractor: An instance of StreamExtractor.
            track_formatter: Formatter to use. If None, one is chosen from
                             config['output_format'].

        Raises:
            ConfigurationError: If the output format or speed factor is invalid.
        """
        self.config = config
        self.stream_extractor = stream_extractor
        self.sentence_extractor = SentenceExtractor()

        self.output_format = config.get('output_format', 'gpx').lower()
        if track_formatter is not None:
            self.track_formatter = track_formatter
        elif self.output_format in FORMATTERS:
            self.track_formatter = FORMATTERS[self.output_format]()
        else:
            raise ConfigurationError(f"Unsupported output format '{self.output_format}' specified in config.")

        self.speed_factor = ConfigLoader.validate_speed_factor(config.get('speed_factor', 1.0))

    def generate(
        self,
        video_path: str,
        output_path: Optional[str] = None,
        speed_factor: Optional[float] = None,
        track_name: Optional[str] = None,
    ) -> TrackResult:
        """
        Executes the full extraction pipeline for a single video.

        Nothing is written when the video yields no usable fix.

        Args:
            video_path: Path to the input video file.
            output_path: Track log destination. Defaults to the video path
                         with the formatter's extension.
            speed_factor: Timelapse factor; overrides the configured one.
            track_name: Track display name. Defaults to the video's base name.

        Returns:
            The synchronized TrackResult, used for the GPS offset.

        Raises:
            SubGpsError: For any acquisition, timestamp or write errors in the pipeline.
            FileNotFoundError: If the input video is not found.
        """
        start_time = time.time()
        speed = self.speed_factor if speed_factor is None else ConfigLoader.validate_speed_factor(speed_factor)
        output_path = output_path or derive_output_path(video_path, self.track_formatter.extension)
        track_name = track_name or track_name_for(video_path)
        logger.info(f"--- Starting GPS track extraction for: {video_path} (speed factor {speed}) ---")

        try:
            # 1. Packet timestamps
            logger.info("Step 1: Reading subtitle packet timestamps...")
            timestamps = self.stream_extractor.get_packet_timestamps(video_path)
            if not timestamps:
                logger.warning(f"No subtitle packets found in {video_path}. Nothing to do.")
                return TrackResult(speed_factor=speed)

            # 2. Raw subtitle data
            logger.info("Step 2: Reading raw subtitle stream...")
            raw_stream = self.stream_extractor.dump_subtitle_stream(video_path)

            # 3. Decode, synchronize, dedupe
            logger.info("Step 3: Synchronizing NMEA fixes with packet timestamps...")
            result = synchronize(timestamps, raw_stream, speed, self.sentence_extractor)

            # 4. Track log
            if not result.points:
                logger.warning(f"No valid GPS fix found in {video_path}. No track log written.")
            else:
                logger.info(f"Step 4: Writing {self.output_format.upper()} track log...")
                self.track_formatter.format_track(result.points, track_name, output_path)

            logger.info(f"--- GPS track extraction completed in {time.time() - start_time:.2f} seconds ---")
            return result

        except (SubGpsError, FileNotFoundError, FileSystemError) as e:
            logger.error(f"GPS track extraction failed: {e}", exc_info=False)
            raise
        except Exception as e:
            logger.critical(f"An unexpected critical error occurred during track extraction: {e}", exc_info=True)
            raise SubGpsError(f"An unexpected critical error occurred: {e}") from e
