#!/usr/bin/env python3
"""
subgps Batch Processing Entry Point

Extracts the GPS track of every video in a directory, smallest first,
writing NAME.gpx next to each video and printing one
"<filename>\t<gps offset>" line per processed video.
"""

import argparse
import logging
import os
import sys
import time
from typing import List, Tuple

# Progress bar library
from tqdm import tqdm

from subgps.cli import positive_float, resolve_config_path
from subgps.config_loader import ConfigLoader
from subgps.log_setup import setup_logging
from subgps.stream_extractor import StreamExtractor
from subgps.track_generator import TrackGenerator
from subgps.track_formatter import format_gps_offset
from subgps.exceptions import SubGpsError, ConfigurationError

# Initialize logger for this script
logger = logging.getLogger(__name__)

VIDEO_EXTENSIONS = (".mp4", ".mov")

def find_and_sort_videos(input_dir: str) -> List[Tuple[str, int]]:
    """
    Finds all video files in the input directory and sorts them by size.

    Args:
        input_dir: The directory to search for video files.

    Returns:
        A list of tuples, where each tuple is (filepath, filesize),
        sorted by filesize in ascending order.

    Raises:
        FileNotFoundError: If the input directory doesn't exist.
        ValueError: If the input path is not a directory.
    """
    if not os.path.exists(input_dir):
        raise FileNotFoundError(f"Input directory not found: {input_dir}")
    if not os.path.isdir(input_dir):
        raise ValueError(f"Input path is not a directory: {input_dir}")

    videos = []
    logger.info(f"Scanning directory for video files: {input_dir}")
    for filename in os.listdir(input_dir):
        # Case-insensitive, dashcams write .MP4
        if filename.lower().endswith(VIDEO_EXTENSIONS):
            filepath = os.path.join(input_dir, filename)
            try:
                if os.path.isfile(filepath):
                    filesize = os.path.getsize(filepath)
                    videos.append((filepath, filesize))
            except OSError as e:
                logger.warning(f"Could not access file {filepath}: {e}. Skipping.")

    videos.sort(key=lambda item: item[1])
    logger.info(f"Found {len(videos)} video files. Sorted by size (smallest first).")
    return videos


def run_batch_processing():
    """Parses arguments, sets up, and runs the batch track extraction."""
    parser = argparse.ArgumentParser(
        description="subgps Batch: Extract GPX tracks for all videos in a directory.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument(
        "-i", "--input-dir",
        required=True,
        help="Directory containing the input video files."
    )
    parser.add_argument(
        "-s", "--speed",
        type=positive_float,
        default=None, # Default taken from config
        help="Speed factor of the footage, e.g. 3 for 3x timelapse."
    )
    parser.add_argument(
        "-c", "--config",
        default=None,
        help="Path to the configuration YAML file. config.yaml is used if present."
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging level for console and file output."
    )

    args = parser.parse_args()

    # --- Setup Logging (Initial) ---
    log_level = getattr(logging, args.log_level.upper(), logging.INFO)
    setup_logging(log_level=log_level, log_dir='logs', log_file='subgps_batch_init.log')

    # --- Load Configuration ---
    try:
        config = ConfigLoader().load_config(resolve_config_path(args.config))
    except (ConfigurationError, FileNotFoundError) as e:
        logger.critical(f"Failed to load configuration: {e}", exc_info=True)
        sys.exit(1)

    # --- Re-configure Logging (Final) ---
    setup_logging(log_level=log_level, log_dir=config['log_dir'], log_file='subgps_batch.log')
    logger.info("Logging re-configured with settings from config file for batch processing.")

    if args.speed is not None:
        logger.info(f"Overriding speed_factor from config with CLI argument: {args.speed}")
        config['speed_factor'] = args.speed

    # --- Find and Sort Videos ---
    try:
        sorted_video_paths = [item[0] for item in find_and_sort_videos(args.input_dir)]
        if not sorted_video_paths:
            logger.warning(f"No video files found in {args.input_dir}. Exiting.")
            sys.exit(0)
    except (FileNotFoundError, ValueError) as e:
        logger.critical(f"Input directory error: {e}")
        sys.exit(1)

    # --- Initialize Components (ONCE) ---
    try:
        stream_extractor = StreamExtractor(
            ffmpeg_path=config.get('ffmpeg_path'),
            ffprobe_path=config.get('ffprobe_path'),
            subtitle_stream=config.get('subtitle_stream', 's:0'),
        )
        generator = TrackGenerator(config=config, stream_extractor=stream_extractor)
    except SubGpsError as e:
        logger.critical(f"Failed to initialize subgps components: {e}", exc_info=True)
        sys.exit(1)

    # --- Process Videos Sequentially ---
    total_files = len(sorted_video_paths)
    files_processed = 0
    files_failed = 0
    batch_start_time = time.time()

    logger.info(f"--- Starting Batch GPS Track Extraction for {total_files} files ---")

    # tqdm draws on stderr, stdout carries the offsets
    with tqdm(total=total_files, unit="video", desc="Starting Batch") as pbar:
        for video_path in sorted_video_paths:
            video_filename = os.path.basename(video_path)
            pbar.set_description(f"Processing: {video_filename[:30]}...")

            try:
                result = generator.generate(video_path)
                tqdm.write(f"{video_filename}\t{format_gps_offset(result)}", file=sys.stdout)
                files_processed += 1
            except (SubGpsError, FileNotFoundError) as e:
                logger.error(f"subgps failed for video '{video_filename}': {e}")
                files_failed += 1
            except KeyboardInterrupt:
                 logger.warning("Batch process interrupted by user (Ctrl+C). Exiting.")
                 sys.exit(1)
            except Exception as e:
                logger.error(f"An unexpected error occurred processing '{video_filename}': {e}", exc_info=True)
                files_failed += 1
            finally:
                 pbar.update(1)

    logger.info(f"--- Batch GPS Track Extraction Finished ---")
    logger.info(f"Total time: {time.time() - batch_start_time:.2f} seconds")
    logger.info(f"Successfully processed: {files_processed}/{total_files} videos")
    logger.info(f"Failed: {files_failed}/{total_files} videos")

    sys.exit(1 if files_failed > 0 else 0)


if __name__ == "__main__":
    if sys.version_info < (3, 8):
        sys.stderr.write("subgps requires Python 3.8 or later.\n")
        sys.exit(1)

    run_batch_processing()
