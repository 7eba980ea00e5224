"""Command-Line Interface handler for subgps."""

import argparse
import logging
import os
import sys
from typing import Optional

from .config_loader import ConfigLoader
from .log_setup import setup_logging
from .stream_extractor import StreamExtractor
from .track_generator import TrackGenerator
from .track_formatter import format_gps_offset
from .exceptions import SubGpsError, ConfigurationError

logger = logging.getLogger(__name__) # Get logger for this module

DEFAULT_CONFIG_FILE = "config.yaml"

def resolve_config_path(config_arg: Optional[str]) -> Optional[str]:
    """An explicit --config must exist; otherwise ./config.yaml is used only when present."""
    if config_arg:
        return config_arg
    if os.path.isfile(DEFAULT_CONFIG_FILE):
        return DEFAULT_CONFIG_FILE
    return None

def positive_float(value: str) -> float:
    """argparse type for --speed."""
    try:
        speed = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}")
    if not speed > 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value!r}")
    return speed

class CLIHandler:
    """Parses arguments and orchestrates the subgps process."""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """Creates the argument parser for the CLI."""
        parser = argparse.ArgumentParser(
            description="subgps: Extract the NMEA GPS track embedded in a dashcam video's subtitle stream as GPX. "
                        "Prints the GPS offset (video time of the first fix) on stdout.",
            formatter_class=argparse.ArgumentDefaultsHelpFormatter # Show defaults in help
        )
        parser.add_argument(
            "-v", "--video",
            required=True,
            help="Path to the input video file."
        )
        parser.add_argument(
            "-s", "--speed",
            type=positive_float,
            default=None, # Default taken from config
            help="Speed factor of the footage, e.g. 3 for 3x timelapse. Overrides the config file."
        )
        parser.add_argument(
            "-o", "--output",
            default=None,
            help="Path of the GPX file to write. Defaults to the video path with a .gpx extension."
        )
        parser.add_argument(
            "-c", "--config",
            default=None,
            help=f"Path to the configuration YAML file. {DEFAULT_CONFIG_FILE} is used if present."
        )
        parser.add_argument(
            "--log-level",
            default="INFO",
            choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            help="Set the logging level for console and file output."
        )
        return parser

    def run(self, argv=None) -> None:
        """Parses arguments, sets up logging, loads config, and runs the generator."""
        args = self.parser.parse_args(argv)

        # --- Setup Logging ---
        log_level = getattr(logging, args.log_level.upper(), logging.INFO)
        setup_logging(log_level=log_level, log_dir='logs', log_file='subgps_init.log')

        # --- Load Configuration ---
        config_path = resolve_config_path(args.config)
        try:
            config = ConfigLoader().load_config(config_path)
        except ConfigurationError as e:
            logger.critical(f"Failed to load configuration from {config_path}: {e}", exc_info=True)
            sys.exit(1)
        except FileNotFoundError:
             logger.critical(f"Configuration file not found: {config_path}")
             sys.exit(1)

        # --- Re-configure Logging with settings from Config ---
        setup_logging(log_level=log_level, log_dir=config['log_dir'], log_file=config['log_file'])
        logger.info("Logging re-configured with settings from config file.")

        # --- Apply CLI Overrides ---
        if args.speed is not None:
            logger.info(f"Overriding speed_factor from config with CLI argument: {args.speed}")
            config['speed_factor'] = args.speed

        if not os.path.isfile(args.video):
            logger.critical(f"Input video file not found or is not a file: {args.video}")
            sys.exit(1)

        try:
            stream_extractor = StreamExtractor(
                ffmpeg_path=config.get('ffmpeg_path'),
                ffprobe_path=config.get('ffprobe_path'),
                subtitle_stream=config.get('subtitle_stream', 's:0'),
            )
            generator = TrackGenerator(config=config, stream_extractor=stream_extractor)

            result = generator.generate(args.video, output_path=args.output)
            print(format_gps_offset(result))
            logger.info("subgps finished successfully.")
            sys.exit(0)

        except (SubGpsError, FileNotFoundError) as e:
             logger.error(f"A subgps error occurred: {e}")
             sys.exit(1)
        except KeyboardInterrupt:
             logger.warning("Process interrupted by user (Ctrl+C). Exiting.")
             sys.exit(1)
        except Exception as e:
             logger.critical(f"An unexpected critical error occurred at the top level: {e}", exc_info=True)
             sys.exit(2) # Use a different exit code for unexpected crashes

def main() -> None:
    """Console script entry point."""
    CLIHandler().run()
