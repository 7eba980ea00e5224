"""Handles loading configuration from YAML files."""

import yaml
import os
import logging
from typing import Optional
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    'ffmpeg_path': None,
    'ffprobe_path': None,
    'subtitle_stream': 's:0',
    'speed_factor': 1.0,
    'output_format': 'gpx',
    'log_dir': 'logs',
    'log_file': 'subgps.log',
}

class ConfigLoader:
    """Loads configuration settings from a YAML file on top of the built-in defaults."""

    def load_config(self, config_path: Optional[str] = None) -> dict:
        """
        Loads configuration from the specified YAML file path.

        Args:
            config_path: The path to the YAML configuration file. If None,
                         only the defaults are returned.

        Returns:
            A dictionary containing the defaults overlaid with the file's settings.

        Raises:
            FileNotFoundError: If the configuration file does not exist.
            ConfigurationError: If the file cannot be parsed as YAML, if there
                              are other reading errors, or if a value is invalid.
        """
        config = dict(DEFAULT_CONFIG)
        if config_path is None:
            logger.info("No configuration file given, using defaults.")
            return config

        logger.info(f"Attempting to load configuration from: {config_path}")
        if not os.path.exists(config_path):
            logger.error(f"Configuration file not found at path: {config_path}")
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        if not os.path.isfile(config_path):
             logger.error(f"Configuration path is not a file: {config_path}")
             raise ConfigurationError(f"Configuration path is not a file: {config_path}")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"Error parsing YAML configuration file {config_path}: {e}", exc_info=True)
            raise ConfigurationError(f"Invalid YAML format in {config_path}: {e}") from e
        except IOError as e:
            logger.error(f"Error reading configuration file {config_path}: {e}", exc_info=True)
            raise ConfigurationError(f"Could not read configuration file {config_path}: {e}") from e

        if loaded is None:
            # Empty file
            loaded = {}
        if not isinstance(loaded, dict):
            logger.error(f"Configuration file {config_path} did not load as a dictionary (root object).")
            raise ConfigurationError(f"Invalid YAML structure in {config_path}. Root must be a mapping (dictionary).")

        config.update(loaded)
        config['speed_factor'] = self.validate_speed_factor(config.get('speed_factor'))
        logger.info(f"Configuration loaded successfully from {config_path}")
        return config

    @staticmethod
    def validate_speed_factor(value) -> float:
        """
        Checks that a speed factor is a positive number.

        Raises:
            ConfigurationError: If it is not.
        """
        try:
            speed = float(value)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Speed factor must be a number, got {value!r}.") from e
        if not speed > 0:
            raise ConfigurationError(f"Speed factor must be positive, got {value!r}.")
        return speed
