"""Utility functions for subgps."""

import os
import logging
from .exceptions import FileSystemError

logger = logging.getLogger(__name__)

def ensure_dir_exists(dir_path: str) -> None:
    """
    Ensures that a directory exists. Creates it if it doesn't.

    Args:
        dir_path: The path to the directory.

    Raises:
        FileSystemError: If the directory cannot be created due to permissions
                         or if the path exists but is not a directory.
    """
    if not dir_path:
        raise ValueError("Directory path cannot be empty.")
    try:
        if not os.path.exists(dir_path):
            os.makedirs(dir_path)
            logger.info(f"Created directory: {dir_path}")
        elif not os.path.isdir(dir_path):
            raise FileSystemError(f"Path exists but is not a directory: {dir_path}")
    except OSError as e:
        logger.error(f"Error creating or accessing directory {dir_path}: {e}", exc_info=True)
        raise FileSystemError(f"Could not create or access directory {dir_path}: {e}") from e

def derive_output_path(video_path: str, ext: str = "gpx") -> str:
    """Places the track log next to the video, e.g. /a/b/clip.MP4 -> /a/b/clip.gpx."""
    return f"{os.path.splitext(video_path)[0]}.{ext}"

def track_name_for(video_path: str) -> str:
    """Video file name without directory or extension."""
    return os.path.splitext(os.path.basename(video_path))[0]

def format_time_gpx(date: str, sec: int) -> str:
    """
    Builds the ISO 8601 timestamp for a trackpoint.

    The clock is derived from the video-relative second only. It is not
    carried into the date, so past 24 hours the hour field keeps growing.

    Args:
        date: Calendar date as YYYY-MM-DD.
        sec: Video-relative second.

    Returns:
        Timestamp string, e.g. "1994-03-23T00:00:42Z".
    """
    hrs = sec // 3600
    mins = (sec % 3600) // 60
    secs = sec % 60
    return f"{date}T{hrs:02d}:{mins:02d}:{secs:02d}Z"
