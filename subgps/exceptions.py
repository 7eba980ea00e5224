"""Custom Exceptions for the subgps application."""

class SubGpsError(Exception):
    """Base class for exceptions in this module."""
    pass

class ConfigurationError(SubGpsError):
    """Exception raised for errors in configuration loading."""
    pass

class StreamExtractionError(SubGpsError):
    """Exception raised when the subtitle timestamps or raw stream cannot be read from the video."""
    pass

class TimestampError(SubGpsError):
    """Exception raised for malformed packet presentation timestamps."""
    pass

class TrackWriteError(SubGpsError):
    """Exception raised when the track log cannot be written."""
    pass

class FileSystemError(SubGpsError):
    """Exception raised for file system related errors (permissions, not found etc)."""
    pass
