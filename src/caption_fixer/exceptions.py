"""Custom exceptions for caption-fixer."""

class CaptionFixerError(Exception):
    """Base exception for caption-fixer."""
    pass

class TimestampFormatError(CaptionFixerError, ValueError):
    """Malformed HH:MM:SS.mmm timestamp literal. Aborts the whole run."""
    pass

class ProfileError(CaptionFixerError):
    """Unknown profile or invalid profile settings."""
    pass
