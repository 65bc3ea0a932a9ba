"""
Custom exception classes for ytdlp-curses.

This module defines specific exception types for better error categorization
and handling throughout the application.
"""


class YtDlpCursesError(Exception):
    """Base exception for all ytdlp-curses errors."""
    pass


class ConfigurationError(YtDlpCursesError):
    """Exception raised for configuration loading/saving issues."""
    pass


class DownloadError(YtDlpCursesError):
    """Exception raised when the yt-dlp process cannot be started."""

    def __init__(self, executable, reason):
        """
        Initialize DownloadError.

        Args:
            executable: Path of the program that failed to start
            reason: Message of the underlying OS error
        """
        self.executable = str(executable)
        self.reason = str(reason)
        super().__init__(f"Could not start {self.executable}: {self.reason}")


class InvalidModeError(YtDlpCursesError, ValueError):
    """Exception raised when a command is requested for an unknown mode index."""

    def __init__(self, mode):
        self.mode = mode
        super().__init__(f"Invalid download mode: {mode!r}")
