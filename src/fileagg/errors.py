"""
Exception hierarchy for fileagg.
"""


class FileaggError(Exception):
    """Base exception for fileagg errors."""
    pass


class InvalidRootError(FileaggError):
    """Raised when the directory to aggregate is missing or not a directory."""
    pass


class ConfigFileError(FileaggError):
    """Raised when the extra ignore-patterns file cannot be loaded."""
    pass


class OutputError(FileaggError):
    """Raised when the output file cannot be created or written."""
    pass


class ClipboardError(FileaggError):
    """Raised when the clipboard cannot be initialised or set."""
    pass


class FileReadError(FileaggError):
    """Raised when a selected file cannot be read as text."""
    pass


class IgnoreFileError(FileaggError):
    """Raised when an ignore file met during the walk cannot be read."""
    pass
