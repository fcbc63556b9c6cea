"""
Error types for settings-document handling.
Every failure carries the step it happened in so the GUI can tell the
operator where to intervene (supply a path, restore a backup, ...).
"""


class SettingsError(Exception):
    """Base exception for SqlStudio.bin handling."""
    step = "settings"


class PathNotFound(SettingsError):
    """No candidate directory contains the settings file."""
    step = "locate"


class DecodeError(SettingsError):
    """Settings file is corrupt, truncated or of an unsupported version."""
    step = "decode"


class EntryNotFound(SettingsError):
    """A server display name or login user name did not match anything."""
    step = "lookup"


class IndexCorruption(SettingsError):
    """The document reaches the same server entry twice."""
    step = "index"


class BackupFailed(SettingsError):
    """Copying the current settings file to its backup name failed."""
    step = "backup"


class WriteFailed(SettingsError):
    """Encoding or writing the new settings file failed."""
    step = "write"
