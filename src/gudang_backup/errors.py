"""Error taxonomy for backup, restore, and file placement.

Parsing, validation, and transaction errors always abort the operation and
propagate to the caller.  Storage placement errors (``PermissionDenied``,
``StorageWriteFailure``) are recovered inside the storage resolver by
falling back to internal storage; ``TotalStorageFailure`` is turned into an
``unknown``-location reference rather than raised to callers.

Usage:
    from gudang_backup.errors import InvalidFormat, UnsupportedVersion

    try:
        await importer.import_file(path)
    except (InvalidFormat, UnsupportedVersion) as e:
        show(e.user_message)
"""


class BackupError(Exception):
    """Base class for every error raised by this package.

    ``user_message`` is the text a screen can show verbatim; ``str(error)``
    may carry more technical detail for logs.
    """

    default_message = "The operation could not be completed."

    def __init__(self, message: str | None = None, *, user_message: str | None = None) -> None:
        super().__init__(message or self.default_message)
        self.user_message = user_message or self.default_message


class InvalidFormat(BackupError):
    """Snapshot cannot be parsed or lacks the required ``tables`` object."""

    default_message = "The backup file is not valid. Make sure you picked the right file."


class UnsupportedVersion(BackupError):
    """Snapshot was written by a newer schema version than this app supports."""

    default_message = "The backup was made by a newer version of the app. Update the app first."

    def __init__(self, found: int, supported: int) -> None:
        super().__init__(
            f"Backup version {found} is newer than supported version {supported}"
        )
        self.found = found
        self.supported = supported


class TransactionFailure(BackupError):
    """A delete or insert inside the restore transaction failed.

    The transaction has been rolled back; the original store error is
    available as ``__cause__``.
    """

    default_message = "Restore failed. Your data was not changed."


class OperationInProgress(BackupError):
    """An export or restore is already running on this service."""

    default_message = "Another backup operation is still running. Try again shortly."


class StorageUnavailable(BackupError):
    """No transient directory exists to stage a generated file."""

    default_message = "No temporary folder is available to prepare the file."


class ConfigError(BackupError):
    """Configuration file is unreadable or holds invalid values."""

    default_message = "The configuration file is invalid."


# ----------------------------------------------------------------------
# Storage placement
# ----------------------------------------------------------------------


class StorageError(BackupError):
    """Base for file placement failures; ``notice`` is shown to the user."""

    def __init__(self, message: str | None = None, *, notice: str | None = None) -> None:
        super().__init__(message, user_message=notice)
        self.notice = notice or self.default_message


class PermissionDenied(StorageError):
    """User declined (or the platform refused) the external directory grant."""

    default_message = (
        "The device did not allow choosing an external folder. "
        "The file was saved in the app folder."
    )


class StorageWriteFailure(StorageError):
    """Writing into a previously granted directory failed."""

    default_message = (
        "Could not save to the selected folder. The file was saved in the app folder."
    )


class TotalStorageFailure(StorageError):
    """Even the app's private directory could not receive the file."""

    default_message = "Could not move the file to the app folder."
