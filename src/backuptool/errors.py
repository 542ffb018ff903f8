class BackupToolError(Exception):
    """Base class for all errors that end a run with a diagnostic."""
    exit_code = 1


class UsageError(BackupToolError):
    """Bad or missing command-line arguments."""


class ValidationError(BackupToolError):
    """An input path, destination or configuration value is not usable."""


class ArchiveError(BackupToolError):
    """The archiver failed while compressing an input path."""


class ExtractError(BackupToolError):
    """The archiver failed while extracting a decrypted archive."""


class EncryptError(BackupToolError):
    """The cipher could not run or failed while encrypting."""


class DecryptError(BackupToolError):
    """The cipher failed while decrypting (bad passphrase or corrupt input)."""


class RunInterrupted(Exception):
    """Raised from the signal handlers to unwind a run after SIGINT/SIGTERM."""

    def __init__(self, signum):
        super().__init__(f"Interrupted by signal {signum}")
        self.signum = signum

    @property
    def exit_code(self):
        return 128 + self.signum
