"""Exception hierarchy for notebook operations.

Validation errors are raised for conditions the caller can fix and re-run
(bad names, ambiguous pairs, malformed renumber specs). Precondition errors
are raised before any filesystem mutation for a directory level begins.
Filesystem failures are not wrapped and propagate as ``OSError``.
"""

from pathlib import Path


class NotebookError(Exception):
    """Base class for all notebook errors."""


class ValidationError(NotebookError):
    """Input that does not satisfy the naming or renumbering rules."""


class ConfigError(ValidationError):
    """The configuration file could not be parsed or holds invalid values."""


class ClassificationError(ValidationError):
    """An entry does not fit the naming grammar where it is required to."""

    def __init__(self, message: str, path: Path | str | None = None) -> None:
        self.path = path
        super().__init__(message.format(path=path) if path is not None else message)


class AmbiguousMatchError(ValidationError):
    """A short-name entry has zero or several full-name counterparts."""

    def __init__(self, path: Path | str, match_count: int) -> None:
        self.path = path
        self.match_count = match_count
        super().__init__(f"Short name entry with {match_count} matching full name entries: {path}")


class InvalidRenumberSpecError(ValidationError):
    """A token of the index-range mini-language could not be parsed."""

    def __init__(self, token: str, reason: str) -> None:
        self.token = token
        super().__init__(f"Invalid renumber spec '{token}': {reason}")


class RenumberCollisionError(ValidationError):
    """A renumbering batch would give two entries the same name."""


class PreconditionError(NotebookError):
    """The filesystem is not in a state the operation can start from."""


class DestinationNotEmptyError(PreconditionError):
    """The conversion destination already holds entries."""

    def __init__(self, path: Path | str) -> None:
        self.path = path
        super().__init__(f"The destination directory must be empty: {path}")


class SameSourceAndDestinationError(PreconditionError):
    """The conversion source and destination resolve to the same directory."""

    def __init__(self, path: Path | str) -> None:
        self.path = path
        super().__init__(f"The source path cannot be the same with the destination path: {path}")


class DirectoryExistsError(PreconditionError):
    """A directory that is about to be created already exists."""

    def __init__(self, path: Path | str) -> None:
        self.path = path
        super().__init__(f"Folder with name {Path(path).name} already exists: {path}")
