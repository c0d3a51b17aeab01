from dataclasses import dataclass
from enum import StrEnum, auto
from typing import ClassVar


class ErrorKind(StrEnum):
    """Closed set of failure kinds a run can encounter."""

    INVALID_SIZE_FORMAT = auto()
    MISSING_PATH = auto()
    UNDECODABLE_FILE = auto()
    OVERSIZED_FILE = auto()
    TRAVERSAL_ENTRY_ERROR = auto()
    IO_FAILURE = auto()


@dataclass(frozen=True)
class ProomptError(Exception):
    """Base exception for errors in the proompt package."""

    kind: ClassVar[ErrorKind]

    @property
    def message(self) -> str:
        return self.kind.value

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class InvalidSizeFormatError(ProomptError):
    """Raised when a size string such as ``2MB`` cannot be parsed."""

    kind: ClassVar[ErrorKind] = ErrorKind.INVALID_SIZE_FORMAT

    value: str

    @property
    def message(self) -> str:
        return f"Invalid file size format: {self.value}"


@dataclass(frozen=True)
class MissingPathError(ProomptError):
    """Raised when a top-level input path does not exist."""

    kind: ClassVar[ErrorKind] = ErrorKind.MISSING_PATH

    path: str

    @property
    def message(self) -> str:
        return f"Error: Path does not exist: {self.path}"


@dataclass(frozen=True)
class UndecodableFileError(ProomptError):
    """A selected file is not valid UTF-8 text."""

    kind: ClassVar[ErrorKind] = ErrorKind.UNDECODABLE_FILE

    path: str

    @property
    def message(self) -> str:
        return f"Warning: Skipping file {self.path} due to UnicodeDecodeError"


@dataclass(frozen=True)
class OversizedFileError(ProomptError):
    """A selected file is larger than the configured size ceiling.

    Attributes:
        path: the file as displayed in diagnostics.
        actual: the human-readable size of the file.
        limit: the limit exactly as the user supplied it.
    """

    kind: ClassVar[ErrorKind] = ErrorKind.OVERSIZED_FILE

    path: str
    actual: str
    limit: str

    @property
    def message(self) -> str:
        return f"Warning: Skipping file {self.path} due to size limit ({self.actual} > {self.limit})"


@dataclass(frozen=True)
class TraversalEntryError(ProomptError):
    """A directory entry could not be read while walking a tree."""

    kind: ClassVar[ErrorKind] = ErrorKind.TRAVERSAL_ENTRY_ERROR

    path: str
    reason: str

    @property
    def message(self) -> str:
        return f"ERROR: {self.path}: {self.reason}"


@dataclass(frozen=True)
class IOFailureError(ProomptError):
    """Raised for read/write failures that abort the run."""

    kind: ClassVar[ErrorKind] = ErrorKind.IO_FAILURE

    path: str
    reason: str

    @classmethod
    def from_os_error(cls, error: OSError) -> "IOFailureError":
        """Build the failure from an ``OSError`` raised by a read or write."""
        return cls(path=str(error.filename or ""), reason=error.strerror or str(error))

    @property
    def message(self) -> str:
        if self.path:
            return f"Error: {self.reason}: {self.path}"
        return f"Error: {self.reason}"
