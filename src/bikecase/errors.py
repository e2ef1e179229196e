"""Exceptions raised by bikecase.

Every error is a subclass of BikecaseError so the CLI can render any of them
as a one-line diagnostic followed by its chain of causes.
"""


class BikecaseError(Exception):
    """Base exception for bikecase errors."""


class SourceParseError(BikecaseError):
    """The source text could not be split into lines and attributes."""

    def __init__(self, message: str, line_number: int, line: str):
        super().__init__(f"{message}\n  --> line {line_number}: {line}")
        self.line_number = line_number
        self.line = line


class ManifestBlockNotFoundError(BikecaseError):
    """The reserved fenced code block is missing from the doc comment."""


class MalformedManifestError(BikecaseError):
    """A manifest field has an unexpected type."""


class PathNotRepresentableError(BikecaseError):
    """A filesystem path cannot be expressed as UTF-8 text."""


class RemoteError(BikecaseError):
    """Base exception for remote store errors."""


class RemoteTransportError(RemoteError):
    """The HTTP request did not complete."""


class RemoteStatusError(RemoteError):
    """The remote store answered with an unexpected status code."""

    def __init__(self, method: str, url: str, expected: int, actual: int):
        super().__init__(f"{method} {url}: expected {expected}, got {actual}")
        self.expected = expected
        self.actual = actual


class RemoteContentMissingError(RemoteError):
    """The remote record holds no Rust source file."""


class RemoteContentAmbiguousError(RemoteError):
    """The remote record holds more than one Rust source file."""


class RemoteContentTruncatedError(RemoteError):
    """The remote store truncated the content of a file."""


class UpstreamNotSetError(RemoteError):
    """No remote record is associated and creating one was not requested."""


class FileOperationError(BikecaseError):
    """A filesystem operation failed."""


class CargoError(BikecaseError):
    """Invoking cargo failed."""


class ConfigError(BikecaseError):
    """The configuration file is invalid or incomplete."""


class PackageNotFoundError(BikecaseError):
    """No package or bin target matches the request."""


class WorkspaceError(BikecaseError):
    """The workspace is not in a usable state."""
