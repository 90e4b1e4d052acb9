"""
Exception classes for prstool.

Every error is fatal for the run: nothing in the package catches and retries these.
Filesystem errors are not wrapped and propagate as the builtin OSError subclasses.

Exception Hierarchy:
    PrsToolError (base)
        ParseError - catalog file missing or malformed
        UnknownFileTypeError - file extension without a known MIME type
        UnmappedReferenceError - playlist member without a remapped identifier
        ConfigurationError - required paths missing
"""


class PrsToolError(Exception):
    """
    Base exception for all prstool errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (paths, identifiers).
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class ParseError(PrsToolError):
    """
    Raised when a catalog cannot be loaded.

    Common causes:
        - the catalog file does not exist on the partition
        - the file is not well-formed XML
        - the root or records container does not match the partition's vocabulary
    """
    pass


class UnknownFileTypeError(PrsToolError):
    """Raised when an item is built for a file whose extension has no MIME type."""
    pass


class UnmappedReferenceError(PrsToolError):
    """
    Raised when a playlist refers to an identifier that has no live item.

    Signals a logic defect or a corrupted catalog; the partition is never saved.
    """
    pass


class ConfigurationError(PrsToolError):
    """Raised when a partition root path or the media root is not provided."""
    pass
