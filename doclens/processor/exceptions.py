class ProcessorError(Exception):
    """Base exception for all document processing errors."""


class NotFoundError(ProcessorError):
    """Raised when a document cannot be found in the database."""


class ForbiddenError(ProcessorError):
    """Raised when the caller does not own the requested document."""


class NotReadyError(ProcessorError):
    """Raised when an AI operation is requested before extraction completed."""


class FileMissingError(ProcessorError):
    """Raised when a document's backing file cannot be read from storage."""


class ExtractionInProgressError(ProcessorError):
    """Raised when an extraction is already running for the document."""


class UnsupportedFileTypeError(ProcessorError):
    """Raised when an upload has a MIME type that cannot be processed."""


class FileTooLargeError(ProcessorError):
    """Raised when an upload exceeds the configured size limit."""
