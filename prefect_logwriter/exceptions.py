class LogWriterError(Exception):
    """Base class for errors raised by prefect-logwriter."""


class StreamClosedError(LogWriterError, ValueError):
    """
    Raised when writing to a log writer that has already been closed.

    Subclasses ``ValueError`` so generic stream consumers treat it like any
    other write to a closed file.
    """

    def __init__(self, message: str = "The stream has been closed."):
        super().__init__(message)
