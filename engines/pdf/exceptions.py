"""
Errors raised while producing PDF/A documents.

Only ProcessingError is meant to be handled by callers. Broken internal
invariants surface as ValueError / TypeError / RuntimeError, which do not
derive from it.
"""

from typing import Optional


class ProcessingError(Exception):
    """
    A document could not be processed.

    Can be built from a message, a message and the underlying exception,
    or the underlying exception alone.

    Attributes:
        cause: The wrapped exception, if any
    """

    def __init__(self, message=None, cause: Optional[BaseException] = None):
        if isinstance(message, BaseException) and cause is None:
            message, cause = None, message
        if message is None:
            message = f"{type(cause).__name__}: {cause}" if cause is not None else "processing failed"
        super().__init__(message)
        self.message = message
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause
