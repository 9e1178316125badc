"""
Exceptions raised by cflow combinators.

Only two situations are failures:
    - UsageError: a combinator was handed malformed input
    - ResourceError: an external resource could not be opened or read

Short-circuiting and end-of-data are NOT failures. They are ordinary
return values and never surface as exceptions.
"""

from typing import Optional


class CflowError(Exception):
    """Base class for all cflow errors."""
    pass


class UsageError(CflowError):
    """
    Raised when a combinator is constructed with malformed input.

    Examples:
        - empty range list
        - explicit step of zero
        - duplicate binding names
        - push capability used after its scope has closed

    Always raised before any iteration or evaluation begins.
    """
    pass


class ResourceError(CflowError):
    """Raised when an external resource cannot be opened or read."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path
