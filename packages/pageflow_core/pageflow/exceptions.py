"""Custom exceptions for pageflow."""

from typing import Optional


class PageflowError(Exception):
    """Base exception for pageflow errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ConfigurationError(PageflowError):
    """Exception raised for invalid page geometry, options or visibility rules."""

    pass


class ContentError(PageflowError):
    """Exception raised when a content tree is malformed."""

    pass


class ResourceError(PageflowError):
    """Exception raised when an image source cannot be resolved or decoded.

    The layout engine never lets this escape: it is downgraded to a
    diagnostic and the affected image is omitted.
    """

    def __init__(self, message: str, details: Optional[str] = None, source: Optional[str] = None):
        super().__init__(message, details)
        self.source = source


class LayoutError(PageflowError):
    """Exception raised during layout calculation."""

    pass


class RenderingError(PageflowError):
    """Exception raised when the drawing backend fails."""

    pass
