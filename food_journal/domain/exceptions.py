"""Flow-level exceptions.

Storage failures live in food_journal.persistence.exceptions; the errors here
are raised by input checks and by the image source collaborator.
"""

from typing import Optional


class ValidationError(Exception):
    """Raised when user input fails a local check.

    Validation happens before any storage call, so nothing needs to be rolled
    back or logged when this is raised.
    """

    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(message)


class ImageSourceError(Exception):
    """Raised when the camera or gallery cannot deliver an image."""

    pass


class ImagePermissionError(ImageSourceError, PermissionError):
    """Raised when access to the camera or gallery is denied."""

    pass
