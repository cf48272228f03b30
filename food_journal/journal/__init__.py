"""Journal management flow and its image source collaborator."""

from .images import FileImageSource, ImageOrigin, ImageRequest, ImageSelection, ImageSource
from .service import JournalFlow, JournalForm

__all__ = [
    "JournalFlow",
    "JournalForm",
    "ImageSource",
    "FileImageSource",
    "ImageOrigin",
    "ImageRequest",
    "ImageSelection",
]
