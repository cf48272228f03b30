"""Image source collaborator for the journal flow.

The journal only stores a reference to the photo. An ImageSource is asked
for a still image and answers with a local file reference, or None when the
user cancels. It raises ImageSourceError / ImagePermissionError on failure.
"""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Tuple

from food_journal.domain.exceptions import ImagePermissionError, ImageSourceError

SUPPORTED_SUFFIXES = (".jpg", ".jpeg", ".png", ".heic", ".webp", ".gif")


class ImageOrigin(str, Enum):
    """Where the image should come from."""

    CAMERA = "camera"
    GALLERY = "gallery"


@dataclass(frozen=True)
class ImageRequest:
    """Parameters for one image request.

    Attributes:
        origin: Camera capture or gallery selection
        allows_editing: Whether the user may crop before confirming
        aspect: Crop aspect ratio as (width, height)
        quality: Compression quality hint in (0, 1]
    """

    origin: ImageOrigin
    allows_editing: bool = True
    aspect: Tuple[int, int] = (4, 3)
    quality: float = 0.8


@dataclass(frozen=True)
class ImageSelection:
    """A chosen image.

    Attributes:
        uri: Local file URI or path of the image
        request: The request this selection answers
    """

    uri: str
    request: Optional[ImageRequest] = None


class ImageSource(ABC):
    """Provides still images from a camera or gallery."""

    @abstractmethod
    def request_image(self, request: ImageRequest) -> Optional[ImageSelection]:
        """Ask for an image.

        Returns:
            ImageSelection, or None if the user cancelled

        Raises:
            ImagePermissionError: If access to the device was denied
            ImageSourceError: If the device failed to deliver an image
        """


class FileImageSource(ImageSource):
    """Console image source: the user types the path of an existing photo.

    Camera and gallery requests both end up as a local file; only the prompt
    differs. A blank answer cancels.
    """

    PROMPTS = {
        ImageOrigin.CAMERA: "Photo file to attach (blank to cancel): ",
        ImageOrigin.GALLERY: "Gallery image path (blank to cancel): ",
    }

    def __init__(
        self,
        prompt_fn: Callable[[str], str] = input,
        supported_suffixes: Tuple[str, ...] = SUPPORTED_SUFFIXES,
    ):
        self.prompt_fn = prompt_fn
        self.supported_suffixes = tuple(s.lower() for s in supported_suffixes)

    def request_image(self, request: ImageRequest) -> Optional[ImageSelection]:
        answer = self.prompt_fn(self.PROMPTS[ImageOrigin(request.origin)]).strip()
        if not answer:
            return None

        path = Path(answer).expanduser()
        if not path.is_file():
            raise ImageSourceError(f"No image file at {path}")
        if path.suffix.lower() not in self.supported_suffixes:
            raise ImageSourceError(
                f"Unsupported image type '{path.suffix}'. "
                f"Expected one of: {', '.join(self.supported_suffixes)}"
            )
        if not os.access(path, os.R_OK):
            raise ImagePermissionError(f"Permission denied reading {path}")

        return ImageSelection(uri=path.resolve().as_uri(), request=request)
