"""Tests for the console image source."""

import os

import pytest

from food_journal.domain.exceptions import ImagePermissionError, ImageSourceError
from food_journal.journal.images import (
    FileImageSource,
    ImageOrigin,
    ImageRequest,
    ImageSelection,
)


def scripted(*answers):
    """Prompt function replaying answers and recording prompts."""
    replies = list(answers)
    prompts = []

    def prompt(text):
        prompts.append(text)
        return replies.pop(0)

    prompt.prompts = prompts
    return prompt


@pytest.fixture
def photo(tmp_path):
    path = tmp_path / "lunch.jpg"
    path.write_bytes(b"\xff\xd8\xff\xe0fake-jpeg")
    return path


class TestImageRequest:
    """Tests for request defaults."""

    def test_defaults(self):
        """Test the default crop and quality options."""
        request = ImageRequest(origin=ImageOrigin.CAMERA)

        assert request.allows_editing is True
        assert request.aspect == (4, 3)
        assert request.quality == 0.8


class TestFileImageSource:
    """Tests for FileImageSource."""

    def test_returns_file_uri(self, photo):
        """Test an existing image path becomes a file URI."""
        source = FileImageSource(prompt_fn=scripted(str(photo)))
        request = ImageRequest(origin=ImageOrigin.GALLERY)

        selection = source.request_image(request)

        assert isinstance(selection, ImageSelection)
        assert selection.uri == photo.resolve().as_uri()
        assert selection.uri.startswith("file://")
        assert selection.request is request

    def test_prompt_depends_on_origin(self, photo):
        """Test camera and gallery requests use their own prompts."""
        prompt = scripted(str(photo), str(photo))
        source = FileImageSource(prompt_fn=prompt)

        source.request_image(ImageRequest(origin=ImageOrigin.CAMERA))
        source.request_image(ImageRequest(origin=ImageOrigin.GALLERY))

        assert prompt.prompts == [
            FileImageSource.PROMPTS[ImageOrigin.CAMERA],
            FileImageSource.PROMPTS[ImageOrigin.GALLERY],
        ]

    def test_blank_answer_cancels(self):
        """Test an empty answer means the user cancelled."""
        source = FileImageSource(prompt_fn=scripted("   "))

        assert source.request_image(ImageRequest(origin=ImageOrigin.CAMERA)) is None

    def test_missing_file(self, tmp_path):
        """Test a path that does not exist is a source error."""
        source = FileImageSource(prompt_fn=scripted(str(tmp_path / "nope.jpg")))

        with pytest.raises(ImageSourceError, match="No image file"):
            source.request_image(ImageRequest(origin=ImageOrigin.GALLERY))

    def test_directory_is_not_an_image(self, tmp_path):
        """Test a directory path is refused."""
        source = FileImageSource(prompt_fn=scripted(str(tmp_path)))

        with pytest.raises(ImageSourceError):
            source.request_image(ImageRequest(origin=ImageOrigin.GALLERY))

    def test_unsupported_suffix(self, tmp_path):
        """Test non-image files are refused."""
        notes = tmp_path / "notes.txt"
        notes.write_text("not a photo")
        source = FileImageSource(prompt_fn=scripted(str(notes)))

        with pytest.raises(ImageSourceError, match="Unsupported image type"):
            source.request_image(ImageRequest(origin=ImageOrigin.GALLERY))

    def test_suffix_match_is_case_insensitive(self, tmp_path):
        """Test upper-case extensions are accepted."""
        photo = tmp_path / "DINNER.JPG"
        photo.write_bytes(b"jpeg")
        source = FileImageSource(prompt_fn=scripted(str(photo)))

        assert source.request_image(ImageRequest(origin=ImageOrigin.CAMERA)) is not None

    def test_custom_suffixes(self, photo):
        """Test the accepted extensions can be narrowed."""
        source = FileImageSource(prompt_fn=scripted(str(photo)), supported_suffixes=(".PNG",))

        with pytest.raises(ImageSourceError):
            source.request_image(ImageRequest(origin=ImageOrigin.CAMERA))

    @pytest.mark.skipif(
        not hasattr(os, "geteuid") or os.geteuid() == 0,
        reason="root can read files regardless of mode bits",
    )
    def test_unreadable_file(self, photo):
        """Test an unreadable image is reported as a permission failure."""
        photo.chmod(0o000)
        source = FileImageSource(prompt_fn=scripted(str(photo)))

        try:
            with pytest.raises(ImagePermissionError):
                source.request_image(ImageRequest(origin=ImageOrigin.CAMERA))
        finally:
            photo.chmod(0o644)
