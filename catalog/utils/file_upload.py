# catalog/utils/file_upload.py

import hashlib
import logging
from pathlib import Path
from typing import Iterable, Optional

from PIL import Image

from catalog.core.decorator import (
    InvalidImageFormat,
    StorageException,
    ValidationException,
)

logger = logging.getLogger(__name__)

# Allowed file extensions (compared case-sensitively)
ALLOWED_IMAGE_EXTENSIONS = {".jpg"}
DEFAULT_IMAGE_SIZE = (200, 200)
DEFAULT_IMAGE_COLOR = (220, 220, 220)


def get_file_extension(filename: str) -> str:
    """
    Extract the extension of the final path segment, including the dot.

    Unlike ``Path.suffix`` a bare ".jpg" yields ".jpg", and case is kept
    so that ".JPG" is not mistaken for an accepted extension.
    """
    base = upload_basename(filename)
    dot = base.rfind(".")
    return base[dot:] if dot != -1 else ""


def upload_basename(filename: str) -> str:
    """Final path segment of an upload filename, as multipart parsers report it."""
    return filename.replace("\\", "/").rsplit("/", 1)[-1]


def content_address(
    original_filename: str,
    allowed_extensions: Iterable[str] = ALLOWED_IMAGE_EXTENSIONS,
) -> str:
    """
    Name a stored image by the SHA-256 of its original upload filename.

    Only the final path segment is hashed, so "photos/shoes.jpg" and
    "shoes.jpg" share an address.

    Args:
        original_filename: Filename supplied by the client
        allowed_extensions: Accepted extensions

    Returns:
        hex digest followed by the extension, e.g. "ab12...ef.jpg"

    Raises:
        InvalidImageFormat: If the extension is not accepted
    """
    extension = get_file_extension(original_filename)
    if extension not in set(allowed_extensions):
        raise InvalidImageFormat(
            f"image extension is not one of: {', '.join(sorted(allowed_extensions))}"
        )
    base = upload_basename(original_filename)
    digest = hashlib.sha256(base.encode("utf-8")).hexdigest()
    return f"{digest}{extension}"


class ImageStore:
    """Content-addressed image storage with a default-image fallback."""

    def __init__(
        self,
        image_dir: str = "images",
        default_image: str = "default.jpg",
        allowed_extensions: Optional[Iterable[str]] = None,
    ):
        """
        Initialize the image store.

        Args:
            image_dir: Directory holding the stored images
            default_image: Name of the image served when a lookup misses
            allowed_extensions: Accepted extensions (defaults to ".jpg")
        """
        self.image_dir = Path(image_dir)
        self.default_image = default_image
        self.allowed_extensions = set(
            allowed_extensions or ALLOWED_IMAGE_EXTENSIONS
        )

    @property
    def default_image_path(self) -> Path:
        return self.image_dir / self.default_image

    def content_address(self, original_filename: str) -> str:
        return content_address(original_filename, self.allowed_extensions)

    def ensure_default_image(self) -> Path:
        """Create the image directory and a placeholder default image if missing."""
        self.image_dir.mkdir(parents=True, exist_ok=True)
        path = self.default_image_path
        if not path.exists():
            placeholder = Image.new("RGB", DEFAULT_IMAGE_SIZE, color=DEFAULT_IMAGE_COLOR)
            placeholder.save(path, format="JPEG")
            logger.info(f"Created placeholder default image: {path}")
        return path

    def save(self, contents: bytes, original_filename: str) -> str:
        """
        Persist uploaded bytes under their content-addressed name.

        An existing image with the same name is overwritten.

        Args:
            contents: Raw image bytes
            original_filename: Filename supplied by the client

        Returns:
            The stored file name

        Raises:
            InvalidImageFormat: If the extension is not accepted
            StorageException: If the file cannot be written
        """
        file_name = self.content_address(original_filename)
        file_path = self.image_dir / file_name

        try:
            self.image_dir.mkdir(parents=True, exist_ok=True)
            with open(file_path, "wb") as f:
                f.write(contents)
        except OSError as e:
            raise StorageException(f"Error saving image: {e}") from e

        logger.debug(f"Saved image {original_filename!r} as {file_path}")
        return file_name

    def resolve(self, requested_file_name: str) -> Path:
        """
        Map a requested image name to a file on disk.

        Args:
            requested_file_name: Name taken from the request path

        Returns:
            Path of the stored image, or of the default image when absent

        Raises:
            ValidationException: If the name has the wrong extension or
                tries to leave the image directory
        """
        if not any(requested_file_name.endswith(ext) for ext in self.allowed_extensions):
            allowed = " or ".join(sorted(self.allowed_extensions))
            raise ValidationException(f"Image path does not end with {allowed}")

        if (
            "/" in requested_file_name
            or "\\" in requested_file_name
            or requested_file_name in (".", "..")
        ):
            raise ValidationException("Invalid image path")

        file_path = self.image_dir / requested_file_name
        if not file_path.is_file():
            logger.debug(f"Image not found: {file_path}")
            return self.default_image_path
        return file_path
