"""
Photo store for listing images.
Accepts an image payload (data URI or remote URL) and returns the URL where it is hosted.

Two backends are provided:
* CloudinaryPhotoStore - uploads through the Cloudinary SDK, run off the event loop
* LocalPhotoStore - validates with PIL and writes under the upload directory with aiofiles
"""

import asyncio
import base64
import binascii
import io
import re
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, List

import aiofiles
import cloudinary
import cloudinary.exceptions
import cloudinary.uploader
from PIL import Image

from estate_admin.config import Settings, get_settings
from estate_admin.utils.exceptions import PhotoUploadError
import logging

logger = logging.getLogger(__name__)

DATA_URI_PATTERN = re.compile(r"^data:(?P<mime>[\w.+/-]+);base64,(?P<data>.*)$", re.DOTALL)

MIME_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "image/gif": ".gif",
}

PIL_FORMATS = {
    "image/jpeg": "jpeg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}


def is_remote_url(payload: str) -> bool:
    return payload.startswith(("http://", "https://"))


class PhotoStore(ABC):
    """Store a photo payload and return its public URL."""

    @abstractmethod
    async def upload(self, payload: Optional[str]) -> Optional[str]:
        """
        Upload a photo.

        Args:
            payload: Data URI of the image, or a remote URL

        Returns:
            Hosted URL, or None when the store produced no URL

        Raises:
            PhotoUploadError: If the store rejects or fails the upload
        """

    async def close(self) -> None:
        """Release any held resources."""


class LocalPhotoStore(PhotoStore):
    """Photo store writing validated images to the local upload directory."""

    def __init__(
        self,
        upload_dir: str,
        public_base_url: str,
        max_file_size: int,
        allowed_types: List[str]
    ):
        self.upload_dir = Path(upload_dir)
        self.public_base_url = public_base_url.rstrip("/")
        self.max_file_size = max_file_size
        self.allowed_types = allowed_types

    def decode_payload(self, payload: str) -> tuple:
        """
        Decode and validate a data URI payload.

        Args:
            payload: `data:<mime>;base64,<data>` string

        Returns:
            Tuple of (image bytes, mime type)

        Raises:
            PhotoUploadError: If the payload is not a supported, well-formed image
        """
        match = DATA_URI_PATTERN.match(payload.strip())
        if not match:
            raise PhotoUploadError("Photo must be a base64 data URI or an http(s) URL")

        mime_type = match.group("mime").lower()
        if mime_type not in self.allowed_types:
            raise PhotoUploadError(
                f"File type '{mime_type}' not allowed. Allowed types: {', '.join(self.allowed_types)}"
            )

        try:
            content = base64.b64decode(match.group("data"), validate=True)
        except (binascii.Error, ValueError) as e:
            raise PhotoUploadError(f"Invalid base64 image data: {str(e)}")

        if len(content) > self.max_file_size:
            max_mb = self.max_file_size / (1024 * 1024)
            raise PhotoUploadError(f"File size exceeds maximum allowed size of {max_mb:.1f}MB")

        # Validate image using PIL
        try:
            with Image.open(io.BytesIO(content)) as img:
                img.verify()
                pil_format = (img.format or "").lower()
        except Exception as e:
            raise PhotoUploadError(f"Invalid image file: {str(e)}")

        if pil_format != PIL_FORMATS.get(mime_type):
            raise PhotoUploadError(f"File content doesn't match declared type {mime_type}")

        return content, mime_type

    def _generate_file_path(self, mime_type: str) -> Path:
        photo_dir = self.upload_dir / "properties"
        photo_dir.mkdir(parents=True, exist_ok=True)
        return photo_dir / f"{uuid.uuid4()}{MIME_EXTENSIONS[mime_type]}"

    async def upload(self, payload: Optional[str]) -> Optional[str]:
        if not payload:
            return None

        if is_remote_url(payload):
            # Already hosted; nothing to store
            return payload

        content, mime_type = self.decode_payload(payload)
        file_path = self._generate_file_path(mime_type)

        try:
            async with aiofiles.open(file_path, "wb") as f:
                await f.write(content)
        except OSError as e:
            if file_path.exists():
                file_path.unlink()
            raise PhotoUploadError(f"Failed to save file: {str(e)}")

        relative_path = file_path.relative_to(self.upload_dir).as_posix()
        url = f"{self.public_base_url}/uploads/{relative_path}"
        logger.info(f"Stored photo locally: {url} ({len(content)} bytes)")
        return url


class CloudinaryPhotoStore(PhotoStore):
    """Photo store uploading to Cloudinary through the Cloudinary SDK."""

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        timeout: float = 30.0,
        folder: Optional[str] = None
    ):
        self.cloud_name = cloud_name
        self.timeout = timeout
        self.folder = folder
        cloudinary.config(
            cloud_name=cloud_name,
            api_key=api_key,
            api_secret=api_secret,
            secure=True
        )

    def _upload_options(self) -> dict:
        options = {"resource_type": "image", "timeout": self.timeout}
        if self.folder:
            options["folder"] = self.folder
        return options

    async def upload(self, payload: Optional[str]) -> Optional[str]:
        if not payload:
            return None

        # The SDK call blocks on network I/O
        try:
            result = await asyncio.to_thread(
                cloudinary.uploader.upload,
                payload,
                **self._upload_options()
            )
        except cloudinary.exceptions.Error as e:
            logger.error(f"Cloudinary upload failed: {e}")
            raise PhotoUploadError(str(e))

        url = result.get("secure_url") or result.get("url")
        logger.info(f"Uploaded photo to Cloudinary: {url}")
        return url


def create_photo_store(settings: Optional[Settings] = None) -> PhotoStore:
    """
    Build the photo store selected by `photo_store_backend`.

    Args:
        settings: Settings to read, defaults to the cached application settings

    Returns:
        PhotoStore instance
    """
    settings = settings or get_settings()

    if settings.photo_store_backend == "cloudinary":
        return CloudinaryPhotoStore(
            cloud_name=settings.cloudinary_cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret,
            timeout=settings.photo_upload_timeout,
            folder=settings.cloudinary_folder,
        )

    return LocalPhotoStore(
        upload_dir=settings.upload_dir,
        public_base_url=settings.public_base_url,
        max_file_size=settings.max_file_size,
        allowed_types=settings.allowed_file_types,
    )
