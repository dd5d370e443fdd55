# shop_service/media.py
import logging

import httpx
from fastapi import Depends

from shop_service.config import Settings, get_settings

logger = logging.getLogger(__name__)

TIMEOUT = 30  # seconds


class MediaUploadError(Exception):
    pass


class ImageKitUploader:
    """Stores image bytes on ImageKit and returns the public URL of the file."""

    def __init__(self, private_key, upload_url: str, folder: str = "/"):
        self.private_key = private_key
        self.upload_url = upload_url
        self.folder = folder

    async def upload(self, content: bytes, file_name: str) -> str:
        if not self.private_key:
            raise MediaUploadError("IMAGEKIT_PRIVATE_KEY is not configured")

        try:
            async with httpx.AsyncClient(timeout=TIMEOUT) as client:
                response = await client.post(
                    self.upload_url,
                    auth=(self.private_key, ""),
                    data={"fileName": file_name, "folder": self.folder},
                    files={"file": (file_name, content)},
                )
                response.raise_for_status()
                url = response.json().get("url")
        except httpx.HTTPError as e:
            raise MediaUploadError(f"Upload of {file_name} failed: {e}") from e

        if not url:
            raise MediaUploadError(f"Upload of {file_name} returned no url")
        logger.info("Uploaded %s to %s", file_name, url)
        return url


def get_media_uploader(settings: Settings = Depends(get_settings)) -> ImageKitUploader:
    return ImageKitUploader(
        private_key=settings.imagekit_private_key,
        upload_url=settings.imagekit_upload_url,
        folder=settings.imagekit_folder,
    )
