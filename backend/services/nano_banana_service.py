"""
Integration with fal.ai Nano Banana image editing API
"""
import logging
import httpx
from typing import Optional
from PIL import Image
from pydantic import ValidationError

from config.settings import settings
from core.errors import ApiError, DecodeFailure, DownloadFailure, NoResultImage, TransportFailure
from core.image_codec import decode_bytes, to_data_url
from models.image_edit import NanoBananaEditRequest, NanoBananaEditResponse

logger = logging.getLogger(__name__)


class NanoBananaService:
    def __init__(
        self,
        api_key: Optional[str] = None,
        edit_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.FAL_API_KEY
        self.edit_url = edit_url or settings.FAL_EDIT_URL
        self.timeout = timeout or settings.HTTP_TIMEOUT_SECONDS
        self._transport = transport

    async def edit_image(self, image: Image.Image, prompt: str) -> Image.Image:
        """
        Edit an image using the Nano Banana model.

        Args:
            image: The source image to edit
            prompt: Text description of desired edits

        Returns:
            The edited image, downloaded from the first result URL

        Raises:
            ValueError: prompt is empty
            EncodeFailure: source image could not be encoded (nothing is sent)
            TransportFailure, ApiError, NoResultImage, DownloadFailure
        """
        if not prompt or not prompt.strip():
            raise ValueError("Prompt must not be empty")

        # Encoding happens before any request is issued
        data_url = to_data_url(image)

        payload = NanoBananaEditRequest(prompt=prompt, image_urls=[data_url])
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Key {self.api_key}",
        }

        logger.info(f"Calling Nano Banana API with prompt: {prompt}")

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                response = await client.post(self.edit_url, json=payload.model_dump(), headers=headers)
            except httpx.HTTPError as error:
                raise TransportFailure(error) from error

            if response.status_code != 200:
                raise ApiError(response.status_code, response.text)

            try:
                data = NanoBananaEditResponse.model_validate(response.json())
            except (ValueError, ValidationError) as error:
                raise ApiError(response.status_code, response.text) from error

            logger.debug(f"Nano Banana response: {data.model_dump_json()}")

            if not data.images:
                raise NoResultImage()

            return await self._download_image(client, data.images[0].url)

    async def _download_image(self, client: httpx.AsyncClient, url: str) -> Image.Image:
        """Download an image from a URL and decode it"""
        try:
            response = await client.get(url, follow_redirects=True)
        except httpx.HTTPError as error:
            raise DownloadFailure(url, str(error)) from error

        if response.status_code != 200:
            raise DownloadFailure(url, f"HTTP {response.status_code}")

        try:
            return decode_bytes(response.content)
        except DecodeFailure as error:
            raise DownloadFailure(url, str(error)) from error
