import logging
import httpx
from typing import Optional
from PIL import Image
from pydantic import ValidationError

from config.settings import settings
from core.errors import ApiError, NoCandidates, NoImageData, TransportFailure
from core.image_codec import decode_base64
from models.generation import GenerateContentRequest, GenerateContentResponse

logger = logging.getLogger(__name__)


class ImageGenerator:
    """Generates a new image from a text prompt with Gemini."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.GEMINI_API_KEY
        self.model = model or settings.GEMINI_MODEL
        self.base_url = (base_url or settings.GEMINI_BASE_URL).rstrip('/')
        self.timeout = timeout or settings.HTTP_TIMEOUT_SECONDS
        self._transport = transport

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    async def generate_image(self, prompt: str) -> Image.Image:
        """
        Generate an image for the prompt.

        Only the first inline image of the first candidate is used; any
        further image parts are ignored.

        Raises:
            ValueError: prompt is empty
            TransportFailure, ApiError, NoCandidates, NoImageData, DecodeFailure
        """
        if not prompt or not prompt.strip():
            raise ValueError("Prompt must not be empty")

        request = GenerateContentRequest.from_prompt(prompt)
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["x-goog-api-key"] = self.api_key

        logger.info(f"🎨 Generating image with {self.model}: {prompt}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.endpoint, json=request.to_body(), headers=headers)
        except httpx.HTTPError as error:
            raise TransportFailure(error) from error

        if response.status_code != 200:
            raise ApiError(response.status_code, response.text)

        try:
            data = GenerateContentResponse.model_validate(response.json())
        except (ValueError, ValidationError) as error:
            raise ApiError(response.status_code, response.text) from error

        if not data.candidates:
            raise NoCandidates()

        part = data.first_image_part()
        if part is None:
            raise NoImageData()

        return decode_base64(part.inline_data.data)
