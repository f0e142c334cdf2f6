"""
Integration with Supabase for persistent storage of images and metadata.

Images go through the upload-image Edge Function; edit metadata lives in the
image_edits table and is written through the REST interface.
"""
import logging
import time
import httpx
from typing import Optional
from PIL import Image

from config.settings import settings
from core.errors import ApiError, TransportFailure
from core.image_codec import INTERMEDIATE_QUALITY, encode_base64
from models.edit_record import CreateEditRecordPayload, UpdateEditRecordPayload
from models.storage import DEFAULT_BUCKET, UploadImagePayload

logger = logging.getLogger(__name__)


class SupabaseAPI:
    def __init__(
        self,
        supabase_url: str,
        supabase_key: str,
        bucket_name: str = DEFAULT_BUCKET,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.supabase_url = supabase_url.rstrip('/')
        self.supabase_key = supabase_key
        self.bucket_name = bucket_name
        self.timeout = timeout or settings.HTTP_TIMEOUT_SECONDS
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    def _db_headers(self) -> dict:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.supabase_key}",
            "apikey": self.supabase_key,
        }

    async def upload_image(self, image: Image.Image, filename: str) -> str:
        """
        Upload an image to Supabase Storage via the Edge Function.

        Returns:
            Public URL of the uploaded image
        """
        payload = UploadImagePayload(
            base64_image=encode_base64(image, "JPEG", INTERMEDIATE_QUALITY),
            filename=filename,
            bucket=self.bucket_name,
        )
        function_url = f"{self.supabase_url}/functions/v1/upload-image"

        logger.info(f"📸 Uploading image to Supabase: {filename}")

        try:
            async with self._client() as client:
                response = await client.post(
                    function_url,
                    json=payload.model_dump(by_alias=True),
                    headers={
                        "Content-Type": "application/json",
                        "Authorization": f"Bearer {self.supabase_key}",
                    },
                )
        except httpx.HTTPError as error:
            raise TransportFailure(error) from error

        if response.status_code != 200:
            logger.warning(f"Upload error response: {response.text}")
            raise ApiError(response.status_code, response.text)

        try:
            public_url = response.json()["url"]
        except (ValueError, KeyError, TypeError) as error:
            raise ApiError(response.status_code, response.text) from error

        logger.info(f"✅ Upload successful! URL: {public_url}")
        return public_url

    async def create_edit_record(self, original_image_url: str, device_info: Optional[str] = None) -> str:
        """
        Create a new row in the image_edits table.

        Returns:
            The server-assigned record id
        """
        payload = CreateEditRecordPayload(
            original_image_url=original_image_url,
            device_info=device_info or "Spectacles",
        )
        headers = self._db_headers()
        headers["Prefer"] = "return=representation"

        logger.info("💾 Creating database record...")

        try:
            async with self._client() as client:
                response = await client.post(
                    f"{self.supabase_url}/rest/v1/image_edits",
                    json=payload.model_dump(),
                    headers=headers,
                )
        except httpx.HTTPError as error:
            raise TransportFailure(error) from error

        if response.status_code != 201:
            raise ApiError(response.status_code, response.text)

        try:
            record_id = str(response.json()[0]["id"])
        except (ValueError, KeyError, IndexError, TypeError) as error:
            raise ApiError(response.status_code, response.text) from error

        logger.info(f"✅ Database record created: {record_id}")
        return record_id

    async def update_edit_record(self, record_id: str, edited_image_url: str, prompt: str) -> bool:
        """Update an existing record with the edited image and the prompt used"""
        payload = UpdateEditRecordPayload(edited_image_url=edited_image_url, prompt=prompt)

        logger.info("🎨 Updating database record with edit...")

        try:
            async with self._client() as client:
                response = await client.patch(
                    f"{self.supabase_url}/rest/v1/image_edits",
                    params={"id": f"eq.{record_id}"},
                    json=payload.model_dump(),
                    headers=self._db_headers(),
                )
        except httpx.HTTPError as error:
            raise TransportFailure(error) from error

        if response.status_code != 204:
            raise ApiError(response.status_code, response.text)

        logger.info("✅ Edit saved to database!")
        return True

    @staticmethod
    def generate_filename(prefix: str = "photo", now_ms: Optional[int] = None) -> str:
        """Timestamped filename; unique only down to wall-clock milliseconds."""
        timestamp = now_ms if now_ms is not None else int(time.time() * 1000)
        return f"{prefix}_{timestamp}.jpg"


def build_supabase_api() -> Optional[SupabaseAPI]:
    """Storage client from settings, or None when Supabase is not configured."""
    if not settings.storage_enabled:
        return None
    return SupabaseAPI(settings.SUPABASE_URL, settings.SUPABASE_KEY, settings.STORAGE_BUCKET)
