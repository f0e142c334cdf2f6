from typing import Optional, Tuple
import asyncio
import base64
import binascii
import logging

from core.supabase import get_supabase
from models.storage import DEFAULT_BUCKET

logger = logging.getLogger(__name__)


class StorageService:
    def __init__(self, supabase=None):
        self.supabase = supabase if supabase is not None else get_supabase()

    def _extract_public_url(self, url_response) -> Optional[str]:
        """Extract public URL from various response formats"""
        if hasattr(url_response, 'data') and url_response.data:
            return url_response.data.get('publicUrl') if isinstance(url_response.data, dict) else str(url_response.data)
        elif isinstance(url_response, dict) and 'publicUrl' in url_response:
            return url_response['publicUrl']
        elif isinstance(url_response, str):
            return url_response
        return None

    async def upload_base64_image(
        self,
        base64_image: str,
        filename: str,
        bucket: str = DEFAULT_BUCKET
    ) -> Tuple[bool, Optional[dict], Optional[str]]:
        """
        Decode a base64 image and store it in a Supabase Storage bucket.

        Returns:
            (success, {"url": public_url, "path": stored_path}, error_message)
        """
        try:
            try:
                image_bytes = base64.b64decode(base64_image, validate=True)
            except (binascii.Error, ValueError) as e:
                raise Exception(f"Invalid base64 image data: {e}")

            # Upload to Supabase Storage, never overwriting an existing object
            upload_response = await asyncio.to_thread(
                lambda: self.supabase.storage
                .from_(bucket)
                .upload(
                    filename,
                    image_bytes,
                    file_options={
                        'content-type': 'image/jpeg',
                        'cache-control': '3600',
                        'upsert': 'false'
                    }
                )
            )

            # Check for upload errors with different response formats
            if hasattr(upload_response, 'error') and upload_response.error:
                raise Exception(f"Failed to upload to Supabase Storage: {upload_response.error}")
            elif hasattr(upload_response, 'status_code') and upload_response.status_code >= 400:
                raise Exception(f"Failed to upload to Supabase Storage: HTTP {upload_response.status_code}")
            elif not upload_response:
                raise Exception("Upload failed: No response from Supabase Storage")

            stored_path = getattr(upload_response, 'path', None) or filename

            url_response = self.supabase.storage.from_(bucket).get_public_url(filename)
            public_url = self._extract_public_url(url_response)
            if not public_url:
                raise Exception("Failed to get public URL from Supabase Storage")

            logger.info(f"Stored {len(image_bytes)} bytes at {bucket}/{stored_path}")
            return True, {"url": public_url, "path": stored_path}, None

        except Exception as error:
            logger.error(f"Upload error: {error}")
            return False, None, str(error)
