"""
Supabase storage client tests
"""
import base64
import httpx
import pytest

from conftest import json_body
from core.errors import ApiError, TransportFailure
from services.supabase_api import SupabaseAPI

SUPABASE_URL = "https://project.supabase.test"


def make_api(handler):
    return SupabaseAPI(SUPABASE_URL, "anon-key", transport=httpx.MockTransport(handler))


@pytest.mark.unit
@pytest.mark.asyncio
class TestUploadImage:
    async def test_upload_posts_to_edge_function(self, sample_image):
        captured = {}

        def handler(request):
            captured["request"] = request
            return httpx.Response(200, json={
                "url": f"{SUPABASE_URL}/storage/v1/object/public/snap-banana-images/original_1.jpg",
                "path": "original_1.jpg",
            })

        url = await make_api(handler).upload_image(sample_image, "original_1.jpg")

        assert url.endswith("/snap-banana-images/original_1.jpg")
        request = captured["request"]
        assert str(request.url) == f"{SUPABASE_URL}/functions/v1/upload-image"
        assert request.headers["Authorization"] == "Bearer anon-key"
        body = json_body(request)
        assert body["filename"] == "original_1.jpg"
        assert body["bucket"] == "snap-banana-images"
        assert base64.b64decode(body["base64Image"])[:2] == b"\xff\xd8"

    async def test_upload_non_200(self, sample_image):
        def handler(request):
            return httpx.Response(500, text='{"error": "The resource already exists"}')

        with pytest.raises(ApiError) as exc_info:
            await make_api(handler).upload_image(sample_image, "original_1.jpg")

        assert exc_info.value.status == 500
        assert "already exists" in exc_info.value.body

    async def test_upload_transport_error(self, sample_image):
        def handler(request):
            raise httpx.ConnectError("dns failure", request=request)

        with pytest.raises(TransportFailure):
            await make_api(handler).upload_image(sample_image, "original_1.jpg")


@pytest.mark.unit
@pytest.mark.asyncio
class TestEditRecords:
    async def test_create_edit_record(self):
        captured = {}

        def handler(request):
            captured["request"] = request
            return httpx.Response(201, json=[{"id": "abc-123", "original_image_url": "https://cdn.test/o.jpg"}])

        record_id = await make_api(handler).create_edit_record("https://cdn.test/o.jpg")

        assert record_id == "abc-123"
        request = captured["request"]
        assert request.method == "POST"
        assert str(request.url) == f"{SUPABASE_URL}/rest/v1/image_edits"
        assert request.headers["apikey"] == "anon-key"
        assert request.headers["Authorization"] == "Bearer anon-key"
        assert request.headers["Prefer"] == "return=representation"
        assert json_body(request) == {"original_image_url": "https://cdn.test/o.jpg", "device_info": "Spectacles"}

    async def test_create_edit_record_requires_201(self):
        def handler(request):
            return httpx.Response(200, json=[{"id": "abc-123"}])

        with pytest.raises(ApiError) as exc_info:
            await make_api(handler).create_edit_record("https://cdn.test/o.jpg", "Spectacles (2024)")

        assert exc_info.value.status == 200

    async def test_create_edit_record_empty_representation(self):
        def handler(request):
            return httpx.Response(201, json=[])

        with pytest.raises(ApiError):
            await make_api(handler).create_edit_record("https://cdn.test/o.jpg")

    async def test_update_edit_record(self):
        captured = {}

        def handler(request):
            captured["request"] = request
            return httpx.Response(204)

        result = await make_api(handler).update_edit_record("abc-123", "https://cdn.test/e.jpg", "make it blue")

        assert result is True
        request = captured["request"]
        assert request.method == "PATCH"
        assert str(request.url) == f"{SUPABASE_URL}/rest/v1/image_edits?id=eq.abc-123"
        assert json_body(request) == {"edited_image_url": "https://cdn.test/e.jpg", "prompt": "make it blue"}

    async def test_update_edit_record_requires_204(self):
        def handler(request):
            return httpx.Response(404, text="not found")

        with pytest.raises(ApiError) as exc_info:
            await make_api(handler).update_edit_record("missing", "https://cdn.test/e.jpg", "p")

        assert exc_info.value.status == 404
        assert exc_info.value.body == "not found"


@pytest.mark.unit
class TestGenerateFilename:
    def test_format(self):
        assert SupabaseAPI.generate_filename("original", now_ms=1700000000123) == "original_1700000000123.jpg"

    def test_default_prefix(self):
        assert SupabaseAPI.generate_filename(now_ms=5).startswith("photo_")

    def test_different_milliseconds_never_collide(self):
        first = SupabaseAPI.generate_filename("original", now_ms=1700000000123)
        second = SupabaseAPI.generate_filename("original", now_ms=1700000000124)

        assert first != second

    def test_same_millisecond_collides(self):
        first = SupabaseAPI.generate_filename("original", now_ms=1700000000123)
        second = SupabaseAPI.generate_filename("original", now_ms=1700000000123)

        assert first == second
