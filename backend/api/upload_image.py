from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from models.storage import UploadImagePayload, ImageUploadResponse, UploadErrorResponse
from services.storage_service import StorageService

router = APIRouter(prefix="/functions/v1", tags=["storage"])


def get_storage_service():
    return StorageService()


@router.post(
    "/upload-image",
    response_model=ImageUploadResponse,
    responses={400: {"model": UploadErrorResponse}, 500: {"model": UploadErrorResponse}},
    openapi_extra={"requestBody": {
        "required": True,
        "content": {"application/json": {"schema": UploadImagePayload.model_json_schema(by_alias=True)}},
    }},
)
async def upload_image(request: Request):
    """Decode a base64 image, store it in a bucket and return its public URL"""
    # Unreadable bodies get the same {error} shape as storage failures
    try:
        payload = UploadImagePayload.model_validate(await request.json())
    except Exception as e:
        return JSONResponse(status_code=500, content={"error": str(e)})

    if not payload.base64_image or not payload.filename:
        return JSONResponse(
            status_code=400,
            content={"error": "Missing base64Image or filename"}
        )

    try:
        storage_service = get_storage_service()
        success, result, error = await storage_service.upload_base64_image(
            payload.base64_image,
            payload.filename,
            payload.bucket
        )
    except Exception as e:
        return JSONResponse(status_code=500, content={"error": str(e)})

    if not success:
        return JSONResponse(status_code=500, content={"error": error})

    return ImageUploadResponse(url=result["url"], path=result["path"])
