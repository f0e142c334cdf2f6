import asyncio
from typing import Optional

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from config.settings import settings
from core.image_codec import encode_bytes
from core.lens import LensDisplay, UploadedFrameCamera
from models.lens import CaptureRequest, QueryRequest, LensStateResponse, LensHealthResponse
from services.lens_controller import LensController, build_lens_controller

router = APIRouter(prefix="/lens", tags=["lens"])

_controller: Optional[LensController] = None


def get_lens_controller() -> LensController:
    """Process-wide controller, created and started on first use"""
    global _controller
    if _controller is None:
        _controller = build_lens_controller(LensDisplay(), UploadedFrameCamera())
        _controller.start()
    return _controller


def reset_lens_controller() -> None:
    global _controller
    _controller = None


@router.post("/capture", response_model=LensStateResponse)
async def capture(capture_request: CaptureRequest):
    """Press the camera button with a frame supplied by the client"""
    controller = get_lens_controller()
    controller.camera.push_frame(capture_request.image_data)
    await asyncio.gather(*controller.camera_button.invoke())
    return controller.snapshot()


@router.post("/query", response_model=LensStateResponse)
async def query(query_request: QueryRequest):
    """Deliver a voice query to the lens"""
    controller = get_lens_controller()
    await asyncio.gather(*controller.query_event.invoke(query_request.query))
    return controller.snapshot()


@router.get("/state", response_model=LensStateResponse)
async def get_state():
    return get_lens_controller().snapshot()


@router.get("/image")
async def get_image():
    """Currently displayed image as PNG"""
    controller = get_lens_controller()
    image = controller.display.image
    if image is None:
        raise HTTPException(status_code=404, detail="No image displayed")
    return Response(content=encode_bytes(image, "PNG"), media_type="image/png")


@router.get("/health", response_model=LensHealthResponse)
async def check_lens_config():
    """Check which remote services are configured"""
    return LensHealthResponse(
        generation_configured=bool(settings.GEMINI_API_KEY),
        edit_configured=settings.edit_enabled,
        storage_configured=settings.storage_enabled,
    )
