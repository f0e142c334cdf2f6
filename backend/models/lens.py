from pydantic import BaseModel
from typing import Optional
from enum import Enum


class LensState(str, Enum):
    IDLE = "idle"
    CAPTURING = "capturing"
    CAPTURED = "captured"
    GENERATING = "generating"
    EDITING = "editing"


class CaptureRequest(BaseModel):
    image_data: str  # Base64 or data URL of the camera frame


class QueryRequest(BaseModel):
    query: str


class LensStateResponse(BaseModel):
    state: LensState
    text: str
    busy: bool
    has_active_image: bool
    record_id: Optional[str] = None


class LensHealthResponse(BaseModel):
    generation_configured: bool
    edit_configured: bool
    storage_configured: bool
