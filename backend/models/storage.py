from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

DEFAULT_BUCKET = "snap-banana-images"


class UploadImagePayload(BaseModel):
    """Body of the upload-image function. Fields are optional so a missing one maps to a 400."""
    model_config = ConfigDict(populate_by_name=True)

    base64_image: Optional[str] = Field(None, alias="base64Image")
    filename: Optional[str] = None
    bucket: str = DEFAULT_BUCKET


class ImageUploadResponse(BaseModel):
    url: str
    path: str


class UploadErrorResponse(BaseModel):
    error: str
