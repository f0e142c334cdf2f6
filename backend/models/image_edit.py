from pydantic import BaseModel
from typing import List, Optional


class NanoBananaEditRequest(BaseModel):
    prompt: str
    image_urls: List[str]  # data URLs or public URLs
    num_images: int = 1
    output_format: str = "png"


class NanoBananaImage(BaseModel):
    url: str
    content_type: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None


class NanoBananaEditResponse(BaseModel):
    images: List[NanoBananaImage] = []
    description: Optional[str] = None
