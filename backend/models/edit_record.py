from pydantic import BaseModel


class CreateEditRecordPayload(BaseModel):
    """New image_edits row, created when a photo is captured"""
    original_image_url: str
    device_info: str = "Spectacles"


class UpdateEditRecordPayload(BaseModel):
    """Fields set on the image_edits row once an edit succeeds"""
    edited_image_url: str
    prompt: str
