from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class GeminiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class InlineData(GeminiModel):
    mime_type: Optional[str] = Field(None, alias="mimeType")
    data: Optional[str] = None  # base64 image bytes


class Part(GeminiModel):
    text: Optional[str] = None
    inline_data: Optional[InlineData] = Field(None, alias="inlineData")

    @property
    def has_image(self) -> bool:
        return self.inline_data is not None and bool(self.inline_data.data)


class Content(GeminiModel):
    parts: List[Part] = []
    role: Optional[str] = None


class GenerationConfig(GeminiModel):
    response_modalities: List[str] = Field(
        default_factory=lambda: ["TEXT", "IMAGE"], alias="responseModalities"
    )


class GenerateContentRequest(GeminiModel):
    contents: List[Content]
    generation_config: GenerationConfig = Field(
        default_factory=GenerationConfig, alias="generationConfig"
    )

    @classmethod
    def from_prompt(cls, prompt: str) -> "GenerateContentRequest":
        """Single user turn carrying the prompt text."""
        return cls(contents=[Content(parts=[Part(text=prompt)], role="user")])

    def to_body(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class Candidate(GeminiModel):
    content: Optional[Content] = None
    finish_reason: Optional[str] = Field(None, alias="finishReason")


class GenerateContentResponse(GeminiModel):
    candidates: List[Candidate] = []

    def first_image_part(self) -> Optional[Part]:
        """First part of the first candidate that carries inline image bytes."""
        if not self.candidates or self.candidates[0].content is None:
            return None
        for part in self.candidates[0].content.parts:
            if part.has_image:
                return part
        return None
