from pydantic import BaseModel, Field

from ai_content_generator.content.types import ContentType, FontTheme, ResponseLength, SavedItem


class GenerateRequest(BaseModel):
    prompt: str | None = Field(default=None, description="Topic to write about; defaults to the current prompt.")
    content_type: ContentType | None = None
    creativity: float | None = Field(default=None, ge=0.0, le=1.0)
    length: ResponseLength | None = None


class StateUpdate(BaseModel):
    prompt: str | None = None
    content_type: ContentType | None = None
    creativity: float | None = Field(default=None, ge=0.0, le=1.0)
    length: ResponseLength | None = None


class FontThemeBody(BaseModel):
    font_theme: FontTheme


class FontThemeResponse(FontThemeBody):
    display: str
    body: str


class StateResponse(BaseModel):
    prompt: str
    content_type: ContentType
    creativity: float
    length: ResponseLength
    content: str
    is_loading: bool
    error: str | None
    font_theme: FontTheme
    notification: str | None
    saved_items: list[SavedItem]


class CopyResponse(BaseModel):
    content: str | None
