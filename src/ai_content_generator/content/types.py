import time
import uuid
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ContentType(str, Enum):
    ARTICLE = "Article"
    SUMMARY = "Summary"
    CAPTION = "Social Media Caption"
    PARAGRAPH = "Paragraph"


class ResponseLength(str, Enum):
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


class FontTheme(str, Enum):
    CYBERPUNK = "cyberpunk"
    RETRO = "retro"
    MODERN = "modern"


DEFAULT_PROMPT = "The future of artificial intelligence in 2077"
DEFAULT_CREATIVITY = 0.7


class GenerationRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    prompt: str
    content_type: ContentType = ContentType.ARTICLE
    creativity: float = Field(default=DEFAULT_CREATIVITY, ge=0.0, le=1.0)
    length: ResponseLength = ResponseLength.MEDIUM


def _now_ms() -> int:
    return int(time.time() * 1000)


class SavedItem(BaseModel):
    """A saved generation, stored with the camelCase keys the front end uses."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    prompt: str
    content_type: ContentType = Field(alias="contentType")
    content: str
    timestamp: int = Field(default_factory=_now_ms)
    creativity: float | None = Field(default=None, alias="creativityLevel")
    length: ResponseLength | None = Field(default=None, alias="responseLength")


class SessionSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    prompt: str
    content_type: ContentType = Field(alias="contentType")
    content: str = Field(alias="generatedContent")
    creativity: float | None = Field(default=None, alias="creativityLevel")
    length: ResponseLength | None = Field(default=None, alias="responseLength")
