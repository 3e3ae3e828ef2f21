import logging
from collections.abc import AsyncIterator, Callable
from typing import Any

from ai_content_generator.config import Settings
from ai_content_generator.content.prompts import GenerationParams, build_generation_params
from ai_content_generator.content.types import GenerationRequest
from ai_content_generator.errors import (
    AuthenticationError,
    CommunicationError,
    ConfigurationError,
    GenerationError,
)

logger = logging.getLogger(__name__)
ERROR_LOG_LIMIT = 1000
INVALID_KEY_MARKER = "API key not valid"


class GeminiProvider:
    """Streams Gemini output through its OpenAI-compatible endpoint.

    Settings are rebuilt on every request so the credential is picked up from
    the environment at the moment a generation starts, not at import time.
    """

    def __init__(self, settings_factory: Callable[[], Settings] = Settings) -> None:
        self.settings_factory = settings_factory

    async def stream(self, request: GenerationRequest) -> AsyncIterator[str]:
        settings = self.settings_factory()
        if not settings.api_key:
            logger.error("llm.config_missing env=API_KEY")
            raise ConfigurationError()

        params = build_generation_params(
            request.prompt,
            request.content_type,
            request.creativity,
            request.length,
        )
        llm = self._build_llm(settings, params)
        logger.info(
            "llm.request model=%s content_type=%s params=%s",
            settings.llm_model,
            request.content_type.value,
            params.as_meta(),
        )

        fragments = 0
        chars = 0
        try:
            async for chunk in llm.astream(params.contents):
                text = self._message_text(getattr(chunk, "content", chunk))
                if not text:
                    continue
                fragments += 1
                chars += len(text)
                yield text
        except Exception as exc:
            logger.error(
                "llm.error model=%s type=%s detail=%s",
                settings.llm_model,
                exc.__class__.__name__,
                self._extract_error_detail(exc),
            )
            raise self._translate_error(exc) from exc
        logger.info("llm.response model=%s fragments=%d chars=%d", settings.llm_model, fragments, chars)

    async def generate_stream(self, request: GenerationRequest, on_fragment: Callable[[str], None]) -> int:
        """Relay every fragment to ``on_fragment`` in arrival order; return how many were delivered."""
        delivered = 0
        async for text in self.stream(request):
            on_fragment(text)
            delivered += 1
        return delivered

    def _build_llm(self, settings: Settings, params: GenerationParams):
        from langchain_openai import ChatOpenAI

        return ChatOpenAI(
            model=settings.llm_model,
            api_key=settings.api_key,
            base_url=settings.openai_base_url,
            temperature=params.temperature,
            max_tokens=params.max_output_tokens,
            max_retries=0,
            streaming=True,
            extra_body={"extra_body": {"google": {"thinking_config": {"thinking_budget": params.thinking_budget}}}},
        )

    @staticmethod
    def _translate_error(exc: Exception) -> GenerationError:
        status_code = getattr(exc, "status_code", None)
        message = str(getattr(exc, "message", None) or exc)
        if status_code in (401, 403) or INVALID_KEY_MARKER in message:
            return AuthenticationError()
        return CommunicationError()

    @staticmethod
    def _message_text(content: Any) -> str:
        if isinstance(content, str):
            return content
        if isinstance(content, list):
            parts: list[str] = []
            for item in content:
                if isinstance(item, dict):
                    if item.get("type", "text") == "text" and "text" in item:
                        parts.append(str(item["text"]))
                else:
                    parts.append(str(item))
            return "".join(parts)
        return "" if content is None else str(content)

    @staticmethod
    def _clip(text: str, limit: int) -> str:
        normalized = " ".join(text.split()).strip()
        if len(normalized) <= limit:
            return normalized
        return f"{normalized[:limit]}...(truncated)"

    def _extract_error_detail(self, exc: Exception) -> str:
        status_code = getattr(exc, "status_code", None)
        message = getattr(exc, "message", None) or str(exc)
        body = getattr(exc, "body", None)
        details = [f"status_code={status_code}" if status_code is not None else ""]
        if body is not None:
            details.append(f"body={body}")
        details.append(f"message={message}")
        return self._clip(" ".join([part for part in details if part]).strip(), ERROR_LOG_LIMIT)
