import logging
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass

from ai_content_generator.config import Settings, get_settings
from ai_content_generator.content.types import (
    DEFAULT_CREATIVITY,
    DEFAULT_PROMPT,
    ContentType,
    FontTheme,
    GenerationRequest,
    ResponseLength,
    SavedItem,
    SessionSnapshot,
)
from ai_content_generator.errors import GenerationError, GenerationInProgressError, ValidationError
from ai_content_generator.providers.llm.gemini import GeminiProvider
from ai_content_generator.session.autosave import SessionAutosaver
from ai_content_generator.session.notifications import Notifier
from ai_content_generator.session.persistence import PersistenceManager
from ai_content_generator.storage.local_store import JsonFileStore

logger = logging.getLogger(__name__)


@dataclass
class SessionState:
    prompt: str = DEFAULT_PROMPT
    content_type: ContentType = ContentType.ARTICLE
    creativity: float = DEFAULT_CREATIVITY
    length: ResponseLength = ResponseLength.MEDIUM
    content: str = ""
    is_loading: bool = False
    error: str | None = None

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            prompt=self.prompt,
            content_type=self.content_type,
            content=self.content,
            creativity=self.creativity,
            length=self.length,
        )


class ContentSession:
    """In-memory generator state plus the user actions that change it.

    At most one generation runs at a time; ``prepare``/``start`` raise
    ``GenerationInProgressError`` while one is streaming and ``generate``
    returns False instead.
    """

    def __init__(
        self,
        persistence: PersistenceManager | None = None,
        provider: GeminiProvider | None = None,
        autosaver: SessionAutosaver | None = None,
        notifier: Notifier | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.persistence = persistence or PersistenceManager(
            JsonFileStore(self.settings.storage_path),
            max_saved_items=self.settings.max_saved_items,
        )
        self.provider = provider or GeminiProvider()
        self.autosaver = autosaver or SessionAutosaver(self.persistence, delay=self.settings.autosave_delay_seconds)
        self.notifier = notifier or Notifier(ttl=self.settings.notification_seconds)
        self.state = SessionState()

    def restore(self) -> bool:
        snapshot = self.persistence.load_session()
        if snapshot is None or not snapshot.content:
            return False
        self.state.prompt = snapshot.prompt
        self.state.content_type = snapshot.content_type
        self.state.content = snapshot.content
        if snapshot.creativity is not None:
            self.state.creativity = snapshot.creativity
        if snapshot.length is not None:
            self.state.length = snapshot.length
        logger.info("session.restored chars=%d", len(snapshot.content))
        self.notifier.notify("Session restored.")
        return True

    def update(
        self,
        prompt: str | None = None,
        content_type: ContentType | None = None,
        creativity: float | None = None,
        length: ResponseLength | None = None,
    ) -> None:
        self._apply_fields(prompt, content_type, creativity, length)
        self._schedule_autosave()

    def prepare(
        self,
        prompt: str | None = None,
        content_type: ContentType | None = None,
        creativity: float | None = None,
        length: ResponseLength | None = None,
    ) -> GenerationRequest:
        """Apply the fields and validate them without entering the loading state."""
        if self.state.is_loading:
            logger.warning("generate.rejected reason=in_progress")
            raise GenerationInProgressError()
        self._apply_fields(prompt, content_type, creativity, length)
        if not self.state.prompt.strip():
            self.state.error = ValidationError.default_message
            raise ValidationError()
        return GenerationRequest(
            prompt=self.state.prompt,
            content_type=self.state.content_type,
            creativity=self.state.creativity,
            length=self.state.length,
        )

    def start(self, request: GenerationRequest) -> None:
        if self.state.is_loading:
            logger.warning("generate.rejected reason=in_progress")
            raise GenerationInProgressError()
        self.state.is_loading = True
        self.state.error = None
        self.state.content = ""
        self.autosaver.cancel()
        self.persistence.clear_session()
        logger.info(
            "generate.start content_type=%s length=%s creativity=%.2f",
            request.content_type.value,
            request.length.value,
            request.creativity,
        )

    def begin(
        self,
        prompt: str | None = None,
        content_type: ContentType | None = None,
        creativity: float | None = None,
        length: ResponseLength | None = None,
    ) -> GenerationRequest:
        request = self.prepare(prompt, content_type, creativity, length)
        self.start(request)
        return request

    async def generate(
        self,
        prompt: str | None = None,
        content_type: ContentType | None = None,
        creativity: float | None = None,
        length: ResponseLength | None = None,
        on_fragment: Callable[[str], None] | None = None,
    ) -> bool:
        """Run one generation to completion; returns False when it failed or was refused.

        A refusal because another generation is streaming leaves the state untouched.
        """
        try:
            request = self.begin(prompt, content_type, creativity, length)
        except (ValidationError, GenerationInProgressError):
            return False

        def append(text: str) -> None:
            self.state.content += text
            if on_fragment is not None:
                on_fragment(text)

        try:
            await self.provider.generate_stream(request, append)
        except GenerationError as exc:
            self._fail(exc)
            return False
        finally:
            self._finish()
        return True

    async def relay(self, request: GenerationRequest) -> AsyncIterator[str]:
        """Start a prepared request and stream it, appending each fragment to the content.

        The loading state is entered on first iteration, so a stream that is
        never consumed leaves the session idle.
        """
        self.start(request)
        try:
            async for text in self.provider.stream(request):
                self.state.content += text
                yield text
        except GenerationError as exc:
            self._fail(exc)
            raise
        finally:
            self._finish()

    async def regenerate(self, on_fragment: Callable[[str], None] | None = None) -> bool:
        return await self.generate(on_fragment=on_fragment)

    def save(self) -> SavedItem | None:
        if not self.state.content.strip():
            return None
        item = SavedItem(
            prompt=self.state.prompt,
            content_type=self.state.content_type,
            content=self.state.content,
            creativity=self.state.creativity,
            length=self.state.length,
        )
        self.persistence.save_item(item)
        self.notifier.notify("Content saved successfully!")
        return item

    def load(self, item_id: str) -> SavedItem | None:
        item = self.persistence.find_item(item_id)
        if item is None:
            return None
        self.state.prompt = item.prompt
        self.state.content_type = item.content_type
        self.state.content = item.content
        if item.creativity is not None:
            self.state.creativity = item.creativity
        if item.length is not None:
            self.state.length = item.length
        self.state.error = None
        self._schedule_autosave()
        self.notifier.notify("Content loaded.")
        return item

    def delete(self, item_id: str) -> list[SavedItem]:
        items = self.persistence.delete_item(item_id)
        self.notifier.notify("Saved item deleted.")
        return items

    def clear(self) -> None:
        self.state.content = ""
        self.state.error = None
        self.autosaver.cancel()
        self.persistence.clear_session()

    def copy(self) -> str | None:
        if not self.state.content:
            return None
        self.notifier.notify("Content copied to clipboard!")
        return self.state.content

    def saved_items(self) -> list[SavedItem]:
        return self.persistence.load_saved_items()

    def font_theme(self) -> FontTheme:
        return self.persistence.load_font_theme()

    def set_font_theme(self, theme: FontTheme) -> FontTheme:
        theme = FontTheme(theme)
        self.persistence.save_font_theme(theme)
        return theme

    def shutdown(self) -> None:
        if self.autosaver.flush():
            logger.info("session.flushed_on_shutdown")

    def _apply_fields(
        self,
        prompt: str | None,
        content_type: ContentType | None,
        creativity: float | None,
        length: ResponseLength | None,
    ) -> None:
        if prompt is not None:
            self.state.prompt = prompt
        if content_type is not None:
            self.state.content_type = ContentType(content_type)
        if creativity is not None:
            self.state.creativity = min(max(float(creativity), 0.0), 1.0)
        if length is not None:
            self.state.length = ResponseLength(length)

    def _schedule_autosave(self) -> None:
        if self.state.is_loading:
            return
        self.autosaver.schedule(self.state.snapshot())

    def _fail(self, exc: GenerationError) -> None:
        logger.warning("generate.failed type=%s", exc.__class__.__name__)
        self.state.error = exc.message

    def _finish(self) -> None:
        self.state.is_loading = False
        logger.info("generate.finished chars=%d error=%s", len(self.state.content), self.state.error is not None)
        self._schedule_autosave()
