import json
import logging
import os
from collections.abc import AsyncIterator
from contextlib import aclosing, asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.responses import StreamingResponse

from ai_content_generator.api.schemas import (
    CopyResponse,
    FontThemeBody,
    FontThemeResponse,
    GenerateRequest,
    StateResponse,
    StateUpdate,
)
from ai_content_generator.content.prompts import FONT_THEMES
from ai_content_generator.content.types import FontTheme, GenerationRequest, SavedItem
from ai_content_generator.errors import GenerationError, GenerationInProgressError, ValidationError
from ai_content_generator.service.generator import ContentSession

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

session = ContentSession()


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    session.restore()
    yield
    session.shutdown()


app = FastAPI(title="ai-content-generator", version="0.1.0", lifespan=lifespan)


def _sse(payload: dict) -> str:
    return f"data: {json.dumps(payload, ensure_ascii=False)}\n\n"


def _state() -> StateResponse:
    state = session.state
    return StateResponse(
        prompt=state.prompt,
        content_type=state.content_type,
        creativity=state.creativity,
        length=state.length,
        content=state.content,
        is_loading=state.is_loading,
        error=state.error,
        font_theme=session.font_theme(),
        notification=session.notifier.current,
        saved_items=session.saved_items(),
    )


def _font_theme_response(theme: FontTheme) -> FontThemeResponse:
    display, body = FONT_THEMES[theme]
    return FontThemeResponse(font_theme=theme, display=display, body=body)


async def _event_stream(request: GenerationRequest) -> AsyncIterator[str]:
    try:
        async with aclosing(session.relay(request)) as fragments:
            async for text in fragments:
                yield _sse({"type": "chunk", "text": text})
    except GenerationError as exc:
        yield _sse({"type": "error", "message": exc.message})
        return
    yield _sse({"type": "done"})


def _start_stream(body: GenerateRequest | None) -> StreamingResponse:
    fields = body.model_dump() if body is not None else {}
    try:
        request = session.prepare(**fields)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.message) from exc
    except GenerationInProgressError as exc:
        raise HTTPException(status_code=409, detail=exc.message) from exc
    return StreamingResponse(
        _event_stream(request),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


@app.get("/healthz")
async def healthz() -> dict:
    return {"status": "ok"}


@app.get("/state", response_model=StateResponse)
async def get_state() -> StateResponse:
    return _state()


@app.patch("/state", response_model=StateResponse)
async def patch_state(body: StateUpdate) -> StateResponse:
    session.update(**body.model_dump())
    return _state()


@app.post("/generate")
async def generate(body: GenerateRequest) -> StreamingResponse:
    return _start_stream(body)


@app.post("/regenerate")
async def regenerate() -> StreamingResponse:
    return _start_stream(None)


@app.get("/saved", response_model=list[SavedItem])
async def list_saved() -> list[SavedItem]:
    return session.saved_items()


@app.post("/saved", response_model=SavedItem)
async def save_current() -> SavedItem:
    item = session.save()
    if item is None:
        raise HTTPException(status_code=400, detail="Nothing to save.")
    return item


@app.post("/saved/{item_id}/load", response_model=StateResponse)
async def load_saved(item_id: str) -> StateResponse:
    if session.load(item_id) is None:
        raise HTTPException(status_code=404, detail="Saved item not found.")
    return _state()


@app.delete("/saved/{item_id}", response_model=list[SavedItem])
async def delete_saved(item_id: str) -> list[SavedItem]:
    return session.delete(item_id)


@app.post("/clear", response_model=StateResponse)
async def clear() -> StateResponse:
    session.clear()
    return _state()


@app.post("/copy", response_model=CopyResponse)
async def copy() -> CopyResponse:
    return CopyResponse(content=session.copy())


@app.get("/font-theme", response_model=FontThemeResponse)
async def get_font_theme() -> FontThemeResponse:
    return _font_theme_response(session.font_theme())


@app.put("/font-theme", response_model=FontThemeResponse)
async def put_font_theme(body: FontThemeBody) -> FontThemeResponse:
    return _font_theme_response(session.set_font_theme(body.font_theme))


@app.delete("/notification")
async def dismiss_notification() -> dict:
    session.notifier.dismiss()
    return {"status": "ok"}


def main() -> None:
    import uvicorn

    host = os.getenv("HOST", "127.0.0.1")
    port = int(os.getenv("PORT", "8000"))
    uvicorn.run(app, host=host, port=port)
