import os
import logging
import logging.config
from typing import Optional

import yaml
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.schemas import (
    ApplyRequest,
    EditRequest,
    ErrorResponse,
    LayoutResponse,
    LineSchema,
    NoteListResponse,
    NoteStateResponse,
    RunSchema,
    SaveRequest,
    SpanSchema,
)
from notecheck.config import ApiSettings, Settings, load_settings
from notecheck.errors import (
    Cancelled,
    CheckError,
    ChoiceOutOfRange,
    IoError,
    NoteCheckError,
    NotFound,
    RangeError,
)
from notecheck.session import NoteSession

logger = logging.getLogger("api")

ERROR_STATUS = {
    NotFound: 404,
    ChoiceOutOfRange: 400,
    RangeError: 400,
    Cancelled: 409,
    CheckError: 502,
    IoError: 500,
}


def configure_logging(api_settings: ApiSettings) -> bool:
    """
    Apply the dictConfig file named in settings; basicConfig when it is
    missing or unusable. Returns True when the file was applied.
    """
    cfg_path = api_settings.logging_config
    if not cfg_path or not os.path.exists(cfg_path):
        logging.basicConfig(level=logging.INFO)
        return False
    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
        os.makedirs(api_settings.log_dir, exist_ok=True)
        logging.config.dictConfig(config)
    except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
        logging.basicConfig(level=logging.INFO)
        logger.warning("Ignoring logging config %s: %s", cfg_path, e)
        return False
    return True


def _state(session: NoteSession) -> NoteStateResponse:
    engine = session.engine
    return NoteStateResponse(
        name=session.name,
        content=engine.buffer.text,
        generation=engine.generation,
        state=engine.state.value,
        status=session.status,
        spans=[
            SpanSchema(
                id=s.id,
                start=s.start,
                end=s.end,
                message=s.message,
                choices=list(s.choices),
                actionable=s.actionable,
                label=engine.describe(s.id),
            )
            for s in engine.annotations
        ],
    )


def create_app(
    session: Optional[NoteSession] = None, settings: Optional[Settings] = None
) -> FastAPI:
    """
    Build the app around one NoteSession.

    Every endpoint that touches the session is a coroutine, so session
    access stays on the event loop thread.
    """
    settings = settings or load_settings()
    if session is None:
        session = NoteSession.from_settings(settings)

    app = FastAPI(
        title="Note Checker",
        version="0.1.0",
        description="Notes with grammar/style findings you can accept in place.",
    )
    app.state.session = session

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(NoteCheckError)
    async def handle_notecheck_error(request: Request, exc: NoteCheckError):
        status = ERROR_STATUS.get(type(exc), 500)
        logger.info("%s on %s: %s", exc.error_code, request.url.path, exc.message)
        body = ErrorResponse(error_code=exc.error_code, message=exc.message)
        return JSONResponse(status_code=status, content=body.model_dump())

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    @app.get("/notes", response_model=NoteListResponse)
    async def list_notes() -> NoteListResponse:
        return NoteListResponse(notes=session.notes())

    @app.post("/notes/new", response_model=NoteStateResponse)
    async def new_note() -> NoteStateResponse:
        session.new()
        return _state(session)

    @app.post("/notes/{name}/open", response_model=NoteStateResponse)
    async def open_note(name: str) -> NoteStateResponse:
        logger.info("Opening note %s", name)
        session.open(name)
        return _state(session)

    @app.post("/save", response_model=NoteStateResponse)
    async def save(req: SaveRequest) -> NoteStateResponse:
        session.save(req.name)
        return _state(session)

    @app.post("/edit", response_model=NoteStateResponse)
    async def edit(req: EditRequest) -> NoteStateResponse:
        session.edit(req.start, req.end, req.text)
        return _state(session)

    @app.post("/check", response_model=NoteStateResponse)
    async def check() -> NoteStateResponse:
        logger.info("Received /check request")
        await session.check()
        return _state(session)

    @app.post("/apply", response_model=NoteStateResponse)
    async def apply(req: ApplyRequest) -> NoteStateResponse:
        await session.accept(req.span_id, req.choice_index, req.generation)
        return _state(session)

    @app.get("/annotations", response_model=NoteStateResponse)
    async def annotations() -> NoteStateResponse:
        return _state(session)

    @app.get("/layout", response_model=LayoutResponse)
    async def layout() -> LayoutResponse:
        lines = [
            LineSchema(
                number=line.number,
                start=line.start,
                runs=[
                    RunSchema(
                        text=run.text,
                        start=run.start,
                        highlighted=run.is_highlighted,
                        span_id=run.span_id,
                    )
                    for run in line
                ],
            )
            for line in session.layout()
        ]
        return LayoutResponse(generation=session.engine.generation, lines=lines)

    return app


_settings = load_settings()
configure_logging(_settings.api)
app = create_app(settings=_settings)
