# meeting_mailer/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings, settings as default_settings
from .errors import MailerError
from .schemas import ErrorOut
from .routes.pipeline import router as pipeline_router
from .services.dispatch import EmailDispatcher
from .services.summarize import make_openai_client

logger = logging.getLogger("meeting_mailer.api")


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, (level or "INFO").upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ========= error envelope =========
async def _mailer_error_handler(request: Request, exc: MailerError) -> JSONResponse:
    logger.error("[api] %s %s failed (%s): %s", request.method, request.url.path, type(exc).__name__, exc.message)
    return JSONResponse(ErrorOut(error=exc.message).model_dump(), status_code=exc.status_code)


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(x) for x in err.get("loc", ()) if x != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    message = "Invalid request: " + ("; ".join(parts) or "malformed body")
    logger.warning("[api] %s %s rejected: %s", request.method, request.url.path, message)
    return JSONResponse(ErrorOut(error=message).model_dump(), status_code=400)


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("[api] %s %s crashed: %r", request.method, request.url.path, exc, exc_info=exc)
    return JSONResponse(ErrorOut(error="Internal server error").model_dump(), status_code=500)


# ========= App =========
def create_app(
    settings: Optional[Settings] = None,
    *,
    llm_client: Any = None,
    dispatcher: Optional[EmailDispatcher] = None,
) -> FastAPI:
    """
    Provider handles are built once here and shared by all requests.
    Pass llm_client / dispatcher to swap in fakes.
    """
    s = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        app.state.http.close()

    app = FastAPI(title="Meeting Mailer API", version="0.1.0", lifespan=lifespan)
    app.state.settings = s
    app.state.http = httpx.Client(timeout=s.EMAIL_TIMEOUT_S)
    app.state.llm_client = llm_client if llm_client is not None else make_openai_client(
        s.OPENAI_API_KEY, timeout_s=s.LLM_TIMEOUT_S
    )
    app.state.dispatcher = dispatcher

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=s.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(MailerError, _mailer_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)

    # Routers
    app.include_router(pipeline_router)
    return app


configure_logging(default_settings.LOG_LEVEL)
app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run("meeting_mailer.main:app", host=default_settings.HOST, port=default_settings.PORT)
