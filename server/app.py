"""FastAPI application factory."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from models.errors import OracleUnavailable, QuoteParserError
from server.dependencies import get_config, get_orchestrator
from server.middleware import RequestIDMiddleware
from server.routes import health, parse, quotes
from server.utils import build_error_payload
from utils.logger import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup/shutdown logic."""
    logger.info("FastAPI server starting up")
    config = get_config()
    logger.info(f"Quote oracle: {config.get_model_info()}")

    for problem in config.validate():
        logger.warning(f"Configuration problem: {problem}")

    if config.persistence_enabled:
        from db import init_db

        try:
            init_db()
        except Exception as e:
            logger.error(f"Database initialisation failed; quotes will not be stored: {e}")

    try:
        get_orchestrator()
    except OracleUnavailable:
        logger.warning("Quote orchestrator not available until OPENAI_API_KEY is configured")

    yield

    logger.info("FastAPI server shutting down")


async def quote_parser_error_handler(request: Request, exc: QuoteParserError) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None)
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        f"Request failed: {exc.message}",
        extra={
            "extra_fields": {
                "request_id": request_id,
                "error_type": type(exc).__name__,
                "status_code": exc.status_code,
                "details": exc.details,
            }
        },
    )
    payload = build_error_payload(exc, expose_details=get_config().expose_error_details)
    return JSONResponse(status_code=exc.status_code, content=payload)


def create_app() -> FastAPI:
    """Factory function to create FastAPI application."""
    app = FastAPI(
        title="Hotel Quote Parser API",
        description="Extracts guestroom, meeting room and F&B totals from hotel quotes",
        version=health.VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(RequestIDMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(QuoteParserError, quote_parser_error_handler)

    app.include_router(health.router)
    app.include_router(parse.router)
    app.include_router(quotes.router)

    return app
