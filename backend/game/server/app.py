from __future__ import annotations

import contextlib
from typing import TYPE_CHECKING

import structlog
from starlette.applications import Starlette
from starlette.responses import JSONResponse
from starlette.routing import Route

from game.messaging.render import TextHandRenderer
from game.messaging.router import CommandRouter
from game.messaging.signer import SchnorrSigner
from game.server.settings import BotServerSettings
from game.server.types import parse_event
from game.session.chain import SessionChain
from shared.build_info import APP_NAME, APP_VERSION, GIT_COMMIT
from shared.dal.exceptions import PersistenceError
from shared.db import Database, SqliteGameRepository
from shared.logging import setup_logging

logger = structlog.get_logger()

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from starlette.requests import Request


async def health(_request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok", "name": APP_NAME, "version": APP_VERSION, "commit": GIT_COMMIT})


async def _read_body(request: Request, limit: int) -> bytes | None:
    """Read the request body, or return None as soon as it exceeds limit bytes."""
    content_length = request.headers.get("content-length")
    if content_length is not None and content_length.isdigit() and int(content_length) > limit:
        return None
    chunks: list[bytes] = []
    size = 0
    async for chunk in request.stream():
        size += len(chunk)
        if size > limit:
            return None
        chunks.append(chunk)
    return b"".join(chunks)


async def handle_event(request: Request) -> JSONResponse:
    router: CommandRouter = request.app.state.command_router
    settings: BotServerSettings = request.app.state.settings

    raw_body = await _read_body(request, settings.max_request_body_size)
    if raw_body is None:
        return JSONResponse({"error": "Request body too large"}, status_code=413)
    try:
        event = parse_event(raw_body)
    except ValueError as e:
        logger.warning("malformed inbound event", error=str(e))
        return JSONResponse({"error": "Invalid event"}, status_code=400)

    structlog.contextvars.bind_contextvars(event_id=event.id)
    try:
        reply = await router.handle_event(event)
    except PersistenceError:
        logger.exception("persistence failure, last committed state kept")
        return JSONResponse({"error": "Internal error"}, status_code=500)
    except Exception:
        logger.exception("fatal error while handling event")
        return JSONResponse({"error": "Internal error"}, status_code=500)
    finally:
        structlog.contextvars.unbind_contextvars("event_id")

    if reply is None:
        return JSONResponse("")
    return JSONResponse(reply.model_dump())


def create_app(
    settings: BotServerSettings | None = None,
    command_router: CommandRouter | None = None,
) -> Starlette:
    if settings is None:  # pragma: no cover
        settings = BotServerSettings()  # ty: ignore[missing-argument]

    # When the app creates its own router, it owns the DB lifecycle.
    owned_db: Database | None = None

    if command_router is None:
        db = Database(settings.database_path)
        db.connect()
        owned_db = db
        chain = SessionChain(SqliteGameRepository(db))
        # identity is fixed for the lifetime of the process
        signer = SchnorrSigner(settings.secret_key)
        command_router = CommandRouter(chain, signer, TextHandRenderer())
        logger.info("bot identity loaded", pubkey=signer.public_key)

    routes = [
        Route("/health", health, methods=["GET"]),
        Route("/api", handle_event, methods=["POST"]),
    ]

    @contextlib.asynccontextmanager
    async def lifespan(_app: Starlette) -> AsyncIterator[None]:
        yield
        if owned_db is not None:
            owned_db.close()

    app = Starlette(routes=routes, lifespan=lifespan)
    app.state.settings = settings
    app.state.command_router = command_router

    logger.info("bot server ready", name=APP_NAME, version=APP_VERSION)
    return app


def get_app() -> Starlette:  # pragma: no cover
    """ASGI application factory for production use (e.g., uvicorn --factory)."""
    _settings = BotServerSettings()  # ty: ignore[missing-argument]
    setup_logging(log_dir=_settings.log_dir)
    return create_app(settings=_settings)
