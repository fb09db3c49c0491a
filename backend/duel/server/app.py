from __future__ import annotations

import contextlib
import json
import time
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError
from starlette.applications import Starlette
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse, Response
from starlette.routing import Route, WebSocketRoute

from duel.logic.battlefield import build_battlefield
from duel.logic.enums import ErrorCode
from duel.logic.exceptions import DuelError, InvalidInputError
from duel.server.settings import DuelServerSettings
from duel.server.types import FireRequest, GameOverRequest, RegisterRequest
from duel.server.websocket import websocket_endpoint
from duel.session.manager import SessionManager
from shared.build_info import APP_VERSION, GIT_COMMIT
from shared.logging import setup_logging

logger = structlog.get_logger()

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from starlette.requests import Request
    from starlette.websockets import WebSocket

# Registration conflicts get their own status codes; every other rejection is a 400.
ERROR_STATUS: dict[ErrorCode, int] = {
    ErrorCode.DUPLICATE_NAME: 409,
    ErrorCode.SESSION_FULL: 403,
}


def _error_response(error: DuelError) -> JSONResponse:
    status = ERROR_STATUS.get(error.code, 400)
    logger.info("request rejected", error_code=error.code, error_message=error.message, status=status)
    return JSONResponse({"details": error.message}, status_code=status)


async def _read_json_body(request: Request) -> dict[str, Any]:
    """Read and decode a JSON object body, raising InvalidInputError for anything else."""
    settings: DuelServerSettings = request.app.state.settings
    raw_body = await request.body()
    if len(raw_body) > settings.max_request_body_size:
        raise InvalidInputError("Request body too large")
    try:
        body = json.loads(raw_body)
    except (ValueError, UnicodeDecodeError):
        raise InvalidInputError("Invalid request body") from None
    if not isinstance(body, dict):
        raise InvalidInputError("Invalid request body")
    return body


def _invalid_fields(error: ValidationError) -> InvalidInputError:
    if any(e["type"] == "missing" for e in error.errors()):
        return InvalidInputError("Missing required fields")
    return InvalidInputError("Invalid field types")


async def health(request: Request) -> JSONResponse:
    session_manager: SessionManager = request.app.state.session_manager
    return JSONResponse(
        {
            "status": "ok",
            "timestamp": datetime.now(UTC).isoformat(),
            "uptime": round(time.monotonic() - request.app.state.started_at, 3),
            "players": session_manager.player_count,
            "phase": session_manager.phase.value,
            "version": APP_VERSION,
            "commit": GIT_COMMIT,
        },
    )


async def register(request: Request) -> JSONResponse:
    session_manager: SessionManager = request.app.state.session_manager
    try:
        body = await _read_json_body(request)
        try:
            register_request = RegisterRequest.model_validate(body)
        except ValidationError:
            raise InvalidInputError("Name is required") from None
        player_id = await session_manager.register(register_request.name)
    except DuelError as e:
        return _error_response(e)
    return JSONResponse({"playerId": player_id})


async def fire(request: Request) -> Response:
    session_manager: SessionManager = request.app.state.session_manager
    try:
        body = await _read_json_body(request)
        try:
            fire_request = FireRequest.model_validate(body)
        except ValidationError as e:
            raise _invalid_fields(e) from None
        await session_manager.fire(fire_request.to_command())
    except DuelError as e:
        return _error_response(e)
    return Response(status_code=200)


async def game_over(request: Request) -> Response:
    session_manager: SessionManager = request.app.state.session_manager
    try:
        body = await _read_json_body(request)
        try:
            game_over_request = GameOverRequest.model_validate(body)
        except ValidationError as e:
            raise _invalid_fields(e) from None
        await session_manager.report_game_over(game_over_request.to_command())
    except DuelError as e:
        return _error_response(e)
    return Response(status_code=200)


def create_app(
    settings: DuelServerSettings | None = None,
    session_manager: SessionManager | None = None,
) -> Starlette:
    if settings is None:
        settings = DuelServerSettings()

    if session_manager is None:
        session_manager = SessionManager(build_battlefield(settings))

    async def ws_endpoint(websocket: WebSocket) -> None:
        await websocket_endpoint(websocket, session_manager)

    routes = [
        Route("/api/v1/health", health, methods=["GET"]),
        Route("/api/v1/register", register, methods=["POST"]),
        Route("/api/v1/fire", fire, methods=["POST"]),
        Route("/api/v1/game-over", game_over, methods=["POST"]),
        WebSocketRoute("/ws", ws_endpoint),
    ]

    @contextlib.asynccontextmanager
    async def lifespan(_app: Starlette) -> AsyncIterator[None]:
        yield
        await session_manager.close_all_connections()

    app = Starlette(routes=routes, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type"],
    )
    app.state.settings = settings
    app.state.session_manager = session_manager
    app.state.started_at = time.monotonic()

    logger.info("duel server ready")
    return app


def get_app() -> Starlette:  # pragma: no cover
    """ASGI application factory for production use (uvicorn duel.server.app:get_app --factory)."""
    settings = DuelServerSettings()
    setup_logging(log_dir=settings.log_dir)
    return create_app(settings=settings)
