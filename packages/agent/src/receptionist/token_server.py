"""Token API: exchanges a room name and user identity for a LiveKit access token.

The frontend calls GET /token?room=<room_name>&user=<user_name> and joins the
room with the returned token and server URL.
"""

from __future__ import annotations

import errno
import logging
import os
import socket
import threading

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from livekit import api

from .config import LiveKitCredentials, configure_logging, load_environment

logger = logging.getLogger(__name__)

DEFAULT_PORT = 8080

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}

app = FastAPI(title="Receptionist Token Server")


@app.middleware("http")
async def cors(request: Request, call_next):
    # Preflight requests never reach the routes
    if request.method == "OPTIONS":
        response = Response(status_code=200)
    else:
        response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


def create_token(credentials: LiveKitCredentials, room: str, user: str) -> str:
    """Sign a token letting `user` join, publish and subscribe in `room`."""
    token = (
        api.AccessToken(credentials.api_key, credentials.api_secret)
        .with_identity(user)
        .with_name(user)
        .with_grants(
            api.VideoGrants(
                room=room,
                room_join=True,
                can_publish=True,
                can_subscribe=True,
            )
        )
    )
    return token.to_jwt()


@app.get("/token")
async def issue_token(room: str | None = None, user: str | None = None):
    logger.info("Token request received: room=%s user=%s", room, user)

    if not room or not user:
        logger.info("Missing parameters: room=%s user=%s", bool(room), bool(user))
        return JSONResponse(
            status_code=400,
            content={"error": "Missing required parameters: room and user are required"},
        )

    credentials = LiveKitCredentials.from_env()
    missing = credentials.missing_required()
    logger.debug("Environment check: missing=%s url=%s", missing, credentials.url)
    if missing:
        logger.error("Missing LiveKit credentials: %s", ", ".join(missing))
        return JSONResponse(
            status_code=500,
            content={
                "error": (
                    "LiveKit credentials not configured. "
                    "Please set LIVEKIT_URL, LIVEKIT_API_KEY, and LIVEKIT_API_SECRET"
                )
            },
        )

    try:
        token = create_token(credentials, room, user)
    except Exception as e:
        logger.exception("Error generating token (%s): %s", type(e).__name__, e)
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to generate token", "message": str(e)},
        )

    logger.info("Token generated successfully, length: %d", len(token))
    return {
        "token": token,
        "serverUrl": credentials.url,
        "room": room,
        "user": user,
    }


@app.get("/health")
async def health():
    return {"status": "ok"}


def _resolve_port(port: int | None) -> int:
    if port is not None:
        return port
    raw = (os.getenv("PORT") or "").strip()
    if not raw:
        return DEFAULT_PORT
    try:
        return int(raw)
    except ValueError:
        logger.error("Invalid PORT %r, falling back to %d", raw, DEFAULT_PORT)
        return DEFAULT_PORT


def serve_token_api(host: str = "0.0.0.0", port: int | None = None) -> threading.Thread | None:
    """Serve the token API on a daemon thread.

    Returns None without raising if the port cannot be bound, so the agent
    worker keeps running without the token API.
    """
    port = _resolve_port(port)
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((host, port))
    except OSError as exc:
        sock.close()
        if exc.errno == errno.EADDRINUSE:
            logger.error("Port %d is already in use. Please use a different port.", port)
        else:
            logger.error("Token server error: %s", exc)
        return None

    server = uvicorn.Server(uvicorn.Config(app, log_level="info"))
    thread = threading.Thread(
        target=server.run,
        kwargs={"sockets": [sock]},
        name="token-server",
        daemon=True,
    )
    thread.start()
    logger.info("Token server running on port %d", port)
    logger.info("GET /token?room=<room_name>&user=<user_name> to generate tokens")
    return thread


if __name__ == "__main__":
    load_environment()
    configure_logging()
    uvicorn.run(app, host="0.0.0.0", port=_resolve_port(None), log_level="info")
