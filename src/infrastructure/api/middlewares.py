from __future__ import annotations

import logging
import os
import time

from fastapi import FastAPI, Request
from starlette.middleware.cors import CORSMiddleware

logger = logging.getLogger("src.access")


def add_default_middlewares(app: FastAPI) -> None:
    # CORS: explicit list from CORS_ALLOW_ORIGINS, otherwise local dev origins
    # outside production and no cross-origin access in production
    env = os.getenv("ENV", "development")
    configured = os.getenv("CORS_ALLOW_ORIGINS")
    if configured:
        allowed_origins = [o.strip() for o in configured.split(",") if o.strip()]
    elif env in ("development", "staging"):
        allowed_origins = [
            "http://localhost:3000",
            "http://localhost:5173",  # Vite default
            "http://127.0.0.1:3000",
            "http://127.0.0.1:5173",
        ]
    else:
        allowed_origins = []

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info("%s %s -> %d (%.1f ms)", request.method, request.url.path, response.status_code, elapsed_ms)
        return response
