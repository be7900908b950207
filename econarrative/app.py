import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from econarrative import storage
from econarrative.auth import DEFAULT_SECRET, Authenticator, MemorySessionStore, SessionStore
from econarrative.git import GitError
from econarrative.routes import router

load_dotenv(Path.cwd() / ".env")

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path("data")


async def _io_failure(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=500, content={"detail": str(exc)})


def create_app(
    data_dir: Path | None = None, sessions: SessionStore | None = None
) -> FastAPI:
    resolved = data_dir or Path(os.getenv("DATA_DIR", str(DEFAULT_DATA_DIR)))
    storage.init_storage(resolved)

    secret = os.getenv("AUTH_SECRET", "")
    if not secret:
        logger.warning("AUTH_SECRET is not set; using the built-in default secret")
        secret = DEFAULT_SECRET
    ttl_hours = float(os.getenv("TOKEN_TTL_HOURS", "24"))

    app = FastAPI(title="EcoNarrative Studio")
    app.state.authenticator = Authenticator(
        secret, sessions or MemorySessionStore(), ttl_seconds=ttl_hours * 3600
    )
    app.include_router(router, prefix="/api")

    # Disk, parse and git failures surface their message as a 500
    app.add_exception_handler(GitError, _io_failure)
    app.add_exception_handler(OSError, _io_failure)
    app.add_exception_handler(ValueError, _io_failure)

    return app


# Default app instance for uvicorn (uses DATA_DIR env var or default)
app = create_app()
