"""FastAPI application entry point."""
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from anime_mirror.core.config import get_settings
from anime_mirror.core.logging import setup_logging

# Setup logging
logger = setup_logging("main")

STATIC_DIR = Path(__file__).parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialize services at startup."""
    try:
        from anime_mirror.services.controller import MirrorController
        from anime_mirror.services.generation import GenerationClient

        settings = get_settings()
        generation_client = GenerationClient(api_key=settings.api_key)
        app.state.controller = MirrorController(generation_client=generation_client)
        logger.info("Services initialized successfully")
    except Exception as exc:
        logger.error(
            "Service initialization failed, running in degraded mode",
            exc_info=True,
            extra={"error_type": type(exc).__name__},
        )
        # Continue without services; API endpoints return 503 until fixed

    yield


# Create FastAPI app
app = FastAPI(
    title="Anime Mirror",
    description="Pose with any character: upload a portrait, name a character, get a composite photo",
    version="0.1.0",
    lifespan=lifespan,
)

# Register routers
from anime_mirror.api.mirror import router as mirror_router  # noqa: E402

app.include_router(mirror_router)
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")


@app.get("/", include_in_schema=False)
async def index() -> FileResponse:
    """Serve the single-page front end."""
    return FileResponse(STATIC_DIR / "index.html")


@app.get("/health")
async def health_check(request: Request) -> dict:
    """Health check endpoint.

    Always returns HTTP 200; check `services.generation` for actual status.
    """
    controller = getattr(request.app.state, "controller", None)

    logger.info("Health check requested")
    return {
        "status": "ok",
        "version": app.version,
        "services": {
            "generation": "ok" if controller is not None else "unavailable",
        },
    }


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run("anime_mirror.main:app", host=settings.host, port=settings.port)
