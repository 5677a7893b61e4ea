"""filedrop backend application.

Main entry point for the filedrop service: a small server-side toolkit
built around multipart file upload ingestion.

Modules:
    - files: multipart upload ingestion, content sniffing, forced downloads
    - envelope: {error, message, data} JSON responses and strict JSON reading
    - text: URL slug generation
"""
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from filedrop.config import get_config
from filedrop.files.router import router as files_router
from filedrop.files.writer import ensure_directory
from filedrop.text.router import router as text_router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

# python-multipart logs every parsed part at DEBUG
for _noisy in ("multipart", "python_multipart"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown events."""
    config = get_config()

    # Apply configured log level to root logger so that
    # `logging.level: "debug"` in filedrop.settings.yaml activates DEBUG output.
    configured_level = getattr(logging, config.logging.level.upper(), None)
    if configured_level is not None:
        logging.getLogger().setLevel(configured_level)
        logger.info("Root logger level set to %s", config.logging.level.upper())

    upload_dir = ensure_directory(config.uploads.upload_dir)
    logger.info(
        f"Uploads stored in {upload_dir} "
        f"(rename={config.uploads.rename}, limit={config.uploads.max_total_bytes} bytes)"
    )

    yield  # Application runs here

    logger.info("Application shutdown complete")


app = FastAPI(
    title="filedrop API",
    description="Multipart upload ingestion with content sniffing",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(files_router)
app.include_router(text_router)


@app.get("/health")
async def health() -> dict:
    """Health check endpoint.

    Returns:
        dict: Status object indicating the server is running.
    """
    return {"status": "ok"}


def run() -> None:
    """Serve the application with uvicorn on the configured host and port."""
    config = get_config()
    uvicorn.run(
        app,
        host=config.server.host,
        port=config.server.port,
        log_level=config.logging.level.lower(),
    )
