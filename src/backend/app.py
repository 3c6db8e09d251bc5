import logging

from contextlib import asynccontextmanager

from src.backend.common.config.app_config import config

# FastAPI imports
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Local imports
from src.backend.common.database.record_store import RecordStoreFactory
from src.backend.v1.api.dependencies import close_shared_session
from src.backend.v1.api.error_handling import register_exception_handlers
from src.backend.v1.api.router import app_v1


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage FastAPI application lifecycle - startup and shutdown."""
    logger = logging.getLogger(__name__)

    # Startup
    logger.info("🚀 Starting records sync backend...")
    yield

    # Shutdown
    logger.info("🛑 Shutting down records sync backend...")
    try:
        close_shared_session()
        RecordStoreFactory.close()
        logger.info("✅ Closed integration HTTP session and MongoDB client")
    except Exception as e:
        logger.error(f"❌ Error during shutdown cleanup: {e}")

    logger.info("👋 Records sync backend shutdown complete")


# Configure logging levels from environment variables
logging.basicConfig(level=getattr(logging, config.BASIC_LOGGING_LEVEL.upper(), logging.INFO))

# Configure third-party package logging levels
package_level = getattr(logging, config.PACKAGE_LOGGING_LEVEL.upper(), logging.WARNING)
# Parse comma-separated logging packages
if config.LOGGING_PACKAGES:
    packages = [pkg.strip() for pkg in config.LOGGING_PACKAGES.split(",") if pkg.strip()]
    for logger_name in packages:
        logging.getLogger(logger_name).setLevel(package_level)

# Initialize the FastAPI app
app = FastAPI(lifespan=lifespan)

frontend_url = config.FRONTEND_SITE_NAME

app.add_middleware(
    CORSMiddleware,
    allow_origins=[frontend_url] if frontend_url else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)
app.include_router(app_v1)
logging.info("Registered record endpoints")


@app.get("/health")
async def health():
    """Liveness probe."""
    return {"status": "ok"}


# Run the app
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.backend.app:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
        log_level="info",
        access_log=False,
    )
