from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
import uvicorn
from fastapi.middleware.cors import CORSMiddleware

from cryptoglance.api.errors import install_api_error_handlers
from cryptoglance.api.v1.router import api_router
from cryptoglance.application.container import shutdown_session, startup_session
from cryptoglance.core.config import settings
from cryptoglance.core.logging import configure_logging
from cryptoglance.infrastructure.db.init_db import init_db
from cryptoglance.infrastructure.db.session import get_engine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    configure_logging(level=settings.log_level, log_format=settings.log_format)
    logger.info("Starting CryptoGlance API in %s mode", settings.app_env)
    init_db(get_engine())
    await startup_session()
    yield
    await shutdown_session()


def create_app() -> FastAPI:
    application = FastAPI(
        title="CryptoGlance API",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.is_dev else None,
        redoc_url="/redoc" if settings.is_dev else None,
    )
    install_api_error_handlers(application)

    application.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(api_router, prefix="/api/v1")

    return application


app = create_app()


if __name__ == "__main__":
    uvicorn.run("cryptoglance.main:app", host="0.0.0.0", port=8000, reload=settings.is_dev)
