from contextlib import asynccontextmanager
import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.core.config_app import settings
from src.core.config_log import logger
from src.core.exceptions import setup_exception_handlers
from src.weather.fault_injection import FaultInjector
from src.weather.routes import weather_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: shared HTTP client and fault injector."""
    logger.info("Starting application")

    app.state.fault_injector = FaultInjector(every=settings.FAULT_INJECTION_EVERY)
    app.state.http_client = httpx.AsyncClient(timeout=settings.OPENWEATHER_TIMEOUT)
    if settings.FAULT_INJECTION_EVERY:
        logger.info(f"Fault injection enabled: every {settings.FAULT_INJECTION_EVERY}th request answers 503")

    try:
        yield
    finally:
        logger.info("Stopping application")
        await app.state.http_client.aclose()
        logger.info("Application stopped")


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.PROJECT_VERSION,
        description=settings.PROJECT_DESCRIPTION,
        lifespan=lifespan,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_exception_handlers(app)

    # The front-end calls /weather directly
    app.include_router(weather_router, prefix="/weather", tags=["Weather"], include_in_schema=False)
    app.include_router(weather_router, prefix="/api/v1/weather", tags=["Weather"])

    @app.get("/api/v1/health", tags=["Health"])
    async def health_check():
        """Application health check."""
        return {
            "status": "ok",
            "version": settings.PROJECT_VERSION,
            "service": settings.PROJECT_NAME
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=False,
        workers=1,
        log_level="info"
    )
