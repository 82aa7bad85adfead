"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI

from food_system.api.consumption import router as consumption_router
from food_system.api.cooking import router as cooking_router
from food_system.api.dependencies import enforce_api_rate_limit
from food_system.api.errors import install_error_handling
from food_system.api.hardware import router as hardware_router
from food_system.api.recipes import router as recipes_router
from food_system.app_logging import configure_logging
from food_system.containers import AppContainer
from food_system.services.scheduling import PeriodicTask


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    async def cleanup_rate_limits() -> None:
        removed = container.api_rate_limiter.cleanup()
        removed += container.cooking_rate_limiter.cleanup()
        if removed:
            logger.info("Removed expired rate limit buckets", extra={"count": removed})

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        cleanup_task = PeriodicTask(
            name="rate-limit-cleanup",
            interval_seconds=container.settings.rate_limit_cleanup_interval_seconds,
            callback=cleanup_rate_limits,
        )
        cleanup_task.start()
        logger.info(
            "Food system API started",
            extra={
                "environment": container.settings.environment,
                "storage_backend": container.settings.storage_backend,
            },
        )
        try:
            yield
        finally:
            await cleanup_task.stop()
            await app.state.container.close_resources()
            logger.info("Food system API stopped")

    app = FastAPI(title="Food System", lifespan=lifespan)
    app.state.container = container
    install_error_handling(app, container.settings.environment)

    rate_limited = [Depends(enforce_api_rate_limit)]
    app.include_router(recipes_router, dependencies=rate_limited)
    app.include_router(cooking_router, dependencies=rate_limited)
    app.include_router(consumption_router, dependencies=rate_limited)
    app.include_router(hardware_router, dependencies=rate_limited)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
