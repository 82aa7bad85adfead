"""Shared FastAPI dependencies."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Request, Response

if TYPE_CHECKING:
    from food_system.containers import AppContainer
    from food_system.services.rate_limit import RateLimiter


def get_container(request: Request) -> AppContainer:
    """Return the container attached to the running app."""
    return request.app.state.container


def _client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def _apply_limit(limiter: RateLimiter, request: Request, response: Response) -> None:
    status = limiter.hit(_client_key(request))
    response.headers["X-RateLimit-Limit"] = str(status.limit)
    response.headers["X-RateLimit-Remaining"] = str(status.remaining)
    response.headers["X-RateLimit-Reset"] = str(int(status.reset_at.timestamp()))


async def enforce_api_rate_limit(request: Request, response: Response) -> None:
    """Apply the general per-client request limit."""
    _apply_limit(get_container(request).api_rate_limiter, request, response)


async def enforce_cooking_rate_limit(request: Request, response: Response) -> None:
    """Apply the stricter limit on starting cooking sessions."""
    _apply_limit(get_container(request).cooking_rate_limiter, request, response)
