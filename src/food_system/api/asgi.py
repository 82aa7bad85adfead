"""ASGI entrypoint for the food system API."""

from food_system.api.app import create_app
from food_system.containers import build_container

app = create_app(build_container())
