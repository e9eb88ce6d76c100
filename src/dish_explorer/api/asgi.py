"""ASGI entrypoint for the dish explorer API."""

from dish_explorer.api.app import create_app
from dish_explorer.containers import build_container

app = create_app(build_container())
