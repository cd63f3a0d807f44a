"""ASGI entrypoint for the nutrient scanner API."""

from nutrient_scanner.api.app import create_app
from nutrient_scanner.containers import build_container

app = create_app(build_container())
