"""ASGI entrypoint for the pantry insights API."""

from pantry_insights.api.app import create_app
from pantry_insights.containers import build_container

app = create_app(build_container())
