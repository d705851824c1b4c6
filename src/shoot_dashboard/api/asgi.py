"""ASGI entrypoint for the shoot dashboard API."""

from shoot_dashboard.api.app import create_app
from shoot_dashboard.containers import build_container

app = create_app(build_container())
