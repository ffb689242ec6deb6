"""ASGI entrypoint for the sync trigger API."""

from asken_sync.api.app import create_app
from asken_sync.containers import build_container

app = create_app(build_container())
