"""ASGI entrypoint for the server directory API."""

from server_directory.api.app import create_app
from server_directory.containers import build_container

app = create_app(build_container())
