"""ASGI entrypoint for the artisan dispatch API."""

from artisan_dispatch.api.app import create_app
from artisan_dispatch.containers import build_container

app = create_app(build_container())
