"""ASGI entrypoint for the property inspection API."""

from property_inspection.api.app import create_app
from property_inspection.containers import build_container

app = create_app(build_container())
