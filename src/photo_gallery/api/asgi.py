"""ASGI entrypoint for the photo gallery."""

from photo_gallery.api.app import create_app
from photo_gallery.containers import build_container

app = create_app(build_container())
