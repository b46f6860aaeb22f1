"""Layered dithering and glitch engine with a small HTTP front end."""

from .app import APP_VERSION, app, create_app
from . import processing
from .processing import process_layers

__version__ = APP_VERSION

__all__ = ["APP_VERSION", "__version__", "app", "create_app", "process_layers", "processing"]
