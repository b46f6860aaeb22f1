from __future__ import annotations

import json
import logging

from flask import Flask, jsonify, request
from PIL import Image, UnidentifiedImageError

from .config import SETTINGS, configure_logging
from .errors import DitherStudioError, InvalidDimensions, OutOfRangeParameter
from .processing.buffer import PixelBuffer
from .processing.catalog import TEMPLATES, algorithm_catalog, layer_from_template
from .processing.layers import coerce_layers, describe_layers
from .processing.pipeline import process_layers
from .responses import error_response, send_png

APP_VERSION = "1.4.0"

logger = logging.getLogger("dither-studio")


def _parse_stack(raw) -> list:
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw or "[]")
        except ValueError:
            raise OutOfRangeParameter("layers", raw) from None
    if isinstance(raw, dict):
        raw = raw.get("layers", [])
    if not isinstance(raw, list):
        raise OutOfRangeParameter("layers", raw)
    return coerce_layers(raw)


def _parse_seed(raw):
    if raw in (None, ""):
        return SETTINGS.random_seed
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise OutOfRangeParameter("seed", raw) from None


_UNREADABLE = (Image.DecompressionBombError, UnidentifiedImageError, OSError)


def _load_source(upload) -> PixelBuffer:
    try:
        img = Image.open(upload.stream)
        # Only the header has been read so far; refuse oversized images before decoding.
        width, height = img.size
        if width * height > SETTINGS.max_pixels:
            raise InvalidDimensions(f"{width}x{height} exceeds the {SETTINGS.max_pixels} pixel limit")
        img.load()
    except _UNREADABLE as exc:
        raise InvalidDimensions(f"Could not decode image: {exc}") from None
    return PixelBuffer.from_image(img)


def create_app() -> Flask:
    configure_logging()
    app = Flask(__name__)

    @app.route("/process", methods=["POST"])
    def process():
        upload = request.files.get("image")
        if upload is None:
            return jsonify(error="Missing 'image' upload", kind="missing_image"), 400
        try:
            # The whole stack is validated before the image is decoded.
            layers = _parse_stack(request.form.get("layers", "[]"))
            seed = _parse_seed(request.args.get("seed", request.form.get("seed")))
            source = _load_source(upload)
            out = process_layers(source, layers, seed=seed, max_workers=SETTINGS.max_workers)
        except DitherStudioError as exc:
            logger.warning("Rejected /process request: %s", exc)
            return error_response(exc)
        return send_png(out)

    @app.route("/layers/describe", methods=["POST"])
    def describe():
        payload = request.get_json(silent=True)
        if payload is None:
            return jsonify(error="Expected a JSON layer stack", kind="invalid_json"), 400
        try:
            return jsonify(layers=describe_layers(_parse_stack(payload)))
        except DitherStudioError as exc:
            logger.warning("Rejected layer stack: %s", exc)
            return error_response(exc)

    @app.route("/algorithms")
    def algorithms():
        return jsonify(algorithms=algorithm_catalog())

    @app.route("/templates")
    def templates():
        return jsonify(templates=[template.to_dict() for template in TEMPLATES.values()])

    @app.route("/templates/<template_id>/layer")
    def template_layer(template_id: str):
        try:
            layer = layer_from_template(template_id, request.args.get("id"))
        except DitherStudioError as exc:
            return error_response(exc, 404)
        return jsonify(layer.to_dict())

    @app.route("/health")
    def health():
        return jsonify(
            ok=True,
            version=APP_VERSION,
            max_workers=SETTINGS.max_workers,
            max_pixels=SETTINGS.max_pixels,
        )

    return app


# Module-level application for WSGI servers such as ``dither_studio.app:app``.
app = create_app()
application = app
