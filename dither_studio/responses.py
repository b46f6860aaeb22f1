from __future__ import annotations

import io

from flask import jsonify, send_file

from .errors import DitherStudioError
from .processing.buffer import PixelBuffer


def send_png(buffer: PixelBuffer):
    out = io.BytesIO()
    buffer.to_image().save(out, "PNG", optimize=True)
    out.seek(0)
    return send_file(out, mimetype="image/png")


def error_response(exc: DitherStudioError, status: int = 400):
    return jsonify(error=str(exc), kind=exc.kind), status
