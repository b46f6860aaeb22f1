"""Run the dither studio service with ``python -m dither_studio``."""

from __future__ import annotations

from .app import APP_VERSION, create_app
from .config import SETTINGS, configure_logging

app = create_app()


def main() -> None:
    logger = configure_logging()
    logger.info(
        "Starting dither studio %s on port %d with %d render worker(s), %d pixel limit",
        APP_VERSION,
        SETTINGS.port,
        SETTINGS.max_workers,
        SETTINGS.max_pixels,
    )
    app.run(host="0.0.0.0", port=SETTINGS.port, debug=False)


if __name__ == "__main__":
    main()
