import logging
import os
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class StudioSettings:
    port: int
    log_level: str
    max_workers: int
    max_pixels: int
    random_seed: Optional[int]

    @classmethod
    def from_env(cls) -> "StudioSettings":
        seed = os.getenv("RANDOM_SEED", "").strip()
        return cls(
            port=int(os.getenv("PORT", "5600")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            max_workers=max(1, int(os.getenv("MAX_WORKERS", "1"))),
            max_pixels=int(os.getenv("MAX_PIXELS", "4000000")),
            random_seed=int(seed) if seed else None,
        )


SETTINGS = StudioSettings.from_env()


def configure_logging() -> logging.Logger:
    logging.basicConfig(level=SETTINGS.log_level)
    return logging.getLogger("dither-studio")
