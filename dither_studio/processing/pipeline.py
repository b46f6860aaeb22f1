from __future__ import annotations

import logging
import random
from typing import Any, Iterable, Mapping, Optional

from ..errors import InvalidDimensions
from .buffer import PixelBuffer
from .compositor import composite
from .layers import Layer, coerce_layers

logger = logging.getLogger(__name__)


def process_layers(
    source: PixelBuffer,
    layers: Iterable[Layer | Mapping[str, Any]],
    *,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
    max_workers: Optional[int] = None,
) -> PixelBuffer:
    """Composite a layer stack over ``source`` and return a new buffer.

    Layers may be :class:`Layer` objects or the stack's dict description.
    All parsing and validation happens before any pixel is touched, so an
    invalid stack raises without doing partial work. ``seed`` (or an explicit
    ``rng``) makes the randomised algorithms reproducible. ``source`` is never
    modified.
    """

    if not isinstance(source, PixelBuffer):
        raise TypeError(f"Expected PixelBuffer, got {type(source).__name__}")
    if source.width < 1 or source.height < 1 or len(source.data) != source.width * source.height * 4:
        raise InvalidDimensions(f"Unusable source buffer {source.width}x{source.height}")

    stack = coerce_layers(layers)
    if rng is None:
        rng = random.Random(seed)

    visible = sum(1 for layer in stack if layer.visible)
    logger.debug(
        "Processing %dx%d source with %d layer(s), %d visible",
        source.width,
        source.height,
        len(stack),
        visible,
    )
    return composite(source, stack, rng=rng, max_workers=max_workers)
