from __future__ import annotations

import logging
import math
import random
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence

from . import dither, tone
from .buffer import PixelBuffer
from .dither import AlgorithmId
from .layers import BlendMode, Layer

logger = logging.getLogger(__name__)

_NOISE_DRIVEN = (
    AlgorithmId.DATAMOSH,
    AlgorithmId.SCANLINE_DISPLACEMENT,
    AlgorithmId.RGB_SHIFT,
)


def aux_parameter(layer: Layer) -> float:
    """Pick the tone knob a glitch transform reuses as its own parameter."""
    if layer.algorithm is AlgorithmId.BIT_CRUSH:
        return layer.tone.posterize
    if layer.algorithm in _NOISE_DRIVEN:
        return layer.tone.noise
    return 0


def render_layer(source: PixelBuffer, layer: Layer, rng: Optional[random.Random] = None) -> PixelBuffer:
    """Tone and dither a fresh copy of ``source`` with one layer's settings."""
    rng = rng or random.Random()
    working = source.copy()
    tone.adjust(working, layer.tone, rng)
    logger.debug("Rendering layer %s with %s", layer.id, layer.algorithm.value)
    return dither.apply(working, layer.algorithm, layer.threshold, aux_parameter(layer), rng)


def _soft_light(base: float, top: float) -> float:
    if top < 0.5:
        return 2 * base * top + base * base * (1 - 2 * top)
    return 2 * base * (1 - top) + math.sqrt(base) * (2 * top - 1)


def blend_channel(base: float, top: float, mode: BlendMode) -> float:
    """Blend two normalised channel values without opacity."""
    if mode is BlendMode.MULTIPLY:
        return base * top
    if mode is BlendMode.SCREEN:
        return 1 - (1 - base) * (1 - top)
    if mode is BlendMode.OVERLAY:
        return 2 * base * top if base < 0.5 else 1 - 2 * (1 - base) * (1 - top)
    if mode is BlendMode.SOFT_LIGHT:
        return _soft_light(base, top)
    return top


def blend_into(composite: PixelBuffer, overlay: PixelBuffer, mode: BlendMode, opacity: float) -> None:
    """Blend ``overlay`` onto ``composite`` in place; ``opacity`` is 0..1."""
    if opacity <= 0:
        return
    base_data = composite.data
    top_data = overlay.data
    for i in range(0, len(base_data), 4):
        for c in range(i, i + 3):
            base = base_data[c] / 255
            blended = blend_channel(base, top_data[c] / 255, mode)
            value = (base + (blended - base) * opacity) * 255
            base_data[c] = min(255, max(0, int(math.floor(value + 0.5))))


def _layer_rngs(layers: Sequence[Layer], rng: random.Random) -> List[random.Random]:
    # One generator per layer, drawn in z-order before any rendering starts.
    return [random.Random(rng.getrandbits(64)) for _ in layers]


def composite(
    source: PixelBuffer,
    layers: Sequence[Layer],
    rng: Optional[random.Random] = None,
    max_workers: Optional[int] = None,
) -> PixelBuffer:
    """Render every visible layer from ``source`` and blend them bottom-to-top."""

    active = [layer for layer in layers if layer.visible and layer.opacity > 0]
    result = source.copy()
    if not active:
        return result

    layer_rngs = _layer_rngs(active, rng or random.Random())

    if max_workers and max_workers > 1 and len(active) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            rendered = list(pool.map(lambda args: render_layer(source, *args), zip(active, layer_rngs)))
    else:
        rendered = [render_layer(source, layer, layer_rng) for layer, layer_rng in zip(active, layer_rngs)]

    for layer, layer_result in zip(active, rendered):
        logger.debug("Blending layer %s (%s, %.0f%%)", layer.id, layer.blend_mode.value, layer.opacity)
        blend_into(result, layer_result, layer.blend_mode, layer.opacity / 100)
    return result
