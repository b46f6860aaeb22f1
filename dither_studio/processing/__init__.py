"""Pixel engine: buffers, tone stages, dither/glitch transforms and compositing."""

from .buffer import PixelBuffer, clamp_channel, luma
from .catalog import ALGORITHMS, TEMPLATES, algorithm_catalog, layer_from_template
from .compositor import blend_channel, composite, render_layer
from .dither import AlgorithmId, apply, kernel_weight
from .layers import BlendMode, Layer, describe_layers
from .pipeline import process_layers
from .tone import ToneSettings, adjust

__all__ = [
    "PixelBuffer",
    "clamp_channel",
    "luma",
    "ALGORITHMS",
    "TEMPLATES",
    "algorithm_catalog",
    "layer_from_template",
    "blend_channel",
    "composite",
    "render_layer",
    "AlgorithmId",
    "apply",
    "kernel_weight",
    "BlendMode",
    "Layer",
    "describe_layers",
    "process_layers",
    "ToneSettings",
    "adjust",
]
