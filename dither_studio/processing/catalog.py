from __future__ import annotations

import time
from dataclasses import asdict, dataclass
from typing import Dict, Optional, Tuple

from ..errors import UnknownTemplate
from .layers import Layer


@dataclass(frozen=True)
class AlgorithmInfo:
    id: str
    name: str
    description: str
    category: str


ALGORITHMS: Tuple[AlgorithmInfo, ...] = (
    AlgorithmInfo("floyd-steinberg", "Floyd-Steinberg", "Classic error diffusion for smooth gradients", "Error Diffusion"),
    AlgorithmInfo("atkinson", "Atkinson", "Apple MacPaint-style dithering", "Error Diffusion"),
    AlgorithmInfo("stucki", "Stucki", "High-quality error diffusion", "Error Diffusion"),
    AlgorithmInfo("burkes", "Burkes", "Two-row error diffusion, softer than Stucki", "Error Diffusion"),
    AlgorithmInfo("sierra", "Sierra", "Three-row error diffusion", "Error Diffusion"),
    AlgorithmInfo("bayer-2x2", "Bayer 2×2", "Simple ordered dithering pattern", "Ordered Dithering"),
    AlgorithmInfo("bayer-4x4", "Bayer 4×4", "Classic retro bitmap pattern", "Ordered Dithering"),
    AlgorithmInfo("bayer-8x8", "Bayer 8×8", "Fine-grained ordered pattern", "Ordered Dithering"),
    AlgorithmInfo("halftone-dots", "Halftone Dots", "Newspaper-style dot patterns", "Halftone"),
    AlgorithmInfo("random", "Random Noise", "Chaotic pixel-based dithering", "Experimental"),
    AlgorithmInfo("datamosh", "Datamosh", "Smeared blocks and stray pixels", "Glitch"),
    AlgorithmInfo("pixel-sort", "Pixel Sort", "Rows sorted by brightness", "Glitch"),
    AlgorithmInfo("scanline-displacement", "Scanline Shift", "Rows torn sideways", "Glitch"),
    AlgorithmInfo("rgb-shift", "RGB Shift", "Red and blue channels pulled apart", "Glitch"),
    AlgorithmInfo("bit-crush", "Bit Crush", "Colour depth reduced to the posterize level", "Glitch"),
)


@dataclass(frozen=True)
class Template:
    id: str
    name: str
    description: str
    category: str
    settings: Dict[str, object]
    controls: Tuple[str, ...]

    def to_dict(self) -> dict:
        payload = asdict(self)
        payload["availableControls"] = list(payload.pop("controls"))
        payload["defaultSettings"] = payload.pop("settings")
        return payload


TEMPLATES: Dict[str, Template] = {
    template.id: template
    for template in (
        Template(
            "classic-1bit",
            "Classic 1-Bit",
            "Pure black & white retro style",
            "Retro",
            {"algorithm": "floyd-steinberg", "brightness": 100, "contrast": 120, "threshold": 128,
             "noiseLevel": 0, "saturation": 0, "posterize": 2},
            ("brightness", "contrast", "threshold", "saturation"),
        ),
        Template(
            "gameboy",
            "Game Boy",
            "Nintendo Game Boy green tint",
            "Retro",
            {"algorithm": "bayer-4x4", "brightness": 110, "contrast": 130, "threshold": 140,
             "noiseLevel": 5, "saturation": 80, "posterize": 4},
            ("brightness", "contrast", "threshold", "noiseLevel", "saturation"),
        ),
        Template(
            "crt-monitor",
            "CRT Monitor",
            "Old computer monitor effect",
            "Retro",
            {"algorithm": "bayer-8x8", "brightness": 95, "contrast": 140, "threshold": 120,
             "noiseLevel": 15, "saturation": 110, "blur": 1},
            ("brightness", "contrast", "threshold", "noiseLevel", "saturation", "blur"),
        ),
        Template(
            "newspaper",
            "Newspaper",
            "Classic halftone print style",
            "Print",
            {"algorithm": "halftone-dots", "brightness": 105, "contrast": 150, "threshold": 128,
             "noiseLevel": 0, "saturation": 0, "posterize": 2},
            ("brightness", "contrast", "threshold", "posterize"),
        ),
        Template(
            "cyberpunk",
            "Cyberpunk",
            "Futuristic glitch aesthetic",
            "Modern",
            {"algorithm": "random", "brightness": 120, "contrast": 160, "threshold": 100,
             "noiseLevel": 25, "saturation": 140, "posterize": 8},
            ("brightness", "contrast", "threshold", "noiseLevel", "saturation", "posterize"),
        ),
        Template(
            "vaporwave",
            "Vaporwave",
            "Dreamy 80s aesthetic",
            "Modern",
            {"algorithm": "atkinson", "brightness": 115, "contrast": 125, "threshold": 110,
             "noiseLevel": 10, "saturation": 160, "posterize": 16, "blur": 0.5},
            ("brightness", "contrast", "threshold", "noiseLevel", "saturation", "posterize", "blur"),
        ),
    )
}


def algorithm_catalog() -> list:
    return [asdict(info) for info in ALGORITHMS]


def layer_from_template(template_id: str, layer_id: Optional[str] = None) -> Layer:
    """Build a fully opaque, visible, normal-blend layer from a template."""
    template = TEMPLATES.get(template_id)
    if template is None:
        raise UnknownTemplate(template_id)
    settings = dict(template.settings)
    algorithm = settings.pop("algorithm")
    return Layer.from_dict(
        {
            "id": layer_id or f"layer-{int(time.time() * 1000)}",
            "name": template.name,
            "algorithm": algorithm,
            "opacity": 100,
            "isVisible": True,
            "blendMode": "normal",
            "settings": settings,
        }
    )
